"""Data model shared by the driver, the orchestrator and the report."""

import re
from dataclasses import dataclass, field
from datetime import date

from dateutil.relativedelta import relativedelta
from pydantic import BaseModel, SecretStr, field_validator

USERNAME_PATTERN = re.compile(r"^[a-zA-Z\s\-]+$")
USERNAME_MESSAGE = "Name must be only letters, spaces, or dashes"

# Column header -> cell text, in page column order
TransactionRecord = dict[str, str]


class Credentials(BaseModel):
    """Login credentials held only for the duration of a login attempt."""

    username: str
    password: SecretStr

    @field_validator("username")
    @classmethod
    def check_username(cls, value: str) -> str:
        if not USERNAME_PATTERN.match(value):
            raise ValueError(USERNAME_MESSAGE)
        return value


class DateRange(BaseModel):
    """Transaction history filter range.

    ``start`` is always the first day of a month; ``end`` is the day the
    range was computed on.
    """

    start: date
    end: date

    @classmethod
    def months_back(cls, months: int, today: date | None = None) -> "DateRange":
        """Range from the first day of the month ``months`` months ago to today.

        Examples:
            >>> DateRange.months_back(1, date(2024, 3, 15)).as_form_values()
            ('2/01/2024', '3/15/2024')
        """
        today = today or date.today()
        start = today.replace(day=1) - relativedelta(months=months)
        return cls(start=start, end=today)

    @property
    def from_value(self) -> str:
        return f"{self.start.month}/01/{self.start.year}"

    @property
    def to_value(self) -> str:
        return f"{self.end.month}/{self.end.day}/{self.end.year}"

    def as_form_values(self) -> tuple[str, str]:
        return self.from_value, self.to_value

    def __str__(self) -> str:
        return f"Transactions from {self.from_value} to {self.to_value}"


@dataclass
class AccountSnapshot:
    """Balance and transactions copied out of a finished browser session."""

    balance: str
    transactions: list[TransactionRecord] = field(default_factory=list)
