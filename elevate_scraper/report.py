"""Human-readable terminal output for balance and transactions.

Formatting works on the strings exactly as the portal renders them: amounts
in parentheses are debits, and only the literal status "Settled" counts as
settled. No numeric parsing happens here.
"""

import sys
from typing import TextIO

from elevate_scraper.config import TransactionFields
from elevate_scraper.models import TransactionRecord

ANSI_CODES = {
    "red": "\033[31m",
    "green": "\033[32m",
    "yellow": "\033[33m",
    "cyan": "\033[36m",
    "grey": "\033[90m",
}
ANSI_RESET = "\033[39m"


def is_positive(dollars: str) -> bool:
    """A leading "(" marks a debit, e.g. "($12,000.00)"."""
    return not dollars.startswith("(")


def normalize_details(details: str) -> str:
    """Shorten transaction details for display.

    Drops the first " of", then turns the first " to" into " of". The order
    matters: an " of" produced by the second step is kept.

    Examples:
        >>> normalize_details("Transfer of Assets to Account")
        'Transfer Assets of Account'
    """
    return details.replace(" of", "", 1).replace(" to", " of", 1)


def banner(text: str, padding: int = 1, char: str = "*") -> str:
    """Wrap text in a box of ``char`` with ``padding`` blank rows above and below."""
    stretch = padding * 5
    inner = len(text) + stretch * 2
    border = char * (inner + 2)
    gap = char + " " * inner + char

    lines = [border]
    lines.extend([gap] * padding)
    lines.append(char + " " * stretch + text + " " * stretch + char)
    lines.extend([gap] * padding)
    lines.append(border)
    return "\n".join(lines)


class Reporter:
    """Writes the run's progress and results to a text stream.

    Attributes:
        out: Destination for results and prompts (default: stdout).
        err: Destination for fatal errors (default: stderr).
        color: Whether to emit ANSI colour codes.
        fields: Column headers used for transaction lines.
    """

    def __init__(
        self,
        out: TextIO | None = None,
        err: TextIO | None = None,
        color: bool = True,
        fields: TransactionFields | None = None,
    ) -> None:
        self.out = out or sys.stdout
        self.err = err or sys.stderr
        self.color = color
        self.fields = fields or TransactionFields()

    def paint(self, color: str, text: str) -> str:
        if not self.color:
            return text
        return f"{ANSI_CODES[color]}{text}{ANSI_RESET}"

    def write(self, line: str = "") -> None:
        print(line, file=self.out, flush=True)

    def title(self, text: str) -> None:
        self.write(self.paint("cyan", banner(text, 1)))

    def login_rejected(self, message: str) -> None:
        self.write(self.paint("red", f"{message}, please try again"))

    def logged_in(self) -> None:
        self.write(self.paint("cyan", "Logged in!"))

    def balance(self, balance: str) -> None:
        self.write(f"Balance is: {self.paint('green', balance)}")

    def format_transaction(self, transaction: TransactionRecord, width: int) -> str:
        """Format one record, right-aligning the amount to ``width`` + 1."""
        fields = self.fields
        dollars = transaction.get(fields.dollars, "")
        status = transaction.get(fields.status, "")
        details = transaction.get(fields.details, "")

        amount_color = "green" if is_positive(dollars) else "red"
        status_color = "grey" if status == fields.settled_status else "yellow"

        return (
            self.paint("grey", f"  {transaction.get(fields.date, '')}")
            + self.paint(amount_color, dollars.rjust(width + 1))
            + self.paint(status_color, f" ({status})")
            + self.paint("grey", f" {normalize_details(details)}")
        )

    def format_transactions(self, transactions: list[TransactionRecord]) -> list[str]:
        width = max(
            (len(t.get(self.fields.dollars, "")) for t in transactions),
            default=0,
        )
        return [self.format_transaction(t, width) for t in transactions]

    def transactions(self, transactions: list[TransactionRecord]) -> None:
        self.write("Recent Transactions:")
        for line in self.format_transactions(transactions):
            self.write(line)

    def error(self, error: BaseException) -> None:
        print(self.paint("red", f"Error: {error}"), file=self.err, flush=True)
