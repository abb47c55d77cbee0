"""Application configuration management using Pydantic Settings.

This module provides the runtime settings (browser, timeouts, logging, output)
loaded from environment variables (.env file), and the site contract: the
portal URLs, CSS selectors and table field names loaded from selectors.yaml.
"""

from pathlib import Path

import yaml
from pydantic import BaseModel, Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_SELECTORS_PATH = Path(__file__).parent / "selectors.yaml"


class SiteConfigError(Exception):
    """Raised when the site configuration file is missing or invalid."""

    pass


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Credentials are never read from the environment; they are prompted for
    interactively on every run.
    """

    # Browser Configuration
    browser_headless: bool = Field(
        default=True, description="Run browser in headless mode"
    )
    viewport_width: int = Field(default=1200, description="Page viewport width")
    viewport_height: int = Field(default=1200, description="Page viewport height")
    navigation_timeout_ms: int = Field(
        default=30000,
        description="Timeout for navigations and element waits in milliseconds",
    )
    type_delay_ms: int = Field(
        default=50, description="Delay between keystrokes when typing credentials"
    )

    # Report Configuration
    months_back: int = Field(
        default=1, ge=0, description="Number of months of transactions to query"
    )
    color_output: bool = Field(default=True, description="Colorize terminal output")

    # Logging Configuration
    log_level: str = Field(
        default="WARNING",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    log_format: str = Field(
        default="console", description="Log output format (json or console)"
    )

    # Selector Configuration
    selectors_path: str = Field(
        default=str(DEFAULT_SELECTORS_PATH),
        description="Path to the site URLs/selectors YAML configuration file",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


class AuthSelectors(BaseModel):
    username_input: str
    password_input: str
    submit_button: str
    error_message: str


class BalanceSelectors(BaseModel):
    element: str


class TransactionSelectors(BaseModel):
    """Selectors for the transaction history filter form and results table."""

    filter_form: str
    from_date_input: str
    to_date_input: str
    report_button: str
    row_group: str
    header_row: str = "thead > tr"
    header_cell: str = "th"
    data_row: str = "tbody > tr"
    data_cell: str = "td"


class TransactionFields(BaseModel):
    """Column headers the report formatting relies on."""

    date: str = "Date"
    dollars: str = "Dollars"
    status: str = "Status"
    details: str = "Details"
    settled_status: str = "Settled"


class SiteConfig(BaseModel):
    """Everything the navigation driver needs to know about the portal."""

    login_url: str
    transactions_url: str
    invalid_credentials_marker: str = "Invalid userid/password"
    auth: AuthSelectors
    balance: BalanceSelectors
    transactions: TransactionSelectors
    fields: TransactionFields = Field(default_factory=TransactionFields)


def load_site_config(config_path: str | None = None) -> SiteConfig:
    """Load the portal URLs and selectors from a YAML file.

    Args:
        config_path: Path to selectors YAML file. If None, uses settings default.

    Returns:
        Parsed SiteConfig.

    Raises:
        SiteConfigError: If the file does not exist or does not match the schema.
    """
    path = Path(config_path) if config_path else Path(settings.selectors_path)
    if not path.exists():
        raise SiteConfigError(f"Selectors config not found: {path}")

    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise SiteConfigError(f"Unreadable selectors config {path}: {e}") from e

    try:
        return SiteConfig.model_validate(data or {})
    except ValidationError as e:
        raise SiteConfigError(f"Invalid selectors config {path}: {e}") from e


# Singleton instance - import this to access settings throughout the application
settings = Settings()
