"""Data retrieval from the retirement portal.

This module provides the RetirementScraper class, which reads the account
balance from the overview page and runs the transaction history report.
Browser errors (including Playwright timeouts) propagate unchanged.
"""

from datetime import date

import structlog
from playwright.async_api import Page

from elevate_scraper.browser.extract import extract_balance, extract_transactions
from elevate_scraper.config import Settings, SiteConfig, settings as default_settings
from elevate_scraper.models import DateRange, TransactionRecord

logger = structlog.get_logger(__name__)


class ScraperError(Exception):
    """Raised when a page loaded but the expected data is not on it."""

    pass


class BalanceNotFoundError(ScraperError):
    """Raised when the overview page shows no balance text."""

    pass


class RetirementScraper:
    """Scraper for balance and transaction history.

    Attributes:
        site: Portal URLs and selectors.
        settings: Runtime settings (timeouts).
    """

    def __init__(self, site: SiteConfig, settings: Settings | None = None) -> None:
        self.site = site
        self.settings = settings or default_settings

    async def get_balance(self, page: Page) -> str:
        """Read the balance from a logged-in overview page.

        Returns:
            The balance exactly as displayed, e.g. "$12,345.67".

        Raises:
            BalanceNotFoundError: If the balance element has no text.
        """
        logger.info("waiting_for_balance")
        selector = self.site.balance.element
        await page.wait_for_selector(selector, timeout=self.settings.navigation_timeout_ms)

        balance = extract_balance(await page.content(), selector)
        if balance is None:
            raise BalanceNotFoundError(f"No balance found at {selector!r}")

        logger.info("balance_extracted")
        return balance

    async def get_recent_transactions(
        self, page: Page, months: int, today: date | None = None
    ) -> list[TransactionRecord]:
        """Run the transaction history report for the last ``months`` months.

        Args:
            page: A page in the authenticated browser context.
            months: Number of whole months before the current one to include.
            today: Reference date for the range (default: today).

        Returns:
            Transaction records in page order. Empty if the report has no rows.
        """
        selectors = self.site.transactions

        logger.info("opening_transactions_page")
        await page.goto(self.site.transactions_url)
        await page.wait_for_selector(
            selectors.filter_form, timeout=self.settings.navigation_timeout_ms
        )

        date_range = DateRange.months_back(months, today)
        await page.fill(selectors.from_date_input, date_range.from_value)
        await page.fill(selectors.to_date_input, date_range.to_value)

        logger.info(
            "loading_transactions",
            date_range=str(date_range),
        )
        async with page.expect_navigation():
            await page.click(selectors.report_button)

        transactions = extract_transactions(await page.content(), selectors)

        logger.info("transactions_scraped_successfully", count=len(transactions))
        return transactions
