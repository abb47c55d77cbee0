"""Browser automation for the retirement portal.

This module provides browser session management, authentication, page
scraping and the HTML extraction functions they share, using Playwright.
"""

from elevate_scraper.browser.auth import AuthManager, InvalidCredentialsError
from elevate_scraper.browser.context import BrowserManager
from elevate_scraper.browser.scraper import (
    BalanceNotFoundError,
    RetirementScraper,
    ScraperError,
)

__all__ = [
    "AuthManager",
    "BalanceNotFoundError",
    "BrowserManager",
    "InvalidCredentialsError",
    "RetirementScraper",
    "ScraperError",
]
