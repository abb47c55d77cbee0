"""Authentication for the retirement portal.

This module opens the login page, submits credentials and decides whether the
portal accepted them.

Login flow: Login page → submit form → redirect to account overview (success)
or reload of the login page with an error message (invalid credentials).
"""

import structlog
from playwright.async_api import Page

from elevate_scraper.browser.extract import find_login_error
from elevate_scraper.config import Settings, SiteConfig, settings as default_settings
from elevate_scraper.models import Credentials

logger = structlog.get_logger(__name__)


class InvalidCredentialsError(Exception):
    """Raised when the portal rejects the submitted username/password.

    The message is the text the portal displayed.
    """

    pass


class AuthManager:
    """Drives the login form of the portal on a single page."""

    def __init__(self, site: SiteConfig, settings: Settings | None = None) -> None:
        self.site = site
        self.selectors = site.auth
        self.settings = settings or default_settings

    async def open_login_page(self, page: Page) -> None:
        """Navigate a fresh page to the login form."""
        logger.info("opening_login_page", url=self.site.login_url)
        await page.goto(self.site.login_url)
        logger.debug("navigated_to_login_page", url=page.url)

    async def login(self, page: Page, credentials: Credentials) -> None:
        """Submit credentials on a page showing the login form.

        A redirect away from the login URL is the success signal; the portal
        has no explicit logged-in marker.

        Raises:
            InvalidCredentialsError: If the portal reports invalid credentials.
        """
        logger.info("login_attempt_started", username=credentials.username)

        await self._type_into(page, self.selectors.username_input, credentials.username)
        await self._type_into(
            page,
            self.selectors.password_input,
            credentials.password.get_secret_value(),
        )

        async with page.expect_navigation():
            await page.click(self.selectors.submit_button)
        logger.debug("login_form_submitted", url=page.url)

        if page.url == self.site.login_url:
            message = find_login_error(
                await page.content(),
                self.selectors.error_message,
                self.site.invalid_credentials_marker,
            )
            if message:
                logger.warning("login_rejected", message=message)
                raise InvalidCredentialsError(message)

        logger.info("login_successful", url=page.url)

    async def _type_into(self, page: Page, selector: str, text: str) -> None:
        await page.fill(selector, "")
        await page.type(selector, text, delay=self.settings.type_delay_ms)
