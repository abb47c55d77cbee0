"""End-to-end scraping run.

SessionOrchestrator sequences the browser work into one workflow:

1. open the browser and the login page in the background while the user is
   prompted for credentials;
2. retry login until the portal accepts the credentials;
3. fetch the balance (login page) and the transactions (new tab) concurrently;
4. close the browser on every exit path.
"""

import asyncio
from collections.abc import Awaitable, Callable

import structlog
from playwright.async_api import Page

from elevate_scraper.browser.auth import AuthManager, InvalidCredentialsError
from elevate_scraper.browser.context import BrowserManager
from elevate_scraper.browser.scraper import RetirementScraper
from elevate_scraper.config import Settings, SiteConfig
from elevate_scraper.models import AccountSnapshot, Credentials
from elevate_scraper.prompt import ask_credentials
from elevate_scraper.report import Reporter

logger = structlog.get_logger(__name__)

CredentialSource = Callable[[], Awaitable[Credentials]]


class SessionOrchestrator:
    """Runs one login + fetch workflow against a single browser session.

    Attributes:
        browser: Session owner; shut down when run() returns or raises.
        auth: Login driver.
        scraper: Balance and transaction driver.
        reporter: Receives login retry and progress messages.
        ask: Coroutine function returning the next credentials to try.
    """

    def __init__(
        self,
        browser: BrowserManager,
        auth: AuthManager,
        scraper: RetirementScraper,
        reporter: Reporter,
        ask: CredentialSource = ask_credentials,
    ) -> None:
        self.browser = browser
        self.auth = auth
        self.scraper = scraper
        self.reporter = reporter
        self.ask = ask

    @classmethod
    def from_config(
        cls, settings: Settings, site: SiteConfig, reporter: Reporter
    ) -> "SessionOrchestrator":
        return cls(
            browser=BrowserManager(settings),
            auth=AuthManager(site, settings),
            scraper=RetirementScraper(site, settings),
            reporter=reporter,
        )

    async def run(self, months_back: int) -> AccountSnapshot:
        """Log in and fetch balance and transactions.

        Raises:
            PromptCanceled: If the user aborts the credential prompt.
            Exception: Any browser or scraping error; nothing is retried
                except rejected credentials.
        """
        logger.info("session_starting", months_back=months_back)
        setup = asyncio.create_task(self._open_login_page())

        try:
            page = await self._login_until_accepted(setup)
            self.reporter.logged_in()

            snapshot = await self._fetch_all(page, months_back)
            logger.info(
                "session_complete",
                transaction_count=len(snapshot.transactions),
            )
            return snapshot

        finally:
            if not setup.done():
                setup.cancel()
            # Collect the setup outcome so a failure there is not reported twice
            await asyncio.gather(setup, return_exceptions=True)
            await self.browser.shutdown()

    async def _open_login_page(self) -> Page:
        logger.info("opening_browser")
        page = await self.browser.new_page()
        await self.auth.open_login_page(page)
        return page

    async def _login_until_accepted(self, setup: "asyncio.Task[Page]") -> Page:
        attempt = 0
        while True:
            credentials = await self.ask()
            page = await setup
            attempt += 1

            try:
                await self.auth.login(page, credentials)
                return page
            except InvalidCredentialsError as e:
                logger.info("login_retry_requested", attempt=attempt)
                self.reporter.login_rejected(str(e))

    async def _fetch_all(self, page: Page, months_back: int) -> AccountSnapshot:
        balance_task = asyncio.create_task(self.scraper.get_balance(page))
        try:
            transactions_page = await self.browser.new_page()
            transactions_task = asyncio.create_task(
                self.scraper.get_recent_transactions(transactions_page, months_back)
            )
        except BaseException:
            balance_task.cancel()
            await asyncio.gather(balance_task, return_exceptions=True)
            raise

        tasks = (balance_task, transactions_task)
        try:
            balance, transactions = await asyncio.gather(*tasks)
        except BaseException:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

        return AccountSnapshot(balance=balance, transactions=transactions)
