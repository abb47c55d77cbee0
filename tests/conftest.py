"""Shared fixtures: site config, a fake Playwright page and HTML builders."""

from contextlib import asynccontextmanager
from typing import Any, Callable

import pytest
import structlog
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from elevate_scraper.config import DEFAULT_SELECTORS_PATH, SiteConfig, load_site_config


@pytest.fixture(autouse=True)
def reset_logging():
    """Undo structlog configuration done by the CLI so later tests log to live streams."""
    yield
    structlog.reset_defaults()


@pytest.fixture
def site() -> SiteConfig:
    return load_site_config(str(DEFAULT_SELECTORS_PATH))


class FakePage:
    """Records driver actions and serves canned HTML.

    ``on_click`` maps a selector to the (url, html) the page shows after that
    element is clicked. Selectors in ``missing`` time out when waited for.
    """

    def __init__(
        self,
        url: str = "about:blank",
        html: str = "<html><body></body></html>",
        pages: dict[str, str] | None = None,
        on_click: dict[str, tuple[str, str]] | None = None,
        missing: set[str] | None = None,
    ) -> None:
        self.url = url
        self.html = html
        self.pages = pages or {}
        self.on_click = on_click or {}
        self.missing = missing or set()
        self.actions: list[tuple[Any, ...]] = []

    async def goto(self, url: str, **kwargs: Any) -> None:
        self.actions.append(("goto", url))
        self.url = url
        self.html = self.pages.get(url, self.html)

    async def fill(self, selector: str, value: str) -> None:
        self.actions.append(("fill", selector, value))

    async def type(self, selector: str, text: str, delay: float = 0) -> None:
        self.actions.append(("type", selector, text))

    async def click(self, selector: str) -> None:
        self.actions.append(("click", selector))
        if selector in self.on_click:
            self.url, self.html = self.on_click[selector]

    @asynccontextmanager
    async def expect_navigation(self, **kwargs: Any):
        self.actions.append(("expect_navigation",))
        yield

    async def wait_for_selector(self, selector: str, timeout: float | None = None) -> None:
        self.actions.append(("wait_for_selector", selector))
        if selector in self.missing:
            raise PlaywrightTimeoutError(f"Timeout {timeout}ms exceeded waiting for {selector}")

    async def content(self) -> str:
        return self.html


@pytest.fixture
def make_page() -> Callable[..., FakePage]:
    return FakePage


def cells(tag: str, values: list[str]) -> str:
    return "".join(f"<{tag}>{value}</{tag}>" for value in values)


def row_group(headers: list[str], values: list[str] | None, extra_rows: bool = True) -> str:
    """One transaction block: a header+data table followed by a nested fund table."""
    body = f"<tr>{cells('td', values)}</tr>" if values is not None else ""
    nested = ""
    if extra_rows:
        nested = (
            '<div class="fund-detail"><table>'
            f"<thead><tr>{cells('th', ['Fund', 'Units'])}</tr></thead>"
            f"<tbody><tr>{cells('td', ['Bond Index', '1.234'])}</tr></tbody>"
            "</table></div>"
        )
    return (
        '<div class="collapsable-content"><table>'
        f"<thead><tr>{cells('th', headers)}</tr></thead>"
        f"<tbody>{body}</tbody>"
        f"</table>{nested}</div>"
    )


def transaction_page(*groups: str) -> str:
    return (
        "<html><body>"
        '<div class="transaction-history">'
        f"{''.join(groups)}"
        "</div></body></html>"
    )
