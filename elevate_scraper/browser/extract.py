"""DOM extraction from page snapshots.

Every function here takes the rendered HTML of a page (``await page.content()``)
and returns plain data. Nothing here touches the browser, and nothing raises
because an element is missing: absence is reported as ``None`` or an empty list.
"""

import structlog
from bs4 import BeautifulSoup, Tag

from elevate_scraper.config import TransactionSelectors
from elevate_scraper.models import TransactionRecord

logger = structlog.get_logger(__name__)


def _soup(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, "html.parser")


def element_text(element: Tag) -> str:
    """Visible text of an element with whitespace collapsed, like innerText.

    Inline markup is joined without separators; <br> counts as whitespace.
    """
    for line_break in element.find_all("br"):
        line_break.replace_with("\n")
    return " ".join(element.get_text().split())


def find_login_error(html: str, selector: str, marker: str) -> str | None:
    """Return the login error message if the page shows one.

    Args:
        html: Page HTML after a login attempt.
        selector: CSS selector for the status/message element.
        marker: Substring that identifies an invalid-credentials message.

    Returns:
        The message text, or None when the element is absent or unrelated.
    """
    element = _soup(html).select_one(selector)
    if element is None:
        return None

    text = element_text(element)
    if marker in text:
        return text
    return None


def extract_balance(html: str, selector: str) -> str | None:
    """Return the displayed balance string verbatim, or None if not shown."""
    element = _soup(html).select_one(selector)
    if element is None:
        return None

    text = element_text(element)
    return text or None


def zip_record(headers: list[str], values: list[str]) -> TransactionRecord:
    """Pair header names with cell values by position.

    Headers without a cell get an empty string; cells without a header are
    dropped.
    """
    if len(values) != len(headers):
        logger.warning(
            "transaction_column_count_mismatch",
            headers=len(headers),
            values=len(values),
        )

    record: TransactionRecord = {}
    for index, header in enumerate(headers):
        record[header] = values[index] if index < len(values) else ""
    return record


def extract_transactions(
    html: str, selectors: TransactionSelectors
) -> list[TransactionRecord]:
    """Build one record per transaction row group, in page order.

    Each row group nests further account/fund sub-tables, so only the first
    header row and the first data row inside it are read.

    Args:
        html: Page HTML of the transaction history results.
        selectors: Row group, row and cell selectors.

    Returns:
        List of header -> value mappings. Columns are whatever the page renders.
    """
    transactions: list[TransactionRecord] = []

    for index, group in enumerate(_soup(html).select(selectors.row_group)):
        header_row = group.select_one(selectors.header_row)
        if header_row is None:
            logger.warning("transaction_header_row_missing", row_index=index)
            continue

        headers = [element_text(cell) for cell in header_row.select(selectors.header_cell)]

        data_row = group.select_one(selectors.data_row)
        values = (
            [element_text(cell) for cell in data_row.select(selectors.data_cell)]
            if data_row is not None
            else []
        )

        transactions.append(zip_record(headers, values))

    logger.debug("transactions_extracted", count=len(transactions))
    return transactions
