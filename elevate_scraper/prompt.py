"""Interactive credential prompt.

The prompt blocks on stdin, so ask_credentials() runs it on a daemon thread
and hands the result back to the event loop. Browser work keeps going while
the user types, and Ctrl-C is never stuck behind a pending input() call.
"""

import asyncio
import getpass
import threading
from collections.abc import Callable
from typing import Any

import structlog
from pydantic import ValidationError

from elevate_scraper.models import USERNAME_MESSAGE, Credentials

logger = structlog.get_logger(__name__)


class PromptCanceled(Exception):
    """Raised when the user aborts the prompt (EOF or Ctrl-C)."""

    def __init__(self, message: str = "canceled") -> None:
        super().__init__(message)


def prompt_credentials(
    input_fn: Callable[[str], str] = input,
    password_fn: Callable[[str], str] = getpass.getpass,
    echo: Callable[[str], Any] = print,
) -> Credentials:
    """Ask for a username and password until the username is valid.

    Raises:
        PromptCanceled: If input ends or is interrupted.
    """
    try:
        while True:
            username = input_fn("username: ").strip()
            try:
                Credentials(username=username, password="")
            except ValidationError:
                echo(USERNAME_MESSAGE)
                continue

            password = password_fn("password: ")
            return Credentials(username=username, password=password)

    except (EOFError, KeyboardInterrupt) as e:
        raise PromptCanceled() from e


def _resolve(future: asyncio.Future, result: Any = None, error: BaseException | None = None) -> None:
    if future.done():
        return
    if error is not None:
        future.set_exception(error)
    else:
        future.set_result(result)


async def ask_credentials(
    prompt: Callable[[], Credentials] = prompt_credentials,
) -> Credentials:
    """Run the blocking prompt off the event loop and await its answer."""
    loop = asyncio.get_running_loop()
    future: asyncio.Future = loop.create_future()

    def worker() -> None:
        try:
            result = prompt()
        except Exception as e:
            result, error = None, e
        else:
            error = None
        # The run may have ended while the user was still typing
        if not loop.is_closed():
            loop.call_soon_threadsafe(_resolve, future, result, error)

    threading.Thread(target=worker, name="credential-prompt", daemon=True).start()
    logger.debug("credential_prompt_started")
    return await future
