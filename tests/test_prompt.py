"""Tests for the interactive credential prompt."""

import pytest

from elevate_scraper.models import USERNAME_MESSAGE, Credentials
from elevate_scraper.prompt import PromptCanceled, ask_credentials, prompt_credentials


def scripted(*answers):
    """Build an input function that replays answers, raising exceptions given as values."""
    replies = iter(answers)

    def answer(prompt: str) -> str:
        reply = next(replies)
        if isinstance(reply, BaseException):
            raise reply
        return reply

    return answer


def test_prompt_credentials_success():
    """Test a valid username and password are returned."""
    credentials = prompt_credentials(
        input_fn=scripted("Jane Doe"),
        password_fn=scripted("hunter2"),
        echo=lambda message: None,
    )

    assert credentials.username == "Jane Doe"
    assert credentials.password.get_secret_value() == "hunter2"


def test_prompt_credentials_reasks_invalid_username():
    """Test an invalid username prints the rule and asks again."""
    messages = []

    credentials = prompt_credentials(
        input_fn=scripted("jane123", "  Jane  "),
        password_fn=scripted("hunter2"),
        echo=messages.append,
    )

    assert messages == [USERNAME_MESSAGE]
    assert credentials.username == "Jane"


def test_prompt_credentials_eof_cancels():
    """Test end of input is reported as a cancellation."""
    with pytest.raises(PromptCanceled, match="canceled"):
        prompt_credentials(input_fn=scripted(EOFError()), password_fn=scripted())


def test_prompt_credentials_interrupt_cancels():
    """Test Ctrl-C at the password prompt is reported as a cancellation."""
    with pytest.raises(PromptCanceled):
        prompt_credentials(
            input_fn=scripted("Jane"),
            password_fn=scripted(KeyboardInterrupt()),
        )


@pytest.mark.asyncio
async def test_ask_credentials_returns_prompt_result():
    """Test the threaded prompt result is delivered to the event loop."""
    expected = Credentials(username="Jane", password="hunter2")

    assert await ask_credentials(lambda: expected) is expected


@pytest.mark.asyncio
async def test_ask_credentials_propagates_cancel():
    """Test a prompt cancellation is raised in the awaiting coroutine."""

    def cancel() -> Credentials:
        raise PromptCanceled()

    with pytest.raises(PromptCanceled):
        await ask_credentials(cancel)
