from enum import Enum
from typing import Optional

from pinscraper.accessor import PageAccessor
from pinscraper.config import (
    EMAIL_INPUT,
    LOGIN_URL,
    PASSWORD_INPUT,
    SUBMIT_BUTTON,
    Credential,
    SettleTimeouts,
)
from pinscraper.errors import ElementNotFound
from pinscraper.events import EventSink, LoggingEventSink


class LoginState(Enum):
    NOT_STARTED = "not_started"
    AWAITING_EMAIL_FIELD = "awaiting_email_field"
    CREDENTIALS_ENTERED = "credentials_entered"
    SUBMITTED = "submitted"
    LOGGED_IN = "logged_in"
    FAILED = "failed"


class LoginFlow:
    """
    Signs in through the regular login form.

    There is no "navigation finished" signal after submit: we sleep
    `submit_settle_ms` and assume the redirect happened. Slow networks can
    break that assumption. A failure in any state ends the run; there is no
    second login attempt.
    """

    def __init__(
        self,
        accessor: PageAccessor,
        timeouts: Optional[SettleTimeouts] = None,
        events: Optional[EventSink] = None,
        login_url: str = LOGIN_URL,
    ):
        self.accessor = accessor
        self.timeouts = timeouts or SettleTimeouts()
        self.events = events or LoggingEventSink()
        self.login_url = login_url
        self.state = LoginState.NOT_STARTED

    def _enter(self, state: LoginState) -> None:
        self.state = state
        self.events.emit("login_state", state=state.value)

    async def run(self, credential: Credential) -> None:
        try:
            self.events.emit("login_started", url=self.login_url)
            await self.accessor.navigate(self.login_url)

            self._enter(LoginState.AWAITING_EMAIL_FIELD)
            email_field = await self._await_element(EMAIL_INPUT)
            password_field = await self.accessor.find_element(PASSWORD_INPUT)

            await self.accessor.send_keys(email_field, credential.identity)
            await self.accessor.send_keys(password_field, credential.secret)
            self._enter(LoginState.CREDENTIALS_ENTERED)
            # Client-side validation runs on input; give it a beat before submitting.
            await self.accessor.wait(self.timeouts.credential_settle_ms)

            submit = await self.accessor.find_element(SUBMIT_BUTTON)
            await self.accessor.click(submit)
            self._enter(LoginState.SUBMITTED)
            await self.accessor.wait(self.timeouts.submit_settle_ms)

            self._enter(LoginState.LOGGED_IN)
        except Exception as exc:
            self.state = LoginState.FAILED
            self.events.emit("login_failed", error=type(exc).__name__, message=str(exc))
            raise

    async def _await_element(self, locator: str):
        attempts = max(1, self.timeouts.element_poll_attempts)
        for attempt in range(1, attempts + 1):
            try:
                return await self.accessor.find_element(locator)
            except ElementNotFound:
                self.events.emit("element_poll", locator=locator, attempt=attempt)
                if attempt == attempts:
                    raise
                await self.accessor.wait(self.timeouts.element_poll_delay_ms)
