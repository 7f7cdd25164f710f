from typing import Any, Dict, List, Optional

import pytest

from pinscraper.accessor import HEIGHT_SCRIPT, SCROLL_SCRIPT, PageAccessor
from pinscraper.config import EMAIL_INPUT, Credential, SettleTimeouts
from pinscraper.errors import AccessorError, ElementNotFound, NavigationError
from pinscraper.events import EventSink


class FakeElement:
    def __init__(self, locator: str):
        self.locator = locator


class FakeAccessor(PageAccessor):
    """Scripted page: heights and markups are served in order, the last value repeats."""

    def __init__(
        self,
        heights: Optional[List[int]] = None,
        markups: Optional[List[str]] = None,
        email_misses: int = 0,
        missing: Optional[List[str]] = None,
        failing_urls: Optional[List[str]] = None,
        failing_markup_calls: Optional[List[int]] = None,
        failing_wait_calls: Optional[List[int]] = None,
        quit_error: Optional[Exception] = None,
    ):
        self.heights = list(heights or [0])
        self.markups = list(markups or [""])
        self.email_misses = email_misses
        self.missing = set(missing or [])
        self.failing_urls = set(failing_urls or [])
        self.failing_markup_calls = set(failing_markup_calls or [])
        self.failing_wait_calls = set(failing_wait_calls or [])
        self.quit_error = quit_error

        self.visited: List[str] = []
        self.typed: Dict[str, str] = {}
        self.clicked: List[str] = []
        self.waits: List[int] = []
        self.lookups: List[str] = []
        self.scrolls = 0
        self.markup_calls = 0
        self.quit_count = 0

    @staticmethod
    def _next(values: list):
        return values.pop(0) if len(values) > 1 else values[0]

    async def navigate(self, url: str) -> None:
        self.visited.append(url)
        if url in self.failing_urls:
            raise NavigationError(f"Navigation to {url} failed")

    async def get_markup(self) -> str:
        self.markup_calls += 1
        if self.markup_calls in self.failing_markup_calls:
            raise AccessorError("page crashed")
        return self._next(self.markups)

    async def eval_script(self, js: str) -> Any:
        if js == HEIGHT_SCRIPT:
            return self._next(self.heights)
        if js == SCROLL_SCRIPT:
            self.scrolls += 1
        return None

    async def wait(self, ms: int) -> None:
        self.waits.append(ms)
        if len(self.waits) in self.failing_wait_calls:
            raise AccessorError("Target page, context or browser has been closed")

    async def find_element(self, locator: str):
        self.lookups.append(locator)
        if locator == EMAIL_INPUT and self.email_misses > 0:
            self.email_misses -= 1
            raise ElementNotFound(locator)
        if locator in self.missing:
            raise ElementNotFound(locator)
        return FakeElement(locator)

    async def send_keys(self, handle, text: str) -> None:
        self.typed[handle.locator] = text

    async def click(self, handle) -> None:
        self.clicked.append(handle.locator)

    async def quit(self) -> None:
        self.quit_count += 1
        if self.quit_error is not None:
            raise self.quit_error


class RecordingEventSink(EventSink):
    def __init__(self):
        self.events: List[tuple] = []

    def emit(self, event: str, **fields: Any) -> None:
        self.events.append((event, fields))

    def names(self) -> List[str]:
        return [name for name, _ in self.events]


def img(*srcs: str) -> str:
    return "<html><body>" + "".join(f'<div><img alt="" src="{s}"></div>' for s in srcs) + "</body></html>"


@pytest.fixture
def credential():
    return Credential(identity="user@example.com", secret="hunter2")


@pytest.fixture
def timeouts():
    return SettleTimeouts()


@pytest.fixture
def events():
    return RecordingEventSink()
