import logging
import traceback
from dataclasses import dataclass, field
from typing import Awaitable, Callable, List, Optional

from pinscraper.accessor import PageAccessor
from pinscraper.browser import open_accessor
from pinscraper.config import (
    LOGIN_URL,
    STALL_THRESHOLD,
    UNBOUNDED_SCROLL_UNITS,
    Credential,
    SettleTimeouts,
)
from pinscraper.errors import AccessorError, ScraperError, StallError
from pinscraper.events import EventSink, LoggingEventSink
from pinscraper.login import LoginFlow
from pinscraper.scroll import ScrollLoop
from pinscraper.store import CollectionStore

logger = logging.getLogger("pinscraper.dispatcher")

SessionFactory = Callable[..., Awaitable[PageAccessor]]


@dataclass
class ErrorRecord:
    message: str
    detail: str
    url: str


@dataclass
class RunResult:
    url: str
    images: List[str] = field(default_factory=list)
    error: Optional[ErrorRecord] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def normalize_scroll_units(scroll_units: Optional[int]) -> int:
    if scroll_units is None or scroll_units < 0:
        return UNBOUNDED_SCROLL_UNITS
    return scroll_units


async def crawl_feed(
    accessor: PageAccessor,
    target_url: str,
    credential: Credential,
    scroll_units: Optional[int] = 1,
    *,
    timeouts: Optional[SettleTimeouts] = None,
    events: Optional[EventSink] = None,
    stall_threshold: int = STALL_THRESHOLD,
    login_url: str = LOGIN_URL,
) -> List[str]:
    """
    Drives one already-open session through a whole run:
        1. Log in (any failure here ends the run).
        2. Open the target URL; the post-login landing page is ignored.
        3. Run the scroll loop `scroll_units` times. A stalled or broken unit
           is logged and the next one still runs.
        4. Quit the session (always, even on error).
        5. Return what was collected, possibly nothing.
    """
    timeouts = timeouts or SettleTimeouts()
    events = events or LoggingEventSink()
    units = normalize_scroll_units(scroll_units)
    store = CollectionStore()

    try:
        try:
            await LoginFlow(accessor, timeouts, events, login_url=login_url).run(credential)
            events.emit("collection_started", url=target_url, scroll_units=units)
            await accessor.navigate(target_url)
        except ScraperError as exc:
            exc.url = target_url
            raise

        loop = ScrollLoop(accessor, store, timeouts, events, stall_threshold=stall_threshold)
        for _ in range(units):
            try:
                await loop.scroll_unit()
            except (StallError, AccessorError) as exc:
                events.emit("scroll_unit_failed", error=type(exc).__name__, message=exc.message)
            loop.state.pages_completed += 1
            events.emit("page_completed", pages=loop.state.pages_completed, collected=len(store))

        events.emit("collection_finished", total=len(store))
        return store.snapshot()

    finally:
        # A teardown failure must not replace the result or the error already in flight.
        try:
            await accessor.quit()
        except Exception as exc:  # noqa: BLE001
            events.emit("session_close_failed", error=type(exc).__name__, message=str(exc))
        else:
            events.emit("session_closed")


async def run(
    target_url: str,
    credential: Credential,
    scroll_units: Optional[int] = 1,
    *,
    headless: bool = True,
    session_factory: SessionFactory = open_accessor,
    timeouts: Optional[SettleTimeouts] = None,
    events: Optional[EventSink] = None,
    stall_threshold: int = STALL_THRESHOLD,
) -> List[str]:
    timeouts = timeouts or SettleTimeouts()
    events = events or LoggingEventSink()
    events.emit("run_started", url=target_url, headless=headless)

    accessor = await session_factory(headless=headless, timeouts=timeouts)
    return await crawl_feed(
        accessor,
        target_url,
        credential,
        scroll_units,
        timeouts=timeouts,
        events=events,
        stall_threshold=stall_threshold,
    )


async def harvest(target_url: str, credential: Credential, scroll_units: Optional[int] = 1, **kwargs) -> RunResult:
    """Like `run`, but failures come back as a RunResult carrying an ErrorRecord."""
    try:
        images = await run(target_url, credential, scroll_units, **kwargs)
    except Exception as exc:  # noqa: BLE001
        logger.exception("Error while trying to scrape %s", target_url)
        message = exc.message if isinstance(exc, ScraperError) else str(exc)
        return RunResult(
            url=target_url,
            error=ErrorRecord(message=message, detail=traceback.format_exc(), url=target_url),
        )
    return RunResult(url=target_url, images=images)
