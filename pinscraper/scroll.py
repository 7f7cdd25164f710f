from dataclasses import dataclass
from typing import Optional

from pinscraper.accessor import HEIGHT_SCRIPT, SCROLL_SCRIPT, PageAccessor
from pinscraper.config import STALL_THRESHOLD, SettleTimeouts
from pinscraper.errors import StallError
from pinscraper.events import EventSink, LoggingEventSink
from pinscraper.extract import canonical_images
from pinscraper.store import CollectionStore


@dataclass
class ScrollState:
    last_observed_height: int = 0
    stall_count: int = 0      # per scroll unit
    pages_completed: int = 0  # whole run


class ScrollLoop:
    def __init__(
        self,
        accessor: PageAccessor,
        store: CollectionStore,
        timeouts: Optional[SettleTimeouts] = None,
        events: Optional[EventSink] = None,
        stall_threshold: int = STALL_THRESHOLD,
    ):
        self.accessor = accessor
        self.store = store
        self.timeouts = timeouts or SettleTimeouts()
        self.events = events or LoggingEventSink()
        self.stall_threshold = stall_threshold
        self.state = ScrollState()

    async def _height(self) -> int:
        value = await self.accessor.eval_script(HEIGHT_SCRIPT)
        return int(value or 0)

    async def scroll_unit(self) -> int:
        """
        Scroll to the bottom until the page grows once, then harvest the markup.

        Returns the number of images that were new to the store. Raises
        StallError after `stall_threshold` scrolls in a row without growth.
        """
        start_height = await self._height()
        self.state.last_observed_height = start_height
        self.state.stall_count = 0

        while True:
            await self.accessor.eval_script(SCROLL_SCRIPT)
            await self.accessor.wait(self.timeouts.scroll_settle_ms)
            height = await self._height()
            self.state.last_observed_height = height

            if height != start_height:
                break

            self.state.stall_count += 1
            self.events.emit("scroll_stalled", height=height, stalls=self.state.stall_count)
            if self.state.stall_count >= self.stall_threshold:
                raise StallError(self.state.stall_count)

        markup = await self.accessor.get_markup()
        added = self.store.extend(canonical_images(markup))
        self.events.emit("images_collected", new=added, total=len(self.store), height=height)

        # Trailing lazy-loaded tiles.
        await self.accessor.wait(self.timeouts.trailing_settle_ms)
        return added
