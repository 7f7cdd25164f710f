from typing import Any

HEIGHT_SCRIPT = "document.body.scrollHeight"                         # current scrollable height
SCROLL_SCRIPT = "window.scrollTo(0, document.body.scrollHeight)"     # jump to the bottom of the feed


class PageAccessor:                                # Everything the scrape core needs from a browser tab
    async def navigate(self, url: str) -> None: ...

    async def get_markup(self) -> str: ...         # Fully rendered page source

    async def eval_script(self, js: str) -> Any: ...

    async def wait(self, ms: int) -> None: ...     # Settle delay; the only way the core ever sleeps

    async def find_element(self, locator: str) -> Any:
        """Return a handle for `locator` or raise ElementNotFound."""
        raise NotImplementedError

    async def send_keys(self, handle: Any, text: str) -> None: ...

    async def click(self, handle: Any) -> None: ...

    async def quit(self) -> None: ...              # Tear the session down; safe to call twice
