import logging
from typing import Any, Optional

from playwright.async_api import async_playwright
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError
# Asynchronous Playwright API: the whole scrape runs as one awaited chain on a single page.

from pinscraper.accessor import PageAccessor
from pinscraper.config import SettleTimeouts
from pinscraper.errors import AccessorError, ElementNotFound, NavigationError

logger = logging.getLogger("pinscraper.browser")

WINDOW = {"width": 1920, "height": 1080}

UA = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/142.0.0.0 Safari/537.36"
)
# Headless Chromium advertises "HeadlessChrome"; Pinterest answers that with a login wall.


def chrome_args() -> list[str]:
    """Command-line switches for the Chromium process; headless itself is Playwright's flag."""
    return [
        "--no-sandbox",
        "--disable-setuid-sandbox",
        "--disable-dev-shm-usage",
        # Containers: no sandbox permissions and a tiny /dev/shm.
        "--disable-gpu",
        "--log-level=3",
        f"--window-size={WINDOW['width']},{WINDOW['height']}",
        f"--user-agent={UA}",
        "--disable-blink-features=AutomationControlled",
    ]


async def open_page(headless: bool = True):
    """
    Starts Playwright and opens one Chromium tab sized like a desktop window.

    Returns (pw, browser, context, page). If anything fails half way,
    whatever was already started is shut down before the error propagates.
    """
    pw = await async_playwright().start()
    browser = context = None
    try:
        browser = await pw.chromium.launch(
            headless=headless,
            args=chrome_args(),
            # "Chrome is being controlled by automated test software"
            ignore_default_args=["--enable-automation"],
        )
        context = await browser.new_context(user_agent=UA, viewport=WINDOW)
        page = await context.new_page()
    except PlaywrightError as exc:
        try:
            await close_page(pw, browser, context)
        except AccessorError:
            logger.error("Cleanup after a failed browser start also failed")
        raise AccessorError(f"Could not start the browser: {exc}") from exc
    return pw, browser, context, page


async def close_page(pw, browser, context):
    """
    Closes context, browser and the Playwright driver. Every step is tried even
    when an earlier one fails, so the Chromium process never outlives the run.
    The first failure is raised once all three steps have run.
    """
    failure = None
    for step in (
        context.close if context else None,
        browser.close if browser else None,
        pw.stop,
    ):
        if step is None:
            continue
        try:
            await step()
        except Exception as exc:  # noqa: BLE001
            logger.error("Teardown step failed: %s", exc)
            failure = failure or exc
    if failure is not None:
        raise AccessorError(f"Browser teardown failed: {failure}") from failure


class PlaywrightAccessor(PageAccessor):
    """PageAccessor over a live Playwright page."""

    def __init__(self, pw, browser, context, page, timeouts: Optional[SettleTimeouts] = None):
        self.pw = pw
        self.browser = browser
        self.context = context
        self.page = page
        self.timeouts = timeouts or SettleTimeouts()
        self._closed = False

    async def navigate(self, url: str) -> None:
        try:
            await self.page.goto(url, wait_until="domcontentloaded")
        except PlaywrightError as exc:
            raise NavigationError(f"Navigation to {url} failed: {exc}", url=url) from exc

    async def get_markup(self) -> str:
        try:
            return await self.page.content()
        except PlaywrightError as exc:
            raise AccessorError(f"Could not read page markup: {exc}") from exc

    async def eval_script(self, js: str) -> Any:
        try:
            return await self.page.evaluate(js)
        except PlaywrightError as exc:
            raise AccessorError(f"Script failed: {exc}") from exc

    async def wait(self, ms: int) -> None:
        try:
            await self.page.wait_for_timeout(ms)
        except PlaywrightError as exc:
            raise AccessorError(f"Wait interrupted: {exc}") from exc

    async def find_element(self, locator: str):
        handle = self.page.locator(locator).first
        try:
            # Same role as an implicit wait: give the element a moment to attach.
            await handle.wait_for(state="attached", timeout=self.timeouts.implicit_wait_ms)
        except PlaywrightTimeoutError as exc:
            raise ElementNotFound(locator) from exc
        except PlaywrightError as exc:
            raise AccessorError(f"Lookup of {locator} failed: {exc}") from exc
        return handle

    async def send_keys(self, handle, text: str) -> None:
        try:
            await handle.fill(text)
        except PlaywrightError as exc:
            raise AccessorError(f"Typing into element failed: {exc}") from exc

    async def click(self, handle) -> None:
        try:
            await handle.click()
        except PlaywrightError as exc:
            raise AccessorError(f"Click failed: {exc}") from exc

    async def quit(self) -> None:
        if self._closed:
            return
        self._closed = True
        await close_page(self.pw, self.browser, self.context)


async def open_accessor(headless: bool = True, timeouts: Optional[SettleTimeouts] = None) -> PlaywrightAccessor:
    """Session factory used by the run controller."""
    pw, browser, context, page = await open_page(headless=headless)
    return PlaywrightAccessor(pw, browser, context, page, timeouts=timeouts)
