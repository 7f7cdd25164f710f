from typing import Optional


class ScraperError(Exception):
    """Base error for a scrape run. Carries the target URL so a failure can be reported with context."""

    def __init__(self, message: str, url: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.url = url


class LoginError(ScraperError):
    """Run-fatal failure while signing in."""


class ElementNotFound(LoginError):
    """A required element never showed up on the page."""

    def __init__(self, locator: str, url: Optional[str] = None):
        super().__init__(f"Element not found: {locator}", url=url)
        self.locator = locator


class StallError(ScraperError):
    """The feed stopped growing: end of the feed or a dead connection, we cannot tell which."""

    def __init__(self, attempts: int, url: Optional[str] = None):
        super().__init__(
            "The page could not be loaded due to your internet connection "
            "or we have reached the end of the page.",
            url=url,
        )
        self.attempts = attempts


class AccessorError(ScraperError):
    """The browser failed underneath us."""


class NavigationError(AccessorError):
    pass
