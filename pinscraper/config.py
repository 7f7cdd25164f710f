import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv


LOGIN_URL = "https://pinterest.com/login"
SEARCH_URL = "https://pinterest.com/search/pins/?q={query}"

EMAIL_INPUT = "#email"
PASSWORD_INPUT = "#password"
SUBMIT_BUTTON = "button[type='submit']"

STALL_THRESHOLD = 10
# A negative page count means "scroll until the feed runs dry"; we still cap it.
UNBOUNDED_SCROLL_UNITS = 999


@dataclass
class SettleTimeouts:
    """Fixed waits (milliseconds) that let client-side loading catch up after an action."""

    implicit_wait_ms: int = 3000
    element_poll_attempts: int = 3
    element_poll_delay_ms: int = 1000
    credential_settle_ms: int = 1000
    submit_settle_ms: int = 5000
    scroll_settle_ms: int = 5000
    trailing_settle_ms: int = 3000


@dataclass(frozen=True)
class Credential:
    identity: str
    secret: str = field(repr=False)


@dataclass
class Settings:
    email: str = ""
    password: str = ""
    webhook_url: Optional[str] = None
    webhook_token: Optional[str] = None
    log_dir: Path = Path("logs")
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, dotenv_path: Optional[str] = None) -> "Settings":
        load_dotenv(dotenv_path)
        return cls(
            email=os.getenv("EMAIL", ""),
            password=os.getenv("PASSWORD", ""),
            webhook_url=os.getenv("SCRAPER_WEBHOOK_URL") or None,
            webhook_token=os.getenv("SCRAPER_WEBHOOK_TOKEN") or None,
            log_dir=Path(os.getenv("LOG_DIR", "logs")),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )

    @property
    def credential(self) -> Credential:
        return Credential(identity=self.email, secret=self.password)
