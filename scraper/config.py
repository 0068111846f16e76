from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import Optional

DEFAULT_START_URL = "https://news.sanook.com/lotto/archive/"
DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/123.0 Safari/537.36"
)


def bool_from_env(value: Optional[str], default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def int_from_env(value: Optional[str], default: Optional[int]) -> Optional[int]:
    if value is None or value == "":
        return default
    return int(value)


def float_from_env(value: Optional[str], default: float) -> float:
    if value is None or value == "":
        return default
    return float(value)


@dataclass(frozen=True)
class ScraperSettings:
    start_url: str = DEFAULT_START_URL
    timeout_seconds: int = 10
    page_delay_seconds: float = 0.5
    max_pages: Optional[int] = None
    user_agent: str = DEFAULT_USER_AGENT

    def copy(self, **updates) -> "ScraperSettings":
        return replace(self, **updates)


def load_from_environment() -> ScraperSettings:
    max_pages = int_from_env(os.getenv("SCRAPER__MAX_PAGES"), None)
    if max_pages is not None and max_pages < 1:
        raise RuntimeError("SCRAPER__MAX_PAGES must be a positive integer when set.")

    return ScraperSettings(
        start_url=os.getenv("SCRAPER__START_URL", DEFAULT_START_URL),
        timeout_seconds=int_from_env(os.getenv("SCRAPER__TIMEOUT_SECONDS"), 10),
        page_delay_seconds=float_from_env(os.getenv("SCRAPER__PAGE_DELAY_SECONDS"), 0.5),
        max_pages=max_pages,
        user_agent=os.getenv("SCRAPER__USER_AGENT", DEFAULT_USER_AGENT),
    )
