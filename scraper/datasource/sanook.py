from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable, Iterator, List, Optional, Tuple
from urllib.parse import urljoin

import requests
from bs4 import BeautifulSoup

from ..config import DEFAULT_START_URL, DEFAULT_USER_AGENT
from ..types import DrawRecord, LottoType
from .base import DrawSource, ProgressCallback, SourceParseError, SourceUnavailableError

logger = logging.getLogger("lottoanalysis.scraper")

ARTICLE_SELECTOR = "article.archive--lotto"
DATE_SELECTOR = "time.archive--lotto__date"
RESULT_ITEM_SELECTOR = "ul.archive--lotto__result-list li"
LABEL_SELECTOR = "em.archive--lotto__result-txt"
NUMBER_SELECTOR = "strong.archive--lotto__result-number"
NEXT_PAGE_SELECTOR = "a.pagination__item--next"

# Prize labels as printed on the archive page.
FIRST_PRIZE_LABEL = "รางวัลที่ 1"
LAST_TWO_DIGITS_LABEL = "เลขท้าย 2 ตัว"


@dataclass(frozen=True)
class SanookArchiveConfig:
    """Configuration for walking the paginated lottery archive."""

    start_url: str = DEFAULT_START_URL
    timeout_seconds: int = 10
    page_delay_seconds: float = 0.5
    max_pages: Optional[int] = None
    user_agent: str = DEFAULT_USER_AGENT


class SanookArchiveSource(DrawSource):
    """Scrape Thai lottery draws from the Sanook archive, following pagination."""

    def __init__(
        self,
        config: SanookArchiveConfig,
        session: Optional[requests.Session] = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._config = config
        self._session = session or requests.Session()
        self._session.headers.update({"User-Agent": config.user_agent})
        self._sleep = sleep

    def iter_draws(self, lotto_type: LottoType, progress: ProgressCallback) -> Iterator[DrawRecord]:
        if lotto_type is not LottoType.THAI:
            raise SourceUnavailableError(f"Unsupported lottery type for this source: {lotto_type.value}")

        cfg = self._config
        url: Optional[str] = cfg.start_url
        visited = set()
        page = 0
        while url and url not in visited:
            if cfg.max_pages is not None and page >= cfg.max_pages:
                logger.info("Reached page limit %s; stopping.", cfg.max_pages)
                return
            page += 1
            visited.add(url)
            progress(f"Scraping page {page}: {url}")

            html = self._get_html(url)
            draws, next_url = self.parse_page(html, url)
            if page == 1 and not draws:
                raise SourceParseError(f"No draw results found at {url}")
            logger.debug("Page %s yielded %s draws", page, len(draws))
            yield from draws

            url = next_url
            if url and cfg.page_delay_seconds > 0:
                self._sleep(cfg.page_delay_seconds)

    def close(self) -> None:
        self._session.close()

    def _get_html(self, url: str) -> str:
        try:
            resp = self._session.get(url, timeout=self._config.timeout_seconds)
            resp.raise_for_status()
        except requests.RequestException as exc:
            raise SourceUnavailableError(f"Failed to fetch {url}: {exc}") from exc
        return resp.text

    @staticmethod
    def parse_page(html: str, page_url: str) -> Tuple[List[DrawRecord], Optional[str]]:
        soup = BeautifulSoup(html, "html.parser")

        draws = []
        for article in soup.select(ARTICLE_SELECTOR):
            date_tag = article.select_one(DATE_SELECTOR)
            draw_date = date_tag.get("datetime", "Unknown") if date_tag else "Unknown"

            first_prize = None
            last_two_digits = None
            for item in article.select(RESULT_ITEM_SELECTOR):
                label = item.select_one(LABEL_SELECTOR)
                number = item.select_one(NUMBER_SELECTOR)
                if label is None or number is None:
                    continue
                label_text = label.get_text()
                if FIRST_PRIZE_LABEL in label_text:
                    first_prize = number.get_text().strip()
                elif LAST_TWO_DIGITS_LABEL in label_text:
                    last_two_digits = number.get_text().strip()

            if first_prize:
                draws.append(
                    DrawRecord(
                        draw_date=draw_date,
                        first_prize=first_prize,
                        last_two_digits=last_two_digits or None,
                    )
                )

        next_link = soup.select_one(NEXT_PAGE_SELECTOR)
        next_href = next_link.get("href") if next_link else None
        next_url = urljoin(page_url, next_href) if next_href else None
        return draws, next_url
