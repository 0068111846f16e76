from __future__ import annotations

from ..config import ScraperSettings
from ..types import LottoType
from .base import DrawSource, ProgressCallback, SourceParseError, SourceUnavailableError
from .sanook import SanookArchiveConfig, SanookArchiveSource


def build_source(lotto_type: LottoType, settings: ScraperSettings) -> DrawSource:
    if lotto_type is LottoType.THAI:
        return SanookArchiveSource(
            SanookArchiveConfig(
                start_url=settings.start_url,
                timeout_seconds=settings.timeout_seconds,
                page_delay_seconds=settings.page_delay_seconds,
                max_pages=settings.max_pages,
                user_agent=settings.user_agent,
            )
        )
    raise SourceUnavailableError(f"No source configured for lottery type: {lotto_type.value}")


__all__ = [
    "DrawSource",
    "ProgressCallback",
    "SanookArchiveSource",
    "SourceParseError",
    "SourceUnavailableError",
    "build_source",
]
