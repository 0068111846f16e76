from __future__ import annotations

import abc
from typing import Callable, Iterator

from ..types import DrawRecord, LottoType

ProgressCallback = Callable[[str], None]


class SourceUnavailableError(RuntimeError):
    """The source could not be reached or returned an error response."""


class SourceParseError(SourceUnavailableError):
    """The source responded but nothing usable could be parsed from it."""


class DrawSource(abc.ABC):
    """Abstract draw history provider."""

    @abc.abstractmethod
    def iter_draws(self, lotto_type: LottoType, progress: ProgressCallback) -> Iterator[DrawRecord]:
        """Yield draws newest-first.

        The iterator is lazy and can only be consumed once. `progress` is
        called with one human-readable line per unit of work (e.g. a page)
        before that unit is fetched. Implementations raise
        `SourceUnavailableError` when the remote data cannot be retrieved and
        `SourceParseError` when it cannot be understood.
        """

    def close(self) -> None:
        """Optional hook for sources that hold connections."""
        return None
