from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from functools import partial
from typing import Callable, List, Optional, Tuple

from scraper.datasource import DrawSource, SourceUnavailableError, build_source
from scraper.types import DrawRecord, LottoType

from ..config import load_settings
from ..errors import ConflictError

SourceFactory = Callable[[LottoType], DrawSource]


@dataclass(frozen=True)
class JobStatus:
    is_running: bool
    lotto_type: Optional[str]
    progress: Tuple[str, ...]
    results: Tuple[DrawRecord, ...]

    def to_dict(self) -> dict:
        return {
            "is_running": self.is_running,
            "lotto_type": self.lotto_type,
            "progress": list(self.progress),
            "results": [record.to_dict() for record in self.results],
        }


class ScrapeJobController:
    """Runs one background scrape at a time and exposes snapshots of it.

    All shared fields are guarded by a single lock which is only held long
    enough to copy or update them; the worker never holds it while the source
    is fetching.
    """

    def __init__(self, source_factory: SourceFactory, logger: Optional[logging.Logger] = None) -> None:
        self._source_factory = source_factory
        self._logger = logger or logging.getLogger("lottoanalysis.jobs")
        self._lock = threading.Lock()
        self._is_running = False
        self._lotto_type: Optional[LottoType] = None
        self._progress: List[str] = []
        self._results: Tuple[DrawRecord, ...] = ()
        self._worker: Optional[threading.Thread] = None

    def start(self, lotto_type: LottoType) -> None:
        with self._lock:
            if self._is_running:
                raise ConflictError("A scraper is already running.")
            self._is_running = True
            self._lotto_type = lotto_type
            self._progress = []
            self._results = ()
            worker = threading.Thread(
                target=self._run,
                args=(lotto_type,),
                name=f"scrape-{lotto_type.value}",
                daemon=True,
            )
            self._worker = worker

        self._logger.info("Scrape job accepted for %s", lotto_type.value)
        try:
            worker.start()
        except RuntimeError as exc:
            self._finish((), f"Scrape could not be started: {exc}")
            raise

    def status(self) -> JobStatus:
        with self._lock:
            return JobStatus(
                is_running=self._is_running,
                lotto_type=self._lotto_type.value if self._lotto_type else None,
                progress=tuple(self._progress),
                results=self._results,
            )

    def join(self, timeout: Optional[float] = None) -> bool:
        """Wait for the current worker; returns True once no job is running."""
        with self._lock:
            worker = self._worker
        if worker is not None:
            worker.join(timeout)
        return not self.status().is_running

    def _append_progress(self, line: str) -> None:
        with self._lock:
            self._progress.append(line)

    def _finish(self, results: Tuple[DrawRecord, ...], final_line: str) -> None:
        with self._lock:
            self._results = results
            self._progress.append(final_line)
            self._is_running = False

    def _run(self, lotto_type: LottoType) -> None:
        collected: List[DrawRecord] = []
        try:
            source = self._source_factory(lotto_type)
            try:
                for record in source.iter_draws(lotto_type, self._append_progress):
                    collected.append(record)
            finally:
                source.close()
        except SourceUnavailableError as exc:
            self._logger.warning("Scrape for %s failed: %s", lotto_type.value, exc)
            self._finish((), f"Scrape failed: {exc}")
            return
        except Exception as exc:
            self._logger.exception("Scrape for %s failed unexpectedly: %s", lotto_type.value, exc)
            self._finish((), f"Scrape failed unexpectedly: {exc}")
            return

        self._logger.info("Scrape for %s finished with %s draws", lotto_type.value, len(collected))
        self._finish(
            tuple(collected),
            f"{lotto_type.label} scraping complete: {len(collected)} draws collected.",
        )


_controller: Optional[ScrapeJobController] = None
_controller_lock = threading.Lock()


def get_job_controller() -> ScrapeJobController:
    """Return the process-wide controller, building it exactly once."""
    global _controller
    if _controller is None:
        with _controller_lock:
            if _controller is None:
                settings = load_settings()
                _controller = ScrapeJobController(partial(build_source, settings=settings.scraper))
    return _controller
