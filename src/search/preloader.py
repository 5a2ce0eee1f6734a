"""
Background preloading of the bare Arabic text of every chapter.
"""
import logging
import threading
import time
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from config import (
    PRELOAD_PAUSE_EVERY,
    PRELOAD_PAUSE_SECONDS,
    PRELOAD_TIMEOUT,
    QURAN_TEXT_EDITION,
    TOTAL_CHAPTERS
)
from src.search.cache import CorpusStore
from src.search.upstream import QuranApiClient, UpstreamError

logger = logging.getLogger(__name__)


@dataclass
class PreloadReport:
    loaded: List[int] = field(default_factory=list)
    skipped: List[int] = field(default_factory=list)  # already cached
    failed: List[int] = field(default_factory=list)

    @property
    def successful(self) -> int:
        return len(self.loaded) + len(self.skipped)


class CorpusPreloader:
    """Fills a ``CorpusStore`` with chapters 1..114 in ascending order.

    A chapter that is already cached is skipped and counted as successful.
    A failing chapter is logged and skipped; the loop always continues.
    There is no retry: a failed chapter stays absent until something else
    fetches it.
    """

    def __init__(
        self,
        store: CorpusStore,
        client: QuranApiClient,
        edition: str = QURAN_TEXT_EDITION,
        pause_every: int = PRELOAD_PAUSE_EVERY,
        pause_seconds: float = PRELOAD_PAUSE_SECONDS,
        timeout: float = PRELOAD_TIMEOUT,
        last_chapter: int = TOTAL_CHAPTERS,
        sleep: Callable[[float], None] = time.sleep
    ):
        self.store = store
        self.client = client
        self.edition = edition
        self.pause_every = pause_every
        self.pause_seconds = pause_seconds
        self.timeout = timeout
        self.last_chapter = last_chapter
        self._sleep = sleep
        self._thread: Optional[threading.Thread] = None
        self.last_report: Optional[PreloadReport] = None

    def run(self) -> PreloadReport:
        report = PreloadReport()
        logger.info(f"[Preloader] Preloading {self.last_chapter} chapters (edition={self.edition})")

        for number in range(1, self.last_chapter + 1):
            if self.store.is_cached(number):
                report.skipped.append(number)
            else:
                try:
                    chapter = self.client.get_chapter_text(number, self.edition, timeout=self.timeout)
                    self.store.put_chapter(chapter)
                    report.loaded.append(number)
                except UpstreamError as e:
                    logger.warning(f"[Preloader] Chapter {number} failed: {e}")
                    report.failed.append(number)
                except (KeyError, TypeError, ValueError) as e:
                    logger.warning(f"[Preloader] Chapter {number} payload malformed: {e}")
                    report.failed.append(number)

            if self.pause_every and number % self.pause_every == 0 and number < self.last_chapter:
                self._sleep(self.pause_seconds)

        self.last_report = report
        logger.info(
            f"[Preloader] Done: {report.successful}/{self.last_chapter} chapters available "
            f"({len(report.loaded)} fetched, {len(report.skipped)} already cached, {len(report.failed)} failed)"
        )
        return report

    def _run_safely(self):
        try:
            self.run()
        except Exception as e:
            logger.error(f"[Preloader] Unexpected error, preload aborted: {e}", exc_info=True)

    def start(self) -> threading.Thread:
        """Run the preload in a daemon thread and return immediately."""
        if self._thread is not None and self._thread.is_alive():
            logger.debug("[Preloader] Already running.")
            return self._thread
        self._thread = threading.Thread(target=self._run_safely, name="corpus-preloader", daemon=True)
        self._thread.start()
        return self._thread

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()
