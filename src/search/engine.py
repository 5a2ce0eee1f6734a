"""
Global verse search over the cached corpus.
"""
import logging
from typing import Optional

from config import MIN_QUERY_LENGTH, SEARCH_ACCEPT_THRESHOLD, TOTAL_CHAPTERS
from src.search.cache import CorpusStore
from src.search.models import MatchResult
from src.search.scorers import CascadeScorer, SimilarityScorer
from src.text.normalizer import normalize_arabic

logger = logging.getLogger(__name__)

DEFAULT_ACCEPT_THRESHOLD = SEARCH_ACCEPT_THRESHOLD


class QueryTooShort(ValueError):
    """The search text is shorter than ``MIN_QUERY_LENGTH`` characters."""


class VerseSearchEngine:
    """Linear scan of every cached verse, keeping the single best score.

    The engine never fetches: chapters that are not cached when the scan
    reaches them are skipped.
    """

    def __init__(
        self,
        store: CorpusStore,
        scorer: Optional[SimilarityScorer] = None,
        threshold: float = DEFAULT_ACCEPT_THRESHOLD
    ):
        self.store = store
        self.scorer = scorer or CascadeScorer()
        self.threshold = threshold

    @staticmethod
    def validate_query(query: str) -> str:
        """Return the normalized query or raise ``QueryTooShort``."""
        trimmed = (query or "").strip() if isinstance(query, str) else ""
        if len(trimmed) < MIN_QUERY_LENGTH:
            raise QueryTooShort(f"Search text must be at least {MIN_QUERY_LENGTH} characters")
        normalized = normalize_arabic(trimmed)
        if len(normalized) < MIN_QUERY_LENGTH:
            raise QueryTooShort(f"Search text must be at least {MIN_QUERY_LENGTH} letters after normalization")
        return normalized

    def search(self, query: str) -> Optional[MatchResult]:
        normalized_query = self.validate_query(query)

        best_score = 0.0
        best = None
        scanned_chapters = 0
        scanned_verses = 0

        for number in range(1, TOTAL_CHAPTERS + 1):
            chapter = self.store.get_chapter(number)
            if chapter is None:
                continue
            scanned_chapters += 1
            for verse in chapter.verses:
                scanned_verses += 1
                score = self.scorer.score(verse.text, normalized_query)
                if score > best_score:
                    best_score = score
                    best = (chapter, verse)

        logger.debug(
            f"[Search] Scanned {scanned_verses} verses in {scanned_chapters} chapters, "
            f"best score={best_score:.3f}"
        )

        if best is None or best_score <= self.threshold:
            logger.info(f"[Search] No match above {self.threshold} for '{normalized_query}'")
            return None

        chapter, verse = best
        logger.info(f"[Search] Match S{chapter.number}:A{verse.number_in_surah} score={best_score:.3f}")
        return MatchResult(
            surah_number=chapter.number,
            ayah_number=verse.number_in_surah,
            text=verse.text,
            surah_name=chapter.name,
            surah_english_name=chapter.english_name,
            score=best_score,
        )
