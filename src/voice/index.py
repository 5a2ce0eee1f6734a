"""
Inverted index token -> verse locations, built incrementally as chapters load.
"""
import logging
from collections import Counter
from typing import Dict, Iterable, List, Set, Tuple

from config import MAX_CANDIDATE_CHAPTERS, MIN_INDEX_TOKEN_LENGTH
from src.search.models import Chapter
from src.text.normalizer import key_tokens

logger = logging.getLogger(__name__)


class VerseIndex:
    def __init__(self, min_token_length: int = MIN_INDEX_TOKEN_LENGTH):
        self.min_token_length = min_token_length
        self._postings: Dict[str, Set[Tuple[int, int]]] = {}
        self._chapters: Set[int] = set()

    def add_chapter(self, chapter: Chapter) -> None:
        """Index every verse of a chapter. Re-adding a chapter is a no-op."""
        if chapter.number in self._chapters:
            return
        for verse in chapter.verses:
            for token in key_tokens(verse.text, self.min_token_length):
                self._postings.setdefault(token, set()).add(verse.key)
        self._chapters.add(chapter.number)
        logger.debug(f"Indexed chapter {chapter.number}; {len(self._postings)} distinct tokens")

    def lookup(self, token: str) -> Set[Tuple[int, int]]:
        return self._postings.get(token, set())

    def candidate_chapters(self, tokens: Iterable[str], limit: int = MAX_CANDIDATE_CHAPTERS) -> List[int]:
        """Chapters containing query tokens, most hits first, at most ``limit``."""
        hits = Counter()
        for token in set(tokens):
            for chapter_number, _ in self.lookup(token):
                hits[chapter_number] += 1
        ranked = sorted(hits.items(), key=lambda item: (-item[1], item[0]))
        return [chapter_number for chapter_number, _ in ranked[:limit]]

    @property
    def indexed_chapters(self) -> Set[int]:
        return set(self._chapters)

    def __contains__(self, chapter_number: int) -> bool:
        return chapter_number in self._chapters
