"""
Voice/text navigation: turns a recognizer transcript or typed query into a
jump to a (surah, ayah) location.

Resolution order for an utterance:
1. Cooldown: a jump that happened less than ``cooldown_seconds`` ago blocks
   the next one (noisy or duplicate speech events).
2. Numeric shortcut: the first number in the text, if in 1..114, names the
   surah directly; the second number, if any, names the ayah.
3. Local tier: the open chapter's verses, accepted at ``local_threshold``.
4. Global tier (queries of at least ``min_global_words`` words): chapters
   suggested by the inverted index, then the server search endpoint, then an
   on-demand scan of all chapters that stops at the first chapter holding a
   verse scoring ``global_threshold`` or more.
"""
import logging
import time
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, Optional, Tuple

from config import (
    GLOBAL_MATCH_THRESHOLD,
    LOCAL_MATCH_THRESHOLD,
    MAX_CANDIDATE_CHAPTERS,
    MIN_GLOBAL_WORDS,
    NAVIGATION_COOLDOWN_SECONDS,
    TOTAL_CHAPTERS
)
from src.search.models import Chapter, MatchResult, Verse
from src.search.scorers import CascadeScorer, SimilarityScorer
from src.search.upstream import UpstreamError
from src.text.normalizer import key_tokens, tokenize
from src.text.numbers import extract_numbers
from src.voice.index import VerseIndex

logger = logging.getLogger(__name__)

KIND_NUMBER = "number"
KIND_LOCAL = "local"
KIND_GLOBAL = "global"
KIND_REMOTE = "remote"
KIND_COOLDOWN = "cooldown"
KIND_NONE = "none"


@dataclass(frozen=True)
class NavigationResult:
    kind: str
    surah_number: Optional[int] = None
    ayah_number: Optional[int] = None
    score: float = 0.0
    text: str = ""

    @property
    def navigates(self) -> bool:
        return self.kind in (KIND_NUMBER, KIND_LOCAL, KIND_GLOBAL, KIND_REMOTE)


NO_MATCH = NavigationResult(kind=KIND_NONE)


class VoiceNavigator:
    """Two-tier verse locator mirroring the server's search.

    Args:
        fetch_chapter: ``number -> Chapter`` used by the on-demand scan.
        remote_search: ``query -> MatchResult | None`` (the server endpoint).
        clock: monotonic clock in seconds, injected for tests.
    """

    def __init__(
        self,
        fetch_chapter: Optional[Callable[[int], Chapter]] = None,
        remote_search: Optional[Callable[[str], Optional[MatchResult]]] = None,
        scorer: Optional[SimilarityScorer] = None,
        local_threshold: float = LOCAL_MATCH_THRESHOLD,
        global_threshold: float = GLOBAL_MATCH_THRESHOLD,
        min_global_words: int = MIN_GLOBAL_WORDS,
        max_candidate_chapters: int = MAX_CANDIDATE_CHAPTERS,
        cooldown_seconds: float = NAVIGATION_COOLDOWN_SECONDS,
        clock: Callable[[], float] = time.monotonic
    ):
        self.fetch_chapter = fetch_chapter
        self.remote_search = remote_search
        self.scorer = scorer or CascadeScorer()
        self.local_threshold = local_threshold
        self.global_threshold = global_threshold
        self.min_global_words = min_global_words
        self.max_candidate_chapters = max_candidate_chapters
        self.cooldown_seconds = cooldown_seconds
        self._clock = clock

        self.chapters: Dict[int, Chapter] = {}
        self.index = VerseIndex()
        self._last_jump_at: Optional[float] = None

    # --- chapter cache ---

    def add_chapter(self, chapter: Chapter) -> None:
        self.chapters[chapter.number] = chapter
        self.index.add_chapter(chapter)

    def _load_chapter(self, number: int) -> Optional[Chapter]:
        chapter = self.chapters.get(number)
        if chapter is not None or self.fetch_chapter is None:
            return chapter
        try:
            chapter = self.fetch_chapter(number)
        except UpstreamError as e:
            logger.warning(f"[Navigator] Could not fetch chapter {number}: {e}")
            return None
        self.add_chapter(chapter)
        return chapter

    # --- scoring helpers ---

    def _best_verse(self, query: str, verses: Iterable[Verse]) -> Tuple[Optional[Verse], float]:
        best, best_score = None, 0.0
        for verse in verses:
            score = self.scorer.score(verse.text, query)
            if score > best_score:
                best, best_score = verse, score
        return best, best_score

    def _in_cooldown(self) -> bool:
        if self._last_jump_at is None:
            return False
        return self._clock() - self._last_jump_at < self.cooldown_seconds

    def _jump(self, result: NavigationResult) -> NavigationResult:
        self._last_jump_at = self._clock()
        logger.info(f"[Navigator] {result.kind} jump to S{result.surah_number}:A{result.ayah_number} (score={result.score:.2f})")
        return result

    # --- tiers ---

    @staticmethod
    def number_shortcut(text: str) -> Optional[NavigationResult]:
        numbers = extract_numbers(text)
        if not numbers or not 1 <= numbers[0] <= TOTAL_CHAPTERS:
            return None
        ayah = numbers[1] if len(numbers) > 1 and numbers[1] >= 1 else 1
        return NavigationResult(kind=KIND_NUMBER, surah_number=numbers[0], ayah_number=ayah, score=1.0)

    def local_match(self, query: str, chapter_number: int) -> Optional[NavigationResult]:
        chapter = self.chapters.get(chapter_number)
        if chapter is None:
            return None
        verse, score = self._best_verse(query, chapter.verses)
        if verse is None or score < self.local_threshold:
            return None
        return NavigationResult(KIND_LOCAL, verse.surah_number, verse.number_in_surah, score, verse.text)

    def global_detect(self, query: str) -> Optional[NavigationResult]:
        candidates = self.index.candidate_chapters(key_tokens(query), limit=self.max_candidate_chapters)
        if candidates:
            logger.debug(f"[Navigator] Index narrowed search to chapters {candidates}")
            verses = [v for n in candidates for v in self.chapters[n].verses]
            verse, score = self._best_verse(query, verses)
            if verse is not None and score >= self.global_threshold:
                return NavigationResult(KIND_GLOBAL, verse.surah_number, verse.number_in_surah, score, verse.text)
            return None

        if self.remote_search is not None:
            try:
                match = self.remote_search(query)
            except UpstreamError as e:
                logger.warning(f"[Navigator] Remote search failed: {e}")
                match = None
            if match is not None and match.score >= self.global_threshold:
                return NavigationResult(KIND_REMOTE, match.surah_number, match.ayah_number, match.score, match.text)

        return self._scan_all(query)

    def _scan_all(self, query: str) -> Optional[NavigationResult]:
        if self.fetch_chapter is None and not self.chapters:
            return None
        for number in range(1, TOTAL_CHAPTERS + 1):
            chapter = self._load_chapter(number)
            if chapter is None:
                continue
            verse, score = self._best_verse(query, chapter.verses)
            if verse is not None and score >= self.global_threshold:
                return NavigationResult(KIND_GLOBAL, verse.surah_number, verse.number_in_surah, score, verse.text)
        return None

    def handle_utterance(self, text: str, current_chapter: Optional[int] = None) -> NavigationResult:
        text = (text or "").strip()
        if not text:
            return NO_MATCH
        if self._in_cooldown():
            logger.debug("[Navigator] Ignoring utterance during cooldown")
            return NavigationResult(kind=KIND_COOLDOWN)

        shortcut = self.number_shortcut(text)
        if shortcut is not None:
            return self._jump(shortcut)

        if current_chapter is not None:
            local = self.local_match(text, current_chapter)
            if local is not None:
                return self._jump(local)

        if len(tokenize(text)) >= self.min_global_words:
            found = self.global_detect(text)
            if found is not None:
                return self._jump(found)

        return NO_MATCH
