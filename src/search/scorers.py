"""
Similarity scorers comparing an expected verse text with a spoken/typed query.

Two independent strategies share the ``SimilarityScorer`` interface:

* ``CascadeScorer`` ranks whole verses for retrieval (server global search,
  navigator local and global tiers).
* ``PositionalScorer`` compares word by word at aligned positions and drives
  the recitation-correction view.

They intentionally have different tolerance profiles and are not merged.
"""
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List

from config import WORD_MATCH_THRESHOLD
from src.text.normalizer import normalize_arabic, tokenize

logger = logging.getLogger(__name__)

EXACT_SCORE = 1.0
CONTAINS_SCORE = 0.95
MATCHED_WORD_WEIGHT = 0.8
PARTIAL_WORD_WEIGHT = 0.4


class SimilarityScorer(ABC):
    """Scores how well ``spoken`` matches ``expected``. Always returns [0, 1]."""

    name = "base"

    @abstractmethod
    def score(self, expected: str, spoken: str) -> float:
        raise NotImplementedError

    def __call__(self, expected: str, spoken: str) -> float:
        return self.score(expected, spoken)


class CascadeScorer(SimilarityScorer):
    """Exact, then containment, then word-overlap scoring.

    The function is asymmetric: ``expected`` is the verse, ``spoken`` is the
    query. A short query contained in a long verse scores high, the reverse
    does not.
    """

    name = "cascade"

    def score(self, expected: str, spoken: str) -> float:
        norm_expected = normalize_arabic(expected)
        norm_spoken = normalize_arabic(spoken)
        if not norm_expected or not norm_spoken:
            return 0.0

        if norm_expected == norm_spoken:
            return EXACT_SCORE
        if norm_spoken in norm_expected:
            return CONTAINS_SCORE

        return self._word_overlap(norm_expected.split(' '), norm_spoken.split(' '))

    @staticmethod
    def _word_overlap(expected_words: List[str], spoken_words: List[str]) -> float:
        expected_set = set(expected_words)
        matched_words = 0
        partial_matches = 0

        for word in spoken_words:
            if word in expected_set:
                matched_words += 1
            elif any(word in candidate or candidate in word for candidate in expected_words):
                # Prefix either way is a special case of containment
                partial_matches += 1

        total = len(spoken_words)
        result = (MATCHED_WORD_WEIGHT * matched_words + PARTIAL_WORD_WEIGHT * partial_matches) / total
        return max(0.0, min(1.0, result))


@dataclass(frozen=True)
class WordFeedback:
    """Per-word comparison used by the recitation-correction view."""
    position: int
    expected: str
    spoken: str
    similarity: float
    correct: bool


class PositionalScorer(SimilarityScorer):
    """Character-level similarity of words at aligned positions.

    For each of the first ``min(len(expected), len(spoken))`` word pairs, the
    similarity is the count of equal characters at the same index divided by
    the longer word's length. The verse score is the mean over those pairs.
    """

    name = "positional"

    def __init__(self, word_threshold: float = WORD_MATCH_THRESHOLD):
        self.word_threshold = word_threshold

    @staticmethod
    def word_similarity(expected_word: str, spoken_word: str) -> float:
        longer = max(len(expected_word), len(spoken_word))
        if longer == 0:
            return 0.0
        same = sum(1 for a, b in zip(expected_word, spoken_word) if a == b)
        return same / longer

    def score(self, expected: str, spoken: str) -> float:
        expected_words = tokenize(expected)
        spoken_words = tokenize(spoken)
        pairs = list(zip(expected_words, spoken_words))
        if not pairs:
            return 0.0
        total = sum(self.word_similarity(e, s) for e, s in pairs)
        return total / len(pairs)

    def word_feedback(self, expected: str, spoken: str) -> List[WordFeedback]:
        """Compare each recited word with the expected word at the same position."""
        feedback = []
        for position, (expected_word, spoken_word) in enumerate(zip(tokenize(expected), tokenize(spoken))):
            similarity = self.word_similarity(expected_word, spoken_word)
            feedback.append(WordFeedback(
                position=position,
                expected=expected_word,
                spoken=spoken_word,
                similarity=similarity,
                correct=similarity >= self.word_threshold,
            ))
        logger.debug(f"Word feedback computed for {len(feedback)} aligned words")
        return feedback
