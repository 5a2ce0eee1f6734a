"""
Verse search: similarity scoring, corpus caching, upstream fetching and the
global search engine.
"""

from src.search.models import Verse, Chapter, SurahInfo, MatchResult
from src.search.scorers import SimilarityScorer, CascadeScorer, PositionalScorer, WordFeedback
from src.search.cache import TTLCache, CorpusStore
from src.search.engine import VerseSearchEngine, QueryTooShort
from src.search.upstream import (
    QuranApiClient,
    UpstreamError,
    UpstreamTimeout,
    UpstreamNotFound
)
from src.search.preloader import CorpusPreloader, PreloadReport
