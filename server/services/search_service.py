"""
Service layer for global verse search.
"""
import logging
from typing import Dict, Optional, Tuple

from src.search.engine import VerseSearchEngine, QueryTooShort

logger = logging.getLogger(__name__)


def search_ayah(
    payload: Optional[Dict],
    engine: VerseSearchEngine,
    debug: bool = False
) -> Tuple[Optional[Dict], Optional[str], int]:
    """Find the single best verse for a free-text or spoken query.

    Args:
        payload: Decoded JSON body, expected to carry ``searchText``.
        engine: The search engine bound to the corpus store.
        debug: Adds scan diagnostics to the response when True.

    Returns:
        Tuple containing: (response_data, error_message, status_code).
    """
    search_text = payload.get('searchText') if isinstance(payload, dict) else None
    if not isinstance(search_text, str):
        return None, 'Search text is required', 400

    try:
        match = engine.search(search_text)
    except QueryTooShort as e:
        logger.info(f"[SearchService] Rejected query: {e}")
        return None, 'Search text must be at least 2 characters', 400

    if match is None:
        return None, 'No matching ayah found', 404

    response_data = match.to_dict()
    if debug:
        response_data['debug_info'] = {
            'normalized_query': engine.validate_query(search_text),
            'cached_chapters': len(engine.store.cached_chapters()),
            'threshold': engine.threshold,
        }
    return response_data, None, 200
