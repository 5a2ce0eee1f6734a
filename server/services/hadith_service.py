"""
Service layer for hadith collections served from the CDN-hosted editions.
"""
import logging
from typing import Dict, List, Optional, Tuple

from src.search.cache import TTLCache
from src.search.upstream import QuranApiClient, UpstreamError
from src.text.normalizer import normalize_arabic
from server.services.quran_service import upstream_error_response
from server.utils.validation import parse_int

logger = logging.getLogger(__name__)


def _edition(cache: TTLCache, client: QuranApiClient, edition: str) -> List[Dict]:
    cache_key = f"hadith-{edition}"
    cached = cache.get(cache_key)
    if cached is not None:
        return cached
    hadiths = client.get_hadith_edition(edition)
    cache.set(cache_key, hadiths)
    return hadiths


def merge_editions(collection_name: str, arabic: List[Dict], english: List[Dict]) -> List[Dict]:
    """Join the Arabic and English editions on hadith number."""
    english_by_number = {h.get('hadithnumber'): h for h in english}
    merged = []
    for hadith in arabic:
        number = hadith.get('hadithnumber')
        translation = english_by_number.get(number, {})
        grades = hadith.get('grades') or translation.get('grades') or []
        reference = hadith.get('reference') or {}
        merged.append({
            'collection': collection_name,
            'bookNumber': str(reference['book']) if 'book' in reference else None,
            'hadithNumber': str(number),
            'arabicText': hadith.get('text', ''),
            'englishText': translation.get('text', ''),
            'grade': grades[0].get('grade') if grades else None,
            'reference': f"{collection_name} {number}",
        })
    return merged


def filter_hadiths(hadiths: List[Dict], search: str) -> List[Dict]:
    """Case-insensitive English match or normalized Arabic match."""
    search_lower = search.lower()
    search_arabic = normalize_arabic(search)
    return [
        h for h in hadiths
        if search_lower in h['englishText'].lower()
        or (search_arabic and search_arabic in normalize_arabic(h['arabicText']))
    ]


def get_hadiths(
    collection: str,
    params: Dict,
    cache: TTLCache,
    client: QuranApiClient,
    config: Dict
) -> Tuple[Optional[Dict], Optional[str], int]:
    collections = config['HADITH_COLLECTIONS']
    if collection not in collections:
        valid = ", ".join(f"'{name}'" for name in collections)
        return None, f"Invalid collection. Must be one of {valid}", 400

    page = parse_int(params.get('page') or 1)
    limit = parse_int(params.get('limit') or config['HADITH_DEFAULT_PAGE_SIZE'])
    if page is None or page < 1 or limit is None or not 1 <= limit <= config['HADITH_MAX_PAGE_SIZE']:
        return None, 'Invalid page or limit', 400

    try:
        arabic = _edition(cache, client, f"ara-{collection}")
        english = _edition(cache, client, f"eng-{collection}")
    except UpstreamError as e:
        logger.error(f"[HadithService] Error fetching {collection}: {e}")
        return upstream_error_response(e, 'Hadith collection not found', 'Failed to fetch hadiths')

    hadiths = merge_editions(collections[collection], arabic, english)
    search = params.get('search')
    if search:
        hadiths = filter_hadiths(hadiths, search)

    start = (page - 1) * limit
    return {
        'collection': collections[collection],
        'total': len(hadiths),
        'page': page,
        'limit': limit,
        'hadiths': hadiths[start:start + limit],
    }, None, 200
