"""
Service layer for surah listing, surah detail, tafseer and reciters.

Each function validates its input, consults the TTL cache, forwards to the
upstream API on a miss and maps upstream failures to a JSON error and status.
"""
import logging
from typing import Dict, List, Optional, Tuple

from src.search.cache import CorpusStore, TTLCache
from src.search.models import Chapter
from src.search.upstream import QuranApiClient, UpstreamError, UpstreamNotFound, UpstreamTimeout
from server.utils.validation import parse_surah_number, parse_ayah_number, is_valid_edition

logger = logging.getLogger(__name__)

TIMEOUT_MESSAGE = 'Request timeout - please try again'

AVAILABLE_RECITERS = [
    {'identifier': "ar.alafasy", 'name': "Mishary Rashid Alafasy", 'style': "Hafs"},
    {'identifier': "ar.abdulbasitmurattal", 'name': "Abdul Basit (Murattal)", 'style': "Hafs"},
    {'identifier': "ar.minshawi", 'name': "Mohamed Siddiq al-Minshawi (Murattal)", 'style': "Hafs"},
    {'identifier': "ar.husary", 'name': "Mahmoud Khalil Al-Hussary", 'style': "Hafs"},
    {'identifier': "ar.shaatree", 'name': "Abu Bakr al-Shatri", 'style': "Hafs"},
]


def upstream_error_response(error: UpstreamError, not_found: str, failure: str) -> Tuple[None, str, int]:
    """Map an upstream failure onto the fixed set of JSON error bodies."""
    if isinstance(error, UpstreamTimeout):
        return None, TIMEOUT_MESSAGE, 504
    if isinstance(error, UpstreamNotFound):
        return None, not_found, 404
    return None, failure, 500


def get_surah_list(cache: TTLCache, client: QuranApiClient) -> Tuple[Optional[List[Dict]], Optional[str], int]:
    cache_key = "surahs"
    cached = cache.get(cache_key)
    if cached is not None:
        return cached, None, 200

    try:
        surahs = [surah.to_dict() for surah in client.get_surah_list()]
    except UpstreamError as e:
        logger.error(f"[QuranService] Error fetching surahs: {e}")
        return upstream_error_response(e, 'Surahs not found', 'Failed to fetch surahs')

    cache.set(cache_key, surahs)
    return surahs, None, 200


def _build_verses(arabic: Dict, audio: Dict, urdu: Dict, english: Dict) -> List[Dict]:
    audio_ayahs = audio.get('ayahs', [])
    urdu_ayahs = urdu.get('ayahs', [])
    english_ayahs = english.get('ayahs', [])

    def _at(ayahs, index, key):
        return ayahs[index].get(key, "") if index < len(ayahs) else ""

    verses = []
    for index, ayah in enumerate(arabic.get('ayahs', [])):
        verses.append({
            'ayah': {
                'number': ayah['number'],
                'numberInSurah': ayah['numberInSurah'],
                'text': ayah['text'],
                'audio': _at(audio_ayahs, index, 'audio'),
                'surah': {
                    'number': arabic['number'],
                    'name': arabic.get('name', ''),
                    'englishName': arabic.get('englishName', ''),
                },
            },
            'urduTranslation': {
                'text': _at(urdu_ayahs, index, 'text'),
                'language': "Urdu",
                'translator': "Fateh Muhammad Jalandhry",
            },
            'englishTranslation': {
                'text': _at(english_ayahs, index, 'text'),
                'language': "English",
                'translator': "Sahih International",
            },
        })
    return verses


def get_surah_detail(
    surah_number: str,
    reciter_edition: str,
    cache: TTLCache,
    client: QuranApiClient,
    store: CorpusStore,
    config: Dict
) -> Tuple[Optional[List[Dict]], Optional[str], int]:
    """Verses of one surah with audio and translations.

    The Arabic edition fetched here also fills the corpus store when the
    preloader has not cached that chapter yet.
    """
    number = parse_surah_number(surah_number)
    if number is None:
        return None, 'Invalid surah number. Must be between 1 and 114', 400
    if not is_valid_edition(reciter_edition):
        return None, 'Invalid reciter edition', 400

    cache_key = f"surah-{number}-{reciter_edition}"
    cached = cache.get(cache_key)
    if cached is not None:
        return cached, None, 200

    editions = [config['ARABIC_EDITION'], reciter_edition, config['URDU_EDITION'], config['ENGLISH_EDITION']]
    try:
        arabic, audio, urdu, english = client.get_surah_editions(number, editions)
        verses = _build_verses(arabic, audio, urdu, english)
    except UpstreamError as e:
        logger.error(f"[QuranService] Error fetching surah {number}: {e}")
        return upstream_error_response(e, 'Surah not found', 'Failed to load surah. Please try again.')
    except (KeyError, TypeError, AttributeError) as e:
        logger.error(f"[QuranService] Malformed surah {number} payload: {e}", exc_info=True)
        return None, 'Failed to fetch surah data', 500

    cache.set(cache_key, verses)
    if config['ARABIC_EDITION'] == config['PRELOAD_EDITION'] and not store.is_cached(number):
        store.put_chapter(Chapter.from_api(arabic))
        logger.debug(f"[QuranService] Chapter {number} added to corpus from surah request")
    return verses, None, 200


def get_tafseer(
    surah_number: str,
    ayah_number: str,
    cache: TTLCache,
    client: QuranApiClient,
    config: Dict
) -> Tuple[Optional[Dict], Optional[str], int]:
    surah = parse_surah_number(surah_number)
    ayah = parse_ayah_number(ayah_number)
    if surah is None or ayah is None:
        return None, 'Invalid surah or ayah number', 400

    cache_key = f"tafseer-{surah}-{ayah}"
    cached = cache.get(cache_key)
    if cached is not None:
        return cached, None, 200

    try:
        payload = client.get_tafseer(surah, ayah, tafseer_id=config['TAFSEER_ID'], timeout=config['TAFSEER_TIMEOUT'])
    except UpstreamError as e:
        logger.error(f"[QuranService] Error fetching tafseer {surah}:{ayah}: {e}")
        return upstream_error_response(e, 'Tafseer not available for this verse', 'Failed to fetch tafseer')

    tafseer = {
        'ayahNumber': ayah,
        'text': payload['text'],
        'tafseerName': "التفسير الميسر (Al-Tafsir Al-Muyassar)",
        'language': "Arabic",
    }
    cache.set(cache_key, tafseer)
    return tafseer, None, 200


def get_reciters() -> List[Dict]:
    return list(AVAILABLE_RECITERS)
