"""
Server-specific configuration settings.

Every value read through ``_env`` can be overridden with a
``QURAN_COMPANION_<NAME>`` environment variable, and any value per app through
``create_app(config_object=...)``.
"""
import os
from pathlib import Path
from config import (
    ALQURAN_CLOUD_API as SRC_ALQURAN_CLOUD_API,
    QURAN_TAFSEER_API as SRC_QURAN_TAFSEER_API,
    HADITH_CDN_API as SRC_HADITH_CDN_API,
    UPSTREAM_TIMEOUT,
    QURAN_TEXT_EDITION,
    CACHE_TTL_SECONDS as SRC_CACHE_TTL_SECONDS,
    PRELOAD_PAUSE_EVERY,
    PRELOAD_PAUSE_SECONDS,
    PRELOAD_TIMEOUT as SRC_PRELOAD_TIMEOUT,
    SEARCH_ACCEPT_THRESHOLD as SRC_SEARCH_ACCEPT_THRESHOLD,
    DEFAULT_RECITER
)


def _env(name, default, cast=str):
    value = os.getenv(f"QURAN_COMPANION_{name}")
    return cast(value) if value is not None else default


def _flag(value):
    return value.lower() in ('1', 'true', 'yes')


# --- Server Network Settings ---
HOST = _env('HOST', '0.0.0.0')
PORT = _env('PORT', 5000, int)

# --- Upstream APIs ---
ALQURAN_CLOUD_API = _env('ALQURAN_CLOUD_API', SRC_ALQURAN_CLOUD_API)
QURAN_TAFSEER_API = _env('QURAN_TAFSEER_API', SRC_QURAN_TAFSEER_API)
HADITH_CDN_API = _env('HADITH_CDN_API', SRC_HADITH_CDN_API)
SURAH_TIMEOUT = _env('SURAH_TIMEOUT', UPSTREAM_TIMEOUT, float)  # seconds
TAFSEER_TIMEOUT = _env('TAFSEER_TIMEOUT', 10.0, float)
PRELOAD_TIMEOUT = _env('PRELOAD_TIMEOUT', SRC_PRELOAD_TIMEOUT, float)

# --- Editions ---
ARABIC_EDITION = QURAN_TEXT_EDITION
URDU_EDITION = "ur.jalandhry"  # Fateh Muhammad Jalandhry
ENGLISH_EDITION = "en.sahih"  # Sahih International
TAFSEER_ID = 1  # Al-Tafsir Al-Muyassar

# --- Cache & Preload ---
CACHE_TTL_SECONDS = _env('CACHE_TTL_SECONDS', SRC_CACHE_TTL_SECONDS, int)
PRELOAD_ENABLED = _env('PRELOAD_ENABLED', True, _flag)
PRELOAD_EDITION = _env('PRELOAD_EDITION', QURAN_TEXT_EDITION)

# --- Verse Search ---
SEARCH_ACCEPT_THRESHOLD = _env('SEARCH_ACCEPT_THRESHOLD', SRC_SEARCH_ACCEPT_THRESHOLD, float)

# --- Hadith ---
HADITH_COLLECTIONS = {
    'bukhari': "Sahih al-Bukhari",
    'muslim': "Sahih Muslim",
}
HADITH_DEFAULT_PAGE_SIZE = 20
HADITH_MAX_PAGE_SIZE = 100

# --- Storage ---
DATABASE_PATH = _env('DATABASE_PATH', str(Path.cwd() / 'data' / 'quran_companion.db'))
