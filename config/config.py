"""
Configuration parameters shared by the verse-search library, the voice
navigator and the server.
"""

# Corpus
TOTAL_CHAPTERS = 114  # Surahs in the mushaf
QURAN_TEXT_EDITION = "quran-uthmani"  # Bare Arabic edition used for searching

# Upstream APIs
ALQURAN_CLOUD_API = "http://api.alquran.cloud/v1"
QURAN_TAFSEER_API = "http://api.quran-tafseer.com"
HADITH_CDN_API = "https://cdn.jsdelivr.net/gh/fawazahmed0/hadith-api@1"
UPSTREAM_TIMEOUT = 15.0  # Default per-request timeout in seconds

# Cache & Preload
CACHE_TTL_SECONDS = 60 * 60  # 1 hour
PRELOAD_PAUSE_EVERY = 10  # Pause after this many chapters
PRELOAD_PAUSE_SECONDS = 1.0
PRELOAD_TIMEOUT = 8.0  # Per-chapter timeout during preload

# Verse Search
MIN_QUERY_LENGTH = 2  # Characters, both trimmed and normalized
SEARCH_ACCEPT_THRESHOLD = 0.4  # Best score must be strictly above this
WORD_MATCH_THRESHOLD = 0.8  # Per-word similarity counted as correct in feedback

# Voice Navigation
LOCAL_MATCH_THRESHOLD = 0.55  # Open chapter
GLOBAL_MATCH_THRESHOLD = 0.62  # Any chapter
MIN_GLOBAL_WORDS = 3  # Shorter utterances never search globally
MAX_CANDIDATE_CHAPTERS = 25  # Chapters suggested by the inverted index
MIN_INDEX_TOKEN_LENGTH = 2
NAVIGATION_COOLDOWN_SECONDS = 0.85

# Speech Recognizer
RECOGNIZER_RESTART_DELAY = 0.3  # seconds
RECOGNIZER_INACTIVITY_TIMEOUT = 6.0  # seconds without events before a forced restart
RECOGNIZER_MAX_RESTART_FAILURES = 5

# Companion Server (client side)
COMPANION_SERVER_URL = "http://localhost:5000"
DEFAULT_RECITER = "ar.alafasy"
