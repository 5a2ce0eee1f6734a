"""
Arabic text normalization utilities.

Both the server-side verse search and the voice navigator compare a spoken or
typed query against fully diacritized Quran text. Normalization folds the two
sides onto the same canonical form so that orthographic and
speech-recognition variation does not affect matching.
"""
import re
from typing import List

# Tashkeel, harakat, shadda, sukoon, superscript alef and Quranic annotation marks
_DIACRITICS = re.compile(r'[\u0610-\u061A\u064B-\u065F\u0670\u06D6-\u06ED]')

# Tatweel plus bidi control characters (ALM, LRM, RLM, embeddings, isolates)
_TATWEEL_AND_CONTROLS = re.compile(r'[\u0640\u061C\u200E\u200F\u202A-\u202E\u2066-\u2069]')

_ALEF_VARIANTS = re.compile(r'[أإآٱ]')


def normalize_arabic(text: str) -> str:
    """Normalize Arabic text for comparison.

    Steps, in this order:
    1. Remove diacritics (tashkeel and Quranic marks)
    2. Remove tatweel and directional control characters
    3. Fold hamza-bearing alef forms (أ إ آ ٱ) to bare alef
    4. Fold teh marbuta to heh
    5. Fold alef maksura to yeh
    6. Fold hamza on yeh / waw to yeh / waw
    7. Drop standalone hamza
    8. Collapse whitespace and trim

    The function is total and idempotent.

    Examples:
        >>> normalize_arabic("بِسْمِ ٱللَّهِ ٱلرَّحْمَٰنِ ٱلرَّحِيمِ")
        'بسم الله الرحمن الرحيم'
    """
    if not text or not isinstance(text, str):
        return ""

    text = _DIACRITICS.sub('', text)
    text = _TATWEEL_AND_CONTROLS.sub('', text)
    text = _ALEF_VARIANTS.sub('ا', text)
    text = text.replace('ة', 'ه')
    text = text.replace('ى', 'ي')
    text = text.replace('ئ', 'ي').replace('ؤ', 'و')
    text = text.replace('ء', '')

    return ' '.join(text.split())


def tokenize(text: str) -> List[str]:
    """Split normalized text into word tokens."""
    return [token for token in normalize_arabic(text).split(' ') if token]


def key_tokens(text: str, min_length: int = 2) -> List[str]:
    """Tokens long enough to be useful as inverted-index keys."""
    return [token for token in tokenize(text) if len(token) >= min_length]
