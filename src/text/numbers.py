"""
Text utilities for handling Arabic numbers.
"""
import re
from typing import List

# Arabic-Indic (U+0660..) and Extended Arabic-Indic (U+06F0..) digits
_DIGIT_MAP = str.maketrans(
    '٠١٢٣٤٥٦٧٨٩۰۱۲۳۴۵۶۷۸۹',
    '01234567890123456789'
)
_NUMBER_RUN = re.compile(r'[0-9\u0660-\u0669\u06F0-\u06F9]+')


def to_arabic_number(number: int) -> str:
    """
    Convert a number to its Arabic numeral representation.

    Args:
        number: Integer to convert

    Returns:
        String containing the number in Arabic numerals

    Examples:
        >>> to_arabic_number(123)
        '١٢٣'
        >>> to_arabic_number(456)
        '٤٥٦'
    """
    arabic_numbers = ['٠', '١', '٢', '٣', '٤', '٥', '٦', '٧', '٨', '٩']
    return ''.join(arabic_numbers[int(d)] for d in str(number))


def extract_numbers(text: str) -> List[int]:
    """
    Extract every number written in the text, in order of appearance.

    Western, Arabic-Indic and Extended Arabic-Indic digits are all accepted,
    so a recognizer transcript such as "سورة ١١٢" yields [112].

    Examples:
        >>> extract_numbers("سورة ١١٢ آية 3")
        [112, 3]
    """
    if not text or not isinstance(text, str):
        return []
    return [int(run.translate(_DIGIT_MAP)) for run in _NUMBER_RUN.findall(text)]
