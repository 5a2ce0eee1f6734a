"""
Input validation helpers shared by the route services.
"""
import re
from typing import Any, Optional

from config import TOTAL_CHAPTERS

EDITION_PATTERN = re.compile(r'^[a-z]{2,3}\.[A-Za-z0-9_-]+$')


def parse_int(value: Any) -> Optional[int]:
    """Parse a non-negative integer from a path/body value; None if invalid."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value >= 0 else None
    if isinstance(value, str) and value.strip().isdecimal():
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None


def parse_surah_number(value: Any) -> Optional[int]:
    number = parse_int(value)
    if number is None or not 1 <= number <= TOTAL_CHAPTERS:
        return None
    return number


def parse_ayah_number(value: Any) -> Optional[int]:
    number = parse_int(value)
    if number is None or number < 1:
        return None
    return number


def is_valid_edition(edition: Any) -> bool:
    return isinstance(edition, str) and bool(EDITION_PATTERN.match(edition))
