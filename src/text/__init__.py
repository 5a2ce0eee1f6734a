"""
Arabic text handling for verse search: normalization, tokenization and numerals.
"""

from src.text.normalizer import normalize_arabic, tokenize, key_tokens
from src.text.numbers import to_arabic_number, extract_numbers
