"""Numeral token decoding for chapter markers.

Strategies, in order: integer, roman numeral, spelled-out word.
Unrecognized tokens decode to 1, which callers must not read as a
confident result.
"""

import re

DEFAULT_NUMBER = 1

ROMAN_VALUES = {"i": 1, "v": 5, "x": 10, "l": 50, "c": 100, "d": 500, "m": 1000}

ROMAN_TOKEN = re.compile(r"^[ivxlcdm]+$", re.IGNORECASE)
LEADING_DIGITS = re.compile(r"^\d+")

WORD_NUMBERS = {
    "one": 1, "two": 2, "three": 3, "four": 4, "five": 5,
    "six": 6, "seven": 7, "eight": 8, "nine": 9, "ten": 10,
    "eleven": 11, "twelve": 12, "thirteen": 13, "fourteen": 14, "fifteen": 15,
    "sixteen": 16, "seventeen": 17, "eighteen": 18, "nineteen": 19, "twenty": 20,
    "first": 1, "second": 2, "third": 3, "fourth": 4, "fifth": 5,
}


def decode_roman(token: str) -> int:
    """Decode a roman numeral, returning 0 if the token is not one.

    Symbols are summed left to right; a symbol followed by a larger one is
    subtracted. Non-canonical sequences ("IIII", "IC") are accepted as-is.
    """
    if not token or not ROMAN_TOKEN.match(token):
        return 0

    lower = token.lower()
    result = 0
    for i, char in enumerate(lower):
        current = ROMAN_VALUES[char]
        following = ROMAN_VALUES[lower[i + 1]] if i + 1 < len(lower) else 0
        if current < following:
            result -= current
        else:
            result += current
    return max(result, 0)


def decode_number(token: str | None) -> int:
    """Convert a numeral token ("12", "XIV", "seven", "first") to an integer.

    Never raises: returns 1 when no strategy applies.
    """
    if not token:
        return DEFAULT_NUMBER

    token = token.strip()

    digits = LEADING_DIGITS.match(token)
    if digits:
        return int(digits.group(0))

    roman = decode_roman(token)
    if roman > 0:
        return roman

    return WORD_NUMBERS.get(token.lower(), DEFAULT_NUMBER)
