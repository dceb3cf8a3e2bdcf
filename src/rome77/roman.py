"""Roman numeral validation and decoding. "N" is the zero marker."""

import re

ZERO = "N"
MAX_VALUE = 3999

# Characters that may appear in a numeral-looking run.
NUMERAL_CHARS = frozenset("IVXLCDMN")

_VALUES = {"I": 1, "V": 5, "X": 10, "L": 50, "C": 100, "D": 500, "M": 1000}

# Thousands, hundreds, tens, units; each group allows one subtractive pair.
_WELL_FORMED = re.compile(
    r"M{0,3}"
    r"(?:CM|CD|D?C{0,3})"
    r"(?:XC|XL|L?X{0,3})"
    r"(?:IX|IV|V?I{0,3})"
)


def is_valid(text: str) -> bool:
    if text == ZERO:
        return True
    return bool(text) and _WELL_FORMED.fullmatch(text) is not None


def to_int(text: str) -> int:
    """Decode a numeral; raises ValueError when it is not well formed."""
    if not is_valid(text):
        raise ValueError(f"Invalid Roman numeral: {text}")
    if text == ZERO:
        return 0
    total = 0
    for i, ch in enumerate(text):
        value = _VALUES[ch]
        if i + 1 < len(text) and value < _VALUES[text[i + 1]]:
            total -= value
        else:
            total += value
    return total
