"""Conversion between ASCII digits and Devanagari (Nepali) digits."""
from __future__ import annotations

from typing import Union

from .exceptions import InvalidNumeralError

__all__ = [
    "NEPALI_DIGITS",
    "from_nepali_numerals",
    "pad_nepali",
    "to_nepali_numerals",
]

NEPALI_DIGITS = "०१२३४५६७८९"
_TO_NEPALI = str.maketrans("0123456789", NEPALI_DIGITS)
_TO_ASCII = str.maketrans(NEPALI_DIGITS, "0123456789")


def to_nepali_numerals(value: Union[int, str]) -> str:
    """Replace every ASCII digit with its Devanagari glyph.

    Anything that is not a digit (signs, separators, month names) passes
    through unchanged, so the function also works on formatted strings.
    """

    return str(value).translate(_TO_NEPALI)


def from_nepali_numerals(text: str) -> int:
    """Parse a string of Devanagari or ASCII digits into an integer."""

    if not isinstance(text, str):
        raise InvalidNumeralError(f"expected a string, got {type(text).__name__}")
    if not text:
        raise InvalidNumeralError("empty numeral string")
    ascii_digits = text.translate(_TO_ASCII)
    # str.isdigit accepts superscripts and other scripts' digits
    if not all("0" <= char <= "9" for char in ascii_digits):
        raise InvalidNumeralError(f"not a Nepali numeral: {text!r}")
    return int(ascii_digits)


def pad_nepali(value: int, width: int = 2) -> str:
    return to_nepali_numerals(str(value).zfill(width))
