"""XML name character classes.

Implements ``NameStartChar`` and ``NameChar`` from XML 1.0 (fifth edition),
section 2.3, which the path grammar uses for tag and attribute names.
"""

from typing import Tuple

# Inclusive code point ranges for NameStartChar, excluding the ASCII letters,
# ":" and "_" which are tested directly.
_NAME_START_RANGES: Tuple[Tuple[int, int], ...] = (
    (0xC0, 0xD6),
    (0xD8, 0xF6),
    (0xF8, 0x2FF),
    (0x370, 0x37D),
    (0x37F, 0x1FFF),
    (0x200C, 0x200D),
    (0x2070, 0x218F),
    (0x2C00, 0x2FEF),
    (0x3001, 0xD7FF),
    (0xF900, 0xFDCF),
    (0xFDF0, 0xFFFD),
    (0x10000, 0xEFFFF),
)

_NAME_EXTRA_RANGES: Tuple[Tuple[int, int], ...] = (
    (0x300, 0x36F),
    (0x203F, 0x2040),
)

_ASCII_NAME_START = frozenset(
    ":_ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz"
)
_ASCII_NAME_EXTRA = frozenset("-.0123456789\u00b7")


def _in_ranges(code: int, ranges: Tuple[Tuple[int, int], ...]) -> bool:
    return any(low <= code <= high for low, high in ranges)


def is_name_start_char(char: str) -> bool:
    """Check if character can start an XML name."""
    if char in _ASCII_NAME_START:
        return True
    return _in_ranges(ord(char), _NAME_START_RANGES)


def is_name_char(char: str) -> bool:
    """Check if character can be part of an XML name."""
    if is_name_start_char(char) or char in _ASCII_NAME_EXTRA:
        return True
    return _in_ranges(ord(char), _NAME_EXTRA_RANGES)


def scan_name(text: str, start: int = 0) -> int:
    """Return the end offset of the longest name beginning at ``start``.

    Returns ``start`` itself when no name begins there.
    """
    if start >= len(text) or not is_name_start_char(text[start]):
        return start
    end = start + 1
    while end < len(text) and is_name_char(text[end]):
        end += 1
    return end


def is_valid_name(name: str) -> bool:
    """Check if string is a valid XML name."""
    return bool(name) and scan_name(name) == len(name)
