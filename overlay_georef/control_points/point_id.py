"""Normalization of ground control point identifiers.

Identifiers are typed by hand, often on Japanese keyboards, so the same point
shows up as ``ａ１``, ``A 1``, ``a01`` or ``A-01``. Every variant is folded to
the canonical ``A-01`` form before points are joined on identifier.
"""

import re

_FULL_WIDTH_OFFSET = 0xFEE0
_DASHES = "－−‐―"
_VALID_ID = re.compile(r"^[A-Z]-\d{2}$")
_SINGLE_TRAILING_DIGIT = re.compile(r"^(.*\D)?(\d)$")
_SHORT_ID = re.compile(r"^([A-Z]+)(\d{2})$")


def _to_half_width(char: str) -> str:
    if "Ａ" <= char <= "Ｚ" or "ａ" <= char <= "ｚ" or "０" <= char <= "９":
        return chr(ord(char) - _FULL_WIDTH_OFFSET)
    if char in _DASHES:
        return "-"
    return char


def format_point_id(value: str) -> str:
    """Fold a hand-typed point identifier to canonical form.

    Steps: full-width letters, digits and dashes become half-width; letters are
    upper-cased; all whitespace (including the ideographic space) is removed;
    a single trailing digit is zero-padded to two; a short ``LETTERS+2 digits``
    identifier of at most three characters gets a dash before the digits.

    Blank input is returned unchanged.

    Example:
        >>> format_point_id("ａ１")
        'A-01'
    """
    original = value.strip()
    if not original:
        return value

    converted = "".join(_to_half_width(char) for char in original).upper()
    converted = "".join(converted.split())
    if not converted:
        return original

    match = _SINGLE_TRAILING_DIGIT.match(converted)
    if match:
        converted = f"{match.group(1) or ''}0{match.group(2)}"

    if len(converted) <= 3:
        match = _SHORT_ID.match(converted)
        if match:
            return f"{match.group(1)}-{match.group(2)}"

    return converted


def is_valid_point_id(value: str) -> bool:
    """Whether ``value`` is blank or already in ``X-nn`` form."""
    if not value.strip():
        return True
    return _VALID_ID.match(value) is not None
