"""Heuristics that recover the semantic type of native text fields.

PDF authoring tools often render dates and tick boxes as plain text fields
(``"Geburtsdatum"``, ``"Zustimmung [ ]"``). The predicates here look at the
field name, its current value and the widget size to guess what the author
meant. They are pure: no logging, no I/O, no state between calls.

Patterns cover German and English field names.
"""

from __future__ import annotations

import re
from typing import Any, Optional, Sequence

from .models import FieldKind

SMALL_FIELD_MAX = 30.0
SQUARE_TOLERANCE = 8.0
SHORT_VALUE_MAX = 3

_DATE_NAME_PATTERNS: Sequence[re.Pattern] = tuple(
    re.compile(pattern)
    for pattern in (
        # German
        r"datum",
        r"geb(urts)?[_.-]?(datum|tag)",
        r"geburt",
        r"ausstellungs[_.-]?datum",
        r"eingangs[_.-]?datum",
        # English
        r"date",
        r"dob",
        r"birth[_.-]?date",
        r"issue[_.-]?date",
        r"entry[_.-]?date",
        r"start[_.-]?date",
        r"end[_.-]?date",
        # Abbreviations
        r"dt\.",
        r"geb\.",
    )
)

_DATE_VALUE_PATTERNS: Sequence[re.Pattern] = tuple(
    re.compile(pattern)
    for pattern in (
        r"^\d{1,2}[./-]\d{1,2}[./-]\d{2,4}$",
        r"^\d{4}[./-]\d{1,2}[./-]\d{1,2}$",
        r"^\d{1,2}\.\d{1,2}\.$",
    )
)

_CHECKBOX_NAME_PATTERNS: Sequence[re.Pattern] = tuple(
    re.compile(pattern)
    for pattern in (
        # Placeholders: [ ], ( ), { }, optionally holding a mark
        r"[\[({]\s*[x✓✔]?\s*[\])}]",
        r"[□■○●☐☑☒]",
        # German
        r"\b(ankreuz|kreuz|markier|auswahl|check|häkchen)",
        r"\b(ja|nein|j/n)\b",
        r"\bzutreffend(es)?\b",
        r"\bwählen?\b",
        r"\boptionen?\b",
        r"\bauswahlfeld\b",
        r"\bkästchen\b",
        # English
        r"\b(tick|mark|check|select|choice|box)\b",
        r"\b(yes|no|y/n)\b",
        r"\boption\b",
        r"\bselection\b",
    )
)

_CHECKBOX_VALUE_PATTERNS: Sequence[re.Pattern] = tuple(
    re.compile(pattern)
    for pattern in (
        r"^[x✓✔]$",
        r"^(ja|nein|yes|no)$",
        r"^(true|false|0|1|on|off)$",
        r"^(checked|unchecked|selected|none)$",
        r"^\s*[■●☑☒]\s*$",
        r"^\s*$",
    )
)


def _normalize(text: Optional[str]) -> str:
    return (text or "").strip().lower()


def is_date(name: str, value: str) -> bool:
    """Return True when the name or the current value looks like a date."""

    name_lower = _normalize(name)
    value_lower = _normalize(value)
    name_match = any(pattern.search(name_lower) for pattern in _DATE_NAME_PATTERNS)
    value_match = any(pattern.search(value_lower) for pattern in _DATE_VALUE_PATTERNS)
    return name_match or value_match


def has_checkbox_name(name: str) -> bool:
    # Underscores separate words in generated field names ("agree_yes").
    name_lower = _normalize(name).replace("_", " ")
    return any(pattern.search(name_lower) for pattern in _CHECKBOX_NAME_PATTERNS)


def has_checkbox_value(value: str) -> bool:
    value_lower = _normalize(value)
    return any(pattern.search(value_lower) for pattern in _CHECKBOX_VALUE_PATTERNS)


def is_small_square(geometry: Any) -> bool:
    """Return True for widgets small and square enough to be a tick box.

    ``geometry`` is anything with ``width`` and ``height``; missing or
    unreadable geometry counts as not small.
    """

    if geometry is None:
        return False
    try:
        width = abs(float(geometry.width))
        height = abs(float(geometry.height))
    except (AttributeError, TypeError, ValueError):
        return False
    is_square = abs(width - height) < SQUARE_TOLERANCE
    is_small = width < SMALL_FIELD_MAX and height < SMALL_FIELD_MAX
    return is_square and is_small


def is_checkbox_like(name: str, value: str, geometry: Any = None) -> bool:
    """Return True when a text field most likely stands for a tick box."""

    by_name = has_checkbox_name(name)
    by_value = has_checkbox_value(value)
    by_size = is_small_square(geometry)
    has_short_value = len(_normalize(value)) <= SHORT_VALUE_MAX
    return by_name or by_value or (by_size and has_short_value)


def classify_text(name: str, value: str, geometry: Any = None) -> FieldKind:
    if is_date(name, value):
        return FieldKind.DATE
    if is_checkbox_like(name, value, geometry):
        return FieldKind.RADIO
    return FieldKind.TEXT


__all__ = [
    "SHORT_VALUE_MAX",
    "SMALL_FIELD_MAX",
    "SQUARE_TOLERANCE",
    "classify_text",
    "has_checkbox_name",
    "has_checkbox_value",
    "is_checkbox_like",
    "is_date",
    "is_small_square",
]
