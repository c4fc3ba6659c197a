"""Suffix convention that lets one native text field become two descriptors.

A native text field ``Name`` is exposed as ``Name_text`` (its literal value)
and ``Name_choice`` (a yes/no choice). The writer strips the suffix again to
address the native field.
"""

from __future__ import annotations

from typing import Optional, Tuple

TEXT_SUFFIX = "_text"
CHOICE_SUFFIX = "_choice"
SUFFIXES = (TEXT_SUFFIX, CHOICE_SUFFIX)


def split_names(native_name: str) -> Tuple[str, str]:
    """Return the ``(text, choice)`` descriptor names for a native field."""

    return f"{native_name}{TEXT_SUFFIX}", f"{native_name}{CHOICE_SUFFIX}"


def strip_suffix(name: str) -> Tuple[str, Optional[str]]:
    """Split a descriptor name into its native base name and suffix.

    Names without a known suffix come back unchanged with ``None``. A bare
    suffix (``"_text"``) is not treated as suffixed since it has no base.
    """

    for suffix in SUFFIXES:
        if name.endswith(suffix) and len(name) > len(suffix):
            return name[: -len(suffix)], suffix
    return name, None


__all__ = ["CHOICE_SUFFIX", "SUFFIXES", "TEXT_SUFFIX", "split_names", "strip_suffix"]
