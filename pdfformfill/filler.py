"""Write descriptor values back into a PDF's AcroForm fields."""

from __future__ import annotations

import asyncio
import logging
from typing import Dict, Optional, Sequence

from .document import FormDocument, NativeField, NativeKind
from .errors import DocumentError, NativeFieldError, WriteError
from .models import CHECKED, FieldDescriptor, FieldKind
from .naming import CHOICE_SUFFIX, TEXT_SUFFIX, strip_suffix
from .utils import get_logger

logger = get_logger(__name__)


def resolve_target(document: FormDocument, name: str) -> Optional[NativeField]:
    """Find the native field a descriptor name refers to.

    The name is tried as-is first so native fields that happen to end in a
    suffix keep working; otherwise ``_text``/``_choice`` is stripped.
    """

    native = document.field(name)
    if native is not None:
        return native
    base, suffix = strip_suffix(name)
    if suffix is None:
        return None
    return document.field(base)


def _paired_text_values(descriptors: Sequence[FieldDescriptor]) -> Dict[str, str]:
    values: Dict[str, str] = {}
    for descriptor in descriptors:
        base, suffix = strip_suffix(descriptor.name)
        if suffix == TEXT_SUFFIX and descriptor.value:
            values[base] = descriptor.value
    return values


def _apply(
    native: NativeField,
    descriptor: FieldDescriptor,
    paired_text: Dict[str, str],
    log: logging.Logger,
) -> bool:
    """Apply one descriptor; return False when it was deliberately left alone."""

    kind = descriptor.kind
    value = descriptor.value

    if kind in {FieldKind.TEXT, FieldKind.DATE}:
        native.write_text(value)
        return True

    if kind == FieldKind.CHECKBOX:
        native.set_checked(value == CHECKED)
        return True

    # Radio and select leave the current selection untouched when empty.
    if not value:
        log.debug("No value for %s field '%s'; leaving it untouched", kind.value, descriptor.name)
        return False

    if native.kind == NativeKind.TEXT:
        base, suffix = strip_suffix(descriptor.name)
        if suffix == CHOICE_SUFFIX and base in paired_text:
            log.debug("'%s' has a text value already; not writing choice '%s'", base, value)
            return False
        native.write_text(value)
        return True

    if kind == FieldKind.RADIO:
        native.select_radio(value)
        return True

    if kind == FieldKind.SELECT:
        native.select_dropdown(value)
        return True

    raise NativeFieldError(f"Unsupported descriptor kind {kind!r}")


def fill_fields(
    pdf_bytes: bytes,
    descriptors: Sequence[FieldDescriptor],
    *,
    log: Optional[logging.Logger] = None,
) -> bytes:
    """Return a copy of ``pdf_bytes`` with the descriptor values applied.

    The document is loaded fresh on every call and ``descriptors`` is never
    modified. A descriptor that cannot be applied (unknown field, invalid
    option, kind mismatch) is logged and skipped. ``_choice`` descriptors are
    applied after all others so a split pair gives the same result in any
    order.

    Raises:
        WriteError: If the document cannot be loaded or serialized.
    """

    log = log or logger
    try:
        document = FormDocument.load(pdf_bytes, log)
    except DocumentError as exc:
        raise WriteError(str(exc)) from exc

    paired_text = _paired_text_values(descriptors)
    applied = 0
    failed = 0
    # Choices go last so the text half of a pair cannot overwrite them.
    ordered = sorted(descriptors, key=lambda d: strip_suffix(d.name)[1] == CHOICE_SUFFIX)
    for descriptor in ordered:
        try:
            native = resolve_target(document, descriptor.name)
            if native is None:
                raise NativeFieldError(f"No form field named '{descriptor.name}'")
            if _apply(native, descriptor, paired_text, log):
                applied += 1
                log.debug("Applied %s '%s' -> %r", descriptor.kind.value, native.name, descriptor.value)
        except Exception as exc:
            failed += 1
            log.warning("Could not fill field '%s': %s", descriptor.name, exc)

    try:
        filled = document.to_bytes()
    except DocumentError as exc:
        raise WriteError(str(exc)) from exc
    log.info("Filled %d of %d descriptors (%d failed)", applied, len(descriptors), failed)
    return filled


async def fill(
    pdf_bytes: bytes,
    descriptors: Sequence[FieldDescriptor],
    *,
    log: Optional[logging.Logger] = None,
) -> bytes:
    """Async variant of :func:`fill_fields`; runs in a worker thread."""

    return await asyncio.to_thread(fill_fields, pdf_bytes, descriptors, log=log)


__all__ = ["fill", "fill_fields", "resolve_target"]
