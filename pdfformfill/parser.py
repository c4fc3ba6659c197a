"""Field extraction: native AcroForm fields to uniform descriptors."""

from __future__ import annotations

import asyncio
import logging
from enum import Enum
from typing import List, Optional, Sequence, Tuple

from .document import FormDocument, NativeField, NativeKind
from .errors import DocumentError, ExtractionError, NativeFieldError
from .geometry import resolve_bounds, widget_rect
from .heuristics import classify_text, is_checkbox_like, is_date
from .models import CHECKED, FieldDescriptor, FieldKind
from .naming import split_names
from .utils import ensure_unique_names, get_logger

logger = get_logger(__name__)

DEFAULT_CHOICE_OPTIONS = ("Ja", "Nein")


class TextStrategy(str, Enum):
    """How native text fields are turned into descriptors.

    ``SPLIT`` emits a ``<name>_text`` / ``<name>_choice`` pair for every text
    field. ``CLASSIFY`` emits one descriptor whose kind comes from the
    heuristics. A call applies one strategy to every text field.
    """

    SPLIT = "split"
    CLASSIFY = "classify"


def _text_descriptors(
    native: NativeField,
    strategy: TextStrategy,
    choice_options: Sequence[str],
    log: logging.Logger,
) -> List[FieldDescriptor]:
    value = native.read_text()
    bounds = resolve_bounds(native)
    geometry = bounds or widget_rect(native)
    looks_like_date = is_date(native.name, value)
    looks_like_choice = is_checkbox_like(native.name, value, geometry)
    log.debug(
        "Text field '%s' value=%r date=%s checkbox_like=%s bounds=%s",
        native.name,
        value,
        looks_like_date,
        looks_like_choice,
        bounds,
    )

    if strategy == TextStrategy.SPLIT:
        text_name, choice_name = split_names(native.name)
        return [
            FieldDescriptor(name=text_name, kind=FieldKind.TEXT, value=value, bounds=bounds),
            FieldDescriptor(
                name=choice_name,
                kind=FieldKind.RADIO,
                value="",
                options=list(choice_options),
                bounds=bounds,
            ),
        ]

    kind = classify_text(native.name, value, geometry)
    if kind == FieldKind.RADIO:
        selected = value if value in choice_options else ""
        return [
            FieldDescriptor(
                name=native.name,
                kind=kind,
                value=selected,
                options=list(choice_options),
                bounds=bounds,
            )
        ]
    return [FieldDescriptor(name=native.name, kind=kind, value=value, bounds=bounds)]


def _describe(
    native: NativeField,
    strategy: TextStrategy,
    choice_options: Sequence[str],
    log: logging.Logger,
) -> List[FieldDescriptor]:
    kind = native.kind
    if kind == NativeKind.TEXT:
        return _text_descriptors(native, strategy, choice_options, log)

    if kind == NativeKind.CHECKBOX:
        value = CHECKED if native.is_checked() else ""
        return [FieldDescriptor(name=native.name, kind=FieldKind.CHECKBOX, value=value, bounds=resolve_bounds(native))]

    if kind == NativeKind.RADIO_GROUP:
        options = native.radio_options()
        if not options:
            raise NativeFieldError(f"Radio group '{native.name}' declares no options")
        return [
            FieldDescriptor(
                name=native.name,
                kind=FieldKind.RADIO,
                value=native.radio_value(),
                options=options,
                bounds=resolve_bounds(native),
            )
        ]

    if kind == NativeKind.DROPDOWN:
        options = native.dropdown_options()
        if not options:
            raise NativeFieldError(f"Dropdown '{native.name}' declares no options")
        selection = native.dropdown_selection()
        return [
            FieldDescriptor(
                name=native.name,
                kind=FieldKind.SELECT,
                value=selection[0] if selection else "",
                options=options,
                bounds=resolve_bounds(native),
            )
        ]

    # NativeKind.UNKNOWN: read it as plain text if the field allows it.
    log.debug("Field '%s' has unrecognized type %s; trying it as text", native.name, native.field_type)
    value = native.read_text()
    return [FieldDescriptor(name=native.name, kind=FieldKind.TEXT, value=value, bounds=resolve_bounds(native))]


def extract_fields(
    pdf_bytes: bytes,
    *,
    strategy: TextStrategy = TextStrategy.SPLIT,
    choice_options: Sequence[str] = DEFAULT_CHOICE_OPTIONS,
    log: Optional[logging.Logger] = None,
) -> List[FieldDescriptor]:
    """Return one or more descriptors per native form field, in AcroForm order.

    Args:
        pdf_bytes: The raw PDF document.
        strategy: How native text fields are represented, see :class:`TextStrategy`.
        choice_options: The options offered for yes/no choices derived from text fields.
        log: Diagnostics sink; defaults to this module's logger.

    Returns:
        Descriptor list. Fields that could not be read are left out and logged.

    Raises:
        ExtractionError: If the bytes cannot be parsed as a PDF.
    """

    log = log or logger
    strategy = TextStrategy(strategy)
    if not choice_options:
        raise ValueError("choice_options must not be empty")

    try:
        document = FormDocument.load(pdf_bytes, log)
    except DocumentError as exc:
        raise ExtractionError(str(exc)) from exc

    groups: List[Tuple[str, List[FieldDescriptor]]] = []
    skipped = 0
    natives = document.fields()
    for native in natives:
        try:
            groups.append((native.name, _describe(native, strategy, choice_options, log)))
        except NativeFieldError as exc:
            skipped += 1
            log.warning("Skipping field '%s': %s", native.name, exc)
        except Exception as exc:
            skipped += 1
            log.warning("Skipping field '%s' after unexpected error: %r", native.name, exc)

    unique = ensure_unique_names(groups, log)
    log.info(
        "Extracted %d descriptors from %d native fields (%d skipped, strategy=%s)",
        len(unique),
        len(natives),
        skipped,
        strategy.value,
    )
    return unique


async def extract(
    pdf_bytes: bytes,
    *,
    strategy: TextStrategy = TextStrategy.SPLIT,
    choice_options: Sequence[str] = DEFAULT_CHOICE_OPTIONS,
    log: Optional[logging.Logger] = None,
) -> List[FieldDescriptor]:
    """Async variant of :func:`extract_fields`; parsing runs in a worker thread."""

    return await asyncio.to_thread(
        extract_fields,
        pdf_bytes,
        strategy=strategy,
        choice_options=choice_options,
        log=log,
    )


__all__ = ["DEFAULT_CHOICE_OPTIONS", "TextStrategy", "extract", "extract_fields"]
