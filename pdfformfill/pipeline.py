"""High level helpers tying extraction, value edits and filling together."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, List, Mapping, Optional, Sequence

from .filler import fill_fields
from .models import FieldDescriptor
from .parser import extract_fields


@dataclass
class ParsedForm:
    pdf_bytes: bytes
    fields: List[FieldDescriptor]

    def to_public_dict(self) -> dict:
        return {
            "field_count": len(self.fields),
            "fields": [descriptor.to_dict() for descriptor in self.fields],
        }


def parse_pdf(pdf_bytes: bytes, **options: Any) -> ParsedForm:
    """Extract descriptors and keep the source bytes for the later fill."""

    return ParsedForm(pdf_bytes=pdf_bytes, fields=extract_fields(pdf_bytes, **options))


def apply_values(fields: Sequence[FieldDescriptor], values: Mapping[str, str]) -> List[FieldDescriptor]:
    """Return new descriptors with values replaced by descriptor name.

    Names missing from ``values`` keep their current value; names in
    ``values`` that match no descriptor are ignored. ``fields`` is not modified.
    """

    return [
        replace(descriptor, value=str(values[descriptor.name]), options=list(descriptor.options))
        if descriptor.name in values
        else replace(descriptor, options=list(descriptor.options))
        for descriptor in fields
    ]


def fill_parsed_form(parsed_form: ParsedForm, values: Optional[Mapping[str, str]] = None, **options: Any) -> bytes:
    fields = apply_values(parsed_form.fields, values) if values else parsed_form.fields
    return fill_fields(parsed_form.pdf_bytes, fields, **options)


__all__ = ["ParsedForm", "apply_values", "fill_parsed_form", "parse_pdf"]
