"""pdfformfill package."""

from .document import FormDocument, NativeField, NativeKind
from .errors import DocumentError, ExtractionError, NativeFieldError, PdfFormError, WriteError
from .filler import fill, fill_fields
from .heuristics import classify_text, is_checkbox_like, is_date
from .models import Bounds, FieldDescriptor, FieldKind, Rect
from .naming import CHOICE_SUFFIX, TEXT_SUFFIX, split_names, strip_suffix
from .parser import TextStrategy, extract, extract_fields
from .pipeline import ParsedForm, apply_values, fill_parsed_form, parse_pdf

__all__ = [
	"Bounds",
	"CHOICE_SUFFIX",
	"DocumentError",
	"ExtractionError",
	"FieldDescriptor",
	"FieldKind",
	"FormDocument",
	"NativeField",
	"NativeFieldError",
	"NativeKind",
	"ParsedForm",
	"PdfFormError",
	"Rect",
	"TEXT_SUFFIX",
	"TextStrategy",
	"WriteError",
	"apply_values",
	"classify_text",
	"extract",
	"extract_fields",
	"fill",
	"fill_fields",
	"fill_parsed_form",
	"is_checkbox_like",
	"is_date",
	"parse_pdf",
	"split_names",
	"strip_suffix",
]
