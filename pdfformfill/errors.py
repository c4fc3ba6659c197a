"""Exception hierarchy for pdfformfill."""


class PdfFormError(Exception):
    pass


class DocumentError(PdfFormError):
    """The PDF could not be loaded or serialized."""


class NativeFieldError(PdfFormError):
    """A single native field could not be read or written.

    Raised by the document adapter; the extractor and the writer catch it
    per field and never let it escape.
    """


class ExtractionError(PdfFormError):
    """The byte buffer cannot be parsed as a form-bearing PDF."""


class WriteError(PdfFormError):
    """The document could not be loaded for filling or re-serialized."""


__all__ = [
    "PdfFormError",
    "DocumentError",
    "NativeFieldError",
    "ExtractionError",
    "WriteError",
]
