"""Typed AcroForm access on top of pypdf.

``FormDocument`` loads a PDF into a ``pypdf.PdfWriter`` so the same object can
be walked, edited and serialized. ``NativeField`` wraps one terminal field of
the AcroForm tree and exposes getters/setters per native widget kind; every
per-field problem surfaces as :class:`NativeFieldError`.
"""

from __future__ import annotations

import logging
from enum import Enum
from io import BytesIO
from typing import Any, List, Optional, Set, Tuple

from pypdf import PdfWriter
from pypdf.generic import (
    ArrayObject,
    BooleanObject,
    DictionaryObject,
    IndirectObject,
    NameObject,
    TextStringObject,
)

from .errors import DocumentError, NativeFieldError
from .utils import get_logger

logger = get_logger(__name__)

# Field flag bits (PDF 32000-1, tables 226 and 230), counted from 1.
FLAG_RADIO = 1 << 15
FLAG_PUSHBUTTON = 1 << 16
FLAG_COMBO = 1 << 17
FLAG_EDIT = 1 << 18

OFF_STATE = "/Off"
DEFAULT_ON_STATE = "/Yes"

Widget = Tuple[Any, DictionaryObject]


class NativeKind(str, Enum):
    """Field kind as declared by the PDF itself."""

    TEXT = "text"
    CHECKBOX = "checkbox"
    RADIO_GROUP = "radio_group"
    DROPDOWN = "dropdown"
    UNKNOWN = "unknown"


def resolve_object(obj: Any) -> Any:
    if obj is None:
        return None
    return obj.get_object() if hasattr(obj, "get_object") else obj


def _text(obj: Any) -> str:
    obj = resolve_object(obj)
    if isinstance(obj, str):
        return str(obj)
    if isinstance(obj, bytes):
        return obj.decode("latin-1")
    raise NativeFieldError(f"Expected a string value, got {type(obj).__name__}")


def _appearance_states(widget: DictionaryObject) -> List[str]:
    appearance = resolve_object(widget.get("/AP"))
    if not isinstance(appearance, DictionaryObject):
        return []
    normal = resolve_object(appearance.get("/N"))
    if not isinstance(normal, DictionaryObject):
        return []
    return [str(key) for key in normal.keys()]


def _on_state(widget: DictionaryObject) -> Optional[str]:
    for state in _appearance_states(widget):
        if state != OFF_STATE:
            return state
    return None


def _is_widget(node: DictionaryObject) -> bool:
    return node.get("/Subtype") == "/Widget" or "/Rect" in node


class NativeField:
    """One terminal AcroForm field and its widget annotations."""

    def __init__(self, name: str, node: DictionaryObject, widgets: List[Widget], document: "FormDocument"):
        self.name = name
        self.node = node
        self.widgets = widgets
        self._document = document

    def __repr__(self) -> str:
        return f"NativeField(name={self.name!r}, kind={self.kind.value})"

    @property
    def document(self) -> "FormDocument":
        return self._document

    def inherited(self, key: str) -> Any:
        """Look up an inheritable attribute through the ``/Parent`` chain."""

        seen: Set[int] = set()
        current: Any = self.node
        while isinstance(current, DictionaryObject) and id(current) not in seen:
            seen.add(id(current))
            if key in current:
                return resolve_object(current.get(key))
            current = resolve_object(current.get("/Parent"))
        return None

    def _flags(self) -> int:
        flags = self.inherited("/Ff")
        try:
            return int(flags) if flags is not None else 0
        except (TypeError, ValueError):
            return 0

    @property
    def field_type(self) -> Optional[str]:
        value = self.inherited("/FT")
        return str(value) if value is not None else None

    @property
    def kind(self) -> NativeKind:
        field_type = self.field_type
        flags = self._flags()
        if field_type == "/Tx":
            return NativeKind.TEXT
        if field_type == "/Btn":
            if flags & FLAG_RADIO:
                return NativeKind.RADIO_GROUP
            if flags & FLAG_PUSHBUTTON:
                return NativeKind.UNKNOWN
            return NativeKind.CHECKBOX
        if field_type == "/Ch" and flags & FLAG_COMBO:
            return NativeKind.DROPDOWN
        return NativeKind.UNKNOWN

    def _require(self, *kinds: NativeKind) -> None:
        kind = self.kind
        if kind not in kinds:
            expected = " or ".join(k.value for k in kinds)
            raise NativeFieldError(f"Field '{self.name}' is a {kind.value} field, not {expected}")

    def _set(self, target: DictionaryObject, key: str, value: Any) -> None:
        target[NameObject(key)] = value
        self._document.modified = True

    # Text -----------------------------------------------------------------

    def _require_text(self) -> None:
        if self.kind == NativeKind.UNKNOWN and self.field_type is None:
            return
        self._require(NativeKind.TEXT)

    def read_text(self) -> str:
        self._require_text()
        value = self.inherited("/V")
        if value is None:
            return ""
        return _text(value)

    def write_text(self, value: str) -> None:
        self._require_text()
        max_length = self.inherited("/MaxLen")
        if max_length is not None and len(value) > int(max_length):
            raise NativeFieldError(
                f"Value of length {len(value)} exceeds /MaxLen {int(max_length)} of field '{self.name}'"
            )
        self._set(self.node, "/V", TextStringObject(value))

    # Checkbox -------------------------------------------------------------

    def is_checked(self) -> bool:
        self._require(NativeKind.CHECKBOX)
        value = self.inherited("/V")
        if value is None and self.widgets:
            value = resolve_object(self.widgets[0][1].get("/AS"))
        return value is not None and str(value) not in {OFF_STATE, ""}

    def set_checked(self, checked: bool) -> None:
        self._require(NativeKind.CHECKBOX)
        if not checked:
            self._set(self.node, "/V", NameObject(OFF_STATE))
            for _, widget in self.widgets:
                self._set(widget, "/AS", NameObject(OFF_STATE))
            return
        states = [_on_state(widget) for _, widget in self.widgets]
        on_state = next((state for state in states if state), DEFAULT_ON_STATE)
        self._set(self.node, "/V", NameObject(on_state))
        for _, widget in self.widgets:
            available = _appearance_states(widget)
            state = on_state if not available or on_state in available else OFF_STATE
            self._set(widget, "/AS", NameObject(state))

    # Radio group ----------------------------------------------------------

    def _radio_entries(self) -> List[Tuple[str, str, DictionaryObject]]:
        """Return ``(option, state, widget)`` per selectable widget.

        Options come from ``/Opt`` when present (indexed like the widgets),
        otherwise from the widget's on-state name.
        """

        labels: List[str] = []
        opt = self.inherited("/Opt")
        if isinstance(opt, ArrayObject):
            labels = [_text(item) for item in opt]
        entries: List[Tuple[str, str, DictionaryObject]] = []
        for index, (_, widget) in enumerate(self.widgets):
            state = _on_state(widget)
            if state is None:
                continue
            label = labels[index] if index < len(labels) else state[1:]
            entries.append((label, state, widget))
        return entries

    def radio_options(self) -> List[str]:
        self._require(NativeKind.RADIO_GROUP)
        options: List[str] = []
        for label, _, _ in self._radio_entries():
            if label not in options:
                options.append(label)
        return options

    def radio_value(self) -> str:
        self._require(NativeKind.RADIO_GROUP)
        value = self.inherited("/V")
        if value is None or str(value) in {OFF_STATE, ""}:
            return ""
        state = str(value)
        for label, entry_state, _ in self._radio_entries():
            if entry_state == state:
                return label
        return state.lstrip("/")

    def select_radio(self, option: str) -> None:
        self._require(NativeKind.RADIO_GROUP)
        entries = self._radio_entries()
        selected = next((state for label, state, _ in entries if label == option), None)
        if selected is None:
            raise NativeFieldError(f"'{option}' is not an option of radio group '{self.name}'")
        self._set(self.node, "/V", NameObject(selected))
        for _, widget in self.widgets:
            state = selected if _on_state(widget) == selected else OFF_STATE
            self._set(widget, "/AS", NameObject(state))

    # Dropdown -------------------------------------------------------------

    def _choice_pairs(self) -> List[Tuple[str, str]]:
        """Return ``(export value, display text)`` for every declared option."""

        opt = self.inherited("/Opt")
        if opt is None:
            return []
        if not isinstance(opt, ArrayObject):
            raise NativeFieldError(f"Field '{self.name}' has a malformed /Opt entry")
        pairs: List[Tuple[str, str]] = []
        for raw in opt:
            item = resolve_object(raw)
            if isinstance(item, ArrayObject) and len(item) >= 2:
                pairs.append((_text(item[0]), _text(item[1])))
            else:
                text = _text(item)
                pairs.append((text, text))
        return pairs

    def dropdown_options(self) -> List[str]:
        self._require(NativeKind.DROPDOWN)
        return [display for _, display in self._choice_pairs()]

    def dropdown_selection(self) -> List[str]:
        self._require(NativeKind.DROPDOWN)
        value = self.inherited("/V")
        if value is None:
            return []
        raw_values = list(value) if isinstance(value, ArrayObject) else [value]
        display_by_export = dict(self._choice_pairs())
        selection = []
        for raw in raw_values:
            text = _text(raw)
            selection.append(display_by_export.get(text, text))
        return selection

    def select_dropdown(self, option: str) -> None:
        self._require(NativeKind.DROPDOWN)
        export: Optional[str] = None
        for export_value, display in self._choice_pairs():
            if option in {display, export_value}:
                export = export_value
                break
        if export is None:
            if not self._flags() & FLAG_EDIT:
                raise NativeFieldError(f"'{option}' is not an option of dropdown '{self.name}'")
            export = option
        self._set(self.node, "/V", TextStringObject(export))
        if "/I" in self.node:
            del self.node["/I"]


class FormDocument:
    """A loaded PDF whose AcroForm can be read, edited and saved."""

    def __init__(self, writer: PdfWriter, log: Optional[logging.Logger] = None):
        self._writer = writer
        self._logger = log or logger
        self._fields: Optional[List[NativeField]] = None
        self.modified = False

    @classmethod
    def load(cls, data: bytes, log: Optional[logging.Logger] = None) -> "FormDocument":
        if not data:
            raise DocumentError("PDF byte buffer is empty")
        try:
            writer = PdfWriter(clone_from=BytesIO(bytes(data)))
        except Exception as exc:
            raise DocumentError(f"Failed to read PDF bytes: {exc}") from exc
        return cls(writer, log)

    def _acroform(self) -> Optional[DictionaryObject]:
        acroform = resolve_object(self._writer._root_object.get("/AcroForm"))  # type: ignore[attr-defined]
        return acroform if isinstance(acroform, DictionaryObject) else None

    def fields(self) -> List[NativeField]:
        """Return terminal fields in AcroForm order (depth-first)."""

        if self._fields is None:
            self._fields = self._collect_fields()
        return list(self._fields)

    def field(self, name: str) -> Optional[NativeField]:
        for native in self.fields():
            if native.name == name:
                return native
        return None

    def _collect_fields(self) -> List[NativeField]:
        acroform = self._acroform()
        if acroform is None:
            self._logger.info("PDF has no /AcroForm; no fields to enumerate")
            return []
        top_level = resolve_object(acroform.get("/Fields"))
        if not isinstance(top_level, ArrayObject):
            self._logger.warning("/AcroForm has no usable /Fields array")
            return []
        collected: List[NativeField] = []
        visited: Set[Any] = set()
        for ref in top_level:
            try:
                self._walk(ref, None, visited, collected)
            except Exception as exc:
                self._logger.warning("Skipping malformed field subtree %r: %s", ref, exc)
        return collected

    def _walk(self, ref: Any, parent_name: Optional[str], visited: Set[Any], out: List[NativeField]) -> None:
        node = resolve_object(ref)
        if not isinstance(node, DictionaryObject):
            self._logger.debug("Ignoring non-dictionary field entry %r", ref)
            return
        key = ref.idnum if isinstance(ref, IndirectObject) else id(node)
        if key in visited:
            self._logger.warning("Field tree cycle detected at %r", ref)
            return
        visited.add(key)

        partial = node.get("/T")
        partial_name = _text(partial) if partial is not None else None
        if parent_name and partial_name:
            name = f"{parent_name}.{partial_name}"
        else:
            name = partial_name or parent_name

        child_fields: List[Any] = []
        widgets: List[Widget] = []
        kids = resolve_object(node.get("/Kids"))
        if isinstance(kids, ArrayObject):
            for kid_ref in kids:
                kid = resolve_object(kid_ref)
                if not isinstance(kid, DictionaryObject):
                    continue
                if "/T" in kid:
                    child_fields.append(kid_ref)
                else:
                    widgets.append((kid_ref, kid))
        for child in child_fields:
            self._walk(child, name, visited, out)
        if child_fields and not widgets:
            return
        if not name:
            self._logger.debug("Ignoring field without a name")
            return
        if not widgets and kids is None and _is_widget(node):
            widgets = [(ref, node)]
        out.append(NativeField(name, node, widgets, self))

    def page_index(self, widget_ref: Any, widget: DictionaryObject) -> Optional[int]:
        """Return the 0-based page holding ``widget``, or None."""

        page_ref = widget.get("/P")
        page_ids = [page.indirect_reference.idnum for page in self._writer.pages if page.indirect_reference]
        if isinstance(page_ref, IndirectObject) and page_ref.idnum in page_ids:
            return page_ids.index(page_ref.idnum)
        if not isinstance(widget_ref, IndirectObject):
            return None
        for index, page in enumerate(self._writer.pages):
            annots = resolve_object(page.get("/Annots"))
            if not isinstance(annots, ArrayObject):
                continue
            if any(isinstance(annot, IndirectObject) and annot.idnum == widget_ref.idnum for annot in annots):
                return index
        return None

    def to_bytes(self) -> bytes:
        """Serialize the document, asking viewers to rebuild appearances if edited."""

        buffer = BytesIO()
        try:
            if self.modified:
                acroform = self._acroform()
                if acroform is not None:
                    acroform[NameObject("/NeedAppearances")] = BooleanObject(True)
            self._writer.write(buffer)
        except Exception as exc:
            raise DocumentError(f"Failed to serialize PDF: {exc}") from exc
        return buffer.getvalue()


__all__ = ["FormDocument", "NativeField", "NativeKind", "resolve_object"]
