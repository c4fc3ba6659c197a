from __future__ import annotations

from io import BytesIO
from typing import Any, Dict, Optional, Sequence, Tuple

import pytest
from pypdf import PdfWriter
from pypdf.generic import (
    ArrayObject,
    DecodedStreamObject,
    DictionaryObject,
    FloatObject,
    IndirectObject,
    NameObject,
    NumberObject,
    TextStringObject,
)

RectTuple = Tuple[float, float, float, float]


class FormBuilder:
    """Build small AcroForm PDFs in memory."""

    def __init__(self, pages: int = 1):
        self.writer = PdfWriter()
        for _ in range(pages):
            self.writer.add_blank_page(width=612, height=792)
        self.fields = ArrayObject()
        self.with_acroform = True

    def _page_ref(self, page: int) -> IndirectObject:
        return self.writer.pages[page].indirect_reference

    def _appearance(self, *states: str) -> DictionaryObject:
        normal = DictionaryObject()
        for state in states:
            normal[NameObject(state)] = self.writer._add_object(DecodedStreamObject())
        appearance = DictionaryObject()
        appearance[NameObject("/N")] = normal
        return appearance

    def _widget(self, rect: Optional[RectTuple], page: int, link_page: bool = True) -> DictionaryObject:
        widget = DictionaryObject()
        widget[NameObject("/Type")] = NameObject("/Annot")
        widget[NameObject("/Subtype")] = NameObject("/Widget")
        if rect is not None:
            widget[NameObject("/Rect")] = ArrayObject([FloatObject(v) for v in rect])
        if link_page:
            widget[NameObject("/P")] = self._page_ref(page)
        return widget

    def _annotate(self, ref: IndirectObject, page: int) -> None:
        page_obj = self.writer.pages[page]
        if "/Annots" not in page_obj:
            page_obj[NameObject("/Annots")] = ArrayObject()
        page_obj["/Annots"].append(ref)

    def _add_field(
        self, node: DictionaryObject, page: int, top_level: bool = True, annotate: bool = True
    ) -> IndirectObject:
        ref = self.writer._add_object(node)
        if annotate:
            self._annotate(ref, page)
        if top_level:
            self.fields.append(ref)
        return ref

    def text(
        self,
        name: str,
        value: Any = None,
        rect: Optional[RectTuple] = (50, 700, 250, 720),
        page: int = 0,
        max_length: Optional[int] = None,
        link_page: bool = True,
        annotate: bool = True,
    ) -> IndirectObject:
        node = self._widget(rect, page, link_page)
        node[NameObject("/FT")] = NameObject("/Tx")
        node[NameObject("/T")] = TextStringObject(name)
        if isinstance(value, str):
            node[NameObject("/V")] = TextStringObject(value)
        elif value is not None:
            node[NameObject("/V")] = value
        if max_length is not None:
            node[NameObject("/MaxLen")] = NumberObject(max_length)
        return self._add_field(node, page, annotate=annotate)

    def checkbox(
        self,
        name: str,
        checked: bool = False,
        on_state: str = "/Yes",
        rect: RectTuple = (50, 650, 62, 662),
        page: int = 0,
    ) -> IndirectObject:
        node = self._widget(rect, page)
        node[NameObject("/FT")] = NameObject("/Btn")
        node[NameObject("/T")] = TextStringObject(name)
        node[NameObject("/AP")] = self._appearance(on_state, "/Off")
        state = on_state if checked else "/Off"
        node[NameObject("/V")] = NameObject(state)
        node[NameObject("/AS")] = NameObject(state)
        return self._add_field(node, page)

    def checkbox_group(self, name: str, on_states: Sequence[str], page: int = 0) -> IndirectObject:
        parent = DictionaryObject()
        parent[NameObject("/FT")] = NameObject("/Btn")
        parent[NameObject("/T")] = TextStringObject(name)
        parent[NameObject("/V")] = NameObject("/Off")
        parent_ref = self.writer._add_object(parent)
        kids = ArrayObject()
        for index, on_state in enumerate(on_states):
            x = 300 + index * 20
            kid = self._widget((x, 650, x + 12, 662), page)
            kid[NameObject("/Parent")] = parent_ref
            kid[NameObject("/AP")] = self._appearance(on_state, "/Off")
            kid[NameObject("/AS")] = NameObject("/Off")
            kid_ref = self.writer._add_object(kid)
            self._annotate(kid_ref, page)
            kids.append(kid_ref)
        parent[NameObject("/Kids")] = kids
        self.fields.append(parent_ref)
        return parent_ref

    def radio(
        self,
        name: str,
        options: Sequence[str],
        selected: Optional[str] = None,
        page: int = 0,
        with_appearances: bool = True,
    ) -> IndirectObject:
        parent = DictionaryObject()
        parent[NameObject("/FT")] = NameObject("/Btn")
        parent[NameObject("/Ff")] = NumberObject(1 << 15)
        parent[NameObject("/T")] = TextStringObject(name)
        if selected is not None:
            parent[NameObject("/V")] = NameObject(f"/{selected}")
        parent_ref = self.writer._add_object(parent)
        kids = ArrayObject()
        for index, option in enumerate(options):
            x = 50 + index * 20
            kid = self._widget((x, 600, x + 12, 612), page)
            kid[NameObject("/Parent")] = parent_ref
            if with_appearances:
                kid[NameObject("/AP")] = self._appearance(f"/{option}", "/Off")
            state = f"/{option}" if option == selected else "/Off"
            kid[NameObject("/AS")] = NameObject(state)
            kid_ref = self.writer._add_object(kid)
            self._annotate(kid_ref, page)
            kids.append(kid_ref)
        parent[NameObject("/Kids")] = kids
        self.fields.append(parent_ref)
        return parent_ref

    def dropdown(
        self,
        name: str,
        options: Sequence[Any],
        selected: Optional[str] = None,
        rect: RectTuple = (50, 550, 200, 570),
        page: int = 0,
        editable: bool = False,
    ) -> IndirectObject:
        node = self._widget(rect, page)
        node[NameObject("/FT")] = NameObject("/Ch")
        flags = 1 << 17
        if editable:
            flags |= 1 << 18
        node[NameObject("/Ff")] = NumberObject(flags)
        node[NameObject("/T")] = TextStringObject(name)
        opt = ArrayObject()
        for option in options:
            if isinstance(option, tuple):
                opt.append(ArrayObject([TextStringObject(option[0]), TextStringObject(option[1])]))
            else:
                opt.append(TextStringObject(option))
        node[NameObject("/Opt")] = opt
        if selected is not None:
            node[NameObject("/V")] = TextStringObject(selected)
        return self._add_field(node, page)

    def push_button(self, name: str, page: int = 0) -> IndirectObject:
        node = self._widget((300, 50, 360, 70), page)
        node[NameObject("/FT")] = NameObject("/Btn")
        node[NameObject("/Ff")] = NumberObject(1 << 16)
        node[NameObject("/T")] = TextStringObject(name)
        return self._add_field(node, page)

    def untyped(self, name: str, value: str, page: int = 0) -> IndirectObject:
        node = self._widget((50, 500, 250, 520), page)
        node[NameObject("/T")] = TextStringObject(name)
        node[NameObject("/V")] = TextStringObject(value)
        return self._add_field(node, page)

    def text_group(self, parent_name: str, children: Dict[str, str], page: int = 0) -> IndirectObject:
        parent = DictionaryObject()
        parent[NameObject("/FT")] = NameObject("/Tx")
        parent[NameObject("/T")] = TextStringObject(parent_name)
        parent_ref = self.writer._add_object(parent)
        kids = ArrayObject()
        for index, (child_name, value) in enumerate(children.items()):
            y = 450 - index * 30
            child = self._widget((50, y, 250, y + 20), page)
            child[NameObject("/T")] = TextStringObject(child_name)
            child[NameObject("/V")] = TextStringObject(value)
            child[NameObject("/Parent")] = parent_ref
            kids.append(self._add_field(child, page, top_level=False))
        parent[NameObject("/Kids")] = kids
        self.fields.append(parent_ref)
        return parent_ref

    def build(self) -> bytes:
        if self.with_acroform:
            acroform = DictionaryObject()
            acroform[NameObject("/Fields")] = self.fields
            self.writer._root_object[NameObject("/AcroForm")] = acroform
        buffer = BytesIO()
        self.writer.write(buffer)
        return buffer.getvalue()


@pytest.fixture
def form_builder():
    return FormBuilder


@pytest.fixture
def choice_only_pdf() -> bytes:
    builder = FormBuilder()
    builder.checkbox("agree", checked=True)
    builder.checkbox("newsletter", checked=False)
    builder.radio("color", ["Red", "Green", "Blue"], selected="Green")
    builder.dropdown("country", ["Germany", "France", "Spain"], selected="France")
    return builder.build()


@pytest.fixture
def mixed_pdf() -> bytes:
    builder = FormBuilder(pages=2)
    builder.text("Vorname", "Max")
    builder.text("Geburtsdatum", "", rect=(50, 680, 150, 695))
    builder.text("Zustimmung [ ]", "", rect=(300, 700, 312, 712), page=1)
    builder.checkbox("agree", checked=False)
    builder.radio("color", ["Red", "Green"], selected=None)
    builder.dropdown("country", ["Germany", "France"], selected=None)
    return builder.build()
