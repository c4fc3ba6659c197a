"""Data models for pdfformfill."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, NamedTuple, Optional


class FieldKind(str, Enum):
    """Semantic kind of a field descriptor."""

    TEXT = "text"
    CHECKBOX = "checkbox"
    RADIO = "radio"
    SELECT = "select"
    DATE = "date"


CHECKED = "checked"


class Rect(NamedTuple):
    x: float
    y: float
    width: float
    height: float


@dataclass(frozen=True)
class Bounds:
    """Widget rectangle in PDF user space plus its 0-based page index."""

    x: float
    y: float
    width: float
    height: float
    page: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "x": self.x,
            "y": self.y,
            "width": self.width,
            "height": self.height,
            "page": self.page,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Bounds":
        return cls(
            x=float(data["x"]),
            y=float(data["y"]),
            width=float(data["width"]),
            height=float(data["height"]),
            page=int(data["page"]),
        )


@dataclass
class FieldDescriptor:
    """Uniform description of one form field as seen by calling code.

    ``options`` is only populated for ``radio`` and ``select`` descriptors.
    ``bounds`` is ``None`` whenever the widget geometry could not be resolved.
    """

    name: str
    kind: FieldKind
    value: str = ""
    options: List[str] = field(default_factory=list)
    bounds: Optional[Bounds] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "name": self.name,
            "type": self.kind.value,
            "value": self.value,
        }
        if self.options:
            data["options"] = list(self.options)
        if self.bounds is not None:
            data["bounds"] = self.bounds.to_dict()
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "FieldDescriptor":
        bounds = data.get("bounds")
        return cls(
            name=str(data["name"]),
            kind=FieldKind(data.get("type", data.get("kind"))),
            value=str(data.get("value") or ""),
            options=[str(option) for option in data.get("options") or []],
            bounds=Bounds.from_dict(bounds) if bounds else None,
        )


__all__ = ["CHECKED", "Bounds", "FieldDescriptor", "FieldKind", "Rect"]
