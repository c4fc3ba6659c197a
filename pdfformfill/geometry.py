"""Widget geometry for native fields.

Geometry is a best-effort annotation for UI overlays: anything unreadable
resolves to ``None`` instead of raising.
"""

from __future__ import annotations

from typing import Any, Optional

from .document import NativeField, resolve_object
from .models import Bounds, Rect


def _read_rect(widget: Any) -> Optional[Rect]:
    raw = resolve_object(widget.get("/Rect"))
    if raw is None or len(raw) != 4:
        return None
    x0, y0, x1, y1 = (float(resolve_object(coord)) for coord in raw)
    return Rect(
        x=min(x0, x1),
        y=min(y0, y1),
        width=abs(x1 - x0),
        height=abs(y1 - y0),
    )


def widget_rect(native: NativeField) -> Optional[Rect]:
    """Return the first widget's rectangle without resolving its page."""

    try:
        if not native.widgets:
            return None
        _, widget = native.widgets[0]
        return _read_rect(widget)
    except Exception:
        return None


def resolve_bounds(native: NativeField) -> Optional[Bounds]:
    """Return the first widget's rectangle and page index, or None."""

    try:
        if not native.widgets:
            return None
        widget_ref, widget = native.widgets[0]
        rect = _read_rect(widget)
        if rect is None:
            return None
        page = native.document.page_index(widget_ref, widget)
        if page is None:
            return None
        return Bounds(x=rect.x, y=rect.y, width=rect.width, height=rect.height, page=page)
    except Exception:
        return None


__all__ = ["resolve_bounds", "widget_rect"]
