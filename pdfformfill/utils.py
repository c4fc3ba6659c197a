"""Utility helpers for pdfformfill."""

from __future__ import annotations

import logging
import os
from typing import Iterable, List, Optional, Set, Tuple

from .models import FieldDescriptor

LOG_LEVEL_ENV = "PDFFORMFILL_LOG"


def get_logger(name: str) -> logging.Logger:
    """Return a module logger whose level follows ``PDFFORMFILL_LOG``."""

    logger = logging.getLogger(name)
    level_name = os.getenv(LOG_LEVEL_ENV, "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("[%(levelname)s] %(name)s: %(message)s"))
        logger.addHandler(handler)
    logger.setLevel(level)
    return logger


def ensure_unique_names(
    groups: Iterable[Tuple[str, List[FieldDescriptor]]],
    logger: Optional[logging.Logger] = None,
) -> List[FieldDescriptor]:
    """Flatten per-field descriptor groups, keeping names unique.

    A group is ``(native name, descriptors)``. Groups are kept or dropped as a
    whole so a split pair never loses one half; the first group to claim a
    name wins.
    """

    seen: Set[str] = set()
    unique: List[FieldDescriptor] = []
    for native_name, descriptors in groups:
        names = [descriptor.name for descriptor in descriptors]
        taken = [name for name in names if name in seen]
        if taken:
            if logger is not None:
                logger.warning(
                    "Dropping field '%s': descriptor name(s) %s already taken",
                    native_name,
                    ", ".join(f"'{name}'" for name in taken),
                )
            continue
        seen.update(names)
        unique.extend(descriptors)
    return unique


__all__ = ["LOG_LEVEL_ENV", "ensure_unique_names", "get_logger"]
