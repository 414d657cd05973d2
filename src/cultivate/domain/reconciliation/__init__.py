"""Field-level reconciliation of suggestion entries into contact documents."""

from __future__ import annotations

from .engine import FieldConflict, MergeResult, ReconciliationEngine
from .merge import deep_equal, merge, read_value
from .paths import parse_path

__all__ = [
    "FieldConflict",
    "MergeResult",
    "ReconciliationEngine",
    "deep_equal",
    "merge",
    "parse_path",
    "read_value",
]
