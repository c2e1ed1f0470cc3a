"""
Org Chart Kernel — Canonical Layout Hashing v1.0

Deterministic canonical serialization + SHA-256 hashing of a layout
pass. Two passes with identical inputs and expansion state hash equal.

Rules:
  - Nodes in pre-order (the layout's own order, which is deterministic)
  - Geometry fields in fixed order; floats via repr (round-trip exact)
  - UTF-8 JSON, no whitespace
"""

from __future__ import annotations

import hashlib
import json
from typing import Any, Dict, Iterable, List

from .domain_types import LayoutNode
from .layout import flatten_layout


def canonical_layout_serialize(roots: Iterable[LayoutNode]) -> bytes:
    obj = _build_canonical_list(roots)
    return json.dumps(obj, ensure_ascii=True, separators=(",", ":"), sort_keys=False).encode("utf-8")


def canonical_layout_hash(roots: Iterable[LayoutNode]) -> str:
    """SHA-256 of canonical serialization. Lowercase hex string."""
    return hashlib.sha256(canonical_layout_serialize(roots)).hexdigest()


def _build_canonical_list(roots: Iterable[LayoutNode]) -> List[Dict[str, Any]]:
    return [
        {
            "id": n.id,
            "level": n.level,
            "x": repr(float(n.x)),
            "y": repr(float(n.y)),
            "width": repr(float(n.width)),
            "subtree_width": repr(float(n.subtree_width)),
            "children": [c.id for c in n.children],
        }
        for n in flatten_layout(roots)
    ]
