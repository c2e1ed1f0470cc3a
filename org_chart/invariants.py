"""
Org Chart Kernel — Invariant Checks v1.0

Hard-fail validation of builder and layout output. Every check raises
InvariantViolationError on failure. Malformed *input* never gets here
as an error (it becomes an anomaly); a failure here is a kernel bug.
"""

from __future__ import annotations

from typing import Iterable, List, Sequence, Set

from .domain_types import EmployeeRecord, HierarchyResult, LayoutNode, OrgNode
from .geometry import LayoutGeometry

# Floating-point tolerance for geometric comparisons.
EPSILON: float = 1e-6


class InvariantViolationError(Exception):
    """Raised when an org chart invariant is violated."""

    def __init__(self, rule: str, detail: str) -> None:
        self.rule = rule
        self.detail = detail
        super().__init__(f"[INVARIANT:{rule}] {detail}")


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def validate_forest(
    hierarchy: HierarchyResult,
    records: Iterable[EmployeeRecord],
) -> None:
    """Partition, single-parent, level and direct-report checks."""
    _check_partition(hierarchy, records)
    for root in hierarchy.roots:
        _check_root(root)
        _check_subtree(root)


def validate_layout(
    roots: Sequence[LayoutNode],
    geometry: LayoutGeometry,
) -> None:
    """Footprint, band and sibling no-overlap checks over one layout pass."""
    _check_siblings(list(roots), geometry)
    stack: List[LayoutNode] = list(roots)
    while stack:
        node = stack.pop()
        _check_footprint(node)
        _check_band(node, geometry)
        _check_siblings(list(node.children), geometry)
        stack.extend(node.children)


# ---------------------------------------------------------------------------
# Forest checks (private)
# ---------------------------------------------------------------------------

def _check_partition(
    hierarchy: HierarchyResult,
    records: Iterable[EmployeeRecord],
) -> None:
    expected: Set[str] = {r.id for r in records}
    seen: Set[str] = set()
    for node in hierarchy.iter_nodes():
        if node.id in seen:
            raise InvariantViolationError(
                "partition",
                f"Employee {node.id!r} appears more than once in the forest",
            )
        seen.add(node.id)
    if seen != expected:
        missing = sorted(expected - seen)
        extra = sorted(seen - expected)
        raise InvariantViolationError(
            "partition",
            f"Forest ids differ from input ids: missing={missing} extra={extra}",
        )


def _check_root(root: OrgNode) -> None:
    if root.level != 0:
        raise InvariantViolationError(
            "root_level", f"Root {root.id!r} has level {root.level}, expected 0"
        )
    if root.manager is not None:
        raise InvariantViolationError(
            "root_manager", f"Root {root.id!r} carries manager {root.manager.id!r}"
        )


def _check_subtree(root: OrgNode) -> None:
    for node in root.walk():
        if node.direct_reports_count != len(node.children):
            raise InvariantViolationError(
                "direct_reports_count",
                f"Employee {node.id!r} reports {node.direct_reports_count} "
                f"direct reports but has {len(node.children)} children",
            )
        for child in node.children:
            if child.level != node.level + 1:
                raise InvariantViolationError(
                    "level",
                    f"Employee {child.id!r} at level {child.level} "
                    f"under {node.id!r} at level {node.level}",
                )
            referenced = child.manager.id if child.manager else None
            if referenced != node.id:
                raise InvariantViolationError(
                    "manager_ref",
                    f"Employee {child.id!r} is a child of {node.id!r} "
                    f"but references {referenced!r}",
                )


# ---------------------------------------------------------------------------
# Layout checks (private)
# ---------------------------------------------------------------------------

def _check_footprint(node: LayoutNode) -> None:
    if node.subtree_width + EPSILON < node.width:
        raise InvariantViolationError(
            "footprint",
            f"Node {node.id!r} subtree_width {node.subtree_width} < width {node.width}",
        )


def _check_band(node: LayoutNode, geometry: LayoutGeometry) -> None:
    expected_y = node.level * geometry.level_height
    if abs(node.y - expected_y) > EPSILON:
        raise InvariantViolationError(
            "level_band",
            f"Node {node.id!r} at level {node.level} has y={node.y}, expected {expected_y}",
        )


def _check_siblings(siblings: List[LayoutNode], geometry: LayoutGeometry) -> None:
    for left, right in zip(siblings, siblings[1:]):
        gap = right.x - (left.x + left.width)
        if gap + EPSILON < geometry.horizontal_gap:
            raise InvariantViolationError(
                "sibling_overlap",
                f"Siblings {left.id!r} and {right.id!r} are {gap} apart, "
                f"minimum is {geometry.horizontal_gap}",
            )
