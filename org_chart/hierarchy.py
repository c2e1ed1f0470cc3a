"""
Org Chart Kernel — Hierarchy Builder v1.0

Converts a flat list of EmployeeRecords into an ordered forest of
OrgNodes by resolving manager references.

Rules:
  - First occurrence of an id wins; later duplicates are dropped.
  - Absent manager reference → root.
  - Unresolvable manager reference → root + DanglingManagerReference.
  - Reporting cycles are broken by detaching the smallest id in the
    cycle (UTF-8 string order) → root + CycleDetected.
  - Roots and siblings keep input order.
  - Never raises for malformed input.
"""

from __future__ import annotations

from collections import deque
from typing import Dict, Iterable, List, Optional, Set

from .domain_types import (
    Anomaly,
    CycleDetected,
    DanglingManagerReference,
    DuplicateIdentifier,
    EmployeeRecord,
    HierarchyResult,
    ManagerRef,
    OrgNode,
)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def build_hierarchy(records: Iterable[EmployeeRecord]) -> HierarchyResult:
    """
    Build the forest and collect anomalies.

    O(n) apart from cycle breaking, which re-walks only chains that
    actually loop.
    """
    anomalies: List[Anomaly] = []

    index, order = _index_records(records, anomalies)
    parent = _resolve_managers(index, order, anomalies)
    anomalies.extend(_break_cycles(order, parent))

    nodes: Dict[str, OrgNode] = {rid: OrgNode(record=index[rid]) for rid in order}
    roots: List[OrgNode] = []
    for rid in order:
        pid = parent[rid]
        if pid is None:
            roots.append(nodes[rid])
            continue
        nodes[pid].children.append(nodes[rid])
        nodes[rid].manager = ManagerRef.from_record(index[pid])

    _assign_levels(roots)
    return HierarchyResult(roots=roots, anomalies=anomalies)


def parent_map(records: Iterable[EmployeeRecord]) -> Dict[str, Optional[str]]:
    """Resolved employee_id -> manager_id after dedup, dangling and cycle repair."""
    result = build_hierarchy(records)
    return {
        node.id: (node.manager.id if node.manager else None)
        for node in result.iter_nodes()
    }


# ---------------------------------------------------------------------------
# Steps (private)
# ---------------------------------------------------------------------------

def _index_records(
    records: Iterable[EmployeeRecord],
    anomalies: List[Anomaly],
):
    index: Dict[str, EmployeeRecord] = {}
    order: List[str] = []
    for position, record in enumerate(records):
        if record.id in index:
            anomalies.append(DuplicateIdentifier(
                employee_id=record.id,
                detail=(
                    f"Record at position {position} repeats id {record.id!r}; "
                    f"dropped in favour of the first occurrence"
                ),
                related_ids=(str(position),),
            ))
            continue
        index[record.id] = record
        order.append(record.id)
    return index, order


def _resolve_managers(
    index: Dict[str, EmployeeRecord],
    order: List[str],
    anomalies: List[Anomaly],
) -> Dict[str, Optional[str]]:
    parent: Dict[str, Optional[str]] = {}
    for rid in order:
        manager_id = index[rid].manager_id
        if not manager_id:
            parent[rid] = None
        elif manager_id not in index:
            parent[rid] = None
            anomalies.append(DanglingManagerReference(
                employee_id=rid,
                detail=(
                    f"Manager {manager_id!r} of {rid!r} is not a known employee; "
                    f"treated as a root"
                ),
                related_ids=(manager_id,),
            ))
        else:
            parent[rid] = manager_id
    return parent


def _break_cycles(
    order: List[str],
    parent: Dict[str, Optional[str]],
) -> List[Anomaly]:
    """
    Walk each chain upward with an explicit visited map, at most n hops.
    Mutates ``parent`` in place to detach one member per cycle found.
    """
    n = len(order)
    settled: Set[str] = set()  # chains known to end at a root
    anomalies: List[Anomaly] = []

    for start in order:
        while start not in settled:
            chain: List[str] = []
            position: Dict[str, int] = {}
            current: Optional[str] = start
            for _ in range(n + 1):
                if current is None or current in settled or current in position:
                    break
                position[current] = len(chain)
                chain.append(current)
                current = parent[current]

            if current is None or current in settled:
                settled.update(chain)
                continue

            cycle = chain[position[current]:]
            detached = min(cycle)
            parent[detached] = None
            anomalies.append(CycleDetected(
                employee_id=detached,
                detail=(
                    f"Reporting cycle {' -> '.join(cycle + [cycle[0]])}; "
                    f"{detached!r} detached as a root"
                ),
                related_ids=tuple(cycle),
            ))

    return anomalies


def _assign_levels(roots: List[OrgNode]) -> None:
    """Breadth-first level assignment; no recursion over the input graph."""
    queue = deque((root, 0) for root in roots)
    while queue:
        node, level = queue.popleft()
        node.level = level
        node.direct_reports_count = len(node.children)
        queue.extend((child, level + 1) for child in node.children)
