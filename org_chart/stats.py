"""
Org Chart Kernel — Stats Aggregator v1.0

Summary counters for display badges. Pure, O(n), no side effects.
"""

from __future__ import annotations

from typing import Iterable, Optional

from .domain_types import EmployeeRecord, HierarchyResult, HierarchyStats
from .hierarchy import build_hierarchy


def aggregate_stats(
    records: Iterable[EmployeeRecord],
    hierarchy: Optional[HierarchyResult] = None,
) -> HierarchyStats:
    """
    Count employees, managers (>= 1 direct report, any role) and the
    deepest level. Levels come from ``hierarchy`` when supplied,
    otherwise the hierarchy is rebuilt from ``records``.

    total_employees counts distinct ids; dropped duplicates are not
    employees.
    """
    if hierarchy is None:
        hierarchy = build_hierarchy(records)

    total = 0
    managers = 0
    reports = 0
    max_level = 0
    for node in hierarchy.iter_nodes():
        total += 1
        if node.direct_reports_count > 0:
            managers += 1
            reports += node.direct_reports_count
        if node.level > max_level:
            max_level = node.level

    avg_span = round(reports / managers, 1) if managers else 0.0

    return HierarchyStats(
        total_employees=total,
        managers=managers,
        max_level=max_level,
        avg_span_of_control=avg_span,
    )
