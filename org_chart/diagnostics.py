"""
Org Chart Kernel — Diagnostics v1.0

Summarise hierarchy health for the collaborator that invoked the build.
The collaborator decides whether to log, alert, or ignore the warnings.
"""

from __future__ import annotations

from typing import Dict, List

from .domain_types import HierarchyResult


def compute_diagnostics(hierarchy: HierarchyResult) -> dict:
    """Return a diagnostic dict summarising the forest and its anomalies."""
    by_kind: Dict[str, List[str]] = {}
    for anomaly in hierarchy.anomalies:
        by_kind.setdefault(anomaly.kind, []).append(anomaly.employee_id)

    warnings: list[str] = []

    dangling = by_kind.get("dangling_manager_reference", [])
    if dangling:
        warnings.append(
            f"{len(dangling)} employee(s) report to unknown managers "
            f"and were promoted to roots: {', '.join(dangling)}"
        )

    cycles = by_kind.get("cycle_detected", [])
    if cycles:
        warnings.append(
            f"{len(cycles)} reporting cycle(s) broken by detaching: "
            f"{', '.join(cycles)}"
        )

    duplicates = by_kind.get("duplicate_identifier", [])
    if duplicates:
        warnings.append(
            f"{len(duplicates)} duplicate record(s) dropped for id(s): "
            f"{', '.join(sorted(set(duplicates)))}"
        )

    node_count = sum(1 for _ in hierarchy.iter_nodes())
    return {
        "node_count": node_count,
        "root_count": len(hierarchy.roots),
        "max_level": hierarchy.max_level,
        "anomaly_count": len(hierarchy.anomalies),
        "anomalies_by_kind": {k: len(v) for k, v in sorted(by_kind.items())},
        "warnings": warnings,
    }
