"""
Org Chart Kernel — Record Filters & Grouping Views v1.0

Client-side narrowing of the record list before the hierarchy is
built, and the flat department / facility views. Grouping views are
plain partitions by a field: no tree, no layout, no expansion state.
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Mapping, Optional

from .constants import (
    NO_DEPARTMENT_LABEL,
    NO_FACILITY_LABEL,
    UNASSIGNED_GROUP,
    UNKNOWN_FACILITY_LABEL,
)
from .domain_types import EmployeeRecord, EmployeeStatus


# ---------------------------------------------------------------------------
# Search / filter
# ---------------------------------------------------------------------------

def search_records(
    records: Iterable[EmployeeRecord],
    query: str,
) -> List[EmployeeRecord]:
    """
    Case-insensitive substring match on full name, email, employee code
    and position. A blank query keeps everything.
    """
    records = list(records)
    needle = (query or "").strip().lower()
    if not needle:
        return records

    def _matches(r: EmployeeRecord) -> bool:
        haystacks = (r.display_name, r.email, r.employee_code, r.position or "")
        return any(needle in h.lower() for h in haystacks)

    return [r for r in records if _matches(r)]


def filter_records(
    records: Iterable[EmployeeRecord],
    facility_id: Optional[str] = None,
    department_code: Optional[str] = None,
    status: Optional[str] = None,
) -> List[EmployeeRecord]:
    """Exact-match filters; a None criterion is ignored."""
    wanted_status = EmployeeStatus.parse(status) if status else None
    return [
        r for r in records
        if (facility_id is None or r.facility_id == facility_id)
        and (department_code is None or r.department_code == department_code)
        and (wanted_status is None or r.status == wanted_status)
    ]


# ---------------------------------------------------------------------------
# Grouping views
# ---------------------------------------------------------------------------

def group_by_department(
    records: Iterable[EmployeeRecord],
) -> Dict[str, List[EmployeeRecord]]:
    """department_code -> records, first-seen key order, None → "unassigned"."""
    return _group_by(records, lambda r: r.department_code)


def group_by_facility(
    records: Iterable[EmployeeRecord],
) -> Dict[str, List[EmployeeRecord]]:
    """facility_id -> records, first-seen key order, None → "unassigned"."""
    return _group_by(records, lambda r: r.facility_id)


def _group_by(records, key_fn) -> Dict[str, List[EmployeeRecord]]:
    groups: Dict[str, List[EmployeeRecord]] = {}
    for record in records:
        key = key_fn(record) or UNASSIGNED_GROUP
        groups.setdefault(key, []).append(record)
    return groups


def department_display_name(
    code: Optional[str],
    departments: Mapping[str, str] | None = None,
) -> str:
    if not code or code == UNASSIGNED_GROUP:
        return NO_DEPARTMENT_LABEL
    return (departments or {}).get(code) or code


def facility_display_name(
    facility_id: Optional[str],
    facilities: Mapping[str, str] | None = None,
) -> str:
    if not facility_id or facility_id == UNASSIGNED_GROUP:
        return NO_FACILITY_LABEL
    return (facilities or {}).get(facility_id) or UNKNOWN_FACILITY_LABEL
