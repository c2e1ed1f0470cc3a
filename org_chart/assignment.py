"""
Org Chart Kernel — Manager Reassignment Checks v1.0

Validation for the "Select Manager" flow. The write itself belongs to
the data collaborator; this module only decides whether it is allowed.
"""

from __future__ import annotations

from typing import Iterable, List, Optional

from .domain_types import EmployeeRecord, EmployeeStatus
from .hierarchy import parent_map


class ManagerAssignmentError(ValueError):
    """Raised when a proposed manager assignment is not allowed."""

    def __init__(self, rule: str, detail: str) -> None:
        self.rule = rule
        self.detail = detail
        super().__init__(f"[ASSIGNMENT:{rule}] {detail}")


def manager_candidates(
    records: Iterable[EmployeeRecord],
    employee_id: str,
) -> List[EmployeeRecord]:
    """Active employees other than the subject, in input order."""
    return [
        r for r in records
        if r.id != employee_id and r.status == EmployeeStatus.ACTIVE
    ]


def validate_manager_assignment(
    records: Iterable[EmployeeRecord],
    employee_id: str,
    manager_id: Optional[str],
) -> None:
    """
    Raise ManagerAssignmentError unless ``employee_id`` may report to
    ``manager_id``. None means "no manager (top level)" and is always
    allowed for a known employee.
    """
    records = list(records)
    parents = parent_map(records)

    if employee_id not in parents:
        raise ManagerAssignmentError(
            "unknown_employee", f"Employee {employee_id!r} does not exist"
        )
    if manager_id is None:
        return
    if manager_id == employee_id:
        raise ManagerAssignmentError(
            "self_manager", "An employee cannot be their own manager"
        )
    if manager_id not in parents:
        raise ManagerAssignmentError(
            "unknown_manager", f"Manager {manager_id!r} does not exist"
        )

    # Walking up from the new manager must not pass through the employee.
    current: Optional[str] = manager_id
    for _ in range(len(parents)):
        current = parents.get(current)
        if current is None:
            return
        if current == employee_id:
            raise ManagerAssignmentError(
                "cycle",
                f"{manager_id!r} reports to {employee_id!r}; "
                f"assigning would create a reporting cycle",
            )
