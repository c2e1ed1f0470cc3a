"""
Org Chart Kernel — Core Domain Types v1.0

Pure data. No layout math, no tree construction.
Records are immutable per build; nodes are derived and owned by the
hierarchy builder; layout nodes are recomputed on every pass.

────────────────────────────────────────────────
DOMAIN GLOSSARY
────────────────────────────────────────────────

Root:
    An OrgNode with no resolvable manager reference, or one detached
    while breaking a reporting cycle.

Forest:
    Ordered collection of root OrgNodes and their descendants.

Subtree footprint:
    Horizontal span a node and its visible descendants occupy.

Anomaly:
    Non-fatal structural defect found during hierarchy construction.

────────────────────────────────────────────────
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple


# ── Closed Enumerations ───────────────────────────────────────

class EmployeeRole(str, Enum):
    """Access role of an employee. Unrecognised values map to UNKNOWN."""

    SUPERADMIN = "superadmin"
    ADMIN = "admin"
    MANAGER = "manager"
    SUPERVISOR = "supervisor"
    EMPLOYEE = "employee"
    CONTRACTOR = "contractor"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, value: Any) -> "EmployeeRole":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls.UNKNOWN


class EmployeeStatus(str, Enum):
    """Employment status. Unrecognised values map to UNKNOWN."""

    ACTIVE = "active"
    INACTIVE = "inactive"
    ON_LEAVE = "on_leave"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, value: Any) -> "EmployeeStatus":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls.UNKNOWN


# ── Input Records ─────────────────────────────────────────────

@dataclass(frozen=True)
class EmployeeRecord:
    """One employee as supplied by the data-fetching collaborator."""

    id: str
    first_name: str = ""
    last_name: str = ""
    full_name: str = ""
    email: str = ""
    role: EmployeeRole = EmployeeRole.EMPLOYEE
    status: EmployeeStatus = EmployeeStatus.ACTIVE
    employee_code: str = ""
    position: Optional[str] = None
    manager_id: Optional[str] = None
    department_code: Optional[str] = None
    facility_id: Optional[str] = None
    hire_date: Optional[str] = None
    profile: Optional[Dict[str, Any]] = field(default=None, hash=False, compare=False)

    @property
    def display_name(self) -> str:
        if self.full_name:
            return self.full_name
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def has_manager_reference(self) -> bool:
        return bool(self.manager_id)


@dataclass(frozen=True)
class ManagerRef:
    """Non-owning identity of a node's manager (lookup by id, never a pointer)."""

    id: str
    first_name: str = ""
    last_name: str = ""
    full_name: str = ""

    @classmethod
    def from_record(cls, record: EmployeeRecord) -> "ManagerRef":
        return cls(
            id=record.id,
            first_name=record.first_name,
            last_name=record.last_name,
            full_name=record.display_name,
        )


# ── Anomalies ─────────────────────────────────────────────────

@dataclass(frozen=True)
class Anomaly:
    """Base for all hierarchy anomalies. Pure data, never raised."""

    kind: str = ""
    employee_id: str = ""
    detail: str = ""
    related_ids: Tuple[str, ...] = ()

    def to_dict(self) -> dict:
        return {
            "kind": self.kind,
            "employee_id": self.employee_id,
            "detail": self.detail,
            "related_ids": list(self.related_ids),
        }


@dataclass(frozen=True)
class DanglingManagerReference(Anomaly):
    """Manager id does not resolve to any known record; employee becomes a root."""

    kind: str = "dangling_manager_reference"
    # related_ids: (unresolved manager id,)


@dataclass(frozen=True)
class CycleDetected(Anomaly):
    """Manager chain loops back on itself; smallest id in the loop is detached."""

    kind: str = "cycle_detected"
    # related_ids: cycle members in walk order


@dataclass(frozen=True)
class DuplicateIdentifier(Anomaly):
    """Second or later record sharing an id; dropped, first occurrence wins."""

    kind: str = "duplicate_identifier"
    # related_ids: (position of the dropped record in the input,)


# ── Derived Tree ──────────────────────────────────────────────

@dataclass
class OrgNode:
    """One record placed in the forest."""

    record: EmployeeRecord
    children: List["OrgNode"] = field(default_factory=list)
    level: int = 0
    direct_reports_count: int = 0
    manager: Optional[ManagerRef] = None

    @property
    def id(self) -> str:
        return self.record.id

    @property
    def is_root(self) -> bool:
        return self.manager is None

    def walk(self):
        """Pre-order traversal over this node and all descendants."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))


@dataclass(frozen=True)
class HierarchyResult:
    """Best-effort forest plus every anomaly found while building it."""

    roots: List[OrgNode] = field(default_factory=list)
    anomalies: List[Anomaly] = field(default_factory=list)

    def iter_nodes(self):
        for root in self.roots:
            yield from root.walk()

    def node_index(self) -> Dict[str, OrgNode]:
        return {node.id: node for node in self.iter_nodes()}

    @property
    def max_level(self) -> int:
        return max((node.level for node in self.iter_nodes()), default=0)


@dataclass(frozen=True)
class HierarchyStats:
    """Summary counters for display badges."""

    total_employees: int = 0
    managers: int = 0
    max_level: int = 0
    avg_span_of_control: float = 0.0

    def to_dict(self) -> dict:
        return {
            "total_employees": self.total_employees,
            "managers": self.managers,
            "max_level": self.max_level,
            "avg_span_of_control": self.avg_span_of_control,
        }


# ── Layout Output ─────────────────────────────────────────────

@dataclass(frozen=True)
class LayoutNode:
    """A positioned, visible node. Created fresh on every layout pass."""

    node: OrgNode
    x: float
    y: float
    width: float
    subtree_width: float
    level: int
    children: Tuple["LayoutNode", ...] = ()

    @property
    def id(self) -> str:
        return self.node.id

    @property
    def record(self) -> EmployeeRecord:
        return self.node.record

    @property
    def direct_reports_count(self) -> int:
        """Direct reports in the data model, including collapsed ones."""
        return self.node.direct_reports_count

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "full_name": self.record.display_name,
            "position": self.record.position,
            "role": self.record.role.value,
            "status": self.record.status.value,
            "level": self.level,
            "direct_reports_count": self.direct_reports_count,
            "manager_id": self.node.manager.id if self.node.manager else None,
            "x": self.x,
            "y": self.y,
            "width": self.width,
            "subtree_width": self.subtree_width,
            "child_ids": [c.id for c in self.children],
        }


@dataclass(frozen=True)
class Segment:
    """Axis-aligned line segment in canvas units."""

    x1: float
    y1: float
    x2: float
    y2: float


@dataclass(frozen=True)
class Connector:
    """Right-angle edge between a visible parent and child: drop, run, drop."""

    parent_id: str
    child_id: str
    segments: Tuple[Segment, Segment, Segment]

    def to_dict(self) -> dict:
        return {
            "parent_id": self.parent_id,
            "child_id": self.child_id,
            "segments": [
                {"x1": s.x1, "y1": s.y1, "x2": s.x2, "y2": s.y2}
                for s in self.segments
            ],
        }


@dataclass(frozen=True)
class CanvasSize:
    """Derived scroll-region size. Never stored alongside the layout."""

    width: float
    height: float

    def scaled(self, scale: float) -> "CanvasSize":
        return CanvasSize(width=self.width * scale, height=self.height * scale)


@dataclass(frozen=True)
class TreeLayout:
    """Everything the rendering collaborator needs for the tree diagram."""

    roots: Tuple[LayoutNode, ...] = ()
    nodes: Tuple[LayoutNode, ...] = ()
    connectors: Tuple[Connector, ...] = ()
    canvas: CanvasSize = CanvasSize(0.0, 0.0)
