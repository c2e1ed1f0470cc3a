"""
Org Chart Kernel v1.0
Deterministic, in-memory hierarchy builder and tree layout engine for
the organization chart. Pure synchronous transforms; no I/O except the
explicit record file helpers.
"""

from .domain_types import (
    EmployeeRole, EmployeeStatus, EmployeeRecord, ManagerRef,
    Anomaly, DanglingManagerReference, CycleDetected, DuplicateIdentifier,
    OrgNode, HierarchyResult, HierarchyStats,
    LayoutNode, Segment, Connector, CanvasSize, TreeLayout,
)
from .geometry import GeometryConfigError, LayoutGeometry, Viewport, ZoomState
from .hierarchy import build_hierarchy, parent_map
from .stats import aggregate_stats
from .expansion import ExpansionState, ExpansionStateManager
from .layout import LayoutEngine, flatten_layout
from .invariants import InvariantViolationError, validate_forest, validate_layout
from .diagnostics import compute_diagnostics
from .hashing import canonical_layout_serialize, canonical_layout_hash
from .records import (
    RecordsError,
    SerializationError,
    DeserializationError,
    record_from_dict,
    record_to_dict,
    encode_records,
    decode_records,
    records_from_payload,
    export_records_to_file,
    import_records_from_file,
)
from .filters import (
    search_records,
    filter_records,
    group_by_department,
    group_by_facility,
    department_display_name,
    facility_display_name,
)
from .assignment import (
    ManagerAssignmentError,
    manager_candidates,
    validate_manager_assignment,
)
from .service import OrgChartService, OrgChartView
from .constants import (
    NODE_WIDTH,
    NODE_HEIGHT,
    HORIZONTAL_GAP,
    VERTICAL_GAP,
)

__all__ = [
    "EmployeeRole",
    "EmployeeStatus",
    "EmployeeRecord",
    "ManagerRef",
    "Anomaly",
    "DanglingManagerReference",
    "CycleDetected",
    "DuplicateIdentifier",
    "OrgNode",
    "HierarchyResult",
    "HierarchyStats",
    "LayoutNode",
    "Segment",
    "Connector",
    "CanvasSize",
    "TreeLayout",
    "GeometryConfigError",
    "LayoutGeometry",
    "Viewport",
    "ZoomState",
    "build_hierarchy",
    "parent_map",
    "aggregate_stats",
    "ExpansionState",
    "ExpansionStateManager",
    "LayoutEngine",
    "flatten_layout",
    "InvariantViolationError",
    "validate_forest",
    "validate_layout",
    "compute_diagnostics",
    "canonical_layout_serialize",
    "canonical_layout_hash",
    "RecordsError",
    "SerializationError",
    "DeserializationError",
    "record_from_dict",
    "record_to_dict",
    "encode_records",
    "decode_records",
    "records_from_payload",
    "export_records_to_file",
    "import_records_from_file",
    "search_records",
    "filter_records",
    "group_by_department",
    "group_by_facility",
    "department_display_name",
    "facility_display_name",
    "ManagerAssignmentError",
    "manager_candidates",
    "validate_manager_assignment",
    "OrgChartService",
    "OrgChartView",
    "NODE_WIDTH",
    "NODE_HEIGHT",
    "HORIZONTAL_GAP",
    "VERTICAL_GAP",
]
