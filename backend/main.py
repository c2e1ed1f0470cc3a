"""
FastAPI Backend — Org Chart API v1.

Stateless: every request rebuilds the hierarchy from the posted records.
No in-memory state between requests; expansion state and zoom are owned
by the client and posted back with each layout request.

Endpoints:
  GET  /health                        — liveness + active geometry
  POST /org-chart/hierarchy           — flat forest + anomalies + stats
  POST /org-chart/layout              — positioned nodes + connectors + canvas
  POST /org-chart/groups              — department / facility partitions
  POST /org-chart/manager-candidates  — who an employee may report to
  POST /org-chart/validate-manager    — check a proposed reassignment
"""
from __future__ import annotations

import os
import sys
from typing import Any, Dict, List, Literal, Optional

from dotenv import load_dotenv

env_path = os.path.join(os.path.dirname(__file__), ".env")
if os.path.exists(env_path):
    load_dotenv(env_path)

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

# Add project root to path for kernel imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from org_chart.assignment import (
    ManagerAssignmentError,
    manager_candidates,
    validate_manager_assignment,
)
from org_chart.constants import HORIZONTAL_GAP, NODE_HEIGHT, NODE_WIDTH, VERTICAL_GAP
from org_chart.diagnostics import compute_diagnostics
from org_chart.domain_types import EmployeeRecord, OrgNode
from org_chart.expansion import ExpansionState
from org_chart.filters import (
    department_display_name,
    facility_display_name,
    filter_records,
    group_by_department,
    group_by_facility,
    search_records,
)
from org_chart.geometry import GeometryConfigError, LayoutGeometry, Viewport, ZoomState
from org_chart.hierarchy import build_hierarchy
from org_chart.records import DeserializationError, record_to_dict, records_from_payload
from org_chart.service import OrgChartService
from org_chart.stats import aggregate_stats

# ---------------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------------

FRONTEND_URL = os.environ.get("FRONTEND_URL", "http://localhost:8081")


def _env_number(name: str, default: float) -> float:
    raw = os.environ.get(name, "")
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        raise GeometryConfigError(name, raw, "is not a number") from None


# Invalid geometry fails at startup, not on the first request.
DEFAULT_GEOMETRY = LayoutGeometry(
    node_width=_env_number("ORGCHART_NODE_WIDTH", NODE_WIDTH),
    node_height=_env_number("ORGCHART_NODE_HEIGHT", NODE_HEIGHT),
    horizontal_gap=_env_number("ORGCHART_HORIZONTAL_GAP", HORIZONTAL_GAP),
    vertical_gap=_env_number("ORGCHART_VERTICAL_GAP", VERTICAL_GAP),
)

# ---------------------------------------------------------------------------
# App
# ---------------------------------------------------------------------------

app = FastAPI(
    title="OrgChart API",
    version="1.0.0",
    description="Organization chart hierarchy builder and tree layout engine",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        FRONTEND_URL,
        "http://localhost:8081",
        "http://localhost:19006",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ---------------------------------------------------------------------------
# Request / Response models
# ---------------------------------------------------------------------------


class RecordFilters(BaseModel):
    search: str = ""
    facility_id: Optional[str] = None
    department_code: Optional[str] = None
    status: Optional[str] = None


class GeometryOverride(BaseModel):
    node_width: Optional[float] = None
    node_height: Optional[float] = None
    horizontal_gap: Optional[float] = None
    vertical_gap: Optional[float] = None


class ViewportRequest(BaseModel):
    width: float = 0.0
    height: float = 0.0
    padding_x: float = 0.0
    padding_y: float = 0.0
    min_height_ratio: float = 0.0


class HierarchyRequest(BaseModel):
    employees: List[Dict[str, Any]]
    filters: RecordFilters = RecordFilters()


class LayoutRequest(BaseModel):
    employees: List[Dict[str, Any]]
    filters: RecordFilters = RecordFilters()
    expanded_ids: List[str] = []
    expand_all: bool = False
    geometry: Optional[GeometryOverride] = None
    viewport: ViewportRequest = ViewportRequest()
    scale: float = 1.0


class GroupsRequest(BaseModel):
    employees: List[Dict[str, Any]]
    by: Literal["department", "facility"] = "department"
    filters: RecordFilters = RecordFilters()
    departments: Dict[str, str] = {}
    facilities: Dict[str, str] = {}


class ManagerRequest(BaseModel):
    employees: List[Dict[str, Any]]
    employee_id: str
    manager_id: Optional[str] = None


# ---------------------------------------------------------------------------
# Core helpers
# ---------------------------------------------------------------------------


def _load_records(employees: List[Dict[str, Any]]) -> List[EmployeeRecord]:
    try:
        return records_from_payload(employees)
    except DeserializationError as e:
        raise HTTPException(status_code=422, detail=str(e))


def _apply_filters(
    records: List[EmployeeRecord], filters: RecordFilters,
) -> List[EmployeeRecord]:
    narrowed = filter_records(
        records,
        facility_id=filters.facility_id,
        department_code=filters.department_code,
        status=filters.status,
    )
    return search_records(narrowed, filters.search)


def _resolve_geometry(override: Optional[GeometryOverride]) -> LayoutGeometry:
    if override is None:
        return DEFAULT_GEOMETRY
    values = DEFAULT_GEOMETRY.to_dict()
    values.update({k: v for k, v in override.model_dump().items() if v is not None})
    try:
        return LayoutGeometry(**values)
    except GeometryConfigError as e:
        raise HTTPException(status_code=400, detail=str(e))


def _resolve_viewport(request: ViewportRequest) -> Viewport:
    try:
        return Viewport(**request.model_dump())
    except GeometryConfigError as e:
        raise HTTPException(status_code=400, detail=str(e))


def _resolve_zoom(scale: float) -> ZoomState:
    try:
        return ZoomState().with_scale(scale)
    except GeometryConfigError as e:
        raise HTTPException(status_code=400, detail=str(e))


def _report_warnings(diagnostics: dict) -> None:
    for warning in diagnostics["warnings"]:
        print(f"WARN: {warning}")


def _node_to_dict(node: OrgNode) -> dict:
    """One forest node; children by id so the payload stays flat at any depth."""
    return {
        "id": node.id,
        "full_name": node.record.display_name,
        "position": node.record.position,
        "role": node.record.role.value,
        "status": node.record.status.value,
        "level": node.level,
        "direct_reports_count": node.direct_reports_count,
        "manager": (
            {
                "id": node.manager.id,
                "first_name": node.manager.first_name,
                "last_name": node.manager.last_name,
                "full_name": node.manager.full_name,
            }
            if node.manager else None
        ),
        "child_ids": [c.id for c in node.children],
    }


def _employee_summary(record: EmployeeRecord) -> dict:
    return {
        "id": record.id,
        "full_name": record.display_name,
        "position": record.position or record.role.value,
        "role": record.role.value,
        "status": record.status.value,
    }


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------


@app.get("/health")
def health() -> dict:
    return {"status": "ok", "geometry": DEFAULT_GEOMETRY.to_dict()}


@app.post("/org-chart/hierarchy")
def get_hierarchy(request: HierarchyRequest) -> dict:
    """Forest for non-geometric views, plus anomalies and stats badges."""
    records = _apply_filters(_load_records(request.employees), request.filters)
    hierarchy = build_hierarchy(records)
    diagnostics = compute_diagnostics(hierarchy)
    _report_warnings(diagnostics)

    return {
        "root_ids": [r.id for r in hierarchy.roots],
        "nodes": [_node_to_dict(n) for n in hierarchy.iter_nodes()],
        "anomalies": [a.to_dict() for a in hierarchy.anomalies],
        "stats": aggregate_stats(records, hierarchy).to_dict(),
        "diagnostics": diagnostics,
    }


@app.post("/org-chart/layout")
def get_layout(request: LayoutRequest) -> dict:
    """Flat positioned nodes, connectors and canvas for the tree diagram."""
    records = _apply_filters(_load_records(request.employees), request.filters)
    geometry = _resolve_geometry(request.geometry)
    viewport = _resolve_viewport(request.viewport)
    zoom = _resolve_zoom(request.scale)

    service = OrgChartService(geometry)
    expansion = ExpansionState.of(request.expanded_ids)
    if request.expand_all:
        expansion = expansion.expand_all(r.id for r in records)

    view = service.build(records, expansion, viewport=viewport)
    _report_warnings(view.diagnostics)

    canvas = view.layout.canvas
    scaled = canvas.scaled(zoom.scale)
    return {
        "nodes": [n.to_dict() for n in view.layout.nodes],
        "connectors": [c.to_dict() for c in view.layout.connectors],
        "canvas": {"width": canvas.width, "height": canvas.height},
        "scaled_canvas": {"width": scaled.width, "height": scaled.height},
        "scale": zoom.scale,
        "expanded_ids": sorted(expansion.expanded),
        "geometry": geometry.to_dict(),
        "layout_hash": view.layout_hash,
        "stats": view.stats.to_dict(),
        "anomalies": [a.to_dict() for a in view.hierarchy.anomalies],
    }


@app.post("/org-chart/groups")
def get_groups(request: GroupsRequest) -> dict:
    """Flat partition by department or facility; no tree layout involved."""
    records = _apply_filters(_load_records(request.employees), request.filters)
    if request.by == "department":
        grouped = group_by_department(records)
        label = lambda key: department_display_name(key, request.departments)
    else:
        grouped = group_by_facility(records)
        label = lambda key: facility_display_name(key, request.facilities)

    return {
        "by": request.by,
        "groups": [
            {
                "key": key,
                "name": label(key),
                "count": len(members),
                "employees": [_employee_summary(r) for r in members],
            }
            for key, members in grouped.items()
        ],
    }


@app.post("/org-chart/manager-candidates")
def get_manager_candidates(request: ManagerRequest) -> dict:
    records = _load_records(request.employees)
    return {
        "employee_id": request.employee_id,
        "candidates": [
            _employee_summary(r) for r in manager_candidates(records, request.employee_id)
        ],
    }


@app.post("/org-chart/validate-manager")
def validate_manager(request: ManagerRequest) -> dict:
    records = _load_records(request.employees)
    try:
        validate_manager_assignment(records, request.employee_id, request.manager_id)
    except ManagerAssignmentError as e:
        raise HTTPException(
            status_code=422,
            detail={"rule": e.rule, "message": e.detail},
        )

    updated = [
        record_to_dict(r) if r.id != request.employee_id
        else {**record_to_dict(r), "manager_id": request.manager_id}
        for r in records
    ]
    return {
        "valid": True,
        "employee_id": request.employee_id,
        "manager_id": request.manager_id,
        "employees": updated,
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "backend.main:app",
        host=os.environ.get("HOST", "0.0.0.0"),
        port=int(os.environ.get("PORT", "8000")),
        reload=False,
    )
