"""
Org Chart Service v1.0

Orchestrates one org chart view:
  HierarchyBuilder → forest (+ anomalies)
  StatsAggregator  → summary badges
  LayoutEngine     → positioned nodes + connectors + canvas

Caching strategy:
  - Cache key = (records_version, expansion snapshot, viewport).
  - At most cache_size views are kept; the least recently used goes first.
  - A new records_version drops every cached view and the cached forest.
  - Cached views are immutable, so returning the same object is safe.

The service never mutates records or expansion state.
"""

from __future__ import annotations

from collections import OrderedDict
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from .diagnostics import compute_diagnostics
from .domain_types import EmployeeRecord, HierarchyResult, HierarchyStats, TreeLayout
from .expansion import ExpansionState
from .geometry import LayoutGeometry, Viewport
from .hashing import canonical_layout_hash
from .hierarchy import build_hierarchy
from .invariants import validate_forest, validate_layout
from .layout import LayoutEngine
from .stats import aggregate_stats


@dataclass(frozen=True)
class OrgChartView:
    """Everything one render of the org chart screen needs."""

    records_version: int
    hierarchy: HierarchyResult
    stats: HierarchyStats
    layout: TreeLayout
    layout_hash: str
    diagnostics: dict


class OrgChartService:
    """
    Stateful service that builds and caches OrgChartView projections.

    Layout is cheap for hundreds of nodes; the cache only avoids
    redundant passes when the same (records, expansion) pair is
    rendered repeatedly.
    """

    def __init__(
        self,
        geometry: LayoutGeometry | None = None,
        validate: bool = True,
        cache_size: int = 16,
    ) -> None:
        if cache_size < 1:
            raise ValueError(f"cache_size must be >= 1, got {cache_size}")
        self._engine = LayoutEngine(geometry)
        self._validate = validate
        self._records_version: Optional[int] = None
        self._hierarchy: Optional[HierarchyResult] = None
        self._stats: Optional[HierarchyStats] = None
        self._cache_size = cache_size
        self._cache: OrderedDict[Tuple[int, tuple, Viewport], OrgChartView] = OrderedDict()

    @property
    def geometry(self) -> LayoutGeometry:
        return self._engine.geometry

    def build(
        self,
        records: Sequence[EmployeeRecord],
        expansion: ExpansionState,
        records_version: int = 0,
        viewport: Viewport | None = None,
    ) -> OrgChartView:
        """
        Build (or return the cached) view for this records version and
        expansion snapshot. Callers must bump ``records_version`` whenever
        ``records`` changes.
        """
        viewport = viewport or Viewport()
        key = (records_version, expansion.snapshot_key(), viewport)
        if records_version == self._records_version and key in self._cache:
            self._cache.move_to_end(key)
            return self._cache[key]

        if records_version != self._records_version or self._hierarchy is None:
            self._reset(records, records_version)

        layout = self._engine.compute(self._hierarchy, expansion, viewport)
        if self._validate:
            validate_layout(layout.roots, self._engine.geometry)

        view = OrgChartView(
            records_version=records_version,
            hierarchy=self._hierarchy,
            stats=self._stats,
            layout=layout,
            layout_hash=canonical_layout_hash(layout.roots),
            diagnostics=compute_diagnostics(self._hierarchy),
        )
        self._cache[key] = view
        while len(self._cache) > self._cache_size:
            self._cache.popitem(last=False)
        return view

    def all_ids(self) -> List[str]:
        """Every id in the current forest, for expand-all."""
        if self._hierarchy is None:
            return []
        return [node.id for node in self._hierarchy.iter_nodes()]

    def _reset(self, records: Sequence[EmployeeRecord], records_version: int) -> None:
        records = list(records)
        hierarchy = build_hierarchy(records)
        if self._validate:
            validate_forest(hierarchy, records)
        self._hierarchy = hierarchy
        self._stats = aggregate_stats(records, hierarchy)
        self._records_version = records_version
        self._cache.clear()
