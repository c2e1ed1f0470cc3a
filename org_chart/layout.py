"""
Org Chart Kernel — Layout Engine v1.0

Bottom-up tidy-tree approximation. Every visible node gets a top-left
position and a reserved horizontal footprint (subtree_width); levels
form fixed horizontal bands.

Rules:
  - Children are laid out only when the parent is expanded
    (roots always are).
  - subtree_width = sum(child footprints) + gaps between them,
    never smaller than the node's own box.
  - Node is centred in its footprint:
      x = cursor + subtree_width / 2 - node_width / 2
  - y = level * (node_height + vertical_gap)
  - Cursor advances by subtree_width + horizontal_gap per sibling.
  - No hidden state: identical inputs → identical floats.

Cycles never reach this module (the hierarchy builder removes them).
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Protocol, Sequence, Tuple

from .domain_types import (
    CanvasSize,
    Connector,
    HierarchyResult,
    LayoutNode,
    OrgNode,
    Segment,
    TreeLayout,
)
from .geometry import LayoutGeometry, Viewport


class ExpansionLike(Protocol):
    def is_expanded(self, node: OrgNode) -> bool: ...


class LayoutEngine:
    """Scale-unaware layout over a forest of OrgNodes."""

    def __init__(self, geometry: LayoutGeometry | None = None) -> None:
        self._geometry = geometry or LayoutGeometry()

    @property
    def geometry(self) -> LayoutGeometry:
        return self._geometry

    # -- Positioning ---------------------------------------------------------

    def layout(
        self,
        nodes: Sequence[OrgNode],
        expansion: ExpansionLike,
        start_x: float = 0,
        level: int = 0,
    ) -> List[LayoutNode]:
        """
        Lay out one row of siblings and their visible descendants.

        Two explicit-stack post-order passes, so depth is limited by
        memory rather than the interpreter's recursion limit:
          1. visible children and subtree_width per node
          2. position from the sibling cursor, then build each
             LayoutNode once its children exist
        """
        g = self._geometry
        visible: Dict[str, List[OrgNode]] = {}
        widths: Dict[str, float] = {}

        stack: List[Tuple[OrgNode, bool]] = [(node, False) for node in reversed(nodes)]
        while stack:
            node, done = stack.pop()
            if not done:
                visible[node.id] = list(node.children) if expansion.is_expanded(node) else []
                stack.append((node, True))
                stack.extend((child, False) for child in reversed(visible[node.id]))
                continue
            children = visible[node.id]
            subtree_width = g.node_width
            if children:
                span = -g.horizontal_gap
                for child in children:
                    span += widths[child.id] + g.horizontal_gap
                subtree_width = max(span, g.node_width)
            widths[node.id] = subtree_width

        placed: Dict[str, LayoutNode] = {}
        work: List[Tuple[OrgNode, float, int, bool]] = [
            (node, left, level, False)
            for node, left in reversed(self._row(nodes, start_x, widths))
        ]
        while work:
            node, left, depth, done = work.pop()
            children = visible[node.id]
            if not done:
                work.append((node, left, depth, True))
                work.extend(
                    (child, child_left, depth + 1, False)
                    for child, child_left in reversed(self._row(children, left, widths))
                )
                continue
            subtree_width = widths[node.id]
            placed[node.id] = LayoutNode(
                node=node,
                x=left + subtree_width / 2 - g.node_width / 2,
                y=depth * g.level_height,
                width=g.node_width,
                subtree_width=subtree_width,
                level=depth,
                children=tuple(placed[c.id] for c in children),
            )

        return [placed[node.id] for node in nodes]

    def _row(
        self,
        siblings: Sequence[OrgNode],
        start_x: float,
        widths: Dict[str, float],
    ) -> List[Tuple[OrgNode, float]]:
        """Left edge of each sibling's footprint; cursor advances by width + gap."""
        cursor = start_x
        row: List[Tuple[OrgNode, float]] = []
        for node in siblings:
            row.append((node, cursor))
            cursor += widths[node.id] + self._geometry.horizontal_gap
        return row

    # -- Edges ---------------------------------------------------------------

    def connector(self, parent: LayoutNode, child: LayoutNode) -> Connector:
        """Drop from parent bottom-centre, run at mid height, drop into child."""
        g = self._geometry
        start_x = parent.x + g.node_width / 2
        start_y = parent.y + g.node_height
        end_x = child.x + g.node_width / 2
        end_y = child.y
        mid_y = start_y + (end_y - start_y) / 2
        return Connector(
            parent_id=parent.id,
            child_id=child.id,
            segments=(
                Segment(start_x, start_y, start_x, mid_y),
                Segment(start_x, mid_y, end_x, mid_y),
                Segment(end_x, mid_y, end_x, end_y),
            ),
        )

    def connectors(self, roots: Iterable[LayoutNode]) -> List[Connector]:
        return [
            self.connector(parent, child)
            for parent in flatten_layout(roots)
            for child in parent.children
        ]

    # -- Canvas --------------------------------------------------------------

    def canvas_size(
        self,
        nodes: Iterable[LayoutNode],
        max_level: int,
        viewport: Viewport | None = None,
    ) -> CanvasSize:
        """
        width  = max(x + width) + padding_x, at least viewport.width
        height = (max_level + 1) * level_height + padding_y,
                 at least viewport.height * min_height_ratio
        """
        viewport = viewport or Viewport()
        right_edges = [n.x + n.width for n in nodes]
        if right_edges:
            width = max(max(right_edges) + viewport.padding_x, viewport.width)
        else:
            width = viewport.width
        height = max(
            (max_level + 1) * self._geometry.level_height + viewport.padding_y,
            viewport.height * viewport.min_height_ratio,
        )
        return CanvasSize(width=width, height=height)

    # -- Full pass -----------------------------------------------------------

    def compute(
        self,
        hierarchy: HierarchyResult,
        expansion: ExpansionLike,
        viewport: Viewport | None = None,
        max_level: Optional[int] = None,
    ) -> TreeLayout:
        """
        One complete pass: positions, flat node list, connectors and canvas.
        Canvas height follows the deepest level in the data model, not the
        deepest visible level, unless ``max_level`` is given.
        """
        roots = tuple(self.layout(hierarchy.roots, expansion))
        nodes = tuple(flatten_layout(roots))
        if max_level is None:
            max_level = hierarchy.max_level
        return TreeLayout(
            roots=roots,
            nodes=nodes,
            connectors=tuple(self.connectors(roots)),
            canvas=self.canvas_size(nodes, max_level, viewport),
        )


def flatten_layout(roots: Iterable[LayoutNode]) -> List[LayoutNode]:
    """Pre-order flat list of every positioned node."""
    flat: List[LayoutNode] = []
    stack = list(reversed(list(roots)))
    while stack:
        node = stack.pop()
        flat.append(node)
        stack.extend(reversed(node.children))
    return flat
