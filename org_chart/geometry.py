"""
Org Chart Kernel — Geometry Configuration v1.0

Frozen configuration values for the layout engine and the viewport.
Invalid geometry cannot be recovered from automatically, so it fails
fast at construction time with GeometryConfigError.
"""

from __future__ import annotations

from dataclasses import dataclass, replace

from .constants import (
    HORIZONTAL_GAP,
    NODE_HEIGHT,
    NODE_WIDTH,
    VERTICAL_GAP,
    ZOOM_DEFAULT,
    ZOOM_MAX,
    ZOOM_MIN,
    ZOOM_STEP,
)


class GeometryConfigError(ValueError):
    """Raised when a geometry or viewport value is unusable."""

    def __init__(self, field_name: str, value: object, reason: str) -> None:
        self.field_name = field_name
        self.value = value
        super().__init__(f"[GEOMETRY:{field_name}] {value!r} {reason}")


def _require_number(field_name: str, value: object) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise GeometryConfigError(field_name, value, "must be a number")
    if value != value or value in (float("inf"), float("-inf")):
        raise GeometryConfigError(field_name, value, "must be finite")
    return value


def _require_positive(field_name: str, value: object) -> None:
    if _require_number(field_name, value) <= 0:
        raise GeometryConfigError(field_name, value, "must be > 0")


def _require_non_negative(field_name: str, value: object) -> None:
    if _require_number(field_name, value) < 0:
        raise GeometryConfigError(field_name, value, "must be >= 0")


@dataclass(frozen=True)
class LayoutGeometry:
    """Node box size and spacing used by the layout engine."""

    node_width: float = NODE_WIDTH
    node_height: float = NODE_HEIGHT
    horizontal_gap: float = HORIZONTAL_GAP
    vertical_gap: float = VERTICAL_GAP

    def __post_init__(self) -> None:
        _require_positive("node_width", self.node_width)
        _require_positive("node_height", self.node_height)
        _require_non_negative("horizontal_gap", self.horizontal_gap)
        _require_non_negative("vertical_gap", self.vertical_gap)

    @property
    def level_height(self) -> float:
        """Height of one horizontal band: box plus the gap below it."""
        return self.node_height + self.vertical_gap

    def to_dict(self) -> dict:
        return {
            "node_width": self.node_width,
            "node_height": self.node_height,
            "horizontal_gap": self.horizontal_gap,
            "vertical_gap": self.vertical_gap,
        }


@dataclass(frozen=True)
class Viewport:
    """
    Visible area of the rendering collaborator.

    width is the minimum canvas width. padding_x / padding_y are added
    past the furthest node and the deepest level. min_height_ratio
    makes the canvas at least that fraction of the viewport height.
    """

    width: float = 0.0
    height: float = 0.0
    padding_x: float = 0.0
    padding_y: float = 0.0
    min_height_ratio: float = 0.0

    def __post_init__(self) -> None:
        _require_non_negative("viewport.width", self.width)
        _require_non_negative("viewport.height", self.height)
        _require_non_negative("viewport.padding_x", self.padding_x)
        _require_non_negative("viewport.padding_y", self.padding_y)
        _require_non_negative("viewport.min_height_ratio", self.min_height_ratio)


@dataclass(frozen=True)
class ZoomState:
    """
    Uniform presentation scale. The layout engine is scale-unaware;
    the scale multiplies the finished canvas.
    """

    scale: float = ZOOM_DEFAULT
    minimum: float = ZOOM_MIN
    maximum: float = ZOOM_MAX
    step: float = ZOOM_STEP

    def __post_init__(self) -> None:
        _require_positive("zoom.minimum", self.minimum)
        _require_positive("zoom.step", self.step)
        _require_positive("zoom.maximum", self.maximum)
        if self.minimum > self.maximum:
            raise GeometryConfigError(
                "zoom.minimum", self.minimum, f"must not exceed maximum {self.maximum}"
            )
        _require_number("zoom.scale", self.scale)

    def with_scale(self, scale: float) -> "ZoomState":
        # Round to two places so repeated 0.2 steps land on exact stops.
        bounded = min(max(round(scale, 2), self.minimum), self.maximum)
        return replace(self, scale=bounded)

    def zoom_in(self) -> "ZoomState":
        return self.with_scale(self.scale + self.step)

    def zoom_out(self) -> "ZoomState":
        return self.with_scale(self.scale - self.step)

    def reset(self) -> "ZoomState":
        return self.with_scale(ZOOM_DEFAULT)
