"""
Org Chart Kernel — Geometry Constants (Default Values)

All magic numbers live here as module-level defaults.
Runtime geometry is injected via LayoutGeometry and Viewport
(see geometry.py). Units are arbitrary canvas units.
"""

# --- Node Box ---
NODE_WIDTH: int = 160
NODE_HEIGHT: int = 80

# --- Spacing ---
# Between adjacent sibling subtrees.
HORIZONTAL_GAP: int = 24
# Between consecutive levels.
VERTICAL_GAP: int = 60

# --- Zoom (presentation-layer multiplier, applied after layout) ---
ZOOM_MIN: float = 0.4
ZOOM_MAX: float = 2.0
ZOOM_STEP: float = 0.2
ZOOM_DEFAULT: float = 1.0

# --- Grouping Views ---
UNASSIGNED_GROUP: str = "unassigned"
NO_DEPARTMENT_LABEL: str = "No Department"
NO_FACILITY_LABEL: str = "No Facility"
UNKNOWN_FACILITY_LABEL: str = "Unknown"
