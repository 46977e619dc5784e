"""Geometry resolution for idml-resolve.

This subpackage provides:
- Bézier path reconstruction with handle-inclusive bounding boxes
- Page-relative placement through nested container transforms
"""

from idml_resolve.geometry.path import (
    BoundingBox,
    PathGeometry,
    PathPoint,
    SubPath,
    build_path_description,
    compute_bounding_box,
    format_number,
    parse_path_geometry,
)
from idml_resolve.geometry.placement import (
    PageRecord,
    ResolvedPlacement,
    collect_ancestor_transforms,
    resolve_placement,
    select_page,
    spread_center,
)

__all__ = [
    "BoundingBox",
    "PathGeometry",
    "PathPoint",
    "SubPath",
    "build_path_description",
    "compute_bounding_box",
    "format_number",
    "parse_path_geometry",
    "PageRecord",
    "ResolvedPlacement",
    "collect_ancestor_transforms",
    "resolve_placement",
    "select_page",
    "spread_center",
]
