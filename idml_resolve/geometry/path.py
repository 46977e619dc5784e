"""Bézier path reconstruction from IDML PathGeometry records.

Each ``PathPointType`` carries an anchor and two direction handles:
``LeftDirection`` (incoming) and ``RightDirection`` (outgoing). A cubic
segment from point *i* to point *i+1* is ``(right_i, left_i+1, anchor_i+1)``.
The bounding box spans anchors AND handles, so curves that bulge beyond
their anchors are never clipped.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass
from xml.etree.ElementTree import Element

from idml_resolve.exceptions import DataError
from idml_resolve.idml.xml import child_path, first_descendant, iter_local
from idml_resolve.transforms.matrix import Point, parse_number_list


@dataclass(frozen=True)
class PathPoint:
    anchor: Point
    left: Point
    right: Point

    @classmethod
    def corner(cls, x: float, y: float) -> PathPoint:
        """A point whose handles sit on its anchor (straight segments)."""
        p = Point(x, y)
        return cls(p, p, p)

    def coordinates(self) -> tuple[Point, Point, Point]:
        return (self.anchor, self.left, self.right)


@dataclass(frozen=True)
class SubPath:
    points: tuple[PathPoint, ...]
    closed: bool = True


@dataclass(frozen=True)
class BoundingBox:
    x: float
    y: float
    width: float
    height: float

    @property
    def center_x(self) -> float:
        return self.x + self.width / 2

    @property
    def center_y(self) -> float:
        return self.y + self.height / 2

    @property
    def top_left(self) -> Point:
        return Point(self.x, self.y)

    @property
    def center(self) -> Point:
        return Point(self.center_x, self.center_y)

    def to_dict(self) -> dict[str, float]:
        return {
            "x": self.x,
            "y": self.y,
            "width": self.width,
            "height": self.height,
            "centerX": self.center_x,
            "centerY": self.center_y,
        }


@dataclass(frozen=True)
class PathGeometry:
    subpaths: tuple[SubPath, ...]
    bounding_box: BoundingBox
    path_description: str

    @classmethod
    def from_subpaths(cls, subpaths: Sequence[SubPath], precision: int = 6) -> PathGeometry:
        box = compute_bounding_box(_iter_points(subpaths))
        return cls(
            subpaths=tuple(subpaths),
            bounding_box=box,
            path_description=build_path_description(subpaths, box.top_left, precision),
        )


def _iter_points(subpaths: Iterable[SubPath]) -> Iterator[PathPoint]:
    for sub in subpaths:
        yield from sub.points


def compute_bounding_box(points: Iterable[PathPoint]) -> BoundingBox:
    """Bounding box over the union of every anchor and both handles."""
    xs: list[float] = []
    ys: list[float] = []
    for point in points:
        for x, y in point.coordinates():
            xs.append(x)
            ys.append(y)
    if not xs:
        raise DataError("Path has no points")
    min_x, min_y = min(xs), min(ys)
    return BoundingBox(min_x, min_y, max(xs) - min_x, max(ys) - min_y)


def format_number(value: float, precision: int = 6) -> str:
    text = f"{value:.{precision}f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    if text in ("-0", ""):
        text = "0"
    return text


def _fmt_point(p: Point, origin: Point, precision: int) -> str:
    return f"{format_number(p.x - origin.x, precision)},{format_number(p.y - origin.y, precision)}"


def _subpath_description(sub: SubPath, origin: Point, precision: int) -> str:
    points = sub.points
    if not points:
        return ""

    def segment(prev: PathPoint, nxt: PathPoint) -> str:
        return (
            f"C {_fmt_point(prev.right, origin, precision)} "
            f"{_fmt_point(nxt.left, origin, precision)} "
            f"{_fmt_point(nxt.anchor, origin, precision)}"
        )

    parts = [f"M {_fmt_point(points[0].anchor, origin, precision)}"]
    for prev, nxt in zip(points, points[1:]):
        parts.append(segment(prev, nxt))
    if sub.closed:
        if len(points) > 1:
            # wrap-around segment back to the first anchor
            parts.append(segment(points[-1], points[0]))
        parts.append("Z")
    return " ".join(parts)


def build_path_description(
    subpaths: Sequence[SubPath],
    origin: tuple[float, float] = (0.0, 0.0),
    precision: int = 6,
) -> str:
    """Render sub-paths as SVG-style path data relative to ``origin``.

    ``origin`` is normally the bounding box's top-left corner so the
    description is box-local.
    """
    origin = Point(*origin)
    rendered = (_subpath_description(sub, origin, precision) for sub in subpaths)
    return " ".join(text for text in rendered if text)


def _parse_point(el: Element, attribute: str, element_id: str | None, default: Point | None = None) -> Point:
    value = el.get(attribute)
    if value is None and default is not None:
        return default
    x, y = parse_number_list(value, count=2, element_id=element_id, attribute=attribute)
    return Point(x, y)


def parse_path_point(el: Element, element_id: str | None = None) -> PathPoint:
    anchor = _parse_point(el, "Anchor", element_id)
    left = _parse_point(el, "LeftDirection", element_id, default=anchor)
    right = _parse_point(el, "RightDirection", element_id, default=anchor)
    return PathPoint(anchor, left, right)


def parse_subpaths(path_geometry: Element, element_id: str | None = None) -> list[SubPath]:
    subpaths: list[SubPath] = []
    for geometry_type in iter_local(path_geometry, "GeometryPathType"):
        closed = (geometry_type.get("PathOpen") or "false").lower() != "true"
        for point_array in iter_local(geometry_type, "PathPointArray"):
            points = tuple(
                parse_path_point(pt, element_id)
                for pt in iter_local(point_array, "PathPointType")
            )
            subpaths.append(SubPath(points, closed))
    return subpaths


def find_path_geometry(element: Element) -> Element | None:
    found = child_path(element, "Properties", "PathGeometry")
    if found is None:
        found = first_descendant(element, "PathGeometry")
    return found


def parse_path_geometry(element: Element, precision: int = 6) -> PathGeometry:
    """Parse the ``PathGeometry`` of a page item into box and path description.

    Raises:
        DataError: the element has no PathGeometry, no points, or malformed
            point coordinates.
    """
    element_id = element.get("Self")
    path_geometry = find_path_geometry(element)
    if path_geometry is None:
        raise DataError("Element has no PathGeometry", element_id=element_id, attribute="PathGeometry")
    subpaths = parse_subpaths(path_geometry, element_id)
    if not any(sub.points for sub in subpaths):
        raise DataError("PathGeometry has no points", element_id=element_id, attribute="PathGeometry")
    return PathGeometry.from_subpaths(subpaths, precision)
