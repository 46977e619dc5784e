"""Tests for Bézier path reconstruction and bounding boxes."""

import pytest
from idml_fixtures import page_item_xml, rect_anchors
from svg.path import Close, CubicBezier, Move, parse_path

from idml_resolve.exceptions import DataError
from idml_resolve.geometry import (
    BoundingBox,
    PathPoint,
    SubPath,
    build_path_description,
    compute_bounding_box,
    format_number,
    parse_path_geometry,
)
from idml_resolve.idml import parse_xml
from idml_resolve.transforms import Point


def square(size: float = 10) -> SubPath:
    return SubPath(tuple(PathPoint.corner(x, y) for x, y in rect_anchors(0, 0, size, size)))


class TestBoundingBox:
    """Tests for handle-inclusive bounding boxes."""

    def test_corner_square(self) -> None:
        box = compute_bounding_box(square().points)
        assert box == BoundingBox(0, 0, 10, 10)
        assert box.center == Point(5, 5)

    def test_handles_extend_box(self) -> None:
        """A control point outside the anchors widens the box."""
        points = list(square().points)
        anchor = Point(10, 10)
        points[2] = PathPoint(anchor, anchor, Point(15, 15))
        box = compute_bounding_box(points)
        assert box.width >= 15
        assert box.height >= 15
        assert (box.x, box.y) == (0, 0)

    def test_negative_coordinates(self) -> None:
        points = [PathPoint.corner(x, y) for x, y in rect_anchors(-30, -20, 10, 5)]
        box = compute_bounding_box(points)
        assert box == BoundingBox(-30, -20, 10, 5)
        assert box.to_dict()["centerX"] == -25

    def test_no_points_raises(self) -> None:
        with pytest.raises(DataError):
            compute_bounding_box([])


class TestFormatNumber:
    @pytest.mark.parametrize(
        ("value", "precision", "expected"),
        [
            (1.5, 6, "1.5"),
            (2.0, 6, "2"),
            (-0.0000001, 6, "0"),
            (1.23456789, 3, "1.235"),
            (1.4, 0, "1"),
            (-12.25, 6, "-12.25"),
        ],
    )
    def test_format(self, value: float, precision: int, expected: str) -> None:
        assert format_number(value, precision) == expected


class TestBuildPathDescription:
    """Tests for path data generation."""

    def test_closed_square(self) -> None:
        """Every segment is cubic and the closing segment returns to the start."""
        description = build_path_description([square()])
        assert description == (
            "M 0,0 "
            "C 0,0 10,0 10,0 "
            "C 10,0 10,10 10,10 "
            "C 10,10 0,10 0,10 "
            "C 0,10 0,0 0,0 Z"
        )

    def test_open_path_has_no_close(self) -> None:
        line = SubPath((PathPoint.corner(0, 0), PathPoint.corner(20, 0)), closed=False)
        assert build_path_description([line]) == "M 0,0 C 0,0 20,0 20,0"

    def test_relative_to_origin(self) -> None:
        sub = SubPath(tuple(PathPoint.corner(x, y) for x, y in rect_anchors(100, 50, 10, 10)))
        description = build_path_description([sub], origin=(100, 50))
        assert description.startswith("M 0,0 C 0,0 10,0 10,0")

    def test_uses_handles(self) -> None:
        a = PathPoint(Point(0, 0), Point(0, 0), Point(5, -5))
        b = PathPoint(Point(10, 0), Point(7, -5), Point(10, 0))
        description = build_path_description([SubPath((a, b), closed=False)])
        assert description == "M 0,0 C 5,-5 7,-5 10,0"

    def test_multiple_subpaths_joined(self) -> None:
        description = build_path_description([square(), square(4)])
        assert description.count("M ") == 2
        assert description.count("Z") == 2

    def test_parses_as_svg_path(self) -> None:
        """The generated description is valid SVG path data."""
        path = parse_path(build_path_description([square()]))
        kinds = [type(segment) for segment in path]
        assert kinds[0] is Move
        assert kinds.count(CubicBezier) == 4
        assert kinds[-1] is Close


class TestParsePathGeometry:
    """Tests for parsing PathGeometry from page items."""

    def test_rectangle(self) -> None:
        element = parse_xml(page_item_xml("Rectangle", "r1", rect_anchors(10, 20, 30, 40)))
        geometry = parse_path_geometry(element)
        assert geometry.bounding_box == BoundingBox(10, 20, 30, 40)
        assert geometry.path_description.startswith("M 0,0 ")
        assert geometry.path_description.endswith(" Z")

    def test_open_path_attribute(self) -> None:
        element = parse_xml(page_item_xml("GraphicLine", "l1", [(0, 0), (50, 0)], open_path=True))
        geometry = parse_path_geometry(element)
        assert geometry.subpaths[0].closed is False
        assert "Z" not in geometry.path_description

    def test_missing_direction_defaults_to_anchor(self) -> None:
        element = parse_xml(
            '<Polygon Self="p"><Properties><PathGeometry><GeometryPathType PathOpen="false">'
            '<PathPointArray><PathPointType Anchor="0 0"/><PathPointType Anchor="4 0"/>'
            '<PathPointType Anchor="2 3"/></PathPointArray>'
            "</GeometryPathType></PathGeometry></Properties></Polygon>"
        )
        geometry = parse_path_geometry(element)
        first = geometry.subpaths[0].points[0]
        assert first.left == first.anchor == first.right
        assert geometry.bounding_box == BoundingBox(0, 0, 4, 3)

    def test_missing_geometry_raises(self) -> None:
        with pytest.raises(DataError) as exc:
            parse_path_geometry(parse_xml('<Rectangle Self="r9"/>'))
        assert exc.value.element_id == "r9"

    def test_malformed_anchor_raises(self) -> None:
        element = parse_xml(
            '<Rectangle Self="r2"><Properties><PathGeometry><GeometryPathType>'
            '<PathPointArray><PathPointType Anchor="0 zero"/></PathPointArray>'
            "</GeometryPathType></PathGeometry></Properties></Rectangle>"
        )
        with pytest.raises(DataError) as exc:
            parse_path_geometry(element)
        assert exc.value.attribute == "Anchor"

    def test_precision_applied(self) -> None:
        element = parse_xml(page_item_xml("Rectangle", "r3", rect_anchors(0, 0, 1 / 3, 1)))
        geometry = parse_path_geometry(element, precision=2)
        assert "0.33,0" in geometry.path_description
