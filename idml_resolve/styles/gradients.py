"""Document gradient swatches and linear-gradient control points."""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from xml.etree.ElementTree import Element

from idml_resolve.diagnostics import Diagnostic, Resolved
from idml_resolve.exceptions import DataError
from idml_resolve.idml.xml import iter_local
from idml_resolve.styles.colors import BLACK, RGBA, ColorMap
from idml_resolve.transforms.matrix import Point, parse_number_list

logger = logging.getLogger(__name__)

SQRT_2 = math.sqrt(2)


class GradientType(str, Enum):
    LINEAR = "linear"
    RADIAL = "radial"


@dataclass(frozen=True)
class GradientStop:
    color: RGBA
    position: float

    def to_dict(self) -> dict:
        return {"color": self.color.to_dict(), "position": self.position}


@dataclass(frozen=True)
class Gradient:
    type: GradientType
    stops: tuple[GradientStop, ...]

    def to_dict(self) -> dict:
        return {"type": self.type.value, "stops": [s.to_dict() for s in self.stops]}


@dataclass(frozen=True)
class GradientControlPoints:
    start: Point
    end: Point


GradientMap = Mapping[str, Gradient]


def _stop_color(stop: Element, colors: ColorMap, gradient_id: str | None) -> Resolved[RGBA]:
    ref = stop.get("StopColor")
    if ref is not None and ref in colors:
        return Resolved(colors[ref])
    return Resolved(
        BLACK,
        (Diagnostic.error("missing-stop-color", f"Unknown gradient stop color {ref!r}; using black", gradient_id),),
    )


def _stop_position(stop: Element, index: int, count: int, gradient_id: str | None) -> float:
    location = stop.get("Location")
    if location:
        (value,) = parse_number_list(location, count=1, element_id=gradient_id, attribute="Location")
        return value / 100
    if count <= 1:
        return 0.0
    return index / (count - 1)


def resolve_gradient(gradient: Element, colors: ColorMap) -> Resolved[Gradient]:
    key = gradient.get("Self")
    diagnostics: list[Diagnostic] = []
    gradient_type = GradientType.RADIAL if gradient.get("Type") == "Radial" else GradientType.LINEAR

    stop_elements = list(iter_local(gradient, "GradientStop"))
    stops: list[GradientStop] = []
    for index, stop in enumerate(stop_elements):
        color = _stop_color(stop, colors, key)
        diagnostics.extend(color.diagnostics)
        try:
            position = _stop_position(stop, index, len(stop_elements), key)
        except DataError as e:
            diagnostics.append(Diagnostic.error("data-error", str(e), key))
            position = index / (len(stop_elements) - 1) if len(stop_elements) > 1 else 0.0
        stops.append(GradientStop(color.value, position))
    return Resolved(Gradient(gradient_type, tuple(stops)), tuple(diagnostics))


def extract_gradients(graphic: Element | None, colors: ColorMap) -> Resolved[GradientMap]:
    """Build the read-only gradient map, resolving stop colors through ``colors``."""
    gradients: dict[str, Gradient] = {}
    diagnostics: list[Diagnostic] = []
    if graphic is not None:
        for gradient in iter_local(graphic, "Gradient"):
            key = gradient.get("Self")
            if not key:
                continue
            result = resolve_gradient(gradient, colors)
            gradients[key] = result.value
            diagnostics.extend(result.diagnostics)
    logger.debug("extracted %d gradients", len(gradients))
    return Resolved(MappingProxyType(gradients), tuple(diagnostics))


def scale_to_unit_rect(vector: tuple[float, float]) -> Point:
    """Push a vector out to the edge of the unit square centred at (0.5, 0.5)."""
    x, y = vector
    long_side = max(abs(x), abs(y))
    if long_side == 0:
        return Point(0.5, 0.5)
    return Point(x / long_side * 0.5 + 0.5, y / long_side * 0.5 + 0.5)


def angle_to_gradient_control_points(angle_degrees: float, aspect_ratio: float = 1.0) -> GradientControlPoints:
    """Start/end points on opposite edges of the unit square for a gradient angle.

    ``0`` points up and positive angles turn clockwise, in y-down shape
    coordinates. The x component is divided by the shape's width/height
    ratio. ``start`` and ``end`` are always reflections through (0.5, 0.5).
    """
    if not math.isfinite(aspect_ratio) or aspect_ratio <= 0:
        raise DataError(f"Aspect ratio must be positive, got {aspect_ratio}")
    rad = math.radians(angle_degrees + 90)
    dx = math.cos(rad) / aspect_ratio * SQRT_2
    dy = math.sin(rad) * SQRT_2
    return GradientControlPoints(
        start=scale_to_unit_rect((dx, dy)),
        end=scale_to_unit_rect((-dx, -dy)),
    )
