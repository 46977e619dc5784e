"""Fill, stroke, opacity and embedded-image resolution for page items.

Attribute values fall back from the element to its applied object style.
Every unresolved reference degrades to "no fill"/"no stroke" plus a
diagnostic; nothing here aborts sibling elements.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from xml.etree.ElementTree import Element

from idml_resolve.diagnostics import Diagnostic, Resolved
from idml_resolve.idml.xml import child_path, first_child, first_descendant, local_name, text_of
from idml_resolve.styles.colors import RGBA, ColorMap
from idml_resolve.styles.gradients import Gradient, GradientMap, GradientType, angle_to_gradient_control_points
from idml_resolve.styles.table import StyleTable
from idml_resolve.transforms.matrix import Point, parse_number_list

NO_SWATCH = "Swatch/None"

STROKE_ALIGNMENTS = {
    "CenterAlignment": "center",
    "InsideAlignment": "inner",
    "OutsideAlignment": "outer",
}

_WHITESPACE_RE = re.compile(r"\s+")


@dataclass(frozen=True)
class SolidFill:
    color: RGBA

    def to_dict(self) -> dict:
        return {"type": "color", "color": self.color.to_dict()}


@dataclass(frozen=True)
class GradientFill:
    swatch: str
    gradient: Gradient
    start: Point | None = None
    end: Point | None = None

    def to_dict(self) -> dict:
        data = {
            "type": "gradient",
            "swatch": self.swatch,
            "gradientType": self.gradient.type.value,
            "stops": [stop.to_dict() for stop in self.gradient.stops],
        }
        if self.start is not None and self.end is not None:
            data["start"] = {"x": self.start.x, "y": self.start.y}
            data["end"] = {"x": self.end.x, "y": self.end.y}
        return data


Fill = SolidFill | GradientFill


@dataclass(frozen=True)
class Stroke:
    color: RGBA
    width: float
    alignment: str | None = None

    def to_dict(self) -> dict:
        return {"color": self.color.to_dict(), "width": self.width, "alignment": self.alignment}


def element_attribute(element: Element, styles: StyleTable, name: str) -> str | None:
    """An attribute of ``element``, falling back to its applied object style."""
    value = element.get(name)
    if value is not None:
        return value
    return styles.attribute(element.get("AppliedObjectStyle"), name)


def resolve_fill(
    element: Element,
    styles: StyleTable,
    colors: ColorMap,
    gradients: GradientMap,
    aspect_ratio: float = 1.0,
    attribute: str = "FillColor",
) -> Resolved[Fill | None]:
    element_id = element.get("Self")
    swatch = element_attribute(element, styles, attribute)
    if not swatch or swatch == NO_SWATCH:
        return Resolved(None)
    if swatch in colors:
        return Resolved(SolidFill(colors[swatch]))
    if swatch in gradients:
        gradient = gradients[swatch]
        if gradient.type is GradientType.LINEAR:
            (angle,) = parse_number_list(
                element.get("GradientFillAngle") or "0",
                count=1,
                element_id=element_id,
                attribute="GradientFillAngle",
            )
            points = angle_to_gradient_control_points(angle, aspect_ratio if aspect_ratio > 0 else 1.0)
            return Resolved(GradientFill(swatch, gradient, points.start, points.end))
        return Resolved(GradientFill(swatch, gradient))
    return Resolved(
        None,
        (Diagnostic.error("missing-swatch", f"{attribute} {swatch} not found in document swatches", element_id),),
    )


def resolve_stroke(element: Element, styles: StyleTable, colors: ColorMap) -> Resolved[Stroke | None]:
    element_id = element.get("Self")
    swatch = element_attribute(element, styles, "StrokeColor")
    weight = element_attribute(element, styles, "StrokeWeight")
    if not swatch or swatch == NO_SWATCH or not weight:
        return Resolved(None)
    if swatch not in colors:
        return Resolved(
            None,
            (Diagnostic.warning("missing-swatch", f"StrokeColor {swatch} is not a solid document color", element_id),),
        )
    (width,) = parse_number_list(weight, count=1, element_id=element_id, attribute="StrokeWeight")
    alignment = STROKE_ALIGNMENTS.get(element_attribute(element, styles, "StrokeAlignment") or "")
    return Resolved(Stroke(colors[swatch], width, alignment))


def stroke_weight(element: Element, styles: StyleTable) -> float | None:
    weight = element_attribute(element, styles, "StrokeWeight")
    if not weight:
        return None
    (width,) = parse_number_list(weight, count=1, element_id=element.get("Self"), attribute="StrokeWeight")
    return width


def resolve_opacity(element: Element) -> float:
    blending = child_path(element, "TransparencySetting", "BlendingSetting")
    if blending is None:
        return 1.0
    (opacity,) = parse_number_list(
        blending.get("Opacity") or "100",
        count=1,
        element_id=element.get("Self"),
        attribute="Opacity",
    )
    return opacity / 100


def _image_mime_type(image: Element) -> str:
    if local_name(image.tag) == "SVG":
        return "image/svg+xml"
    type_name = (image.get("ImageTypeName") or "").upper()
    if "PNG" in type_name:
        return "image/png"
    if "JPEG" in type_name or "JPG" in type_name:
        return "image/jpeg"
    return "application/octet-stream"


def resolve_image(element: Element) -> Resolved[str | None]:
    """A ``data:`` URI for an embedded image, if the element carries one.

    Linked images and placed PDFs are reported and skipped.
    """
    element_id = element.get("Self")
    if element.get("ContentType") != "GraphicType":
        return Resolved(None)
    image = first_child(element, "Image")
    if image is None:
        image = first_child(element, "SVG")
    if image is None:
        if first_child(element, "PDF") is not None:
            return Resolved(
                None,
                (Diagnostic.warning("unsupported-pdf", "Placed PDF content is not supported", element_id),),
            )
        return Resolved(None)

    link = first_child(image, "Link")
    if link is not None and link.get("StoredState") != "Embedded":
        uri = link.get("LinkResourceURI") or "unknown"
        return Resolved(
            None,
            (Diagnostic.warning("linked-image", f"Linked image {uri} is not embedded", element_id),),
        )

    contents = child_path(image, "Properties", "Contents")
    if contents is None:
        contents = first_descendant(image, "Contents")
    payload = _WHITESPACE_RE.sub("", text_of(contents) or "")
    if not payload:
        return Resolved(None)
    return Resolved(f"data:{_image_mime_type(image)};base64,{payload}")

