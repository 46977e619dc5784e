"""Document swatch colors.

IDML ``Color`` resources live in ``Resources/Graphic.xml``. CMYK components
are percentages, RGB components are 0..255; both are normalized to RGBA
floats in ``[0, 1]``. Alpha is always opaque.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from types import MappingProxyType
from typing import NamedTuple
from xml.etree.ElementTree import Element

from idml_resolve.diagnostics import Diagnostic, Resolved
from idml_resolve.exceptions import DataError
from idml_resolve.idml.xml import iter_local
from idml_resolve.transforms.matrix import parse_number_list

logger = logging.getLogger(__name__)


class RGBA(NamedTuple):
    r: float
    g: float
    b: float
    a: float = 1.0

    def to_dict(self) -> dict[str, float]:
        return {"r": self.r, "g": self.g, "b": self.b, "a": self.a}

    def to_hex(self) -> str:
        return "#" + "".join(f"{round(max(0.0, min(1.0, v)) * 255):02x}" for v in (self.r, self.g, self.b))


BLACK = RGBA(0.0, 0.0, 0.0, 1.0)
WHITE = RGBA(1.0, 1.0, 1.0, 1.0)

ColorMap = Mapping[str, RGBA]


def cmyk_to_rgba(c: float, m: float, y: float, k: float) -> RGBA:
    """Convert CMYK percentages (0..100) to opaque RGBA.

    Each channel is ``1 - min(1, ink * (1 - K) + K)``. This is a naive
    conversion without color profiles.
    """
    c, m, y, k = (v / 100 for v in (c, m, y, k))
    return RGBA(
        1 - min(1.0, c * (1 - k) + k),
        1 - min(1.0, m * (1 - k) + k),
        1 - min(1.0, y * (1 - k) + k),
        1.0,
    )


def rgb255_to_rgba(r: float, g: float, b: float) -> RGBA:
    return RGBA(r / 255, g / 255, b / 255, 1.0)


def resolve_color(color: Element) -> Resolved[RGBA]:
    """Resolve one ``<Color>`` resource, substituting black on failure."""
    key = color.get("Self")
    space = color.get("Space")
    try:
        if space == "CMYK":
            c, m, y, k = parse_number_list(
                color.get("ColorValue"), count=4, element_id=key, attribute="ColorValue"
            )
            return Resolved(cmyk_to_rgba(c, m, y, k))
        if space == "RGB":
            r, g, b = parse_number_list(
                color.get("ColorValue"), count=3, element_id=key, attribute="ColorValue"
            )
            return Resolved(rgb255_to_rgba(r, g, b))
    except DataError as e:
        return Resolved(
            BLACK,
            (Diagnostic.error("malformed-color", f"{e}; using black", key),),
        )
    return Resolved(
        BLACK,
        (Diagnostic.warning("unknown-color-space", f"Unsupported color space {space!r}; using black", key),),
    )


def extract_colors(graphic: Element | None) -> Resolved[ColorMap]:
    """Build the read-only color map from a Graphic resource tree."""
    colors: dict[str, RGBA] = {}
    diagnostics: list[Diagnostic] = []
    if graphic is not None:
        for color in iter_local(graphic, "Color"):
            key = color.get("Self")
            if not key:
                continue
            result = resolve_color(color)
            colors[key] = result.value
            diagnostics.extend(result.diagnostics)
    logger.debug("extracted %d colors", len(colors))
    return Resolved(MappingProxyType(colors), tuple(diagnostics))
