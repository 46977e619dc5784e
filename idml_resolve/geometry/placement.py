"""Page-space placement of page items.

Raw IDML coordinates are expressed relative to the spread's origin. A page
item's position is found by composing the transforms of every container
between it and the spread, pushing its local bounding-box corner through
the result, and re-expressing that point relative to the top-left of the
page it sits on.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence
from dataclasses import dataclass
from xml.etree.ElementTree import Element

from idml_resolve.exceptions import DataError, StructuralError
from idml_resolve.geometry.path import BoundingBox, PathGeometry
from idml_resolve.idml.xml import local_name
from idml_resolve.transforms.matrix import (
    AffineMatrix,
    Point,
    apply,
    compose,
    decompose,
    parse_item_transform,
    parse_number_list,
)

logger = logging.getLogger(__name__)

SPREAD_TAG = "Spread"


@dataclass(frozen=True)
class PageRecord:
    """A page's placement data, lifted out of its ``<Page>`` element."""

    name: str
    transform: AffineMatrix
    # GeometricBounds order: top, left, bottom, right
    bounds: tuple[float, float, float, float]
    self_id: str | None = None

    @property
    def top(self) -> float:
        return self.bounds[0]

    @property
    def left(self) -> float:
        return self.bounds[1]

    @property
    def width(self) -> float:
        return self.bounds[3] - self.bounds[1]

    @property
    def height(self) -> float:
        return self.bounds[2] - self.bounds[0]

    @property
    def origin(self) -> Point:
        """The page's top-left corner in spread coordinates (translation-only pages)."""
        return Point(self.transform.e + self.left, self.transform.f + self.top)

    def contains(self, point: tuple[float, float]) -> bool:
        x, y = point
        ox, oy = self.origin
        return ox <= x <= ox + self.width and oy <= y <= oy + self.height

    @classmethod
    def from_element(cls, page: Element) -> PageRecord:
        page_id = page.get("Self")
        top, left, bottom, right = parse_number_list(
            page.get("GeometricBounds"),
            count=4,
            element_id=page_id,
            attribute="GeometricBounds",
        )
        return cls(
            name=page.get("Name") or "",
            transform=parse_item_transform(page.get("ItemTransform"), page_id),
            bounds=(top, left, bottom, right),
            self_id=page_id,
        )


@dataclass(frozen=True)
class ResolvedPlacement:
    x: float
    y: float
    width: float
    height: float
    rotation: float
    scale_x: float = 1.0
    scale_y: float = 1.0

    @property
    def aspect_ratio(self) -> float:
        if self.height == 0:
            return 1.0
        return self.width / self.height

    def scaled(self, divisor: float) -> ResolvedPlacement:
        """Convert lengths from points into a caller unit (``points / divisor``)."""
        return ResolvedPlacement(
            x=self.x / divisor,
            y=self.y / divisor,
            width=self.width / divisor,
            height=self.height / divisor,
            rotation=self.rotation,
            scale_x=self.scale_x,
            scale_y=self.scale_y,
        )

    def to_dict(self) -> dict[str, float]:
        return {
            "x": self.x,
            "y": self.y,
            "width": self.width,
            "height": self.height,
            "rotation": self.rotation,
            "scaleX": self.scale_x,
            "scaleY": self.scale_y,
        }


def collect_ancestor_transforms(ancestors: Sequence[Element]) -> list[AffineMatrix]:
    """Transforms of container elements, outermost first.

    ``ancestors`` must already be ordered outermost first and stop below the
    spread. Containers without an ``ItemTransform`` contribute nothing.
    """
    transforms: list[AffineMatrix] = []
    for ancestor in ancestors:
        if local_name(ancestor.tag) == SPREAD_TAG:
            continue
        value = ancestor.get("ItemTransform")
        if value is None:
            continue
        transforms.append(parse_item_transform(value, ancestor.get("Self")))
    return transforms


def select_page(pages: Sequence[PageRecord], point: tuple[float, float]) -> PageRecord | None:
    """Pick the page containing ``point`` (spread coordinates), else the first page."""
    if not pages:
        return None
    for page in pages:
        if page.contains(point):
            return page
    return pages[0]


def spread_transform(
    element_transform: AffineMatrix,
    ancestor_transforms: Sequence[AffineMatrix] = (),
) -> AffineMatrix:
    return compose([*ancestor_transforms, element_transform])


def spread_center(
    geometry: PathGeometry,
    element_transform: AffineMatrix,
    ancestor_transforms: Sequence[AffineMatrix] = (),
) -> Point:
    """The element's box centre in spread coordinates, used to choose its page."""
    return apply(spread_transform(element_transform, ancestor_transforms), geometry.bounding_box.center)


def resolve_placement(
    geometry: PathGeometry | BoundingBox,
    element_transform: AffineMatrix,
    page: PageRecord | None,
    ancestor_transforms: Sequence[AffineMatrix] = (),
    element_id: str | None = None,
) -> ResolvedPlacement:
    """Resolve a page item's page-relative position, size and rotation.

    Args:
        geometry: The item's parsed path geometry (or just its local box).
        element_transform: The item's own ItemTransform.
        page: The page the item is placed on.
        ancestor_transforms: Container transforms, outermost first.
        element_id: Used in error messages.

    Raises:
        StructuralError: ``page`` is None.
    """
    if page is None:
        raise StructuralError("No page found for element", element_id=element_id)

    box = geometry.bounding_box if isinstance(geometry, PathGeometry) else geometry
    combined = spread_transform(element_transform, ancestor_transforms)
    parts = decompose(combined)

    corner = apply(combined, box.top_left)
    x = corner.x - page.transform.e - page.left
    y = corner.y - page.transform.f - page.top

    width = box.width * parts.scale_x
    height = box.height * parts.scale_y
    for name, value in (("x", x), ("y", y), ("width", width), ("height", height)):
        if not math.isfinite(value):
            raise DataError(f"Placement {name} is not finite", element_id=element_id)

    logger.debug(
        "placed %s at (%.3f, %.3f) size %.3fx%.3f rotation %.4f",
        element_id,
        x,
        y,
        width,
        height,
        parts.rotation,
    )
    return ResolvedPlacement(
        x=x,
        y=y,
        width=width,
        height=height,
        rotation=parts.rotation,
        scale_x=parts.scale_x,
        scale_y=parts.scale_y,
    )
