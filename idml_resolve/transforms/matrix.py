"""2D affine transform algebra for ItemTransform matrices.

A matrix ``(a, b, c, d, e, f)`` maps a point as::

    x' = a*x + c*y + e
    y' = b*x + d*y + f

Composition follows document nesting: the list passed to :func:`compose`
starts with the outermost container and ends with the element itself, so
the element's own transform is applied to a point first.
"""

from __future__ import annotations

import math
import re
from collections.abc import Iterable
from typing import NamedTuple

from idml_resolve.exceptions import DataError


class Point(NamedTuple):
    x: float
    y: float


class AffineMatrix(NamedTuple):
    a: float = 1.0
    b: float = 0.0
    c: float = 0.0
    d: float = 1.0
    e: float = 0.0
    f: float = 0.0

    def __matmul__(self, other: AffineMatrix) -> AffineMatrix:
        return multiply(self, other)

    def is_close(self, other: AffineMatrix, tol: float = 1e-9) -> bool:
        return all(abs(p - q) <= tol for p, q in zip(self, other))


IDENTITY = AffineMatrix()


class Decomposition(NamedTuple):
    translation: Point
    rotation: float
    scale_x: float
    scale_y: float


_NUMBER_RE = re.compile(r"^[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?$")


def multiply(outer: AffineMatrix, inner: AffineMatrix) -> AffineMatrix:
    """Return ``outer · inner``: apply ``inner`` to a point, then ``outer``."""
    a1, b1, c1, d1, e1, f1 = outer
    a2, b2, c2, d2, e2, f2 = inner
    return AffineMatrix(
        a1 * a2 + c1 * b2,
        b1 * a2 + d1 * b2,
        a1 * c2 + c1 * d2,
        b1 * c2 + d1 * d2,
        a1 * e2 + c1 * f2 + e1,
        b1 * e2 + d1 * f2 + f1,
    )


def compose(matrices: Iterable[AffineMatrix]) -> AffineMatrix:
    """Fold ``matrices`` (outermost first) into a single transform.

    An empty sequence composes to the identity.
    """
    combined = IDENTITY
    for m in matrices:
        combined = multiply(combined, AffineMatrix(*m))
    return combined


def apply(matrix: AffineMatrix, point: tuple[float, float]) -> Point:
    a, b, c, d, e, f = matrix
    x, y = point
    return Point(a * x + c * y + e, b * x + d * y + f)


def decompose(matrix: AffineMatrix) -> Decomposition:
    """Split a matrix into translation, rotation (radians, [0, 2π)) and scale.

    Exact only for matrices without shear.
    """
    a, b, c, d, e, f = matrix
    angle = math.atan2(b, a) % math.tau
    # atan2 may return -0.0 or a value that rounds up to tau
    if angle >= math.tau or angle == 0.0:
        angle = 0.0
    return Decomposition(
        translation=Point(e, f),
        rotation=angle,
        scale_x=math.hypot(a, b),
        scale_y=math.hypot(c, d),
    )


def parse_number_list(
    value: str | None,
    *,
    count: int | None = None,
    element_id: str | None = None,
    attribute: str | None = None,
) -> list[float]:
    """Parse a whitespace separated list of numbers from an attribute value."""
    if value is None:
        raise DataError(
            f"Missing required attribute {attribute or 'value'}",
            element_id=element_id,
            attribute=attribute,
        )
    parts = value.split()
    numbers: list[float] = []
    for part in parts:
        if not _NUMBER_RE.match(part):
            raise DataError(
                f"Malformed number {part!r} in {attribute or 'value'}",
                element_id=element_id,
                attribute=attribute,
            )
        numbers.append(float(part))
    if count is not None and len(numbers) != count:
        raise DataError(
            f"Expected {count} numbers in {attribute or 'value'}, got {len(numbers)}",
            element_id=element_id,
            attribute=attribute,
        )
    return numbers


def parse_item_transform(value: str | None, element_id: str | None = None) -> AffineMatrix:
    """Parse an ``ItemTransform="a b c d e f"`` attribute value."""
    return AffineMatrix(
        *parse_number_list(value, count=6, element_id=element_id, attribute="ItemTransform")
    )


def rotation(angle: float) -> AffineMatrix:
    """Rotation by ``angle`` radians (counter-clockwise in y-up terms)."""
    cos, sin = math.cos(angle), math.sin(angle)
    return AffineMatrix(cos, sin, -sin, cos, 0.0, 0.0)


def translation(tx: float, ty: float) -> AffineMatrix:
    return AffineMatrix(1.0, 0.0, 0.0, 1.0, tx, ty)


def scaling(sx: float, sy: float | None = None) -> AffineMatrix:
    return AffineMatrix(sx, 0.0, 0.0, sx if sy is None else sy, 0.0, 0.0)
