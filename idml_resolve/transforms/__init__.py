"""Affine transform algebra for idml-resolve.

This subpackage provides:
- The AffineMatrix value type and composition in document nesting order
- Point transformation and rotation/scale decomposition
- ItemTransform attribute parsing
"""

from idml_resolve.transforms.matrix import (
    IDENTITY,
    AffineMatrix,
    Decomposition,
    Point,
    apply,
    compose,
    decompose,
    multiply,
    parse_item_transform,
    parse_number_list,
    rotation,
    scaling,
    translation,
)

__all__ = [
    "IDENTITY",
    "AffineMatrix",
    "Decomposition",
    "Point",
    "apply",
    "compose",
    "decompose",
    "multiply",
    "parse_item_transform",
    "parse_number_list",
    "rotation",
    "scaling",
    "translation",
]
