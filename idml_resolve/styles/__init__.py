"""Color, gradient and appearance resolution for idml-resolve.

This subpackage provides:
- Swatch color extraction with CMYK and RGB normalization
- Gradient extraction and angle-to-control-point mapping
- Style-table lookups with BasedOn inheritance
- Fill, stroke, opacity and embedded image resolution
"""

from idml_resolve.styles.appearance import (
    GradientFill,
    SolidFill,
    Stroke,
    element_attribute,
    resolve_fill,
    resolve_image,
    resolve_opacity,
    resolve_stroke,
)
from idml_resolve.styles.colors import BLACK, RGBA, WHITE, ColorMap, cmyk_to_rgba, extract_colors
from idml_resolve.styles.gradients import (
    Gradient,
    GradientControlPoints,
    GradientMap,
    GradientStop,
    GradientType,
    angle_to_gradient_control_points,
    extract_gradients,
)
from idml_resolve.styles.table import StyleTable

__all__ = [
    "BLACK",
    "RGBA",
    "WHITE",
    "ColorMap",
    "cmyk_to_rgba",
    "extract_colors",
    "Gradient",
    "GradientControlPoints",
    "GradientMap",
    "GradientStop",
    "GradientType",
    "angle_to_gradient_control_points",
    "extract_gradients",
    "GradientFill",
    "SolidFill",
    "Stroke",
    "element_attribute",
    "resolve_fill",
    "resolve_image",
    "resolve_opacity",
    "resolve_stroke",
    "StyleTable",
]
