"""Font handling for idml-resolve.

This subpackage provides:
- FontStyle parsing (weight and slant from InDesign style strings)
- Typeface alias resolution for common desktop families
"""

from idml_resolve.fonts.resolver import (
    TYPEFACE_ALIAS_MAP,
    WEIGHT_ALIAS_MAP,
    FontStyle,
    parse_font_style,
    resolve_typeface_alias,
)

__all__ = [
    "TYPEFACE_ALIAS_MAP",
    "WEIGHT_ALIAS_MAP",
    "FontStyle",
    "parse_font_style",
    "resolve_typeface_alias",
]
