#!/usr/bin/env python3
"""
Font resolution utilities.

InDesign stores a font as a family name (``AppliedFont``) plus a free-form
style string (``FontStyle="Semibold Italic"``). This module turns the style
string into a weight/slant pair and maps common desktop families to
web-available substitutes. Fetching font files is left to the caller.
"""

from __future__ import annotations

import re
from typing import NamedTuple

# Numeric weights to weight names
WEIGHT_ALIAS_MAP: dict[str, str] = {
    "100": "thin",
    "200": "extra-light",
    "300": "light",
    "regular": "normal",
    "400": "normal",
    "500": "medium",
    "600": "semi-bold",
    "700": "bold",
    "800": "extra-bold",
    "900": "heavy",
}

# Compact style tokens, most specific first: "extrabold" must win over "bold".
_WEIGHT_TOKENS: tuple[tuple[str, str], ...] = (
    ("extralight", "extra-light"),
    ("ultralight", "extra-light"),
    ("extrabold", "extra-bold"),
    ("ultrabold", "extra-bold"),
    ("semibold", "semi-bold"),
    ("demibold", "semi-bold"),
    ("thin", "thin"),
    ("hairline", "thin"),
    ("light", "light"),
    ("medium", "medium"),
    ("bold", "bold"),
    ("heavy", "heavy"),
    ("black", "heavy"),
)

TYPEFACE_ALIAS_MAP: dict[str, str] = {
    "Helvetica": "Roboto",
    "Times New Roman": "Tinos",
    "Arial": "Arimo",
    "Georgia": "Tinos",
    "Garamond": "EB Garamond",
    "Futura": "Raleway",
    "Comic Sans MS": "Comic Neue",
}


class FontStyle(NamedTuple):
    weight: str = "normal"
    style: str = "normal"


def parse_font_style(font_style: str | None) -> FontStyle:
    """Parse an InDesign ``FontStyle`` value such as ``"Bold Italic"``."""
    if not font_style:
        return FontStyle()
    words = [w for w in re.split(r"[\s\-_]+", font_style.lower()) if w]
    style = "italic" if any(w in ("italic", "oblique") for w in words) else "normal"

    for word in words:
        if word in WEIGHT_ALIAS_MAP:
            return FontStyle(WEIGHT_ALIAS_MAP[word], style)

    compact = "".join(words)
    for token, weight in _WEIGHT_TOKENS:
        if token in compact:
            return FontStyle(weight, style)
    return FontStyle("normal", style)


def resolve_typeface_alias(family: str) -> str:
    """Map a desktop family to its web substitute, or return it unchanged."""
    return TYPEFACE_ALIAS_MAP.get(family, family)
