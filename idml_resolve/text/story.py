"""Story text reassembly and per-character style runs.

A story's text is the concatenation of every ``CharacterStyleRange``'s
``Content`` (with ``Br`` as a newline) in document order. Each range
becomes one :class:`TextRun`; its attributes fall back from the range to
its applied character style, then to the enclosing paragraph's style.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, replace
from xml.etree.ElementTree import Element

from idml_resolve.diagnostics import Diagnostic, Resolved
from idml_resolve.fonts.resolver import parse_font_style, resolve_typeface_alias
from idml_resolve.idml.xml import child_path, first_descendant, iter_local, local_name, text_of
from idml_resolve.styles.colors import BLACK, RGBA, ColorMap
from idml_resolve.styles.table import StyleTable
from idml_resolve.transforms.matrix import parse_number_list

logger = logging.getLogger(__name__)

CAPITALIZATION = {
    "AllCaps": "uppercase",
    "SmallCaps": "small-caps",
    "CapToSmallCap": "small-caps",
}

JUSTIFICATION = {
    "LeftAlign": "left",
    "CenterAlign": "center",
    "RightAlign": "right",
}


@dataclass(frozen=True)
class TextRun:
    start: int
    end: int
    color: RGBA
    font_size: float | None = None
    capitalization: str = "normal"
    font_family: str = "Roboto"
    font_weight: str = "normal"
    font_style: str = "normal"

    def to_dict(self) -> dict:
        return {
            "startOffset": self.start,
            "endOffset": self.end,
            "color": self.color.to_dict(),
            "fontSize": self.font_size,
            "capitalization": self.capitalization,
            "fontFamily": self.font_family,
            "fontWeight": self.font_weight,
            "fontStyle": self.font_style,
        }


@dataclass(frozen=True)
class StoryContent:
    story_id: str | None
    text: str
    runs: tuple[TextRun, ...]
    justification: str | None = None


class _RangeAttributes:
    """Attribute lookup for one CharacterStyleRange: range → character style → paragraph style."""

    def __init__(self, char_range: Element, paragraph: Element | None, styles: StyleTable) -> None:
        self.char_range = char_range
        self.paragraph = paragraph
        self.styles = styles
        self.character_style = char_range.get("AppliedCharacterStyle")
        self.paragraph_style = paragraph.get("AppliedParagraphStyle") if paragraph is not None else None

    def get(self, name: str) -> str | None:
        value = self.char_range.get(name)
        if value is None:
            value = self.styles.attribute(self.character_style, name)
        if value is None and self.paragraph is not None:
            value = self.paragraph.get(name)
        if value is None:
            value = self.styles.attribute(self.paragraph_style, name)
        return value

    def applied_font(self) -> str | None:
        value = text_of(child_path(self.char_range, "Properties", "AppliedFont"))
        if not value:
            value = self.styles.property_text(self.character_style, "AppliedFont")
        if not value and self.paragraph is not None:
            value = text_of(child_path(self.paragraph, "Properties", "AppliedFont"))
        if not value:
            value = self.styles.property_text(self.paragraph_style, "AppliedFont")
        return value.strip() if value else None


def range_text(char_range: Element) -> str:
    parts: list[str] = []
    for child in char_range:
        tag = local_name(child.tag)
        if tag == "Content":
            parts.append(child.text or "")
        elif tag == "Br":
            parts.append("\n")
    return "".join(parts)


def _parent_map(root: Element) -> dict[Element, Element]:
    return {child: parent for parent in root.iter() for child in parent}


def _enclosing_paragraph(el: Element, parents: dict[Element, Element]) -> Element | None:
    current = parents.get(el)
    while current is not None:
        if local_name(current.tag) == "ParagraphStyleRange":
            return current
        current = parents.get(current)
    return None


def extract_story(
    story: Element,
    styles: StyleTable,
    colors: ColorMap,
    *,
    default_font: str = "Roboto",
    default_color: str = "Color/Black",
    substitute_fonts: bool = False,
) -> Resolved[StoryContent]:
    """Reassemble a story's text and its styled runs."""
    story_el = first_descendant(story, "Story")
    if story_el is None:
        story_el = story
    story_id = story_el.get("Self")

    parents = _parent_map(story_el)
    diagnostics: list[Diagnostic] = []
    pieces: list[str] = []
    runs: list[TextRun] = []
    offset = 0
    missing_colors: set[str] = set()

    for char_range in iter_local(story_el, "CharacterStyleRange"):
        text = range_text(char_range)
        paragraph = _enclosing_paragraph(char_range, parents)
        attrs = _RangeAttributes(char_range, paragraph, styles)

        swatch = attrs.get("FillColor") or default_color
        color = colors.get(swatch)
        if color is None:
            if swatch not in missing_colors:
                missing_colors.add(swatch)
                diagnostics.append(
                    Diagnostic.warning("missing-text-color", f"Text color {swatch} not found; using black", story_id)
                )
            color = BLACK

        point_size = attrs.get("PointSize")
        font_size = None
        if point_size:
            (font_size,) = parse_number_list(point_size, count=1, element_id=story_id, attribute="PointSize")

        family = attrs.applied_font() or default_font
        if substitute_fonts:
            family = resolve_typeface_alias(family)
        font = parse_font_style(attrs.get("FontStyle"))

        runs.append(
            TextRun(
                start=offset,
                end=offset + len(text),
                color=color,
                font_size=font_size,
                capitalization=CAPITALIZATION.get(attrs.get("Capitalization") or "", "normal"),
                font_family=family,
                font_weight=font.weight,
                font_style=font.style,
            )
        )
        pieces.append(text)
        offset += len(text)

    justification = None
    first_paragraph = next(iter_local(story_el, "ParagraphStyleRange"), None)
    if first_paragraph is not None:
        value = first_paragraph.get("Justification")
        if value is None:
            value = styles.attribute(first_paragraph.get("AppliedParagraphStyle"), "Justification")
        justification = JUSTIFICATION.get(value or "")

    logger.debug("story %s: %d characters in %d runs", story_id, offset, len(runs))
    content = StoryContent(story_id, "".join(pieces), tuple(runs), justification)
    return Resolved(content, tuple(diagnostics))


def clip_runs(runs: Sequence[TextRun], start: int, end: int) -> list[TextRun]:
    """Runs overlapping ``[start, end)``, clipped and re-based to ``start``."""
    clipped: list[TextRun] = []
    for run in runs:
        lo, hi = max(run.start, start), min(run.end, end)
        if lo < hi:
            clipped.append(replace(run, start=lo - start, end=hi - start))
    return clipped
