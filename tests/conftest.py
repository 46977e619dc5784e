"""Pytest configuration and shared fixtures for idml-resolve tests."""

from __future__ import annotations

from pathlib import Path

import pytest
from click.testing import CliRunner
from idml_fixtures import (
    DEFAULT_COLORS,
    PKG_NS,
    designmap_xml,
    gradient_xml,
    graphic_xml,
    page_item_xml,
    page_xml,
    rect_anchors,
    spread_xml,
    story_xml,
    styles_xml,
    write_idml,
)

STORY_BODY = (
    '<ParagraphStyleRange AppliedParagraphStyle="ParagraphStyle/$ID/NormalParagraphStyle" '
    'Justification="CenterAlign">'
    '<CharacterStyleRange FillColor="Color/Red" PointSize="12"><Content>Hello world</Content><Br/>'
    "</CharacterStyleRange>"
    "<CharacterStyleRange><Content>Second frame text</Content></CharacterStyleRange>"
    "</ParagraphStyleRange>"
)


@pytest.fixture
def runner() -> CliRunner:
    """Create a CliRunner instance for testing CLI commands."""
    return CliRunner()


@pytest.fixture
def sample_parts() -> dict[str, str]:
    """XML parts of a one-page document exercising every element kind."""
    spread = spread_xml(
        page_xml(),
        # threaded frames listed out of reading order
        page_item_xml(
            "TextFrame",
            "t2",
            rect_anchors(-234, -200, 200, 100),
            attrs='ParentStory="u10" PreviousTextFrame="t1" NextTextFrame="n" ContentType="TextType"',
        ),
        page_item_xml(
            "TextFrame",
            "t1",
            rect_anchors(-234, -324, 200, 100),
            attrs='ParentStory="u10" PreviousTextFrame="n" NextTextFrame="t2" ContentType="TextType"',
        ),
        page_item_xml(
            "Rectangle",
            "r1",
            rect_anchors(-234, -324, 100, 50),
            attrs=(
                'Name="$ID/Hero" FillColor="Color/Red" StrokeColor="Color/Black" '
                'StrokeWeight="1" StrokeAlignment="InsideAlignment"'
            ),
        ),
        page_item_xml(
            "Oval",
            "o1",
            rect_anchors(-306, -396, 100, 100),
            attrs='FillColor="Gradient/Sunset" GradientFillAngle="0"',
        ),
        page_item_xml(
            "GraphicLine",
            "l1",
            [(-306, 0), (-106, 0)],
            attrs='StrokeColor="Color/Black" StrokeWeight="2"',
            open_path=True,
        ),
        '<Group Self="g1" ItemTransform="1 0 0 1 10 20">'
        + page_item_xml("Rectangle", "r2", rect_anchors(-306, -396, 20, 20), attrs='FillColor="Color/Paper"')
        + "</Group>",
        page_item_xml("Rectangle", "h1", rect_anchors(0, 0, 5, 5), attrs='Visible="false"'),
    )
    preferences = (
        f'<idPkg:Preferences xmlns:idPkg="{PKG_NS}" DOMVersion="18.0">'
        '<DocumentPreference DocumentBleedTopOffset="9" DocumentBleedBottomOffset="9" '
        'DocumentBleedInsideOrLeftOffset="0" DocumentBleedOutsideOrRightOffset="0"/>'
        "</idPkg:Preferences>"
    )
    return {
        "designmap.xml": designmap_xml("Spreads/Spread_sp1.xml"),
        "Spreads/Spread_sp1.xml": spread,
        "Resources/Graphic.xml": graphic_xml(
            *DEFAULT_COLORS,
            gradient_xml("Gradient/Sunset", [("Color/Red", "0"), ("Color/Paper", "100")]),
        ),
        "Resources/Styles.xml": styles_xml(),
        "Resources/Preferences.xml": preferences,
        "Stories/Story_u10.xml": story_xml("u10", STORY_BODY),
    }


@pytest.fixture
def sample_idml(tmp_path: Path, sample_parts: dict[str, str]) -> Path:
    """The sample document zipped into an ``.idml`` file."""
    return write_idml(tmp_path / "sample.idml", sample_parts)


@pytest.fixture
def not_a_zip(tmp_path: Path) -> Path:
    """A file with an .idml extension that is not a ZIP archive."""
    path = tmp_path / "broken.idml"
    path.write_text("this is not a zip archive", encoding="utf-8")
    return path
