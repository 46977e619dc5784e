"""Tests for story text reassembly and styled runs."""

import pytest
from idml_fixtures import story_xml, styles_xml

from idml_resolve.exceptions import DataError
from idml_resolve.idml import parse_xml
from idml_resolve.styles import BLACK, RGBA, StyleTable
from idml_resolve.text import TextRun, clip_runs, extract_story

RED = RGBA(1, 0, 0, 1)
COLORS = {"Color/Black": BLACK, "Color/Red": RED}

STYLES = styles_xml(
    '<RootParagraphStyleGroup Self="rp">'
    '<ParagraphStyle Self="ParagraphStyle/Base" PointSize="10" Justification="RightAlign">'
    "<Properties><AppliedFont>Helvetica</AppliedFont></Properties>"
    "</ParagraphStyle>"
    '<ParagraphStyle Self="ParagraphStyle/Body">'
    "<Properties><BasedOn>ParagraphStyle/Base</BasedOn></Properties>"
    "</ParagraphStyle>"
    "</RootParagraphStyleGroup>"
    '<RootCharacterStyleGroup Self="rc">'
    '<CharacterStyle Self="CharacterStyle/Emph" FontStyle="Bold Italic"/>'
    "</RootCharacterStyleGroup>"
)

BODY = (
    '<ParagraphStyleRange AppliedParagraphStyle="ParagraphStyle/Body">'
    '<CharacterStyleRange AppliedCharacterStyle="CharacterStyle/$ID/[No character style]">'
    "<Content>Plain </Content></CharacterStyleRange>"
    '<CharacterStyleRange AppliedCharacterStyle="CharacterStyle/Emph" FillColor="Color/Red" '
    'Capitalization="AllCaps"><Content>loud</Content><Br/></CharacterStyleRange>'
    "</ParagraphStyleRange>"
)


def extract(body: str = BODY, **kwargs):
    return extract_story(parse_xml(story_xml("u10", body)), StyleTable(parse_xml(STYLES)), COLORS, **kwargs)


class TestExtractStory:
    """Tests for extract_story."""

    def test_text_concatenated_with_breaks(self) -> None:
        content = extract().value
        assert content.story_id == "u10"
        assert content.text == "Plain loud\n"

    def test_bare_story_root(self) -> None:
        """A <Story> parsed without its package wrapper keeps its id."""
        story = parse_xml(
            '<Story Self="u7"><ParagraphStyleRange><CharacterStyleRange>'
            "<Content>x</Content></CharacterStyleRange></ParagraphStyleRange></Story>"
        )
        content = extract_story(story, StyleTable(parse_xml(STYLES)), COLORS).value
        assert content.story_id == "u7"
        assert content.text == "x"

    def test_runs_cover_text(self) -> None:
        runs = extract().value.runs
        assert [(r.start, r.end) for r in runs] == [(0, 6), (6, 11)]

    def test_style_fallbacks(self) -> None:
        """Unset attributes come from the paragraph style and its BasedOn parent."""
        plain, loud = extract().value.runs
        assert plain.color == BLACK
        assert plain.font_size == 10
        assert plain.font_family == "Helvetica"
        assert (plain.font_weight, plain.font_style) == ("normal", "normal")
        assert loud.color == RED
        assert loud.capitalization == "uppercase"
        assert (loud.font_weight, loud.font_style) == ("bold", "italic")

    def test_justification_from_style(self) -> None:
        assert extract().value.justification == "right"

    def test_font_substitution(self) -> None:
        runs = extract(substitute_fonts=True).value.runs
        assert runs[0].font_family == "Roboto"

    def test_default_font(self) -> None:
        body = "<ParagraphStyleRange><CharacterStyleRange><Content>x</Content></CharacterStyleRange></ParagraphStyleRange>"
        run = extract(body, default_font="Inter").value.runs[0]
        assert run.font_family == "Inter"
        assert run.font_size is None

    def test_missing_color_reported_once(self) -> None:
        body = (
            "<ParagraphStyleRange>"
            '<CharacterStyleRange FillColor="Color/Nope"><Content>a</Content></CharacterStyleRange>'
            '<CharacterStyleRange FillColor="Color/Nope"><Content>b</Content></CharacterStyleRange>'
            "</ParagraphStyleRange>"
        )
        result = extract(body)
        assert [d.code for d in result.diagnostics] == ["missing-text-color"]
        assert result.diagnostics[0].element_id == "u10"
        assert all(run.color == BLACK for run in result.value.runs)

    def test_empty_story(self) -> None:
        result = extract("")
        assert result.value.text == ""
        assert result.value.runs == ()
        assert result.value.justification is None

    def test_bad_point_size(self) -> None:
        body = '<ParagraphStyleRange><CharacterStyleRange PointSize="big"><Content>x</Content></CharacterStyleRange></ParagraphStyleRange>'
        with pytest.raises(DataError):
            extract(body)


class TestClipRuns:
    def test_clip_and_rebase(self) -> None:
        runs = [TextRun(0, 6, BLACK), TextRun(6, 11, RED)]
        clipped = clip_runs(runs, 4, 8)
        assert [(r.start, r.end, r.color) for r in clipped] == [(0, 2, BLACK), (2, 4, RED)]

    def test_outside_range_dropped(self) -> None:
        runs = [TextRun(0, 6, BLACK), TextRun(6, 11, RED)]
        assert [(r.start, r.end) for r in clip_runs(runs, 6, 11)] == [(0, 5)]
        assert clip_runs(runs, 11, 11) == []


class TestStyleTable:
    def test_based_on_cycle_terminates(self) -> None:
        styles = StyleTable(
            parse_xml(
                styles_xml(
                    '<ParagraphStyle Self="A"><Properties><BasedOn>B</BasedOn></Properties></ParagraphStyle>'
                    '<ParagraphStyle Self="B"><Properties><BasedOn>A</BasedOn></Properties></ParagraphStyle>'
                )
            )
        )
        assert styles.attribute("A", "PointSize") is None
        assert "A" in styles
        assert len(styles) == 2

    def test_unknown_style(self) -> None:
        styles = StyleTable(None)
        assert styles.get("ObjectStyle/None") is None
        assert styles.attribute(None, "FillColor") is None
