"""High-level API: resolve every visual element of an IDML document.

Example:
    >>> from idml_resolve import IdmlResolver
    >>> result = IdmlResolver().resolve_file("brochure.idml")
    >>> for page in result.pages:
    ...     for element in page.elements:
    ...         print(element.kind, element.placement)
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any
from xml.etree.ElementTree import Element

from idml_resolve.config import Config
from idml_resolve.diagnostics import DiagnosticLog
from idml_resolve.exceptions import DataError, IdmlResolveError, StructuralError
from idml_resolve.geometry.path import PathGeometry, parse_path_geometry
from idml_resolve.geometry.placement import (
    PageRecord,
    ResolvedPlacement,
    collect_ancestor_transforms,
    resolve_placement,
    select_page,
    spread_center,
)
from idml_resolve.idml.package import BleedMargins, IdmlPackage
from idml_resolve.idml.xml import local_name
from idml_resolve.styles.appearance import (
    Fill,
    Stroke,
    resolve_fill,
    resolve_image,
    resolve_opacity,
    resolve_stroke,
    stroke_weight,
)
from idml_resolve.styles.colors import ColorMap, extract_colors
from idml_resolve.styles.gradients import GradientMap, extract_gradients
from idml_resolve.styles.table import StyleTable
from idml_resolve.text.frames import (
    TextFrameRecord,
    calculate_split_indices,
    order_text_frames,
    update_frame_contents,
)
from idml_resolve.text.story import StoryContent, TextRun, clip_runs, extract_story
from idml_resolve.transforms.matrix import AffineMatrix, parse_item_transform

logger = logging.getLogger(__name__)

ELEMENT_KINDS = {
    "Rectangle": "rectangle",
    "Oval": "ellipse",
    "Polygon": "polygon",
    "GraphicLine": "line",
    "TextFrame": "text",
    "Group": "group",
}


@dataclass(frozen=True)
class DocumentResources:
    """Document-wide lookups, built once and shared read-only by every element."""

    colors: ColorMap
    gradients: GradientMap
    styles: StyleTable


@dataclass
class ResolvedElement:
    element_id: str | None
    kind: str
    name: str = ""
    placement: ResolvedPlacement | None = None
    path_description: str = ""
    fill: Fill | None = None
    stroke: Stroke | None = None
    opacity: float = 1.0
    image_uri: str | None = None
    story_id: str | None = None
    text: str | None = None
    text_runs: list[TextRun] = field(default_factory=list)
    justification: str | None = None
    children: list[ResolvedElement] = field(default_factory=list)

    def to_dict(self, unit_scale: float = 1.0) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": self.element_id,
            "kind": self.kind,
            "name": self.name,
            "placement": self.placement.scaled(unit_scale).to_dict() if self.placement else None,
            "pathDescription": self.path_description,
            "fillColor": self.fill.to_dict() if self.fill else None,
            "strokeColor": self.stroke.color.to_dict() if self.stroke else None,
            "strokeWidth": self.stroke.width / unit_scale if self.stroke else None,
            "strokeAlignment": self.stroke.alignment if self.stroke else None,
            "opacity": self.opacity,
        }
        if self.image_uri is not None:
            data["imageUri"] = self.image_uri
        if self.kind == "text":
            data["storyId"] = self.story_id
            data["text"] = self.text or ""
            data["textRuns"] = [run.to_dict() for run in self.text_runs]
            data["justification"] = self.justification
        if self.kind == "group":
            data["children"] = [child.to_dict(unit_scale) for child in self.children]
        return data

    def walk(self):
        yield self
        for child in self.children:
            yield from child.walk()


@dataclass
class ResolvedPage:
    name: str
    width: float
    height: float
    spread: str | None = None
    elements: list[ResolvedElement] = field(default_factory=list)

    def to_dict(self, unit_scale: float = 1.0) -> dict[str, Any]:
        return {
            "name": self.name,
            "width": self.width / unit_scale,
            "height": self.height / unit_scale,
            "spread": self.spread,
            "elements": [el.to_dict(unit_scale) for el in self.elements],
        }


@dataclass
class ConversionResult:
    """Result of resolving one document."""

    source: str | None
    pages: list[ResolvedPage] = field(default_factory=list)
    diagnostics: DiagnosticLog = field(default_factory=DiagnosticLog)
    bleed: BleedMargins = field(default_factory=BleedMargins)

    @property
    def success(self) -> bool:
        return not self.diagnostics.has_errors

    @property
    def errors(self) -> list[str]:
        return [d.message for d in self.diagnostics.errors]

    @property
    def warnings(self) -> list[str]:
        return [d.message for d in self.diagnostics.warnings]

    def elements(self) -> list[ResolvedElement]:
        """Every resolved element, groups flattened, in document order."""
        return [el for page in self.pages for top in page.elements for el in top.walk()]

    def find(self, element_id: str) -> ResolvedElement | None:
        return next((el for el in self.elements() if el.element_id == element_id), None)

    def to_dict(self, unit_scale: float = 1.0) -> dict[str, Any]:
        return {
            "source": self.source,
            "success": self.success,
            "unitScale": unit_scale,
            "bleed": {k: v / unit_scale for k, v in self.bleed.to_dict().items()},
            "pages": [page.to_dict(unit_scale) for page in self.pages],
            "diagnostics": self.diagnostics.to_list(),
        }


@dataclass
class _StoryFrame:
    record: TextFrameRecord
    resolved: ResolvedElement


class IdmlResolver:
    """Resolve IDML page items into placed, styled element records.

    One resolver can process many documents; no state is shared between
    calls to :meth:`resolve_package`.
    """

    def __init__(self, config: Config | None = None, precision: int | None = None) -> None:
        self.config = config or Config()
        self.precision = precision if precision is not None else self.config.precision

    def resolve_file(self, path: str | Path) -> ConversionResult:
        """Open and resolve an ``.idml`` file.

        Raises:
            IdmlParseError: the file is not a readable IDML package.
        """
        return self.resolve_package(IdmlPackage.open(Path(path)))

    def load_resources(self, package: IdmlPackage, log: DiagnosticLog) -> DocumentResources:
        if package.graphic is None:
            log.warning("missing-resource", "Package has no Resources/Graphic.xml; no swatches available")
        colors = extract_colors(package.graphic).merge_into(log)
        gradients = extract_gradients(package.graphic, colors).merge_into(log)
        return DocumentResources(colors=colors, gradients=gradients, styles=StyleTable(package.styles))

    def resolve_package(self, package: IdmlPackage) -> ConversionResult:
        log = DiagnosticLog()
        result = ConversionResult(source=package.source, diagnostics=log)
        resources = self.load_resources(package, log)
        try:
            result.bleed = package.bleed_margins()
        except DataError as e:
            log.error("data-error", f"Bleed margins: {e}")

        stories: dict[str, list[_StoryFrame]] = {}
        for spread_path, spread in package.spreads():
            result.pages.extend(self._resolve_spread(spread_path, spread, resources, stories, log))

        self._flow_stories(package, resources, stories, log)
        logger.info(
            "resolved %s: %d pages, %d elements, %d diagnostics",
            package.source,
            len(result.pages),
            len(result.elements()),
            len(log),
        )
        return result

    def _resolve_spread(
        self,
        spread_path: str,
        spread: Element,
        resources: DocumentResources,
        stories: dict[str, list[_StoryFrame]],
        log: DiagnosticLog,
    ) -> list[ResolvedPage]:
        records: list[PageRecord] = []
        for page_el in (ch for ch in spread if local_name(ch.tag) == "Page"):
            try:
                records.append(PageRecord.from_element(page_el))
            except DataError as e:
                log.error("data-error", str(e), page_el.get("Self"))

        pages = [ResolvedPage(r.name, r.width, r.height, spread_path) for r in records]
        by_record = {id(r): p for r, p in zip(records, pages)}

        for child in spread:
            if local_name(child.tag) not in ELEMENT_KINDS or child.get("Visible") == "false":
                continue
            try:
                page = self._page_for(child, [], records)
                resolved = self._resolve_item(child, [], page, resources, stories, log)
            except IdmlResolveError as e:
                self._report(e, child, log)
                continue
            if resolved is not None and page is not None:
                by_record[id(page)].elements.append(resolved)
        return pages

    def _report(self, error: IdmlResolveError, element: Element, log: DiagnosticLog) -> None:
        element_id = getattr(error, "element_id", None) or element.get("Self")
        code = "missing-page" if isinstance(error, StructuralError) else "data-error"
        log.error(code, str(error), element_id)

    def _page_for(
        self,
        element: Element,
        ancestors: Sequence[AffineMatrix],
        pages: Sequence[PageRecord],
    ) -> PageRecord | None:
        """Choose the page for a top-level item from its (first leaf's) centre."""
        if not pages:
            raise StructuralError("No page found for element", element_id=element.get("Self"))
        if len(pages) == 1:
            return pages[0]
        leaf, chain = element, list(ancestors)
        while local_name(leaf.tag) == "Group":
            inner = next(
                (ch for ch in leaf if local_name(ch.tag) in ELEMENT_KINDS and ch.get("Visible") != "false"),
                None,
            )
            if inner is None:
                return pages[0]
            chain.extend(collect_ancestor_transforms([leaf]))
            leaf = inner
        geometry = parse_path_geometry(leaf, self.precision)
        transform = parse_item_transform(leaf.get("ItemTransform"), leaf.get("Self"))
        return select_page(pages, spread_center(geometry, transform, chain))

    def _resolve_item(
        self,
        element: Element,
        ancestors: Sequence[AffineMatrix],
        page: PageRecord | None,
        resources: DocumentResources,
        stories: dict[str, list[_StoryFrame]],
        log: DiagnosticLog,
    ) -> ResolvedElement | None:
        if element.get("Visible") == "false":
            return None
        tag = local_name(element.tag)
        element_id = element.get("Self")
        name = (element.get("Name") or "").replace("$ID/", "")

        if tag == "Group":
            group = ResolvedElement(element_id, "group", name, opacity=resolve_opacity(element))
            inner = [*ancestors, *collect_ancestor_transforms([element])]
            for child in element:
                if local_name(child.tag) not in ELEMENT_KINDS:
                    continue
                try:
                    resolved = self._resolve_item(child, inner, page, resources, stories, log)
                except IdmlResolveError as e:
                    self._report(e, child, log)
                    continue
                if resolved is not None:
                    group.children.append(resolved)
            return group

        transform = parse_item_transform(element.get("ItemTransform"), element_id)
        geometry = parse_path_geometry(element, self.precision)
        placement = resolve_placement(geometry, transform, page, ancestors, element_id)

        if tag == "GraphicLine":
            return self._resolve_line(element, name, geometry, placement, resources, log)

        resolved = ResolvedElement(
            element_id,
            ELEMENT_KINDS[tag],
            name,
            placement=placement,
            path_description=geometry.path_description,
            opacity=resolve_opacity(element),
        )
        resolved.fill = resolve_fill(
            element, resources.styles, resources.colors, resources.gradients, placement.aspect_ratio
        ).merge_into(log)
        resolved.stroke = resolve_stroke(element, resources.styles, resources.colors).merge_into(log)
        if tag != "TextFrame":
            resolved.image_uri = resolve_image(element).merge_into(log)
        else:
            record = TextFrameRecord.from_element(element)
            resolved.story_id = record.story_id
            stories.setdefault(record.story_id or "", []).append(_StoryFrame(record, resolved))
        return resolved

    def _resolve_line(
        self,
        element: Element,
        name: str,
        geometry: PathGeometry,
        placement: ResolvedPlacement,
        resources: DocumentResources,
        log: DiagnosticLog,
    ) -> ResolvedElement:
        """Lines are drawn as a filled bar: stroke color becomes fill, weight becomes height."""
        fill = resolve_fill(
            element, resources.styles, resources.colors, resources.gradients, attribute="StrokeColor"
        ).merge_into(log)
        weight = stroke_weight(element, resources.styles)
        if weight is None:
            log.warning("data-error", "No stroke weight found for line", element.get("Self"))
        else:
            placement = ResolvedPlacement(
                x=placement.x,
                y=placement.y,
                width=placement.width,
                height=weight,
                rotation=placement.rotation,
                scale_x=placement.scale_x,
                scale_y=placement.scale_y,
            )
        return ResolvedElement(
            element.get("Self"),
            "line",
            name,
            placement=placement,
            path_description=geometry.path_description,
            fill=fill,
            opacity=resolve_opacity(element),
        )

    def _load_story(
        self,
        package: IdmlPackage,
        story_id: str,
        resources: DocumentResources,
        log: DiagnosticLog,
    ) -> StoryContent:
        story = package.story(story_id)
        if story is None:
            log.warning("missing-story", f"Story {story_id} not found in package", story_id)
            return StoryContent(story_id, "", ())
        return extract_story(
            story,
            resources.styles,
            resources.colors,
            default_font=self.config.default_font,
            default_color=self.config.default_text_color,
            substitute_fonts=self.config.substitute_fonts,
        ).merge_into(log)

    def _flow_stories(
        self,
        package: IdmlPackage,
        resources: DocumentResources,
        stories: Mapping[str, list[_StoryFrame]],
        log: DiagnosticLog,
    ) -> None:
        for story_id, frames in stories.items():
            try:
                content = self._load_story(package, story_id, resources, log)
            except DataError as e:
                log.error("data-error", str(e), story_id)
                content = StoryContent(story_id, "", ())

            for frame in frames:
                frame.resolved.text = ""
                frame.resolved.justification = content.justification

            by_id = {frame.record.self_id: frame.resolved for frame in frames}

            def assign(record: TextFrameRecord, start: int, end: int) -> None:
                target = by_id[record.self_id]
                target.text = content.text[start:end]
                target.text_runs = clip_runs(content.runs, start, end)

            if len(frames) == 1:
                assign(frames[0].record, 0, len(content.text))
                continue

            ordered = order_text_frames([frame.record for frame in frames]).merge_into(log)
            if ordered is None:
                # unresolvable chain: keep the whole story on the first frame in document order
                assign(frames[0].record, 0, len(content.text))
                continue
            splits = calculate_split_indices(
                content.text,
                len(ordered),
                window_ratio=self.config.split_window_ratio,
                min_window=self.config.split_min_window,
            )
            update_frame_contents(ordered, content.text, splits, assign).merge_into(log)
