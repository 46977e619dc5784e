"""Read-only lookup over ``Resources/Styles.xml``."""

from __future__ import annotations

from xml.etree.ElementTree import Element

from idml_resolve.idml.xml import child_path, iter_local, text_of

STYLE_TAGS = ("ObjectStyle", "ParagraphStyle", "CharacterStyle")


class StyleTable:
    """Index of object, paragraph and character styles keyed by ``Self``.

    Attribute lookups follow each style's ``BasedOn`` chain, so a style
    inherits every value it does not set itself.
    """

    def __init__(self, styles: Element | None = None) -> None:
        self._index: dict[str, Element] = {}
        if styles is not None:
            for tag in STYLE_TAGS:
                for el in iter_local(styles, tag):
                    key = el.get("Self")
                    if key:
                        self._index[key] = el

    def __contains__(self, style_id: object) -> bool:
        return style_id in self._index

    def __len__(self) -> int:
        return len(self._index)

    def get(self, style_id: str | None) -> Element | None:
        if not style_id:
            return None
        return self._index.get(style_id)

    def _chain(self, style_id: str | None):
        seen: set[str] = set()
        current = self.get(style_id)
        while current is not None:
            key = current.get("Self") or ""
            if key in seen:
                return
            seen.add(key)
            yield current
            based_on = text_of(child_path(current, "Properties", "BasedOn"))
            current = self.get(based_on.strip()) if based_on else None

    def attribute(self, style_id: str | None, name: str) -> str | None:
        for style in self._chain(style_id):
            value = style.get(name)
            if value is not None:
                return value
        return None

    def property_text(self, style_id: str | None, name: str) -> str | None:
        """Text of a ``Properties/<name>`` child, e.g. ``AppliedFont``."""
        for style in self._chain(style_id):
            value = text_of(child_path(style, "Properties", name))
            if value:
                return value
        return None
