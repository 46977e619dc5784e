"""IDML package access.

An ``.idml`` file is a ZIP archive of XML parts. :class:`IdmlPackage`
parses every part once with defusedxml and exposes them as a read-only
mapping from archive path to root element.
"""

from __future__ import annotations

import logging
import zipfile
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from io import BytesIO
from pathlib import Path
from types import MappingProxyType
from typing import IO
from xml.etree.ElementTree import Element

import defusedxml.ElementTree as ET
from defusedxml import DefusedXmlException

from idml_resolve.exceptions import IdmlParseError
from idml_resolve.idml.xml import first_descendant, iter_local, local_name
from idml_resolve.transforms.matrix import parse_number_list

logger = logging.getLogger(__name__)

DESIGNMAP = "designmap.xml"
GRAPHIC = "Resources/Graphic.xml"
STYLES = "Resources/Styles.xml"
PREFERENCES = "Resources/Preferences.xml"


@dataclass(frozen=True)
class BleedMargins:
    top: float = 0.0
    bottom: float = 0.0
    left: float = 0.0
    right: float = 0.0

    @property
    def enabled(self) -> bool:
        return any((self.top, self.bottom, self.left, self.right))

    def to_dict(self) -> dict[str, float]:
        return {"top": self.top, "bottom": self.bottom, "left": self.left, "right": self.right}


def parse_xml(data: bytes | str, name: str = "<string>") -> Element:
    try:
        return ET.fromstring(data)
    except (ET.ParseError, DefusedXmlException) as e:
        raise IdmlParseError(f"Malformed XML in {name}: {e}") from e


class IdmlPackage(Mapping[str, Element]):
    """Parsed XML parts of an IDML document keyed by archive path."""

    def __init__(self, parts: Mapping[str, Element], source: str | None = None) -> None:
        self._parts = MappingProxyType(dict(parts))
        self.source = source

    @classmethod
    def open(cls, file: str | Path | IO[bytes]) -> IdmlPackage:
        source = str(file) if isinstance(file, (str, Path)) else getattr(file, "name", None)
        try:
            with zipfile.ZipFile(file) as archive:
                parts = {
                    name: parse_xml(archive.read(name), name)
                    for name in archive.namelist()
                    if name.endswith(".xml")
                }
        except zipfile.BadZipFile as e:
            raise IdmlParseError(f"Not an IDML package: {source}: {e}") from e
        logger.debug("opened %s with %d XML parts", source, len(parts))
        return cls(parts, source)

    @classmethod
    def from_bytes(cls, data: bytes, source: str | None = None) -> IdmlPackage:
        package = cls.open(BytesIO(data))
        package.source = source
        return package

    @classmethod
    def from_parts(cls, parts: Mapping[str, Element | str | bytes], source: str | None = None) -> IdmlPackage:
        """Build a package from parsed elements or raw XML strings."""
        parsed = {
            name: value if isinstance(value, Element) else parse_xml(value, name)
            for name, value in parts.items()
        }
        return cls(parsed, source)

    def __getitem__(self, name: str) -> Element:
        return self._parts[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._parts)

    def __len__(self) -> int:
        return len(self._parts)

    @property
    def graphic(self) -> Element | None:
        return self._parts.get(GRAPHIC)

    @property
    def styles(self) -> Element | None:
        return self._parts.get(STYLES)

    @property
    def preferences(self) -> Element | None:
        return self._parts.get(PREFERENCES)

    def spread_paths(self) -> list[str]:
        """Spread part paths in designmap order, falling back to archive order."""
        designmap = self._parts.get(DESIGNMAP)
        if designmap is not None:
            paths = [el.get("src") for el in iter_local(designmap, "Spread")]
            found = [p for p in paths if p]
            if found:
                return found
        return sorted(name for name in self._parts if name.startswith("Spreads/"))

    def spreads(self) -> list[tuple[str, Element]]:
        """``(path, <Spread> element)`` pairs for every spread present."""
        result = []
        for path in self.spread_paths():
            root = self._parts.get(path)
            if root is None:
                logger.warning("designmap references missing spread %s", path)
                continue
            spread = first_descendant(root, "Spread")
            if spread is None and local_name(root.tag) == "Spread":
                spread = root
            if spread is not None:
                result.append((path, spread))
        return result

    def story(self, story_id: str) -> Element | None:
        return self._parts.get(f"Stories/Story_{story_id}.xml")

    def bleed_margins(self) -> BleedMargins:
        preferences = self.preferences
        if preferences is None:
            return BleedMargins()
        document = next(iter_local(preferences, "DocumentPreference"), None)
        if document is None:
            return BleedMargins()

        def offset(name: str) -> float:
            value = document.get(name)
            if value is None:
                return 0.0
            return parse_number_list(value, count=1, attribute=name)[0]

        return BleedMargins(
            top=offset("DocumentBleedTopOffset"),
            bottom=offset("DocumentBleedBottomOffset"),
            left=offset("DocumentBleedInsideOrLeftOffset"),
            right=offset("DocumentBleedOutsideOrRightOffset"),
        )
