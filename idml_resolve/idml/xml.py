"""Namespace-agnostic helpers for walking parsed IDML XML trees.

IDML parts wrap their payload in an ``idPkg:`` root while the payload
elements themselves are unqualified, so every lookup matches on local names.
"""

from __future__ import annotations

from collections.abc import Iterator
from xml.etree.ElementTree import Element


def local_name(tag: str) -> str:
    return tag.split("}")[-1]


def iter_local(root: Element, name: str) -> Iterator[Element]:
    """Yield ``root`` and its descendants whose local tag is ``name``, in document order."""
    for el in root.iter():
        if isinstance(el.tag, str) and local_name(el.tag) == name:
            yield el


def children(el: Element, name: str | None = None) -> list[Element]:
    return [ch for ch in el if name is None or local_name(ch.tag) == name]


def first_child(el: Element, name: str) -> Element | None:
    for ch in el:
        if local_name(ch.tag) == name:
            return ch
    return None


def first_descendant(el: Element, name: str) -> Element | None:
    for found in iter_local(el, name):
        if found is not el:
            return found
    return None


def child_path(el: Element, *names: str) -> Element | None:
    """Follow a chain of direct children by local name, e.g. ``Properties/PathGeometry``."""
    current: Element | None = el
    for name in names:
        if current is None:
            return None
        current = first_child(current, name)
    return current


def text_of(el: Element | None) -> str | None:
    if el is None:
        return None
    return "".join(el.itertext())
