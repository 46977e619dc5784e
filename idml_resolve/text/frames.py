"""Threaded text frames: chain ordering and story splitting.

A story that flows through several frames is stored once. Each
``TextFrame`` names its neighbours through ``PreviousTextFrame`` and
``NextTextFrame``, with ``"n"`` marking either end of the chain. Line
breaking is the renderer's job; here the story is only partitioned into
character ranges, preferring to cut right after a line break.
"""

from __future__ import annotations

import logging
import math
import re
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any
from xml.etree.ElementTree import Element

from idml_resolve.diagnostics import Diagnostic, Resolved

logger = logging.getLogger(__name__)

CHAIN_END = "n"
LINE_BREAK_RE = re.compile(r"\r\n|\r|\n|\u2028")


@dataclass(frozen=True)
class TextFrameRecord:
    self_id: str
    previous_id: str = CHAIN_END
    next_id: str = CHAIN_END
    story_id: str | None = None
    element: Element | None = None

    @classmethod
    def from_element(cls, element: Element) -> TextFrameRecord:
        return cls(
            self_id=element.get("Self") or "",
            previous_id=element.get("PreviousTextFrame") or CHAIN_END,
            next_id=element.get("NextTextFrame") or CHAIN_END,
            story_id=element.get("ParentStory"),
            element=element,
        )


@dataclass(frozen=True)
class FrameRange:
    frame: TextFrameRecord
    start: int
    end: int


def order_text_frames(frames: Sequence[TextFrameRecord]) -> Resolved[list[TextFrameRecord] | None]:
    """Walk the chain from its head and return the frames in reading order.

    The value is ``None`` only when the input is non-empty and no frame is
    a chain head. Cycles stop the walk; a walk shorter than the input is
    returned as-is with a warning.
    """
    if not frames:
        return Resolved([])

    by_id = {frame.self_id: frame for frame in frames}
    head = next((frame for frame in frames if frame.previous_id == CHAIN_END), None)
    if head is None:
        return Resolved(
            None,
            (Diagnostic.error("frame-chain-unresolvable", "No head frame found in text frame chain"),),
        )

    diagnostics: list[Diagnostic] = []
    ordered: list[TextFrameRecord] = []
    visited: set[str] = set()
    current: TextFrameRecord | None = head
    while current is not None:
        if current.self_id in visited:
            diagnostics.append(
                Diagnostic.warning(
                    "frame-cycle",
                    f"Text frame chain loops back to {current.self_id}",
                    current.self_id,
                )
            )
            break
        visited.add(current.self_id)
        ordered.append(current)
        next_id = current.next_id
        current = by_id.get(next_id) if next_id and next_id != CHAIN_END else None

    if len(ordered) != len(frames):
        diagnostics.append(
            Diagnostic.warning(
                "frame-chain-mismatch",
                f"Frame order mismatch ({len(ordered)}/{len(frames)})",
                head.self_id,
            )
        )
    return Resolved(ordered, tuple(diagnostics))


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def calculate_split_indices(
    full_text: str,
    frame_count: int,
    window_ratio: float = 0.2,
    min_window: int = 20,
) -> list[int]:
    """Offsets partitioning ``full_text`` among ``frame_count`` frames.

    Returns ``frame_count - 1`` non-decreasing offsets, or ``[]`` when there
    is at most one frame or no text. Each cut targets an even share of the
    text and moves to just after the nearest line break within the search
    window, if any.
    """
    text_len = len(full_text)
    if frame_count <= 1 or text_len == 0:
        return []

    ideal = text_len / frame_count
    radius = max(_round_half_up(ideal * window_ratio), min_window)
    breaks = [(m.start(), m.end() - m.start()) for m in LINE_BREAK_RE.finditer(full_text)]

    splits: list[int] = []
    last_split = 0
    for i in range(frame_count - 1):
        target = _round_half_up((i + 1) * ideal)
        low = max(last_split, target - radius)
        high = min(text_len, target + radius)
        candidates = [(idx, size) for idx, size in breaks if low <= idx < high and idx > last_split]

        best = target
        if candidates:
            idx, size = min(candidates, key=lambda c: abs(c[0] - target))
            best = idx + size
        best = min(text_len, max(last_split, best))
        splits.append(best)
        last_split = best
    return splits


def update_frame_contents(
    frames: Sequence[TextFrameRecord],
    full_text: str,
    split_indices: Sequence[int],
    assign: Callable[[TextFrameRecord, int, int], Any],
) -> Resolved[list[FrameRange]]:
    """Hand each frame its ``[start, end)`` slice of ``full_text``.

    The last frame always runs to the end of the text. A failing ``assign``
    call is recorded and the remaining frames are still assigned.
    """
    diagnostics: list[Diagnostic] = []
    assigned: list[FrameRange] = []
    start = 0
    for idx, frame in enumerate(frames):
        if idx == len(frames) - 1 or idx >= len(split_indices):
            end = len(full_text)
        else:
            end = split_indices[idx]
        try:
            assign(frame, start, end)
        except Exception as e:  # caller-supplied callback
            logger.debug("assignment failed for %s", frame.self_id, exc_info=True)
            diagnostics.append(
                Diagnostic.error(
                    "frame-assign-failed",
                    f"Setting text failed for frame {frame.self_id}: {e}",
                    frame.self_id,
                )
            )
        else:
            assigned.append(FrameRange(frame, start, end))
        start = end
    return Resolved(assigned, tuple(diagnostics))
