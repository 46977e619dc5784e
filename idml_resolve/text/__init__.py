"""Text handling for idml-resolve.

This subpackage provides:
- Story text reassembly with per-range style runs
- Threaded text frame ordering with cycle protection
- Story partitioning across frames, preferring line-break boundaries
"""

from idml_resolve.text.frames import (
    CHAIN_END,
    FrameRange,
    TextFrameRecord,
    calculate_split_indices,
    order_text_frames,
    update_frame_contents,
)
from idml_resolve.text.story import StoryContent, TextRun, clip_runs, extract_story

__all__ = [
    "CHAIN_END",
    "FrameRange",
    "TextFrameRecord",
    "calculate_split_indices",
    "order_text_frames",
    "update_frame_contents",
    "StoryContent",
    "TextRun",
    "clip_runs",
    "extract_story",
]
