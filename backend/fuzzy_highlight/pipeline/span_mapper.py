"""Mapping of assembled-text match ranges back onto fragment sub-ranges."""

from typing import List, Sequence

from fuzzy_highlight.core.schemas import FragmentRange, Segment


def match_to_segments(
    ranges: Sequence[FragmentRange],
    match_start: int,
    match_end: int
) -> List[Segment]:
    """
    Map a half-open match range onto the fragments it overlaps.

    A range overlaps when ``range.start < match_end and range.end > match_start``.
    Each overlap is translated to fragment-local offsets. Matches covering
    only separator characters, or with ``match_start > match_end``, give an
    empty list.

    Offsets outside the assembled text are not rejected: a negative
    ``match_start`` or a ``match_end`` past the last range is clipped to the
    fragments it still overlaps, and a range lying wholly outside gives an
    empty list.

    Args:
        ranges: Fragment ranges from build_searchable_text
        match_start: Start offset in the assembled text
        match_end: End offset in the assembled text (exclusive)

    Returns:
        Segments in ascending fragment order
    """
    segments: List[Segment] = []

    if match_start > match_end:
        return segments

    for fragment_range in ranges:
        if fragment_range.start < match_end and fragment_range.end > match_start:
            overlap_start = max(fragment_range.start, match_start)
            overlap_end = min(fragment_range.end, match_end)

            start_in_item = overlap_start - fragment_range.start
            end_in_item = overlap_end - fragment_range.start

            segments.append(Segment(
                fragment_index=fragment_range.fragment_index,
                start_in_item=start_in_item,
                end_in_item=end_in_item,
                text=fragment_range.text[start_in_item:end_in_item]
            ))

    return segments
