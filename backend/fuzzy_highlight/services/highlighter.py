"""
Markup highlighter for matched fragment segments.

Splits each touched fragment into plain and marked runs and renders them
as escaped HTML with <mark> tags. Works on values only; applying the
markup to a page or text layer is left to the caller.
"""

from collections import defaultdict
from typing import Dict, List, Optional, Sequence, Tuple

from fuzzy_highlight.config import settings
from fuzzy_highlight.core.schemas import (
    HighlightPart,
    HighlightedFragment,
    Segment,
    TextFragment
)
from fuzzy_highlight.pipeline.interfaces import IHighlighter, HighlighterError
from fuzzy_highlight.utils.logger import setup_logger

logger = setup_logger(__name__, level=settings.log_level)


class MarkupHighlighter(IHighlighter):
    """
    Marks ``[start_in_item, end_in_item)`` of each segment's fragment.

    Several segments on the same fragment (e.g. from find_all_matches) are
    merged into one HighlightedFragment; overlapping or touching ranges
    collapse into a single marked run.
    """

    def __init__(self, highlight_class: Optional[str] = None):
        """
        Initialize highlighter.

        Args:
            highlight_class: CSS class for <mark> tags (default from settings)
        """
        self.highlight_class = highlight_class or settings.highlight_class

    def highlight(
        self,
        fragments: Sequence[TextFragment],
        segments: Sequence[Segment]
    ) -> List[HighlightedFragment]:
        """
        Split touched fragments into plain and marked runs.

        Args:
            fragments: Original fragments, indexed by Segment.fragment_index
            segments: Segments to mark

        Returns:
            HighlightedFragments in ascending fragment order

        Raises:
            HighlighterError: If a segment lies outside its fragment's text
        """
        spans_by_fragment: Dict[int, List[Tuple[int, int]]] = defaultdict(list)

        for segment in segments:
            if segment.fragment_index >= len(fragments):
                logger.warning(
                    f"Skipping segment for unknown fragment {segment.fragment_index} "
                    f"({len(fragments)} fragments)"
                )
                continue

            text = fragments[segment.fragment_index].text
            if segment.end_in_item > len(text):
                raise HighlighterError(
                    f"Segment {segment.start_in_item}-{segment.end_in_item} outside "
                    f"fragment {segment.fragment_index}",
                    detail=f"fragment length is {len(text)}"
                )

            spans_by_fragment[segment.fragment_index].append(
                (segment.start_in_item, segment.end_in_item)
            )

        highlighted = []
        for index in sorted(spans_by_fragment):
            text = fragments[index].text
            spans = self._merge_spans(spans_by_fragment[index])
            highlighted.append(HighlightedFragment(
                fragment_index=index,
                parts=self._split(text, spans)
            ))

        return highlighted

    def clear(self, fragments: Sequence[TextFragment]) -> List[HighlightedFragment]:
        """
        Return every fragment as a single unmarked run.

        Args:
            fragments: Original fragments

        Returns:
            One HighlightedFragment per fragment, in order
        """
        return [
            HighlightedFragment(
                fragment_index=index,
                parts=[HighlightPart(text=fragment.text)] if fragment.text else []
            )
            for index, fragment in enumerate(fragments)
        ]

    def render_html(
        self,
        fragments: Sequence[TextFragment],
        segments: Sequence[Segment]
    ) -> Dict[int, str]:
        """
        Render the highlighted fragments as HTML.

        Returns:
            Mapping of fragment index to escaped HTML
        """
        return {
            item.fragment_index: item.to_html(self.highlight_class)
            for item in self.highlight(fragments, segments)
        }

    @staticmethod
    def _merge_spans(spans: List[Tuple[int, int]]) -> List[Tuple[int, int]]:
        merged: List[Tuple[int, int]] = []
        for start, end in sorted(spans):
            if start == end:
                continue
            if merged and start <= merged[-1][1]:
                merged[-1] = (merged[-1][0], max(merged[-1][1], end))
            else:
                merged.append((start, end))
        return merged

    @staticmethod
    def _split(text: str, spans: List[Tuple[int, int]]) -> List[HighlightPart]:
        parts = []
        cursor = 0
        for start, end in spans:
            if start > cursor:
                parts.append(HighlightPart(text=text[cursor:start]))
            parts.append(HighlightPart(text=text[start:end], marked=True))
            cursor = end
        if cursor < len(text):
            parts.append(HighlightPart(text=text[cursor:]))
        return parts
