"""
Pipeline interface definitions.

This module defines the abstract collaborators the search pipeline talks
to (where fragments come from, where highlights go) and the pipeline's
exception hierarchy.
"""

from abc import ABC, abstractmethod
from typing import List, Sequence

from fuzzy_highlight.core.schemas import TextFragment, Segment, HighlightedFragment
from fuzzy_highlight.utils.exceptions import FuzzyHighlightError


class IFragmentSource(ABC):
    """Interface for text fragment extraction (one page or text blob)."""

    @abstractmethod
    async def get_fragments(self) -> List[TextFragment]:
        """
        Extract ordered text fragments.

        Returns:
            Fragments in reading order

        Raises:
            FragmentSourceError: If extraction fails
        """
        pass


class IHighlighter(ABC):
    """Interface for marking matched sub-ranges of fragments."""

    @abstractmethod
    def highlight(
        self,
        fragments: Sequence[TextFragment],
        segments: Sequence[Segment]
    ) -> List[HighlightedFragment]:
        """
        Mark ``[start_in_item, end_in_item)`` within each named fragment.

        Args:
            fragments: Original fragments, indexed by Segment.fragment_index
            segments: Segments to mark

        Returns:
            One HighlightedFragment per fragment touched by a segment
        """
        pass

    @abstractmethod
    def clear(self, fragments: Sequence[TextFragment]) -> List[HighlightedFragment]:
        """
        Restore fragments to their unmarked text.

        Args:
            fragments: Original fragments

        Returns:
            One unmarked HighlightedFragment per fragment
        """
        pass


# Exception classes for pipeline errors

class PipelineError(FuzzyHighlightError):
    """Base exception for pipeline errors."""
    pass


class InvalidQueryError(PipelineError):
    """Raised when a query is missing, not text, or empty after normalization."""
    pass


class PatternCompilationError(PipelineError):
    """Raised when a built pattern cannot be compiled by the regex engine."""
    pass


class FragmentSourceError(PipelineError):
    """Raised when fragment extraction fails."""
    pass


class HighlighterError(PipelineError):
    """Raised when highlighting fails."""
    pass
