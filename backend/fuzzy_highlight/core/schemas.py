"""Canonical data models and schemas for the fuzzy highlight pipeline."""

import html
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator, ConfigDict


DEFAULT_MAX_QUERY_LENGTH = 512
# full mode backtracks roughly 4x per extra token on repetitive text
DEFAULT_MAX_FULL_MODE_LENGTH = 20


# ============================================================================
# Enumerations
# ============================================================================

class SearchMode(str, Enum):
    """Tolerance strategy used when building a pattern from a query."""
    WHITESPACE_ONLY = "whitespace-only"
    INTRA_WORD = "intra-word"
    INTRA_WORD_HYPHEN = "intra-word-hyphen"
    FULL = "full"


# ============================================================================
# Search Options
# ============================================================================

class PatternOptions(BaseModel):
    """
    Options governing the shape of a compiled pattern.

    Attributes:
        mode: Tolerance strategy (default: intra-word)
        whole_word: Wrap the pattern in word-boundary assertions (default: True).
            Pass False when searching scripts where word boundaries are unreliable.
        max_query_length: Longest accepted normalized query, None for no limit
        max_full_mode_length: Longest accepted normalized query in full mode,
            None for no limit beyond max_query_length
    """
    model_config = ConfigDict(frozen=True, extra="forbid")

    mode: SearchMode = Field(default=SearchMode.INTRA_WORD, description="Tolerance mode")
    whole_word: bool = Field(default=True, description="Require word boundaries at both ends")
    max_query_length: Optional[int] = Field(
        default=DEFAULT_MAX_QUERY_LENGTH,
        ge=1,
        description="Maximum normalized query length"
    )
    max_full_mode_length: Optional[int] = Field(
        default=DEFAULT_MAX_FULL_MODE_LENGTH,
        ge=1,
        description="Maximum normalized query length in full mode"
    )


class SearchOptions(PatternOptions):
    """Pattern options plus the regex evaluation flags used by the match engine."""

    case_insensitive: bool = Field(default=True, description="Ignore case when matching")


# ============================================================================
# Fragments and Assembled Text
# ============================================================================

class TextFragment(BaseModel):
    """
    One unit of extracted text, such as a PDF text span.

    Only ``text`` takes part in searching; the geometry fields are carried
    through untouched for the highlighting layer.
    """
    model_config = ConfigDict(frozen=True)

    text: str = Field(default="", description="Raw fragment text")
    bbox: Optional[tuple[float, float, float, float]] = Field(
        default=None,
        description="Bounding box (x0, y0, x1, y1) on the page"
    )
    page_number: Optional[int] = Field(default=None, ge=1, description="1-indexed page number")
    font: Optional[str] = Field(default=None, description="Font name")
    size: Optional[float] = Field(default=None, ge=0.0, description="Font size")

    @field_validator("text", mode="before")
    @classmethod
    def coerce_missing_text(cls, v):
        """Treat absent text as empty."""
        return "" if v is None else v


class FragmentRange(BaseModel):
    """Position of one fragment's text inside the assembled text."""
    model_config = ConfigDict(frozen=True)

    fragment_index: int = Field(..., ge=0, description="Index of the source fragment")
    start: int = Field(..., ge=0, description="Start offset in assembled text")
    end: int = Field(..., ge=0, description="End offset in assembled text (exclusive)")
    text: str = Field(..., description="Raw fragment text")

    @field_validator("end")
    @classmethod
    def validate_offsets(cls, v: int, info) -> int:
        """Ensure end offset >= start offset."""
        if "start" in info.data and v < info.data["start"]:
            raise ValueError("end must be >= start")
        return v

    @model_validator(mode="after")
    def validate_length(self) -> "FragmentRange":
        if self.end - self.start != len(self.text):
            raise ValueError("range length must equal fragment text length")
        return self


class AssembledText(BaseModel):
    """
    Searchable text built from fragments, with the position index.

    For every range, ``text[range.start:range.end] == range.text``.
    """
    model_config = ConfigDict(frozen=True)

    text: str = Field(default="", description="Concatenated fragment text")
    ranges: List[FragmentRange] = Field(default_factory=list, description="Fragment ranges in order")

    def slice(self, start: int, end: int) -> str:
        """Extract text from a half-open character range."""
        return self.text[start:end]


# ============================================================================
# Matches and Segments
# ============================================================================

class MatchResult(BaseModel):
    """A match in the assembled text, as a half-open range."""
    model_config = ConfigDict(frozen=True)

    matched_text: str = Field(..., description="Text covered by the match")
    start: int = Field(..., ge=0, description="Start offset")
    end: int = Field(..., ge=0, description="End offset (exclusive)")
    pattern: Optional[str] = Field(default=None, description="Pattern that produced the match")

    @model_validator(mode="after")
    def validate_span(self) -> "MatchResult":
        if self.end - self.start != len(self.matched_text):
            raise ValueError("end - start must equal len(matched_text)")
        return self


class Segment(BaseModel):
    """Sub-range of a single fragment touched by a match."""
    model_config = ConfigDict(frozen=True)

    fragment_index: int = Field(..., ge=0, description="Index of the source fragment")
    start_in_item: int = Field(..., ge=0, description="Start offset within the fragment text")
    end_in_item: int = Field(..., ge=0, description="End offset within the fragment text (exclusive)")
    text: str = Field(..., description="Covered fragment text")

    @model_validator(mode="after")
    def validate_span(self) -> "Segment":
        if self.end_in_item - self.start_in_item != len(self.text):
            raise ValueError("end_in_item - start_in_item must equal len(text)")
        return self


class SearchResult(BaseModel):
    """Match located in a set of fragments, with its per-fragment segments."""
    model_config = ConfigDict(frozen=True)

    match: MatchResult = Field(..., description="Match in the assembled text")
    segments: List[Segment] = Field(default_factory=list, description="Touched fragment sub-ranges")
    assembled: AssembledText = Field(..., description="Assembled text the match refers to")


# ============================================================================
# Highlighting Output
# ============================================================================

class HighlightPart(BaseModel):
    """Run of fragment text, either marked or plain."""
    model_config = ConfigDict(frozen=True)

    text: str
    marked: bool = False


class HighlightedFragment(BaseModel):
    """
    A fragment split into plain and marked runs.

    The concatenated part texts always equal the fragment's own text.
    """
    model_config = ConfigDict(frozen=True)

    fragment_index: int = Field(..., ge=0, description="Index of the source fragment")
    parts: List[HighlightPart] = Field(default_factory=list, description="Ordered text runs")

    @property
    def text(self) -> str:
        return "".join(part.text for part in self.parts)

    @property
    def marked_text(self) -> List[str]:
        return [part.text for part in self.parts if part.marked]

    def to_html(self, css_class: str = "fuzzy-highlight") -> str:
        """Render the fragment as escaped HTML with marked runs in <mark> tags."""
        rendered = []
        for part in self.parts:
            escaped = html.escape(part.text)
            if part.marked:
                rendered.append(f'<mark class="{html.escape(css_class)}">{escaped}</mark>')
            else:
                rendered.append(escaped)
        return "".join(rendered)
