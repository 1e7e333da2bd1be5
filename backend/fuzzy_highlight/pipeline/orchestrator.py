"""
End-to-end search over text fragments.

Composes text assembly, matching and span mapping. Fragment extraction and
highlight rendering stay with the IFragmentSource / IHighlighter
collaborators; this module performs no I/O of its own.
"""

from typing import Any, Iterable, List, Optional

from fuzzy_highlight.config import settings
from fuzzy_highlight.core.schemas import SearchOptions, SearchResult
from fuzzy_highlight.pipeline.interfaces import IFragmentSource, IHighlighter
from fuzzy_highlight.pipeline.match_engine import find_match, find_all_matches
from fuzzy_highlight.pipeline.span_mapper import match_to_segments
from fuzzy_highlight.pipeline.text_assembler import build_searchable_text, coerce_fragments
from fuzzy_highlight.utils.logger import setup_logger, log_search_event

logger = setup_logger(__name__, level=settings.log_level)


def search_fragments(
    fragments: Iterable[Any],
    query: str,
    options: Optional[SearchOptions] = None
) -> Optional[SearchResult]:
    """
    Find the first match of a query across fragments.

    Args:
        fragments: Fragment records in reading order
        query: Search query
        options: Search options (defaults from settings)

    Returns:
        SearchResult with the match, its segments and the assembled text,
        or None if nothing matches
    """
    assembled = build_searchable_text(fragments)

    match = find_match(assembled.text, query, options)
    if match is None:
        return None

    segments = match_to_segments(assembled.ranges, match.start, match.end)

    return SearchResult(match=match, segments=segments, assembled=assembled)


def search_all_fragments(
    fragments: Iterable[Any],
    query: str,
    options: Optional[SearchOptions] = None
) -> List[SearchResult]:
    """
    Find every match of a query across fragments.

    Args:
        fragments: Fragment records in reading order
        query: Search query
        options: Search options (defaults from settings)

    Returns:
        One SearchResult per match, in text order (empty if none)
    """
    assembled = build_searchable_text(fragments)

    return [
        SearchResult(
            match=match,
            segments=match_to_segments(assembled.ranges, match.start, match.end),
            assembled=assembled
        )
        for match in find_all_matches(assembled.text, query, options)
    ]


async def find_and_highlight(
    source: IFragmentSource,
    query: str,
    highlighter: IHighlighter,
    options: Optional[SearchOptions] = None
) -> Optional[SearchResult]:
    """
    Find a query in a fragment source and hand the match to a highlighter.

    Args:
        source: Supplier of fragments (e.g. one PDF page)
        query: Search query
        highlighter: Receiver of the matched segments
        options: Search options (defaults from settings)

    Returns:
        SearchResult, or None if nothing matches (the highlighter is not called)
    """
    fragments = coerce_fragments(await source.get_fragments())

    result = search_fragments(fragments, query, options)
    if result is None:
        log_search_event(logger, query, "No match", fragments=len(fragments))
        return None

    highlighter.highlight(fragments, result.segments)

    log_search_event(
        logger,
        query,
        "Match highlighted",
        start=result.match.start,
        end=result.match.end,
        segments=len(result.segments)
    )

    return result
