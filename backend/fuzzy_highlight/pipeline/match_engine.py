"""
Regex match engine over assembled text.

Compiles tolerant patterns and scans text for the first or all matches.
Query and pattern errors are logged and reported as "no match": a bad
query must never break the caller's highlighting.
"""

import re
from typing import List, Optional

from fuzzy_highlight.config import settings
from fuzzy_highlight.core.schemas import MatchResult, SearchOptions
from fuzzy_highlight.pipeline.interfaces import PatternCompilationError, PipelineError
from fuzzy_highlight.pipeline.pattern_compiler import build_flexible_pattern
from fuzzy_highlight.utils.logger import setup_logger, query_prefix

logger = setup_logger(__name__, level=settings.log_level)


def compile_search_pattern(query: str, options: SearchOptions) -> re.Pattern:
    """
    Build and compile the tolerant pattern for a query.

    Args:
        query: Search query
        options: Search options

    Returns:
        Compiled regex

    Raises:
        InvalidQueryError: If the query is rejected by the pattern compiler
        PatternCompilationError: If the regex engine rejects the pattern
    """
    pattern = build_flexible_pattern(query, options)
    flags = re.IGNORECASE if options.case_insensitive else 0

    try:
        return re.compile(pattern, flags)
    except re.error as e:
        raise PatternCompilationError(
            f"Failed to compile search pattern: {str(e)}",
            detail=pattern
        ) from e


def _to_match_result(match: re.Match, pattern: Optional[str] = None) -> MatchResult:
    return MatchResult(
        matched_text=match.group(0),
        start=match.start(),
        end=match.end(),
        pattern=pattern
    )


def find_match(
    text: str,
    query: str,
    options: Optional[SearchOptions] = None
) -> Optional[MatchResult]:
    """
    Find the leftmost match of a query in text.

    Args:
        text: Assembled text to search
        query: Search query
        options: Search options (defaults from settings)

    Returns:
        MatchResult, or None if nothing matches or the query is invalid
    """
    if options is None:
        options = settings.search_options()

    try:
        regex = compile_search_pattern(query, options)
    except PipelineError as e:
        logger.error(
            f"Regex error for query '{query_prefix(query)}': {e.message}"
            + (f" ({e.detail})" if e.detail else "")
        )
        return None

    match = regex.search(text)
    if match is None:
        logger.debug(f"No match for query '{query_prefix(query)}' (mode={options.mode.value})")
        return None

    return _to_match_result(match, regex.pattern)


def find_all_matches(
    text: str,
    query: str,
    options: Optional[SearchOptions] = None
) -> List[MatchResult]:
    """
    Find all non-overlapping matches of a query, left to right.

    Each scan resumes at the previous match's end; after a zero-length
    match the position is advanced by one so the scan always terminates.

    Args:
        text: Assembled text to search
        query: Search query
        options: Search options (defaults from settings)

    Returns:
        Matches in ascending start order; empty if none or the query is invalid
    """
    if options is None:
        options = settings.search_options()

    matches: List[MatchResult] = []

    try:
        regex = compile_search_pattern(query, options)
    except PipelineError as e:
        logger.error(
            f"Regex error for query '{query_prefix(query)}': {e.message}"
            + (f" ({e.detail})" if e.detail else "")
        )
        return matches

    position = 0
    while position <= len(text):
        match = regex.search(text, position)
        if match is None:
            break

        matches.append(_to_match_result(match))

        if match.end() == match.start():
            position = match.end() + 1
        else:
            position = match.end()

    logger.debug(
        f"Found {len(matches)} matches for query '{query_prefix(query)}' "
        f"(mode={options.mode.value})"
    )
    return matches
