"""
Tolerant regex pattern construction.

Builds a regex pattern string from a plain-text query that tolerates line
breaks, irregular whitespace, zero-width and soft-hyphen characters, and
single OCR noise characters between otherwise exact characters.
"""

import re
from typing import Optional

from fuzzy_highlight.core.schemas import PatternOptions, SearchMode
from fuzzy_highlight.pipeline.interfaces import InvalidQueryError, PatternCompilationError
from fuzzy_highlight.utils.text_normalizer import normalizer


REGEX_METACHARACTERS = re.compile(r"[.*+?^${}()|[\]\\]")

# Zero or one arbitrary character between adjacent query characters
INTRA_WORD_JOINER = ".?"
# Optional hyphen plus whitespace (line-broken hyphenation), then the same .? tolerance
INTRA_WORD_HYPHEN_JOINER = r"(?:-?\s*)?(?:.?)"

TOKEN_JOINER = r"\s+"
FULL_TOKEN_JOINER = r".?\s*.?"

WORD_BOUNDARY = r"\b"


def escape_regex(text: str) -> str:
    """
    Escape regex metacharacters so the text matches literally.

    Args:
        text: Input string

    Returns:
        String with each of ``. * + ? ^ $ { } ( ) | [ ] \\`` backslash-escaped
    """
    return REGEX_METACHARACTERS.sub(r"\\\g<0>", text)


def _flex_token(token: str, joiner: str) -> str:
    # str iteration is per code point, so multi-unit characters stay whole
    return joiner.join(escape_regex(char) for char in token)


def build_flexible_pattern(query: str, options: Optional[PatternOptions] = None) -> str:
    """
    Build a tolerant regex pattern from a plain text query.

    Modes:
    - whitespace-only: exact tokens, flexible whitespace between them
    - intra-word: ``.?`` between characters, ``\\s+`` between tokens (default)
    - intra-word-hyphen: like intra-word, also bridging "inter-\\nnational"
    - full: like intra-word, with ``.?\\s*.?`` between tokens

    The result is a pure function of its inputs and is rebuilt on every call.

    Args:
        query: Search query
        options: Pattern options (defaults to PatternOptions())

    Returns:
        Regex pattern string

    Raises:
        InvalidQueryError: If the query is not a string, is empty after
            normalization, or exceeds ``options.max_query_length`` (or
            ``options.max_full_mode_length`` in full mode)
        PatternCompilationError: If the options name an unknown mode
    """
    if options is None:
        options = PatternOptions()

    if not query or not isinstance(query, str):
        raise InvalidQueryError("Query must be a non-empty string")

    normalized = normalizer.normalize_query(query)
    if not normalized:
        raise InvalidQueryError("Query is empty after normalization")

    if options.max_query_length is not None and len(normalized) > options.max_query_length:
        raise InvalidQueryError(
            "Query is too long",
            detail=f"{len(normalized)} characters, limit is {options.max_query_length}"
        )

    if (
        options.mode == SearchMode.FULL
        and options.max_full_mode_length is not None
        and len(normalized) > options.max_full_mode_length
    ):
        raise InvalidQueryError(
            "Query is too long for full mode",
            detail=f"{len(normalized)} characters, limit is {options.max_full_mode_length}"
        )

    tokens = normalizer.tokenize(normalized)

    mode = options.mode
    if mode == SearchMode.WHITESPACE_ONLY:
        pattern = TOKEN_JOINER.join(escape_regex(token) for token in tokens)
    elif mode == SearchMode.INTRA_WORD:
        pattern = TOKEN_JOINER.join(_flex_token(token, INTRA_WORD_JOINER) for token in tokens)
    elif mode == SearchMode.INTRA_WORD_HYPHEN:
        pattern = TOKEN_JOINER.join(
            _flex_token(token, INTRA_WORD_HYPHEN_JOINER) for token in tokens
        )
    elif mode == SearchMode.FULL:
        pattern = FULL_TOKEN_JOINER.join(_flex_token(token, INTRA_WORD_JOINER) for token in tokens)
    else:
        # only reachable through model_construct(), which skips validation
        raise PatternCompilationError(f"Unknown mode: {mode}")

    if options.whole_word:
        pattern = WORD_BOUNDARY + pattern + WORD_BOUNDARY

    return pattern
