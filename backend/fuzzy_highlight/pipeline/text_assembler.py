"""
Searchable text assembly with position tracking.

Concatenates text fragments into one string and records, for each fragment,
the half-open range its text occupies so matches can be mapped back.
"""

from collections.abc import Mapping
from typing import Any, Iterable, List

from fuzzy_highlight.core.schemas import AssembledText, FragmentRange, TextFragment


FRAGMENT_SEPARATOR = " "


def _fragment_text(item: Any) -> str:
    if item is None:
        return ""
    if isinstance(item, str):
        return item
    if isinstance(item, Mapping):
        # PDF.js text items carry their text under "str"
        text = item.get("text", item.get("str"))
    else:
        text = getattr(item, "text", None)
    return text if isinstance(text, str) else ""


def coerce_fragments(items: Iterable[Any]) -> List[TextFragment]:
    """
    Convert fragment-like records to TextFragment objects.

    Accepts TextFragment objects, plain strings, mappings with a ``text``
    (or ``str``) key, and objects with a ``text`` attribute. Missing or
    non-string text becomes an empty fragment.

    Args:
        items: Fragment records in reading order

    Returns:
        List of TextFragment objects in the same order
    """
    fragments = []
    for item in items:
        if isinstance(item, TextFragment):
            fragments.append(item)
        else:
            fragments.append(TextFragment(text=_fragment_text(item)))
    return fragments


def build_searchable_text(items: Iterable[Any]) -> AssembledText:
    """
    Build a searchable string from fragments, with a range per fragment.

    One space is appended after every non-empty fragment except the last,
    so ``\\s+`` in a pattern can bridge fragment boundaries. The separator
    belongs to no fragment's range. Empty fragments get a zero-length range.

    Args:
        items: Fragment records in reading order (see coerce_fragments)

    Returns:
        AssembledText with the text and the ordered fragment ranges
    """
    fragments = coerce_fragments(items)
    parts: List[str] = []
    ranges: List[FragmentRange] = []
    length = 0

    for index, fragment in enumerate(fragments):
        text = fragment.text
        start = length
        parts.append(text)
        length += len(text)

        ranges.append(FragmentRange(fragment_index=index, start=start, end=length, text=text))

        if text and index < len(fragments) - 1:
            parts.append(FRAGMENT_SEPARATOR)
            length += len(FRAGMENT_SEPARATOR)

    return AssembledText(text="".join(parts), ranges=ranges)
