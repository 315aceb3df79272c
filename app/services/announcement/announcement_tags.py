"""
Free-form announcement type tags.

Tags keep insertion order and are compared case-sensitively after trimming.
"""

from typing import Iterable, List, Optional


def add_tag(tags: Iterable[str], raw: Optional[str]) -> List[str]:
    """Append a trimmed tag; blanks and exact duplicates are ignored."""
    result = list(tags or [])
    tag = (raw or "").strip()
    if not tag or tag in result:
        return result
    result.append(tag)
    return result


def remove_tag(tags: Iterable[str], tag: str) -> List[str]:
    """Remove the first exact match, if any."""
    result = list(tags or [])
    if tag in result:
        result.remove(tag)
    return result


def normalize_tags(tags: Optional[Iterable[str]]) -> List[str]:
    """Trimmed, duplicate-free copy of a tag list."""
    result: List[str] = []
    for tag in tags or []:
        if tag is None:
            continue
        result = add_tag(result, str(tag))
    return result
