"""
Object traversal and filtering.

Selection of listed objects happens in a fixed order: directory
markers are dropped, then entries below the first level of the prefix
are dropped unless recursing, then the key filter is applied.
"""
import re
from typing import Iterable, List, Pattern, Union

from ..exceptions import InvalidFilterError
from ..models.object_entry import ObjectEntry, PATH_SEPARATOR

MATCH_ALL = ".*"


def compile_filter(pattern: str) -> Pattern:
    """Compile a key filter.

    Must be called before any listing so a bad pattern fails fast.

    Args:
        pattern: Regular expression source

    Returns:
        Compiled pattern

    Raises:
        InvalidFilterError: If the pattern does not compile
    """
    try:
        return re.compile(pattern if pattern is not None else MATCH_ALL)
    except re.error as e:
        raise InvalidFilterError(pattern, str(e)) from e


def drop_directory_markers(entries: Iterable[ObjectEntry]) -> List[ObjectEntry]:
    """Remove pseudo-directory entries."""
    return [e for e in entries if not e.is_directory_marker()]


def filter_for_recursion(entries: Iterable[ObjectEntry], prefix: str,
                         recursive: bool) -> List[ObjectEntry]:
    """Drop entries living below the first level of *prefix*.

    Args:
        entries: Listed objects
        prefix: Prefix the listing was scoped to
        recursive: Keep everything when True

    Returns:
        Entries whose key, after removing *prefix*, holds no separator
    """
    if recursive:
        return list(entries)

    selected = []
    for entry in entries:
        remainder = entry.key[len(prefix):] if entry.key.startswith(prefix) else entry.key
        if PATH_SEPARATOR in remainder:
            continue
        selected.append(entry)
    return selected


def apply_pattern(entries: Iterable[ObjectEntry],
                  pattern: Union[str, Pattern]) -> List[ObjectEntry]:
    """Keep entries whose full key matches *pattern* (search semantics)."""
    if isinstance(pattern, str):
        pattern = compile_filter(pattern)
    return [e for e in entries if pattern.search(e.key)]


def select_objects(entries: Iterable[ObjectEntry], prefix: str, recursive: bool,
                   pattern: Union[str, Pattern] = MATCH_ALL) -> List[ObjectEntry]:
    """Apply marker, recursion and pattern filtering in order."""
    entries = drop_directory_markers(entries)
    entries = filter_for_recursion(entries, prefix, recursive)
    return apply_pattern(entries, pattern)
