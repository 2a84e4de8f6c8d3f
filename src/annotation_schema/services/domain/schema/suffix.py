#!/usr/bin/env python3
"""Duplication suffix codec.

A group that has been duplicated is referred to per copy by appending "@N"
(N >= 1) to its URI. Within a group-nest only the leading element, the
nearest enclosing group, is expected to carry the marker; a nest without one
is the baseline form and refers to the group across all of its copies.
"""

import re
from typing import NamedTuple, Optional

SUFFIX_MARKER = "@"

_INDEXED_PATTERN = re.compile(r"^(.*)@(\d+)$")


class GroupNestError(Exception):
    """Raised when a group-nest carries a duplication suffix beyond element 0."""
    pass


class GroupURI(NamedTuple):
    """A group URI split into its base and duplication index (0 = unmarked)."""
    base: Optional[str]
    index: int

    @property
    def is_duplicate(self) -> bool:
        return self.index > 0

    def __str__(self) -> str:
        if self.index > 0:
            return append_suffix(self.base, self.index)
        return self.base or ""


def decompose(uri: Optional[str]) -> GroupURI:
    """Separate the base URI from the duplication index; index is 0 if none."""
    if not uri:
        return GroupURI(uri, 0)
    match = _INDEXED_PATTERN.match(uri)
    if not match:
        return GroupURI(uri, 0)
    return GroupURI(match.group(1), int(match.group(2)))


def remove_suffix(uri: Optional[str]) -> Optional[str]:
    """Return the baseline URI, with any duplication suffix removed."""
    if not uri:
        return uri
    match = _INDEXED_PATTERN.match(uri)
    return match.group(1) if match else uri


def append_suffix(uri: str, index: int) -> str:
    """Append the duplication suffix, replacing any that is already present.

    Raises:
        ValueError: If index is less than 1
    """
    if index < 1:
        raise ValueError(f"Duplication index must be >= 1, got {index}")
    return f"{remove_suffix(uri)}{SUFFIX_MARKER}{index}"


def baseline(group_nest: Optional[list[str]]) -> Optional[list[str]]:
    """Copy of the nest with the leading element's suffix stripped.

    None and empty nests are returned as they are.
    """
    if not group_nest:
        return group_nest
    nest = list(group_nest)
    nest[0] = remove_suffix(nest[0])
    return nest


def with_suffix(group_nest: Optional[list[str]], index: int) -> Optional[list[str]]:
    """Copy of the nest with the leading element pointing at copy number index."""
    if not group_nest:
        return group_nest
    nest = list(group_nest)
    nest[0] = append_suffix(nest[0], index)
    return nest


def compare_permissive(uri1: Optional[str], uri2: Optional[str]) -> bool:
    """Compare group URIs where an unsuffixed URI matches any copy.

    Two suffixed URIs only match when identical.
    """
    if uri1 == uri2:
        return True
    if not uri1 or not uri2:
        return False
    match1, match2 = _INDEXED_PATTERN.match(uri1), _INDEXED_PATTERN.match(uri2)
    if match1 and match2:
        return False
    base1 = match1.group(1) if match1 else uri1
    base2 = match2.group(1) if match2 else uri2
    return base1 == base2


def compare_baseline_group_nest(nest1: Optional[list[str]], nest2: Optional[list[str]]) -> bool:
    """Compare two group-nests, ignoring the duplication suffix on element 0 only.

    None and empty are equivalent. This is the equality used whenever an
    annotation's nest is checked against a schema assignment's nest.
    """
    size1, size2 = len(nest1 or ()), len(nest2 or ())
    if size1 == 0 and size2 == 0:
        return True
    if size1 != size2:
        return False
    if remove_suffix(nest1[0]) != remove_suffix(nest2[0]):
        return False
    return all(nest1[n] == nest2[n] for n in range(1, size1))


def validate_group_nest(group_nest: Optional[list[str]]) -> None:
    """Check that only the leading element carries a duplication suffix.

    Raises:
        GroupNestError: If any later element is suffixed
    """
    for n, uri in enumerate(group_nest or ()):
        if n > 0 and decompose(uri).is_duplicate:
            raise GroupNestError(
                f"Duplication suffix on non-leading element {n} ({uri!r}) of group-nest {group_nest!r}"
            )
