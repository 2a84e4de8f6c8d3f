#!/usr/bin/env python3
"""Locator codec for flattened schema and entry-form lists.

Every group and assignment in a flattened list carries a locator describing
its position in the tree:

    ""          the root group
    "#:#:"      a group (each "#" is the 0-based index within its parent)
    "#:#:#"     an assignment (trailing index has no colon)

Groups directly under the root look like "2:", their assignments like "2:0",
and assignments directly under the root like "3".
"""

import re
from typing import Optional

LOCATOR_SEP = ":"

_GROUP_PATTERN = re.compile(r"(?:\d+:)*")
_ASSIGNMENT_PATTERN = re.compile(r"(?:\d+:)*\d+")


class LocatorError(Exception):
    """Raised when a locator string is malformed."""
    pass


def is_group_locator(locator: Optional[str]) -> bool:
    """True for the root ("") and for well-formed group locators."""
    return locator is not None and bool(_GROUP_PATTERN.fullmatch(locator))


def is_assignment_locator(locator: Optional[str]) -> bool:
    return locator is not None and bool(_ASSIGNMENT_PATTERN.fullmatch(locator))


def parent_of(locator: Optional[str]) -> Optional[str]:
    """Return the locator of the group that owns this group or assignment.

    The root has no parent, and malformed input is treated the same way.

    >>> parent_of("0:1:")
    '0:'
    >>> parent_of("0:1:2")
    '0:1:'
    >>> parent_of("3") == ""
    True
    """
    if not locator:
        return None
    if is_group_locator(locator):
        stripped = locator[:-1]
        return stripped[:stripped.rfind(LOCATOR_SEP) + 1]
    if is_assignment_locator(locator):
        return locator[:locator.rfind(LOCATOR_SEP) + 1]
    return None


def segments(locator: str) -> list[int]:
    """Parse the index segments of a locator.

    Raises:
        LocatorError: If the locator is not a group or assignment locator
    """
    if locator is None or not (is_group_locator(locator) or is_assignment_locator(locator)):
        raise LocatorError(f"Malformed locator: {locator!r}")
    return [int(seg) for seg in locator.split(LOCATOR_SEP) if seg]


def depth(locator: str) -> int:
    """Number of groups between the root and this locator (root is 0)."""
    return locator.count(LOCATOR_SEP) if locator else 0


def child_group_locator(parent: str, index: int) -> str:
    return f"{parent}{index}{LOCATOR_SEP}"


def child_assignment_locator(parent: str, index: int) -> str:
    return f"{parent}{index}"
