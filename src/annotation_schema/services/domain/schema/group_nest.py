#!/usr/bin/env python3
"""Group-nest comparison and keying helpers.

"Same" is the literal comparison appropriate for two assignments in the same
template; "compatible" means the nests are not mutually exclusive, which is
the right test for assignments that may come from different templates.
"""

from typing import Optional

KEY_SEP = "::"


def same_group_nest(nest1: Optional[list[str]], nest2: Optional[list[str]]) -> bool:
    return list(nest1 or ()) == list(nest2 or ())


def compatible_group_nest(nest1: Optional[list[str]], nest2: Optional[list[str]]) -> bool:
    nest1, nest2 = nest1 or (), nest2 or ()
    return all(a == b for a, b in zip(nest1, nest2))


def descendent_group_nest(child_nest: Optional[list[str]], parent_nest: Optional[list[str]]) -> bool:
    """True if child_nest is parent_nest or lies somewhere underneath it.

    Nests list the nearest group first, so the parent has to match the
    trailing elements of the child.
    """
    child_nest, parent_nest = child_nest or [], parent_nest or []
    offset = len(child_nest) - len(parent_nest)
    if offset < 0:
        return False
    return all(parent_nest[n] == child_nest[n + offset] for n in range(len(parent_nest)))


def key_prop_group(prop_uri: str, group_nest: Optional[list[str]]) -> str:
    """Dictionary key for a property within its group hierarchy."""
    key = f"{prop_uri}{KEY_SEP}"
    if group_nest:
        key += KEY_SEP.join(group_nest)
    return key


def key_prop_group_value(prop_uri: str, group_nest: Optional[list[str]], value: Optional[str]) -> str:
    return f"{key_prop_group(prop_uri, group_nest)}{KEY_SEP}{value}"
