#!/usr/bin/env python3
"""Schema hierarchy builder.

Takes the flattened schema representation delivered by the schema service and
turns it into a tree of groups and assignments, which is what pickers, panels
and progress reports actually walk. The flattened lists carry no explicit
parent references: the tree is recovered entirely from each element's locator
(see locator.py).

The builder never mutates the flattened input; tree nodes are decorated copies.
"""

import logging
from dataclasses import dataclass, field
from typing import Iterator, Optional

from ....core.config import SchemaConfig, schema_config
from ....models.models import SchemaSummary, SuggestionType
from .group_nest import KEY_SEP
from .locator import is_assignment_locator, is_group_locator, parent_of, segments
from .suffix import validate_group_nest

logger = logging.getLogger(__name__)


class HierarchyError(Exception):
    """Raised when the flattened schema cannot be assembled into a tree."""
    pass


@dataclass
class HierarchyGroup:
    """Group node in the schema hierarchy."""
    name: str
    locator: str
    group_idx: int                          # Position in the flattened group list (-1 if synthesized)
    group_uri: Optional[str] = None         # None only for the root
    group_nest: list[str] = field(default_factory=list)
    descr: Optional[str] = None
    can_duplicate: bool = False
    parent: Optional["HierarchyGroup"] = field(default=None, repr=False, compare=False)
    assignments: list["HierarchyAssignment"] = field(default_factory=list, repr=False, compare=False)
    sub_groups: list["HierarchyGroup"] = field(default_factory=list, repr=False, compare=False)

    @property
    def is_root(self) -> bool:
        return self.parent is None

    @property
    def full_group_nest(self) -> list[str]:
        """The nest an assignment directly inside this group would carry."""
        if not self.group_uri:
            return []
        return [self.group_uri] + self.group_nest


@dataclass
class HierarchyAssignment:
    """Assignment node in the schema hierarchy."""
    name: str
    prop_uri: str
    locator: str
    assn_idx: int                           # Position in the flattened assignment list
    group_nest: list[str] = field(default_factory=list)
    group_label: list[str] = field(default_factory=list)
    descr: Optional[str] = None
    suggestions: SuggestionType = SuggestionType.FULL
    mandatory: bool = False
    parent: Optional[HierarchyGroup] = field(default=None, repr=False, compare=False)


def _sibling_order(locator: str) -> int:
    return segments(locator)[-1]


class SchemaHierarchy:
    """Tree view of a flattened schema, with lookup by locator and by group-nest."""

    def __init__(self, schema: SchemaSummary, config: Optional[SchemaConfig] = None):
        self.schema = schema
        self.config = config or schema_config
        self.root: Optional[HierarchyGroup] = None

        self._map_group: dict[str, HierarchyGroup] = {}
        self._map_assn: dict[str, HierarchyAssignment] = {}
        self._map_group_nest: dict[str, HierarchyGroup] = {}

        self._build_groups()
        self._build_assignments()

        logger.info(
            f"Built schema hierarchy: {len(self._map_group)} groups, {len(self._map_assn)} assignments",
            extra={"schema_uri": schema.schema_uri},
        )

    # ------------ lookup ------------

    def find_group(self, locator: str) -> Optional[HierarchyGroup]:
        return self._map_group.get(locator)

    def find_assignment(self, locator: str) -> Optional[HierarchyAssignment]:
        return self._map_assn.get(locator)

    def find_group_nest(self, group_nest: Optional[list[str]]) -> Optional[HierarchyGroup]:
        """Find the group whose own URI and ancestors are exactly group_nest.

        An annotation's group-nest therefore resolves to the group that
        directly contains it. Empty nests resolve to nothing.
        """
        if not group_nest:
            return None
        return self._map_group_nest.get(KEY_SEP.join(group_nest))

    def find_assignment_list(self, locator: str, include_descendants: bool = False) -> list[HierarchyAssignment]:
        """Assignments owned by the group, optionally followed by those of all descendants (pre-order).

        Raises:
            HierarchyError: If no group has this locator
        """
        group = self._map_group.get(locator)
        if group is None:
            raise HierarchyError(f"No group with locator {locator!r}")
        if not include_descendants:
            return list(group.assignments)
        return list(self._walk_assignments(group))

    def groups(self) -> Iterator[HierarchyGroup]:
        """All groups, root first, in pre-order."""
        stack = [self.root]
        while stack:
            group = stack.pop()
            yield group
            stack.extend(reversed(group.sub_groups))

    def assignments(self) -> Iterator[HierarchyAssignment]:
        return self._walk_assignments(self.root)

    def dump(self, group: Optional[HierarchyGroup] = None, depth: int = 0) -> str:
        """Indented text rendition of the tree, for debugging."""
        group = group or self.root
        pfx = "  " * depth
        pfxi = pfx + "  "
        lines = [f"{pfx}name=[{group.name}] uri=[{group.group_uri}] locator=[{group.locator}]"]
        lines.append(f"{pfx}assignments: {len(group.assignments)}")
        for assn in group.assignments:
            lines.append(f"{pfxi}name=[{assn.name}] uri=[{assn.prop_uri}] locator=[{assn.locator}]")
        lines.append(f"{pfx}subGroups: {len(group.sub_groups)}")
        for sub_group in group.sub_groups:
            lines.append(f"{pfxi}group:")
            lines.append(self.dump(sub_group, depth + 2))
        return "\n".join(lines)

    # ------------ private methods ------------

    def _walk_assignments(self, group: HierarchyGroup) -> Iterator[HierarchyAssignment]:
        yield from group.assignments
        for child in group.sub_groups:
            yield from self._walk_assignments(child)

    def _build_groups(self):
        nodes = []
        for n, group in enumerate(self.schema.groups):
            locator = group.locator or ""
            if not is_group_locator(locator):
                raise HierarchyError(f"Malformed group locator {locator!r} (group {group.name!r})")
            if locator in self._map_group:
                raise HierarchyError(f"Duplicate group locator {locator!r}")
            if self.config.STRICT_GROUP_NEST:
                validate_group_nest(group.group_nest)

            node = HierarchyGroup(
                name=group.name,
                locator=locator,
                group_idx=n,
                group_uri=group.group_uri,
                group_nest=list(group.group_nest),
                descr=group.descr,
                can_duplicate=group.can_duplicate,
            )
            self._map_group[locator] = node
            nodes.append(node)

            if group.group_uri:
                self._map_group_nest[KEY_SEP.join(node.full_group_nest)] = node

        if "" not in self._map_group:
            if self.schema.groups:
                raise HierarchyError(f"Schema {self.schema.schema_uri} has groups but no root group")
            # degenerate schema with nothing but root-level assignments
            self._map_group[""] = HierarchyGroup(name=self.schema.name, locator="", group_idx=-1)

        self.root = self._map_group[""]

        # linking is a separate pass so that parents need not precede their children
        for node in nodes:
            if node is self.root:
                continue
            parent = self._map_group.get(parent_of(node.locator))
            if parent is None:
                raise HierarchyError(
                    f"Parent group {parent_of(node.locator)!r} not found for group locator {node.locator!r}"
                )
            node.parent = parent
            parent.sub_groups.append(node)

        # children follow locator order; for pre-order payloads this is also array order
        for node in self._map_group.values():
            node.sub_groups.sort(key=lambda child: _sibling_order(child.locator))

    def _build_assignments(self):
        touched = set()
        for n, assn in enumerate(self.schema.assignments):
            locator = assn.locator
            if not is_assignment_locator(locator):
                raise HierarchyError(f"Malformed assignment locator {locator!r} (property {assn.prop_uri})")
            if locator in self._map_assn:
                raise HierarchyError(f"Duplicate assignment locator {locator!r}")
            if self.config.STRICT_GROUP_NEST:
                validate_group_nest(assn.group_nest)

            parent = self._map_group.get(parent_of(locator))
            if parent is None:
                raise HierarchyError(
                    f"Owning group {parent_of(locator)!r} not found for assignment locator {locator!r}"
                )

            node = HierarchyAssignment(
                name=assn.name,
                prop_uri=assn.prop_uri,
                locator=locator,
                assn_idx=n,
                group_nest=list(assn.group_nest),
                group_label=list(assn.group_label),
                descr=assn.descr,
                suggestions=assn.suggestions,
                mandatory=assn.mandatory,
                parent=parent,
            )
            parent.assignments.append(node)
            self._map_assn[locator] = node
            touched.add(id(parent))

        for group in self._map_group.values():
            if id(group) in touched:
                group.assignments.sort(key=lambda child: _sibling_order(child.locator))
