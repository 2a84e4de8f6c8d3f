#!/usr/bin/env python3
"""Branch resolution for grafted sub-templates.

Annotations are always expressed in the coordinates of the composite schema:
the primary template with every branch glued in and every duplicated group
suffixed. Branch templates are fetched and cached independently and know
nothing about where they were grafted, so looking anything up in them means
re-expressing the annotation's group-nest relative to the branch.
"""

import logging
from typing import NamedTuple, Optional

from ....models.models import BranchTemplate, SchemaBranch, WorkingAnnotationSet
from .group_nest import same_group_nest
from .suffix import baseline, compare_permissive

logger = logging.getLogger(__name__)


class RelativeLocation(NamedTuple):
    """The schema that defines an assignment, and the group-nest within that schema."""
    schema_uri: str
    group_nest: Optional[list[str]]


def relative_branch(
    prop_uri: str,
    group_nest: Optional[list[str]],
    schema_uri: str,
    branches: Optional[list[SchemaBranch]],
) -> RelativeLocation:
    """Work out whether prop_uri/group_nest lives on the primary schema or on a grafted branch.

    A branch owns the location when its graft point matches the trailing
    elements of group_nest exactly; the leading remainder, baseline
    normalized, is the group-nest relative to the branch schema. Branches are
    checked in declaration order and the first match wins.

    Args:
        prop_uri: Property of the annotation (carried for callers' logging)
        group_nest: Annotation's group-nest in composite coordinates
        schema_uri: URI of the primary schema
        branches: Active branch directives

    Returns:
        RelativeLocation for the owning schema
    """
    if not group_nest:
        return RelativeLocation(schema_uri, group_nest)
    if not branches:
        return RelativeLocation(schema_uri, baseline(group_nest))

    for branch in branches:
        branch_nest = branch.group_nest or []
        offset = len(group_nest) - len(branch_nest)
        if offset < 0:
            continue
        if all(branch_nest[n] == group_nest[n + offset] for n in range(len(branch_nest))):
            logger.debug(
                f"Resolved groupNest={group_nest} onto branch {branch.schema_uri}",
                extra={"schema_uri": schema_uri, "prop_uri": prop_uri},
            )
            return RelativeLocation(branch.schema_uri, baseline(group_nest[:offset]))

    return RelativeLocation(schema_uri, baseline(group_nest))


def insertable_branches(
    group_nest: Optional[list[str]],
    working_set: WorkingAnnotationSet,
    branch_templates: list[BranchTemplate],
) -> list[BranchTemplate]:
    """Branch templates that may be grafted at group_nest (None or empty for the root).

    Templates already grafted at exactly this position are excluded; a
    template with no branch groups may only be grafted at the root.
    """
    group_nest = group_nest or []
    top_group = group_nest[0] if group_nest else None

    already = {
        branch.schema_uri for branch in working_set.schema_branches
        if same_group_nest(group_nest, branch.group_nest)
    }

    result = []
    for template in branch_templates:
        if template.schema_uri in already:
            continue
        if top_group is None:
            if not template.branch_groups:
                result.append(template)
        elif any(compare_permissive(group, top_group) for group in template.branch_groups):
            result.append(template)
    return result


def has_insertable_branch(
    group_nest: Optional[list[str]],
    working_set: WorkingAnnotationSet,
    branch_templates: list[BranchTemplate],
) -> bool:
    return len(insertable_branches(group_nest, working_set, branch_templates)) > 0


def append_branch(working_set: WorkingAnnotationSet, schema_uri: str, group_nest: Optional[list[str]]) -> SchemaBranch:
    """Graft another template at group_nest; the caller refetches the composite schema."""
    branch = SchemaBranch(schema_uri=schema_uri, group_nest=list(group_nest or []))
    working_set.schema_branches.append(branch)
    logger.info(
        f"Grafted branch at groupNest={branch.group_nest}",
        extra={"schema_uri": schema_uri},
    )
    return branch


def remove_branches(working_set: WorkingAnnotationSet, indices: list[int]) -> list[SchemaBranch]:
    """Remove the branch directives at the given positions, returning them."""
    removed = []
    for idx in sorted(set(indices), reverse=True):
        if 0 <= idx < len(working_set.schema_branches):
            removed.append(working_set.schema_branches.pop(idx))
    removed.reverse()
    return removed
