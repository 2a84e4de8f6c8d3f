#!/usr/bin/env python3
"""Editing of duplicated (repeatable) groups within a working annotation set.

A group that has been duplicated is described by a SchemaDuplication directive
holding its baseline nest and multiplicity; the composite schema then contains
copies "@1" through "@multiplicity", and annotations or grafted branches that
live inside a particular copy carry that suffix on the group's element of
their nest.

Each operation takes the full nest of a rendered group, i.e. the group's own
(possibly suffixed) URI followed by its ancestors, and edits the directives,
annotations and branches so that they stay consistent with one another. When
the directives change, the composite schema has to be refetched by the caller.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional

from ....core.config import SchemaConfig, schema_config
from ....models.models import Annotation, SchemaBranch, SchemaDuplication, WorkingAnnotationSet
from .group_nest import descendent_group_nest, key_prop_group, key_prop_group_value, same_group_nest
from .suffix import append_suffix, decompose, with_suffix

logger = logging.getLogger(__name__)


@dataclass
class GroupEditResult:
    changed: bool
    regraft_required: bool = False          # composite schema must be refetched
    added: list[Annotation] = field(default_factory=list)
    removed: list[Annotation] = field(default_factory=list)


def find_duplication(working_set: WorkingAnnotationSet, base_nest: list[str]) -> Optional[SchemaDuplication]:
    for dupl in working_set.schema_duplication:
        if same_group_nest(base_nest, dupl.group_nest):
            return dupl
    return None


def multiplicity_of(working_set: WorkingAnnotationSet, group_nest: list[str]) -> int:
    """How many copies of the group currently exist (1 if never duplicated)."""
    base_uri = decompose(group_nest[0]).base if group_nest else None
    dupl = find_duplication(working_set, [base_uri] + list(group_nest[1:])) if group_nest else None
    return dupl.multiplicity if dupl else 1


def _retarget(nest: list[str], group_nest: list[str], head: str) -> Optional[list[str]]:
    """If nest lies inside group_nest, return a copy with the group's element replaced by head."""
    if not descendent_group_nest(nest, group_nest):
        return None
    updated = list(nest)
    updated[len(nest) - len(group_nest)] = head
    return updated


def _retarget_content(working_set: WorkingAnnotationSet, group_nest: list[str], head: str) -> bool:
    rebranched = False
    for annot in working_set.annotations:
        updated = _retarget(annot.group_nest, group_nest, head)
        if updated is not None:
            annot.group_nest = updated
    for branch in working_set.schema_branches:
        updated = _retarget(branch.group_nest, group_nest, head)
        if updated is not None:
            branch.group_nest = updated
            rebranched = True
    return rebranched


def cleanup_annotations(annotations: list[Annotation], config: Optional[SchemaConfig] = None) -> list[Annotation]:
    """Drop redundant annotations, preserving order.

    A "not applicable" annotation is redundant when the same assignment also
    holds a real value; beyond that, exact repeats (same property, nest,
    value URI and label) are dropped.
    """
    not_applicable = (config or schema_config).NOT_APPLICABLE_URI

    annotated = {
        key_prop_group(annot.prop_uri, annot.group_nest)
        for annot in annotations if annot.value_uri != not_applicable
    }

    result, seen = [], set()
    for annot in annotations:
        key = key_prop_group(annot.prop_uri, annot.group_nest)
        if annot.value_uri == not_applicable and key in annotated:
            continue
        key = key_prop_group_value(annot.prop_uri, annot.group_nest, annot.value_uri) + "::" + str(annot.value_label)
        if key in seen:
            continue
        seen.add(key)
        result.append(annot)
    return result


def duplicate_group(
    working_set: WorkingAnnotationSet,
    group_nest: list[str],
    clone_content: bool = False,
    config: Optional[SchemaConfig] = None,
) -> GroupEditResult:
    """Add another copy of a repeatable group.

    The new copy is numbered one past the current multiplicity. Branches
    grafted inside the source copy are always carried over to the new copy;
    annotations only when clone_content is set. On the first duplication the
    group's existing content becomes copy @1.
    """
    if not group_nest:
        raise ValueError("The root group cannot be duplicated")

    base_uri, source_idx = decompose(group_nest[0])
    base_nest = [base_uri] + list(group_nest[1:])

    dupl = find_duplication(working_set, base_nest)
    if dupl is None:
        dupl = SchemaDuplication(multiplicity=1, group_nest=base_nest)
        working_set.schema_duplication.append(dupl)
    if dupl.multiplicity <= 1:
        _retarget_content(working_set, base_nest, append_suffix(base_uri, 1))

    source_nest = with_suffix(base_nest, source_idx or 1)
    dupl.multiplicity += 1
    new_head = append_suffix(base_uri, dupl.multiplicity)

    for branch in list(working_set.schema_branches):
        updated = _retarget(branch.group_nest, source_nest, new_head)
        if updated is not None:
            working_set.schema_branches.append(SchemaBranch(schema_uri=branch.schema_uri, group_nest=updated))

    added = []
    if clone_content:
        for annot in list(working_set.annotations):
            updated = _retarget(annot.group_nest, source_nest, new_head)
            if updated is not None:
                clone = annot.model_copy(deep=True)
                clone.group_nest = updated
                added.append(clone)
        working_set.annotations.extend(added)

    working_set.annotations = cleanup_annotations(working_set.annotations, config)

    logger.info(
        f"Duplicated group {base_nest} to multiplicity {dupl.multiplicity}, cloned {len(added)} annotations",
        extra={"schema_uri": working_set.schema_uri},
    )
    return GroupEditResult(changed=True, regraft_required=True, added=added)


def erase_group(working_set: WorkingAnnotationSet, group_nest: list[str]) -> GroupEditResult:
    """Delete every annotation that lies within the group (or copy of it)."""
    kept, removed = [], []
    for annot in working_set.annotations:
        (removed if descendent_group_nest(annot.group_nest, group_nest) else kept).append(annot)
    if not removed:
        return GroupEditResult(changed=False)

    working_set.annotations = kept
    logger.info(
        f"Erased {len(removed)} annotations from group {group_nest}",
        extra={"schema_uri": working_set.schema_uri},
    )
    return GroupEditResult(changed=True, removed=removed)


def delete_group(working_set: WorkingAnnotationSet, group_nest: list[str]) -> GroupEditResult:
    """Remove one copy of a duplicated group, renumbering the copies after it.

    Annotations and branches inside the copy are deleted. When only one copy
    remains the directive is dropped and the remaining content loses its @1
    suffix. Groups that are not duplicated are left alone.
    """
    if not group_nest:
        return GroupEditResult(changed=False)

    base_uri, dupidx = decompose(group_nest[0])
    base_nest = [base_uri] + list(group_nest[1:])
    dupl = find_duplication(working_set, base_nest)
    if dupl is None or dupidx < 1 or dupidx > dupl.multiplicity:
        return GroupEditResult(changed=False)

    erased = erase_group(working_set, group_nest)
    working_set.schema_branches = [
        branch for branch in working_set.schema_branches
        if not descendent_group_nest(branch.group_nest, group_nest)
    ]

    for idx in range(dupidx + 1, dupl.multiplicity + 1):
        _retarget_content(working_set, with_suffix(base_nest, idx), append_suffix(base_uri, idx - 1))
    dupl.multiplicity -= 1

    if dupl.multiplicity <= 1:
        working_set.schema_duplication = [d for d in working_set.schema_duplication if d is not dupl]
        _retarget_content(working_set, with_suffix(base_nest, 1), base_uri)

    logger.info(
        f"Deleted copy {dupidx} of group {base_nest} ({len(erased.removed)} annotations)",
        extra={"schema_uri": working_set.schema_uri},
    )
    return GroupEditResult(changed=True, regraft_required=True, removed=erased.removed)


def move_group(working_set: WorkingAnnotationSet, group_nest: list[str], direction: int) -> GroupEditResult:
    """Swap the content of a copy with its neighbour (direction -1 = up, +1 = down).

    Only annotations and branches move; the schema is unchanged unless a
    branch moved with them.
    """
    if not group_nest:
        return GroupEditResult(changed=False)

    base_uri, dupidx = decompose(group_nest[0])
    base_nest = [base_uri] + list(group_nest[1:])
    dupl = find_duplication(working_set, base_nest)
    if dupl is None or dupidx < 1:
        return GroupEditResult(changed=False)

    target = dupidx + direction
    if target < 1 or target > dupl.multiplicity:
        return GroupEditResult(changed=False)

    nest1, nest2 = with_suffix(base_nest, dupidx), with_suffix(base_nest, target)
    head1, head2 = nest1[0], nest2[0]

    for annot in working_set.annotations:
        updated = _retarget(annot.group_nest, nest1, head2)
        if updated is None:
            updated = _retarget(annot.group_nest, nest2, head1)
        if updated is not None:
            annot.group_nest = updated

    rebranched = False
    for branch in working_set.schema_branches:
        updated = _retarget(branch.group_nest, nest1, head2)
        if updated is None:
            updated = _retarget(branch.group_nest, nest2, head1)
        if updated is not None:
            branch.group_nest = updated
            rebranched = True

    return GroupEditResult(changed=True, regraft_required=rebranched)
