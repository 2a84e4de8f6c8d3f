#!/usr/bin/env python3

import pytest

from annotation_schema.core.config import DEFAULT_NOT_APPLICABLE_URI
from annotation_schema.models.models import Annotation
from annotation_schema.services.domain.schema.duplication import (
    cleanup_annotations,
    delete_group,
    duplicate_group,
    erase_group,
    find_duplication,
    move_group,
    multiplicity_of,
)
from tests.utils.factories import (
    AnnotationFactory,
    SchemaBranchFactory,
    SchemaDuplicationFactory,
    WorkingAnnotationSetFactory,
)

G = "http://example.com/group/G"
OUTER = "http://example.com/group/Outer"
SUB = "http://example.com/group/Sub"


def nests(working_set):
    return [a.group_nest for a in working_set.annotations]


class TestDuplicateGroup:
    """Tests for adding copies of a repeatable group"""

    @pytest.fixture
    def working_set(self):
        return WorkingAnnotationSetFactory(
            annotations=[
                AnnotationFactory(prop_uri="p1", group_nest=[G, OUTER]),
                AnnotationFactory(prop_uri="p2", group_nest=[SUB, G, OUTER]),
                AnnotationFactory(prop_uri="p3", group_nest=[OUTER]),
            ],
            schema_branches=[SchemaBranchFactory(group_nest=[G, OUTER])],
        )

    def test_first_duplication(self, working_set):
        result = duplicate_group(working_set, [G, OUTER])

        assert result.changed
        assert result.regraft_required
        assert result.added == []
        assert multiplicity_of(working_set, [G, OUTER]) == 2
        assert find_duplication(working_set, [G, OUTER]).multiplicity == 2
        assert nests(working_set) == [[f"{G}@1", OUTER], [SUB, f"{G}@1", OUTER], [OUTER]]

    def test_branches_follow_new_copy(self, working_set):
        source = working_set.schema_branches[0]
        duplicate_group(working_set, [G, OUTER])

        assert [b.group_nest for b in working_set.schema_branches] == [[f"{G}@1", OUTER], [f"{G}@2", OUTER]]
        assert working_set.schema_branches[1].schema_uri == source.schema_uri

    def test_clone_content(self, working_set):
        result = duplicate_group(working_set, [G, OUTER], clone_content=True)

        assert [a.group_nest for a in result.added] == [[f"{G}@2", OUTER], [SUB, f"{G}@2", OUTER]]
        assert len(working_set.annotations) == 5
        assert result.added[0].value_uri == working_set.annotations[0].value_uri
        assert result.added[0] is not working_set.annotations[0]

    def test_duplicate_from_later_copy(self, working_set):
        duplicate_group(working_set, [G, OUTER])
        working_set.annotations.append(AnnotationFactory(prop_uri="p4", group_nest=[f"{G}@2", OUTER]))

        result = duplicate_group(working_set, [f"{G}@2", OUTER], clone_content=True)

        assert multiplicity_of(working_set, [f"{G}@3", OUTER]) == 3
        assert [(a.prop_uri, a.group_nest) for a in result.added] == [("p4", [f"{G}@3", OUTER])]
        assert len(working_set.schema_duplication) == 1

    def test_root_cannot_be_duplicated(self, working_set):
        with pytest.raises(ValueError):
            duplicate_group(working_set, [])


class TestDeleteGroup:

    @pytest.fixture
    def working_set(self):
        return WorkingAnnotationSetFactory(
            annotations=[
                AnnotationFactory(prop_uri="p", value_uri="v1", group_nest=[f"{G}@1", OUTER]),
                AnnotationFactory(prop_uri="p", value_uri="v2", group_nest=[f"{G}@2", OUTER]),
                AnnotationFactory(prop_uri="p", value_uri="v3", group_nest=[SUB, f"{G}@3", OUTER]),
                AnnotationFactory(prop_uri="q", value_uri="v4", group_nest=[OUTER]),
            ],
            schema_branches=[SchemaBranchFactory(group_nest=[f"{G}@1", OUTER])],
            schema_duplication=[SchemaDuplicationFactory(multiplicity=3, group_nest=[G, OUTER])],
        )

    def test_delete_renumbers_later_copies(self, working_set):
        result = delete_group(working_set, [f"{G}@1", OUTER])

        assert result.changed
        assert result.regraft_required
        assert [a.value_uri for a in result.removed] == ["v1"]
        assert working_set.schema_branches == []
        assert multiplicity_of(working_set, [G, OUTER]) == 2
        assert nests(working_set) == [[f"{G}@1", OUTER], [SUB, f"{G}@2", OUTER], [OUTER]]

    def test_delete_down_to_one_copy(self, working_set):
        delete_group(working_set, [f"{G}@3", OUTER])
        delete_group(working_set, [f"{G}@2", OUTER])

        assert working_set.schema_duplication == []
        assert [a.value_uri for a in working_set.annotations] == ["v1", "v4"]
        assert nests(working_set) == [[G, OUTER], [OUTER]]
        assert [b.group_nest for b in working_set.schema_branches] == [[G, OUTER]]

    @pytest.mark.parametrize("group_nest", [
        [],
        [OUTER],
        [G, OUTER],
        [f"{G}@4", OUTER],
    ])
    def test_nothing_to_delete(self, working_set, group_nest):
        before = working_set.model_dump()

        assert not delete_group(working_set, group_nest).changed
        assert working_set.model_dump() == before


class TestEraseGroup:

    def test_erases_one_copy_only(self):
        working_set = WorkingAnnotationSetFactory(annotations=[
            AnnotationFactory(group_nest=[f"{G}@1", OUTER]),
            AnnotationFactory(group_nest=[SUB, f"{G}@2", OUTER]),
            AnnotationFactory(group_nest=[f"{G}@2", OUTER]),
        ])
        keep = working_set.annotations[0]

        result = erase_group(working_set, [f"{G}@2", OUTER])

        assert result.changed
        assert not result.regraft_required
        assert len(result.removed) == 2
        assert working_set.annotations == [keep]

    def test_empty_group(self):
        working_set = WorkingAnnotationSetFactory(annotations=[AnnotationFactory(group_nest=[OUTER])])
        assert not erase_group(working_set, [G, OUTER]).changed
        assert len(working_set.annotations) == 1


class TestMoveGroup:

    @pytest.fixture
    def working_set(self):
        return WorkingAnnotationSetFactory(
            annotations=[
                AnnotationFactory(value_uri="first", group_nest=[f"{G}@1", OUTER]),
                AnnotationFactory(value_uri="second", group_nest=[SUB, f"{G}@2", OUTER]),
            ],
            schema_duplication=[SchemaDuplicationFactory(multiplicity=2, group_nest=[G, OUTER])],
        )

    def test_swap_with_next(self, working_set):
        result = move_group(working_set, [f"{G}@1", OUTER], 1)

        assert result.changed
        assert not result.regraft_required
        assert nests(working_set) == [[f"{G}@2", OUTER], [SUB, f"{G}@1", OUTER]]

    def test_swap_moves_branches(self, working_set):
        working_set.schema_branches.append(SchemaBranchFactory(group_nest=[f"{G}@2", OUTER]))

        result = move_group(working_set, [f"{G}@2", OUTER], -1)

        assert result.regraft_required
        assert working_set.schema_branches[0].group_nest == [f"{G}@1", OUTER]

    @pytest.mark.parametrize("group_nest,direction", [
        ([f"{G}@1", OUTER], -1),
        ([f"{G}@2", OUTER], 1),
        ([G, OUTER], 1),
        ([OUTER], 1),
    ])
    def test_cannot_move(self, working_set, group_nest, direction):
        assert not move_group(working_set, group_nest, direction).changed


class TestCleanupAnnotations:

    def test_not_applicable_dropped_when_value_present(self):
        real = Annotation(prop_uri="p", value_uri="v", group_nest=["g"])
        na = Annotation(prop_uri="p", value_uri=DEFAULT_NOT_APPLICABLE_URI, group_nest=["g"])
        na_elsewhere = Annotation(prop_uri="p", value_uri=DEFAULT_NOT_APPLICABLE_URI, group_nest=["h"])

        assert cleanup_annotations([na, real, na_elsewhere]) == [real, na_elsewhere]

    def test_exact_repeats_dropped(self):
        first = Annotation(prop_uri="p", value_uri="v", value_label="x")
        repeat = Annotation(prop_uri="p", value_uri="v", value_label="x")
        relabelled = Annotation(prop_uri="p", value_uri="v", value_label="y")

        result = cleanup_annotations([first, repeat, relabelled])

        assert len(result) == 2
        assert result[0] is first
        assert result[1] is relabelled
