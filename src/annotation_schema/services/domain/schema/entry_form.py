#!/usr/bin/env python3
"""Entry-form hierarchy.

Entry forms are an alternative layout of a schema's assignments, organized in
sections rather than groups. Sections use the same locator contract as schema
groups, and each section's layout cells name the assignment they display via
a field of the form [propURI, *groupNest].
"""

import logging
from dataclasses import dataclass, field
from typing import Optional

from ....core.config import SchemaConfig, schema_config
from ....models.models import EntryForm, EntryFormLayout, SchemaAssignment, SchemaSummary
from .locator import is_group_locator, parent_of
from .suffix import compare_baseline_group_nest

logger = logging.getLogger(__name__)


class EntryFormError(Exception):
    """Raised when an entry form cannot be assembled against its schema."""
    pass


@dataclass
class EntryFormHierarchySection:
    name: str
    locator: str
    section_idx: int
    descr: Optional[str] = None
    transliteration: Optional[str] = None
    duplication_group: Optional[list[str]] = None
    layout: list[EntryFormLayout] = field(default_factory=list, repr=False)
    parent: Optional["EntryFormHierarchySection"] = field(default=None, repr=False, compare=False)
    assignments: list[SchemaAssignment] = field(default_factory=list, repr=False, compare=False)
    sub_sections: list["EntryFormHierarchySection"] = field(default_factory=list, repr=False, compare=False)


@dataclass
class UnmatchedField:
    section_locator: str
    prop_uri: str
    group_nest: list[str]


class EntryFormHierarchy:
    """Tree of entry-form sections, each holding the schema assignments its layout shows."""

    def __init__(self, form: EntryForm, schema: SchemaSummary, config: Optional[SchemaConfig] = None):
        self.form = form
        self.schema = schema
        self.config = config or schema_config
        self.root: Optional[EntryFormHierarchySection] = None
        self.unmatched_fields: list[UnmatchedField] = []

        self._map_section: dict[str, EntryFormHierarchySection] = {}

        for n, section in enumerate(form.sections):
            locator = section.locator or ""
            if not is_group_locator(locator):
                raise EntryFormError(f"Malformed section locator {locator!r} (form {form.name!r})")
            if locator in self._map_section:
                raise EntryFormError(f"Duplicate section locator {locator!r} (form {form.name!r})")

            obj = EntryFormHierarchySection(
                name=section.name,
                locator=locator,
                section_idx=n,
                descr=section.descr,
                transliteration=section.transliteration,
                duplication_group=list(section.duplication_group) if section.duplication_group else None,
                layout=[cell.model_copy(deep=True) for cell in section.layout],
            )
            if locator:
                obj.parent = self._map_section.get(parent_of(locator))
                if obj.parent is None:
                    raise EntryFormError(
                        f"Parent section {parent_of(locator)!r} not found for section locator {locator!r}"
                    )
                obj.parent.sub_sections.append(obj)
            else:
                self.root = obj

            self._map_section[locator] = obj
            self._categorize_assignments(obj, obj.layout)

    def find_section(self, locator: str) -> Optional[EntryFormHierarchySection]:
        return self._map_section.get(locator)

    def find_assignment_list(self, locator: str, include_descendants: bool = False) -> list[SchemaAssignment]:
        section = self._map_section.get(locator)
        if section is None:
            raise EntryFormError(f"No section with locator {locator!r}")
        result = list(section.assignments)
        if include_descendants:
            for child in section.sub_sections:
                result.extend(self.find_assignment_list(child.locator, True))
        return result

    # ------------ private methods ------------

    def _categorize_assignments(self, section: EntryFormHierarchySection, layout: list[EntryFormLayout]):
        for cell in layout:
            if cell.field:
                prop_uri, group_nest = cell.field[0], list(cell.field[1:])
                matched = [
                    assn for assn in self.schema.assignments
                    if assn.prop_uri == prop_uri and compare_baseline_group_nest(group_nest, assn.group_nest)
                ]
                section.assignments.extend(matched)

                if not matched:
                    if self.config.STRICT_FORM_FIELDS:
                        raise EntryFormError(
                            f"Form {self.form.name!r}: no assignment for propURI={prop_uri} groupNest={group_nest}"
                        )
                    logger.warning(
                        f"Form parsing: assignment not found, groupNest={group_nest}",
                        extra={"locator": section.locator, "prop_uri": prop_uri},
                    )
                    self.unmatched_fields.append(UnmatchedField(section.locator, prop_uri, group_nest))

            if cell.layout:
                self._categorize_assignments(section, cell.layout)
