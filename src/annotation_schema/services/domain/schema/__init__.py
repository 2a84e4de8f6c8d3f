"""
Schema Topology Domain

Handles schema structure and annotation placement:
- Locator parsing for flattened schema and entry-form lists
- Duplication suffixes on repeatable group URIs
- Hierarchy reconstruction (schema groups/assignments, entry-form sections)
- Branch resolution for grafted sub-templates
- Harmonization of annotations after template edits
- Editing of duplicated groups in a working annotation set
"""

from .branch import RelativeLocation, relative_branch
from .harmonizer import HarmonizationReport, harmonize_annotations
from .hierarchy import HierarchyError, SchemaHierarchy
from .suffix import (
    GroupNestError,
    append_suffix,
    baseline,
    compare_baseline_group_nest,
    compare_permissive,
    decompose,
    remove_suffix,
    with_suffix,
)

__all__ = [
    # Hierarchy
    "SchemaHierarchy",
    "HierarchyError",
    # Duplication suffixes
    "GroupNestError",
    "decompose",
    "remove_suffix",
    "append_suffix",
    "baseline",
    "with_suffix",
    "compare_permissive",
    "compare_baseline_group_nest",
    # Branches
    "RelativeLocation",
    "relative_branch",
    # Harmonization
    "HarmonizationReport",
    "harmonize_annotations",
]
