"""
Annotation Schema

Schema topology and annotation reconciliation for ontology-based curation:
- Hierarchy reconstruction from locator-tagged flattened schemas and entry forms
- Duplication suffix handling for repeatable groups
- Branch resolution for grafted sub-templates
- Harmonization of annotations after template edits
"""

__version__ = "0.1.0"
