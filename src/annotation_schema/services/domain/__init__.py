"""
Domain Layer

Business logic for schema topology and annotation reconciliation. Nothing in
here performs I/O: schemas, forms and branch directives are fetched by the
caller and passed in as immutable snapshots.

Domains:
- schema: locators, duplication suffixes, hierarchy building, branch
  resolution, harmonization and group duplication editing
"""
