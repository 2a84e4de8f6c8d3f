#!/usr/bin/env python3

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

# Pydantic Models
#
# Field names are snake_case; the aliases are the camelCase names used by the
# schema service payloads, and either spelling is accepted on input.


class WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class SuggestionType(str, Enum):
    """How values for an assignment are suggested; only affects rendering."""
    FULL = "full"
    DISABLED = "disabled"
    FIELD = "field"
    URL = "url"
    ID = "id"
    STRING = "string"
    NUMBER = "number"
    INTEGER = "integer"
    DATE = "date"


class SchemaGroup(WireModel):
    name: str = ""
    descr: str | None = None
    group_uri: str | None = Field(default=None, alias="groupURI")  # None only for the root
    group_nest: list[str] = Field(default_factory=list, alias="groupNest")  # ancestors, not including group_uri
    can_duplicate: bool = Field(default=False, alias="canDuplicate")
    locator: str = ""


class SchemaAssignment(WireModel):
    name: str = ""
    descr: str | None = None
    prop_uri: str = Field(alias="propURI")
    group_nest: list[str] = Field(default_factory=list, alias="groupNest")
    group_label: list[str] = Field(default_factory=list, alias="groupLabel")
    locator: str
    suggestions: SuggestionType = SuggestionType.FULL
    mandatory: bool = False


class SchemaSummary(WireModel):
    """Flattened schema (template) as delivered by the schema service."""
    name: str = ""
    descr: str | None = None
    schema_uri: str = Field(alias="schemaURI")
    can_transliterate: bool = Field(default=False, alias="canTransliterate")
    groups: list[SchemaGroup] = []
    assignments: list[SchemaAssignment] = []


class SchemaBranch(WireModel):
    """Sub-schema grafted onto the primary schema at group_nest (baseline form)."""
    schema_uri: str = Field(alias="schemaURI")
    group_nest: list[str] = Field(default_factory=list, alias="groupNest")


class SchemaDuplication(WireModel):
    """Group (identified by its baseline nest, own URI first) cloned multiplicity times."""
    multiplicity: int = 2
    group_nest: list[str] = Field(default_factory=list, alias="groupNest")


class BranchTemplate(WireModel):
    """Template available for grafting, and the group URIs it may be grafted under."""
    schema_uri: str = Field(alias="schemaURI")
    title: str = ""
    branch_groups: list[str] = Field(default_factory=list, alias="branchGroups")  # empty: root only


class Annotation(WireModel):
    prop_uri: str = Field(alias="propURI")
    prop_label: str | None = Field(default=None, alias="propLabel")
    value_uri: str | None = Field(default=None, alias="valueURI")
    value_label: str | None = Field(default=None, alias="valueLabel")
    group_nest: list[str] = Field(default_factory=list, alias="groupNest")
    group_label: list[str] = Field(default_factory=list, alias="groupLabel")
    out_of_schema: bool | None = Field(default=None, alias="outOfSchema")


class WorkingAnnotationSet(WireModel):
    """Annotations being edited against a schema, with its graft and duplication directives."""
    schema_uri: str = Field(alias="schemaURI")
    annotations: list[Annotation] = []
    schema_branches: list[SchemaBranch] = Field(default_factory=list, alias="schemaBranches")
    schema_duplication: list[SchemaDuplication] = Field(default_factory=list, alias="schemaDuplication")


# Entry Form Models

class EntryFormType(str, Enum):
    TABLE = "table"
    ROW = "row"
    CELL = "cell"


class EntryFormLayout(WireModel):
    type: EntryFormType
    span: int | None = None
    label: str | None = None
    field: list[str] | None = None  # [propURI, *groupNest]
    layout: list["EntryFormLayout"] | None = None


EntryFormLayout.model_rebuild()


class EntryFormSection(WireModel):
    name: str = ""
    descr: str | None = None
    transliteration: str | None = None
    duplication_group: list[str] | None = Field(default=None, alias="duplicationGroup")
    layout: list[EntryFormLayout] = []
    locator: str = ""


class EntryForm(WireModel):
    name: str = ""
    priority: int = 0
    schema_uri_list: list[str] = Field(default_factory=list, alias="schemaURIList")
    sections: list[EntryFormSection] = []
