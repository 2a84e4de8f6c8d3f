#!/usr/bin/env python3
"""Helpers for building flattened schemas the way the schema service emits them."""

from typing import Any

from annotation_schema.models.models import SchemaAssignment, SchemaGroup, SchemaSummary

BAT = "http://www.bioassayontology.org/bat#"
BAO = "http://www.bioassayontology.org/bao#"

G_ASSAY = f"{BAT}AssayGroup"
G_TARGET = f"{BAT}TargetGroup"
G_RESULT = f"{BAT}ResultGroup"

P_FORMAT = f"{BAO}BAO_0000205"
P_TYPE = f"{BAO}BAO_0002854"
P_TARGET = f"{BAO}BAO_0000211"
P_ORGANISM = f"{BAO}BAO_0002921"
P_UNITS = f"{BAO}BAO_0002874"


def flatten_schema(schema_uri: str, tree: dict[str, Any], name: str = "Test template") -> SchemaSummary:
    """Flatten a nested description into pre-order groups and assignments with locators.

    The tree is a dict with optional keys: name, uri, can_duplicate,
    assignments (list of (name, propURI)) and groups (list of subtrees).
    """
    groups: list[SchemaGroup] = []
    assignments: list[SchemaAssignment] = []

    def visit(node: dict[str, Any], locator: str, nest: list[str]):
        groups.append(SchemaGroup(
            name=node.get("name", ""),
            group_uri=node.get("uri"),
            group_nest=list(nest),
            can_duplicate=node.get("can_duplicate", False),
            locator=locator,
        ))
        inner = [node["uri"]] + nest if node.get("uri") else list(nest)
        for n, (assn_name, prop_uri) in enumerate(node.get("assignments", [])):
            assignments.append(SchemaAssignment(
                name=assn_name,
                prop_uri=prop_uri,
                group_nest=list(inner),
                locator=f"{locator}{n}",
            ))
        for n, child in enumerate(node.get("groups", [])):
            visit(child, f"{locator}{n}:", inner)

    visit(tree, "", [])
    return SchemaSummary(name=name, schema_uri=schema_uri, groups=groups, assignments=assignments)


def assay_schema(schema_uri: str = "http://example.com/schema/assay") -> SchemaSummary:
    """Small template with a repeatable group nested inside another group.

        (root)                   "" : format
          Assay                  "0:" : type
            Target (repeatable)  "0:0:" : target, organism
          Result                 "1:" : units
    """
    return flatten_schema(schema_uri, {
        "name": "Assay template",
        "assignments": [("format", P_FORMAT)],
        "groups": [
            {
                "name": "Assay",
                "uri": G_ASSAY,
                "assignments": [("type", P_TYPE)],
                "groups": [
                    {
                        "name": "Target",
                        "uri": G_TARGET,
                        "can_duplicate": True,
                        "assignments": [("target", P_TARGET), ("organism", P_ORGANISM)],
                    },
                ],
            },
            {
                "name": "Result",
                "uri": G_RESULT,
                "assignments": [("units", P_UNITS)],
            },
        ],
    })
