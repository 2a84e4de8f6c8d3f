#!/usr/bin/env python3
"""Annotation harmonization.

When a template is edited, annotations entered against the previous revision
can end up pointing at a group-nest that no longer exists. Dropping them would
destroy curated data on every template revision, so instead each annotation
without an exact match is moved to the assignment with the same property
whose group-nest agrees with it most deeply.

Scoring, for every assignment sharing the property, in schema order:

1. The first such assignment becomes the candidate with score 0.
2. Strict prefix: +1 per leading position with identical elements, stopping
   at the first mismatch.
3. Suffix tolerant: the same walk, but a position whose elements only agree
   once duplication suffixes are stripped from both scores 0.5.

A candidate replaces the current best only when its score is strictly
greater, so ties go to the assignment encountered first.
"""

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Optional

from ....models.models import Annotation, SchemaAssignment, SchemaSummary
from .suffix import compare_baseline_group_nest, remove_suffix

logger = logging.getLogger(__name__)


@dataclass
class Relocation:
    annotation: Annotation
    previous_group_nest: list[str]
    assignment: SchemaAssignment
    score: float


@dataclass
class HarmonizationReport:
    """Outcome of a harmonization pass, one entry per input annotation."""
    unchanged: list[Annotation] = field(default_factory=list)
    relocated: list[Relocation] = field(default_factory=list)
    orphaned: list[Annotation] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return len(self.relocated) > 0

    @property
    def total(self) -> int:
        return len(self.unchanged) + len(self.relocated) + len(self.orphaned)


def _strict_prefix_score(assn_nest: list[str], annot_nest: list[str]) -> int:
    score = 0
    for g1, g2 in zip(assn_nest, annot_nest):
        if g1 != g2:
            break
        score += 1
    return score


def _suffix_tolerant_score(assn_nest: list[str], annot_nest: list[str]) -> float:
    score = 0.0
    for g1, g2 in zip(assn_nest, annot_nest):
        if g1 == g2:
            score += 1
        elif remove_suffix(g1) == remove_suffix(g2):
            score += 0.5
        else:
            break
    return score


def best_assignment(
    annotation: Annotation,
    candidates: list[SchemaAssignment],
) -> tuple[Optional[SchemaAssignment], float]:
    """Pick the relocation target among assignments sharing the annotation's property.

    Returns:
        (assignment, score), or (None, -1) if there are no candidates
    """
    annot_nest = annotation.group_nest or []
    best_assn, best_score = None, -1.0

    for assn in candidates:
        if best_score < 0:
            best_assn, best_score = assn, 0.0

        assn_nest = assn.group_nest or []

        score = _strict_prefix_score(assn_nest, annot_nest)
        if score > best_score:
            best_assn, best_score = assn, float(score)

        score = _suffix_tolerant_score(assn_nest, annot_nest)
        if score > best_score:
            best_assn, best_score = assn, score

    return best_assn, best_score


def harmonize_annotations(schema: SchemaSummary, annotations: list[Annotation]) -> HarmonizationReport:
    """Repair annotations whose exact schema location no longer exists.

    Annotations are modified in place: only group_nest is ever changed, and
    the list itself keeps its length and order. Annotations whose property
    appears nowhere in the schema are left as they are and reported as
    orphaned.

    Args:
        schema: The (possibly newly edited) schema
        annotations: Working annotations, in composite coordinates

    Returns:
        HarmonizationReport describing what happened to each annotation
    """
    by_prop: dict[str, list[SchemaAssignment]] = defaultdict(list)
    for assn in schema.assignments:
        by_prop[assn.prop_uri].append(assn)

    report = HarmonizationReport()

    for annot in annotations:
        candidates = by_prop.get(annot.prop_uri, [])

        if any(compare_baseline_group_nest(assn.group_nest, annot.group_nest) for assn in candidates):
            report.unchanged.append(annot)
            continue

        assn, score = best_assignment(annot, candidates)
        if assn is None:
            logger.debug(
                f"No assignment for annotation, groupNest={annot.group_nest}",
                extra={"schema_uri": schema.schema_uri, "prop_uri": annot.prop_uri},
            )
            report.orphaned.append(annot)
            continue

        previous = list(annot.group_nest or [])
        annot.group_nest = list(assn.group_nest)
        report.relocated.append(Relocation(annot, previous, assn, score))

        logger.debug(
            f"Relocated annotation from groupNest={previous} to {annot.group_nest} (score {score})",
            extra={"schema_uri": schema.schema_uri, "prop_uri": annot.prop_uri, "locator": assn.locator},
        )

    if report.relocated or report.orphaned:
        logger.info(
            f"Harmonized {report.total} annotations: {len(report.relocated)} relocated, "
            f"{len(report.orphaned)} orphaned",
            extra={"schema_uri": schema.schema_uri},
        )
    if report.orphaned:
        logger.warning(
            f"{len(report.orphaned)} annotation(s) have no matching property in the schema",
            extra={"schema_uri": schema.schema_uri},
        )

    return report
