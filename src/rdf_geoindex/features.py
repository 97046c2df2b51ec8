"""
Statement to Feature mapping.

A feature is the backend's unit of storage: the parsed geometry, the four
statement components as string attributes, and a content-hash id. Storing
an identical statement twice yields the same id, so the backend overwrites
rather than duplicates.

Mapping never raises for bad input. Each statement produces exactly one
result:
- Feature: indexable, geometry parsed
- Rejected: predicate not admitted, or object is not a literal
- Failed: geometry could not be parsed
"""

import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Union

from shapely.geometry.base import BaseGeometry

from rdf_geoindex import codec
from rdf_geoindex.constants import (
    CONTEXT_ATTRIBUTE,
    GEOMETRY_ATTRIBUTE,
    OBJECT_ATTRIBUTE,
    PREDICATE_ATTRIBUTE,
    SUBJECT_ATTRIBUTE,
)
from rdf_geoindex.errors import GeometryParseError
from rdf_geoindex.filters import PredicateFilter
from rdf_geoindex.geometry import GeometryExtractor
from rdf_geoindex.terms import Statement

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Feature:
    """A statement ready for the backend."""
    id: str
    geometry: BaseGeometry
    subject: str
    predicate: str
    object: str
    context: str = ""

    def attributes(self) -> dict:
        """Attribute map keyed by schema attribute name."""
        return {
            SUBJECT_ATTRIBUTE: self.subject,
            PREDICATE_ATTRIBUTE: self.predicate,
            OBJECT_ATTRIBUTE: self.object,
            CONTEXT_ATTRIBUTE: self.context,
            GEOMETRY_ATTRIBUTE: self.geometry,
        }

    def to_statement(self) -> Statement:
        return codec.read_statement_fields(self.subject, self.predicate, self.object, self.context)


@dataclass(frozen=True)
class Rejected:
    """A statement the predicate filter did not admit."""
    statement: Statement
    reason: str


@dataclass(frozen=True)
class Failed:
    """A statement whose geometry could not be extracted."""
    statement: Statement
    error: GeometryParseError


MappingResult = Union[Feature, Rejected, Failed]


@dataclass
class BatchOutcome:
    """Per-statement results of mapping a batch."""
    accepted: List[Feature] = field(default_factory=list)
    rejected: List[Rejected] = field(default_factory=list)
    failed: List[Failed] = field(default_factory=list)

    def add(self, result: MappingResult) -> None:
        if isinstance(result, Feature):
            self.accepted.append(result)
        elif isinstance(result, Rejected):
            self.rejected.append(result)
        else:
            self.failed.append(result)

    @property
    def ids(self) -> List[str]:
        return [f.id for f in self.accepted]

    @property
    def total(self) -> int:
        return len(self.accepted) + len(self.rejected) + len(self.failed)

    def to_dict(self) -> dict:
        return {
            "accepted": len(self.accepted),
            "rejected": len(self.rejected),
            "failed": len(self.failed),
            "ids": self.ids,
        }


class FeatureMapper:
    """Builds backend features from statements."""

    def __init__(
        self,
        predicate_filter: Optional[PredicateFilter] = None,
        extractor: Optional[GeometryExtractor] = None,
    ):
        self.predicate_filter = predicate_filter or PredicateFilter()
        self.extractor = extractor or GeometryExtractor()

    def map(self, statement: Statement) -> MappingResult:
        """Map one statement. Never raises for rejected or unparseable input."""
        if not self.predicate_filter.admits(statement.predicate):
            return Rejected(statement, f"predicate not indexed: {statement.predicate}")
        if not statement.has_literal_object:
            return Rejected(statement, "object is not a literal")

        try:
            geometry = self.extractor.extract(statement)
        except GeometryParseError as e:
            logger.warning(f"Error getting geo from statement: {statement}: {e}")
            return Failed(statement, e)

        return Feature(
            id=codec.statement_id(statement),
            geometry=geometry,
            subject=codec.write_subject(statement),
            predicate=codec.write_predicate(statement),
            object=codec.write_object(statement),
            context=codec.write_context(statement),
        )

    def map_all(self, statements: Iterable[Statement]) -> BatchOutcome:
        outcome = BatchOutcome()
        for statement in statements:
            outcome.add(self.map(statement))
        logger.debug(
            f"Mapped batch: {len(outcome.accepted)} accepted, "
            f"{len(outcome.rejected)} rejected, {len(outcome.failed)} failed"
        )
        return outcome
