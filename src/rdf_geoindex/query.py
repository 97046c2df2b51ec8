"""
Topological query translation.

Each query is one DE-9IM named predicate against one geometry. The
translator produces a ``FilterExpression`` that carries the operation and the
query geometry as values. Its canonical text form is

    OPERATION(<geometry attribute>, <WKT>)

Backends that accept structured filters evaluate ``matches`` directly; the
text form is for backends that only take filter strings, and for logging.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Union

from shapely.geometry.base import BaseGeometry

from rdf_geoindex.constants import (
    GEO_SF_CONTAINS,
    GEO_SF_CROSSES,
    GEO_SF_DISJOINT,
    GEO_SF_EQUALS,
    GEO_SF_INTERSECTS,
    GEO_SF_OVERLAPS,
    GEO_SF_TOUCHES,
    GEO_SF_WITHIN,
    GEOMETRY_ATTRIBUTE,
)
from rdf_geoindex.errors import GeometryParseError, QueryTranslationError
from rdf_geoindex.geometry import parse_wkt
from rdf_geoindex.terms import IRI

logger = logging.getLogger(__name__)


class SpatialOperation(Enum):
    """The DE-9IM named predicates."""
    EQUALS = "EQUALS"
    DISJOINT = "DISJOINT"
    INTERSECTS = "INTERSECTS"
    TOUCHES = "TOUCHES"
    CROSSES = "CROSSES"
    WITHIN = "WITHIN"
    CONTAINS = "CONTAINS"
    OVERLAPS = "OVERLAPS"

    @classmethod
    def parse(cls, name: Union["SpatialOperation", str]) -> "SpatialOperation":
        if isinstance(name, cls):
            return name
        try:
            return cls(str(name).upper())
        except ValueError:
            raise QueryTranslationError(f"Unsupported spatial operation: {name!r}")

    @classmethod
    def from_function_iri(cls, function: Union[IRI, str]) -> "SpatialOperation":
        """Map a GeoSPARQL simple-features function IRI (geof:sf*) to an operation."""
        op = _FUNCTION_OPERATIONS.get(function if isinstance(function, IRI) else IRI(function))
        if op is None:
            raise QueryTranslationError(f"Not a GeoSPARQL simple features function: {function}")
        return op


_FUNCTION_OPERATIONS = {
    GEO_SF_EQUALS: SpatialOperation.EQUALS,
    GEO_SF_DISJOINT: SpatialOperation.DISJOINT,
    GEO_SF_INTERSECTS: SpatialOperation.INTERSECTS,
    GEO_SF_TOUCHES: SpatialOperation.TOUCHES,
    GEO_SF_CROSSES: SpatialOperation.CROSSES,
    GEO_SF_WITHIN: SpatialOperation.WITHIN,
    GEO_SF_CONTAINS: SpatialOperation.CONTAINS,
    GEO_SF_OVERLAPS: SpatialOperation.OVERLAPS,
}

# candidate OP query
_PREDICATES = {
    SpatialOperation.EQUALS: lambda a, b: a.equals(b),
    SpatialOperation.DISJOINT: lambda a, b: a.disjoint(b),
    SpatialOperation.INTERSECTS: lambda a, b: a.intersects(b),
    SpatialOperation.TOUCHES: lambda a, b: a.touches(b),
    SpatialOperation.CROSSES: lambda a, b: a.crosses(b),
    SpatialOperation.WITHIN: lambda a, b: a.within(b),
    SpatialOperation.CONTAINS: lambda a, b: a.contains(b),
    SpatialOperation.OVERLAPS: lambda a, b: a.overlaps(b),
}


@dataclass(frozen=True)
class FilterExpression:
    """A single topological predicate against one query geometry."""
    operation: SpatialOperation
    attribute: str
    geometry: BaseGeometry

    def to_cql(self) -> str:
        return f"{self.operation.value}({self.attribute}, {self.geometry.wkt})"

    def matches(self, candidate: BaseGeometry) -> bool:
        """Evaluate ``candidate OPERATION query``."""
        return bool(_PREDICATES[self.operation](candidate, self.geometry))

    def __str__(self) -> str:
        return self.to_cql()


class QueryTranslator:
    """Turns (operation, geometry) pairs into filter expressions."""

    def __init__(self, attribute: str = GEOMETRY_ATTRIBUTE):
        self.attribute = attribute

    def translate(
        self,
        operation: Union[SpatialOperation, str],
        geometry: Union[BaseGeometry, str],
    ) -> FilterExpression:
        """
        Build the filter for one topological query.

        Args:
            operation: A SpatialOperation or its name
            geometry: Query geometry, as a shapely geometry or WKT text

        Raises:
            QueryTranslationError: unsupported operation or unusable geometry
        """
        op = SpatialOperation.parse(operation)

        if isinstance(geometry, str):
            try:
                geometry = parse_wkt(geometry)
            except GeometryParseError as e:
                raise QueryTranslationError(str(e)) from e
        elif not isinstance(geometry, BaseGeometry):
            raise QueryTranslationError(f"Not a geometry: {geometry!r}")
        elif geometry.is_empty:
            raise QueryTranslationError("Query geometry is empty")

        return FilterExpression(op, self.attribute, geometry)
