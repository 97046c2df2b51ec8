"""
Geometry extraction from WKT literals.
"""

import logging

from shapely import wkt
from shapely.errors import ShapelyError
from shapely.geometry.base import BaseGeometry

from rdf_geoindex.constants import XMLSCHEMA_OGC_WKT
from rdf_geoindex.errors import GeometryParseError
from rdf_geoindex.terms import Literal, Statement

logger = logging.getLogger(__name__)


def parse_wkt(text: str) -> BaseGeometry:
    """
    Parse Well-Known Text into a shapely geometry.

    Raises:
        GeometryParseError: if the text is not valid WKT or describes an
            empty geometry
    """
    try:
        geometry = wkt.loads(text)
    except (ShapelyError, ValueError, TypeError) as e:
        raise GeometryParseError(f"Invalid WKT {text!r}: {e}") from e
    if geometry.is_empty:
        raise GeometryParseError(f"Empty geometry: {text!r}")
    return geometry


class GeometryExtractor:
    """
    Reads the geometry held in a statement's literal object.

    A datatype other than geo:wktLiteral is tolerated with a warning; the
    label is parsed regardless. Empty geometries (``POINT EMPTY``,
    ``GEOMETRYCOLLECTION EMPTY`` ...) are rejected with GeometryParseError,
    since no spatial predicate can select them.
    """

    def __init__(self, expected_datatype=XMLSCHEMA_OGC_WKT):
        self.expected_datatype = expected_datatype

    def get_well_known_text(self, statement: Statement) -> str:
        obj = statement.object
        if not isinstance(obj, Literal):
            raise GeometryParseError(f"Statement does not contain Literal: {statement}")

        if obj.datatype is not None and obj.datatype != self.expected_datatype:
            logger.warning(f"Literal is not of type {self.expected_datatype}: {statement}")

        return obj.label

    def extract(self, statement: Statement) -> BaseGeometry:
        return parse_wkt(self.get_well_known_text(statement))
