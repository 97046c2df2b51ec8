"""
Tests for geometry extraction and predicate admission.
"""

import logging

import pytest
from shapely.geometry import Point, Polygon

from rdf_geoindex.constants import GEO_AS_WKT, XMLSCHEMA_OGC_WKT
from rdf_geoindex.errors import GeometryParseError
from rdf_geoindex.filters import PredicateFilter, admits
from rdf_geoindex.geometry import GeometryExtractor, parse_wkt
from rdf_geoindex.terms import IRI, BNode, Literal, Statement

OTHER = IRI("http://example.org/hasShape")


def wkt_statement(text, datatype=XMLSCHEMA_OGC_WKT, predicate=GEO_AS_WKT):
    return Statement(IRI("urn:feature"), predicate, Literal(text, datatype=datatype))


# ========== GeometryExtractor Tests ==========

class TestGeometryExtractor:
    def test_point(self):
        geom = GeometryExtractor().extract(wkt_statement("POINT (2 4)"))
        assert geom.equals(Point(2, 4))

    def test_polygon(self):
        geom = GeometryExtractor().extract(
            wkt_statement("POLYGON ((0 1, 0 5, 4 5, 4 1, 0 1))")
        )
        assert isinstance(geom, Polygon)
        assert geom.area == 16

    def test_plain_literal_is_parsed(self):
        geom = GeometryExtractor().extract(wkt_statement("POINT (1 1)", datatype=None))
        assert geom.equals(Point(1, 1))

    def test_datatype_mismatch_warns(self, caplog):
        statement = wkt_statement("POINT (1 1)", datatype=IRI("http://www.w3.org/2001/XMLSchema#string"))
        with caplog.at_level(logging.WARNING, logger="rdf_geoindex.geometry"):
            geom = GeometryExtractor().extract(statement)
        assert geom.equals(Point(1, 1))
        assert "is not of type" in caplog.text

    def test_invalid_wkt(self):
        with pytest.raises(GeometryParseError):
            GeometryExtractor().extract(wkt_statement("POINT (one two)"))

    def test_resource_object(self):
        statement = Statement(IRI("urn:feature"), GEO_AS_WKT, IRI("urn:geometry"))
        with pytest.raises(GeometryParseError):
            GeometryExtractor().extract(statement)

    def test_empty_geometry(self):
        with pytest.raises(GeometryParseError):
            parse_wkt("POINT EMPTY")

    def test_empty_geometry_literal(self):
        with pytest.raises(GeometryParseError):
            GeometryExtractor().extract(wkt_statement("GEOMETRYCOLLECTION EMPTY"))


# ========== PredicateFilter Tests ==========

class TestPredicateFilter:
    def test_empty_allow_list_admits_all(self):
        f = PredicateFilter()
        assert f.admits(GEO_AS_WKT)
        assert f.admits(OTHER)

    def test_allow_list(self):
        f = PredicateFilter({GEO_AS_WKT})
        assert f.admits(GEO_AS_WKT)
        assert not f.admits(OTHER)

    def test_string_predicates(self):
        f = PredicateFilter([str(GEO_AS_WKT)])
        assert f.allowed_predicates == frozenset({GEO_AS_WKT})

    def test_resource_objects_never_indexable(self):
        statement = Statement(IRI("urn:feature"), GEO_AS_WKT, BNode("g"))
        assert not PredicateFilter().is_indexable(statement)
        assert not PredicateFilter({GEO_AS_WKT}).is_indexable(statement)

    def test_indexable(self):
        f = PredicateFilter({GEO_AS_WKT})
        assert f.is_indexable(wkt_statement("POINT (0 0)"))
        assert not f.is_indexable(wkt_statement("POINT (0 0)", predicate=OTHER))

    def test_module_function(self):
        assert admits(OTHER, set())
        assert admits(OTHER, [OTHER])
        assert not admits(OTHER, [GEO_AS_WKT])
