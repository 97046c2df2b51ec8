"""
Tests for topological query translation.
"""

import pytest
from shapely.geometry import LineString, Point, Polygon, box

from rdf_geoindex.constants import GEO_SF_CONTAINS, GEO_SF_OVERLAPS, NS_GEOF
from rdf_geoindex.errors import QueryTranslationError
from rdf_geoindex.query import FilterExpression, QueryTranslator, SpatialOperation


@pytest.fixture
def translator():
    return QueryTranslator()


class TestSpatialOperation:
    def test_eight_operations(self):
        assert [op.value for op in SpatialOperation] == [
            "EQUALS", "DISJOINT", "INTERSECTS", "TOUCHES",
            "CROSSES", "WITHIN", "CONTAINS", "OVERLAPS",
        ]

    def test_parse_case_insensitive(self):
        assert SpatialOperation.parse("within") is SpatialOperation.WITHIN
        assert SpatialOperation.parse(SpatialOperation.TOUCHES) is SpatialOperation.TOUCHES

    def test_parse_unknown(self):
        with pytest.raises(QueryTranslationError):
            SpatialOperation.parse("BBOX")

    def test_function_iri(self):
        assert SpatialOperation.from_function_iri(GEO_SF_CONTAINS) is SpatialOperation.CONTAINS
        assert SpatialOperation.from_function_iri(str(GEO_SF_OVERLAPS)) is SpatialOperation.OVERLAPS

    def test_unknown_function_iri(self):
        with pytest.raises(QueryTranslationError):
            SpatialOperation.from_function_iri(NS_GEOF + "distance")


class TestQueryTranslator:
    def test_canonical_text(self, translator):
        expr = translator.translate(SpatialOperation.EQUALS, Point(2, 4))
        assert expr.to_cql() == "EQUALS(geom, POINT (2 4))"
        assert str(expr) == expr.to_cql()

    @pytest.mark.parametrize("op", list(SpatialOperation))
    def test_every_operation(self, translator, op):
        expr = translator.translate(op, box(0, 0, 1, 1))
        assert isinstance(expr, FilterExpression)
        assert expr.operation is op
        assert expr.attribute == "geom"
        assert expr.to_cql().startswith(f"{op.value}(geom, POLYGON")

    def test_wkt_text_geometry(self, translator):
        expr = translator.translate("contains", "POINT (2 4)")
        assert expr.operation is SpatialOperation.CONTAINS
        assert expr.geometry.equals(Point(2, 4))

    def test_custom_attribute(self):
        expr = QueryTranslator("the_geom").translate("intersects", Point(0, 0))
        assert expr.to_cql() == "INTERSECTS(the_geom, POINT (0 0))"

    def test_bad_wkt(self, translator):
        with pytest.raises(QueryTranslationError):
            translator.translate("equals", "POINT (")

    def test_not_a_geometry(self, translator):
        with pytest.raises(QueryTranslationError):
            translator.translate("equals", 42)

    def test_empty_geometry(self, translator):
        with pytest.raises(QueryTranslationError):
            translator.translate("equals", Polygon())

    def test_unsupported_operation(self, translator):
        with pytest.raises(QueryTranslationError):
            translator.translate("NEAR", Point(0, 0))


class TestFilterMatching:
    def test_candidate_is_left_operand(self, translator):
        inner = box(0, 1, 2, 3)
        outer = box(0, 1, 4, 5)
        within = translator.translate("within", outer)
        contains = translator.translate("contains", outer)

        assert within.matches(inner)
        assert not contains.matches(inner)

    def test_crosses(self, translator):
        expr = translator.translate("crosses", box(0, 1, 4, 5))
        assert expr.matches(LineString([(2, 0), (3, 3)]))
        assert not expr.matches(Point(2, 4))
