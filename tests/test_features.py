"""
Tests for statement to feature mapping.
"""

import pytest

from rdf_geoindex import codec
from rdf_geoindex.constants import GEO_AS_WKT, XMLSCHEMA_OGC_WKT
from rdf_geoindex.features import BatchOutcome, Failed, Feature, FeatureMapper, Rejected
from rdf_geoindex.filters import PredicateFilter
from rdf_geoindex.terms import IRI, Literal, Statement


def geo(subject, text, context=None, predicate=GEO_AS_WKT):
    return Statement(IRI(subject), predicate, Literal(text, datatype=XMLSCHEMA_OGC_WKT), context)


@pytest.fixture
def mapper():
    return FeatureMapper(PredicateFilter({GEO_AS_WKT}))


class TestFeatureMapper:
    def test_map_feature(self, mapper):
        statement = geo("urn:a", "POINT (2 4)", IRI("urn:g"))
        feature = mapper.map(statement)

        assert isinstance(feature, Feature)
        assert feature.id == codec.statement_id(statement)
        assert feature.subject == "urn:a"
        assert feature.predicate == str(GEO_AS_WKT)
        assert feature.object == f'"POINT (2 4)"^^<{XMLSCHEMA_OGC_WKT}>'
        assert feature.context == "urn:g"
        assert feature.geometry.wkt == "POINT (2 4)"

    def test_feature_round_trips_statement(self, mapper):
        statement = geo("urn:a", "LINESTRING (2 0, 3 3)")
        assert mapper.map(statement).to_statement() == statement

    def test_rejected_predicate(self, mapper):
        result = mapper.map(geo("urn:a", "POINT (0 0)", predicate=IRI("urn:other")))
        assert isinstance(result, Rejected)

    def test_rejected_resource_object(self, mapper):
        result = mapper.map(Statement(IRI("urn:a"), GEO_AS_WKT, IRI("urn:geom")))
        assert isinstance(result, Rejected)

    def test_failed_geometry_does_not_raise(self, mapper):
        result = mapper.map(geo("urn:a", "NOT WKT"))
        assert isinstance(result, Failed)
        assert "NOT WKT" in str(result.error)

    def test_same_statement_same_id(self, mapper):
        assert mapper.map(geo("urn:a", "POINT (1 1)")).id == mapper.map(geo("urn:a", "POINT (1 1)")).id


class TestMapAll:
    def test_batch_outcome(self, mapper):
        outcome = mapper.map_all([
            geo("urn:a", "POINT (1 1)"),
            geo("urn:b", "POLYGON ((0 0, 0 1, 1 1, 0 0"),
            geo("urn:c", "POINT (2 2)", predicate=IRI("urn:other")),
            geo("urn:d", "POINT (3 3)"),
        ])

        assert isinstance(outcome, BatchOutcome)
        assert [f.subject for f in outcome.accepted] == ["urn:a", "urn:d"]
        assert len(outcome.failed) == 1
        assert outcome.failed[0].statement.subject == IRI("urn:b")
        assert len(outcome.rejected) == 1
        assert outcome.total == 4
        assert outcome.ids == [f.id for f in outcome.accepted]

    def test_empty_batch(self, mapper):
        outcome = mapper.map_all([])
        assert outcome.to_dict() == {"accepted": 0, "rejected": 0, "failed": 0, "ids": []}
