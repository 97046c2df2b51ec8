"""
rdf-geoindex: topological queries over RDF statements with WKT literals.

Statements are encoded into spatial features, stored through a pluggable
backend, and queried with the DE-9IM predicates (equals, disjoint,
intersects, touches, crosses, within, contains, overlaps).
"""

__version__ = "0.1.0"

from rdf_geoindex.terms import IRI, BNode, Literal, Statement, iri, bnode, literal
from rdf_geoindex.codec import (
    write_statement,
    read_statement,
    read_statement_fields,
    statement_id,
)
from rdf_geoindex.errors import (
    GeoIndexError,
    SerializationError,
    GeometryParseError,
    QueryTranslationError,
    BackendError,
    ResultError,
    ResultClosedError,
    NoSuchElementError,
    IndexerClosedError,
    ConfigValidationError,
)
from rdf_geoindex.geometry import GeometryExtractor, parse_wkt
from rdf_geoindex.filters import PredicateFilter
from rdf_geoindex.features import Feature, FeatureMapper, BatchOutcome, Rejected, Failed
from rdf_geoindex.query import SpatialOperation, FilterExpression, QueryTranslator
from rdf_geoindex.results import ResultDecoder, ResultState
from rdf_geoindex.backend import FeatureBackend, FeatureCursor, FeatureRecord, MemoryFeatureBackend
from rdf_geoindex.config import GeoIndexConfig, ConfigValidator, create_mock_config
from rdf_geoindex.indexer import GeoIndexer, IndexerStats

__all__ = [
    # Terms
    "IRI",
    "BNode",
    "Literal",
    "Statement",
    "iri",
    "bnode",
    "literal",
    # Codec
    "write_statement",
    "read_statement",
    "read_statement_fields",
    "statement_id",
    # Errors
    "GeoIndexError",
    "SerializationError",
    "GeometryParseError",
    "QueryTranslationError",
    "BackendError",
    "ResultError",
    "ResultClosedError",
    "NoSuchElementError",
    "IndexerClosedError",
    "ConfigValidationError",
    # Pipeline
    "GeometryExtractor",
    "parse_wkt",
    "PredicateFilter",
    "Feature",
    "FeatureMapper",
    "BatchOutcome",
    "Rejected",
    "Failed",
    "SpatialOperation",
    "FilterExpression",
    "QueryTranslator",
    "ResultDecoder",
    "ResultState",
    # Backend
    "FeatureBackend",
    "FeatureCursor",
    "FeatureRecord",
    "MemoryFeatureBackend",
    # Facade
    "GeoIndexConfig",
    "ConfigValidator",
    "create_mock_config",
    "GeoIndexer",
    "IndexerStats",
]
