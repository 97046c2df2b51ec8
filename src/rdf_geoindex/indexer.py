"""
Geo Indexer.

Public entry point of the package. Stores statements whose object is a WKT
literal as features in a spatial backend, and answers the eight DE-9IM
topological queries with lazy statement sequences.

Each statement becomes one feature of type ``RDF``:

    +-------------------+--------+----------+
    | Name              | Symbol | Type     |
    +-------------------+--------+----------+
    | Subject           | S      | String   |
    | Predicate         | P      | String   |
    | Object            | O      | String   |
    | Context           | C      | String   |
    | Geometry          | geom   | Geometry |
    +-------------------+--------+----------+

The feature id is a hash of the statement's wire form, so storing the same
statement again overwrites it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Dict, FrozenSet, Iterable, List, Optional, Union

from shapely.geometry.base import BaseGeometry

from rdf_geoindex.backend import FeatureBackend, FeatureCursor, MemoryFeatureBackend
from rdf_geoindex.config import ConfigValidator, GeoIndexConfig
from rdf_geoindex.constants import FEATURE_NAME, FEATURE_SCHEMA, GEOMETRY_ATTRIBUTE
from rdf_geoindex.errors import BackendError, IndexerClosedError
from rdf_geoindex.features import BatchOutcome, Feature, FeatureMapper
from rdf_geoindex.filters import PredicateFilter
from rdf_geoindex.geometry import GeometryExtractor
from rdf_geoindex.query import FilterExpression, QueryTranslator, SpatialOperation
from rdf_geoindex.results import ResultDecoder
from rdf_geoindex.terms import IRI, Statement

logger = logging.getLogger(__name__)

QueryGeometry = Union[BaseGeometry, str]


@dataclass
class IndexerStats:
    """Counters for one indexer instance."""
    statements_seen: int = 0
    features_written: int = 0
    rejected: int = 0
    failed: int = 0
    writes: int = 0
    queries: int = 0
    pending: int = 0

    def to_dict(self) -> dict:
        return {
            "statements_seen": self.statements_seen,
            "features_written": self.features_written,
            "rejected": self.rejected,
            "failed": self.failed,
            "writes": self.writes,
            "queries": self.queries,
            "pending": self.pending,
        }


def create_backend(config: GeoIndexConfig) -> FeatureBackend:
    """Create the backend selected by the configuration."""
    if config.use_mock:
        return MemoryFeatureBackend(config.backend_params())
    raise BackendError(
        f"No backend available for table {config.table_name!r}: "
        "pass a live FeatureBackend or enable the mock instance"
    )


class GeoIndexer:
    """
    Spatial index over statements with WKT literal objects.

    Example:
        config = create_mock_config(predicates=[str(GEO_AS_WKT)])
        with GeoIndexer(config) as indexer:
            indexer.store_statement(statement)
            with indexer.query_contains(point) as results:
                matches = set(results)

    With ``write_buffer_size > 0`` features are held in memory until the
    buffer fills, ``flush()`` is called, a query runs or the indexer is
    closed. Otherwise each store call issues one backend write.
    """

    def __init__(
        self,
        config: GeoIndexConfig,
        backend: Optional[FeatureBackend] = None,
        backend_factory: Callable[[GeoIndexConfig], FeatureBackend] = create_backend,
    ):
        ConfigValidator.validate_or_raise(config)
        self.config = config
        self.feature_type = FEATURE_NAME

        self.predicate_filter = PredicateFilter(config.get_geo_predicates())
        self.mapper = FeatureMapper(self.predicate_filter, GeometryExtractor())
        self.translator = QueryTranslator(GEOMETRY_ATTRIBUTE)

        self.backend = backend if backend is not None else backend_factory(config)
        self._pending: Dict[str, Feature] = {}
        self._stats = IndexerStats()
        self._closed = False

        try:
            self.backend.ensure_schema(self.feature_type, FEATURE_SCHEMA)
        except Exception as e:
            # A factory-built backend has no other owner to close it
            if backend is None:
                self.backend.close()
            if isinstance(e, BackendError):
                raise
            raise BackendError(f"Could not create feature type {self.feature_type}: {e}") from e

    # -------------------------------------------------------------------------
    # Storing
    # -------------------------------------------------------------------------

    def store_statement(self, statement: Statement) -> BatchOutcome:
        return self.store_statements([statement])

    def store_statements(self, statements: Iterable[Statement]) -> BatchOutcome:
        """
        Index a batch of statements.

        Statements that are not admitted or whose geometry does not parse are
        left out of the write and reported in the returned outcome. The
        features that did map are written in one backend call (or buffered).

        Raises:
            BackendError: the write failed; nothing from this batch was stored
        """
        self._check_open()
        outcome = self.mapper.map_all(statements)

        self._stats.statements_seen += outcome.total
        self._stats.rejected += len(outcome.rejected)
        self._stats.failed += len(outcome.failed)

        if not outcome.accepted:
            return outcome

        if self.config.write_buffer_size > 0:
            for feature in outcome.accepted:
                self._pending[feature.id] = feature
            self._stats.pending = len(self._pending)
            if len(self._pending) >= self.config.write_buffer_size:
                self.flush()
        else:
            self._write(outcome.accepted)
        return outcome

    def _write(self, features: List[Feature]) -> None:
        ids = [f.id for f in features]
        try:
            self.backend.write_features(self.feature_type, features)
        except BackendError as e:
            logger.error(f"Error writing {len(features)} features: {e}")
            e.feature_ids = ids
            raise
        except Exception as e:
            logger.error(f"Error writing {len(features)} features: {e}")
            raise BackendError(f"Write of {len(features)} features failed: {e}", ids) from e
        self._stats.writes += 1
        self._stats.features_written += len(features)

    def flush(self) -> None:
        """Write buffered features. A no-op when nothing is pending."""
        self._check_open()
        self._flush_pending()

    def _flush_pending(self) -> None:
        if not self._pending:
            return
        logger.info(f"Flushing {len(self._pending)} pending features")
        self._write(list(self._pending.values()))
        self._pending.clear()
        self._stats.pending = 0

    # -------------------------------------------------------------------------
    # Querying
    # -------------------------------------------------------------------------

    def query(
        self,
        operation: Union[SpatialOperation, str],
        geometry: QueryGeometry,
    ) -> ResultDecoder:
        """
        Find the statements whose geometry satisfies ``stored OPERATION geometry``.

        The backend is not read until the returned sequence is first used.

        Raises:
            QueryTranslationError: unsupported operation or bad query geometry
        """
        self._check_open()
        filter_expr = self.translator.translate(operation, geometry)
        self._flush_pending()
        self._stats.queries += 1
        logger.info(f"Performing query: {filter_expr}")
        return ResultDecoder(
            lambda: self._open_cursor(filter_expr),
            description=filter_expr.to_cql(),
        )

    def _open_cursor(self, filter_expr: FilterExpression) -> FeatureCursor:
        try:
            return self.backend.read_features(self.feature_type, filter_expr)
        except BackendError as e:
            logger.error(f"Error performing query: {filter_expr}: {e}")
            raise
        except Exception as e:
            logger.error(f"Error performing query: {filter_expr}: {e}")
            raise BackendError(f"Query failed: {filter_expr}: {e}") from e

    def query_equals(self, geometry: QueryGeometry) -> ResultDecoder:
        return self.query(SpatialOperation.EQUALS, geometry)

    def query_disjoint(self, geometry: QueryGeometry) -> ResultDecoder:
        return self.query(SpatialOperation.DISJOINT, geometry)

    def query_intersects(self, geometry: QueryGeometry) -> ResultDecoder:
        return self.query(SpatialOperation.INTERSECTS, geometry)

    def query_touches(self, geometry: QueryGeometry) -> ResultDecoder:
        return self.query(SpatialOperation.TOUCHES, geometry)

    def query_crosses(self, geometry: QueryGeometry) -> ResultDecoder:
        return self.query(SpatialOperation.CROSSES, geometry)

    def query_within(self, geometry: QueryGeometry) -> ResultDecoder:
        return self.query(SpatialOperation.WITHIN, geometry)

    def query_contains(self, geometry: QueryGeometry) -> ResultDecoder:
        return self.query(SpatialOperation.CONTAINS, geometry)

    def query_overlaps(self, geometry: QueryGeometry) -> ResultDecoder:
        return self.query(SpatialOperation.OVERLAPS, geometry)

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def get_indexable_predicates(self) -> FrozenSet[IRI]:
        return self.predicate_filter.allowed_predicates

    def stats(self) -> IndexerStats:
        return self._stats

    @property
    def closed(self) -> bool:
        return self._closed

    def _check_open(self) -> None:
        if self._closed:
            raise IndexerClosedError("Geo indexer is closed")

    def close(self) -> None:
        """Flush pending writes, then release the backend. Safe to call twice."""
        if self._closed:
            return
        self._closed = True
        try:
            self._flush_pending()
        finally:
            self.backend.close()
            logger.debug(f"Closed geo indexer for table {self.config.table_name}")

    def __enter__(self) -> "GeoIndexer":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
