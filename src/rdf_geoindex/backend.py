"""
Feature storage backend boundary.

The geo index never talks to a spatial storage engine directly. It goes
through ``FeatureBackend``:

- ensure_schema: create the feature type if it does not exist
- write_features: persist features under their provided ids (overwrite)
- read_features: open a cursor over the features matching a filter
- close: release connections

``MemoryFeatureBackend`` keeps each feature type in a Polars DataFrame and
evaluates filters with shapely. It is the backend selected by the mock flag
and is meant for tests and small embedded use; it has no spatial index and
scans every row on read.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Tuple

import polars as pl
from shapely import wkt

from rdf_geoindex.errors import BackendError
from rdf_geoindex.features import Feature
from rdf_geoindex.query import FilterExpression

logger = logging.getLogger(__name__)

ID_COLUMN = "id"


# =============================================================================
# Records and Cursors
# =============================================================================

@dataclass
class FeatureRecord:
    """A feature as returned by a backend read."""
    id: str
    attributes: Dict[str, Any] = field(default_factory=dict)

    def get_attribute(self, name: str) -> Any:
        return self.attributes.get(name)


class FeatureCursor(ABC):
    """Forward-only cursor over backend records."""

    @abstractmethod
    def has_next(self) -> bool:
        ...

    @abstractmethod
    def next(self) -> FeatureRecord:
        ...

    @abstractmethod
    def close(self) -> None:
        ...


class ListFeatureCursor(FeatureCursor):
    """Cursor over records already materialized in memory."""

    def __init__(self, records: List[FeatureRecord]):
        self._records = records
        self._position = 0
        self.closed = False

    def has_next(self) -> bool:
        if self.closed:
            return False
        return self._position < len(self._records)

    def next(self) -> FeatureRecord:
        if self.closed:
            raise BackendError("Cursor is closed")
        if self._position >= len(self._records):
            raise BackendError("Cursor is exhausted")
        record = self._records[self._position]
        self._position += 1
        return record

    def close(self) -> None:
        self.closed = True
        self._records = []


# =============================================================================
# Backend Contract
# =============================================================================

def parse_schema(schema: str) -> List[Tuple[str, str]]:
    """
    Parse a feature schema spec such as ``S:String,geom:Geometry:srid=4326``.

    Returns (attribute name, type name) pairs in declaration order.
    """
    attributes = []
    for part in schema.split(","):
        part = part.strip()
        if not part:
            continue
        pieces = part.split(":")
        if len(pieces) < 2 or not pieces[0]:
            raise BackendError(f"Invalid schema attribute: {part!r}")
        attributes.append((pieces[0], pieces[1]))
    return attributes


class FeatureBackend(ABC):
    """A spatial feature store."""

    @abstractmethod
    def type_names(self) -> List[str]:
        ...

    @abstractmethod
    def ensure_schema(self, type_name: str, schema: str) -> bool:
        """Create the feature type if missing. Returns True if it was created."""

    @abstractmethod
    def write_features(self, type_name: str, features: Iterable[Feature]) -> None:
        ...

    @abstractmethod
    def read_features(self, type_name: str, filter: FilterExpression) -> FeatureCursor:
        ...

    @abstractmethod
    def close(self) -> None:
        ...


# =============================================================================
# In-Memory Backend
# =============================================================================

class MemoryFeatureBackend(FeatureBackend):
    """
    Feature backend held in Polars DataFrames.

    One DataFrame per feature type with an ``id`` column, one Utf8 column per
    string attribute and the geometry attribute stored as WKT.

    Example:
        backend = MemoryFeatureBackend()
        backend.ensure_schema("RDF", FEATURE_SCHEMA)
        backend.write_features("RDF", features)
        cursor = backend.read_features("RDF", filter_expr)
    """

    def __init__(self, params: Optional[Dict[str, Any]] = None):
        self.params = dict(params or {})
        self._tables: Dict[str, pl.DataFrame] = {}
        self._geometry_columns: Dict[str, str] = {}
        self._closed = False
        self.write_count = 0

    def _check_open(self) -> None:
        if self._closed:
            raise BackendError("Backend is closed")

    def _table(self, type_name: str) -> pl.DataFrame:
        self._check_open()
        table = self._tables.get(type_name)
        if table is None:
            raise BackendError(f"Unknown feature type: {type_name}")
        return table

    def type_names(self) -> List[str]:
        self._check_open()
        return list(self._tables)

    def ensure_schema(self, type_name: str, schema: str) -> bool:
        self._check_open()
        if type_name in self._tables:
            return False

        columns = {ID_COLUMN: pl.Utf8}
        geometry_column = None
        for name, type_ in parse_schema(schema):
            if type_.lower() == "geometry":
                if geometry_column is not None:
                    raise BackendError(f"Schema declares more than one geometry: {schema}")
                geometry_column = name
            columns[name] = pl.Utf8
        if geometry_column is None:
            raise BackendError(f"Schema has no geometry attribute: {schema}")

        self._tables[type_name] = pl.DataFrame(schema=columns)
        self._geometry_columns[type_name] = geometry_column
        logger.info(f"Created feature type {type_name}: {schema}")
        return True

    def write_features(self, type_name: str, features: Iterable[Feature]) -> None:
        table = self._table(type_name)
        geometry_column = self._geometry_columns[type_name]
        features = list(features)
        if not features:
            return

        rows = []
        for feature in features:
            row = {ID_COLUMN: feature.id}
            for name, value in feature.attributes().items():
                if name not in table.columns:
                    continue
                row[name] = value.wkt if name == geometry_column else value
            rows.append(row)

        incoming = pl.DataFrame(rows, schema=table.schema).unique(
            subset=[ID_COLUMN], keep="last", maintain_order=True
        )
        kept = table.filter(~pl.col(ID_COLUMN).is_in(incoming[ID_COLUMN].to_list()))
        self._tables[type_name] = pl.concat([kept, incoming], how="vertical")
        self.write_count += 1
        logger.debug(f"Wrote {incoming.height} features to {type_name}")

    def read_features(self, type_name: str, filter: FilterExpression) -> FeatureCursor:
        table = self._table(type_name)
        geometry_column = self._geometry_columns[type_name]
        if filter.attribute != geometry_column:
            raise BackendError(
                f"Filter attribute {filter.attribute!r} is not the geometry of {type_name}"
            )

        records = []
        for row in table.iter_rows(named=True):
            geometry = wkt.loads(row[geometry_column])
            if not filter.matches(geometry):
                continue
            attributes = {k: v for k, v in row.items() if k != ID_COLUMN}
            attributes[geometry_column] = geometry
            records.append(FeatureRecord(id=row[ID_COLUMN], attributes=attributes))
        return ListFeatureCursor(records)

    def count(self, type_name: str) -> int:
        return self._table(type_name).height

    def close(self) -> None:
        self._closed = True
        self._tables.clear()
        self._geometry_columns.clear()
