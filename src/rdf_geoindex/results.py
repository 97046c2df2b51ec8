"""
Lazy statement sequences over backend cursors.

A ``ResultDecoder`` is single-use and forward-only:

    UNOPENED --has_next()/next()--> OPEN --close()--> CLOSED
    UNOPENED --close()------------------------------> CLOSED

The backend read is issued on the first has_next() or next(), never at
construction, and at most once. The cursor is released on close() and also
as soon as has_next() reports exhaustion. Using the decoder after close()
raises ResultClosedError.
"""

from __future__ import annotations

import logging
from enum import IntEnum, auto
from typing import Callable, Iterator, Optional

from rdf_geoindex import codec
from rdf_geoindex.backend import FeatureCursor, FeatureRecord
from rdf_geoindex.constants import (
    CONTEXT_ATTRIBUTE,
    OBJECT_ATTRIBUTE,
    PREDICATE_ATTRIBUTE,
    SUBJECT_ATTRIBUTE,
)
from rdf_geoindex.errors import (
    BackendError,
    NoSuchElementError,
    ResultClosedError,
    SerializationError,
)
from rdf_geoindex.terms import Statement

logger = logging.getLogger(__name__)


class ResultState(IntEnum):
    """Result sequence states."""
    UNOPENED = auto()  # Backend not yet queried
    OPEN = auto()      # Cursor live (or already released on exhaustion)
    CLOSED = auto()    # Closed by the caller


def decode_record(record: FeatureRecord) -> Statement:
    """Rebuild the statement stored in a feature record."""
    fields = []
    for name in (SUBJECT_ATTRIBUTE, PREDICATE_ATTRIBUTE, OBJECT_ATTRIBUTE):
        value = record.get_attribute(name)
        if value is None:
            raise SerializationError(f"Feature {record.id} is missing attribute {name}")
        fields.append(str(value))
    context = record.get_attribute(CONTEXT_ATTRIBUTE)
    return codec.read_statement_fields(*fields, context=str(context) if context else "")


class ResultDecoder:
    """
    Lazy, closeable sequence of statements decoded from backend features.

    Example:
        with indexer.query_within(area) as results:
            for statement in results:
                ...

        results = indexer.query_touches(area)
        while results.has_next():
            statement = results.next()
        results.close()
    """

    def __init__(
        self,
        open_cursor: Callable[[], FeatureCursor],
        decode: Callable[[FeatureRecord], Statement] = decode_record,
        description: str = "",
    ):
        self._open_cursor = open_cursor
        self._decode = decode
        self._cursor: Optional[FeatureCursor] = None
        self._exhausted = False
        self._ready = False
        self.description = description
        self.state = ResultState.UNOPENED
        self.returned = 0

    def _ensure_open(self) -> None:
        if self.state == ResultState.CLOSED:
            raise ResultClosedError(f"Result sequence used after close: {self.description}")
        if self.state == ResultState.UNOPENED:
            try:
                self._cursor = self._open_cursor()
            except BackendError:
                self.state = ResultState.CLOSED
                raise
            self.state = ResultState.OPEN
            logger.debug(f"Opened cursor: {self.description}")

    def _release(self) -> None:
        if self._cursor is not None:
            cursor, self._cursor = self._cursor, None
            cursor.close()
            logger.debug(f"Released cursor after {self.returned} results: {self.description}")

    def has_next(self) -> bool:
        self._ensure_open()
        if self._ready:
            return True
        if self._exhausted:
            return False
        if self._cursor.has_next():
            self._ready = True
            return True
        self._exhausted = True
        self._release()
        return False

    def next(self) -> Statement:
        if not self.has_next():
            raise NoSuchElementError(f"No more results: {self.description}")
        self._ready = False
        record = self._cursor.next()
        statement = self._decode(record)
        self.returned += 1
        return statement

    def close(self) -> None:
        """Release the cursor. Safe to call in any state and more than once."""
        if self.state == ResultState.CLOSED:
            return
        self.state = ResultState.CLOSED
        self._release()

    @property
    def closed(self) -> bool:
        return self.state == ResultState.CLOSED

    def __iter__(self) -> Iterator[Statement]:
        return self

    def __next__(self) -> Statement:
        if not self.has_next():
            raise StopIteration
        return self.next()

    def __enter__(self) -> "ResultDecoder":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"ResultDecoder({self.description!r}, state={self.state.name})"
