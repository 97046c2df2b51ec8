"""
Exceptions raised by the geo index.

Predicate rejection is not an error; it is reported as a ``Rejected``
mapping result (see ``rdf_geoindex.features``).
"""


class GeoIndexError(Exception):
    """Base class for geo index errors."""
    pass


class SerializationError(GeoIndexError):
    """Raised when a statement string or attribute cannot be decoded."""
    pass


class GeometryParseError(GeoIndexError):
    """Raised when a statement does not carry a parseable WKT literal."""
    pass


class QueryTranslationError(GeoIndexError):
    """Raised when a query cannot be turned into a filter expression."""
    pass


class BackendError(GeoIndexError):
    """
    Raised when the storage backend fails.

    ``feature_ids`` lists the features a failed write covered.
    """

    def __init__(self, message: str, feature_ids=None):
        super().__init__(message)
        self.feature_ids = list(feature_ids or [])


class ResultError(GeoIndexError):
    """Base class for result sequence misuse."""
    pass


class ResultClosedError(ResultError):
    """Raised when a result sequence is used after close."""
    pass


class NoSuchElementError(ResultError):
    """Raised when next() is called on an exhausted result sequence."""
    pass


class IndexerClosedError(GeoIndexError):
    """Raised when a closed indexer is used."""
    pass


class ConfigValidationError(GeoIndexError):
    """Configuration validation error."""
    pass
