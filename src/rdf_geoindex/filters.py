"""
Predicate admission for geometry indexing.
"""

from typing import FrozenSet, Iterable, Optional, Union

from rdf_geoindex.terms import IRI, Literal, Statement

PredicateAllowList = FrozenSet[IRI]


def admits(predicate: IRI, allow_list: Iterable[IRI]) -> bool:
    """True if the allow-list is empty or contains the predicate."""
    allow_list = allow_list if isinstance(allow_list, (set, frozenset)) else frozenset(allow_list)
    return not allow_list or predicate in allow_list


class PredicateFilter:
    """
    Decides which statements are eligible for the geo index.

    A statement is indexable when its predicate is admitted by the allow-list
    and its object is a literal. Resource-valued objects are never indexed.

    Example:
        f = PredicateFilter({GEO_AS_WKT})
        f.admits(GEO_AS_WKT)       # True
        f.is_indexable(statement)  # also requires a literal object
    """

    def __init__(self, allow_list: Optional[Iterable[Union[IRI, str]]] = None):
        self._allowed: PredicateAllowList = frozenset(
            p if isinstance(p, IRI) else IRI(p) for p in (allow_list or ())
        )

    @property
    def allowed_predicates(self) -> PredicateAllowList:
        return self._allowed

    def admits(self, predicate: IRI) -> bool:
        return admits(predicate, self._allowed)

    def is_indexable(self, statement: Statement) -> bool:
        return self.admits(statement.predicate) and isinstance(statement.object, Literal)
