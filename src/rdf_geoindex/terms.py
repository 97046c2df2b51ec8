"""
RDF Term Model.

Value types for the statements handled by the geo index:
- IRI: a named resource
- BNode: an anonymous resource, identified only within its dataset
- Literal: a lexical value with an optional datatype or language tag
- Statement: subject, predicate, object and an optional named-graph context

Every term renders its wire form through ``str()``. Construction goes through
plain functions (``iri``, ``bnode``, ``literal``); there is no shared factory
object, so nothing here holds mutable state.
"""

from dataclasses import dataclass
from typing import Optional, Union


# =============================================================================
# Terms
# =============================================================================

@dataclass(frozen=True, slots=True)
class IRI:
    """An IRI reference."""
    value: str

    def __post_init__(self):
        if not self.value:
            raise ValueError("IRI cannot be empty")

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class BNode:
    """A blank node. ``id`` excludes the ``_:`` prefix."""
    id: str

    def __str__(self) -> str:
        return f"_:{self.id}"


@dataclass(frozen=True, slots=True)
class Literal:
    """
    An RDF literal.

    Attributes:
        label: Lexical form
        datatype: Datatype IRI (typed literals)
        language: Language tag (language-tagged literals)

    A literal carries a datatype or a language tag, never both.
    """
    label: str
    datatype: Optional[IRI] = None
    language: Optional[str] = None

    def __post_init__(self):
        if self.datatype is not None and self.language is not None:
            raise ValueError("A literal cannot have both a datatype and a language tag")

    def __str__(self) -> str:
        quoted = f'"{self.label}"'
        if self.language is not None:
            return f"{quoted}@{self.language}"
        if self.datatype is not None:
            return f"{quoted}^^<{self.datatype}>"
        return quoted


Resource = Union[IRI, BNode]
Value = Union[IRI, BNode, Literal]


# =============================================================================
# Statements
# =============================================================================

@dataclass(frozen=True, slots=True)
class Statement:
    """A subject-predicate-object triple, optionally scoped to a named graph."""
    subject: Resource
    predicate: IRI
    object: Value
    context: Optional[IRI] = None

    def __post_init__(self):
        if not isinstance(self.subject, (IRI, BNode)):
            raise TypeError(f"Statement subject must be an IRI or blank node, got {self.subject!r}")
        if not isinstance(self.predicate, IRI):
            raise TypeError(f"Statement predicate must be an IRI, got {self.predicate!r}")
        if not isinstance(self.object, (IRI, BNode, Literal)):
            raise TypeError(f"Statement object must be an RDF term, got {self.object!r}")
        if self.context is not None and not isinstance(self.context, IRI):
            raise TypeError(f"Statement context must be an IRI, got {self.context!r}")

    @property
    def has_literal_object(self) -> bool:
        return isinstance(self.object, Literal)

    def __str__(self) -> str:
        if self.context is None:
            return f"({self.subject}, {self.predicate}, {self.object})"
        return f"({self.subject}, {self.predicate}, {self.object}) [{self.context}]"


# =============================================================================
# Constructors
# =============================================================================

def iri(value: str) -> IRI:
    """Create an IRI term."""
    return IRI(value)


def bnode(id: str) -> BNode:
    """Create a blank node term."""
    return BNode(id)


def literal(
    label: str,
    datatype: Optional[Union[IRI, str]] = None,
    language: Optional[str] = None,
) -> Literal:
    """Create a literal term. A string datatype is promoted to an IRI."""
    if isinstance(datatype, str):
        datatype = IRI(datatype)
    return Literal(label, datatype=datatype, language=language)
