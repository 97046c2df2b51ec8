"""
Statement Codec.

Serializes statements to and from flat strings.

Wire form (one string per statement):
    context NUL subject NUL predicate NUL object

An absent context is an empty leading field, so the string starts with NUL.
Resources are written as the IRI text or ``_:id``; literals as
``"label"``, ``"label"@lang`` or ``"label"^^<datatype>``.

The same per-field rules are used when the four components are stored as
separate feature attributes.
"""

import base64
import hashlib
from typing import Optional

from rdf_geoindex.errors import SerializationError
from rdf_geoindex.terms import IRI, BNode, Literal, Resource, Statement, Value

SEP = "\x00"
BNODE_PREFIX = "_:"


# =============================================================================
# Writing
# =============================================================================

def write_subject(statement: Statement) -> str:
    return str(statement.subject)


def write_predicate(statement: Statement) -> str:
    return str(statement.predicate)


def write_object(statement: Statement) -> str:
    return str(statement.object)


def write_context(statement: Statement) -> str:
    if statement.context is None:
        return ""
    return str(statement.context)


def write_statement(statement: Statement) -> str:
    """
    Write a statement to its wire string.

    Args:
        statement: The statement to write

    Returns:
        The four fields joined with NUL, context first
    """
    return SEP.join((
        write_context(statement),
        write_subject(statement),
        write_predicate(statement),
        write_object(statement),
    ))


# =============================================================================
# Reading
# =============================================================================

def read_statement(text: str) -> Statement:
    """
    Read a statement from its wire string.

    Raises:
        SerializationError: if the string does not hold exactly four fields
            or a field cannot be decoded
    """
    parts = text.split(SEP)
    if len(parts) != 4:
        raise SerializationError(f"Not a valid statement: {text!r}")

    context, subject, predicate, obj = parts
    return read_statement_fields(subject, predicate, obj, context)


def read_statement_fields(
    subject: str,
    predicate: str,
    obj: str,
    context: Optional[str] = "",
) -> Statement:
    """Build a statement from four separately stored fields."""
    if not subject:
        raise SerializationError("Empty subject field")
    if not predicate:
        raise SerializationError("Empty predicate field")
    if not obj:
        raise SerializationError("Empty object field")

    return Statement(
        subject=read_resource(subject),
        predicate=IRI(predicate),
        object=read_value(obj),
        context=IRI(context) if context else None,
    )


def read_resource(text: str) -> Resource:
    if text.startswith(BNODE_PREFIX):
        return BNode(text[len(BNODE_PREFIX):])
    return IRI(text)


def read_value(text: str) -> Value:
    if text.startswith('"'):
        return read_literal(text)
    return read_resource(text)


def read_literal(text: str) -> Literal:
    """
    Parse ``"label"``, ``"label"@lang`` or ``"label"^^<datatype>``.

    The label runs up to the last double quote in the field.
    """
    label_end = text.rfind('"')
    if label_end <= 0:
        raise SerializationError(f"Unterminated literal: {text!r}")

    label = text[1:label_end]
    suffix = text[label_end + 1:]

    if not suffix:
        return Literal(label)

    if suffix.startswith("@"):
        language = suffix[1:]
        if not language:
            raise SerializationError(f"Empty language tag: {text!r}")
        return Literal(label, language=language)

    if suffix.startswith("^^<") and suffix.endswith(">") and len(suffix) > 4:
        return Literal(label, datatype=IRI(suffix[3:-1]))

    raise SerializationError(f"Malformed literal suffix {suffix!r} in {text!r}")


# =============================================================================
# Identity
# =============================================================================

def content_hash(text: str) -> str:
    """
    URL-safe base64 of the MD5 digest of ``text``.

    MD5 is 16 bytes (32 hex chars); base64 without padding keeps it
    printable in 22 chars.
    """
    digest = hashlib.md5(text.encode("utf-8")).digest()
    return base64.urlsafe_b64encode(digest).rstrip(b"=").decode("ascii")


def statement_id(statement: Statement) -> str:
    """Stable feature id for a statement."""
    return content_hash(write_statement(statement))
