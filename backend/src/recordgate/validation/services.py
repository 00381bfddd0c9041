"""Schema validation and sanitization for collection records."""

import re
from typing import Any

from recordgate.core.types import get_property_type, matches_exactly
from recordgate.validation.types import ErrorMap, PropertySchema, Record

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def _exists(value: Any) -> bool:
    return value is not None


def _parse_int(value: str) -> int | None:
    """Parse the leading integer of a string, or None if there is none."""
    match = _LEADING_INT.match(value)
    if not match:
        return None
    return int(match.group(1))


def validate(record: Record, schema: PropertySchema) -> ErrorMap | None:
    """Validate a record against a property schema.

    Every declared property that has a value must satisfy its type; a
    missing value is an error only for required properties. Fields not in
    the schema are ignored.

    Args:
        record: The incoming record
        schema: Declared properties of the collection

    Returns:
        ErrorMap in schema order, or None if the record is valid
    """
    errors = ErrorMap()

    for name, prop in schema.items():
        value = record.get(name)
        if _exists(value):
            if not get_property_type(prop.type).check(value):
                errors[name] = f"must be a {prop.type}"
        elif prop.required:
            errors[name] = "is required"

    return errors or None


def sanitize(record: Record, schema: PropertySchema, strict: bool = True) -> Record:
    """Strip a record down to the declared properties.

    A value is kept only when its run-time type exactly matches the declared
    type. The one coercion: a string for a ``number`` property is parsed
    into an integer (strings without a leading integer are dropped).

    Args:
        record: The incoming record
        schema: Declared properties of the collection
        strict: When False and the schema declares nothing, the record is
            passed through unchanged

    Returns:
        A new dict containing only declared, well-typed fields
    """
    if not strict and not schema:
        return dict(record)

    sanitized: Record = {}

    for name, prop in schema.items():
        if name not in record:
            continue
        value = record[name]

        if matches_exactly(value, prop.type):
            sanitized[name] = value
        elif prop.type == "number" and isinstance(value, str):
            parsed = _parse_int(value)
            if parsed is not None:
                sanitized[name] = parsed

    return sanitized
