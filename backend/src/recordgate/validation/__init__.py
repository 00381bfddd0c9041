"""RecordGate schema engine.

Validates and sanitizes records against a collection's declared properties.

Usage:
    from recordgate.validation import PropertySchema, sanitize, validate

    schema = PropertySchema.from_dict({"title": {"type": "string", "required": True}})
    record = sanitize(body, schema)
    errors = validate(record, schema)
"""

from recordgate.validation.services import sanitize, validate
from recordgate.validation.types import (
    IDENTITY_FIELD,
    ErrorMap,
    PropertyDefinition,
    PropertySchema,
    Query,
    Record,
)

__all__ = [
    "IDENTITY_FIELD",
    "ErrorMap",
    "PropertyDefinition",
    "PropertySchema",
    "Query",
    "Record",
    "sanitize",
    "validate",
]
