"""Property type registry with type predicates used by the schema engine."""

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Callable


def _is_number(value: Any) -> bool:
    # bool is a subclass of int but never a number here
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_date(value: Any) -> bool:
    if isinstance(value, (date, datetime)):
        return True
    if not isinstance(value, str):
        return False
    try:
        datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return False
    return True


@dataclass(frozen=True)
class PropertyType:
    """A declarable property type.

    Attributes:
        name: Type name as written in resource configuration
        runtime_types: Exact Python types sanitize keeps for this property
        check: Predicate validate applies to supplied values
    """

    name: str
    runtime_types: tuple[type, ...]
    check: Callable[[Any], bool]


PROPERTY_TYPES: dict[str, PropertyType] = {
    "string": PropertyType(
        name="string",
        runtime_types=(str,),
        check=lambda v: isinstance(v, str),
    ),
    "number": PropertyType(
        name="number",
        runtime_types=(int, float),
        check=_is_number,
    ),
    "boolean": PropertyType(
        name="boolean",
        runtime_types=(bool,),
        check=lambda v: isinstance(v, bool),
    ),
    "date": PropertyType(
        name="date",
        runtime_types=(str, date, datetime),
        check=_is_date,
    ),
    "object": PropertyType(
        name="object",
        runtime_types=(dict,),
        check=lambda v: isinstance(v, dict),
    ),
    "array": PropertyType(
        name="array",
        runtime_types=(list, tuple),
        check=lambda v: isinstance(v, (list, tuple)),
    ),
}

DEFAULT_PROPERTY_TYPE = "string"


def get_property_type(type_name: str | None) -> PropertyType:
    """Get a property type by name.

    Raises:
        ValueError: If the type is not one of the supported property types
    """
    name = type_name or DEFAULT_PROPERTY_TYPE
    if name not in PROPERTY_TYPES:
        raise ValueError(
            f"Unknown property type '{name}'. "
            f"Expected one of: {', '.join(PROPERTY_TYPES)}"
        )
    return PROPERTY_TYPES[name]


def matches_exactly(value: Any, type_name: str) -> bool:
    """True if the run-time type of ``value`` is exactly one the property keeps."""
    return type(value) in get_property_type(type_name).runtime_types
