"""Core types for the RecordGate schema engine.

- PropertyDefinition: one declared field (type + required flag)
- PropertySchema: the immutable, ordered set of declared fields of a resource
- ErrorMap: field-keyed failures returned in place of a result
"""

from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any

from recordgate.core.types import DEFAULT_PROPERTY_TYPE, get_property_type

Record = dict[str, Any]
Query = dict[str, Any]

IDENTITY_FIELD = "_id"


class ErrorMap(dict[str, str | bool]):
    """Field name -> message, or True as a generic failure marker.

    A plain dict subclass so callers can tell a returned ErrorMap apart
    from a returned record.
    """


@dataclass(frozen=True)
class PropertyDefinition:
    """A declared property of a collection.

    Attributes:
        name: Field name
        type: One of string, number, boolean, date, object, array
        required: Whether a value must be supplied on every write
    """

    name: str
    type: str = DEFAULT_PROPERTY_TYPE
    required: bool = False

    def __post_init__(self) -> None:
        # Fail at configuration time, not per request
        get_property_type(self.type)

    @classmethod
    def from_dict(cls, name: str, data: dict[str, Any] | None) -> "PropertyDefinition":
        """Create a PropertyDefinition from YAML/JSON dict."""
        data = data or {}
        return cls(
            name=name,
            type=data.get("type") or DEFAULT_PROPERTY_TYPE,
            required=bool(data.get("required", False)),
        )

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type, "required": self.required}


class PropertySchema(Mapping[str, PropertyDefinition]):
    """Ordered, read-only mapping of field name to PropertyDefinition.

    Iteration order is declaration order; validation reports errors in
    that order.
    """

    def __init__(self, properties: list[PropertyDefinition] | None = None):
        self._properties = MappingProxyType(
            {prop.name: prop for prop in properties or []}
        )

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> "PropertySchema":
        """Create a schema from ``{name: {type, required}}``."""
        return cls(
            [PropertyDefinition.from_dict(name, value) for name, value in (data or {}).items()]
        )

    def __getitem__(self, name: str) -> PropertyDefinition:
        return self._properties[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._properties)

    def __len__(self) -> int:
        return len(self._properties)

    def __repr__(self) -> str:
        return f"PropertySchema({list(self._properties.values())!r})"

    def to_dict(self) -> dict[str, dict[str, Any]]:
        return {name: prop.to_dict() for name, prop in self._properties.items()}
