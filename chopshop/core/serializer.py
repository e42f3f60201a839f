"""Structural Serializer — projects a typed value into a Wire Tree under read policy.

Invariants:
    - A field with read_right appears only if the capabilities hold that right
    - Embedded records are spliced into the parent's dict, transitively
    - Name collisions resolve last-write-wins in declaration order; the key keeps
      the position where it was first written
    - None serializes to null; with omit_empty it is dropped instead
    - Records with a @model_serializer (and RootModels) are emitted atomically
    - All-or-nothing: an error anywhere aborts the whole call, no partial tree

Design Decisions:
    - Mappings are walked value by value, so records nested in dicts are filtered
      too rather than handed unfiltered to the byte encoder
    - Scalars (including datetime/UUID/Enum) pass through; encode_wire renders them
"""

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel

from chopshop.core.capabilities import Capabilities, granted
from chopshop.core.emptiness import is_empty
from chopshop.core.errors import TypeSystemError
from chopshop.core.field_policy import describe
from chopshop.core.leaves import has_custom_encoding

_SEQUENCE_TYPES = (list, tuple, set, frozenset)


def serialize(value: Any, capabilities: Capabilities | None) -> Any:
    """Wire representation of ``value`` containing only readable fields."""
    if value is None:
        return None
    if isinstance(value, BaseModel):
        if has_custom_encoding(type(value)):
            return value.model_dump(mode="json")
        return _serialize_record(value, capabilities, {})
    if isinstance(value, Mapping):
        return {key: serialize(item, capabilities) for key, item in value.items()}
    if isinstance(value, _SEQUENCE_TYPES):
        return [serialize(item, capabilities) for item in value]
    return value


def _serialize_record(
    record: BaseModel, capabilities: Capabilities | None, out: dict[str, Any],
) -> dict[str, Any]:
    for d in describe(type(record)):
        if d.suppressed or not granted(capabilities, d.read_right):
            continue
        field_value = getattr(record, d.attr)
        if d.omit_empty and is_empty(field_value):
            continue
        if d.embedded:
            _splice(record, d.attr, field_value, capabilities, out)
            continue
        out[d.wire_name] = serialize(field_value, capabilities)
    return out


def _splice(
    parent: BaseModel, attr: str, embedded: Any,
    capabilities: Capabilities | None, out: dict[str, Any],
) -> None:
    if embedded is None:
        return
    if not isinstance(embedded, BaseModel):
        raise TypeSystemError(
            f"{type(parent).__name__}.{attr} is embedded but holds "
            f"{type(embedded).__name__}",
        )
    if has_custom_encoding(type(embedded)):
        encoded = embedded.model_dump(mode="json")
        if not isinstance(encoded, dict):
            raise TypeSystemError(
                f"{type(embedded).__name__} encodes to {type(encoded).__name__}, "
                "cannot be embedded",
            )
        out.update(encoded)
        return
    _serialize_record(embedded, capabilities, out)
