"""Structural Merger — copies write-permitted fields from a scratch record to a target.

Invariants:
    - A field with write_right is never touched unless the capabilities hold it,
      however deeply it is nested
    - Permitted fields are overwritten with the scratch value, even when that value
      is just the default the decoder filled in (select-and-copy, not patch)
    - Record fields (bare or `X | None`) are merged recursively so nested records
      can carry their own per-field write rights
    - An optional record is created or cleared only by a caller holding every
      write right reachable inside it; otherwise the target keeps its value
    - Records owning their decoding (model validators, frozen, RootModel) are
      copied wholesale

Design Decisions:
    - Recursion is decided from the declared annotation (FieldDescriptor), not the
      runtime value: a None or foreign value where a bare record is declared is a
      type-system error, not a silent overwrite
    - Creating a nested record from scratch would set its gated fields from the
      body, and clearing one would drop them; both count as writing them
"""

from pydantic import BaseModel

from chopshop.core.capabilities import Capabilities, granted
from chopshop.core.errors import TypeSystemError
from chopshop.core.field_policy import FieldDescriptor, describe


def merge(scratch: BaseModel, target: BaseModel, capabilities: Capabilities | None) -> None:
    """Apply ``scratch`` onto ``target`` field by field under write policy."""
    if not isinstance(target, BaseModel):
        raise TypeSystemError(f"merge target {type(target).__name__} is not a record")
    if type(scratch) is not type(target):
        raise TypeSystemError(
            f"cannot merge {type(scratch).__name__} into {type(target).__name__}",
        )

    for d in describe(type(target)):
        if not granted(capabilities, d.write_right):
            continue
        incoming = getattr(scratch, d.attr)
        if not d.recursible:
            setattr(target, d.attr, incoming)
            continue
        current = getattr(target, d.attr)
        if d.optional and (incoming is None or current is None):
            _replace_optional(target, d, incoming, current, capabilities)
        else:
            merge(incoming, current, capabilities)


def _replace_optional(
    target: BaseModel,
    d: FieldDescriptor,
    incoming: BaseModel | None,
    current: BaseModel | None,
    capabilities: Capabilities | None,
) -> None:
    if incoming is None and current is None:
        return
    if all(granted(capabilities, right) for right in write_rights(d.record_type)):
        setattr(target, d.attr, incoming)


def write_rights(record_type: type[BaseModel]) -> frozenset[str]:
    """Every write right declared in ``record_type`` or the records it walks into."""
    return _collect_write_rights(record_type, frozenset())


def _collect_write_rights(
    record_type: type[BaseModel], seen: frozenset[type],
) -> frozenset[str]:
    if record_type in seen:
        return frozenset()
    seen = seen | {record_type}
    rights: set[str] = set()
    for d in describe(record_type):
        if d.write_right:
            rights.add(d.write_right)
        if d.recursible:
            rights |= _collect_write_rights(d.record_type, seen)
    return frozenset(rights)
