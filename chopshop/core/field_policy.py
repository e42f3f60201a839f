"""Field Policy Resolver — per-field wire name, omit policy and read/write rights.

Invariants:
    - describe() runs once per record type; the result is an immutable tuple
    - Descriptors follow model_fields order (inherited fields first, then declared)
    - Field(exclude=True) suppresses a field on the wire; merge still visits it
    - Wire name: serialization_alias > alias > attribute name, i.e. exactly what
      pydantic itself reads and writes (Record installs to_snake as its
      alias generator, so Record fields default to snake_case)
    - `X | None` fields of a record type X are described with record_type=X and
      optional=True, so merge still walks them
    - An embedded field must be declared with a record type

Design Decisions:
    - Annotated[T, FieldPolicy(...)] over json_schema_extra dicts: the policy is a
      typed object pydantic carries in FieldInfo.metadata untouched
    - lru_cache keyed by the class: compute-once/read-many, and a concurrent first
      call only builds the same immutable tuple twice
    - Names are taken from the resolved FieldInfo rather than recomputed, so a
      plain BaseModel walked by the serializer decodes from the names it emits
"""

import types
from dataclasses import dataclass
from functools import lru_cache
from typing import Union, get_args, get_origin

from pydantic import BaseModel
from pydantic.fields import FieldInfo

from chopshop.core.errors import TypeSystemError
from chopshop.core.leaves import has_custom_decoding, is_record_class


@dataclass(frozen=True)
class FieldPolicy:
    """Declarative per-field policy, attached with ``typing.Annotated``."""
    read_right: str | None = None
    write_right: str | None = None
    omit_empty: bool = False
    embedded: bool = False


@dataclass(frozen=True)
class FieldDescriptor:
    """Resolved, cached policy for one field of one record type."""
    attr: str
    wire_name: str | None          # None when suppressed
    input_key: str                 # key the wire decoder reads this field from
    omit_empty: bool
    read_right: str | None
    write_right: str | None
    embedded: bool
    record_type: type[BaseModel] | None   # declared record type, unwrapped from X | None
    atomic: bool                   # record type that owns its own decoding
    optional: bool = False         # declared as X | None

    @property
    def suppressed(self) -> bool:
        return self.wire_name is None

    @property
    def recursible(self) -> bool:
        """Merge walks into this field instead of copying it wholesale."""
        return self.record_type is not None and not self.atomic


@lru_cache(maxsize=None)
def describe(record_type: type) -> tuple[FieldDescriptor, ...]:
    """Field Descriptor table for ``record_type`` in declaration order."""
    if not (isinstance(record_type, type) and issubclass(record_type, BaseModel)):
        raise TypeSystemError(f"{record_type!r} is not a record type")

    descriptors = []
    for attr, info in record_type.model_fields.items():
        policy = _policy_of(info)
        declared = info.annotation
        record, optional = _record_of(declared)
        if policy.embedded and (record is None or optional):
            raise TypeSystemError(
                f"{record_type.__name__}.{attr} is embedded but {declared!r} "
                "is not a record type",
            )
        descriptors.append(FieldDescriptor(
            attr=attr,
            wire_name=None if info.exclude is True else _wire_name(record_type, attr, info),
            input_key=_input_key(record_type, attr, info),
            omit_empty=policy.omit_empty,
            read_right=policy.read_right or None,
            write_right=policy.write_right or None,
            embedded=policy.embedded,
            record_type=record,
            atomic=record is not None and has_custom_decoding(record),
            optional=optional,
        ))
    return tuple(descriptors)


def _policy_of(info: FieldInfo) -> FieldPolicy:
    policies = [m for m in info.metadata if isinstance(m, FieldPolicy)]
    # last one wins, mirroring how pydantic folds repeated Field() metadata
    return policies[-1] if policies else FieldPolicy()


def _record_of(declared) -> tuple[type[BaseModel] | None, bool]:
    """Record type behind a bare or `X | None` annotation, and whether it is optional."""
    if is_record_class(declared):
        return declared, False
    if get_origin(declared) in (Union, types.UnionType):
        members = [a for a in get_args(declared) if a is not type(None)]
        if len(members) == 1 and len(get_args(declared)) == 2 and is_record_class(members[0]):
            return members[0], True
    return None, False


def _generated_alias(record_type: type[BaseModel], attr: str) -> str | None:
    # pydantic may fill FieldInfo.alias lazily; the config is authoritative
    generator = record_type.model_config.get("alias_generator")
    return generator(attr) if callable(generator) else None


def _wire_name(record_type: type[BaseModel], attr: str, info: FieldInfo) -> str:
    return (
        info.serialization_alias or info.alias
        or _generated_alias(record_type, attr) or attr
    )


def _input_key(record_type: type[BaseModel], attr: str, info: FieldInfo) -> str:
    if isinstance(info.validation_alias, str):
        return info.validation_alias
    return info.alias or _generated_alias(record_type, attr) or attr
