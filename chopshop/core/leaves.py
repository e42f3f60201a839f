"""Leaf Detection — which record types opt out of field-by-field walking.

Invariants:
    - A record with a @model_serializer owns its wire encoding: the serializer
      emits model_dump(mode="json") as one atomic value
    - A record with its own model validators, or a frozen one, owns its decoding:
      the merger copies it wholesale, never field by field
    - RootModel subclasses are leaves in both directions
    - The Record base's own wire-grammar hook does not count as custom decoding
"""

from pydantic import BaseModel, RootModel

# name of the model validator Record installs for embedding/suppression
WIRE_GRAMMAR_HOOK = "apply_wire_grammar"


def is_record_class(tp: object) -> bool:
    return isinstance(tp, type) and issubclass(tp, BaseModel)


def is_record(value: object) -> bool:
    return isinstance(value, BaseModel)


def has_custom_encoding(record_type: type[BaseModel]) -> bool:
    """True when the type renders itself instead of being walked."""
    if issubclass(record_type, RootModel):
        return True
    return bool(record_type.__pydantic_decorators__.model_serializers)


def has_custom_decoding(record_type: type[BaseModel]) -> bool:
    """True when partial-field merge could break the type's own invariants."""
    if issubclass(record_type, RootModel):
        return True
    if record_type.model_config.get("frozen"):
        return True
    validators = record_type.__pydantic_decorators__.model_validators
    return any(name != WIRE_GRAMMAR_HOOK for name in validators)
