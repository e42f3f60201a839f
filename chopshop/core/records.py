"""Record Base — pydantic base model whose wire grammar matches the serializer.

Invariants:
    - Wire names come from to_snake, the same convention describe() reports
    - Embedded records read their fields from the parent's flat mapping
    - Suppressed fields (Field(exclude=True)) are ignored in wire input only;
      Python-side construction still sets them
    - The grammar hook never filters by rights: authorization is merge's job

Design Decisions:
    - One model_validator(mode="before") does the reshaping so decode stays a
      single ordinary pydantic validation pass
    - Embedded key present in the input wins over splicing: lets Python code
      (and nested wire documents) pass the embedded record explicitly
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationInfo, model_validator
from pydantic.alias_generators import to_snake

from chopshop.core.field_policy import describe
from chopshop.core.wire import is_wire_context


class Record(BaseModel):
    """Base for rights-scoped records."""

    model_config = ConfigDict(alias_generator=to_snake, populate_by_name=True)

    @model_validator(mode="before")
    @classmethod
    def apply_wire_grammar(cls, data: Any, info: ValidationInfo) -> Any:
        if not isinstance(data, dict):
            return data
        from_wire = is_wire_context(info.context)
        shaped = dict(data)
        for d in describe(cls):
            if d.suppressed:
                if from_wire:
                    shaped.pop(d.input_key, None)
                    shaped.pop(d.attr, None)
            elif d.embedded and d.input_key not in data and d.attr not in data:
                shaped[d.input_key] = data
        return shaped
