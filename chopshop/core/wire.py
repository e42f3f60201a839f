"""Wire Format — byte-level JSON encoding and the decode context marker.

Invariants:
    - encode_wire accepts any serialize() output, including datetimes, UUIDs,
      enums and decimals passed through as scalars
    - WIRE_CONTEXT marks a validation as coming from untrusted wire input
"""

from typing import Any

from pydantic_core import to_json

WIRE_FLAG = "chopshop_wire"
WIRE_CONTEXT: dict[str, bool] = {WIRE_FLAG: True}


def encode_wire(tree: Any) -> bytes:
    """Render a Wire Tree as compact UTF-8 JSON."""
    return to_json(tree)


def is_wire_context(context: Any) -> bool:
    return isinstance(context, dict) and bool(context.get(WIRE_FLAG))
