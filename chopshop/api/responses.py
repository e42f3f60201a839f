"""Wire Responses — JSON responses rendered by the codec's wire encoder.

Invariants:
    - WireJSONResponse renders with pydantic_core, so datetimes, UUIDs and enums
      left as scalars by serialize() encode the same way pydantic would
"""

from typing import Any

from fastapi.responses import JSONResponse

from chopshop.core.wire import encode_wire


class WireJSONResponse(JSONResponse):
    """JSONResponse whose body is produced by encode_wire."""

    def render(self, content: Any) -> bytes:
        return encode_wire(content)
