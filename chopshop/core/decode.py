"""Two-Phase Decode — unfiltered decode into a scratch record, then a policy merge.

Invariants:
    - Phase 1 decodes the whole body with ordinary pydantic rules into a fresh
      instance of type(target); any failure raises before target is touched
    - Phase 2 is merge(): the only place write rights are enforced
    - The scratch record belongs to one call and is dropped afterwards

Design Decisions:
    - Decode grammar and authorization stay separate passes: untrusted input may
      populate any field of the throwaway value, merge decides what survives
    - Custom leaf validators run during phase 1, so their failures surface as
      MalformedWireInputError with the leaf's own message in the details
"""

import logging
from collections.abc import Mapping
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from chopshop.core.capabilities import Capabilities
from chopshop.core.errors import MalformedWireInputError, TypeSystemError
from chopshop.core.merger import merge
from chopshop.core.wire import WIRE_CONTEXT

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT", bound=BaseModel)

WireBody = bytes | bytearray | str | Mapping[str, Any]


def decode_unfiltered(record_type: type[RecordT], wire_body: WireBody) -> RecordT:
    """Decode ``wire_body`` into a new ``record_type`` with no rights applied."""
    if not (isinstance(record_type, type) and issubclass(record_type, BaseModel)):
        raise TypeSystemError(f"{record_type!r} is not a record type")
    try:
        if isinstance(wire_body, (bytes, bytearray, str)):
            return record_type.model_validate_json(wire_body, context=WIRE_CONTEXT)
        return record_type.model_validate(dict(wire_body), context=WIRE_CONTEXT)
    except ValidationError as exc:
        logger.debug(
            f"Rejected {record_type.__name__} payload: {exc.error_count()} error(s)",
            extra={"record_type": record_type.__name__},
        )
        raise MalformedWireInputError.from_validation_error(
            record_type.__name__, exc,
        ) from exc


def read_into(target: BaseModel, wire_body: WireBody, capabilities: Capabilities | None) -> None:
    """Set the fields of ``target`` the capabilities may write from ``wire_body``."""
    if not isinstance(target, BaseModel):
        raise TypeSystemError(f"read target {type(target).__name__} is not a record")
    scratch = decode_unfiltered(type(target), wire_body)
    merge(scratch, target, capabilities)
