"""Profile Records — one record type serving owner, staff and public views.

Invariants:
    - email is readable only with profiles:read_private, writable only with profiles:admin
    - id and roles are writable only with profiles:admin
    - address.verified is writable only with profiles:verify (nested write policy)
    - created_by/updated_by come from the embedded AuditStamp and appear flat on the wire
    - updated_at is a datetime scalar; the wire encoder renders it as ISO-8601
"""

from datetime import datetime
from typing import Annotated

from pydantic import Field

from chopshop.core.field_policy import FieldPolicy
from chopshop.core.records import Record

READ_PRIVATE = "profiles:read_private"
ADMIN = "profiles:admin"
VERIFY = "profiles:verify"


class AuditStamp(Record):
    """Who touched the record; embedded, so its fields sit beside the owner's."""
    created_by: Annotated[str, FieldPolicy(write_right=ADMIN)] = ""
    updated_by: Annotated[str, FieldPolicy(omit_empty=True, write_right=ADMIN)] = ""
    updated_at: Annotated[datetime | None, FieldPolicy(omit_empty=True, write_right=ADMIN)] = None


class Address(Record):
    street: str = ""
    city: str = ""
    country_code: str = Field("", max_length=2)
    verified: Annotated[bool, FieldPolicy(write_right=VERIFY)] = False


class Profile(Record):
    audit: Annotated[AuditStamp, FieldPolicy(embedded=True)] = Field(default_factory=AuditStamp)
    id: Annotated[int, FieldPolicy(write_right=ADMIN)] = 0
    display_name: str = ""
    nickname: Annotated[str, FieldPolicy(omit_empty=True)] = ""
    email: Annotated[str, FieldPolicy(read_right=READ_PRIVATE, write_right=ADMIN)] = ""
    roles: Annotated[list[str], FieldPolicy(read_right=ADMIN, write_right=ADMIN)] = Field(
        default_factory=list,
    )
    address: Address = Field(default_factory=Address)
