"""Session Records — what a caller may learn about their own session.

Invariants:
    - username and user_id are omitted for anonymous callers (omit_empty)
"""

from typing import Annotated

from chopshop.core.field_policy import FieldPolicy
from chopshop.core.records import Record


class SessionView(Record):
    authenticated: bool = False
    username: Annotated[str, FieldPolicy(omit_empty=True)] = ""
    user_id: Annotated[int, FieldPolicy(omit_empty=True)] = 0
    rights: list[str] = []
