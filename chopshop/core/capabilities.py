"""Capability Set — the authenticated principal and the rights it holds.

Invariants:
    - No principal is represented as absence (principal is None), never as an
      empty principal; every right check against no principal is False
    - has_right is exact string match; duplicate grants are harmless
    - add_right never deduplicates; remove_right drops every exact match
    - remove_right on an unauthenticated set is a no-op, add_right is an error

Design Decisions:
    - Principal is a pydantic model: the session token collaborator validates
      the decoded claim with it, so a malformed claim fails in one place
    - Capabilities wraps Principal | None instead of subclassing it: the codec
      only needs the membership test, the shell needs identity accessors
"""

from pydantic import BaseModel, Field

from chopshop.core.errors import NotAuthenticatedError

USER_ID_MAX = 2**64 - 1


class Principal(BaseModel):
    """Authenticated identity, as carried in the session token."""
    username: str
    user_id: int = Field(ge=0, le=USER_ID_MAX)
    rights: list[str] = Field(default_factory=list)


class Capabilities:
    """Rights available to one request."""

    def __init__(self, principal: Principal | None = None):
        self.principal = principal

    @classmethod
    def anonymous(cls) -> "Capabilities":
        return cls(None)

    @classmethod
    def for_principal(
        cls, username: str, user_id: int, rights: list[str] | None = None,
    ) -> "Capabilities":
        return cls(Principal(username=username, user_id=user_id, rights=list(rights or [])))

    def is_authenticated(self) -> bool:
        return self.principal is not None

    def has_right(self, right: str) -> bool:
        if self.principal is None:
            return False
        return right in self.principal.rights

    def add_right(self, right: str) -> None:
        """Endow the session with ``right``. Requires a principal."""
        if self.principal is None:
            raise NotAuthenticatedError(f"add right '{right}'")
        self.principal.rights.append(right)

    def remove_right(self, right: str) -> None:
        if self.principal is None:
            return
        self.principal.rights = [r for r in self.principal.rights if r != right]

    def username(self) -> str:
        return self.principal.username if self.principal else ""

    def user_id(self) -> int:
        return self.principal.user_id if self.principal else 0

    def rights(self) -> list[str]:
        return list(self.principal.rights) if self.principal else []

    def __repr__(self) -> str:
        if self.principal is None:
            return "Capabilities(anonymous)"
        return f"Capabilities({self.principal.username!r}, rights={self.principal.rights!r})"


def granted(capabilities: Capabilities | None, right: str | None) -> bool:
    """Policy check shared by serializer and merger. No requirement always passes."""
    if right is None:
        return True
    return capabilities is not None and capabilities.has_right(right)
