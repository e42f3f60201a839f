"""Request Context — per-request principal, session claims and codec entry points.

Invariants:
    - Resolved once per request (FastAPI dependency cache) and stored on
      request.state so error handlers can consult the caller's rights
    - An unusable token yields a fresh anonymous session; a verified token with a
      malformed principal raises InvalidSessionTokenError (400)
    - read_json never mutates the target if the body fails to decode
    - Error text is only shown verbatim to callers holding the see-errors right

Design Decisions:
    - Capabilities wraps the principal decoded from the token: routes and the codec
      share the same object, so add_right/remove_right are visible to later calls
    - Session cookies are written explicitly by the route (write_session) rather
      than by middleware: most endpoints never touch the session
"""

import logging
from typing import Any, TypeVar

from fastapi import Depends, Request, Response
from pydantic import BaseModel

from chopshop.api.responses import WireJSONResponse
from chopshop.config import Settings, get_settings
from chopshop.core.capabilities import Capabilities, Principal
from chopshop.core.decode import decode_unfiltered, read_into
from chopshop.core.serializer import serialize
from chopshop.infrastructure.session_token import (
    PRINCIPAL_CLAIM, VARS_CLAIM, SessionTokenCodec, principal_from_claims,
)

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT", bound=BaseModel)

STATE_KEY = "chopshop_context"


class RequestContext:
    """Everything a handler needs to know about the caller."""

    def __init__(
        self,
        request: Request,
        capabilities: Capabilities,
        claims: dict[str, Any],
        settings: Settings,
        token_codec: SessionTokenCodec,
    ):
        self.request = request
        self.capabilities = capabilities
        self.claims = claims
        self.settings = settings
        self.token_codec = token_codec

    # ─── Identity ────────────────────────────────────────────────

    def is_authenticated(self) -> bool:
        return self.capabilities.is_authenticated()

    def has_right(self, right: str) -> bool:
        return self.capabilities.has_right(right)

    def set_principal(self, username: str, user_id: int, rights: list[str] | None = None):
        self.capabilities.principal = Principal(
            username=username, user_id=user_id, rights=list(rights or []),
        )

    def destroy_principal(self):
        self.capabilities.principal = None

    @property
    def session_id(self) -> str:
        return str(self.claims.get("jti") or "")

    @property
    def xsrf_token(self) -> str:
        return self.session_id

    # ─── Session variables ───────────────────────────────────────

    def _vars(self) -> dict[str, Any]:
        return self.claims.setdefault(VARS_CLAIM, {})

    def get_session(self, key: str, default: Any = None) -> Any:
        return self._vars().get(key, default)

    def has_session(self, key: str) -> bool:
        return key in self._vars()

    def put_session(self, key: str, value: Any):
        self._vars()[key] = value

    def delete_session(self, key: str):
        self._vars().pop(key, None)

    # ─── Codec ───────────────────────────────────────────────────

    async def read_json(self, target: BaseModel) -> None:
        """Apply the request body to ``target`` under the caller's write rights."""
        body = await self.request.body()
        read_into(target, body, self.capabilities)

    async def read_json_unsafe(self, record_type: type[RecordT]) -> RecordT:
        """Decode the request body with no rights applied. Trusted callers only."""
        body = await self.request.body()
        return decode_unfiltered(record_type, body)

    def json_response(self, value: Any, status_code: int = 200) -> WireJSONResponse:
        """Response containing only the fields the caller may read."""
        return WireJSONResponse(
            content=serialize(value, self.capabilities), status_code=status_code,
        )

    def custom_error_message(self, exc: BaseException | None, friendly: str) -> str:
        if exc is None or not self.has_right(self.settings.see_errors_right):
            return friendly
        return str(exc)

    def log_extra(self) -> dict[str, Any]:
        return {
            "session_id": self.session_id,
            "username": self.capabilities.username(),
            "user_id": self.capabilities.user_id(),
            "path": self.request.url.path,
        }

    # ─── Cookies ─────────────────────────────────────────────────

    def write_session(self, response: Response):
        """Sign the current claims and principal into the session cookies."""
        principal = self.capabilities.principal
        self.claims[PRINCIPAL_CLAIM] = principal.model_dump() if principal else None
        token = self.token_codec.issue(self.claims)
        max_age = self.settings.session_duration_seconds
        response.set_cookie(
            self.settings.token_cookie_name, token, max_age=max_age,
            domain=self.settings.cookie_domain, path="/",
            secure=self.settings.https_only_cookies, httponly=True,
        )
        response.set_cookie(
            self.settings.xsrf_cookie_name, self.xsrf_token, max_age=max_age,
            domain=self.settings.cookie_domain, path="/",
            secure=self.settings.https_only_cookies, httponly=False,
        )

    def destroy_session(self, response: Response):
        destroy_session_cookies(response, self.settings)


def destroy_session_cookies(response: Response, settings: Settings):
    for name in (settings.token_cookie_name, settings.xsrf_cookie_name):
        response.delete_cookie(name, domain=settings.cookie_domain, path="/")


def get_token_codec(settings: Settings = Depends(get_settings)) -> SessionTokenCodec:
    return SessionTokenCodec.from_settings(settings)


async def get_request_context(
    request: Request,
    settings: Settings = Depends(get_settings),
    token_codec: SessionTokenCodec = Depends(get_token_codec),
) -> RequestContext:
    """Resolve the caller's principal from the session cookie."""
    claims = token_codec.decode(request.cookies.get(settings.token_cookie_name))
    if claims is None:
        claims = token_codec.new_claims()
    principal = principal_from_claims(claims)
    ctx = RequestContext(request, Capabilities(principal), claims, settings, token_codec)
    setattr(request.state, STATE_KEY, ctx)
    return ctx


def context_of(request: Request) -> RequestContext | None:
    """Context resolved earlier in this request, if any."""
    return getattr(request.state, STATE_KEY, None)
