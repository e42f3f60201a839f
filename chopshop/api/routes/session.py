"""Session — the caller's own principal view and logout.

Invariants:
    - GET never fails for anonymous callers: authenticated=false, empty rights
    - GET re-signs the session cookies (sliding expiry)
    - DELETE drops the principal and clears both session cookies; XSRF-guarded
"""

import logging
from fastapi import APIRouter, Depends, Response, status

from chopshop.api.context import RequestContext, get_request_context
from chopshop.api.guards import require_xsrf
from chopshop.schemas.session import SessionView

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/session", tags=["session"])


@router.get("")
async def current_session(ctx: RequestContext = Depends(get_request_context)):
    """The caller's identity and granted rights."""
    view = SessionView(
        authenticated=ctx.is_authenticated(),
        username=ctx.capabilities.username(),
        user_id=ctx.capabilities.user_id(),
        rights=ctx.capabilities.rights(),
    )
    response = ctx.json_response(view)
    ctx.write_session(response)
    return response


@router.delete("", status_code=status.HTTP_204_NO_CONTENT)
async def end_session(ctx: RequestContext = Depends(require_xsrf)):
    """Log out: forget the principal and expire the cookies."""
    logger.info("Session ended", extra=ctx.log_extra())
    ctx.destroy_principal()
    response = Response(status_code=status.HTTP_204_NO_CONTENT)
    ctx.destroy_session(response)
    return response
