"""Profiles — a rights-scoped resource served through the codec.

Invariants:
    - GET serializes the stored Profile through the caller's read rights
    - PUT decodes the body into a scratch Profile, then merges only write-permitted
      fields into the stored one; a malformed body leaves it untouched (400)
    - PUT stamps audit.updated_by / updated_at server-side after the merge
    - DELETE requires profiles:admin
    - PUT needs only a session with a matching XSRF token, anonymous included:
      ungated fields of any profile are writable by any session, gated ones
      follow the caller's rights
    - Unknown profile id → 404 ResourceNotFoundError

Design Decisions:
    - _profiles as module-level dict: single-process demo store
      (ADR: state lost on restart, acceptable; persistence is not the codec's concern)
"""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Response, status

from chopshop.api.context import RequestContext, get_request_context
from chopshop.api.guards import require_right, require_xsrf
from chopshop.core.errors import ResourceNotFoundError
from chopshop.schemas.profile import ADMIN, Profile

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/profiles", tags=["profiles"])

_profiles: dict[int, Profile] = {}


def get_profile_or_404(profile_id: int) -> Profile:
    profile = _profiles.get(profile_id)
    if profile is None:
        raise ResourceNotFoundError("Profile", str(profile_id))
    return profile


@router.get("/{profile_id}")
async def read_profile(profile_id: int, ctx: RequestContext = Depends(get_request_context)):
    """Profile as visible to the caller."""
    return ctx.json_response(get_profile_or_404(profile_id))


@router.put("/{profile_id}")
async def update_profile(profile_id: int, ctx: RequestContext = Depends(require_xsrf)):
    """Overwrite the fields of the profile the caller may write."""
    profile = get_profile_or_404(profile_id)
    await ctx.read_json(profile)
    profile.audit.updated_by = ctx.capabilities.username()
    profile.audit.updated_at = datetime.now(timezone.utc)
    logger.info(f"Profile {profile_id} updated", extra=ctx.log_extra())
    return ctx.json_response(profile)


@router.delete(
    "/{profile_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(require_right(ADMIN)), Depends(require_xsrf)],
)
async def delete_profile(profile_id: int, ctx: RequestContext = Depends(get_request_context)):
    get_profile_or_404(profile_id)
    del _profiles[profile_id]
    logger.info(f"Profile {profile_id} deleted", extra=ctx.log_extra())
    return Response(status_code=status.HTTP_204_NO_CONTENT)
