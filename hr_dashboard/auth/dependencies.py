"""Auth dependencies — actor resolution and admin enforcement.

The caller's email comes from, in order: a Bearer access token, the
``Cf-Access-Authenticated-User-Email`` header set by the access proxy, the
``X-User-Email`` header, and (development only) the ``?as=`` query
parameter used to impersonate another employee.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Optional

from fastapi import Depends, Request

from hr_dashboard.auth.service import decode_access_token, validate_domain
from hr_dashboard.common.exceptions import ForbiddenException, UnauthorizedException
from hr_dashboard.config import settings
from hr_dashboard.leave.policy import ActorContext, ApprovalPolicy, normalize_email

PROXY_EMAIL_HEADER = "Cf-Access-Authenticated-User-Email"
USER_EMAIL_HEADER = "X-User-Email"
IMPERSONATE_PARAM = "as"


@lru_cache
def get_approval_policy() -> ApprovalPolicy:
    """The policy built from ``HR_ADMIN_EMAILS``; read once per process."""
    return ApprovalPolicy(settings.hr_admin_emails_list)


def _extract_bearer(request: Request) -> Optional[str]:
    auth_header = request.headers.get("Authorization")
    if not auth_header or not auth_header.startswith("Bearer "):
        return None
    return auth_header[7:]


def _resolve_email(request: Request) -> str:
    token = _extract_bearer(request)
    if token:
        return decode_access_token(token)

    for header in (PROXY_EMAIL_HEADER, USER_EMAIL_HEADER):
        value = request.headers.get(header)
        if value and value.strip():
            return value

    if settings.ENVIRONMENT == "development":
        impersonate = request.query_params.get(IMPERSONATE_PARAM)
        if impersonate and impersonate.strip():
            return impersonate

    raise UnauthorizedException()


# ── Core dependency ─────────────────────────────────────────────────

async def get_current_actor(
    request: Request,
    policy: ApprovalPolicy = Depends(get_approval_policy),
) -> ActorContext:
    """Resolve the caller and whether they are on the admin allow-list."""
    email = normalize_email(_resolve_email(request))
    if not email:
        raise UnauthorizedException()
    validate_domain(email)
    return policy.actor_for(email)


# ── Admin dependency ────────────────────────────────────────────────

async def require_admin(
    actor: ActorContext = Depends(get_current_actor),
) -> ActorContext:
    if not actor.is_admin:
        raise ForbiddenException("HR admin access required.")
    return actor
