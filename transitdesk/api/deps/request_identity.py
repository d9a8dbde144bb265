from __future__ import annotations

import logging

from fastapi import Depends, Request

from transitdesk.core.config import settings
from transitdesk.core.errors import FORBIDDEN, ServiceFailure
from transitdesk.schemas.request_identity import RequestIdentity

logger = logging.getLogger(__name__)

DEFAULT_ACTOR = "system@local"


def _role_names_from_header(raw: str | None) -> list[str]:
    roles: list[str] = []
    for token in (raw or "").split(","):
        role = token.strip().upper()
        if role and role not in roles:
            roles.append(role)
    return roles


def _identity_from_legacy_header(request: Request) -> RequestIdentity:
    email = (
        request.headers.get("X-User-Email")
        or request.headers.get("X-User")
        or DEFAULT_ACTOR
    )
    return RequestIdentity(
        email=(email or "").strip().lower() or None,
        auth_source="legacy_header",
        role_names=_role_names_from_header(request.headers.get("X-User-Roles")),
    )


def get_request_identity(request: Request) -> RequestIdentity:
    return _identity_from_legacy_header(request)


def get_request_email(request: Request) -> str:
    identity = _identity_from_legacy_header(request)
    return identity.email or DEFAULT_ACTOR


def _operator_roles() -> set[str]:
    return {
        token.strip().upper()
        for token in (settings.WORKFLOW_OPERATOR_ROLES or "").split(",")
        if token.strip()
    }


def require_operator(
    identity: RequestIdentity = Depends(get_request_identity),
) -> RequestIdentity:
    """Gate for status changes and tariff administration."""
    if not settings.WORKFLOW_ROLE_GUARD_ENABLED:
        return identity
    allowed = _operator_roles()
    if allowed.intersection(identity.role_names):
        return identity
    logger.warning(
        "operator_role_denied email=%s roles=%s",
        identity.email or "-",
        ",".join(identity.role_names) or "-",
    )
    raise ServiceFailure(
        code=FORBIDDEN,
        message=f"One of the roles {', '.join(sorted(allowed))} is required.",
        status_code=403,
    )
