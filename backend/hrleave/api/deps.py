# ruff: noqa: B008, TC003
from __future__ import annotations

import uuid
from typing import Annotated

from fastapi import Depends, Header

from hrleave.exceptions import TenantContextMissingError, UnauthorizedError
from hrleave.schemas.auth import AuthContext


async def get_auth_context(
    x_user_id: uuid.UUID = Header(),
    x_tenant_id: str | None = Header(default=None),
    x_role: str = Header(default="employee"),
) -> AuthContext:
    """Extract dev auth context from request headers.

    A missing or blank tenant is rejected before any database access.
    """
    if x_tenant_id is None or not x_tenant_id.strip():
        raise TenantContextMissingError
    return AuthContext(tenant_id=x_tenant_id.strip(), user_id=x_user_id, role=x_role)


AuthDep = Annotated[AuthContext, Depends(get_auth_context)]


async def require_admin(
    auth: AuthDep,
) -> AuthContext:
    """Require admin role for the request."""
    if not auth.is_admin:
        raise UnauthorizedError("Admin access required")
    return auth


AdminDep = Annotated[AuthContext, Depends(require_admin)]
