from __future__ import annotations

from hrleave.exceptions import TenantContextMissingError


def require_tenant(tenant_id: str | None) -> str:
    """Return the normalized tenant id, failing fast when the caller resolved none."""
    if tenant_id is None or not tenant_id.strip():
        raise TenantContextMissingError
    return tenant_id.strip()
