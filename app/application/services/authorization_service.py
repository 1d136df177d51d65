"""Authorization service: site-scope checks for scoped and unscoped callers."""

from __future__ import annotations

from app.application.dtos.scope import CallerScope
from app.domain.exceptions import AuthorizationException


class AuthorizationService:
    """A scoped caller only reads and changes data of its own site.

    Site creation, update and deletion are reserved to unscoped callers.
    """

    def can_access_site(self, scope: CallerScope, site_id: str) -> bool:
        return scope.is_unscoped or scope.site_id == site_id

    def require_site_access(
        self, scope: CallerScope, site_id: str, resource: str, action: str
    ) -> None:
        """Raise AuthorizationException if site_id is outside the caller's scope."""
        if not self.can_access_site(scope, site_id):
            raise AuthorizationException(resource, action)

    def require_unscoped(self, scope: CallerScope, resource: str, action: str) -> None:
        if not scope.is_unscoped:
            raise AuthorizationException(resource, action)

    def site_filter(self, scope: CallerScope, requested_site_id: str | None) -> str | None:
        """Site to filter listings on: the caller's own site when scoped.

        A scoped caller asking for another site is refused.
        """
        if scope.is_unscoped:
            return requested_site_id
        if requested_site_id is not None and requested_site_id != scope.site_id:
            raise AuthorizationException("site", "read")
        return scope.site_id
