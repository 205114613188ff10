"""Service interfaces (ports) for the application layer.

Protocols for capabilities consumed by application services; infrastructure
provides the implementations (Redis cache, JWT signer).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from accessgate.application.dtos.identity import Identity
    from accessgate.application.dtos.permission import PermissionResult
    from accessgate.application.dtos.role import RoleResult
    from accessgate.application.dtos.subscription import SubscriptionResult


class ICacheService(Protocol):
    """Protocol for key-value cache with TTL and pattern delete (DIP)."""

    def is_available(self) -> bool:
        """Return True when the backend is connected."""

    async def get(self, key: str) -> Any:
        """Return cached value or None."""

    async def set(self, key: str, value: Any, ttl: int = 300) -> bool:
        """Store JSON-serializable value with TTL (seconds)."""

    async def delete(self, key: str) -> bool:
        """Delete one key."""

    async def delete_pattern(self, pattern: str) -> int:
        """Delete keys matching glob pattern; return count."""


class ITokenSigner(Protocol):
    """Protocol for the opaque signing capability behind credentials (DIP)."""

    def sign(self, claims: dict[str, Any]) -> str:
        """Return a signed token carrying claims."""

    def verify(self, token: str) -> dict[str, Any]:
        """Return the claims of a valid token.

        Raises InvalidCredential on bad signature or format, CredentialExpired
        when the token's exp is in the past.
        """


class IRbacReader(Protocol):
    """Read side of the RBAC store consumed by the authorization engine (DIP)."""

    async def get_roles_for_user(self, user_id: str) -> set[RoleResult]:
        """Return active roles held through unexpired user-role links."""

    async def get_permissions_for_user(self, user_id: str) -> set[PermissionResult]:
        """Return the union of permissions granted to the user's roles."""

    async def get_active_subscription(self, user_id: str) -> SubscriptionResult | None:
        """Return the single live ACTIVE subscription, or None."""

    async def resolve_identity(self, user_id: str) -> Identity:
        """Return the live identity view for user."""
