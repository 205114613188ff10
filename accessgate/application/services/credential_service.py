"""Credential service: issue and validate signed authorization snapshots."""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import timedelta
from typing import Any

from accessgate.application.dtos.identity import Identity, IdentitySource, IssuedCredential
from accessgate.application.interfaces.services import IRbacReader, ITokenSigner
from accessgate.core.constants import (
    CLAIM_ROLE_IDS,
    CLAIM_ROLE_NAMES,
    CLAIM_SUBSCRIPTION_STATUS,
    CLAIM_SUBSCRIPTION_TYPE,
    CLAIM_SYSTEM_ROLES,
)
from accessgate.domain.enums import SubscriptionStatus, SubscriptionType, SystemRole
from accessgate.domain.exceptions import InvalidCredential
from accessgate.shared.utils.datetime import from_timestamp_utc, utc_now
from accessgate.shared.utils.generators import generate_cuid

logger = logging.getLogger(__name__)


def _str_list(claims: dict[str, Any], name: str) -> list[str]:
    value = claims.get(name, [])
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise InvalidCredential(f"Malformed claim: {name}")
    return value


class CredentialService:
    """Issues credentials carrying a snapshot of roles and subscription tier.

    The embedded claims are a snapshot taken at issue time. A role revoked or
    a subscription cancelled afterwards is still reported by validate() until
    the credential expires (at most `lifetime`). validate() never reads the
    RBAC store; gates that must reflect revocations immediately have to call
    AuthorizationService instead of trusting the returned Identity.
    """

    def __init__(
        self,
        store: IRbacReader,
        signer: ITokenSigner,
        lifetime: timedelta = timedelta(minutes=1440),
    ) -> None:
        if lifetime <= timedelta(0):
            raise ValueError("Credential lifetime must be positive")
        self.store = store
        self.signer = signer
        self.lifetime = lifetime

    async def issue(self, user_id: str) -> IssuedCredential:
        """Resolve live roles and entitlement, then sign them with an expiry.

        Store errors (including MultipleActiveSubscriptions) propagate; no
        credential is issued from a partial view.
        """
        identity = await self.store.resolve_identity(user_id)
        issued_at = utc_now().replace(microsecond=0)
        expires_at = issued_at + self.lifetime
        claims: dict[str, Any] = {
            "sub": user_id,
            CLAIM_ROLE_IDS: sorted(identity.role_ids),
            CLAIM_ROLE_NAMES: sorted(identity.role_names),
            CLAIM_SYSTEM_ROLES: sorted(r.value for r in identity.system_roles),
            CLAIM_SUBSCRIPTION_TYPE: (
                identity.subscription_type.value if identity.subscription_type else None
            ),
            CLAIM_SUBSCRIPTION_STATUS: (
                identity.subscription_status.value if identity.subscription_status else None
            ),
            "iat": issued_at,
            "exp": expires_at,
            "jti": generate_cuid(),
        }
        token = self.signer.sign(claims)
        logger.info(
            "Issued credential for user %s (%d roles, expires %s)",
            user_id,
            len(identity.role_ids),
            expires_at.isoformat(),
        )
        snapshot = replace(identity, source=IdentitySource.CREDENTIAL, expires_at=expires_at)
        return IssuedCredential(token=token, expires_at=expires_at, identity=snapshot)

    def validate(self, token: str) -> Identity:
        """Verify the credential and return its embedded snapshot.

        Raises:
            InvalidCredential: bad signature, format or claims.
            CredentialExpired: past its expiry.
        """
        claims = self.signer.verify(token)
        user_id = claims.get("sub")
        if not isinstance(user_id, str) or not user_id:
            raise InvalidCredential("Credential missing subject")
        try:
            system_roles = frozenset(
                SystemRole(v) for v in _str_list(claims, CLAIM_SYSTEM_ROLES)
            )
            raw_type = claims.get(CLAIM_SUBSCRIPTION_TYPE)
            raw_status = claims.get(CLAIM_SUBSCRIPTION_STATUS)
            subscription_type = SubscriptionType(raw_type) if raw_type else None
            subscription_status = SubscriptionStatus(raw_status) if raw_status else None
            expires_at = from_timestamp_utc(float(claims["exp"]))
        except (ValueError, TypeError, KeyError) as e:
            raise InvalidCredential(f"Malformed credential claims: {e!s}") from e
        return Identity(
            user_id=user_id,
            role_ids=frozenset(_str_list(claims, CLAIM_ROLE_IDS)),
            role_names=frozenset(_str_list(claims, CLAIM_ROLE_NAMES)),
            system_roles=system_roles,
            subscription_type=subscription_type,
            subscription_status=subscription_status,
            source=IdentitySource.CREDENTIAL,
            expires_at=expires_at,
        )
