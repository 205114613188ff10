"""JWT signing capability for credentials (implements ITokenSigner).

Uses python-jose. Issuer and audience are stamped on sign and enforced
on verify; exp and sub are required.
"""

from __future__ import annotations

from typing import Any, cast

from jose import jwt
from jose.exceptions import ExpiredSignatureError, JWTError

from accessgate.core.config import Settings, get_settings
from accessgate.domain.exceptions import CredentialExpired, InvalidCredential


class JwtTokenSigner:
    """HMAC/RSA JWT signer. The secret never leaves this object."""

    def __init__(
        self,
        secret_key: str,
        algorithm: str = "HS256",
        issuer: str | None = None,
        audience: str | None = None,
    ) -> None:
        if not secret_key:
            raise ValueError("JwtTokenSigner requires a non-empty secret key")
        self._secret_key = secret_key
        self.algorithm = algorithm
        self.issuer = issuer
        self.audience = audience

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> JwtTokenSigner:
        settings = settings or get_settings()
        return cls(
            secret_key=settings.secret_key.get_secret_value(),
            algorithm=settings.algorithm,
            issuer=settings.credential_issuer,
            audience=settings.credential_audience,
        )

    def sign(self, claims: dict[str, Any]) -> str:
        """Encode claims (must include exp and sub) into a signed JWT."""
        to_encode = dict(claims)
        if self.issuer:
            to_encode["iss"] = self.issuer
        if self.audience:
            to_encode["aud"] = self.audience
        return cast(str, jwt.encode(to_encode, self._secret_key, algorithm=self.algorithm))

    def verify(self, token: str) -> dict[str, Any]:
        """Verify signature, expiry, issuer and audience; return the claims.

        Raises:
            CredentialExpired: exp is in the past.
            InvalidCredential: any other signature, format or claim failure.
        """
        if not token:
            raise InvalidCredential("Credential is empty")
        try:
            payload = jwt.decode(
                token,
                self._secret_key,
                algorithms=[self.algorithm],
                audience=self.audience,
                issuer=self.issuer,
                options={
                    "require_exp": True,
                    "require_sub": True,
                    "verify_aud": self.audience is not None,
                },
            )
        except ExpiredSignatureError:
            raise CredentialExpired() from None
        except JWTError as e:
            raise InvalidCredential(f"Invalid credential: {e!s}") from e
        return payload
