"""Security: credential signing."""

from accessgate.infrastructure.security.jwt import JwtTokenSigner

__all__ = ["JwtTokenSigner"]
