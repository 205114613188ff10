"""Cache key builders. Single place for key format (DRY).

Key components (user_id) must not contain CACHE_KEY_SEP to avoid
ambiguous or colliding keys.
"""

from accessgate.core.constants import (
    CACHE_KEY_SEP,
    CACHE_PREFIX_PERMISSION,
    CACHE_PREFIX_PERMISSION_VERSION,
)


def _validate_key_component(value: str, name: str) -> None:
    """Raise ValueError if value contains the cache key separator."""
    if CACHE_KEY_SEP in value:
        raise ValueError(
            f"Cache key component {name!r} must not contain separator {CACHE_KEY_SEP!r}"
        )


def permission_key(user_id: str) -> str:
    """Cache key for a user's effective permission codes."""
    _validate_key_component(user_id, "user_id")
    return f"{CACHE_PREFIX_PERMISSION}{CACHE_KEY_SEP}{user_id}"


def permission_key_pattern() -> str:
    """Glob pattern matching every user's permission key (role-wide invalidation)."""
    return f"{CACHE_PREFIX_PERMISSION}{CACHE_KEY_SEP}*"


def permission_version_key(user_id: str) -> str:
    """Cache key for the token bumped whenever a user's entry is invalidated."""
    _validate_key_component(user_id, "user_id")
    return f"{CACHE_PREFIX_PERMISSION_VERSION}{CACHE_KEY_SEP}{user_id}"


def permission_global_version_key() -> str:
    """Cache key for the token bumped whenever every user's entry is invalidated."""
    return CACHE_PREFIX_PERMISSION_VERSION
