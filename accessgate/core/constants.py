"""Core constants: cache key prefixes and shared literal values.

Single source of truth for cache key structure (DRY). Used by the
authorization service (reads) and the RBAC store (invalidation).
"""

# Cache key prefixes
CACHE_PREFIX_PERMISSION = "permission"
# Outside the "permission:*" pattern so role-wide invalidation keeps the tokens
CACHE_PREFIX_PERMISSION_VERSION = "permission_version"

# Delimiter for composite keys
CACHE_KEY_SEP = ":"

# Credential claim names beyond the registered JWT claims
CLAIM_ROLE_IDS = "role_ids"
CLAIM_ROLE_NAMES = "role_names"
CLAIM_SYSTEM_ROLES = "system_roles"
CLAIM_SUBSCRIPTION_TYPE = "subscription_type"
CLAIM_SUBSCRIPTION_STATUS = "subscription_status"
