"""accessgate: typed request dispatcher and RBAC/subscription authorization engine."""
