"""Infrastructure services: catalog seeding."""

from accessgate.infrastructure.services.rbac_seed_service import RbacSeedService, SeedSummary

__all__ = ["RbacSeedService", "SeedSummary"]
