"""Seed the permission catalog, built-in roles, default grants and menus.

Usage:
    python -m scripts.seed_rbac [--create-schema] [--no-menus]

Safe to run repeatedly; only missing rows are created.
"""

import asyncio
import sys

from accessgate.composition import build_store
from accessgate.core.config import get_settings
from accessgate.infrastructure.persistence.database import (
    _ensure_engine,
    create_schema,
    dispose_engine,
    transaction,
)
from accessgate.infrastructure.persistence.repositories import MenuRepository
from accessgate.infrastructure.services import RbacSeedService
from accessgate.shared.telemetry.logging import setup_logging


async def main() -> None:
    """Seed RBAC data into the configured database."""
    args = set(sys.argv[1:])
    unknown = args - {"--create-schema", "--no-menus"}
    if unknown:
        print(
            "Usage: python -m scripts.seed_rbac [--create-schema] [--no-menus]",
            file=sys.stderr,
        )
        sys.exit(1)

    get_settings()
    setup_logging()
    session_factory = _ensure_engine()
    try:
        if "--create-schema" in args:
            await create_schema()
        async with transaction(session_factory) as session:
            seeder = RbacSeedService(build_store(session), MenuRepository(session))
            summary = await seeder.seed(include_menus="--no-menus" not in args)
        print(
            f"Seeded RBAC: {summary.permissions_created} permissions, "
            f"{summary.roles_created} roles, {summary.grants_added} grants, "
            f"{summary.menus_created} menu items"
        )
    finally:
        await dispose_engine()


if __name__ == "__main__":
    asyncio.run(main())
