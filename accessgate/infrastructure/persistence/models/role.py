"""Role ORM model. Built-in roles carry a SystemRole tag; the rest are custom."""

from sqlalchemy import Boolean, Index, String, Text, text
from sqlalchemy.orm import Mapped, mapped_column

from accessgate.domain.enums import SystemRole
from accessgate.infrastructure.persistence.database import Base
from accessgate.infrastructure.persistence.models.mixins import AccessGateModel


class Role(AccessGateModel, Base):
    """Role. Table: role. Unique name; at most one row per built-in tag."""

    __tablename__ = "role"

    name: Mapped[str] = mapped_column(String, nullable=False, unique=True)
    system_role: Mapped[str] = mapped_column(
        String, nullable=False, default=SystemRole.CUSTOM.value
    )
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    __table_args__ = (
        Index(
            "uq_role_builtin_tag",
            "system_role",
            unique=True,
            postgresql_where=text("system_role <> 'custom'"),
            sqlite_where=text("system_role <> 'custom'"),
        ),
    )
