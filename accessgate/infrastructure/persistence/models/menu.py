"""MenuItem ORM model: navigation nodes linked by parent_id."""

from sqlalchemy import JSON, Boolean, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from accessgate.domain.enums import MenuType
from accessgate.infrastructure.persistence.database import Base
from accessgate.infrastructure.persistence.models.mixins import AccessGateModel


class MenuItem(AccessGateModel, Base):
    """Menu item. Table: menu_item. required_permissions holds ordered permission codes."""

    __tablename__ = "menu_item"

    name: Mapped[str] = mapped_column(String, nullable=False, unique=True)
    display_name: Mapped[str] = mapped_column(String, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    icon: Mapped[str | None] = mapped_column(String, nullable=True)
    route: Mapped[str | None] = mapped_column(String, nullable=True)
    menu_type: Mapped[str] = mapped_column(
        String, nullable=False, default=MenuType.ADMIN.value
    )
    parent_id: Mapped[str | None] = mapped_column(
        String, ForeignKey("menu_item.id", ondelete="CASCADE"), nullable=True
    )
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    required_permissions: Mapped[list[str]] = mapped_column(
        JSON, nullable=False, default=list
    )

    __table_args__ = (Index("ix_menu_item_type_parent", "menu_type", "parent_id"),)
