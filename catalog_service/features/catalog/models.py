"""SQLAlchemy models for the catalog feature."""

from __future__ import annotations

from sqlalchemy import Boolean, Index, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from catalog_service.core.database import Base, TimestampMixin


class CatalogItem(Base, TimestampMixin):
    """A published product listing as shown in the storefront catalog.

    ``priority`` drives the default listing order; ``featured_rank`` orders
    items within their tag for the featured sort.
    """

    __tablename__ = "catalog_items"
    __table_args__ = (
        Index("ix_catalog_items_shop_priority", "shop_id", "priority", "id"),
        Index("ix_catalog_items_tag_featured", "tag_id", "featured_rank", "id"),
    )

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    shop_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    tag_id: Mapped[str | None] = mapped_column(String(64), nullable=True, index=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    priority: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    min_price: Mapped[float] = mapped_column(
        Numeric(12, 2, asdecimal=False), nullable=False, default=0.0,
    )
    featured_rank: Mapped[int | None] = mapped_column(Integer, nullable=True)
    is_banner: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_sold_out: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_back_order: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_low_quantity: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    def __repr__(self) -> str:
        return f"<CatalogItem(id={self.id!r}, shop_id={self.shop_id!r}, priority={self.priority})>"
