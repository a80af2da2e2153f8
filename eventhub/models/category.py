"""Category model."""

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from eventhub.models.base import Base, BigIntPK, utcnow

if TYPE_CHECKING:
    from eventhub.models.event import Event


class Category(Base):
    """Category model grouping events."""

    __tablename__ = "categories"

    category_id: Mapped[int] = mapped_column(BigIntPK, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)

    # Relationships
    events: Mapped[list["Event"]] = relationship("Event", back_populates="category")
