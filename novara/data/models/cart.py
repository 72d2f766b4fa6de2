# novara/data/models/cart.py
from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.orm import relationship

from novara.data.database import Base


def _utcnow():
    return datetime.now(timezone.utc)


class CartModel(Base):
    """Guest cart. Signed-in users keep their cart on the backend."""

    __tablename__ = "guest_carts"

    id = Column(Integer, primary_key=True)
    owner_key = Column(String(64), nullable=False, unique=True, index=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow)

    items = relationship(
        "CartItemModel",
        back_populates="cart",
        cascade="all, delete-orphan",
        order_by="CartItemModel.id",
    )
