from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, DateTime, UniqueConstraint

from novara.data.database import Base


class WishlistItemModel(Base):
    __tablename__ = "guest_wishlist_items"

    id = Column(Integer, primary_key=True)
    owner_key = Column(String(64), nullable=False, index=True)
    product_id = Column(String(64), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))

    __table_args__ = (UniqueConstraint("owner_key", "product_id", name="u_guest_wishlist_product"),)
