from sqlalchemy import Column, Integer, ForeignKey, Numeric, String, UniqueConstraint
from sqlalchemy.orm import relationship

from novara.data.database import Base


class CartItemModel(Base):
    __tablename__ = "guest_cart_items"

    id = Column(Integer, primary_key=True)
    cart_id = Column(Integer, ForeignKey("guest_carts.id", ondelete="CASCADE"), nullable=False)
    product_id = Column(String(64), nullable=False)

    name = Column(String(255), nullable=True)
    quantity = Column(Integer, nullable=False)
    # price snapshot taken from the backend product when the line was added
    price = Column(Numeric(12, 2), nullable=False)

    cart = relationship("CartModel", back_populates="items")

    __table_args__ = (UniqueConstraint("cart_id", "product_id", name="u_guest_cart_product"),)
