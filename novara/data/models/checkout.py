# novara/data/models/checkout.py
from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, DateTime, Numeric, Text

from novara.data.database import Base


def _utcnow():
    return datetime.now(timezone.utc)


class CheckoutModel(Base):
    """One checkout attempt and where it is in the payment flow."""

    __tablename__ = "checkouts"

    id = Column(Integer, primary_key=True)
    owner_key = Column(String(64), nullable=False, index=True)

    state = Column(String(32), nullable=False, default="FORM_ENTRY", index=True)
    message = Column(Text, nullable=True)

    # backend order created before payment, never deleted on payment failure
    order_id = Column(String(64), nullable=True, index=True)
    gateway_order_id = Column(String(64), nullable=True)
    payment_id = Column(String(64), nullable=True)

    customer_name = Column(String(180), nullable=True)
    email = Column(String(255), nullable=True)
    phone = Column(String(50), nullable=True)

    subtotal = Column(Numeric(12, 2), nullable=False, default=0)
    coupon_code = Column(String(64), nullable=True)
    discount = Column(Numeric(12, 2), nullable=False, default=0)
    delivery_charge = Column(Numeric(12, 2), nullable=False, default=0)
    amount = Column(Numeric(12, 2), nullable=False, default=0)

    redirect_to = Column(String(255), nullable=True)
    redirect_after_ms = Column(Integer, nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow)
