import enum
import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Numeric, String

from consultpay.database import Base


class PaymentStatus(str, enum.Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    FAILED = "failed"


def _new_id():
    return uuid.uuid4().hex


def _utcnow():
    return datetime.now(timezone.utc)


def as_utc(value):
    """SQLite hands DateTime(timezone=True) back naive; stored values are UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class Payment(Base):
    __tablename__ = "payments"

    id = Column(String(32), primary_key=True, default=_new_id)

    # Customer details; duplicates allowed, no unique constraints
    full_name = Column(String)
    email = Column(String, nullable=False, index=True)
    phone = Column(String)
    dob = Column(String)
    birth_time = Column(String)
    country = Column(String)
    state = Column(String)
    city = Column(String)

    amount = Column(Numeric(12, 2))
    currency = Column(String(3))
    order_id = Column(String, index=True)
    payment_id = Column(String, index=True)

    status = Column(String, nullable=False, default=PaymentStatus.CONFIRMED.value)  # pending | confirmed | failed
    reference_number = Column(String)
    payment_confirmed_at = Column(DateTime(timezone=True))

    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "fullName": self.full_name,
            "email": self.email,
            "phone": self.phone,
            "dob": self.dob,
            "birthTime": self.birth_time,
            "country": self.country,
            "state": self.state,
            "city": self.city,
            "amount": str(self.amount) if self.amount is not None else None,
            "currency": self.currency,
            "orderId": self.order_id,
            "paymentId": self.payment_id,
            "status": self.status,
            "referenceNumber": self.reference_number,
            "paymentConfirmedAt": as_utc(self.payment_confirmed_at).isoformat() if self.payment_confirmed_at else None,
            "createdAt": as_utc(self.created_at).isoformat() if self.created_at else None,
            "updatedAt": as_utc(self.updated_at).isoformat() if self.updated_at else None,
        }
