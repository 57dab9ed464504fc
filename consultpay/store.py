import logging
from typing import Optional

from sqlalchemy import text
from sqlalchemy.exc import DisconnectionError, InterfaceError, OperationalError, SQLAlchemyError

from consultpay.database import Base, create_session_factory
from consultpay.exceptions import StoreUnavailableError
from consultpay.models import Payment

logger = logging.getLogger(__name__)

# only these mean the store is unreachable; anything else is a bad write
CONNECTION_ERRORS = (OperationalError, InterfaceError, DisconnectionError)


class PaymentStore:
    """Append-only access to payment records."""

    def __init__(self, engine):
        self.engine = engine
        self.SessionLocal = create_session_factory(engine)

    def create_schema(self):
        Base.metadata.create_all(bind=self.engine)

    def is_available(self) -> bool:
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
        except SQLAlchemyError as exc:
            logger.error("Payment store is unavailable: %s", type(exc).__name__)
            return False
        return True

    def add(self, payment: Payment) -> Payment:
        db = self.SessionLocal()
        try:
            db.add(payment)
            db.commit()
            db.refresh(payment)
            db.expunge(payment)
        except CONNECTION_ERRORS as exc:
            db.rollback()
            logger.error("Failed to save payment record: %s", type(exc).__name__)
            raise StoreUnavailableError("Payment store write failed") from exc
        except SQLAlchemyError:
            db.rollback()
            raise
        finally:
            db.close()
        return payment

    def get(self, payment_id: str) -> Optional[Payment]:
        db = self.SessionLocal()
        try:
            payment = db.get(Payment, payment_id)
            if payment is not None:
                db.expunge(payment)
            return payment
        finally:
            db.close()
