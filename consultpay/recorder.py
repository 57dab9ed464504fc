"""
Payment recording.

`save` stores the outcome of a checkout; `confirm` stores a manual
confirmation carrying a reconciliation reference. Both only ever insert:
two identical confirmations produce two records, and matching them up is
left to downstream reconciliation.
"""
import logging
from datetime import datetime, timezone
from typing import Optional

from consultpay.exceptions import StoreUnavailableError, ValidationError
from consultpay.models import Payment, PaymentStatus
from consultpay.orders import positive_amount
from consultpay.schemas import ConfirmPaymentRequest, SavePaymentRequest
from consultpay.verifier import ClaimVerifier

logger = logging.getLogger(__name__)


def _present(value: Optional[str]) -> bool:
    return value is not None and bool(value.strip())


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


class PaymentRecorder:
    def __init__(self, store, verifier: ClaimVerifier, currency: str = "INR", require_dob: bool = True):
        self.store = store
        self.verifier = verifier
        self.currency = currency
        self.require_dob = require_dob

    def _check_token(self, order_id, amount, token):
        if not _present(order_id):
            raise ValidationError("orderId is required with a verificationToken")
        if amount is None:
            raise ValidationError("amount is required with a verificationToken")
        self.verifier.require_self_claim(order_id.strip(), amount, token.strip())

    def _ensure_store(self):
        if not self.store.is_available():
            raise StoreUnavailableError("Payment store is not available, try again later")

    def save(self, data: SavePaymentRequest) -> Payment:
        required = {"fullName": data.full_name, "email": data.email}
        if self.require_dob:
            required["dob"] = data.dob
        missing = [name for name, value in required.items() if not _present(value)]
        if data.amount is None:
            missing.append("amount")
        if missing:
            raise ValidationError(
                f"Missing required fields: {', '.join(missing)}",
                details={"missing": missing},
            )
        amount = positive_amount(data.amount)

        if _present(data.verification_token):
            self._check_token(data.order_id, amount, data.verification_token)

        self._ensure_store()

        payment = self.store.add(Payment(
            full_name=_clean(data.full_name),
            email=_clean(data.email),
            phone=_clean(data.phone),
            dob=_clean(data.dob),
            birth_time=_clean(data.birth_time),
            country=_clean(data.country),
            state=_clean(data.state),
            city=_clean(data.city),
            amount=amount,
            currency=self.currency,
            order_id=_clean(data.order_id),
            payment_id=_clean(data.payment_id),
            status=PaymentStatus.CONFIRMED.value,
        ))
        logger.info("Saved payment %s for order %s", payment.id, payment.order_id)
        return payment

    def confirm(self, data: ConfirmPaymentRequest) -> Payment:
        missing = [
            name for name, value in (("email", data.email), ("referenceNumber", data.reference_number))
            if not _present(value)
        ]
        if missing:
            raise ValidationError(
                f"Missing required fields: {', '.join(missing)}",
                details={"missing": missing},
            )

        amount = positive_amount(data.amount) if data.amount is not None else None

        if _present(data.verification_token):
            self._check_token(data.order_id, amount, data.verification_token)

        self._ensure_store()

        # always a new record, even if this order was confirmed before
        payment = self.store.add(Payment(
            full_name=_clean(data.full_name),
            email=_clean(data.email),
            phone=_clean(data.phone),
            dob=_clean(data.dob),
            birth_time=_clean(data.birth_time),
            country=_clean(data.country),
            state=_clean(data.state),
            city=_clean(data.city),
            amount=amount,
            currency=self.currency if amount is not None else None,
            order_id=_clean(data.order_id),
            status=PaymentStatus.CONFIRMED.value,
            reference_number=_clean(data.reference_number),
            payment_confirmed_at=datetime.now(timezone.utc),
        ))
        logger.info("Confirmed payment %s with reference %s", payment.id, payment.reference_number)
        return payment

    def get(self, payment_id: str) -> Optional[Payment]:
        return self.store.get(payment_id)
