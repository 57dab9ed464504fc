"""
Order issuance.

Gateway mode delegates to the gateway client and returns its order id.
Self-issued mode mints a local order id, a verification token and a UPI
pay-request payload the customer scans to pay.
"""
import logging
import re
import secrets
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Any, Optional, Tuple
from urllib.parse import quote

from consultpay.exceptions import ConfigurationError, ValidationError
from consultpay.tokens import TokenCodec

logger = logging.getLogger(__name__)

MODE_GATEWAY = "gateway"
MODE_SELF_ISSUED = "self-issued"

NOTE_MAX_LENGTH = 60
DEFAULT_NOTE = "Consultation payment"

# matches payments.amount Numeric(12, 2)
MINOR_UNIT = Decimal("0.01")
MAX_AMOUNT = Decimal("9999999999.99")

VPA_PATTERN = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._-]{1,255}@[A-Za-z][A-Za-z0-9]{1,63}$")


@dataclass(frozen=True)
class Order:
    order_id: str
    amount: Decimal
    currency: str
    mode: str
    issued_at: datetime
    gateway_order_id: Optional[str] = None
    client_secret: Optional[str] = None


def positive_amount(amount: Any) -> Decimal:
    """Parse an amount in major units and require it to be finite and > 0."""
    if amount is None:
        raise ValidationError("amount is required")
    if isinstance(amount, bool):
        raise ValidationError("amount must be a number")
    if isinstance(amount, float):
        amount = str(amount)
    try:
        value = Decimal(amount)
    except (InvalidOperation, TypeError, ValueError):
        raise ValidationError("amount must be a number")
    if not value.is_finite() or value <= 0:
        raise ValidationError("amount must be greater than zero")
    if value > MAX_AMOUNT:
        raise ValidationError("amount is too large")
    if value != value.quantize(MINOR_UNIT):
        raise ValidationError("amount has more precision than the currency allows")
    return value


def to_minor_units(amount: Decimal) -> int:
    minor = amount * 100
    if minor != minor.to_integral_value():
        raise ValidationError("amount has more precision than the currency allows")
    return int(minor)


def truncate_note(note: Optional[str]) -> str:
    text = " ".join((note or "").split()) or DEFAULT_NOTE
    return text[:NOTE_MAX_LENGTH].rstrip()


def build_upi_payload(vpa: Optional[str], payee_name: str, amount: Decimal,
                      currency: str, note: str, order_id: str) -> str:
    if not vpa or not VPA_PATTERN.match(vpa):
        raise ConfigurationError("UPI payee identifier is missing or invalid")

    params = [
        ("pa", vpa),
        ("pn", payee_name),
        ("am", f"{amount:.2f}"),
        ("cu", currency),
        ("tn", note),
        ("tr", order_id),
    ]
    query = "&".join(f"{key}={quote(str(value), safe='@.-_')}" for key, value in params)
    return f"upi://pay?{query}"


def _epoch_ms() -> int:
    return int(time.time() * 1000)


class OrderIssuer:
    def __init__(self, codec: TokenCodec, gateway=None, currency: str = "INR",
                 payee_vpa: Optional[str] = None, payee_name: str = "Consultation"):
        self.codec = codec
        self.gateway = gateway
        self.currency = currency
        self.payee_vpa = payee_vpa
        self.payee_name = payee_name

    def issue_gateway_order(self, amount: Any, currency: Optional[str] = None) -> Order:
        value = positive_amount(amount)
        if self.gateway is None:
            raise ConfigurationError("Payment gateway is not configured")

        currency = currency or self.currency
        receipt = f"rcpt_{_epoch_ms()}_{secrets.token_hex(4)}"
        intent = self.gateway.create_order(to_minor_units(value), currency, receipt)

        logger.info("Issued gateway order %s for receipt %s", intent.id, receipt)
        return Order(
            order_id=intent.id,
            amount=value,
            currency=currency,
            mode=MODE_GATEWAY,
            issued_at=datetime.now(timezone.utc),
            gateway_order_id=intent.id,
            client_secret=getattr(intent, "client_secret", None),
        )

    def issue_self_order(self, amount: Any, note: Optional[str] = None) -> Tuple[Order, str, str]:
        value = positive_amount(amount)
        order_id = f"QR{_epoch_ms()}{secrets.token_hex(4)}"

        # payee is validated before any token is minted
        payload = build_upi_payload(
            self.payee_vpa, self.payee_name, value, self.currency, truncate_note(note), order_id
        )
        token = self.codec.mint(order_id, value)

        logger.info("Issued self-order %s", order_id)
        order = Order(
            order_id=order_id,
            amount=value,
            currency=self.currency,
            mode=MODE_SELF_ISSUED,
            issued_at=datetime.now(timezone.utc),
        )
        return order, token, payload
