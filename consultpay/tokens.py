"""
Verification tokens for self-issued (QR/UPI) orders.

A token is an HMAC-SHA256 tag over the order id and the canonical amount,
keyed with a secret held only by the server. Tokens are derived values:
nothing is stored, and any copy of the token re-verifies for the same
order and amount.
"""
import hashlib
import hmac
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from consultpay.exceptions import ConfigurationError, ValidationError

SEPARATOR = "|"


def canonical_amount(amount: Any) -> str:
    """
    Render an amount the same way for minting and verifying.

    Plain notation, no exponent, no trailing zeros: 500, 500.0, 500.00 and
    5E+2 all render "500".
    """
    if isinstance(amount, float):
        amount = str(amount)
    try:
        value = Decimal(amount)
    except (InvalidOperation, TypeError, ValueError):
        raise ValidationError("amount must be a number")

    if not value.is_finite():
        raise ValidationError("amount must be a finite number")

    text = format(value.normalize(), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


class TokenCodec:
    def __init__(self, secret: Optional[str]):
        self._key = secret.encode("utf-8") if secret else None

    @property
    def configured(self) -> bool:
        return self._key is not None

    def _digest(self, order_id: str, amount: Any) -> str:
        if self._key is None:
            raise ConfigurationError("Payment token secret is not configured")

        message = f"{order_id}{SEPARATOR}{canonical_amount(amount)}"
        return hmac.new(self._key, message.encode("utf-8"), hashlib.sha256).hexdigest()

    def mint(self, order_id: str, amount: Any) -> str:
        return self._digest(order_id, amount)

    def verify(self, order_id: str, amount: Any, token: Any) -> bool:
        expected = self._digest(order_id, amount)
        if not isinstance(token, str) or not token:
            return False
        # compare_digest only accepts ASCII str
        try:
            return hmac.compare_digest(expected, token)
        except TypeError:
            return False
