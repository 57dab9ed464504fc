import hashlib
import hmac
import logging
from typing import Any, Optional

from consultpay.exceptions import AuthenticityError, ConfigurationError, ValidationError
from consultpay.tokens import TokenCodec

logger = logging.getLogger(__name__)


def _blank(value: Any) -> bool:
    return not isinstance(value, str) or not value.strip()


class ClaimVerifier:
    """Judges completed-payment claims that carry a signature or token."""

    def __init__(self, codec: TokenCodec, gateway_secret: Optional[str] = None):
        self.codec = codec
        self._gateway_key = gateway_secret.encode("utf-8") if gateway_secret else None

    def verify_gateway_claim(self, order_id: str, payment_id: str, signature: str) -> bool:
        if _blank(order_id) or _blank(payment_id) or _blank(signature):
            raise ValidationError("orderId, paymentId and signature are required")
        if self._gateway_key is None:
            raise ConfigurationError("Gateway signing secret is not configured")

        message = f"{order_id}|{payment_id}".encode("utf-8")
        expected = hmac.new(self._gateway_key, message, hashlib.sha256).hexdigest()
        try:
            authentic = hmac.compare_digest(expected, signature)
        except TypeError:
            authentic = False

        if not authentic:
            logger.warning("Gateway signature mismatch for order %s", order_id)
        return authentic

    def verify_self_claim(self, order_id: str, amount: Any, token: str) -> bool:
        if _blank(order_id) or _blank(token) or amount is None:
            raise ValidationError("orderId, amount and verificationToken are required")

        authentic = self.codec.verify(order_id, amount, token)
        if not authentic:
            logger.warning("Verification token mismatch for order %s", order_id)
        return authentic

    def require_self_claim(self, order_id: str, amount: Any, token: str) -> None:
        if not self.verify_self_claim(order_id, amount, token):
            raise AuthenticityError()
