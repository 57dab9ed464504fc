import hashlib
import hmac

import pytest

from consultpay.exceptions import AuthenticityError, ConfigurationError, ValidationError
from consultpay.tokens import TokenCodec
from consultpay.verifier import ClaimVerifier

GATEWAY_SECRET = "test_gateway_secret"


def gateway_signature(order_id, payment_id, secret=GATEWAY_SECRET):
    message = f"{order_id}|{payment_id}".encode("utf-8")
    return hmac.new(secret.encode("utf-8"), message, hashlib.sha256).hexdigest()


def test_gateway_claim_authentic(verifier):
    signature = gateway_signature("pi_123", "pay_456")
    assert verifier.verify_gateway_claim("pi_123", "pay_456", signature)


@pytest.mark.parametrize("order_id,payment_id", [("pi_999", "pay_456"), ("pi_123", "pay_999")])
def test_gateway_claim_tampered(verifier, order_id, payment_id):
    signature = gateway_signature("pi_123", "pay_456")
    assert not verifier.verify_gateway_claim(order_id, payment_id, signature)


def test_gateway_claim_signed_with_other_secret(verifier):
    signature = gateway_signature("pi_123", "pay_456", secret="attacker")
    assert not verifier.verify_gateway_claim("pi_123", "pay_456", signature)


def test_gateway_claim_non_ascii_signature_is_not_authentic(verifier):
    assert not verifier.verify_gateway_claim("pi_123", "pay_456", "ü" * 64)


@pytest.mark.parametrize("order_id,payment_id,signature", [
    ("", "pay_456", "abc"),
    ("pi_123", "  ", "abc"),
    ("pi_123", "pay_456", ""),
    (None, "pay_456", "abc"),
])
def test_gateway_claim_malformed(verifier, order_id, payment_id, signature):
    with pytest.raises(ValidationError):
        verifier.verify_gateway_claim(order_id, payment_id, signature)


def test_gateway_claim_without_secret(codec):
    verifier = ClaimVerifier(codec, gateway_secret=None)
    with pytest.raises(ConfigurationError):
        verifier.verify_gateway_claim("pi_123", "pay_456", "abc")


def test_self_claim_delegates_to_codec(verifier, codec):
    token = codec.mint("QR1", 500)
    assert verifier.verify_self_claim("QR1", 500, token)
    assert not verifier.verify_self_claim("QR1", 600, token)


def test_self_claim_requires_credentials(verifier):
    with pytest.raises(ValidationError):
        verifier.verify_self_claim("QR1", 500, "")
    with pytest.raises(ValidationError):
        verifier.verify_self_claim("", 500, "abc")
    with pytest.raises(ValidationError):
        verifier.verify_self_claim("QR1", None, "abc")


def test_require_self_claim_raises_generic_error(verifier, codec):
    token = codec.mint("QR1", 500)
    verifier.require_self_claim("QR1", 500, token)

    with pytest.raises(AuthenticityError) as exc_info:
        verifier.require_self_claim("QR1", 600, token)

    assert exc_info.value.message == "Payment verification failed"
    assert token not in str(exc_info.value)


def test_self_claim_without_secret():
    verifier = ClaimVerifier(TokenCodec(None), GATEWAY_SECRET)
    with pytest.raises(ConfigurationError):
        verifier.verify_self_claim("QR1", 500, "abc")
