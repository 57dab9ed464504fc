import hashlib
import hmac

import stripe

from consultpay.models import Payment

GATEWAY_SECRET = "test_gateway_secret"

CUSTOMER = {
    "fullName": "Asha Rao",
    "email": "asha@example.com",
    "dob": "1990-04-12",
}


def test_self_issued_payment_lifecycle(client):
    """
    Test the QR lifecycle:
    1. Issue a self-order for 500
    2. Save the payment with the issued token
    3. Replaying the token with a different amount is rejected
    """
    order = client.post("/api/create-qr-order", json={"amount": 500, "note": "Consult"}).json()

    saved = client.post("/api/save-payment", json={
        **CUSTOMER,
        "amount": 500,
        "orderId": order["orderId"],
        "verificationToken": order["verificationToken"],
    })
    assert saved.status_code == 201

    tampered = client.post("/api/save-payment", json={
        **CUSTOMER,
        "amount": 600,
        "orderId": order["orderId"],
        "verificationToken": order["verificationToken"],
    })
    assert tampered.status_code == 400
    assert tampered.json()["error"]["error_code"] == "payment:authenticity"
    assert order["verificationToken"] not in tampered.text


def test_gateway_payment_lifecycle(client, store, mocker):
    """
    Test the gateway lifecycle:
    1. Create order (API -> Stripe mocked)
    2. Verify the gateway signature for the completed payment
    3. Save the payment (API -> DB)
    """
    mock_pi = mocker.Mock()
    mock_pi.id = "pi_integration_test_123"
    mock_pi.client_secret = "secret_test_456"
    mocker.patch("stripe.PaymentIntent.create", return_value=mock_pi)

    order = client.post("/api/create-order", json={"amount": 2500}).json()
    assert order["gatewayOrderId"] == "pi_integration_test_123"

    signature = hmac.new(
        GATEWAY_SECRET.encode("utf-8"),
        f"{order['orderId']}|pay_789".encode("utf-8"),
        hashlib.sha256,
    ).hexdigest()
    verify = client.post("/api/verify", json={
        "orderId": order["orderId"], "paymentId": "pay_789", "signature": signature,
    })
    assert verify.json() == {"authentic": True}

    saved = client.post("/api/save-payment", json={
        **CUSTOMER, "amount": 2500, "orderId": order["orderId"], "paymentId": "pay_789",
    })
    assert saved.status_code == 201

    payment = store.get(saved.json()["id"])
    assert payment.order_id == "pi_integration_test_123"
    assert payment.payment_id == "pay_789"
    assert payment.status == "confirmed"


def test_confirm_twice_creates_two_records(client, store):
    """Confirming the same order twice appends two independent records."""
    order = client.post("/api/create-qr-order", json={"amount": 500}).json()
    payload = {
        "email": "asha@example.com",
        "referenceNumber": "UTR998877",
        "orderId": order["orderId"],
        "amount": 500,
        "verificationToken": order["verificationToken"],
    }

    first = client.post("/api/confirm-payment", json=payload).json()
    second = client.post("/api/confirm-payment", json=payload).json()

    assert first["id"] != second["id"]

    db = store.SessionLocal()
    rows = db.query(Payment).filter_by(order_id=order["orderId"]).all()
    assert len(rows) == 2
    assert all(row.payment_confirmed_at is not None for row in rows)
    db.close()


def test_confirm_with_mismatched_amount_creates_nothing(client, store):
    order = client.post("/api/create-qr-order", json={"amount": 500}).json()

    response = client.post("/api/confirm-payment", json={
        "email": "asha@example.com",
        "referenceNumber": "UTR998877",
        "orderId": order["orderId"],
        "amount": 450,
        "verificationToken": order["verificationToken"],
    })

    assert response.status_code == 400

    db = store.SessionLocal()
    assert db.query(Payment).count() == 0
    db.close()


def test_create_order_gateway_error_leaves_no_record(client, store, mocker):
    """If the gateway fails, the error surfaces and nothing is stored."""
    mocker.patch("stripe.PaymentIntent.create", side_effect=stripe.StripeError("Service Unavailable"))

    response = client.post("/api/create-order", json={"amount": 2500})
    assert response.status_code == 502

    db = store.SessionLocal()
    assert db.query(Payment).count() == 0
    db.close()
