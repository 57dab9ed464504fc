from fastapi import APIRouter, Depends, HTTPException, Request

from consultpay.auth import verify_token
from consultpay.models import as_utc
from consultpay.schemas import (
    ConfirmPaymentRequest,
    ConfirmPaymentResponse,
    GatewayClaimRequest,
    GatewayClaimResponse,
    GatewayOrderRequest,
    GatewayOrderResponse,
    SavePaymentRequest,
    SavePaymentResponse,
    SelfOrderRequest,
    SelfOrderResponse,
)

router = APIRouter()


def get_issuer(request: Request):
    return request.app.state.issuer


def get_verifier(request: Request):
    return request.app.state.verifier


def get_recorder(request: Request):
    return request.app.state.recorder


@router.get("/")
def health(request: Request):
    settings = request.app.state.settings
    missing = set(settings.missing())
    return {
        "status": "ok",
        "capabilities": {
            "gatewayOrders": "STRIPE_SECRET_KEY" not in missing,
            "gatewayClaims": "GATEWAY_SIGNING_SECRET" not in missing,
            "selfIssuedOrders": not missing & {"PAYMENT_TOKEN_SECRET", "UPI_PAYEE_VPA"},
            "recordLookup": "JWT_SECRET" not in missing,
        },
    }


@router.post("/api/create-order", response_model=GatewayOrderResponse)
def create_order(body: GatewayOrderRequest, issuer=Depends(get_issuer)):
    order = issuer.issue_gateway_order(body.amount)
    return GatewayOrderResponse(
        order_id=order.order_id,
        amount=order.amount,
        currency=order.currency,
        gateway_order_id=order.gateway_order_id,
        client_secret=order.client_secret,
    )


@router.post("/api/create-qr-order", response_model=SelfOrderResponse)
def create_qr_order(body: SelfOrderRequest, issuer=Depends(get_issuer)):
    order, token, payload = issuer.issue_self_order(body.amount, body.note)
    return SelfOrderResponse(
        order_id=order.order_id,
        amount=order.amount,
        currency=order.currency,
        verification_token=token,
        pay_request_payload=payload,
    )


@router.post("/api/verify", response_model=GatewayClaimResponse)
def verify_claim(body: GatewayClaimRequest, verifier=Depends(get_verifier)):
    authentic = verifier.verify_gateway_claim(body.order_id, body.payment_id, body.signature)
    return GatewayClaimResponse(authentic=authentic)


@router.post("/api/save-payment", response_model=SavePaymentResponse, status_code=201)
def save_payment(body: SavePaymentRequest, recorder=Depends(get_recorder)):
    payment = recorder.save(body)
    return SavePaymentResponse(id=payment.id)


@router.post("/api/confirm-payment", response_model=ConfirmPaymentResponse, status_code=201)
def confirm_payment(body: ConfirmPaymentRequest, recorder=Depends(get_recorder)):
    payment = recorder.confirm(body)
    return ConfirmPaymentResponse(id=payment.id, payment_confirmed_at=as_utc(payment.payment_confirmed_at))


@router.get("/api/payments/{payment_id}")
def get_payment(payment_id: str, recorder=Depends(get_recorder), auth=Depends(verify_token)):
    payment = recorder.get(payment_id)
    if payment is None:
        raise HTTPException(status_code=404, detail="Payment not found")
    return payment.to_dict()
