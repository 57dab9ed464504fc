from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class RequestModel(BaseModel):
    # camelCase keys on the wire, unknown keys rejected
    model_config = ConfigDict(extra="forbid", alias_generator=to_camel, populate_by_name=True)


class ResponseModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class GatewayOrderRequest(RequestModel):
    amount: Decimal


class SelfOrderRequest(RequestModel):
    amount: Decimal
    note: Optional[str] = None


class GatewayClaimRequest(RequestModel):
    order_id: str
    payment_id: str
    signature: str


class IdentityFields(RequestModel):
    full_name: Optional[str] = None
    phone: Optional[str] = None
    dob: Optional[str] = None
    birth_time: Optional[str] = None
    country: Optional[str] = None
    state: Optional[str] = None
    city: Optional[str] = None


class SavePaymentRequest(IdentityFields):
    email: Optional[str] = None
    amount: Optional[Decimal] = None
    order_id: Optional[str] = None
    payment_id: Optional[str] = None
    verification_token: Optional[str] = None


class ConfirmPaymentRequest(IdentityFields):
    email: Optional[str] = None
    reference_number: Optional[str] = None
    amount: Optional[Decimal] = None
    order_id: Optional[str] = None
    verification_token: Optional[str] = None


class GatewayOrderResponse(ResponseModel):
    order_id: str
    amount: Decimal
    currency: str
    gateway_order_id: str
    client_secret: Optional[str] = None


class SelfOrderResponse(ResponseModel):
    order_id: str
    amount: Decimal
    currency: str
    verification_token: str
    pay_request_payload: str


class GatewayClaimResponse(ResponseModel):
    authentic: bool


class SavePaymentResponse(ResponseModel):
    success: bool = True
    id: str


class ConfirmPaymentResponse(ResponseModel):
    success: bool = True
    id: str
    payment_confirmed_at: datetime
