import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from consultpay.config import Settings
from consultpay.database import create_db_engine
from consultpay.exceptions import PaymentCoreError
from consultpay.orders import OrderIssuer
from consultpay.recorder import PaymentRecorder
from consultpay.routes import router
from consultpay.store import PaymentStore
from consultpay.stripe_service import StripeGateway
from consultpay.tokens import TokenCodec
from consultpay.verifier import ClaimVerifier

logger = logging.getLogger(__name__)


def create_app(settings: Settings = None, gateway=None, store=None) -> FastAPI:
    settings = settings or Settings.from_env()
    logging.basicConfig(level=settings.log_level)

    for name in settings.missing():
        logger.warning("%s is not set; the features that need it will answer 503", name)

    if store is None:
        store = PaymentStore(create_db_engine(settings.database_url))
        store.create_schema()
    if gateway is None and settings.stripe_secret_key:
        gateway = StripeGateway(settings.stripe_secret_key)

    codec = TokenCodec(settings.token_secret)
    verifier = ClaimVerifier(codec, settings.gateway_signing_secret)

    app = FastAPI(title="Consultation Payment Service")
    app.state.settings = settings
    app.state.issuer = OrderIssuer(
        codec,
        gateway=gateway,
        currency=settings.currency,
        payee_vpa=settings.upi_payee_vpa,
        payee_name=settings.upi_payee_name,
    )
    app.state.verifier = verifier
    app.state.recorder = PaymentRecorder(
        store,
        verifier,
        currency=settings.currency,
        require_dob=settings.require_dob,
    )

    @app.exception_handler(PaymentCoreError)
    async def payment_error_handler(request: Request, exc: PaymentCoreError):
        logger.info("%s %s failed: %s", request.method, request.url.path, exc.error_code)
        return JSONResponse(
            status_code=exc.status_code,
            content={"success": False, "error": exc.to_dict()},
        )

    app.include_router(router)
    return app
