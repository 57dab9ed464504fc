import pytest
from fastapi.testclient import TestClient

from consultpay.config import Settings
from consultpay.database import Base, create_db_engine
from consultpay.main import create_app
from consultpay.orders import OrderIssuer
from consultpay.recorder import PaymentRecorder
from consultpay.store import PaymentStore
from consultpay.tokens import TokenCodec
from consultpay.verifier import ClaimVerifier

TOKEN_SECRET = "test_token_secret"
GATEWAY_SECRET = "test_gateway_secret"
JWT_SECRET = "test_jwt_secret"


@pytest.fixture
def settings(tmp_path):
    return Settings(
        database_url=f"sqlite:///{tmp_path / 'test_payments.db'}",
        stripe_secret_key="sk_test_123",
        gateway_signing_secret=GATEWAY_SECRET,
        token_secret=TOKEN_SECRET,
        upi_payee_vpa="aura.kendra@okaxis",
        upi_payee_name="Aura Kendra",
        currency="INR",
        require_dob=True,
        jwt_secret=JWT_SECRET,
    )


@pytest.fixture
def store(settings):
    engine = create_db_engine(settings.database_url)
    store = PaymentStore(engine)
    store.create_schema()
    yield store
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def codec():
    return TokenCodec(TOKEN_SECRET)


@pytest.fixture
def verifier(codec):
    return ClaimVerifier(codec, GATEWAY_SECRET)


@pytest.fixture
def issuer(codec, mocker):
    gateway = mocker.Mock()
    return OrderIssuer(codec, gateway=gateway, currency="INR",
                       payee_vpa="aura.kendra@okaxis", payee_name="Aura Kendra")


@pytest.fixture
def recorder(store, verifier):
    return PaymentRecorder(store, verifier, currency="INR")


@pytest.fixture
def client(settings, store):
    app = create_app(settings, store=store)
    with TestClient(app) as c:
        yield c
