import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

# Force-load .env (Windows-safe, reload-safe)
BASE_DIR = Path(__file__).resolve().parent.parent
ENV_PATH = BASE_DIR / ".env"

_TRUE_VALUES = {"1", "true", "yes", "on"}


def _env(name: str) -> Optional[str]:
    value = os.getenv(name)
    if value is None or not value.strip():
        return None
    return value.strip()


@dataclass(frozen=True)
class Settings:
    database_url: Optional[str] = None
    stripe_secret_key: Optional[str] = None
    gateway_signing_secret: Optional[str] = None
    token_secret: Optional[str] = None
    upi_payee_vpa: Optional[str] = None
    upi_payee_name: str = "Consultation"
    currency: str = "INR"
    require_dob: bool = True
    jwt_secret: Optional[str] = None
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, load_file: bool = True) -> "Settings":
        if load_file:
            load_dotenv(dotenv_path=ENV_PATH)

        require_dob = _env("PAYMENT_REQUIRE_DOB")
        return cls(
            database_url=_env("DATABASE_URL"),
            stripe_secret_key=_env("STRIPE_SECRET_KEY"),
            gateway_signing_secret=_env("GATEWAY_SIGNING_SECRET"),
            token_secret=_env("PAYMENT_TOKEN_SECRET"),
            upi_payee_vpa=_env("UPI_PAYEE_VPA"),
            upi_payee_name=_env("UPI_PAYEE_NAME") or "Consultation",
            currency=(_env("PAYMENT_CURRENCY") or "INR").upper(),
            require_dob=require_dob is None or require_dob.lower() in _TRUE_VALUES,
            jwt_secret=_env("JWT_SECRET"),
            log_level=(_env("LOG_LEVEL") or "INFO").upper(),
        )

    def missing(self) -> List[str]:
        """Names of unset secrets, each of which disables one capability."""
        checks = {
            "STRIPE_SECRET_KEY": self.stripe_secret_key,
            "GATEWAY_SIGNING_SECRET": self.gateway_signing_secret,
            "PAYMENT_TOKEN_SECRET": self.token_secret,
            "UPI_PAYEE_VPA": self.upi_payee_vpa,
            "JWT_SECRET": self.jwt_secret,
        }
        return [name for name, value in checks.items() if not value]
