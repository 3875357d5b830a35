# restaurant_app/utils/settings.py
import os
from decimal import Decimal

from dotenv import load_dotenv

from restaurant_app.domain.errors import ConfigurationError

load_dotenv()

REQUIRED = (
    "DATABASE_URL",
    "PAYMENT_SECRET_KEY",
    "PAYMENT_WEBHOOK_SECRET",
    "IDENTITY_SECRET_KEY",
    "IDENTITY_WEBHOOK_SECRET",
    "IDENTITY_JWT_KEY",
)


class Settings:
    """
    Konfiguracja procesu, budowana raz przy starcie.
    Brak wymaganego sekretu = ConfigurationError, bez cichych defaultow.
    """

    def __init__(self, env: dict[str, str]):
        missing = [name for name in REQUIRED if not env.get(name)]
        if missing:
            raise ConfigurationError(
                f"Missing required configuration: {', '.join(missing)}"
            )

        self.database_url = env["DATABASE_URL"]

        self.payment_secret_key = env["PAYMENT_SECRET_KEY"]
        self.payment_webhook_secret = env["PAYMENT_WEBHOOK_SECRET"]
        self.payment_api_url = env.get("PAYMENT_API_URL", "https://api.xendit.co")
        self.payment_currency = env.get("PAYMENT_CURRENCY", "IDR")

        self.identity_secret_key = env["IDENTITY_SECRET_KEY"]
        self.identity_webhook_secret = env["IDENTITY_WEBHOOK_SECRET"]
        self.identity_api_url = env.get("IDENTITY_API_URL", "https://api.clerk.com/v1")
        self.identity_jwt_key = env["IDENTITY_JWT_KEY"]
        self.identity_jwt_algorithm = env.get("IDENTITY_JWT_ALGORITHM", "RS256")

        self.vision_api_url = env.get("VISION_API_URL", "https://openrouter.ai/api/v1")
        self.vision_api_key = env.get("VISION_API_KEY") or None
        self.vision_model = env.get("VISION_MODEL", "gpt-4o-mini")

        self.public_base_url = env.get("PUBLIC_BASE_URL", "http://localhost:3000").rstrip("/")

        self.redis_url = env.get("REDIS_URL", "redis://redis:6379/0")

        try:
            self.http_timeout = float(env.get("HTTP_TIMEOUT_SECONDS", 15))
            self.max_admins = int(env.get("MAX_ADMINS", 5))
            self.tax_rate = Decimal(env.get("TAX_RATE", "0.10"))
        except (ValueError, ArithmeticError) as e:
            raise ConfigurationError(f"Invalid numeric configuration: {e}") from e

        self.log_level = env.get("LOG_LEVEL", "INFO")

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(dict(os.environ))
