# restaurant_app/services/identity_webhook.py
import json
from typing import Mapping

from svix.webhooks import Webhook, WebhookVerificationError

from restaurant_app.domain.errors import (
    AuthenticationError,
    ConfigurationError,
    MalformedPayloadError,
)
from restaurant_app.services.role_service import RoleAssignment, RoleService
from restaurant_app.utils.logging import get_logger

logger = get_logger(__name__)


class IdentityWebhookService:
    """Powiadomienia dostawcy tozsamosci podpisane w formacie svix."""

    def __init__(self, secret: str, role_service: RoleService):
        try:
            self.webhook = Webhook(secret)
        except (ValueError, RuntimeError) as e:
            logger.error(f"Identity webhook secret is unusable: {e}")
            raise ConfigurationError("IDENTITY_WEBHOOK_SECRET is not a valid svix secret") from e
        self.role_service = role_service

    def verify(self, raw_body: bytes, headers: Mapping[str, str]) -> dict:
        """
        Sprawdza svix-id / svix-timestamp / svix-signature (tolerancja 5 min)
        i zwraca sparsowane body.
        """
        try:
            return self.webhook.verify(raw_body, dict(headers))
        except WebhookVerificationError as e:
            logger.warning(f"Identity webhook {headers.get('svix-id')} rejected: {e}")
            raise AuthenticationError("Webhook verification failed") from e
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise MalformedPayloadError("Identity webhook body is not valid JSON") from e
        except ValueError as e:
            # naglowek podpisu w zlym formacie
            logger.warning(f"Identity webhook with unreadable signature header: {e}")
            raise AuthenticationError("Webhook verification failed") from e

    def handle(self, raw_body: bytes, headers: Mapping[str, str]) -> RoleAssignment | None:
        event = self.verify(raw_body, headers)

        try:
            event_type = event["type"]
            user_id = event["data"]["id"]
        except (KeyError, TypeError) as e:
            raise MalformedPayloadError("Identity webhook body is malformed") from e

        if event_type != "user.created":
            logger.info(f"Received identity event: {event_type}")
            return None

        return self.role_service.assign_role(user_id)
