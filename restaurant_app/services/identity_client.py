# restaurant_app/services/identity_client.py
import requests
from requests import RequestException

from restaurant_app.domain.errors import ProviderError
from restaurant_app.utils.logging import get_logger
from restaurant_app.utils.retry import http_retry

logger = get_logger(__name__)


class IdentityClient:
    """
    Backend API dostawcy tozsamosci (Clerk).
    - lustrzane kopiowanie roli do public_metadata
    - zaproszenia dla nowych adminow
    """

    def __init__(self, secret_key: str, base_url: str, timeout: float = 15):
        self.secret_key = secret_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def _headers(self) -> dict:
        return {"Authorization": f"Bearer {self.secret_key}"}

    @http_retry()
    def _patch_metadata(self, external_user_id: str, role: str) -> None:
        url = f"{self.base_url}/users/{external_user_id}/metadata"
        logger.info(f"IdentityClient PATCH {url}")

        resp = requests.patch(
            url,
            json={"public_metadata": {"role": role}},
            headers=self._headers(),
            timeout=self.timeout,
        )
        resp.raise_for_status()

    def set_role_metadata(self, external_user_id: str, role: str) -> None:
        # PATCH jest idempotentny, wiec retry przez tenacity jest bezpieczny
        try:
            self._patch_metadata(external_user_id, role)
        except RequestException as e:
            raise ProviderError(f"Identity provider metadata update failed: {e}") from e

    def create_invitation(self, email: str, redirect_url: str, role: str = "admin") -> str:
        url = f"{self.base_url}/invitations"
        logger.info(f"IdentityClient POST {url}")

        try:
            resp = requests.post(
                url,
                json={
                    "email_address": email,
                    "redirect_url": redirect_url,
                    "public_metadata": {"role": role},
                },
                headers=self._headers(),
                timeout=self.timeout,
            )
        except RequestException as e:
            raise ProviderError("Identity provider unreachable") from e

        if not resp.ok:
            message = "Failed to create invitation"
            try:
                errors = resp.json().get("errors") or []
                if errors:
                    message = errors[0].get("message") or message
            except (ValueError, AttributeError):
                pass
            logger.error(f"Invitation for {email} rejected: {resp.status_code} {message}")
            raise ProviderError(message)

        try:
            return resp.json()["id"]
        except (ValueError, KeyError, TypeError) as e:
            raise ProviderError("Unexpected invitation response from identity provider") from e
