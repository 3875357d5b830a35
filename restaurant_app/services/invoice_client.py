# restaurant_app/services/invoice_client.py
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from uuid import UUID

import requests
from requests import RequestException

from restaurant_app.domain.errors import ProviderError
from restaurant_app.utils.logging import get_logger

logger = get_logger(__name__)

ORDER_REF_PREFIX = "order_"


def order_reference(order_id: UUID) -> str:
    return f"{ORDER_REF_PREFIX}{order_id}"


def to_minor_units(amount: Decimal) -> int:
    # IDR nie ma groszy - zaokraglamy do pelnej jednostki
    return int(Decimal(str(amount)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


@dataclass
class Invoice:
    invoice_id: str
    redirect_url: str


class PaymentClient:
    """
    Klient API faktur operatora platnosci (Xendit).
    Tworzenie faktury NIE jest ponawiane - kazda proba to nowa faktura.
    """

    def __init__(
        self,
        secret_key: str,
        base_url: str,
        public_base_url: str,
        currency: str = "IDR",
        timeout: float = 15,
    ):
        self.secret_key = secret_key
        self.base_url = base_url.rstrip("/")
        self.public_base_url = public_base_url.rstrip("/")
        self.currency = currency
        self.timeout = timeout

    def create_invoice(
        self,
        order_id: UUID,
        amount: Decimal,
        payer_email: str | None = None,
        description: str | None = None,
    ) -> Invoice:
        url = f"{self.base_url}/v2/invoices"
        external_id = order_reference(order_id)

        body = {
            "external_id": external_id,
            "amount": to_minor_units(amount),
            "currency": self.currency,
            "description": description or f"Payment for order #{order_id}",
            "success_redirect_url": f"{self.public_base_url}/payment/success?id={order_id}",
            "failure_redirect_url": f"{self.public_base_url}/payment/failed?id={order_id}",
        }
        if payer_email:
            body["payer_email"] = payer_email

        logger.info(f"PaymentClient POST {url} external_id={external_id} amount={body['amount']}")

        try:
            resp = requests.post(
                url,
                json=body,
                auth=(self.secret_key, ""),
                timeout=self.timeout,
            )
        except RequestException as e:
            logger.error(f"Invoice request for order {order_id} failed: {e}")
            raise ProviderError("Payment provider unreachable") from e

        if not resp.ok:
            logger.error(
                f"Invoice creation for order {order_id} rejected: "
                f"{resp.status_code} {resp.text[:200]}"
            )
            raise ProviderError(f"Payment provider returned {resp.status_code}")

        try:
            data = resp.json()
            return Invoice(invoice_id=data["id"], redirect_url=data["invoice_url"])
        except (ValueError, KeyError, TypeError) as e:
            raise ProviderError("Unexpected invoice response from payment provider") from e
