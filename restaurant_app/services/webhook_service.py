# restaurant_app/services/webhook_service.py
import hashlib
import hmac
import json
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Mapping
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from restaurant_app.data.models.order import (
    OrderModel,
    ORDER_EXPIRED,
    ORDER_FAILED,
    ORDER_PAID,
    ORDER_PENDING,
)
from restaurant_app.domain.errors import (
    AuthenticationError,
    MalformedPayloadError,
    OrderNotFoundError,
    PersistenceError,
)
from restaurant_app.repos.order_repo import OrderRepo
from restaurant_app.services.invoice_client import ORDER_REF_PREFIX
from restaurant_app.services.notification_service import NotificationService
from restaurant_app.utils.logging import get_logger

logger = get_logger(__name__)

SIGNATURE_HEADER = "x-callback-signature"

# statusy operatora -> status zamowienia; reszta jest informacyjna
STATUS_MAP = {
    "PAID": ORDER_PAID,
    "SETTLED": ORDER_PAID,
    "FAILED": ORDER_FAILED,
    "EXPIRED": ORDER_EXPIRED,
}


def sign_payload(secret: str, raw_body: bytes) -> str:
    return hmac.new(secret.encode(), raw_body, hashlib.sha256).hexdigest()


def _parse_timestamp(value) -> datetime | None:
    if not value or not isinstance(value, str):
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _as_uuid(value: str) -> UUID | None:
    try:
        return UUID(value)
    except (ValueError, TypeError, AttributeError):
        return None


@dataclass
class ReconcileResult:
    order_id: UUID
    status: str
    changed: bool


class WebhookService:
    """
    Rekonsyliacja powiadomien o platnosciach.

    Autoryzacja: HMAC-SHA256 surowego body kluczem wspoldzielonym,
    hex w naglowku x-callback-signature, porownanie w stalym czasie.
    Przejscia tylko z pending; stan terminalny nigdy nie jest cofany.
    """

    def __init__(self, db: Session, secret: str, notifier: NotificationService | None = None):
        self.repo = OrderRepo(db)
        self.secret = secret
        self.notifier = notifier

    def authenticate(self, raw_body: bytes, headers: Mapping[str, str]) -> None:
        signature = headers.get(SIGNATURE_HEADER)
        if not signature:
            logger.warning("Payment webhook without signature header")
            raise AuthenticationError("Missing webhook signature")

        expected = sign_payload(self.secret, raw_body)
        if not hmac.compare_digest(expected.encode(), signature.strip().lower().encode("latin-1", "replace")):
            logger.warning("Payment webhook with invalid signature")
            raise AuthenticationError("Invalid webhook signature")

    @staticmethod
    def parse(raw_body: bytes) -> dict:
        try:
            payload = json.loads(raw_body)
        except (ValueError, UnicodeDecodeError) as e:
            raise MalformedPayloadError("Webhook body is not valid JSON") from e

        if not isinstance(payload, dict):
            raise MalformedPayloadError("Webhook body must be a JSON object")

        status = payload.get("status")
        external_id = payload.get("external_id")
        if not isinstance(status, str) or not isinstance(external_id, str) or not external_id:
            raise MalformedPayloadError("Webhook body requires string 'status' and 'external_id'")
        return payload

    def resolve_order(self, external_id: str, invoice_id: str | None = None) -> OrderModel:
        """
        Kolejnosc: referencja faktury -> surowe id -> id bez prefiksu order_.
        Ostatni krok pokrywa wyscig gdy webhook przychodzi przed zapisem faktury.
        """
        for ref in (invoice_id, external_id):
            if ref:
                order = self.repo.get_by_invoice_ref(ref)
                if order:
                    return order

        raw = _as_uuid(external_id)
        if raw:
            order = self.repo.get_order(raw)
            if order:
                return order

        if external_id.startswith(ORDER_REF_PREFIX):
            stripped = _as_uuid(external_id[len(ORDER_REF_PREFIX):])
            if stripped:
                order = self.repo.get_order(stripped)
                if order:
                    return order

        logger.warning(f"No order matches external_id={external_id}")
        raise OrderNotFoundError(f"Order {external_id} not found")

    def handle_notification(self, raw_body: bytes, headers: Mapping[str, str]) -> ReconcileResult:
        self.authenticate(raw_body, headers)
        payload = self.parse(raw_body)

        external_id = payload["external_id"]
        invoice_id = payload.get("id") if isinstance(payload.get("id"), str) else None
        provider_status = payload["status"].upper()

        try:
            order = self.resolve_order(external_id, invoice_id)
        except SQLAlchemyError as e:
            logger.error(f"Order lookup for {external_id} failed: {e}")
            raise PersistenceError("Order lookup failed") from e

        target = STATUS_MAP.get(provider_status)
        if target is None:
            logger.info(f"Informational status {provider_status} for order {order.id}, ignored")
            return ReconcileResult(order_id=order.id, status=order.status, changed=False)

        if order.status != ORDER_PENDING:
            if order.status != target:
                logger.warning(
                    f"Order {order.id} already {order.status}, ignoring {provider_status}"
                )
            else:
                logger.info(f"Order {order.id} already {order.status}, duplicate delivery")
            return ReconcileResult(order_id=order.id, status=order.status, changed=False)

        order.status = target
        if invoice_id and not order.external_invoice_ref:
            order.external_invoice_ref = invoice_id
        if target == ORDER_PAID:
            order.paid_at = _parse_timestamp(payload.get("paid_at")) or datetime.now(timezone.utc)

        try:
            self.repo.commit()
        except SQLAlchemyError as e:
            self.repo.rollback()
            logger.error(f"Failed to update order {order.id} to {target}: {e}")
            raise PersistenceError("Failed to update order status") from e

        logger.info(f"Order {order.id} transitioned pending -> {target}")

        # efekty uboczne tylko przy faktycznym przejsciu pending -> paid
        if target == ORDER_PAID and self.notifier is not None:
            self.notifier.order_paid(order.id)

        return ReconcileResult(order_id=order.id, status=order.status, changed=True)
