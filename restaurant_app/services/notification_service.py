# restaurant_app/services/notification_service.py
from uuid import UUID

from kombu.exceptions import OperationalError
from redis.exceptions import RedisError

from restaurant_app.celery_worker import celery_app
from restaurant_app.services.dedupe_guard import DedupeGuard
from restaurant_app.utils.logging import get_logger

logger = get_logger(__name__)


class NotificationService:
    """
    Serwis do wysylania powiadomien o oplaconych zamowieniach.
    Uzywa Celery do asynchronicznego przetwarzania.
    """

    def __init__(self, guard: DedupeGuard | None = None):
        self.guard = guard

    def order_paid(self, order_id: UUID) -> bool:
        """
        Wysyla potwierdzenie zamowienia co najwyzej raz na zamowienie.
        Zwraca False gdy potwierdzenie bylo juz wyslane albo broker go nie przyjal.
        """
        key = f"order:{order_id}:confirmed"
        claimed = False
        if self.guard is not None:
            try:
                if not self.guard.claim(key):
                    logger.info(f"Confirmation for order {order_id} already sent, skipping")
                    return False
                claimed = True
            except RedisError as e:
                # status w bazie juz przeszedl pending -> paid, wiec wysylamy mimo braku klucza
                logger.warning(f"Dedupe guard unavailable for order {order_id}: {e}")

        try:
            send_order_confirmation_task.delay(str(order_id))
        except OperationalError as e:
            logger.error(f"Failed to enqueue confirmation for order {order_id}: {e}")
            if claimed:
                self._release(key)
            return False
        return True

    def _release(self, key: str) -> None:
        try:
            self.guard.release(key)
        except RedisError as e:
            logger.error(f"Failed to release dedupe key {key}: {e}")

    def close(self) -> None:
        if self.guard is not None:
            self.guard.close()


@celery_app.task(name="restaurant_app.services.notification_service.send_order_confirmation_task")
def send_order_confirmation_task(order_id: str):
    """
    Celery task - w prawdziwym systemie wyslalby email/SMS do klienta.
    Teraz tylko loguje.
    """
    logger.info(f"[NOTIFICATION] Order {order_id} confirmed and paid")
    return {"order_id": order_id, "status": "sent"}
