# restaurant_app/services/dedupe_guard.py
import redis

from restaurant_app.utils.logging import get_logger
from restaurant_app.utils.retry import redis_retry

logger = get_logger(__name__)

# 7 dni - dluzej niz okno ponowien webhookow operatora
DEFAULT_TTL = 7 * 24 * 3600


class DedupeGuard:
    """
    Jednorazowe klucze w redisie (SET NX EX).
    Dwa rownolegle webhooki PAID dla tego samego zamowienia moga oba zobaczyc
    status pending, ale tylko jeden dostanie klucz.
    """

    def __init__(self, url: str, ttl: int = DEFAULT_TTL):
        self.redis = redis.Redis.from_url(url, decode_responses=True)
        self.ttl = ttl

    @redis_retry()
    def claim(self, key: str) -> bool:
        logger.info(f"Claim dedupe key {key}")
        #SET order:<id>:confirmed 1 NX EX ttl
        return bool(self.redis.set(name=key, value="1", nx=True, ex=self.ttl))

    @redis_retry()
    def release(self, key: str) -> None:
        logger.info(f"Release dedupe key {key}")
        self.redis.delete(key)

    def close(self) -> None:
        self.redis.close()
