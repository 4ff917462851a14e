"""Health checks for the pairing store."""

from redis.exceptions import RedisError

from app.logging_config import logger
from app.models.health import ServiceStatus
from app.pairing_store.store import redis_client


def is_redis_available() -> ServiceStatus:
    """Check Redis connectivity.

    Returns:
        ServiceStatus.available when Redis responds, else not_available.
    """
    try:
        redis_client.ping()
        logger.info("REDIS CONNECTED")
        return ServiceStatus.available
    except RedisError as exc:
        logger.error("REDIS UNAVAILABLE", error=str(exc))
        return ServiceStatus.not_available
