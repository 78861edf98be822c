import logging
from redis import Redis
from rq import Queue

from .config import settings

logger = logging.getLogger(__name__)

# Redis connection (connects lazily on first command)
redis_conn = Redis(
    host=settings.REDIS_HOST,
    port=settings.REDIS_PORT,
    db=settings.REDIS_DB,
    decode_responses=False,
)

# Outbound email jobs (activation, deactivation, password reset)
mail_queue = Queue(settings.MAIL_QUEUE, connection=redis_conn)


def get_mail_queue() -> Queue:
    """Get the queue for email dispatch jobs."""
    return mail_queue


def test_redis_connection() -> bool:
    """Test Redis connection."""
    try:
        redis_conn.ping()
        logger.info("Redis connection successful")
        return True
    except Exception as e:
        logger.error(f"Redis connection failed: {e}")
        return False
