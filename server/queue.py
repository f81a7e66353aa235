"""Queue helpers for analysis jobs."""

from redis import Redis
from rq import Queue
from .config import settings


QUEUE_NAME = 'analyses'


def get_queue() -> Queue:
    """Get a Redis-backed queue."""
    redis = Redis.from_url(settings.redis_url)
    return Queue(QUEUE_NAME, connection=redis)
