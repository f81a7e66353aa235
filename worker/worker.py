"""RQ worker for analysis jobs."""

import logging

from redis import Redis
from rq import Worker, Queue
from server.config import settings, validate_settings
from server.queue import QUEUE_NAME
from server.storage import init_db


log = logging.getLogger(__name__)


def main() -> None:
    """Start worker process."""
    logging.basicConfig(level=settings.log_level, format='[%(levelname)s] %(message)s')
    for problem in validate_settings(settings):
        log.warning(problem)
    init_db()
    redis = Redis.from_url(settings.redis_url)
    worker = Worker([Queue(QUEUE_NAME, connection=redis)], connection=redis)
    worker.work()


if __name__ == '__main__':
    main()
