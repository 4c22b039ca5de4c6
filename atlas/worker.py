"""
Celery worker entry point
Handles appointment notifications and the completion sweep

    celery -A atlas.worker worker -Q notifications,maintenance
    celery -A atlas.worker beat
"""
import logging
from celery.signals import worker_ready, worker_shutdown

from atlas.config.celery_config import celery_app
from atlas.utils.my_logging import setup_logging

# Setup logging first
setup_logging()
logger = logging.getLogger(__name__)


@worker_ready.connect
def worker_ready_handler(sender=None, **kwargs):
    """Handle worker startup"""
    logger.info("Celery worker ready")
    logger.info(f"Registered tasks: {sorted(name for name in celery_app.tasks if name.startswith('atlas.'))}")


@worker_shutdown.connect
def worker_shutdown_handler(sender=None, **kwargs):
    """Handle worker shutdown"""
    logger.info("Celery worker shutting down...")


if __name__ == "__main__":
    # Run worker directly
    celery_app.start([
        'worker',
        '--loglevel=info',
        '--concurrency=4',
        '--max-tasks-per-child=1000',
        '-Q', 'notifications,maintenance',
    ])
