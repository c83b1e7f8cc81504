from celery import Celery
from celery.utils.log import get_task_logger
from sqlalchemy.exc import SQLAlchemyError
from tracker.db.session import SessionLocal
from tracker.core.config import settings

logger = get_task_logger(__name__)

# ── Celery app setup ───────────────────────────────────────────────
celery_app = Celery(
    "project_tracker",
    broker=settings.REDIS_URL,
    backend=settings.REDIS_URL,
)

celery_app.conf.update(
    task_serializer="json",
    result_serializer="json",
    accept_content=["json"],
    timezone="UTC",
    enable_utc=True,

    # Reliability
    task_acks_late=True,
    task_reject_on_worker_lost=True,
    result_expires=3600,

    # ── Redis connection timeouts ──────────────────────────────────
    redis_socket_connect_timeout=2,
    redis_socket_timeout=2,
    broker_transport_options={
        "max_retries": 2,
        "interval_start": 0,
        "interval_step": 0.5,
        "interval_max": 1,
        "connect_timeout": 2,
    },

    task_default_queue="default",

    # Beat schedule: keep the managed database from idling
    beat_schedule={
        "keep-alive-ping": {
            "task": "tasks.keep_alive_ping",
            "schedule": settings.KEEP_ALIVE_INTERVAL,
        },
    },
)


# ================================================================
# CELERY TASKS
# ================================================================

@celery_app.task(
    name="tasks.keep_alive_ping",
    bind=True,
    max_retries=3,
    default_retry_delay=60,
)
def keep_alive_ping(self):
    """Beat task. Touches the keep_alive sentinel row."""
    from tracker.modules.system.service import touch_keep_alive

    db = SessionLocal()
    try:
        timestamp = touch_keep_alive(db)
        logger.info(f"[Beat] Keep-alive ping at {timestamp.isoformat()}")
        return {"success": True, "timestamp": timestamp.isoformat()}

    except SQLAlchemyError as exc:
        db.rollback()
        logger.error(f"[Beat] Keep-alive ping failed (attempt {self.request.retries + 1}): {exc}")
        raise self.retry(exc=exc)

    finally:
        db.close()
