"""Celery application factory and periodic schedule"""
from celery import Celery

from atlas.config.settings import get_settings


def create_celery_app() -> Celery:
    """Create and configure the Celery app"""
    settings = get_settings()

    app = Celery(
        "atlas",
        broker=settings.CELERY_BROKER_URL,
        backend=settings.CELERY_RESULT_BACKEND,
        include=["atlas.tasks.appointment_tasks"],
    )

    app.conf.update(
        task_serializer=settings.CELERY_TASK_SERIALIZER,
        result_serializer="json",
        accept_content=["json"],
        timezone="UTC",
        enable_utc=True,
        task_always_eager=settings.CELERY_TASK_ALWAYS_EAGER,
        task_acks_late=True,
        worker_prefetch_multiplier=1,
        task_routes={
            "atlas.tasks.appointment_tasks.send_appointment_notification": {"queue": "notifications"},
            "atlas.tasks.appointment_tasks.complete_past_appointments": {"queue": "maintenance"},
        },
        beat_schedule={
            "complete-past-appointments": {
                "task": "atlas.tasks.appointment_tasks.complete_past_appointments",
                "schedule": settings.COMPLETION_SWEEP_INTERVAL_MINUTES * 60.0,
            },
        },
    )

    return app


celery_app = create_celery_app()
