"""
Shared fixtures: a throwaway SQLite database per test and a demo business
"""
import os

# Must be set before atlas.config.settings is first imported
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("CELERY_TASK_ALWAYS_EAGER", "true")

from datetime import date, datetime
from decimal import Decimal
import uuid

import pytest
from sqlalchemy.orm import sessionmaker

from atlas.config.database import build_engine
from atlas.models import Base, Business, Service, SpecialHours
from atlas.services.notification.notification_service import NotificationService

# 2030-06-03 is a Monday
MONDAY = date(2030, 6, 3)
TUESDAY = date(2030, 6, 4)
SATURDAY = date(2030, 6, 8)
SUNDAY = date(2030, 6, 9)
BEFORE_OPENING = datetime(2030, 6, 3, 8, 0)

WEEKDAY_HOURS = {
    "isOpen": True,
    "openTime": "09:00",
    "closeTime": "18:00",
    "breaks": [{"start": "12:00", "end": "13:00"}],
}

WEEKLY_SCHEDULE = {
    "sunday": {"isOpen": False},
    "monday": WEEKDAY_HOURS,
    "tuesday": WEEKDAY_HOURS,
    "wednesday": WEEKDAY_HOURS,
    "thursday": WEEKDAY_HOURS,
    "friday": WEEKDAY_HOURS,
    "saturday": WEEKDAY_HOURS,
}


@pytest.fixture
def engine(tmp_path):
    engine = build_engine(f"sqlite:///{tmp_path / 'atlas.db'}")
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(autouse=True)
def dispatched(monkeypatch):
    """Record notification dispatches instead of queueing Celery tasks"""
    events = []

    def fake_dispatch(appointment_id, event_type):
        events.append((str(appointment_id), getattr(event_type, "value", event_type)))
        return True

    monkeypatch.setattr(NotificationService, "dispatch_appointment_event", staticmethod(fake_dispatch))
    return events


@pytest.fixture
def business(db):
    business = Business(
        name="Studio Atlas",
        timezone="America/Sao_Paulo",
        opening_hours=WEEKLY_SCHEDULE,
        auto_confirm_appointments=False,
    )
    db.add(business)
    db.commit()
    return business


def make_service(db, business, minutes, name=None, is_active=True):
    service = Service(
        business_id=business.id,
        name=name or f"Service {minutes}m",
        duration_minutes=minutes,
        price=Decimal("50.00"),
        is_active=is_active,
    )
    db.add(service)
    db.commit()
    return service


@pytest.fixture
def service_30(db, business):
    return make_service(db, business, 30, "Haircut")


@pytest.fixture
def service_45(db, business):
    return make_service(db, business, 45, "Manicure")


@pytest.fixture
def service_60(db, business):
    return make_service(db, business, 60, "Massage")


def add_override(db, business, day, **fields):
    override = SpecialHours(business_id=business.id, date=day, **fields)
    db.add(override)
    db.commit()
    return override


def new_client_id():
    return uuid.uuid4()
