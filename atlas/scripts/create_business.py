#!/usr/bin/env python3
"""
Script to create a demo business with a weekly schedule, services and a holiday
Usage: python -m atlas.scripts.create_business
"""
import sys
from datetime import date, timedelta
from decimal import Decimal
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from atlas.config.database import SessionLocal
from atlas.models import Business, Service, SpecialHours
from atlas.schemas.scheduling import WeeklyScheduleSchema

WEEKDAY_HOURS = {"isOpen": True, "openTime": "09:00", "closeTime": "18:00",
                 "breaks": [{"start": "12:00", "end": "13:00"}]}


def create_business_with_hours():
    """Create a demo business open Mon-Sat 09:00-18:00 with a lunch break"""
    db: Session = SessionLocal()

    try:
        schedule = WeeklyScheduleSchema(
            monday=WEEKDAY_HOURS,
            tuesday=WEEKDAY_HOURS,
            wednesday=WEEKDAY_HOURS,
            thursday=WEEKDAY_HOURS,
            friday=WEEKDAY_HOURS,
            saturday={"isOpen": True, "openTime": "09:00", "closeTime": "14:00"},
        )

        business = Business(
            name="Studio Atlas",
            timezone="America/Sao_Paulo",
            opening_hours=schedule.to_storage(),
            auto_confirm_appointments=False,
        )
        db.add(business)
        db.flush()  # Get the ID without committing

        print(f"\n✅ Created business: {business.name}")
        print(f"   Business ID: {business.id}")

        services = [
            Service(business_id=business.id, name="Haircut", duration_minutes=30, price=Decimal("45.00")),
            Service(business_id=business.id, name="Beard trim", duration_minutes=15, price=Decimal("20.00")),
            Service(business_id=business.id, name="Coloring", duration_minutes=90, price=Decimal("150.00")),
        ]
        db.add_all(services)

        holiday = SpecialHours(
            business_id=business.id,
            date=date.today() + timedelta(days=14),
            is_closed=True,
            notes="Holiday",
        )
        db.add(holiday)
        db.commit()

        print(f"\nServices:")
        for service in services:
            print(f"  - {service.name} ({service.formatted_duration}) {service.id}")
        print(f"\nWeekly schedule:")
        for day_name, entry in business.opening_hours.items():
            if entry["isOpen"]:
                print(f"  {day_name.title()}: {entry['openTime']} - {entry['closeTime']}")
            else:
                print(f"  {day_name.title()}: CLOSED")
        print(f"\nClosed on {holiday.date.isoformat()} ({holiday.notes})")
        print()

        return str(business.id)

    except SQLAlchemyError as e:
        db.rollback()
        print(f"\n❌ Error creating business: {e}")
        sys.exit(1)
    finally:
        db.close()


if __name__ == "__main__":
    business_id = create_business_with_hours()
