from datetime import date
from typing import List, Optional
from app.extensions import db
from app.models import EventRegistration, Event
from app.models.enums import RegistrationStatus, ACTIVE_REGISTRATION_STATUSES


class EventRegistrationRepository:
    @staticmethod
    def get_registration(registration_id: int) -> Optional[EventRegistration]:
        return EventRegistration.query.filter_by(id=registration_id).first()

    @staticmethod
    def get_registration_for_update(registration_id: int) -> Optional[EventRegistration]:
        """Reload the registration locked, discarding any state read earlier."""
        return (
            EventRegistration.query.filter_by(id=registration_id)
            .with_for_update()
            .populate_existing()
            .first()
        )

    @staticmethod
    def find_by_event_and_user(event_id: int, user_id: int) -> Optional[EventRegistration]:
        """Any registration row for the pair, whatever its status."""
        return EventRegistration.query.filter_by(event_id=event_id, user_id=user_id).first()

    @staticmethod
    def exists_active(event_id: int, user_id: int) -> bool:
        return (
            EventRegistration.query.filter(
                EventRegistration.event_id == event_id,
                EventRegistration.user_id == user_id,
                EventRegistration.status.in_(ACTIVE_REGISTRATION_STATUSES),
            ).count()
            > 0
        )

    @staticmethod
    def create_registration(attrs) -> EventRegistration:
        registration = EventRegistration(**attrs)
        db.session.add(registration)
        db.session.flush()
        return registration

    @staticmethod
    def update_registration(registration: EventRegistration, attrs: dict) -> EventRegistration:
        for key, value in attrs.items():
            if hasattr(registration, key):
                setattr(registration, key, value)
        db.session.flush()
        return registration

    @staticmethod
    def find_by_event(event_id: int):
        return EventRegistration.query.filter(EventRegistration.event_id == event_id)

    @staticmethod
    def find_by_user(user_id: int):
        return EventRegistration.query.filter(EventRegistration.user_id == user_id)

    @staticmethod
    def find_confirmed_by_event(event_id: int) -> List[EventRegistration]:
        return (
            EventRegistration.query.filter(
                EventRegistration.event_id == event_id,
                EventRegistration.status == RegistrationStatus.CONFIRMED,
            )
            .order_by(EventRegistration.registered_at.asc(), EventRegistration.id.asc())
            .all()
        )

    @staticmethod
    def find_upcoming_by_user(user_id: int, today: date) -> List[EventRegistration]:
        return (
            db.session.query(EventRegistration)
            .join(Event, EventRegistration.event_id == Event.id)
            .filter(
                EventRegistration.user_id == user_id,
                Event.event_date >= today,
                EventRegistration.status.in_(ACTIVE_REGISTRATION_STATUSES),
            )
            .order_by(Event.event_date.asc(), Event.event_start_time.asc())
            .all()
        )
