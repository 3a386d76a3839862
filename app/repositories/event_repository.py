from datetime import date
from sqlalchemy import or_
from app.extensions import db
from app.models import Event, EventCodeCounter
from app.models.enums import EventStatus, EventVisibility

EVENT_CODE_COUNTER = "event_code"


def _contains(keyword: str) -> str:
    """LIKE pattern matching ``keyword`` literally anywhere in the column."""
    escaped = (
        keyword.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    )
    return f"%{escaped}%"


class EventRepository:
    @staticmethod
    def get_event(event_id: int) -> Event:
        return Event.query.filter_by(id=event_id).first()

    @staticmethod
    def get_event_for_update(event_id: int) -> Event:
        """Load the event row locked until the surrounding transaction ends."""
        return (
            Event.query.filter_by(id=event_id)
            .with_for_update()
            .populate_existing()
            .first()
        )

    @staticmethod
    def get_event_by_code(event_code: str) -> Event:
        return Event.query.filter_by(event_code=event_code).first()

    @staticmethod
    def next_event_number() -> int:
        counter = (
            EventCodeCounter.query.filter_by(name=EVENT_CODE_COUNTER)
            .with_for_update()
            .populate_existing()
            .first()
        )
        if counter is None:
            counter = EventCodeCounter(name=EVENT_CODE_COUNTER, value=0)
            db.session.add(counter)
        counter.value += 1
        db.session.flush()
        return counter.value

    @staticmethod
    def create_event(attrs):
        event = Event(**attrs)
        db.session.add(event)
        db.session.flush()
        return event

    @staticmethod
    def update_event(event: Event, attrs: dict):
        for key, value in attrs.items():
            if hasattr(event, key):
                setattr(event, key, value)
        db.session.flush()
        return event

    @staticmethod
    def delete_event(event: Event):
        db.session.delete(event)
        db.session.flush()

    @staticmethod
    def find_public_open():
        return Event.query.filter(
            Event.visibility == EventVisibility.PUBLIC,
            Event.status == EventStatus.REGISTRATION_OPEN,
        )

    @staticmethod
    def find_upcoming(today: date):
        return Event.query.filter(
            Event.event_date >= today,
            Event.status == EventStatus.REGISTRATION_OPEN,
        )

    @staticmethod
    def search(keyword: str):
        pattern = _contains(keyword)
        return Event.query.filter(
            or_(
                Event.event_name.ilike(pattern, escape="\\"),
                Event.game_name.ilike(pattern, escape="\\"),
                Event.description.ilike(pattern, escape="\\"),
            ),
            Event.status == EventStatus.REGISTRATION_OPEN,
            Event.visibility == EventVisibility.PUBLIC,
        )

    @staticmethod
    def find_by_game_name(game_name: str):
        return Event.query.filter(
            Event.game_name.ilike(_contains(game_name), escape="\\"),
            Event.status == EventStatus.REGISTRATION_OPEN,
        )

    @staticmethod
    def find_by_organizer(organizer_id: int):
        return Event.query.filter(Event.organizer_id == organizer_id)
