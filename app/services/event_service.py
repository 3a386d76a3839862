from datetime import datetime
from flask import current_app
from app.repositories.event_repository import EventRepository
from app.exceptions import BadRequestError, NotFoundError, UnauthorizedError
from app.models.enums import EventStatus
from app.models import Event
from app.schemas import CreateEventRequest, UpdateEventRequest
from app.utils.auth import Principal, can_manage_event
from app.utils.clock import utcnow, today
from app.utils.transaction import atomic

# Columns that may never be cleared through an update
REQUIRED_EVENT_FIELDS = {
    "event_name",
    "game_name",
    "event_date",
    "event_start_time",
    "event_end_time",
    "registration_open_date",
    "registration_close_date",
    "participation_type",
    "team_size",
    "max_participants",
    "min_participants",
    "is_paid",
    "visibility",
}

WINDOW_FIELDS = {"event_date", "registration_open_date", "registration_close_date"}

# Publishing recomputes the status only from these states
PUBLISHABLE_STATUSES = (
    EventStatus.DRAFT,
    EventStatus.UPCOMING,
    EventStatus.REGISTRATION_OPEN,
    EventStatus.REGISTRATION_CLOSED,
)

TERMINAL_STATUSES = (EventStatus.COMPLETED, EventStatus.CANCELLED)


class EventService:
    @staticmethod
    def generate_event_code() -> str:
        number = EventRepository.next_event_number()
        return f"EVT-{today().strftime('%Y%m%d')}-{number:04d}"

    @staticmethod
    def _validate_window(event_date, registration_open_date, registration_close_date):
        if registration_open_date >= registration_close_date:
            raise BadRequestError("Registration open date must be before close date")
        if registration_close_date >= datetime.combine(event_date, datetime.min.time()):
            raise BadRequestError("Registration must close before event date")

    @staticmethod
    def _validate_limits(min_participants, max_participants, is_paid, entry_fee):
        if min_participants > max_participants:
            raise BadRequestError("Minimum participants cannot exceed maximum participants")
        if is_paid and (entry_fee is None or entry_fee <= 0):
            raise BadRequestError("Entry fee is required for paid events")

    @staticmethod
    def _get_managed_event(event_id: int, principal: Principal, action: str) -> Event:
        event = EventRepository.get_event(event_id)
        if not event:
            raise NotFoundError(f"Event not found with id: {event_id}")
        if not can_manage_event(principal, event):
            raise UnauthorizedError(f"You are not authorized to {action} this event")
        return event

    @staticmethod
    def create_event(principal: Principal, request: CreateEventRequest) -> Event:
        if not principal.is_organizer:
            raise UnauthorizedError("Only organizers and admins can create events")

        if request.event_date <= today():
            raise BadRequestError("Event date must be in the future")
        EventService._validate_window(
            request.event_date,
            request.registration_open_date,
            request.registration_close_date,
        )
        EventService._validate_limits(
            request.min_participants,
            request.max_participants,
            request.is_paid,
            request.entry_fee,
        )

        attrs = request.model_dump()
        if attrs["entry_fee"] is None:
            attrs["entry_fee"] = 0
        if attrs["prize_pool"] is None:
            attrs["prize_pool"] = 0

        with atomic():
            attrs.update(
                {
                    "event_code": EventService.generate_event_code(),
                    "organizer_id": principal.user_id,
                    "organizer_name": principal.username,
                    "slots_filled": 0,
                    "status": EventStatus.DRAFT,
                }
            )
            event = EventRepository.create_event(attrs)

        current_app.logger.info(
            f"Event created: {event.event_code} by organizer: {principal.username}"
        )
        return event

    @staticmethod
    def update_event(event_id: int, principal: Principal, request: UpdateEventRequest) -> Event:
        changes = request.changes()

        with atomic():
            event = EventService._get_managed_event(event_id, principal, "update")

            cleared = sorted(
                field for field, value in changes.items()
                if value is None and field in REQUIRED_EVENT_FIELDS
            )
            if cleared:
                raise BadRequestError(f"Fields cannot be cleared: {', '.join(cleared)}")

            new_max = changes.get("max_participants")
            if new_max is not None and new_max < event.slots_filled:
                raise BadRequestError(
                    "Cannot reduce max participants below current registrations"
                )

            merged = {
                field: changes.get(field, getattr(event, field))
                for field in ("min_participants", "max_participants", "is_paid", "entry_fee")
            }
            EventService._validate_limits(**merged)
            if WINDOW_FIELDS & changes.keys():
                EventService._validate_window(
                    changes.get("event_date", event.event_date),
                    changes.get("registration_open_date", event.registration_open_date),
                    changes.get("registration_close_date", event.registration_close_date),
                )

            EventRepository.update_event(event, changes)

        current_app.logger.info(
            f"Event updated: {event.event_code} fields={sorted(changes)}"
        )
        return event

    @staticmethod
    def delete_event(event_id: int, principal: Principal):
        with atomic():
            event = EventService._get_managed_event(event_id, principal, "delete")
            if event.slots_filled > 0:
                raise BadRequestError(
                    "Cannot delete event with existing registrations. Cancel the event instead."
                )
            event_code = event.event_code
            EventRepository.delete_event(event)

        current_app.logger.info(f"Event deleted: {event_code}")
        return {"message": "Event deleted successfully"}

    @staticmethod
    def publish_event(event_id: int, principal: Principal) -> Event:
        with atomic():
            event = EventService._get_managed_event(event_id, principal, "publish")
            if event.status not in PUBLISHABLE_STATUSES:
                raise BadRequestError(
                    f"Event is {event.status.value} and cannot be published"
                )

            now = utcnow()
            if now < event.registration_open_date:
                event.status = EventStatus.UPCOMING
            elif now < event.registration_close_date:
                event.status = EventStatus.REGISTRATION_OPEN
            else:
                event.status = EventStatus.REGISTRATION_CLOSED

        current_app.logger.info(
            f"Event published: {event.event_code} status={event.status.value}"
        )
        return event

    @staticmethod
    def cancel_event(event_id: int, principal: Principal, reason: str = None) -> Event:
        with atomic():
            event = EventService._get_managed_event(event_id, principal, "cancel")
            if event.status in TERMINAL_STATUSES:
                raise BadRequestError(f"Event is already {event.status.value}")
            event.status = EventStatus.CANCELLED
            event.remarks = reason

        current_app.logger.info(f"Event cancelled: {event.event_code} - Reason: {reason}")
        return event

    @staticmethod
    def get_event(event_id: int) -> Event:
        event = EventRepository.get_event(event_id)
        if not event:
            raise NotFoundError(f"Event not found with id: {event_id}")
        return event

    @staticmethod
    def get_event_by_code(event_code: str) -> Event:
        event = EventRepository.get_event_by_code(event_code)
        if not event:
            raise NotFoundError(f"Event not found with event code: {event_code}")
        return event
