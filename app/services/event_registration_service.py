from typing import List
from flask import current_app
from app.repositories.event_repository import EventRepository
from app.repositories.event_registration_repository import EventRegistrationRepository
from app.exceptions import (
    BadRequestError,
    DuplicateRegistrationError,
    EventFullError,
    NotFoundError,
    RegistrationClosedError,
    UnauthorizedError,
)
from app.models import Event, EventRegistration
from app.models.enums import EventStatus, RegistrationStatus
from app.schemas import RegisterEventRequest
from app.utils.auth import Principal, can_manage_event, can_view_registration
from app.utils.clock import utcnow
from app.utils.pagination import PageRequest, paginate
from app.utils.transaction import atomic

USER_CANCELLATION_REASON = "Cancelled by user"

REGISTRATION_SORT_FIELDS = {
    "registered_at": EventRegistration.registered_at,
    "updated_at": EventRegistration.updated_at,
    "status": EventRegistration.status,
    "team_name": EventRegistration.team_name,
}


class EventRegistrationService:
    @staticmethod
    def _get_registration(registration_id: int) -> EventRegistration:
        registration = EventRegistrationRepository.get_registration(registration_id)
        if not registration:
            raise NotFoundError(f"Registration not found with id: {registration_id}")
        return registration

    @staticmethod
    def _get_event(event_id: int) -> Event:
        event = EventRepository.get_event(event_id)
        if not event:
            raise NotFoundError(f"Event not found with id: {event_id}")
        return event

    @staticmethod
    def _require_event_manager(principal: Principal, event: Event, action: str):
        if not can_manage_event(principal, event):
            raise UnauthorizedError(f"You are not authorized to {action}")

    @staticmethod
    def register(event_id: int, principal: Principal, request: RegisterEventRequest) -> EventRegistration:
        """Register the calling player for an event.

        The event row stays locked from the capacity check until the slot
        increment commits, so concurrent registrations cannot oversell it.
        Free events confirm straight away; paid events wait in PENDING for the
        organizer to verify the transaction.
        """
        if not principal.is_player:
            raise UnauthorizedError("Only players can register for events")

        with atomic():
            event = EventRepository.get_event_for_update(event_id)
            if not event:
                raise NotFoundError(f"Event not found with id: {event_id}")

            previous = EventRegistrationRepository.find_by_event_and_user(event_id, principal.user_id)
            if previous and previous.is_active:
                raise DuplicateRegistrationError("You have already registered for this event")
            if previous and previous.status == RegistrationStatus.REJECTED:
                raise DuplicateRegistrationError("Your registration for this event was rejected")

            if event.is_full:
                raise EventFullError("Event is full. No more slots available")

            if event.status != EventStatus.REGISTRATION_OPEN or not event.is_within_registration_window(utcnow()):
                raise RegistrationClosedError("Registration is not open for this event")

            if event.is_paid and not request.transaction_id:
                raise BadRequestError("Transaction ID is required for paid events")

            attrs = {
                "status": RegistrationStatus.PENDING if event.is_paid else RegistrationStatus.CONFIRMED,
                "team_name": request.team_name,
                "additional_notes": request.additional_notes,
                "transaction_id": request.transaction_id,
                "amount_paid": event.entry_fee,
                "payment_verified": False,
                "registered_at": utcnow(),
                "cancelled_at": None,
                "cancellation_reason": None,
            }

            # A cancelled row for this pair is brought back to life
            if previous:
                registration = EventRegistrationRepository.update_registration(previous, attrs)
            else:
                attrs.update({"event_id": event_id, "user_id": principal.user_id})
                registration = EventRegistrationRepository.create_registration(attrs)

            event.increment_slots_filled()

        current_app.logger.info(
            f"User {principal.username} registered for event {event.event_code} "
            f"status={registration.status.value} slots={event.slots_filled}/{event.max_participants}"
        )
        return registration

    @staticmethod
    def _lock(registration: EventRegistration):
        """Lock the event, then reload the registration under its own lock.

        Status checks made after this see any change committed by a concurrent
        cancel, confirm or reject of the same registration.
        """
        event = EventRepository.get_event_for_update(registration.event_id)
        registration = EventRegistrationRepository.get_registration_for_update(registration.id)
        return event, registration

    @staticmethod
    def cancel(registration_id: int, principal: Principal) -> EventRegistration:
        with atomic():
            registration = EventRegistrationService._get_registration(registration_id)

            if registration.user_id != principal.user_id:
                raise UnauthorizedError("You are not authorized to cancel this registration")

            event, registration = EventRegistrationService._lock(registration)
            if registration.status == RegistrationStatus.CANCELLED:
                raise BadRequestError("Registration is already cancelled")
            if registration.status == RegistrationStatus.REJECTED:
                raise BadRequestError("Registration has been rejected and cannot be cancelled")

            registration.status = RegistrationStatus.CANCELLED
            registration.cancelled_at = utcnow()
            registration.cancellation_reason = USER_CANCELLATION_REASON
            event.decrement_slots_filled()

        current_app.logger.info(
            f"Registration cancelled: {registration_id} for event: {event.event_code}"
        )
        return registration

    @staticmethod
    def confirm(registration_id: int, principal: Principal) -> EventRegistration:
        with atomic():
            registration = EventRegistrationService._get_registration(registration_id)
            EventRegistrationService._require_event_manager(
                principal, registration.event, "confirm this registration"
            )

            event, registration = EventRegistrationService._lock(registration)
            if registration.status == RegistrationStatus.CONFIRMED:
                raise BadRequestError("Registration is already confirmed")
            if registration.status != RegistrationStatus.PENDING:
                raise BadRequestError(
                    f"Registration is {registration.status.value} and cannot be confirmed"
                )

            registration.status = RegistrationStatus.CONFIRMED
            if event.is_paid:
                registration.payment_verified = True

        current_app.logger.info(
            f"Registration confirmed: {registration_id} for event: {event.event_code}"
        )
        return registration

    @staticmethod
    def reject(registration_id: int, principal: Principal, reason: str = None) -> EventRegistration:
        with atomic():
            registration = EventRegistrationService._get_registration(registration_id)
            EventRegistrationService._require_event_manager(
                principal, registration.event, "reject this registration"
            )

            event, registration = EventRegistrationService._lock(registration)
            # Only active registrations hold a slot, so only they can be rejected
            if not registration.is_active:
                raise BadRequestError(
                    f"Registration is already {registration.status.value}"
                )

            registration.status = RegistrationStatus.REJECTED
            registration.cancellation_reason = reason
            event.decrement_slots_filled()

        current_app.logger.info(
            f"Registration rejected: {registration_id} for event: {event.event_code} - Reason: {reason}"
        )
        return registration

    @staticmethod
    def list_for_event(event_id: int, principal: Principal, page_request: PageRequest):
        event = EventRegistrationService._get_event(event_id)
        EventRegistrationService._require_event_manager(
            principal, event, "view registrations for this event"
        )
        return paginate(
            EventRegistrationRepository.find_by_event(event_id),
            page_request,
            REGISTRATION_SORT_FIELDS,
            tiebreaker=EventRegistration.id,
        )

    @staticmethod
    def list_confirmed(event_id: int, principal: Principal) -> List[EventRegistration]:
        event = EventRegistrationService._get_event(event_id)
        EventRegistrationService._require_event_manager(
            principal, event, "view registrations for this event"
        )
        return EventRegistrationRepository.find_confirmed_by_event(event_id)

    @staticmethod
    def get_registration(registration_id: int, principal: Principal) -> EventRegistration:
        registration = EventRegistrationService._get_registration(registration_id)
        if not can_view_registration(principal, registration):
            raise UnauthorizedError("You are not authorized to view this registration")
        return registration

    @staticmethod
    def is_registered(event_id: int, principal: Principal) -> bool:
        EventRegistrationService._get_event(event_id)
        return EventRegistrationRepository.exists_active(event_id, principal.user_id)
