from typing import List
from app.repositories.event_repository import EventRepository
from app.repositories.event_registration_repository import EventRegistrationRepository
from app.exceptions import BadRequestError, UnauthorizedError
from app.models import Event, EventRegistration
from app.services.event_registration_service import REGISTRATION_SORT_FIELDS
from app.utils.auth import Principal
from app.utils.clock import today
from app.utils.pagination import PageRequest, paginate

EVENT_SORT_FIELDS = {
    "event_date": Event.event_date,
    "created_at": Event.created_at,
    "updated_at": Event.updated_at,
    "event_name": Event.event_name,
    "game_name": Event.game_name,
    "entry_fee": Event.entry_fee,
    "prize_pool": Event.prize_pool,
    "slots_filled": Event.slots_filled,
    "max_participants": Event.max_participants,
    "registration_open_date": Event.registration_open_date,
    "registration_close_date": Event.registration_close_date,
    "status": Event.status,
}


def _page_events(query, page_request: PageRequest):
    return paginate(query, page_request, EVENT_SORT_FIELDS, tiebreaker=Event.id)


class EventQueryService:
    """Read-only listings over events and registrations."""

    @staticmethod
    def public_events(page_request: PageRequest):
        return _page_events(EventRepository.find_public_open(), page_request)

    @staticmethod
    def upcoming_events(page: int = 0, size: int = 10):
        page_request = PageRequest(page=page, size=size, sort_by="event_date", direction="asc")
        return _page_events(EventRepository.find_upcoming(today()), page_request)

    @staticmethod
    def search_events(keyword: str, page_request: PageRequest):
        if not keyword or not keyword.strip():
            raise BadRequestError("Search keyword is required")
        return _page_events(EventRepository.search(keyword.strip()), page_request)

    @staticmethod
    def events_by_game(game_name: str, page_request: PageRequest):
        return _page_events(EventRepository.find_by_game_name(game_name), page_request)

    @staticmethod
    def my_events(principal: Principal, page_request: PageRequest):
        if not principal.is_organizer:
            raise UnauthorizedError("Only organizers and admins have events")
        return _page_events(EventRepository.find_by_organizer(principal.user_id), page_request)

    @staticmethod
    def my_registrations(principal: Principal, page_request: PageRequest):
        return paginate(
            EventRegistrationRepository.find_by_user(principal.user_id),
            page_request,
            REGISTRATION_SORT_FIELDS,
            tiebreaker=EventRegistration.id,
        )

    @staticmethod
    def my_upcoming_registrations(principal: Principal) -> List[EventRegistration]:
        return EventRegistrationRepository.find_upcoming_by_user(principal.user_id, today())
