"""Tests for EventQueryService listings."""

from datetime import timedelta
import pytest

from app.exceptions import BadRequestError, UnauthorizedError
from app.models.enums import UserRole
from app.schemas import CreateEventRequest, RegisterEventRequest
from app.services import EventQueryService, EventRegistrationService, EventService
from app.utils.clock import utcnow
from app.utils.pagination import PageRequest
from tests.conftest import create_open_event, create_principal, event_payload


@pytest.fixture
def organizer(app):
    return create_principal("org_one", UserRole.ORGANIZER)


@pytest.fixture
def player(app):
    return create_principal("player_one")


def days_ahead(days):
    return (utcnow() + timedelta(days=days)).date().isoformat()


class TestPublicListings:
    """Tests for public, upcoming, search and by-game listings."""

    def test_public_events_only_open_and_public(self, organizer):
        """Test drafts, private and cancelled events are hidden."""
        visible = create_open_event(organizer, event_name="Open Cup")
        create_open_event(organizer, event_name="Invite Cup", visibility="PRIVATE")
        EventService.create_event(organizer, CreateEventRequest(**event_payload(event_name="Draft Cup")))
        cancelled = create_open_event(organizer, event_name="Gone Cup")
        EventService.cancel_event(cancelled.id, organizer)

        page = EventQueryService.public_events(PageRequest(sort_by="event_date", direction="asc"))

        assert [event.id for event in page.items] == [visible.id]
        assert page.total == 1

    def test_public_events_paging_and_sort(self, organizer):
        """Test pages follow the requested sort order."""
        ids = [
            create_open_event(organizer, event_name=f"Cup {days}", event_date=days_ahead(days)).id
            for days in (5, 3, 4)
        ]

        first = EventQueryService.public_events(PageRequest(page=0, size=2, sort_by="event_date", direction="asc"))
        second = EventQueryService.public_events(PageRequest(page=1, size=2, sort_by="event_date", direction="asc"))

        assert [event.id for event in first.items] == [ids[1], ids[2]]
        assert [event.id for event in second.items] == [ids[0]]
        assert first.pages == 2

    def test_unknown_sort_field_rejected(self, organizer):
        """Test sorting by a column outside the whitelist is refused."""
        with pytest.raises(BadRequestError):
            EventQueryService.public_events(PageRequest(sort_by="room_password"))

    def test_upcoming_events_ordered_by_date(self, organizer):
        """Test upcoming events come soonest first."""
        later = create_open_event(organizer, event_name="Later Cup", event_date=days_ahead(6))
        sooner = create_open_event(organizer, event_name="Sooner Cup", event_date=days_ahead(2))

        page = EventQueryService.upcoming_events()

        assert [event.id for event in page.items] == [sooner.id, later.id]

    def test_search_is_case_insensitive(self, organizer):
        """Test keyword matches name, game or description in any case."""
        by_name = create_open_event(organizer, event_name="Apex Legends Showdown", game_name="Apex")
        by_description = create_open_event(
            organizer, event_name="Weekend Brawl", game_name="Tekken", description="A SHOWDOWN for fighters"
        )
        create_open_event(organizer, event_name="Chess Night", game_name="Chess", description=None)

        page = EventQueryService.search_events("showdown", PageRequest(sort_by="event_name", direction="asc"))

        assert {event.id for event in page.items} == {by_name.id, by_description.id}

    def test_search_treats_wildcards_literally(self, organizer):
        """Test percent signs in a keyword do not match everything."""
        create_open_event(organizer, event_name="Plain Cup")

        page = EventQueryService.search_events("%", PageRequest(sort_by="event_date"))

        assert page.total == 0

    def test_blank_search_rejected(self, app):
        """Test an empty keyword is a bad request."""
        with pytest.raises(BadRequestError):
            EventQueryService.search_events("   ", PageRequest())

    def test_events_by_game(self, organizer):
        """Test filtering by game name."""
        valorant = create_open_event(organizer, game_name="Valorant")
        create_open_event(organizer, game_name="Dota 2")

        page = EventQueryService.events_by_game("valorant", PageRequest(sort_by="event_date"))

        assert [event.id for event in page.items] == [valorant.id]


class TestPersonalListings:
    """Tests for my_events and registration listings."""

    def test_my_events_for_organizer(self, organizer):
        """Test organizers see their own events in every status."""
        other = create_principal("org_two", UserRole.ORGANIZER)
        mine = EventService.create_event(organizer, CreateEventRequest(**event_payload()))
        create_open_event(other)

        page = EventQueryService.my_events(organizer, PageRequest())

        assert [event.id for event in page.items] == [mine.id]

    def test_my_events_refused_for_players(self, player):
        """Test players have no organized events."""
        with pytest.raises(UnauthorizedError):
            EventQueryService.my_events(player, PageRequest())

    def test_my_registrations(self, organizer, player):
        """Test a player sees all of their registrations."""
        first = create_open_event(organizer, event_name="First Cup")
        second = create_open_event(organizer, event_name="Second Cup")
        EventRegistrationService.register(first.id, player, RegisterEventRequest())
        EventRegistrationService.register(second.id, player, RegisterEventRequest(team_name="Solo Queue"))

        page = EventQueryService.my_registrations(player, PageRequest(sort_by="registered_at"))

        assert page.total == 2
        assert {registration.event_id for registration in page.items} == {first.id, second.id}

    def test_my_upcoming_registrations_skip_cancelled(self, organizer, player):
        """Test cancelled registrations drop out of the upcoming list."""
        kept = create_open_event(organizer, event_name="Kept Cup", event_date=days_ahead(4))
        dropped = create_open_event(organizer, event_name="Dropped Cup", event_date=days_ahead(2))
        EventRegistrationService.register(kept.id, player, RegisterEventRequest())
        registration = EventRegistrationService.register(dropped.id, player, RegisterEventRequest())
        EventRegistrationService.cancel(registration.id, player)

        upcoming = EventQueryService.my_upcoming_registrations(player)

        assert [r.event_id for r in upcoming] == [kept.id]
