"""Tests for the paging helpers and request schemas."""

from datetime import datetime, timedelta, timezone
import pytest
from pydantic import ValidationError

from app.exceptions import BadRequestError
from app.schemas import RegisterEventRequest, UpdateEventRequest, field_errors
from app.utils.pagination import PageRequest


class TestPageRequest:
    """Tests for PageRequest construction."""

    def test_defaults_from_empty_args(self):
        """Test missing query args fall back to the given defaults."""
        page_request = PageRequest.from_args({}, size=20, sort_by="registered_at", direction="desc")

        assert page_request == PageRequest(page=0, size=20, sort_by="registered_at", direction="desc")

    def test_reads_query_args(self):
        """Test page, size, sort_by and sort_dir are read."""
        args = {"page": "2", "size": "5", "sort_by": "event_name", "sort_dir": "ASC"}

        page_request = PageRequest.from_args(args)

        assert page_request.page == 2
        assert page_request.size == 5
        assert page_request.sort_by == "event_name"
        assert page_request.direction == "asc"

    @pytest.mark.parametrize(
        "args",
        [{"page": "-1"}, {"size": "0"}, {"page": "x"}, {"sort_dir": "up"}],
    )
    def test_invalid_args(self, args):
        """Test out of range or malformed values are bad requests."""
        with pytest.raises(BadRequestError):
            PageRequest.from_args(args)


class TestSchemas:
    """Tests for request schema behaviour."""

    def test_update_changes_only_sent_fields(self):
        """Test the field mask holds exactly the keys provided."""
        request = UpdateEventRequest(event_name="New Name", description=None)

        assert request.changes() == {"event_name": "New Name", "description": None}

    def test_aware_datetimes_become_naive_utc(self):
        """Test registration dates are normalised to naive UTC."""
        aware = datetime(2030, 5, 1, 12, 0, tzinfo=timezone(timedelta(hours=2)))

        request = UpdateEventRequest(registration_open_date=aware)

        assert request.registration_open_date == datetime(2030, 5, 1, 10, 0)

    def test_field_errors_map(self):
        """Test validation errors flatten to one message per field."""
        with pytest.raises(ValidationError) as exc_info:
            RegisterEventRequest(team_name="x" * 101, additional_notes="y" * 1001)

        errors = field_errors(exc_info.value)

        assert set(errors) == {"team_name", "additional_notes"}

    def test_strings_are_stripped(self):
        """Test surrounding whitespace is removed."""
        assert RegisterEventRequest(transaction_id="  TXN-1  ").transaction_id == "TXN-1"
