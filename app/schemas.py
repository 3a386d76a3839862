"""
Request schemas for the JSON API.

Each pydantic model validates one request body. Field constraints mirror the
column sizes in ``app.models``; rules that span several fields (dates, fees,
participant limits) are enforced by the services so they surface as
``BadRequestError`` rather than per-field errors.
"""
from datetime import date, datetime, time
from decimal import Decimal
from typing import Any, Dict, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.models.enums import EventVisibility, ParticipationType, UserRole
from app.utils.clock import to_naive_utc


class _RequestSchema(BaseModel):
    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True)


class SignupRequest(_RequestSchema):
    username: str = Field(..., min_length=3, max_length=50)
    email: str = Field(..., pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$", max_length=255)
    phone_number: str = Field(..., min_length=7, max_length=20)
    password: str = Field(..., min_length=6, max_length=128)
    role: UserRole
    game_id: Optional[str] = Field(None, max_length=50)
    in_game_name: Optional[str] = Field(None, max_length=100)


class LoginRequest(_RequestSchema):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class _EventFields(_RequestSchema):
    @field_validator("registration_open_date", "registration_close_date", check_fields=False)
    @classmethod
    def _as_naive_utc(cls, value):
        if isinstance(value, datetime):
            return to_naive_utc(value)
        return value


class CreateEventRequest(_EventFields):
    event_name: str = Field(..., min_length=3, max_length=200)
    game_name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=5000)

    event_date: date
    event_start_time: time
    event_end_time: time
    registration_open_date: datetime
    registration_close_date: datetime

    participation_type: ParticipationType
    team_size: int = Field(..., ge=1, le=100)
    max_participants: int = Field(..., ge=1, le=1000)
    min_participants: int = Field(..., ge=1)
    allowed_ranks: Optional[str] = Field(None, max_length=500)
    platform: Optional[str] = Field(None, max_length=50)

    is_paid: bool
    entry_fee: Optional[Decimal] = Field(None, ge=0)
    prize_pool: Optional[Decimal] = Field(None, ge=0)
    prize_distribution: Optional[Dict[str, Any]] = None
    refund_policy: Optional[str] = Field(None, max_length=2000)

    map: Optional[str] = Field(None, max_length=100)
    mode: Optional[str] = Field(None, max_length=100)
    server_region: Optional[str] = Field(None, max_length=50)
    room_id: Optional[str] = Field(None, max_length=100)
    room_password: Optional[str] = Field(None, max_length=100)
    rules: Optional[str] = Field(None, max_length=5000)

    contact: Optional[str] = Field(None, max_length=200)
    thumbnail_url: Optional[str] = Field(None, max_length=500)
    live_stream_link: Optional[str] = Field(None, max_length=500)
    remarks: Optional[str] = Field(None, max_length=2000)
    visibility: EventVisibility = EventVisibility.PUBLIC


class UpdateEventRequest(_EventFields):
    """Every field optional; only the keys present in the body are applied."""

    event_name: Optional[str] = Field(None, min_length=3, max_length=200)
    game_name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=5000)

    event_date: Optional[date] = None
    event_start_time: Optional[time] = None
    event_end_time: Optional[time] = None
    registration_open_date: Optional[datetime] = None
    registration_close_date: Optional[datetime] = None

    participation_type: Optional[ParticipationType] = None
    team_size: Optional[int] = Field(None, ge=1, le=100)
    max_participants: Optional[int] = Field(None, ge=1, le=1000)
    min_participants: Optional[int] = Field(None, ge=1)
    allowed_ranks: Optional[str] = Field(None, max_length=500)
    platform: Optional[str] = Field(None, max_length=50)

    is_paid: Optional[bool] = None
    entry_fee: Optional[Decimal] = Field(None, ge=0)
    prize_pool: Optional[Decimal] = Field(None, ge=0)
    prize_distribution: Optional[Dict[str, Any]] = None
    refund_policy: Optional[str] = Field(None, max_length=2000)

    map: Optional[str] = Field(None, max_length=100)
    mode: Optional[str] = Field(None, max_length=100)
    server_region: Optional[str] = Field(None, max_length=50)
    room_id: Optional[str] = Field(None, max_length=100)
    room_password: Optional[str] = Field(None, max_length=100)
    rules: Optional[str] = Field(None, max_length=5000)

    contact: Optional[str] = Field(None, max_length=200)
    thumbnail_url: Optional[str] = Field(None, max_length=500)
    live_stream_link: Optional[str] = Field(None, max_length=500)
    remarks: Optional[str] = Field(None, max_length=2000)
    visibility: Optional[EventVisibility] = None

    def changes(self) -> dict:
        """The field mask: exactly the keys the client sent, nulls included."""
        return self.model_dump(exclude_unset=True)


class RegisterEventRequest(_RequestSchema):
    team_name: Optional[str] = Field(None, max_length=100)
    additional_notes: Optional[str] = Field(None, max_length=1000)
    transaction_id: Optional[str] = Field(None, max_length=255)


def field_errors(exc) -> dict:
    """Flatten a pydantic ValidationError into ``{field: message}``."""
    errors = {}
    for error in exc.errors():
        field = ".".join(str(part) for part in error["loc"]) or "body"
        errors.setdefault(field, error["msg"])
    return errors
