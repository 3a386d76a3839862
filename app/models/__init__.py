from app.models.user import User
from app.models.event import Event
from app.models.event_registration import EventRegistration
from app.models.event_code_counter import EventCodeCounter
from app.models.enums import (
    EventStatus,
    EventVisibility,
    ParticipationType,
    RegistrationStatus,
    UserRole,
)
