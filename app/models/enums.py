from enum import Enum


class EventStatus(Enum):
    DRAFT = "DRAFT"
    UPCOMING = "UPCOMING"
    REGISTRATION_OPEN = "REGISTRATION_OPEN"
    REGISTRATION_CLOSED = "REGISTRATION_CLOSED"
    ONGOING = "ONGOING"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class EventVisibility(Enum):
    PUBLIC = "PUBLIC"
    PRIVATE = "PRIVATE"


class ParticipationType(Enum):
    SOLO = "SOLO"
    DUO = "DUO"
    SQUAD = "SQUAD"


class RegistrationStatus(Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    REJECTED = "REJECTED"
    CANCELLED = "CANCELLED"


class UserRole(Enum):
    PLAYER = "PLAYER"
    ORGANIZER = "ORGANIZER"
    ADMIN = "ADMIN"


# Registrations in these states hold a slot on their event
ACTIVE_REGISTRATION_STATUSES = (RegistrationStatus.PENDING, RegistrationStatus.CONFIRMED)
