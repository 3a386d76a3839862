from app.repositories.user_repository import UserRepository
from app.repositories.event_repository import EventRepository
from app.repositories.event_registration_repository import EventRegistrationRepository
