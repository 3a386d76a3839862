from app.services.user_service import UserService
from app.services.event_service import EventService
from app.services.event_registration_service import EventRegistrationService
from app.services.event_query_service import EventQueryService
