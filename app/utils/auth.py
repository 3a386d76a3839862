from dataclasses import dataclass
from functools import wraps
from flask_jwt_extended import jwt_required, get_jwt_identity
from app.models.enums import UserRole


@dataclass(frozen=True)
class Principal:
    """The authenticated caller, handed explicitly to every service call."""

    user_id: int
    username: str
    role: UserRole

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    @property
    def is_organizer(self) -> bool:
        return self.role in (UserRole.ORGANIZER, UserRole.ADMIN)

    @property
    def is_player(self) -> bool:
        return self.role == UserRole.PLAYER

    @classmethod
    def from_user(cls, user) -> "Principal":
        return cls(user_id=user.id, username=user.username, role=user.role)


def can_manage_event(principal: Principal, event) -> bool:
    return principal.is_admin or event.organizer_id == principal.user_id


def can_view_registration(principal: Principal, registration) -> bool:
    return (
        registration.user_id == principal.user_id
        or can_manage_event(principal, registration.event)
    )


def principal_required(f):
    """Require a valid bearer token and pass the resolved Principal first."""

    @wraps(f)
    @jwt_required()
    def decorated(*args, **kwargs):
        from app.services.user_service import UserService

        principal = UserService.resolve_principal(get_jwt_identity())
        return f(principal, *args, **kwargs)

    return decorated
