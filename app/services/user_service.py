from app.models import User
from app.models.enums import UserRole
from werkzeug.security import generate_password_hash, check_password_hash
from flask_jwt_extended import create_access_token
from app.repositories import UserRepository
from app.exceptions import BadRequestError, AuthenticationError
from app.schemas import SignupRequest
from app.utils.auth import Principal
from app.utils.transaction import atomic
import logging

logger = logging.getLogger(__name__)


class UserService:
    @staticmethod
    def _issue_token(user: User) -> dict:
        access_token = create_access_token(
            identity=str(user.id),
            additional_claims={"username": user.username, "role": user.role.value},
        )
        return {"token": access_token, "type": "Bearer", "user": user.to_dict()}

    @staticmethod
    def sign_up(request: SignupRequest):
        if UserRepository.find_by_username(request.username):
            logger.warning(f"Signup attempt with existing username: {request.username}")
            raise BadRequestError("Username is already taken")
        if UserRepository.find_by_email(request.email):
            logger.warning(f"Signup attempt with existing email: {request.email}")
            raise BadRequestError("Email is already in use")
        if UserRepository.find_by_phone_number(request.phone_number):
            raise BadRequestError("Phone number is already in use")

        is_player = request.role == UserRole.PLAYER
        if is_player:
            if not request.game_id:
                raise BadRequestError("Game ID is required for Player role")
            if not request.in_game_name:
                raise BadRequestError("In-game name is required for Player role")

        user = User(
            username=request.username,
            email=request.email,
            phone_number=request.phone_number,
            password=generate_password_hash(request.password),
            role=request.role,
            game_id=request.game_id if is_player else None,
            in_game_name=request.in_game_name if is_player else None,
            enabled=True,
        )

        with atomic():
            UserRepository.sign_up(user)

        logger.info(f"User created successfully: {user.username} ({user.role.value})")
        return UserService._issue_token(user)

    @staticmethod
    def sign_in(username, password):
        user = UserRepository.find_by_username(username)
        if not user:
            logger.warning(f"Login attempt with non-existent username: {username}")
            raise AuthenticationError("Invalid username or password")

        if not check_password_hash(user.password, password):
            logger.warning(f"Failed login attempt for user: {username}")
            raise AuthenticationError("Invalid username or password")

        if not user.enabled:
            logger.warning(f"Login attempt for disabled user: {username}")
            raise AuthenticationError("Account is disabled")

        logger.info(f"User logged in successfully: {username}")
        return UserService._issue_token(user)

    @staticmethod
    def resolve_principal(identity) -> Principal:
        """Turn a token subject into the caller's Principal."""
        try:
            user = UserRepository.find_by_id(int(identity))
        except (TypeError, ValueError):
            user = None
        if not user or not user.enabled:
            raise AuthenticationError("User not found or disabled")
        return Principal.from_user(user)

    @staticmethod
    def get_profile(principal: Principal) -> User:
        user = UserRepository.find_by_id(principal.user_id)
        if not user:
            raise AuthenticationError("User not found")
        return user
