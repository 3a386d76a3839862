from flask import Blueprint, jsonify, make_response
from app.extensions import limiter
from app.routes import parse_body
from app.schemas import SignupRequest, LoginRequest
from app.services import UserService
from app.utils.auth import principal_required

user_bp = Blueprint("user", __name__)


@user_bp.route("/signup", methods=["POST"])
@limiter.limit("20 per hour")
def sign_up():
    signup_request = parse_body(SignupRequest)
    result = UserService.sign_up(signup_request)
    return make_response(jsonify(result), 201)


@user_bp.route("/login", methods=["POST"])
@limiter.limit("10 per minute")
def login():
    login_request = parse_body(LoginRequest)
    result = UserService.sign_in(login_request.username, login_request.password)
    return jsonify(result), 200


@user_bp.route("/me", methods=["GET"])
@principal_required
def get_profile(principal):
    user = UserService.get_profile(principal)
    return jsonify({"valid": True, "user": user.to_dict()}), 200
