from flask import Blueprint, jsonify, request
from app.exceptions import MissingFieldsError
from app.routes import parse_body
from app.schemas import RegisterEventRequest
from app.services import EventService, EventQueryService, EventRegistrationService
from app.utils.auth import principal_required
from app.utils.pagination import PageRequest, page_to_dict

player_event_bp = Blueprint("player_event", __name__)


def _events_page(page):
    return page_to_dict(page, lambda event: event.to_dict())


def _registrations_page(page):
    return page_to_dict(page, lambda registration: registration.to_dict())


@player_event_bp.route("/public", methods=["GET"])
def get_public_events():
    page_request = PageRequest.from_args(request.args, size=10, sort_by="event_date", direction="asc")
    return jsonify(_events_page(EventQueryService.public_events(page_request))), 200


@player_event_bp.route("/upcoming", methods=["GET"])
def get_upcoming_events():
    page_request = PageRequest.from_args(request.args, size=10, sort_by="event_date", direction="asc")
    page = EventQueryService.upcoming_events(page_request.page, page_request.size)
    return jsonify(_events_page(page)), 200


@player_event_bp.route("/search", methods=["GET"])
def search_events():
    keyword = request.args.get("keyword")
    if keyword is None:
        raise MissingFieldsError(["keyword"])
    page_request = PageRequest.from_args(request.args, size=10, sort_by="event_date", direction="asc")
    return jsonify(_events_page(EventQueryService.search_events(keyword, page_request))), 200


@player_event_bp.route("/game/<string:game_name>", methods=["GET"])
def get_events_by_game(game_name):
    page_request = PageRequest.from_args(request.args, size=10, sort_by="event_date", direction="asc")
    return jsonify(_events_page(EventQueryService.events_by_game(game_name, page_request))), 200


@player_event_bp.route("/<int:event_id>", methods=["GET"])
def get_event(event_id):
    return jsonify(EventService.get_event(event_id).to_dict()), 200


@player_event_bp.route("/code/<string:event_code>", methods=["GET"])
def get_event_by_code(event_code):
    return jsonify(EventService.get_event_by_code(event_code).to_dict()), 200


@player_event_bp.route("/<int:event_id>/register", methods=["POST"])
@principal_required
def register_for_event(principal, event_id):
    register_request = parse_body(RegisterEventRequest, required=False)
    registration = EventRegistrationService.register(event_id, principal, register_request)
    return jsonify(registration.to_dict()), 201


@player_event_bp.route("/registration/<int:registration_id>", methods=["DELETE"])
@principal_required
def cancel_registration(principal, registration_id):
    EventRegistrationService.cancel(registration_id, principal)
    return jsonify({"message": "Registration cancelled successfully"}), 200


@player_event_bp.route("/my-registrations", methods=["GET"])
@principal_required
def get_my_registrations(principal):
    page_request = PageRequest.from_args(request.args, size=10, sort_by="registered_at", direction="desc")
    page = EventQueryService.my_registrations(principal, page_request)
    return jsonify(_registrations_page(page)), 200


@player_event_bp.route("/my-registrations/upcoming", methods=["GET"])
@principal_required
def get_my_upcoming_registrations(principal):
    registrations = EventQueryService.my_upcoming_registrations(principal)
    return jsonify([registration.to_dict() for registration in registrations]), 200


@player_event_bp.route("/registration/<int:registration_id>", methods=["GET"])
@principal_required
def get_registration(principal, registration_id):
    registration = EventRegistrationService.get_registration(registration_id, principal)
    return jsonify(registration.to_dict()), 200


@player_event_bp.route("/<int:event_id>/is-registered", methods=["GET"])
@principal_required
def is_registered(principal, event_id):
    registered = EventRegistrationService.is_registered(event_id, principal)
    return jsonify({"event_id": event_id, "registered": registered}), 200
