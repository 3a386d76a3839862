from flask import Blueprint, jsonify, request
from app.routes import parse_body, request_reason
from app.schemas import CreateEventRequest, UpdateEventRequest
from app.services import EventService, EventQueryService
from app.utils.auth import principal_required
from app.utils.pagination import PageRequest, page_to_dict

organizer_event_bp = Blueprint("organizer_event", __name__)


@organizer_event_bp.route("", methods=["POST"])
@principal_required
def create_event(principal):
    create_request = parse_body(CreateEventRequest)
    event = EventService.create_event(principal, create_request)
    return jsonify(event.to_dict()), 201


@organizer_event_bp.route("/<int:event_id>", methods=["PUT"])
@principal_required
def update_event(principal, event_id):
    update_request = parse_body(UpdateEventRequest)
    event = EventService.update_event(event_id, principal, update_request)
    return jsonify(event.to_dict()), 200


@organizer_event_bp.route("/<int:event_id>", methods=["DELETE"])
@principal_required
def delete_event(principal, event_id):
    result = EventService.delete_event(event_id, principal)
    return jsonify(result), 200


@organizer_event_bp.route("/<int:event_id>/publish", methods=["POST"])
@principal_required
def publish_event(principal, event_id):
    event = EventService.publish_event(event_id, principal)
    return jsonify(event.to_dict()), 200


@organizer_event_bp.route("/<int:event_id>/cancel", methods=["POST"])
@principal_required
def cancel_event(principal, event_id):
    event = EventService.cancel_event(event_id, principal, request_reason())
    return jsonify(event.to_dict()), 200


@organizer_event_bp.route("/my-events", methods=["GET"])
@principal_required
def get_my_events(principal):
    page_request = PageRequest.from_args(request.args, size=10, sort_by="created_at", direction="desc")
    page = EventQueryService.my_events(principal, page_request)
    return jsonify(page_to_dict(page, lambda event: event.to_dict())), 200


@organizer_event_bp.route("/<int:event_id>", methods=["GET"])
@principal_required
def get_event(principal, event_id):
    event = EventService.get_event(event_id)
    return jsonify(event.to_dict()), 200
