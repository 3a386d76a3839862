from flask import Blueprint, jsonify, request
from app.routes import request_reason
from app.services import EventRegistrationService
from app.utils.auth import principal_required
from app.utils.pagination import PageRequest, page_to_dict

registration_bp = Blueprint("registration", __name__)


@registration_bp.route("/event/<int:event_id>", methods=["GET"])
@principal_required
def get_event_registrations(principal, event_id):
    page_request = PageRequest.from_args(request.args, size=20, sort_by="registered_at", direction="desc")
    page = EventRegistrationService.list_for_event(event_id, principal, page_request)
    return jsonify(page_to_dict(page, lambda registration: registration.to_dict())), 200


@registration_bp.route("/event/<int:event_id>/confirmed", methods=["GET"])
@principal_required
def get_confirmed_registrations(principal, event_id):
    registrations = EventRegistrationService.list_confirmed(event_id, principal)
    return jsonify([registration.to_dict() for registration in registrations]), 200


@registration_bp.route("/<int:registration_id>/confirm", methods=["PUT"])
@principal_required
def confirm_registration(principal, registration_id):
    registration = EventRegistrationService.confirm(registration_id, principal)
    return jsonify(registration.to_dict()), 200


@registration_bp.route("/<int:registration_id>/reject", methods=["PUT"])
@principal_required
def reject_registration(principal, registration_id):
    registration = EventRegistrationService.reject(registration_id, principal, request_reason())
    return jsonify(registration.to_dict()), 200
