from datetime import datetime, timezone
from flask import jsonify, request, current_app
from pydantic import ValidationError
from sqlalchemy.exc import IntegrityError
from werkzeug.exceptions import HTTPException
from app.exceptions import ApiError, MissingFieldsError
from app.extensions import db
from app.schemas import field_errors


def _error_body(status, error, message):
    return {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "status": status,
        "error": error,
        "message": message,
        "path": request.path,
    }


def register_error_handlers(app):
    @app.errorhandler(MissingFieldsError)
    def handle_missing_fields(e):
        body = _error_body(e.status_code, "Missing required fields", e.message)
        body["missing_fields"] = e.fields
        return jsonify(body), e.status_code

    @app.errorhandler(ApiError)
    def handle_api_error(e):
        current_app.logger.info(f"{request.method} {request.path} -> {e.status_code}: {e.message}")
        return jsonify(_error_body(e.status_code, e.title, e.message)), e.status_code

    @app.errorhandler(ValidationError)
    def handle_validation_error(e):
        body = _error_body(400, "Validation failed", "Request body failed validation")
        body["field_errors"] = field_errors(e)
        return jsonify(body), 400

    @app.errorhandler(IntegrityError)
    def handle_integrity_error(e):
        db.session.rollback()
        current_app.logger.warning(f"Integrity error on {request.path}: {e.orig}")
        return jsonify(_error_body(409, "Conflict", "The request conflicts with existing data")), 409

    @app.errorhandler(Exception)
    def handle_unexpected_error(e):
        if isinstance(e, HTTPException):
            return jsonify(_error_body(e.code, e.name, e.description)), e.code
        db.session.rollback()
        current_app.logger.error(f"Unhandled error on {request.path}: {str(e)}", exc_info=True)
        return jsonify(_error_body(500, "Internal Server Error", "An unexpected error occurred")), 500
