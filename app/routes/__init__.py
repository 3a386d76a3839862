from flask import request
from app.exceptions import BadRequestError


def parse_body(schema, required=True):
    """Validate the JSON body against a pydantic schema.

    Raises pydantic's ValidationError for field problems; the error handlers
    turn that into a per-field map.
    """
    data = request.get_json(silent=True)
    if data is None:
        if required:
            raise BadRequestError("No data provided")
        data = {}
    if not isinstance(data, dict):
        raise BadRequestError("Request body must be a JSON object")
    return schema.model_validate(data)


def request_reason():
    """The optional ``reason`` from the query string, else from a JSON object body."""
    reason = request.args.get("reason")
    if reason:
        return reason
    data = request.get_json(silent=True)
    if isinstance(data, dict):
        return data.get("reason")
    return None
