import math

from flask import request

from app.errors import ValidationError


def percentage(part, whole):
    """``part/whole`` as a whole-number percent, halves rounded up; 0 when whole is 0."""
    if not whole:
        return 0
    return int(math.floor(part / whole * 100 + 0.5))


def json_body():
    """The request's JSON object; an empty dict when there is no body."""
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data
