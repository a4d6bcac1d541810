from __future__ import annotations

from flask import request

from ..core.exceptions import ValidationError


def json_object() -> dict:
    """The JSON body as a dict; an absent or unparsable body counts as empty."""
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def form_or_json() -> dict:
    # Multipart requests carry their fields in the form alongside files.
    if request.form:
        return request.form.to_dict()
    return json_object()
