# storefront/utils/request.py
from flask import request

from ..errors import ValidationError

# largest id a signed 64-bit INTEGER column can hold
MAX_ID = 2**63 - 1


def json_body() -> dict:
    """The JSON object sent with the request; an absent or unparsable body reads as ``{}``."""
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data

def parse_id(raw, message):
    """Row id from client input (int or digit string), rejected with ``message`` when out of range."""
    if isinstance(raw, bool) or (isinstance(raw, float) and not raw.is_integer()):
        raise ValidationError(message)
    try:
        value = int(raw)
    except (TypeError, ValueError, OverflowError):
        raise ValidationError(message)
    if not 0 < value <= MAX_ID:
        raise ValidationError(message)
    return value
