# --- storefront/utils/api.py ---
from flask import jsonify

def _as_list(data):
    if data is None:
        return []
    if isinstance(data, (list, tuple)):
        return list(data)
    return [data]

def api_ok(message, data=None):
    return {
        "success": True,
        "message": message,
        "data": _as_list(data),
    }

def api_error(message, data=None):
    return {
        "success": False,
        "message": message,
        "data": _as_list(data),
    }

# ---- standard API response format ------------------------------------------
def ok(msg, data=None, status=200):
    r = jsonify(api_ok(msg, data)); r.status_code = status; return r
