# Overview: Shared JSON error responses for route modules.

from flask import jsonify


def error_response(exc: Exception, status: int):
    body = {"error": str(exc)}
    details = getattr(exc, "details", None)
    if details:
        body["details"] = details
    return jsonify(body), status
