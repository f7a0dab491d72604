"""Error taxonomy shared by services, the auth gate and the routes.

Every error a client can see is an ``ApiError``: it carries the HTTP status,
a stable ``code`` naming the error kind and a human readable message, and
renders as ``{"error": message, "code": code}``.
"""
from flask import jsonify


class ApiError(Exception):
    status_code = 500
    code = "InternalError"
    message = "Internal server error"

    def __init__(self, message=None, code=None):
        super().__init__(message or self.message)
        if message is not None:
            self.message = message
        if code is not None:
            self.code = code

    def to_dict(self):
        return {"error": self.message, "code": self.code}


class ValidationError(ApiError):
    status_code = 400
    code = "ValidationError"
    message = "Invalid request"


class AuthError(ApiError):
    status_code = 401
    code = "AuthError"
    message = "Authentication required"


class ForbiddenError(ApiError):
    status_code = 403
    code = "Forbidden"
    message = "Forbidden"


class NotFoundError(ApiError):
    status_code = 404
    code = "NotFound"
    message = "Not found"


class InternalError(ApiError):
    pass


class MediaStorageError(InternalError):
    status_code = 503
    code = "MediaStorageUnavailable"
    message = "Media storage is unavailable"


def error_response(error: ApiError):
    return jsonify(error.to_dict()), error.status_code
