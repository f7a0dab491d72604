"""Bearer token gate run in front of protected handlers.

``authenticate`` is a pure stage: it inspects the ``Authorization`` header and
returns either an identity or an ``ApiError`` value. ``auth_required`` chains
it in front of a view and short-circuits with the error response.
"""
from functools import wraps

from flask import current_app, g, request

from app.errors import AuthError, ForbiddenError, error_response
from app.services.credential_service import TokenError, verify_token


BEARER_PREFIX = "Bearer "


def _extract_bearer_token(authorization_header):
    if not authorization_header or not authorization_header.startswith(BEARER_PREFIX):
        return None
    token = authorization_header[len(BEARER_PREFIX):].strip()
    return token or None


def authenticate(authorization_header):
    token = _extract_bearer_token(authorization_header)
    if token is None:
        return None, AuthError(
            "Token is missing or malformed",
            code="MissingOrMalformedToken",
        )

    try:
        claims = verify_token(token)
    except TokenError as e:
        current_app.logger.warning("Rejected bearer token: %s", e)
        return None, ForbiddenError("Invalid token", code="InvalidToken")

    return {"id": claims["id"], "email": claims["email"]}, None


def auth_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        identity, error = authenticate(request.headers.get("Authorization"))
        if error is not None:
            return error_response(error)

        g.current_user = identity
        return view(*args, **kwargs)

    return wrapper


def get_current_user():
    return g.get("current_user")
