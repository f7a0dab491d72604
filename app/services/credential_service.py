"""Password hashing and bearer token issuance/verification.

Tokens are flask-jwt-extended access tokens signed with the app's
``JWT_SECRET_KEY``. Besides the standard ``sub`` claim they carry the user's
``id`` and ``email`` so the auth gate can resolve an identity without a
database round trip.
"""
import jwt as pyjwt
from flask import current_app
from flask_jwt_extended import create_access_token, decode_token
from flask_jwt_extended.exceptions import JWTExtendedException
from werkzeug.security import check_password_hash, generate_password_hash


class ConfigurationError(RuntimeError):
    pass


class TokenError(Exception):
    pass


class InvalidTokenError(TokenError):
    pass


class ExpiredTokenError(TokenError):
    pass


class MalformedTokenError(TokenError):
    pass


def require_signing_secret(config):
    secret = config.get("JWT_SECRET_KEY")
    if not isinstance(secret, str) or not secret.strip():
        raise ConfigurationError(
            "JWT_SECRET_KEY is not set; refusing to start without a token signing secret"
        )


def hash_password(plaintext: str) -> str:
    return generate_password_hash(plaintext)


def verify_password(plaintext, password_hash) -> bool:
    if not isinstance(plaintext, str) or not isinstance(password_hash, str):
        return False
    return check_password_hash(password_hash, plaintext)


def issue_token(claims: dict, ttl=None) -> str:
    """Sign an access token for ``claims`` (``id`` and ``email``).

    ``ttl`` is a ``timedelta``; it defaults to ``JWT_ACCESS_TOKEN_EXPIRES``.
    """
    if ttl is None:
        ttl = current_app.config["JWT_ACCESS_TOKEN_EXPIRES"]

    return create_access_token(
        identity=str(claims["id"]),
        expires_delta=ttl,
        additional_claims={
            "id": claims["id"],
            "email": claims["email"],
        },
    )


def verify_token(token: str) -> dict:
    if not isinstance(token, str) or not token:
        raise MalformedTokenError("Token is empty")

    try:
        decoded = decode_token(token)
    except pyjwt.ExpiredSignatureError as e:
        raise ExpiredTokenError("Token has expired") from e
    except pyjwt.InvalidSignatureError as e:
        raise InvalidTokenError("Token signature is invalid") from e
    except pyjwt.DecodeError as e:
        raise MalformedTokenError("Token could not be decoded") from e
    except (pyjwt.InvalidTokenError, JWTExtendedException) as e:
        raise InvalidTokenError(str(e) or "Token is invalid") from e

    if decoded.get("type") != "access":
        raise InvalidTokenError("Only access tokens are accepted")

    user_id = decoded.get("id")
    email = decoded.get("email")
    if not isinstance(user_id, int) or not isinstance(email, str):
        raise MalformedTokenError("Token is missing identity claims")

    return decoded
