from flask import current_app
from marshmallow import ValidationError as SchemaValidationError

from app.db import db
from app.errors import AuthError, ValidationError
from app.repositories import user_repository
from app.schemas.user_schema import CredentialsSchema, UserResponseSchema
from app.services.credential_service import hash_password, issue_token, verify_password


_credentials_schema = CredentialsSchema()
_user_schema = UserResponseSchema()


def _require_non_empty_string(value):
    return isinstance(value, str) and value.strip()


def _normalize_email(email: str) -> str:
    return email.strip().lower()


def _invalid_credentials():
    return AuthError("Invalid email or password", code="InvalidCredentials")


def register(email, password):
    if not _require_non_empty_string(email) or not _require_non_empty_string(password):
        raise ValidationError(
            "Email and password are required",
            code="MissingCredentials",
        )

    email = _normalize_email(email)
    try:
        _credentials_schema.load({"email": email, "password": password})
    except SchemaValidationError as e:
        raise ValidationError("Invalid email address", code="InvalidEmail") from e

    if user_repository.get_by_email(email):
        raise ValidationError("Email already in use", code="EmailInUse")

    user = user_repository.create_user(
        email=email,
        password_hash=hash_password(password),
    )
    db.session.commit()

    current_app.logger.info("Registered user %s (id=%s)", user.email, user.id)
    return _user_schema.dump(user)


def login(email, password):
    if not _require_non_empty_string(email) or not _require_non_empty_string(password):
        raise _invalid_credentials()

    email = _normalize_email(email)

    user = user_repository.get_by_email(email)
    if not user:
        current_app.logger.warning("Login attempt for unknown email %s", email)
        raise _invalid_credentials()

    if not verify_password(password, user.password):
        current_app.logger.warning("Wrong password for user id=%s", user.id)
        raise _invalid_credentials()

    current_app.logger.info("User id=%s logged in", user.id)
    return issue_token({"id": user.id, "email": user.email})
