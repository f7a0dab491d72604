from sqlalchemy.exc import IntegrityError

from app.db import db
from app.errors import ValidationError
from app.models.user_model import User


def get_by_email(email: str):
    return User.query.filter_by(email=email).first()


def get_by_id(user_id: int):
    return db.session.get(User, user_id)


def create_user(email, password_hash):
    user = User(
        email=email,
        password=password_hash,
    )
    db.session.add(user)
    try:
        db.session.flush()
    except IntegrityError as e:
        # A concurrent registration won the race past the pre-check.
        db.session.rollback()
        raise ValidationError("Email already in use", code="EmailInUse") from e

    return user


def delete_user(user):
    db.session.delete(user)
    db.session.flush()
