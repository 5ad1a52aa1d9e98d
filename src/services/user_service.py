"""
User service - registration and profile updates.
"""

import logging

from sqlalchemy.orm import Session

from Data.database import utcnow
from Data.models import User
from services import auth_service
from services.errors import (
    DuplicateEmailError,
    InvalidCredentialsError,
    NotFoundError,
    store_errors,
)

logger = logging.getLogger(__name__)


def register_user(
    db: Session,
    email: str,
    password: str,
    name: str,
    ui_color_theme: str = "blue",
) -> dict:
    """Register a new user and issue a session token.

    The lookup below only fails fast; two concurrent registrations can both
    pass it, and the loser is rejected by the unique index on ``users.email``.
    """
    with store_errors(db):
        existing = db.query(User.id).filter(User.email == email).first()
    if existing:
        raise DuplicateEmailError()

    now = utcnow()
    user = User(
        email=email,
        password_hash=auth_service.hash_password(password),
        name=name,
        ui_color_theme=ui_color_theme,
        created_at=now,
        updated_at=now,
    )
    with store_errors(db, on_integrity=DuplicateEmailError):
        db.add(user)
        db.commit()
        db.refresh(user)

    logger.info("Registered user %s", user.id)
    token = auth_service.create_access_token(user.id, user.email)
    return {"user": _user_to_public(user), "token": token}


def update_user(
    db: Session,
    user_id: int,
    email: str | None = None,
    name: str | None = None,
    ui_color_theme: str | None = None,
    current_password: str | None = None,
    new_password: str | None = None,
) -> dict:
    """Update a user profile. Only provided fields are changed."""
    with store_errors(db):
        user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise NotFoundError("User not found")

    password_hash = None
    if new_password is not None:
        if current_password is None or not auth_service.verify_password(
            current_password, user.password_hash
        ):
            raise InvalidCredentialsError()
        password_hash = auth_service.hash_password(new_password)

    if email is not None and email != user.email:
        with store_errors(db):
            taken = (
                db.query(User.id)
                .filter(User.email == email, User.id != user.id)
                .first()
            )
        if taken:
            raise DuplicateEmailError()
        user.email = email
    if name is not None:
        user.name = name
    if ui_color_theme is not None:
        user.ui_color_theme = ui_color_theme
    if password_hash is not None:
        user.password_hash = password_hash
    user.updated_at = utcnow()

    with store_errors(db, on_integrity=DuplicateEmailError):
        db.commit()
        db.refresh(user)

    logger.info("Updated user %s", user.id)
    return _user_to_public(user)


def _user_to_public(user: User) -> dict:
    return {
        "id": user.id,
        "email": user.email,
        "name": user.name,
        "ui_color_theme": user.ui_color_theme,
        "created_at": user.created_at.isoformat() if user.created_at else None,
        "updated_at": user.updated_at.isoformat() if user.updated_at else None,
    }
