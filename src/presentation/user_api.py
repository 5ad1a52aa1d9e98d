"""User API - registration and profile update endpoints."""

from datetime import datetime
from typing import Annotated
from email_validator import EmailNotValidError, validate_email
from fastapi import APIRouter, Depends
from pydantic import AfterValidator, BaseModel, Field
from sqlalchemy.orm import Session

from Data.database import get_db
from services import user_service

router = APIRouter()


def _check_email(value: str) -> str:
    # Validate only; the address is stored exactly as submitted
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError as exc:
        raise ValueError(str(exc)) from exc
    return value


Email = Annotated[str, AfterValidator(_check_email)]


class RegisterRequest(BaseModel):
    email: Email
    password: str = Field(min_length=6)
    name: str = Field(min_length=1)
    ui_color_theme: str = "blue"


class UserUpdate(BaseModel):
    email: Email | None = None
    name: str | None = Field(default=None, min_length=1)
    ui_color_theme: str | None = None
    current_password: str | None = None
    new_password: str | None = Field(default=None, min_length=6)


class PublicUser(BaseModel):
    id: int
    email: str
    name: str
    ui_color_theme: str
    created_at: datetime
    updated_at: datetime


class AuthResponse(BaseModel):
    user: PublicUser
    token: str


@router.post("/register", response_model=AuthResponse)
async def register(body: RegisterRequest, db: Session = Depends(get_db)):
    """Register a new user account and receive a session token."""
    return user_service.register_user(
        db,
        email=body.email,
        password=body.password,
        name=body.name,
        ui_color_theme=body.ui_color_theme,
    )


@router.patch("/{user_id}", response_model=PublicUser)
async def update_user(
    user_id: int,
    body: UserUpdate,
    db: Session = Depends(get_db),
):
    """Update profile fields and, with the current password, the password."""
    return user_service.update_user(
        db,
        user_id,
        email=body.email,
        name=body.name,
        ui_color_theme=body.ui_color_theme,
        current_password=body.current_password,
        new_password=body.new_password,
    )
