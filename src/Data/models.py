"""
SQLAlchemy models for Taskdesk.
"""

from sqlalchemy import (
    Column,
    String,
    Text,
    DateTime,
    ForeignKey,
    Integer,
    Boolean,
    Enum,
)
from sqlalchemy.orm import relationship
import enum

from Data.database import Base, utcnow


# --------------------------------------------------------------------------- #
# Enums
# --------------------------------------------------------------------------- #

class TaskPriority(str, enum.Enum):
    low = "low"
    medium = "medium"
    high = "high"


# --------------------------------------------------------------------------- #
# Models
# --------------------------------------------------------------------------- #

class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    # Exact-match uniqueness: "a@x.com" and "A@X.COM" are different users.
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    name = Column(String(255), nullable=False)
    ui_color_theme = Column(String(50), nullable=False, default="blue")
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, nullable=False)

    tasks = relationship("Task", back_populates="user",
                         cascade="all, delete-orphan")


class Task(Base):
    __tablename__ = "tasks"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"),
                     nullable=False, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    completed = Column(Boolean, default=False, nullable=False)
    priority = Column(
        Enum(TaskPriority, name="priority_enum"),
        default=TaskPriority.medium,
        nullable=False,
    )
    due_date = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=utcnow, nullable=False, index=True)
    updated_at = Column(DateTime, default=utcnow, nullable=False)

    user = relationship("User", back_populates="tasks")
