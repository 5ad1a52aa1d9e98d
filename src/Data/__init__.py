"""
Data layer - database engine, models, and session utilities.
"""

from Data.database import Base, make_engine, make_session_factory, get_db, init_db, utcnow  # noqa: F401
from Data.models import (  # noqa: F401
    User,
    Task,
    TaskPriority,
)
