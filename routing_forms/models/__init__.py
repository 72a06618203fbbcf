"""Database models and session management.

This package contains all SQLAlchemy ORM models and database utilities.
"""

from routing_forms.models.database import Base, engine, SessionLocal, get_db
from routing_forms.models.form import RoutingForm
from routing_forms.models.form_response import FormResponse

__all__ = [
    "Base",
    "engine",
    "SessionLocal",
    "get_db",
    "RoutingForm",
    "FormResponse",
]
