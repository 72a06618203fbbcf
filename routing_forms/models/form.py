"""RoutingForm model for storing routing form definitions.

This module defines the RoutingForm model. A form owns an ordered list of
field definitions and, optionally, a list of routes evaluated elsewhere.
"""

from datetime import datetime, timezone
from typing import Optional, Any

from sqlalchemy import (
    JSON,
    Boolean,
    DateTime,
    String,
    Text,
    false,
)
from sqlalchemy.orm import Mapped, column_property, mapped_column, relationship

from routing_forms.models.database import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class RoutingForm(Base):
    """Model for a routing form definition.

    The primary key is supplied by the caller, which is what makes writes
    upserts rather than inserts.

    The ``routes`` column has three observable states:
        - SQL NULL: routes were never configured
        - JSON ``null``: routes were explicitly cleared
        - JSON array: the configured routes

    ``routes_configured`` is computed in SQL (``routes IS NOT NULL``) because
    both NULL flavours load as Python ``None``.

    Attributes:
        id: Caller-supplied primary key
        name: Display name
        description: Optional free-text description
        disabled: Whether the form is disabled
        fields: Ordered list of field definitions (JSON)
        routes: Ordered list of routes, JSON null, or SQL NULL
        user_id: Owner's user id, fixed at creation
        created_at: Creation timestamp (list ordering)
        updated_at: Timestamp of the last write
        routes_configured: True when routes were ever set or cleared
        responses: Relationship to submitted FormResponse rows
    """

    __tablename__ = "app_routing_forms_forms"

    id: Mapped[str] = mapped_column(
        String(255),
        primary_key=True,
        comment="Caller-supplied form identifier"
    )

    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Display name"
    )
    description: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
        comment="Optional description"
    )
    disabled: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        server_default=false(),
        comment="Whether the form is disabled"
    )

    fields: Mapped[list[dict[str, Any]]] = mapped_column(
        JSON,
        nullable=False,
        default=list,
        comment="Ordered field definitions"
    )
    routes: Mapped[Optional[list[dict[str, Any]]]] = mapped_column(
        JSON,
        nullable=True,
        comment="Routes; JSON null when cleared, SQL NULL when never set"
    )

    user_id: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        index=True,
        comment="Owner user id"
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        index=True,
        comment="When the form was created"
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        onupdate=utcnow,
        comment="Last update timestamp"
    )

    routes_configured: Mapped[bool] = column_property(routes.is_not(None))

    responses: Mapped[list["FormResponse"]] = relationship(
        "FormResponse",
        back_populates="form",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        """String representation for debugging."""
        return (
            f"<RoutingForm(id={self.id}, "
            f"name={self.name}, "
            f"user_id={self.user_id}, "
            f"fields={len(self.fields or [])})>"
        )
