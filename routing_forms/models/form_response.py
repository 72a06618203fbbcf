"""FormResponse model for storing submitted routing form answers.

This module defines the FormResponse model. Each row is one submission
against a form, keyed by the identity of whoever filled it in.
"""

from datetime import datetime

from sqlalchemy import (
    JSON,
    DateTime,
    ForeignKey,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from routing_forms.models.database import Base
from routing_forms.models.form import utcnow


class FormResponse(Base):
    """Model for a single form submission.

    At most one response may exist per (form_id, form_filler_id); the
    database enforces this with a unique constraint. Responses are deleted
    together with their form (ON DELETE CASCADE).

    Attributes:
        id: Primary key
        form_id: Foreign key to app_routing_forms_forms
        form_filler_id: Identifies the submitter or browser session
        response: Mapping of field reference to answer
        created_at: When the response was submitted
        form: Relationship to the parent RoutingForm
    """

    __tablename__ = "app_routing_forms_form_responses"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)

    form_id: Mapped[str] = mapped_column(
        String(255),
        ForeignKey("app_routing_forms_forms.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="Foreign key to app_routing_forms_forms table"
    )
    form_filler_id: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Submitter identity"
    )

    response: Mapped[dict[str, str]] = mapped_column(
        JSON,
        nullable=False,
        comment="Answers keyed by field reference"
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        comment="When the response was submitted"
    )

    form: Mapped["RoutingForm"] = relationship(
        "RoutingForm",
        back_populates="responses",
    )

    __table_args__ = (
        UniqueConstraint(
            "form_filler_id", "form_id",
            name="uq_form_responses_filler_form"
        ),
    )

    def __repr__(self) -> str:
        """String representation for debugging."""
        return (
            f"<FormResponse(id={self.id}, "
            f"form_id={self.form_id}, "
            f"form_filler_id={self.form_filler_id})>"
        )
