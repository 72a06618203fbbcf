"""Routing form persistence service.

This module implements the routing form operations on top of a SQLAlchemy
session: listing, fetching, upserting and deleting forms, and recording
form responses. The caller's identity and the session are passed in
explicitly; nothing here reads request state.
"""

from dataclasses import dataclass
from typing import Optional

from sqlalchemy import JSON, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from routing_forms.models.form import RoutingForm, utcnow
from routing_forms.models.form_response import FormResponse
from routing_forms.schemas.form import FormInput, FormResponseInput, RoutesState
from routing_forms.logging_config import get_logger

logger = get_logger(__name__)

# SQLSTATE for unique_violation
UNIQUE_VIOLATION_SQLSTATE = "23505"


@dataclass(frozen=True)
class UserIdentity:
    """Authenticated caller, as provided by the request context."""
    id: str


class RoutingFormError(Exception):
    """Base class for routing form errors surfaced to callers."""
    code = "INTERNAL_SERVER_ERROR"


class FormNotFoundError(RoutingFormError):
    """Raised when an operation targets a form that does not exist."""
    code = "NOT_FOUND"

    def __init__(self, form_id: str):
        self.form_id = form_id
        super().__init__(f"Form not found: {form_id}")


class FormResponseConflictError(RoutingFormError):
    """Raised when a response already exists for the same form and filler."""
    code = "CONFLICT"

    def __init__(self, form_id: str, form_filler_id: str):
        self.form_id = form_id
        self.form_filler_id = form_filler_id
        super().__init__(
            f"Response already submitted for form {form_id} by {form_filler_id}"
        )


def is_unique_violation(exc: IntegrityError) -> bool:
    """Check whether an IntegrityError came from a unique constraint.

    Works for psycopg2 (``pgcode``), psycopg 3 (``sqlstate``) and sqlite3
    (message text).
    """
    orig = exc.orig
    sqlstate = getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)
    if sqlstate is not None:
        return sqlstate == UNIQUE_VIOLATION_SQLSTATE
    return "UNIQUE constraint failed" in str(orig)


class RoutingFormService:
    """Service for routing form CRUD and response submission."""

    def __init__(self, db: Session):
        """Initialize service.

        Args:
            db: SQLAlchemy database session
        """
        self.db = db

    def list_forms(self, identity: UserIdentity) -> list[RoutingForm]:
        """Return the caller's forms, oldest first."""
        return list(
            self.db.scalars(
                select(RoutingForm)
                .where(RoutingForm.user_id == identity.id)
                .order_by(RoutingForm.created_at.asc())
            )
        )

    def get_form(self, form_id: str) -> Optional[RoutingForm]:
        """Fetch a form by id.

        Ownership is not checked: forms are readable by id so they can be
        rendered for people filling them in.

        Returns:
            The form, or None if no form has this id
        """
        return self.db.execute(
            select(RoutingForm)
            .where(RoutingForm.id == form_id)
            .execution_options(populate_existing=True)
        ).scalar_one_or_none()

    def upsert_form(self, identity: UserIdentity, form_input: FormInput) -> RoutingForm:
        """Create a form, or overwrite the form with the same id.

        Runs as one INSERT ... ON CONFLICT (id) DO UPDATE statement so two
        concurrent writers never race between a lookup and an insert.

        On create the caller becomes the owner. On update the owner is kept;
        ``description`` and ``disabled`` are only changed when the input
        carries them, and ``routes`` only when present (null clears them).

        Args:
            identity: Authenticated caller
            form_input: Validated form payload

        Returns:
            RoutingForm: The stored form
        """
        now = utcnow()
        fields = form_input.fields_document()
        routes_state = form_input.routes_state

        values = {
            "id": form_input.id,
            "name": form_input.name,
            "description": form_input.description,
            "fields": fields,
            "user_id": identity.id,
            "created_at": now,
            "updated_at": now,
        }
        updates = {
            "name": form_input.name,
            "fields": fields,
            "updated_at": now,
        }

        if "description" in form_input.model_fields_set:
            updates["description"] = form_input.description
        if form_input.disabled is not None:
            updates["disabled"] = form_input.disabled

        if routes_state == RoutesState.CLEARED:
            # JSON null, not SQL NULL: cleared and never-configured differ
            values["routes"] = JSON.NULL
            updates["routes"] = JSON.NULL
        elif routes_state == RoutesState.SET:
            values["routes"] = form_input.routes_document()
            updates["routes"] = values["routes"]

        insert = self._dialect_insert()
        stmt = (
            insert(RoutingForm)
            .values(**values)
            .on_conflict_do_update(index_elements=[RoutingForm.id], set_=updates)
        )

        try:
            self.db.execute(stmt)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        logger.info(
            f"Upserted form {form_input.id}: "
            f"fields={len(fields)}, routes={routes_state.value}",
            extra={"form_id": form_input.id, "user_id": identity.id}
        )

        return self.get_form(form_input.id)

    def delete_form(self, form_id: str) -> RoutingForm:
        """Delete a form by id.

        Responses to the form go with it (ON DELETE CASCADE).

        Raises:
            FormNotFoundError: If no form has this id
        """
        form = self.get_form(form_id)
        if form is None:
            raise FormNotFoundError(form_id)

        self.db.delete(form)
        self.db.commit()

        logger.info(f"Deleted form {form_id}", extra={"form_id": form_id})
        return form

    def submit_response(self, response_input: FormResponseInput) -> FormResponse:
        """Record a response to a form.

        The (form_id, form_filler_id) uniqueness is left to the database;
        a violation is reported as a conflict and leaves stored state as it
        was. Any other database error propagates unchanged.

        Raises:
            FormResponseConflictError: If this filler already responded
        """
        form_response = FormResponse(
            form_id=response_input.form_id,
            form_filler_id=response_input.form_filler_id,
            response=dict(response_input.response),
        )
        self.db.add(form_response)

        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            if is_unique_violation(e):
                logger.warning(
                    f"Duplicate response for form {response_input.form_id}",
                    extra={
                        "form_id": response_input.form_id,
                        "form_filler_id": response_input.form_filler_id,
                    }
                )
                raise FormResponseConflictError(
                    response_input.form_id, response_input.form_filler_id
                ) from e
            raise

        logger.info(
            f"Recorded response {form_response.id} for form {response_input.form_id}",
            extra={"form_id": response_input.form_id}
        )
        return form_response

    def _dialect_insert(self):
        """Return the dialect's INSERT construct that supports ON CONFLICT."""
        dialect = self.db.get_bind().dialect.name
        if dialect == "postgresql":
            return postgresql.insert
        if dialect == "sqlite":
            return sqlite.insert
        raise RoutingFormError(f"Upsert is not supported on dialect {dialect!r}")
