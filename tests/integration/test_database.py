"""Integration tests for database constraints.

These tests verify the model-level guarantees the service relies on:
- Unique (form_id, form_filler_id) on responses
- Cascade delete from forms to responses
- Defaults applied on insert
"""

import pytest
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from routing_forms.models.form import RoutingForm
from routing_forms.models.form_response import FormResponse
from routing_forms.services.form_service import is_unique_violation


def add_form(db_session, form_id="f1", user_id="user_1") -> RoutingForm:
    form = RoutingForm(id=form_id, name="Contact", user_id=user_id)
    db_session.add(form)
    db_session.commit()
    return form


class TestRoutingFormModel:
    """Integration tests for RoutingForm."""

    def test_defaults(self, db_session):
        form = add_form(db_session)

        result = db_session.get(RoutingForm, "f1")

        assert result.fields == []
        assert result.disabled is False
        assert result.created_at is not None
        assert result.updated_at is not None
        assert result.routes_configured is False
        assert form is result

    def test_repr(self, db_session):
        form = add_form(db_session)
        assert "f1" in repr(form)


class TestFormResponseModel:
    """Integration tests for FormResponse."""

    def test_unique_filler_per_form(self, db_session):
        add_form(db_session)
        db_session.add(FormResponse(form_id="f1", form_filler_id="x", response={}))
        db_session.commit()

        db_session.add(FormResponse(form_id="f1", form_filler_id="x", response={}))
        with pytest.raises(IntegrityError) as exc_info:
            db_session.commit()

        assert is_unique_violation(exc_info.value) is True

    def test_foreign_key_violation_is_not_unique_violation(self, db_session):
        db_session.add(FormResponse(form_id="missing", form_filler_id="x", response={}))
        with pytest.raises(IntegrityError) as exc_info:
            db_session.commit()

        assert is_unique_violation(exc_info.value) is False

    def test_cascade_delete(self, db_session):
        form = add_form(db_session)
        db_session.add(FormResponse(form_id="f1", form_filler_id="x", response={"q1": "a"}))
        db_session.commit()

        db_session.delete(form)
        db_session.commit()

        assert db_session.scalars(select(FormResponse)).all() == []

    def test_relationship(self, db_session):
        form = add_form(db_session)
        db_session.add(FormResponse(form_id="f1", form_filler_id="x", response={}))
        db_session.commit()

        db_session.refresh(form)
        assert len(form.responses) == 1
        assert form.responses[0].form is form
