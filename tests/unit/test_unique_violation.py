"""Unit tests for unique-violation detection across database drivers."""

from sqlalchemy.exc import IntegrityError

from routing_forms.services.form_service import is_unique_violation


class FakePsycopg2Error(Exception):
    def __init__(self, pgcode):
        super().__init__("duplicate key value violates unique constraint")
        self.pgcode = pgcode


class FakePsycopgError(Exception):
    def __init__(self, sqlstate):
        super().__init__("integrity error")
        self.sqlstate = sqlstate


def wrap(orig) -> IntegrityError:
    return IntegrityError("INSERT ...", {}, orig)


class TestIsUniqueViolation:
    """Tests for is_unique_violation."""

    def test_psycopg2_unique(self):
        assert is_unique_violation(wrap(FakePsycopg2Error("23505"))) is True

    def test_psycopg2_foreign_key(self):
        assert is_unique_violation(wrap(FakePsycopg2Error("23503"))) is False

    def test_psycopg3_unique(self):
        assert is_unique_violation(wrap(FakePsycopgError("23505"))) is True

    def test_sqlite_unique_message(self):
        orig = Exception("UNIQUE constraint failed: app_routing_forms_form_responses.form_filler_id")
        assert is_unique_violation(wrap(orig)) is True

    def test_sqlite_not_null_message(self):
        orig = Exception("NOT NULL constraint failed: app_routing_forms_forms.name")
        assert is_unique_violation(wrap(orig)) is False
