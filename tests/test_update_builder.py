"""
User API — Partial Update Builder Tests
=========================================

What:  Tests for build_update_assignments / build_update_statement and the
       unique-violation detection used for error translation.
How:   Pure functions — no database needed; statements are compiled with
       SQLAlchemy's default dialect and inspected.
"""

from datetime import datetime, timezone

from sqlalchemy.exc import IntegrityError

from userapi.repositories.user_repository import (
    Assignment,
    build_update_assignments,
    build_update_statement,
    is_unique_violation,
)
from userapi.schemas.user import UpdateUserRequest

NOW = datetime(2024, 1, 15, 12, 0, 0, tzinfo=timezone.utc)


class TestBuildUpdateAssignments:

    def test_no_fields_touches_updated_at_only(self):
        assignments = build_update_assignments(UpdateUserRequest(), NOW)

        assert assignments == [Assignment("updated_at", NOW)]

    def test_name_only(self):
        assignments = build_update_assignments(UpdateUserRequest(name="Ada L."), NOW)

        assert assignments == [
            Assignment("name", "Ada L."),
            Assignment("updated_at", NOW),
        ]

    def test_email_only(self):
        assignments = build_update_assignments(
            UpdateUserRequest(email="ada@example.com"), NOW
        )

        assert [a.column for a in assignments] == ["email", "updated_at"]
        assert assignments[0].value == "ada@example.com"

    def test_all_fields_in_fixed_order(self):
        request = UpdateUserRequest(email="ada@example.com", name="Ada")

        assignments = build_update_assignments(request, NOW)

        assert [a.column for a in assignments] == ["name", "email", "updated_at"]

    def test_explicit_null_means_unchanged(self):
        request = UpdateUserRequest.model_validate({"name": None, "email": None})

        assignments = build_update_assignments(request, NOW)

        assert [a.column for a in assignments] == ["updated_at"]


class TestBuildUpdateStatement:

    def test_values_are_bound_not_inlined(self):
        request = UpdateUserRequest(name="Robert'); DROP TABLE users;--")

        compiled = build_update_statement(7, request, NOW).compile()
        sql = str(compiled)

        assert sql.startswith("UPDATE users SET")
        assert "DROP TABLE" not in sql
        assert compiled.params["name"] == "Robert'); DROP TABLE users;--"
        assert compiled.params["updated_at"] == NOW
        assert 7 in compiled.params.values()

    def test_empty_request_sets_only_updated_at(self):
        compiled = build_update_statement(1, UpdateUserRequest(), NOW).compile()
        sql = str(compiled)

        assert "updated_at" in sql
        assert "name" not in sql
        assert "email" not in sql

    def test_full_request_sets_every_column(self):
        request = UpdateUserRequest(name="Ada", email="ada@example.com")

        compiled = build_update_statement(1, request, NOW).compile()

        assert {"name", "email", "updated_at"} <= set(compiled.params)


class _FakeAsyncpgError(Exception):
    def __init__(self, sqlstate):
        super().__init__("duplicate key value violates unique constraint")
        self.sqlstate = sqlstate


class TestIsUniqueViolation:

    def test_postgres_sqlstate(self):
        exc = IntegrityError("INSERT", None, _FakeAsyncpgError("23505"))
        assert is_unique_violation(exc) is True

    def test_postgres_other_sqlstate(self):
        # 23502 = not_null_violation
        exc = IntegrityError("INSERT", None, _FakeAsyncpgError("23502"))
        assert is_unique_violation(exc) is False

    def test_sqlite_message(self):
        exc = IntegrityError(
            "INSERT", None, Exception("UNIQUE constraint failed: users.email")
        )
        assert is_unique_violation(exc) is True

    def test_sqlite_not_null(self):
        exc = IntegrityError(
            "INSERT", None, Exception("NOT NULL constraint failed: users.name")
        )
        assert is_unique_violation(exc) is False
