from datetime import datetime, timezone

import pytest
from sqlalchemy import Column, Enum, Integer, MetaData, String, Table

from eschool_repository.domain.entities import CertificateGrade, CourseStatus
from eschool_repository.models import CertificateRecord, CourseRecord, UserRecord
from eschool_repository.repositories.statements import (
    Statement,
    build_delete,
    build_insert,
    build_select,
    build_update,
    column_list,
    quote,
)


def make_user_record(**overrides) -> UserRecord:
    data = {
        "id": "u1",
        "name": "Ada",
        "surname": "Lovelace",
        "email": "ada@example.com",
        "password": "secret",
        "phone": None,
        "city": "London",
        "avatar_url": None,
    }
    data.update(overrides)
    return UserRecord(**data)


def make_certificate_record(**overrides) -> CertificateRecord:
    data = {
        "id": "c1",
        "user_id": "u1",
        "course_id": "k1",
        "name": "Completion",
        "score": 90,
        "grade": CertificateGrade.GOLD,
        "created_at": None,
    }
    data.update(overrides)
    return CertificateRecord(**data)


class TestBuildInsert:

    def test_binds_every_column_in_order(self):
        statement = build_insert(make_user_record())

        assert statement.sql == (
            'INSERT INTO "user" ("id", "name", "surname", "email", "password", "phone", "city", "avatar_url") '
            "VALUES (:id, :name, :surname, :email, :password, :phone, :city, :avatar_url)"
        )
        assert list(statement.params) == ["id", "name", "surname", "email", "password", "phone", "city", "avatar_url"]
        assert statement.params["email"] == "ada@example.com"
        # nullable columns without a server default are bound as NULL
        assert statement.params["phone"] is None

    def test_values_never_end_up_in_sql_text(self):
        statement = build_insert(make_user_record(name="Robert'); DROP TABLE \"user\";--"))
        assert "DROP TABLE" not in statement.sql
        assert statement.params["name"].startswith("Robert")

    def test_empty_server_default_column_is_omitted(self):
        statement = build_insert(make_certificate_record())
        assert '"created_at"' not in statement.sql
        assert "created_at" not in statement.params

    def test_supplied_server_default_column_is_bound(self):
        issued = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
        statement = build_insert(make_certificate_record(created_at=issued))
        assert statement.params["created_at"] == issued
        assert ":created_at" in statement.sql

    def test_clause_carries_column_types(self):
        record = CourseRecord(
            id="k1", school_id="s1", name="Intro", level=1, price=0, language="English", status=CourseStatus.READY
        )
        statement = build_insert(record)
        binds = statement.clause().compile().binds

        assert isinstance(binds["status"].type, Enum)
        assert isinstance(binds["level"].type, Integer)

    def test_statement_is_immutable(self):
        statement = build_insert(make_user_record())
        with pytest.raises(AttributeError):
            statement.sql = "DELETE FROM user"

    def test_table_without_columns_is_rejected(self):
        class Empty:
            __table__ = Table("empty", MetaData())

        with pytest.raises(ValueError):
            build_insert(Empty())


class TestBuildUpdate:

    def test_sets_non_key_columns_keyed_by_id(self):
        statement = build_update(make_user_record())

        assert statement.sql == (
            'UPDATE "user" SET "name" = :name, "surname" = :surname, "email" = :email, '
            '"password" = :password, "phone" = :phone, "city" = :city, "avatar_url" = :avatar_url '
            'WHERE "id" = :id'
        )
        assert statement.params["id"] == "u1"

    def test_empty_server_default_column_is_kept(self):
        statement = build_update(make_certificate_record())
        assert '"created_at"' not in statement.sql

    def test_key_only_table_is_rejected(self):
        class KeyOnly:
            __table__ = Table("key_only", MetaData(), Column("id", String, primary_key=True))
            id = "x"

        with pytest.raises(ValueError):
            build_update(KeyOnly())


class TestReadStatements:

    def test_build_select_without_predicates(self):
        statement = build_select(UserRecord.__table__)
        assert str(statement) == f'SELECT {column_list(UserRecord.__table__)} FROM "user"'

    def test_build_select_with_predicates(self):
        statement = build_select(UserRecord.__table__, "email", "password")
        assert str(statement).endswith('WHERE "email" = :email AND "password" = :password')

    def test_build_select_result_columns_are_typed(self):
        statement = build_select(CourseRecord.__table__)
        assert [c.name for c in statement.selected_columns] == [c.name for c in CourseRecord.__table__.columns]

    def test_build_delete(self):
        assert str(build_delete(UserRecord.__table__)) == 'DELETE FROM "user" WHERE "id" = :id'

    def test_quote_escapes_embedded_quotes(self):
        assert quote('we"ird') == '"we""ird"'

    def test_column_list_with_alias(self):
        assert column_list(UserRecord.__table__, "u").startswith('"u"."id", "u"."name"')


def test_statement_default_types_empty():
    statement = Statement(sql="SELECT 1", params={})
    assert statement.types == {}
