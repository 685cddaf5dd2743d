"""Tests for DatabaseManager: company CRUD with real SQLite in tmpdir."""

import sqlite3
import uuid

import pytest

from database import DatabaseManager
from errors import ConflictError, InfrastructureError, NotFoundError
from models import CompanyDraft, CompanyPatch, LegalType


def _draft(**overrides):
    data = {
        "name": "acme",
        "description": "Anvils",
        "employee_count": 10,
        "is_registered": True,
        "legal_type": LegalType.CORPORATIONS,
    }
    data.update(overrides)
    return CompanyDraft(**data)


# ---------------------------------------------------------------------------
# Create / Get
# ---------------------------------------------------------------------------

class TestCreateCompany:
    def test_returns_generated_uuid(self, tmp_db):
        company_id = tmp_db.create_company(_draft())
        assert str(uuid.UUID(company_id)) == company_id
        rows = tmp_db.query("SELECT * FROM companies")
        assert len(rows) == 1
        assert rows[0]["id"] == company_id
        assert rows[0]["legal_type"] == "Corporations"

    def test_ids_are_unique(self, tmp_db):
        a = tmp_db.create_company(_draft(name="a"))
        b = tmp_db.create_company(_draft(name="b"))
        assert a != b

    def test_duplicate_name_raises_conflict(self, tmp_db):
        tmp_db.create_company(_draft())
        with pytest.raises(ConflictError):
            tmp_db.create_company(_draft(description="other"))
        rows = tmp_db.query("SELECT * FROM companies")
        assert len(rows) == 1


class TestGetCompany:
    def test_round_trip_fields(self, tmp_db):
        company_id = tmp_db.create_company(_draft(legal_type=LegalType.SOLE_PROPRIETORSHIP))
        company = tmp_db.get_company(company_id)
        assert company.id == company_id
        assert company.name == "acme"
        assert company.description == "Anvils"
        assert company.employee_count == 10
        assert company.is_registered is True
        assert company.legal_type == LegalType.SOLE_PROPRIETORSHIP

    def test_missing_raises_not_found(self, tmp_db):
        with pytest.raises(NotFoundError):
            tmp_db.get_company(str(uuid.uuid4()))


# ---------------------------------------------------------------------------
# Update
# ---------------------------------------------------------------------------

class TestUpdateCompany:
    def test_absent_fields_unchanged(self, tmp_db):
        company_id = tmp_db.create_company(_draft())
        tmp_db.update_company(company_id, CompanyPatch(employee_count=99, legal_type=LegalType.NON_PROFIT))
        company = tmp_db.get_company(company_id)
        assert company.employee_count == 99
        assert company.legal_type == LegalType.NON_PROFIT
        assert company.name == "acme"
        assert company.description == "Anvils"
        assert company.is_registered is True

    def test_falsy_values_are_applied(self, tmp_db):
        company_id = tmp_db.create_company(_draft())
        tmp_db.update_company(company_id, CompanyPatch(is_registered=False, employee_count=0, description=""))
        company = tmp_db.get_company(company_id)
        assert company.is_registered is False
        assert company.employee_count == 0
        assert company.description == ""

    def test_same_values_still_succeeds(self, tmp_db):
        company_id = tmp_db.create_company(_draft())
        tmp_db.update_company(company_id, CompanyPatch(name="acme"))
        assert tmp_db.get_company(company_id).name == "acme"

    def test_missing_raises_not_found(self, tmp_db):
        with pytest.raises(NotFoundError):
            tmp_db.update_company(str(uuid.uuid4()), CompanyPatch(name="x"))

    def test_duplicate_name_raises_conflict(self, tmp_db):
        tmp_db.create_company(_draft(name="first"))
        second = tmp_db.create_company(_draft(name="second"))
        with pytest.raises(ConflictError):
            tmp_db.update_company(second, CompanyPatch(name="first"))
        assert tmp_db.get_company(second).name == "second"


# ---------------------------------------------------------------------------
# Delete
# ---------------------------------------------------------------------------

class TestDeleteCompany:
    def test_delete_removes_row(self, tmp_db):
        company_id = tmp_db.create_company(_draft())
        tmp_db.delete_company(company_id)
        assert tmp_db.query("SELECT * FROM companies") == []
        with pytest.raises(NotFoundError):
            tmp_db.get_company(company_id)

    def test_missing_raises_not_found(self, tmp_db):
        with pytest.raises(NotFoundError):
            tmp_db.delete_company(str(uuid.uuid4()))

    def test_name_reusable_after_delete(self, tmp_db):
        company_id = tmp_db.create_company(_draft())
        tmp_db.delete_company(company_id)
        tmp_db.create_company(_draft())


# ---------------------------------------------------------------------------
# Failures and construction
# ---------------------------------------------------------------------------

class TestInfrastructureErrors:
    def test_closed_connection_is_classified(self, tmp_path):
        db = DatabaseManager(db_path=str(tmp_path / "closed.db"))
        db.close()
        with pytest.raises(InfrastructureError) as exc_info:
            db.get_company(str(uuid.uuid4()))
        assert isinstance(exc_info.value.__cause__, sqlite3.Error)

    def test_closed_connection_on_create(self, tmp_path):
        db = DatabaseManager(db_path=str(tmp_path / "closed.db"))
        db.close()
        with pytest.raises(InfrastructureError):
            db.create_company(_draft())


class TestFromConnection:
    def test_wraps_existing_connection(self):
        conn = sqlite3.connect(":memory:", isolation_level=None, check_same_thread=False)
        db = DatabaseManager.from_connection(conn)
        company_id = db.create_company(_draft())
        assert db.get_company(company_id).name == "acme"
        db.close()

    def test_creates_parent_directory(self, tmp_path):
        db_path = tmp_path / "nested" / "dir" / "companies.db"
        db = DatabaseManager(db_path=str(db_path))
        assert db_path.exists()
        db.close()
