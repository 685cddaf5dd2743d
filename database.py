"""
SQLite database layer for the company registry.

Holds the ``companies`` table and the four statements the service issues
against it. Every operation is a single statement on an autocommit
connection, so atomicity (including the name uniqueness check and the
partial update) is left to SQLite.

Usage:
    from database import DatabaseManager
    db = DatabaseManager("data/companies.db")
    company_id = db.create_company(draft)
"""

import logging
import os
import sqlite3
import uuid
from abc import ABC, abstractmethod

from errors import ConflictError, InfrastructureError, NotFoundError
from models import Company, CompanyDraft, CompanyPatch


logger = logging.getLogger(__name__)

BASE_DIR = os.path.dirname(os.path.abspath(__file__))
DATA_DIR = os.path.join(BASE_DIR, "data")
DEFAULT_DB_PATH = os.path.join(DATA_DIR, "companies.db")


# ---------------------------------------------------------------------------
# Schema DDL
# ---------------------------------------------------------------------------

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS companies (
    id              TEXT PRIMARY KEY,
    name            TEXT NOT NULL UNIQUE,
    description     TEXT NOT NULL DEFAULT '',
    employee_count  INTEGER NOT NULL DEFAULT 0,
    is_registered   INTEGER NOT NULL DEFAULT 0,
    legal_type      TEXT NOT NULL
);
"""


class CompanyStore(ABC):
    """Abstract base class for company persistence."""

    @abstractmethod
    def create_company(self, draft: CompanyDraft) -> str:
        """
        Store a new company.

        Returns:
            The generated company id

        Raises:
            ConflictError: name already taken
            InfrastructureError: any other store failure
        """
        pass

    @abstractmethod
    def update_company(self, company_id: str, patch: CompanyPatch) -> None:
        """
        Apply a partial update. Absent fields keep their stored value.

        Raises:
            NotFoundError, ConflictError, InfrastructureError
        """
        pass

    @abstractmethod
    def delete_company(self, company_id: str) -> None:
        pass

    @abstractmethod
    def get_company(self, company_id: str) -> Company:
        pass

    @abstractmethod
    def close(self) -> None:
        pass


def _is_duplicate(exc: sqlite3.IntegrityError) -> bool:
    return "UNIQUE constraint failed: companies.name" in str(exc)


class DatabaseManager(CompanyStore):
    """SQLite-backed company store."""

    def __init__(self, db_path: str = DEFAULT_DB_PATH):
        if db_path != ":memory:":
            parent = os.path.dirname(db_path)
            if parent:
                os.makedirs(parent, exist_ok=True)
        self.db_path = db_path
        conn = sqlite3.connect(db_path, check_same_thread=False, isolation_level=None)
        self._init_connection(conn)

    @classmethod
    def from_connection(cls, conn: sqlite3.Connection) -> "DatabaseManager":
        """Wrap an already opened connection (used by tests)."""
        db = cls.__new__(cls)
        db.db_path = ""
        db._init_connection(conn)
        return db

    def _init_connection(self, conn: sqlite3.Connection):
        self.conn = conn
        self.conn.execute("PRAGMA journal_mode=WAL")
        self.conn.row_factory = sqlite3.Row
        self._create_schema()

    def _create_schema(self):
        self.conn.executescript(SCHEMA_SQL)

    def close(self):
        self.conn.close()

    # ------------------------------------------------------------------
    # Companies
    # ------------------------------------------------------------------

    def create_company(self, draft: CompanyDraft) -> str:
        """Insert a company and return its generated id."""
        sql = """
            INSERT INTO companies (id, name, description, employee_count, is_registered, legal_type)
            VALUES (?, ?, ?, ?, ?, ?)
        """
        company_id = str(uuid.uuid4())
        params = (
            company_id, draft.name, draft.description, draft.employee_count,
            draft.is_registered, draft.legal_type.value,
        )
        try:
            self.conn.execute(sql, params)
        except sqlite3.IntegrityError as e:
            if _is_duplicate(e):
                raise ConflictError(f"name '{draft.name}' already exists") from e
            logger.error(f"Insert of company '{draft.name}' failed: {e}")
            raise InfrastructureError(str(e)) from e
        except sqlite3.Error as e:
            logger.error(f"Insert of company '{draft.name}' failed: {e}")
            raise InfrastructureError(str(e)) from e
        return company_id

    def update_company(self, company_id: str, patch: CompanyPatch) -> None:
        """COALESCE-style partial update in a single statement."""
        sql = """
            UPDATE companies
            SET
                name = COALESCE(?, name),
                description = COALESCE(?, description),
                employee_count = COALESCE(?, employee_count),
                is_registered = COALESCE(?, is_registered),
                legal_type = COALESCE(?, legal_type)
            WHERE id = ?
        """
        params = (
            patch.name, patch.description, patch.employee_count, patch.is_registered,
            patch.legal_type.value if patch.legal_type is not None else None,
            company_id,
        )
        try:
            cur = self.conn.execute(sql, params)
        except sqlite3.IntegrityError as e:
            if _is_duplicate(e):
                raise ConflictError(f"name '{patch.name}' already exists") from e
            logger.error(f"Update of company {company_id} failed: {e}")
            raise InfrastructureError(str(e)) from e
        except sqlite3.Error as e:
            logger.error(f"Update of company {company_id} failed: {e}")
            raise InfrastructureError(str(e)) from e
        if cur.rowcount == 0:
            raise NotFoundError(f"company {company_id}")

    def delete_company(self, company_id: str) -> None:
        try:
            cur = self.conn.execute("DELETE FROM companies WHERE id = ?", (company_id,))
        except sqlite3.Error as e:
            logger.error(f"Delete of company {company_id} failed: {e}")
            raise InfrastructureError(str(e)) from e
        if cur.rowcount == 0:
            raise NotFoundError(f"company {company_id}")

    def get_company(self, company_id: str) -> Company:
        sql = """
            SELECT id, name, description, employee_count, is_registered, legal_type
            FROM companies WHERE id = ?
        """
        try:
            row = self.conn.execute(sql, (company_id,)).fetchone()
        except sqlite3.Error as e:
            logger.error(f"Select of company {company_id} failed: {e}")
            raise InfrastructureError(str(e)) from e
        if row is None:
            raise NotFoundError(f"company {company_id}")
        data = dict(row)
        data["is_registered"] = bool(data["is_registered"])
        return Company(**data)

    def query(self, sql: str, params: tuple = ()) -> list[dict]:
        """Run an arbitrary read query (handy for inspection and tests)."""
        cur = self.conn.execute(sql, params)
        return [dict(r) for r in cur.fetchall()]


if __name__ == "__main__":
    db = DatabaseManager()
    print(f"Schema ready: {db.db_path}")
    db.close()
