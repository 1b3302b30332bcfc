"""
repositories/company_repo.py
-----------------------------
Data access layer for companies.
All SQL queries related to the `companies` table live here.
"""

from typing import Any, Mapping, Optional

import psycopg2
from psycopg2 import errors

from config import STRICT_FILTERS
from db.connection import PARAMSTYLE, cursor, transaction
from models.company import Company
from repositories.job_repo import JobRepository
from utils.errors import BadRequestError, NotFoundError
from utils.logger import get_logger
from utils.sql import CONTAINS, GTE, LTE, FilterConfig, FilterRule, build_filter_clause, build_update_clause

logger = get_logger(__name__)

_COLUMNS = "handle, name, description, num_employees, logo_url"


class CompanyRepository:
    """Repository for CRUD operations on the companies table."""

    # Query string filters accepted by find_all()
    FILTERS = FilterConfig(
        rules={
            "name": FilterRule("name", CONTAINS),
            "minEmployees": FilterRule("num_employees", GTE),
            "maxEmployees": FilterRule("num_employees", LTE),
        },
        ranges=(("minEmployees", "maxEmployees"),),
    )

    # Request field names that differ from their column
    FIELD_MAP = {
        "numEmployees": "num_employees",
        "logoUrl": "logo_url",
    }

    UPDATABLE = frozenset({"name", "description", "numEmployees", "logoUrl"})

    def __init__(self, strict_filters: bool = STRICT_FILTERS):
        self.strict_filters = strict_filters

    # ── CREATE ────────────────────────────────────────────

    def create(self, company: Company) -> Company:
        """
        Insert a new company.

        Raises:
            BadRequestError: If a company with the same handle or name exists.
        """
        try:
            with transaction() as cur:
                cur.execute("SELECT handle FROM companies WHERE handle = %s;", (company.handle,))
                if cur.fetchone():
                    raise BadRequestError(f"Duplicate company: {company.handle}")

                cur.execute(
                    f"""
                    INSERT INTO companies (handle, name, description, num_employees, logo_url)
                    VALUES (%s, %s, %s, %s, %s)
                    RETURNING {_COLUMNS};
                    """,
                    (
                        company.handle, company.name, company.description,
                        company.num_employees, company.logo_url,
                    ),
                )
                created = self._row_to_company(cur.fetchone())
        except errors.UniqueViolation:
            # Concurrent insert of the same handle, or a taken name
            raise BadRequestError(f"Duplicate company: {company.handle}") from None
        except psycopg2.Error as e:
            logger.error(f"Failed to create company '{company.handle}': {e}")
            raise
        logger.info(f"Created company '{created.handle}'")
        return created

    # ── READ ──────────────────────────────────────────────

    def find_all(self, filters: Optional[Mapping[str, Any]] = None) -> list[Company]:
        """
        List companies ordered by name.

        Args:
            filters: Optional query filters: name (substring),
                minEmployees, maxEmployees.

        Raises:
            InvalidRangeError: If minEmployees > maxEmployees.
            BadRequestError: On a malformed (or, in strict mode, unknown) filter.
        """
        sql = f"SELECT {_COLUMNS} FROM companies"
        params: list = []
        if filters:
            where = build_filter_clause(
                filters, self.FILTERS, paramstyle=PARAMSTYLE, strict=self.strict_filters,
            )
            if where.ignored:
                logger.warning(f"Ignoring unknown company filter(s): {', '.join(where.ignored)}")
            if where.where_clause:
                sql += f" WHERE {where.where_clause}"
                params = where.values
        sql += " ORDER BY name;"

        with cursor() as cur:
            cur.execute(sql, params)
            return [self._row_to_company(r) for r in cur.fetchall()]

    def get(self, handle: str) -> Company:
        """
        Fetch a company together with its jobs.

        Raises:
            NotFoundError: If no company has this handle.
        """
        with cursor() as cur:
            cur.execute(f"SELECT {_COLUMNS} FROM companies WHERE handle = %s;", (handle,))
            row = cur.fetchone()
            if not row:
                raise NotFoundError(f"No company: {handle}")
            company = self._row_to_company(row)

            cur.execute(
                "SELECT id, title, salary, equity, company_handle FROM jobs "
                "WHERE company_handle = %s ORDER BY id;",
                (handle,),
            )
            company.jobs = [JobRepository.row_to_job(r) for r in cur.fetchall()]
        return company

    # ── UPDATE ────────────────────────────────────────────

    def update(self, handle: str, data: Mapping[str, Any]) -> Company:
        """
        Partially update a company. Only the fields present in `data` change.

        Args:
            handle: Company to update.
            data: Any of {name, description, numEmployees, logoUrl}.

        Raises:
            EmptyPayloadError: If `data` is empty.
            BadRequestError: If `data` names a field that can't be updated.
            NotFoundError: If no company has this handle.
        """
        invalid = [key for key in data if key not in self.UPDATABLE]
        if invalid:
            raise BadRequestError(f"Cannot update field(s): {', '.join(invalid)}")

        update = build_update_clause(data, self.FIELD_MAP, paramstyle=PARAMSTYLE)
        sql = f"UPDATE companies SET {update.set_clause} WHERE handle = %s RETURNING {_COLUMNS};"

        try:
            with transaction() as cur:
                cur.execute(sql, [*update.values, handle])
                row = cur.fetchone()
        except psycopg2.Error as e:
            logger.error(f"Failed to update company '{handle}': {e}")
            raise

        if not row:
            raise NotFoundError(f"No company: {handle}")
        logger.info(f"Updated company '{handle}': {', '.join(data)}")
        return self._row_to_company(row)

    # ── DELETE ────────────────────────────────────────────

    def remove(self, handle: str) -> None:
        """
        Delete a company (its jobs go with it).

        Raises:
            NotFoundError: If no company has this handle.
        """
        with transaction() as cur:
            cur.execute("DELETE FROM companies WHERE handle = %s RETURNING handle;", (handle,))
            deleted = cur.fetchone() is not None

        if not deleted:
            raise NotFoundError(f"No company: {handle}")
        logger.info(f"Deleted company '{handle}'")

    # ── HELPERS ───────────────────────────────────────────

    @staticmethod
    def _row_to_company(row: tuple) -> Company:
        """Convert a database row tuple to a Company domain object."""
        return Company(
            handle=row[0],
            name=row[1],
            description=row[2],
            num_employees=row[3],
            logo_url=row[4],
        )
