"""
repositories/job_repo.py
-------------------------
Data access layer for job postings.
All SQL queries related to the `jobs` table live here.
"""

from typing import Any, Mapping, Optional

import psycopg2
from psycopg2 import errors

from config import STRICT_FILTERS
from db.connection import PARAMSTYLE, cursor, transaction
from models.job import Job
from utils.errors import BadRequestError, NotFoundError
from utils.logger import get_logger
from utils.sql import CONTAINS, GTE, POSITIVE, FilterConfig, FilterRule, build_filter_clause, build_update_clause

logger = get_logger(__name__)

_COLUMNS = "id, title, salary, equity, company_handle"


class JobRepository:
    """Repository for CRUD operations on the jobs table."""

    FILTERS = FilterConfig(
        rules={
            "title": FilterRule("title", CONTAINS),
            "minSalary": FilterRule("salary", GTE),
            "hasEquity": FilterRule("equity", POSITIVE),
        },
    )

    # A job can't be moved to another company
    UPDATABLE = frozenset({"title", "salary", "equity"})

    def __init__(self, strict_filters: bool = STRICT_FILTERS):
        self.strict_filters = strict_filters

    # ── CREATE ────────────────────────────────────────────

    def create(self, job: Job) -> Job:
        """
        Insert a new job.

        Returns:
            The stored Job with its `id` populated.

        Raises:
            NotFoundError: If the job's company doesn't exist.
        """
        sql = f"""
            INSERT INTO jobs (title, salary, equity, company_handle)
            VALUES (%s, %s, %s, %s)
            RETURNING {_COLUMNS};
        """
        try:
            with transaction() as cur:
                cur.execute(sql, (job.title, job.salary, job.equity, job.company_handle))
                created = self.row_to_job(cur.fetchone())
        except errors.ForeignKeyViolation:
            raise NotFoundError(f"No company: {job.company_handle}") from None
        except psycopg2.Error as e:
            logger.error(f"Failed to create job '{job.title}': {e}")
            raise
        logger.info(f"Created job #{created.id} for '{created.company_handle}'")
        return created

    # ── READ ──────────────────────────────────────────────

    def find_all(self, filters: Optional[Mapping[str, Any]] = None) -> list[Job]:
        """
        List jobs ordered by id.

        Args:
            filters: Optional query filters: title (substring), minSalary,
                hasEquity (only jobs with equity > 0 when true).
        """
        sql = f"SELECT {_COLUMNS} FROM jobs"
        params: list = []
        if filters:
            where = build_filter_clause(
                filters, self.FILTERS, paramstyle=PARAMSTYLE, strict=self.strict_filters,
            )
            if where.ignored:
                logger.warning(f"Ignoring unknown job filter(s): {', '.join(where.ignored)}")
            if where.where_clause:
                sql += f" WHERE {where.where_clause}"
                params = where.values
        sql += " ORDER BY id;"

        with cursor() as cur:
            cur.execute(sql, params)
            return [self.row_to_job(r) for r in cur.fetchall()]

    def get(self, job_id: int) -> Job:
        """Fetch a single job, or raise NotFoundError."""
        with cursor() as cur:
            cur.execute(f"SELECT {_COLUMNS} FROM jobs WHERE id = %s;", (job_id,))
            row = cur.fetchone()
        if not row:
            raise NotFoundError(f"No job: {job_id}")
        return self.row_to_job(row)

    # ── UPDATE ────────────────────────────────────────────

    def update(self, job_id: int, data: Mapping[str, Any]) -> Job:
        """
        Partially update a job with any of {title, salary, equity}.

        Raises:
            EmptyPayloadError: If `data` is empty.
            BadRequestError: If `data` names a field that can't be updated.
            NotFoundError: If the job doesn't exist.
        """
        invalid = [key for key in data if key not in self.UPDATABLE]
        if invalid:
            raise BadRequestError(f"Cannot update field(s): {', '.join(invalid)}")

        update = build_update_clause(data, paramstyle=PARAMSTYLE)
        sql = f"UPDATE jobs SET {update.set_clause} WHERE id = %s RETURNING {_COLUMNS};"

        try:
            with transaction() as cur:
                cur.execute(sql, [*update.values, job_id])
                row = cur.fetchone()
        except psycopg2.Error as e:
            logger.error(f"Failed to update job #{job_id}: {e}")
            raise

        if not row:
            raise NotFoundError(f"No job: {job_id}")
        logger.info(f"Updated job #{job_id}: {', '.join(data)}")
        return self.row_to_job(row)

    # ── DELETE ────────────────────────────────────────────

    def remove(self, job_id: int) -> None:
        """Delete a job, or raise NotFoundError."""
        with transaction() as cur:
            cur.execute("DELETE FROM jobs WHERE id = %s RETURNING id;", (job_id,))
            deleted = cur.fetchone() is not None

        if not deleted:
            raise NotFoundError(f"No job: {job_id}")
        logger.info(f"Deleted job #{job_id}")

    # ── HELPERS ───────────────────────────────────────────

    @staticmethod
    def row_to_job(row: tuple) -> Job:
        """Convert a database row tuple to a Job domain object."""
        return Job(
            id=row[0],
            title=row[1],
            salary=row[2],
            equity=float(row[3]) if row[3] is not None else None,
            company_handle=row[4],
        )
