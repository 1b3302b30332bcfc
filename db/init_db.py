"""
db/init_db.py
-------------
Creates the companies and jobs tables if they do not already exist.
Run this module directly to initialize a fresh database:
    python -m db.init_db
"""

from db.connection import transaction
from utils.logger import get_logger

logger = get_logger(__name__)

SCHEMA_SQL = """
-- Companies: looked up by their short handle
CREATE TABLE IF NOT EXISTS companies (
    handle          VARCHAR(25) PRIMARY KEY CHECK (handle = lower(handle)),
    name            TEXT UNIQUE NOT NULL,
    num_employees   INTEGER CHECK (num_employees >= 0),
    description     TEXT NOT NULL,
    logo_url        TEXT
);

-- Jobs: each one belongs to a company and goes away with it
CREATE TABLE IF NOT EXISTS jobs (
    id              SERIAL PRIMARY KEY,
    title           TEXT NOT NULL,
    salary          INTEGER CHECK (salary >= 0),
    equity          NUMERIC CHECK (equity <= 1.0),
    company_handle  VARCHAR(25) NOT NULL
        REFERENCES companies ON DELETE CASCADE
);

CREATE INDEX IF NOT EXISTS idx_jobs_company ON jobs(company_handle);
"""


def create_tables() -> None:
    """
    Execute the schema SQL to create all tables.
    Safe to call multiple times (uses IF NOT EXISTS).
    """
    try:
        with transaction() as cur:
            cur.execute(SCHEMA_SQL)
    except Exception as e:
        logger.error(f"Failed to initialize schema: {e}")
        raise
    logger.info("Database schema initialized successfully.")


if __name__ == "__main__":
    from db.connection import close_pool, init_pool
    init_pool()
    create_tables()
    close_pool()
