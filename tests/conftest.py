"""
Pytest configuration and fixtures for testing.

Repositories are exercised against a fake psycopg2 connection so the suite
runs without a PostgreSQL server. Each test scripts the rows every
`execute()` call should produce and then inspects the SQL that was sent.
"""

import pytest

import db.connection


class FakeCursor:
    """Minimal stand-in for a psycopg2 cursor."""

    def __init__(self, conn):
        self.conn = conn
        self._rows = []

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def execute(self, sql, params=None):
        self.conn.executed.append((sql, params))
        result = self.conn.results.pop(0) if self.conn.results else []
        if isinstance(result, Exception):
            raise result
        self._rows = list(result)

    def fetchone(self):
        return self._rows[0] if self._rows else None

    def fetchall(self):
        return list(self._rows)


class FakeConnection:
    """
    Records what repositories do with a connection.

    Attributes:
        results: One entry per expected execute(): a list of row tuples,
            or an exception to raise.
        executed: (sql, params) for every execute() call, in order.
    """

    def __init__(self):
        self.results = []
        self.executed = []
        self.commits = 0
        self.rollbacks = 0
        self.released = 0

    def cursor(self):
        return FakeCursor(self)

    def commit(self):
        self.commits += 1

    def rollback(self):
        self.rollbacks += 1

    @property
    def last_sql(self):
        return self.executed[-1][0]

    @property
    def last_params(self):
        return self.executed[-1][1]


@pytest.fixture
def fake_db(monkeypatch):
    """Route every pooled connection to a single FakeConnection."""
    conn = FakeConnection()

    def release(c):
        conn.released += 1

    monkeypatch.setattr(db.connection, "get_connection", lambda: conn)
    monkeypatch.setattr(db.connection, "release_connection", release)
    return conn


@pytest.fixture
def company_row():
    """A companies row as returned by the repository's SELECT list."""
    return ("c1", "C1", "Desc1", 1, "http://c1.img")


@pytest.fixture
def job_rows():
    """Jobs rows as returned by the repository's SELECT list."""
    return [
        (1, "j1", 1, None, "c1"),
        (2, "j2", 2, 0.2, "c2"),
        (3, "j3", 3, 0.3, "c3"),
    ]
