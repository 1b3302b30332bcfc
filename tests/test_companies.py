"""
Test suite for the company repository.

Tests cover:
- Company creation
- Listing and filtering
- Retrieval with jobs
- Partial updates
- Deletion
"""

import logging

import pytest
from psycopg2 import OperationalError, errors

from models.company import Company
from repositories.company_repo import CompanyRepository
from utils.errors import BadRequestError, EmptyPayloadError, InvalidRangeError, NotFoundError, UnknownFilterError


@pytest.fixture
def repo():
    return CompanyRepository(strict_filters=False)


class TestCompanyCreation:
    """Tests for creating companies"""

    def test_create_company(self, repo, fake_db):
        new = Company(handle="new", name="New", description="New Description",
                      num_employees=1, logo_url="http://new.img")
        fake_db.results = [[], [("new", "New", "New Description", 1, "http://new.img")]]

        created = repo.create(new)

        assert created == new
        assert "INSERT INTO companies" in fake_db.last_sql
        assert fake_db.last_params == ("new", "New", "New Description", 1, "http://new.img")
        assert fake_db.commits == 1
        assert fake_db.released == 1

    def test_create_duplicate(self, repo, fake_db, company_row):
        fake_db.results = [[("c1",)]]

        with pytest.raises(BadRequestError) as exc:
            repo.create(Company(handle="c1", name="C1", description="Desc1"))

        assert "Duplicate company: c1" in str(exc.value)
        assert len(fake_db.executed) == 1
        assert fake_db.rollbacks == 1
        assert fake_db.commits == 0

    def test_create_unique_violation(self, repo, fake_db):
        fake_db.results = [[], errors.UniqueViolation("duplicate key value violates unique constraint")]

        with pytest.raises(BadRequestError) as exc:
            repo.create(Company(handle="c9", name="C1", description="Same name as c1"))

        assert exc.value.status == 400
        assert "Duplicate company: c9" in str(exc.value)
        assert fake_db.rollbacks == 1
        assert fake_db.released == 1


class TestCompanyListing:
    """Tests for listing and filtering companies"""

    def test_find_all_unfiltered(self, repo, fake_db, company_row):
        fake_db.results = [[company_row, ("c2", "C2", "Desc2", 2, None)]]

        companies = repo.find_all()

        assert [c.handle for c in companies] == ["c1", "c2"]
        assert "WHERE" not in fake_db.last_sql
        assert fake_db.last_sql.endswith("ORDER BY name;")
        assert fake_db.last_params == []

    def test_filter_by_name_and_size(self, repo, fake_db, company_row):
        fake_db.results = [[company_row]]

        repo.find_all({"name": "c", "minEmployees": "1", "maxEmployees": "2"})

        assert (
            'WHERE "name" LIKE %s AND "num_employees" >= %s AND "num_employees" <= %s'
            in fake_db.last_sql
        )
        assert fake_db.last_params == ["%c%", 1, 2]

    def test_unknown_filters_mean_no_filtering(self, repo, fake_db, company_row, caplog):
        fake_db.results = [[company_row]]

        with caplog.at_level(logging.WARNING, logger="repositories.company_repo"):
            repo.find_all({"sort": "name"})

        assert "WHERE" not in fake_db.last_sql
        assert fake_db.last_params == []
        assert "Ignoring unknown company filter(s): sort" in caplog.text

    def test_invalid_range_never_hits_database(self, repo, fake_db):
        with pytest.raises(InvalidRangeError):
            repo.find_all({"minEmployees": 10, "maxEmployees": 5})

        assert fake_db.executed == []

    def test_strict_filters(self, fake_db):
        repo = CompanyRepository(strict_filters=True)

        with pytest.raises(UnknownFilterError):
            repo.find_all({"nmae": "typo"})


class TestCompanyRetrieval:
    """Tests for fetching a single company"""

    def test_get_with_jobs(self, repo, fake_db, company_row):
        fake_db.results = [[company_row], [(1, "j1", 1, None, "c1"), (4, "j4", 4, 0.5, "c1")]]

        company = repo.get("c1")

        assert company.handle == "c1"
        assert company.num_employees == 1
        assert [j.id for j in company.jobs] == [1, 4]
        assert company.jobs[1].equity == 0.5
        assert fake_db.executed[1][1] == ("c1",)

    def test_get_not_found(self, repo, fake_db):
        fake_db.results = [[]]

        with pytest.raises(NotFoundError) as exc:
            repo.get("nope")

        assert exc.value.status == 404
        assert fake_db.released == 1


class TestCompanyUpdate:
    """Tests for partial updates"""

    def test_update_translates_fields(self, repo, fake_db):
        fake_db.results = [[("c1", "New", "Desc1", 10, "http://c1.img")]]

        company = repo.update("c1", {"name": "New", "numEmployees": 10})

        assert 'SET "name"=%s, "num_employees"=%s WHERE handle = %s' in fake_db.last_sql
        assert fake_db.last_params == ["New", 10, "c1"]
        assert company.name == "New"
        assert company.num_employees == 10
        assert fake_db.commits == 1

    def test_update_with_null_fields(self, repo, fake_db):
        fake_db.results = [[("c1", "C1", "Desc1", None, None)]]

        company = repo.update("c1", {"numEmployees": None, "logoUrl": None})

        assert fake_db.last_params == [None, None, "c1"]
        assert company.logo_url is None

    def test_update_not_found(self, repo, fake_db):
        fake_db.results = [[]]

        with pytest.raises(NotFoundError):
            repo.update("nope", {"name": "New"})

    def test_update_empty(self, repo, fake_db):
        with pytest.raises(EmptyPayloadError):
            repo.update("c1", {})

        assert fake_db.executed == []

    def test_update_handle_not_allowed(self, repo, fake_db):
        with pytest.raises(BadRequestError) as exc:
            repo.update("c1", {"handle": "c1-new"})

        assert "handle" in str(exc.value)
        assert fake_db.executed == []

    def test_update_database_error_rolls_back(self, repo, fake_db):
        fake_db.results = [OperationalError("connection lost")]

        with pytest.raises(OperationalError):
            repo.update("c1", {"name": "New"})

        assert fake_db.rollbacks == 1
        assert fake_db.released == 1


class TestCompanyDeletion:
    """Tests for deleting companies"""

    def test_remove(self, repo, fake_db):
        fake_db.results = [[("c1",)]]

        repo.remove("c1")

        assert "DELETE FROM companies" in fake_db.last_sql
        assert fake_db.commits == 1

    def test_remove_not_found(self, repo, fake_db):
        fake_db.results = [[]]

        with pytest.raises(NotFoundError):
            repo.remove("nope")
