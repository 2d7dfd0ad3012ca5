"""Integration tests for TableGateway against a real (SQLite by default) schema."""
import uuid

import pytest

from careerpage.core.exceptions import PersistenceFailure
from careerpage.models.company import Company
from careerpage.models.job import Job
from careerpage.models.user import User
from careerpage.services.gateway import TableGateway


@pytest.fixture
def company_row(db_session):
    user = TableGateway(db_session, User).insert({"email": "gw@example.com", "password_hash": "x"}).unwrap()
    return TableGateway(db_session, Company).insert({
        "user_id": user["id"],
        "slug": "gateway-co",
        "name": "Gateway Co",
    }).unwrap()


@pytest.fixture
def jobs(db_session):
    return TableGateway(db_session, Job)


def job(company_id, **overrides):
    record = {"company_id": company_id, "title": "Dev", "location": "Remote", "job_type": "full-time"}
    record.update(overrides)
    return record


class TestInsertSelect:
    def test_insert_single_returns_dict(self, jobs, company_row):
        result = jobs.insert(job(company_row["id"]))
        assert result.error is None
        assert result.data["title"] == "Dev"
        assert result.data["company_id"] == company_row["id"]
        assert result.data["is_active"] is True
        uuid.UUID(result.data["id"])

    def test_bulk_insert_returns_list(self, jobs, company_row):
        result = jobs.insert([job(company_row["id"], title=f"Dev {i}") for i in range(3)])
        assert result.error is None
        assert len(result.data) == 3

    def test_bulk_insert_is_all_or_nothing(self, jobs, company_row):
        batch = [job(company_row["id"]), job(company_row["id"], title=None)]
        result = jobs.insert(batch)
        assert result.data is None
        assert result.error
        assert jobs.select().execute().data == []

    def test_unknown_field_is_an_error(self, jobs, company_row):
        result = jobs.insert(job(company_row["id"], colour="red"))
        assert result.data is None
        assert "colour" in result.error

    def test_filter_order_and_columns(self, jobs, company_row):
        jobs.insert([
            job(company_row["id"], title="B", is_active=True),
            job(company_row["id"], title="A", is_active=True),
            job(company_row["id"], title="C", is_active=False),
        ]).unwrap()
        result = jobs.select("title, is_active").filter("is_active", True).order("title").execute()
        assert result.error is None
        assert result.data == [{"title": "A", "is_active": True}, {"title": "B", "is_active": True}]
        desc = jobs.select("title").order("title", "desc").execute().unwrap()
        assert [r["title"] for r in desc] == ["C", "B", "A"]

    def test_maybe_single(self, jobs, company_row):
        assert jobs.select().filter("title", "nope").maybe_single().data is None
        jobs.insert(job(company_row["id"], title="Only")).unwrap()
        assert jobs.select().filter("title", "Only").maybe_single().data["title"] == "Only"

    def test_unknown_column_in_select(self, jobs):
        result = jobs.select("title, salary").execute()
        assert result.data is None
        assert "salary" in result.error

    def test_bad_uuid_filter_is_an_error(self, jobs):
        result = jobs.select().filter("id", "not-a-uuid").execute()
        assert result.error
        with pytest.raises(PersistenceFailure):
            result.unwrap()


class TestUpdateDelete:
    def test_update_partial(self, jobs, company_row):
        created = jobs.insert(job(company_row["id"])).unwrap()
        updated = jobs.update(created["id"], {"title": "Senior Dev", "is_active": False}).unwrap()
        assert updated["title"] == "Senior Dev"
        assert updated["is_active"] is False
        assert updated["location"] == "Remote"

    def test_update_missing_row(self, jobs):
        result = jobs.update(str(uuid.uuid4()), {"title": "x"})
        assert result.data is None
        assert "not found" in result.error

    def test_delete(self, jobs, company_row):
        created = jobs.insert(job(company_row["id"])).unwrap()
        assert jobs.delete(created["id"]).data["id"] == created["id"]
        assert jobs.select().execute().data == []
        assert "not found" in jobs.delete(created["id"]).error
