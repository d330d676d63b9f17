import asyncio
import itertools

import pytest
import sys
from pathlib import Path

# Ensure repository root is on sys.path for `import rheum_news`
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))
from fastapi.testclient import TestClient

from rheum_news.core.errors import NotFound, UpstreamError
from rheum_news.models.schemas import UpstreamRecord


def make_record(record_id: str, created: str = "2024-01-01T00:00:00.000Z", **fields) -> UpstreamRecord:
    return UpstreamRecord(id=record_id, fields=fields, createdTime=created)


class FakeAirtable:
    """In-memory stand-in for AirtableClient with the same async surface."""

    base_id = "appTEST"
    table_id = "tblTEST"

    def __init__(self, records=None):
        self.records = {r.id: r for r in records or []}
        self.calls = []
        self.create_batches = []
        self.fail_on_batch = None
        self.fail_all = None
        self._ids = itertools.count(1)

    def seed(self, *records):
        for r in records:
            self.records[r.id] = r
        return self

    def _maybe_fail(self):
        if self.fail_all is not None:
            raise self.fail_all

    async def list_records(self, *, max_records=None, sort=None, filter_by_formula=None):
        self.calls.append(("list", {"max_records": max_records, "sort": sort, "filter": filter_by_formula}))
        self._maybe_fail()
        recs = [r.model_copy(deep=True) for r in self.records.values()]
        return recs[:max_records] if max_records else recs

    async def get_record(self, record_id):
        self.calls.append(("get", record_id))
        self._maybe_fail()
        if record_id not in self.records:
            raise NotFound("Could not find what you are looking for")
        snapshot = self.records[record_id].model_copy(deep=True)
        # yield so concurrent callers interleave between read and write
        await asyncio.sleep(0)
        return snapshot

    async def update_record(self, record_id, fields):
        self.calls.append(("update", record_id, dict(fields)))
        self._maybe_fail()
        if record_id not in self.records:
            raise NotFound("Could not find what you are looking for")
        rec = self.records[record_id]
        rec.fields.update(fields)
        return rec.model_copy(deep=True)

    async def create_records(self, fields_list):
        self.calls.append(("create", len(fields_list)))
        self._maybe_fail()
        if self.fail_on_batch == len(self.create_batches):
            raise UpstreamError(422, "Invalid value for field Relevance Score")
        self.create_batches.append([dict(f) for f in fields_list])
        created = []
        for f in fields_list:
            rec = make_record(f"rec{next(self._ids):03d}", **f)
            self.records[rec.id] = rec
            created.append(rec.model_copy(deep=True))
        return created


@pytest.fixture(scope="session")
def anyio_backend():
    return "asyncio"


@pytest.fixture()
def record():
    return make_record


@pytest.fixture()
def fake_airtable(monkeypatch):
    import rheum_news.db.airtable as airtable_db

    fake = FakeAirtable()
    monkeypatch.setattr(airtable_db, "_client", fake)
    return fake


@pytest.fixture()
def client(monkeypatch, fake_airtable):
    # Keep the lifespan from building a real Airtable client
    import rheum_news.db.airtable as airtable_db

    async def _noop(*args, **kwargs):
        return None

    monkeypatch.setattr(airtable_db, "connect_airtable", _noop)
    monkeypatch.setattr(airtable_db, "close_airtable", _noop)

    from rheum_news import main as main_mod

    with TestClient(main_mod.app) as test_client:
        yield test_client
