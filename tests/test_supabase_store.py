import asyncio
from types import SimpleNamespace

import pytest

from form_engine.config import EngineSettings
from form_engine.errors import StorageError
from form_engine.storage import supabase_store
from form_engine.storage.supabase_store import (
    SupabaseMemberSource,
    SupabaseSubmissionSink,
    fetch_form_definition,
    get_supabase_client,
)


class FakeQuery:
    def __init__(self, client, table):
        self.client = client
        self.table = table
        self.calls = []

    def __getattr__(self, name):
        def record(*args, **kwargs):
            self.calls.append((name, args, kwargs))
            return self

        return record

    def execute(self):
        self.client.queries.append(self)
        data, count = self.client.responses[self.table]
        return SimpleNamespace(data=data, count=count)


class FakeClient:
    def __init__(self, responses):
        self.responses = responses
        self.queries = []

    def table(self, name):
        return FakeQuery(self, name)


SETTINGS = EngineSettings(registrations_table="regs")


@pytest.fixture(autouse=True)
def _fresh_singleton():
    supabase_store.reset_supabase_client()
    yield
    supabase_store.reset_supabase_client()


def test_no_client_without_credentials():
    assert get_supabase_client(EngineSettings()) is None
    with pytest.raises(StorageError):
        asyncio.run(fetch_form_definition("e1", settings=EngineSettings()))


def test_fetch_form_definition_reads_registration_settings():
    client = FakeClient(
        {
            "events": (
                [
                    {
                        "id": "e1",
                        "registration_settings": {
                            "formLayout": "multi-section",
                            "formSections": [{"id": "s1", "title": "About", "order": 0}],
                            "customFields": [{"id": "church", "label": "Church", "type": "text", "sectionId": "s1"}],
                        },
                    }
                ],
                None,
            )
        }
    )
    definition = asyncio.run(fetch_form_definition("e1", client=client, settings=SETTINGS))
    assert definition.is_multi_section
    assert definition.field_by_id("church").section_id == "s1"
    assert ("eq", ("id", "e1"), {}) in client.queries[0].calls


def test_missing_event_is_none():
    client = FakeClient({"events": ([], None)})
    assert asyncio.run(fetch_form_definition("nope", client=client, settings=SETTINGS)) is None


def test_event_without_settings_gets_an_empty_form():
    client = FakeClient({"events": ([{"id": "e1", "registration_settings": None}], None)})
    definition = asyncio.run(fetch_form_definition("e1", client=client, settings=SETTINGS))
    assert definition.fields == []
    assert definition.form_layout == "single-page"


def test_submission_sink_inserts_into_registrations():
    client = FakeClient({"regs": ([{"id": "r1", "event_id": "e1"}], None)})
    sink = SupabaseSubmissionSink("e1", client=client, settings=SETTINGS)
    row = asyncio.run(sink.submit({"firstName": "Ada"}))
    assert row["id"] == "r1"
    name, args, _ = client.queries[0].calls[0]
    assert name == "insert"
    assert args[0] == {"event_id": "e1", "responses": {"firstName": "Ada"}}


def test_submission_sink_raises_on_empty_insert():
    client = FakeClient({"regs": ([], None)})
    sink = SupabaseSubmissionSink("e1", client=client, settings=SETTINGS)
    with pytest.raises(StorageError):
        asyncio.run(sink.submit({}))


def test_member_source_pages_and_names():
    client = FakeClient(
        {
            "members": (
                [
                    {"id": 7, "first_name": "Ada", "last_name": "Obi"},
                    {"id": 8, "first_name": None, "last_name": None},
                    {"first_name": "No", "last_name": "Id"},
                ],
                42,
            )
        }
    )
    page = SupabaseMemberSource(client=client, settings=SETTINGS).fetch_page(3, 10)
    assert [(m.id, m.name) for m in page.items] == [("7", "Ada Obi"), ("8", "8")]
    assert page.total == 42
    assert ("range", (20, 29), {}) in client.queries[0].calls
