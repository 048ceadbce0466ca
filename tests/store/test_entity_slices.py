"""
Tests for the entity state slices.

Happy paths run against the reference backend through httpx.ASGITransport;
transport and protocol failures use httpx.MockTransport.
"""

import asyncio
from datetime import date
from unittest.mock import patch

import httpx
import pytest

from teafarm.api.main import app
from teafarm.models.auth import User, UserRole
from teafarm.models.field import FieldDraft
from teafarm.models.task import TaskStatus
from teafarm.services.api_client import ApiClient
from teafarm.services.navigation import Navigator
from teafarm.services.repository import get_repository, reset_repository
from teafarm.services.storage import CredentialStorage, CredentialStorageError
from teafarm.store import FieldSlice, create_store

ADMIN = {"username": "admin", "password": "admin123"}
NORTH = {"name": "North Slope", "location": "Block A", "areaSize": 2.5, "soilType": "Loam"}
RIVER = {"name": "River Bend", "location": "Block B", "areaSize": 1.5}


@pytest.fixture(autouse=True)
def fresh_repository():
    """Each test starts from an empty backend."""
    reset_repository()


async def _logged_in_store():
    store = create_store(
        storage=CredentialStorage(),
        navigator=Navigator(),
        transport=httpx.ASGITransport(app=app),
    )
    result = await store.auth.login(ADMIN)
    assert result.ok
    return store


def _mock_field_slice(handler):
    api = ApiClient(
        storage=CredentialStorage(),
        navigator=Navigator(),
        base_url="http://backend.test/api",
        transport=httpx.MockTransport(handler),
    )
    return FieldSlice(api)


def test_create_appends_server_copy():
    async def scenario():
        async with await _logged_in_store() as store:
            await store.fields.create(NORTH)
            before = [f.model_copy() for f in store.fields.state.items]

            result = await store.fields.create(RIVER)

            items = store.fields.state.items
            assert result.ok
            assert result.value.id == 2
            assert items[:-1] == before
            assert items[-1] == result.value
            assert store.fields.state.loading is False
            assert store.fields.state.error is None

    asyncio.run(scenario())


def test_fetch_replaces_rather_than_merges():
    async def scenario():
        async with await _logged_in_store() as store:
            await store.fields.create(NORTH)
            await store.fields.fetch()
            first = list(store.fields.state.items)
            await store.fields.fetch()
            assert store.fields.state.items == first

            get_repository().delete_field(1)
            await store.fields.fetch()
            assert store.fields.state.items == []

    asyncio.run(scenario())


def test_fetch_with_filter():
    async def scenario():
        async with await _logged_in_store() as store:
            await store.fields.create(NORTH)
            await store.fields.create(RIVER)

            await store.fields.fetch({"location": "block b"})

            assert [f.name for f in store.fields.state.items] == ["River Bend"]

    asyncio.run(scenario())


def test_update_replaces_only_matching_element():
    async def scenario():
        async with await _logged_in_store() as store:
            await store.fields.create(NORTH)
            await store.fields.create(RIVER)
            await store.fields.fetch_by_id(1)
            untouched = store.fields.state.items[1]

            result = await store.fields.update(1, {"notes": "terraced"})

            assert result.ok
            assert store.fields.state.items[0].notes == "terraced"
            assert store.fields.state.items[0].name == "North Slope"
            assert store.fields.state.items[1] == untouched
            assert store.fields.state.current.notes == "terraced"

    asyncio.run(scenario())


def test_update_of_record_missing_from_items_leaves_items_alone():
    async def scenario():
        async with await _logged_in_store() as store:
            await store.fields.create(NORTH)
            get_repository().create_field(FieldDraft(name="Hidden", location="C", area_size=1))

            result = await store.fields.update(2, {"notes": "x"})

            assert result.ok
            assert [f.id for f in store.fields.state.items] == [1]

    asyncio.run(scenario())


def test_delete_removes_element_and_current():
    async def scenario():
        async with await _logged_in_store() as store:
            await store.fields.create(NORTH)
            await store.fields.create(RIVER)
            await store.fields.fetch_by_id(2)

            result = await store.fields.delete(2)

            assert result.ok
            assert [f.id for f in store.fields.state.items] == [1]
            assert store.fields.state.current is None

    asyncio.run(scenario())


def test_delete_keeps_unrelated_current():
    async def scenario():
        async with await _logged_in_store() as store:
            await store.fields.create(NORTH)
            await store.fields.create(RIVER)
            await store.fields.fetch_by_id(1)

            await store.fields.delete(2)

            assert store.fields.state.current.id == 1

    asyncio.run(scenario())


def test_fetch_by_id_not_found_sets_server_message():
    async def scenario():
        async with await _logged_in_store() as store:
            result = await store.fields.fetch_by_id(99)

            assert not result.ok
            assert store.fields.state.error == "Field 99 not found"
            assert store.fields.state.current is None

    asyncio.run(scenario())


def test_task_with_unknown_field_reports_server_message():
    async def scenario():
        async with await _logged_in_store() as store:
            result = await store.tasks.create(
                {
                    "fieldId": 42,
                    "taskType": "PRUNING",
                    "assignedWorker": "Ravi",
                    "startDate": "2024-05-01",
                    "endDate": "2024-05-02",
                }
            )

            assert result.error == "Field 42 does not exist"
            assert store.tasks.state.items == []

    asyncio.run(scenario())


def test_linked_slices_round_trip():
    """Test tasks, harvest records and weather observations against one field."""

    async def scenario():
        async with await _logged_in_store() as store:
            await store.fields.create(NORTH)
            task = await store.tasks.create(
                {
                    "fieldId": 1,
                    "taskType": "HARVESTING",
                    "assignedWorker": "Meena",
                    "startDate": "2024-05-01",
                    "endDate": "2024-05-01",
                }
            )
            harvest = await store.harvest_records.create(
                {"fieldId": 1, "harvestDate": "2024-05-01", "quantityKg": 120.5, "teaGrade": "PREMIUM"}
            )
            weather = await store.weather_observations.create(
                {"fieldId": 1, "date": "2024-05-01", "temperature": 21.5, "rainfall": 0, "humidity": 75}
            )

            assert task.value.field_name == "North Slope"
            assert task.value.status == TaskStatus.PENDING
            assert harvest.value.quantity_kg == 120.5
            assert weather.value.date == date(2024, 5, 1)

            await store.harvest_records.fetch({"teaGrade": "HIGH"})
            assert store.harvest_records.state.items == []
            await store.weather_observations.fetch({"fieldId": 1})
            assert len(store.weather_observations.state.items) == 1

            updated = await store.tasks.update(task.value.id, {"status": "COMPLETED"})
            assert updated.value.status == TaskStatus.COMPLETED
            assert store.tasks.state.items[0].status == TaskStatus.COMPLETED

    asyncio.run(scenario())


def test_validation_failure_sends_no_request():
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(201, json={})

    fields = _mock_field_slice(handler)

    result = asyncio.run(fields.create({"name": "  ", "location": "A", "areaSize": -1}))

    assert calls == []
    assert not result.ok
    assert "name" in fields.state.error
    assert "areaSize" in fields.state.error
    assert fields.state.loading is False


def test_transport_error_sets_fallback_message():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    fields = _mock_field_slice(handler)

    result = asyncio.run(fields.fetch())

    assert result.error == "Failed to fetch fields"
    assert fields.state.error == "Failed to fetch fields"
    assert fields.state.loading is False


def test_server_error_without_message_uses_fallback():
    fields = _mock_field_slice(lambda request: httpx.Response(500, text="boom"))

    asyncio.run(fields.delete(1))

    assert fields.state.error == "Failed to delete field"


def test_malformed_body_sets_fallback_message():
    fields = _mock_field_slice(lambda request: httpx.Response(200, json={"unexpected": True}))

    asyncio.run(fields.fetch())

    assert fields.state.error == "Failed to fetch fields"
    assert fields.state.items == []


def test_filter_is_sent_as_camel_case_query():
    seen = {}

    def handler(request):
        seen.update(request.url.params)
        return httpx.Response(200, json=[])

    fields = _mock_field_slice(handler)

    asyncio.run(fields.fetch({"soil_type": "Loam"}))

    assert seen == {"soilType": "Loam"}


def test_overlapping_fetches_last_completion_wins():
    slow = {"id": 1, "name": "Slow", "location": "A", "areaSize": 1}
    fast = {"id": 2, "name": "Fast", "location": "B", "areaSize": 1}

    async def handler(request):
        if "name" in request.url.params:
            await asyncio.sleep(0.05)
            return httpx.Response(200, json=[slow])
        return httpx.Response(200, json=[fast])

    fields = _mock_field_slice(handler)

    async def scenario():
        await asyncio.gather(fields.fetch({"name": "slow"}), fields.fetch())

    asyncio.run(scenario())

    assert [f.name for f in fields.state.items] == ["Slow"]


def test_clear_error_and_current():
    fields = _mock_field_slice(lambda request: httpx.Response(404, json={"message": "Field 3 not found"}))

    asyncio.run(fields.fetch_by_id(3))
    assert fields.state.error == "Field 3 not found"

    fields.clear_error()
    fields.clear_current()
    assert fields.state.error is None
    assert fields.state.current is None


def test_unauthorized_with_unwritable_storage_sets_error_instead_of_raising():
    storage = CredentialStorage()
    storage.save("abc", User(username="admin", role=UserRole.ADMIN))
    api = ApiClient(
        storage=storage,
        navigator=Navigator(),
        base_url="http://backend.test/api",
        transport=httpx.MockTransport(
            lambda request: httpx.Response(401, json={"message": "Token has expired"})
        ),
    )
    fields = FieldSlice(api)

    with patch.object(CredentialStorage, "_flush", side_effect=CredentialStorageError("disk full")):
        result = asyncio.run(fields.fetch())

    assert result.error == "Token has expired"
    assert fields.state.loading is False
    assert api.navigator.at_login
