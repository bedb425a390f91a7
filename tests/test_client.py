"""Tests for the HTTP client wrappers."""

from collections.abc import AsyncGenerator
from datetime import date, datetime, timedelta, timezone

import httpx
import pytest
import pytest_asyncio

from app.client.api import ClinicApiClient
from app.client.local_time import discover_time_zone, format_date_for_query


@pytest.fixture
def api(client: httpx.AsyncClient) -> ClinicApiClient:
    """Client wrappers talking to the app in-process."""
    return ClinicApiClient(client=client, time_zone="Asia/Kolkata")


@pytest_asyncio.fixture
async def offline_api() -> AsyncGenerator[ClinicApiClient, None]:
    """Client wrappers whose every request fails to connect."""

    def refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    async with httpx.AsyncClient(
        transport=httpx.MockTransport(refuse), base_url="http://test"
    ) as client:
        yield ClinicApiClient(client=client, time_zone="UTC")


@pytest.mark.asyncio
async def test_check_user_access(api: ClinicApiClient, access_control):
    await access_control.add_user("asha@example.com")

    assert await api.check_user_access("asha@example.com") is True
    assert await api.check_user_access("ravi@example.com") is False


@pytest.mark.asyncio
async def test_book_then_fetch_by_date(api: ClinicApiClient, locations):
    booked = await api.persist_appointment(
        {
            "datetime": "2024-03-10T09:30",
            "name": "Asha",
            "clinicLocation": 1,
            "phone": "",
            "notes": "",
            "updated_by": "Dr. Rao",
        }
    )
    assert booked is True

    found = await api.fetch_appointments_by_date(date(2024, 3, 10), location=1)
    assert [a["patient_name"] for a in found] == ["Asha"]
    assert found[0]["appointment_date_time"].startswith("2024-03-10T04:00:00")

    assert await api.fetch_appointments_by_date(date(2024, 3, 9)) == []
    assert await api.get_clinic_locations() == [
        {"id": 1, "name": "Indiranagar"},
        {"id": 2, "name": "Koramangala"},
    ]


@pytest.mark.asyncio
async def test_invalid_booking_returns_false(api: ClinicApiClient, locations):
    assert await api.persist_appointment({"name": "Asha"}) is False


@pytest.mark.asyncio
async def test_update_and_delete(api: ClinicApiClient, locations):
    await api.persist_appointment(
        {"datetime": "2024-03-10T09:30", "name": "Asha", "clinicLocation": 1, "updated_by": "Dr. Rao"}
    )
    appointment_id = (await api.fetch_appointments_by_date(date(2024, 3, 10)))[0]["id"]

    updated = await api.update_appointment(
        {
            "id": appointment_id,
            "patientName": "Asha",
            "status": "completed",
            "amount": 500,
            "updated_by": "Dr. Rao",
            "clinic_id": 1,
        }
    )
    assert updated == {"success": True, "data": {"id": appointment_id}}

    assert await api.delete_appointment(appointment_id) == {"success": True}
    assert await api.delete_appointment(appointment_id) == {
        "success": False,
        "error": "Appointment not found",
    }


@pytest.mark.asyncio
async def test_update_missing_appointment(api: ClinicApiClient, locations):
    result = await api.update_appointment(
        {"id": 77, "patientName": "Nobody", "updated_by": "Dr. Rao", "clinic_id": 1}
    )
    assert result == {"success": False, "error": "Appointment not found"}


@pytest.mark.asyncio
async def test_user_management(api: ClinicApiClient):
    assert await api.add_user("admin@example.com", is_admin=True) is True
    assert await api.add_user("admin@example.com") is False
    assert await api.is_admin("admin@example.com") is True
    assert await api.is_admin("stranger@example.com") is False

    users = await api.get_all_users()
    assert [u["email"] for u in users] == ["admin@example.com"]

    user_id = users[0]["id"]
    assert await api.update_user(user_id, "admin@example.com", False) is True
    assert await api.is_admin("admin@example.com") is False
    assert await api.delete_user(user_id) is True
    assert await api.delete_user(user_id) is False
    assert await api.get_user_by_email("admin@example.com") is None


@pytest.mark.asyncio
async def test_transport_failures_use_per_call_sentinels(offline_api: ClinicApiClient):
    assert await offline_api.check_user_access("asha@example.com") is False
    assert await offline_api.get_clinic_locations() == []
    assert await offline_api.persist_appointment({"name": "Asha"}) is False
    assert await offline_api.update_appointment({"id": 1}) == {
        "success": False,
        "error": "Failed to update appointment",
    }
    assert await offline_api.delete_appointment(1) == {
        "success": False,
        "error": "Failed to delete appointment",
    }
    assert await offline_api.get_user_by_email("asha@example.com") is None
    assert await offline_api.get_all_users() == []
    assert await offline_api.add_user("asha@example.com") is False

    with pytest.raises(httpx.ConnectError):
        await offline_api.fetch_appointments_by_date(date(2024, 3, 10))


def test_format_date_for_query_uses_calendar_date():
    assert format_date_for_query(date(2024, 3, 10)) == "2024-03-10"

    # 22:00 at UTC-5 is already the next day in UTC; the caller's date wins
    evening = datetime(2024, 3, 10, 22, 0, tzinfo=timezone(timedelta(hours=-5)))
    assert format_date_for_query(evening) == "2024-03-10"


def test_discover_time_zone_from_env(monkeypatch):
    monkeypatch.setenv("TZ", ":Asia/Kolkata")
    assert discover_time_zone() == "Asia/Kolkata"


def test_discover_time_zone_from_localtime_link(monkeypatch, tmp_path):
    monkeypatch.delenv("TZ", raising=False)
    link = tmp_path / "localtime"
    link.symlink_to(tmp_path / "usr" / "share" / "zoneinfo" / "Europe" / "Berlin")

    assert discover_time_zone(link) == "Europe/Berlin"


def test_discover_time_zone_falls_back_to_utc(monkeypatch, tmp_path):
    monkeypatch.setenv("TZ", "Not/AZone")
    assert discover_time_zone(tmp_path / "missing") == "UTC"


def test_discover_time_zone_skips_region_directories(monkeypatch, tmp_path):
    monkeypatch.setenv("TZ", "Asia")
    assert discover_time_zone(tmp_path / "missing") == "UTC"
