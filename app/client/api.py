"""HTTP client for the clinic booking API."""

from datetime import date, datetime
from typing import Any

import httpx
import structlog

from app.client.local_time import discover_time_zone, format_date_for_query

logger = structlog.get_logger()


class ClinicApiClient:
    """
    One coroutine per server endpoint.

    Each call keeps its own failure behaviour: the access check and writes
    return ``False``, list calls return ``[]``, update and delete return the
    error body, and ``fetch_appointments_by_date`` re-raises so the caller
    can show a load error.
    """

    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        client: httpx.AsyncClient | None = None,
        api_prefix: str = "/api",
        time_zone: str | None = None,
        timeout: float = 10.0,
    ):
        self._client = client or httpx.AsyncClient(base_url=base_url, timeout=timeout)
        self._owns_client = client is None
        self.api_prefix = api_prefix.rstrip("/")
        self.time_zone = time_zone or discover_time_zone()

    async def __aenter__(self) -> "ClinicApiClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying client if this instance created it."""
        if self._owns_client:
            await self._client.aclose()

    def _url(self, endpoint: str) -> str:
        return f"{self.api_prefix}/{endpoint}"

    @staticmethod
    def _error_body(response: httpx.Response | None, fallback: str) -> dict:
        """Server error body if it has one, else a generic failure."""
        if response is not None:
            try:
                body = response.json()
            except ValueError:
                body = None
            if isinstance(body, dict) and "error" in body:
                return {"success": False, "error": body["error"]}
        return {"success": False, "error": fallback}

    # ------------------------------------------------------------------
    # Access
    # ------------------------------------------------------------------

    async def check_user_access(self, email: str) -> bool:
        """Whether ``email`` is on the allow-list; False on any failure."""
        try:
            response = await self._client.post(self._url("check-access"), json={"email": email})
            response.raise_for_status()
            return bool(response.json()["isAllowed"])
        except (httpx.HTTPError, KeyError, ValueError) as e:
            logger.error("check_user_access_failed", error=str(e))
            return False

    # ------------------------------------------------------------------
    # Clinic locations
    # ------------------------------------------------------------------

    async def get_clinic_locations(self) -> list[dict]:
        """All clinic locations; empty list on failure."""
        try:
            response = await self._client.get(self._url("get-clinic-locations"))
            response.raise_for_status()
            return response.json()["data"]
        except (httpx.HTTPError, KeyError, ValueError) as e:
            logger.error("get_clinic_locations_failed", error=str(e))
            return []

    # ------------------------------------------------------------------
    # Appointments
    # ------------------------------------------------------------------

    async def fetch_appointments_by_date(
        self,
        day: date | datetime,
        location: int | None = None,
    ) -> list[dict]:
        """
        Appointments on ``day`` in the caller's time zone.

        Raises:
            httpx.HTTPError: On transport failure or an error status
        """
        params: dict[str, Any] = {
            "date": format_date_for_query(day),
            "timeZone": self.time_zone,
        }
        if location is not None:
            params["location"] = location

        try:
            response = await self._client.get(self._url("get-appointments"), params=params)
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.error("fetch_appointments_failed", error=str(e))
            raise
        return response.json()["data"]

    async def persist_appointment(self, form: dict) -> bool:
        """
        Book an appointment.

        Args:
            form: ``datetime``, ``name``, ``clinicLocation``, ``phone``,
                ``notes`` and ``updated_by`` from the booking form

        Returns:
            True when the server stored it
        """
        payload = {**form, "timeZone": self.time_zone}
        try:
            response = await self._client.post(
                self._url("persist-appointment"), json={"payload": payload}
            )
            response.raise_for_status()
            return bool(response.json().get("success"))
        except (httpx.HTTPError, ValueError) as e:
            logger.error("persist_appointment_failed", error=str(e))
            return False

    async def update_appointment(self, payload: dict) -> dict:
        """Save the management dialog; returns ``{success, data}`` or ``{success, error}``."""
        payload = {**payload, "timeZone": self.time_zone}
        response = None
        try:
            response = await self._client.put(
                self._url("update-appointment"), json={"payload": payload}
            )
            response.raise_for_status()
            return response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error("update_appointment_failed", error=str(e))
            return self._error_body(response, "Failed to update appointment")

    async def delete_appointment(self, appointment_id: int) -> dict:
        """Delete an appointment; returns ``{success}`` or ``{success, error}``."""
        response = None
        try:
            response = await self._client.delete(
                self._url("delete-appointment"), params={"id": appointment_id}
            )
            response.raise_for_status()
            return response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error("delete_appointment_failed", appointment_id=appointment_id, error=str(e))
            return self._error_body(response, "Failed to delete appointment")

    # ------------------------------------------------------------------
    # User management
    # ------------------------------------------------------------------

    async def _manage_users(self, action: str, **fields: Any) -> dict:
        response = await self._client.post(
            self._url("manage-users"), json={"action": action, **fields}
        )
        response.raise_for_status()
        return response.json()

    async def get_user_by_email(self, email: str) -> dict | None:
        """Allow-list entry for ``email``, or None."""
        try:
            body = await self._manage_users("get-user-by-email", email=email)
            return body.get("user")
        except (httpx.HTTPError, ValueError) as e:
            logger.error("get_user_by_email_failed", error=str(e))
            return None

    async def is_admin(self, email: str) -> bool:
        """Whether the signed-in user should see admin features."""
        user = await self.get_user_by_email(email)
        return bool(user and user.get("is_admin"))

    async def get_all_users(self) -> list[dict]:
        try:
            body = await self._manage_users("get-all-users")
            return body.get("users", [])
        except (httpx.HTTPError, ValueError) as e:
            logger.error("get_all_users_failed", error=str(e))
            return []

    async def add_user(self, email: str, is_admin: bool = False) -> bool:
        """False when the email is already listed or the call failed."""
        try:
            body = await self._manage_users("add-user", email=email, isAdmin=is_admin)
            return bool(body.get("success"))
        except (httpx.HTTPError, ValueError) as e:
            logger.error("add_user_failed", error=str(e))
            return False

    async def update_user(self, user_id: int, email: str, is_admin: bool) -> bool:
        try:
            body = await self._manage_users(
                "update-user", userId=user_id, email=email, isAdmin=is_admin
            )
            return bool(body.get("success"))
        except (httpx.HTTPError, ValueError) as e:
            logger.error("update_user_failed", user_id=user_id, error=str(e))
            return False

    async def delete_user(self, user_id: int) -> bool:
        try:
            body = await self._manage_users("delete-user", userId=user_id)
            return bool(body.get("success"))
        except (httpx.HTTPError, ValueError) as e:
            logger.error("delete_user_failed", user_id=user_id, error=str(e))
            return False
