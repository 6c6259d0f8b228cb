"""
Supabase RPC Tools

Thin synchronous client for calling Postgres functions through the
PostgREST endpoint of a Supabase project, and the NotificationBackend
built on top of it.

Wire format:
    POST {supabase_url}/rest/v1/rpc/{function}
    apikey: <service role key>
    Authorization: Bearer <service role key>
    body: JSON object of named function arguments
"""

from types import TracebackType
from typing import Any, TypeVar

import httpx
import structlog
from pydantic import ValidationError

from reminders.exceptions import DispatchError, FetchError, RpcError
from reminders.models.reminders import (
    FollowUpPatient,
    MouthwashReminder,
    NotificationReceipt,
)

log = structlog.get_logger()

ItemT = TypeVar("ItemT", FollowUpPatient, MouthwashReminder)


# Stored procedures owned by the database
RPC_GET_FOLLOW_UP_PATIENTS = "get_follow_up_patients_due_in_days"
RPC_SEND_FOLLOW_UP_NOTIFICATION = "send_follow_up_notification"
RPC_GET_ACTIVE_MOUTHWASH_REMINDERS = "get_active_mouthwash_reminders"
RPC_SEND_MOUTHWASH_NOTIFICATION = "send_mouthwash_notification"


def _error_details(response: httpx.Response) -> tuple[str, str | None]:
    """Extract (message, code) from a PostgREST error response."""
    try:
        payload = response.json()
    except ValueError:
        payload = None

    if isinstance(payload, dict):
        message = payload.get("message") or payload.get("error") or payload.get("msg")
        if message:
            return str(message), payload.get("code")

    text = response.text.strip()
    return text or f"HTTP {response.status_code}", None


class SupabaseRpcClient:
    """
    Calls Postgres functions exposed by PostgREST.

    The underlying httpx.Client keeps a connection pool and is safe to share
    between dispatch worker threads.
    """

    def __init__(
        self,
        base_url: str,
        service_role_key: str,
        *,
        timeout: float = 10.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._client = httpx.Client(
            base_url=f"{self.base_url}/rest/v1",
            timeout=httpx.Timeout(timeout),
            headers={
                "apikey": service_role_key,
                "Authorization": f"Bearer {service_role_key}",
                "Content-Type": "application/json",
                "Accept": "application/json",
            },
            transport=transport,
        )

    def call(self, function: str, params: dict[str, Any] | None = None) -> Any:
        """
        Invoke a Postgres function and return its decoded JSON result.

        Args:
            function: Function name in the exposed schema
            params: Named arguments

        Returns:
            Decoded JSON (None for an empty body)

        Raises:
            RpcError: On transport failure or a non-2xx response
        """
        log.debug("rpc_call", function=function)

        try:
            response = self._client.post(f"/rpc/{function}", json=params or {})
        except httpx.HTTPError as e:
            log.error("rpc_transport_failed", function=function, error=str(e))
            raise RpcError(function, str(e) or type(e).__name__) from e

        if response.is_error:
            message, code = _error_details(response)
            log.error(
                "rpc_failed",
                function=function,
                status_code=response.status_code,
                code=code,
                error=message,
            )
            raise RpcError(
                function,
                message,
                code=code,
                status_code=response.status_code,
            )

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise RpcError(
                function,
                "Invalid JSON in response",
                status_code=response.status_code,
            ) from e

    def close(self) -> None:
        """Close the underlying connection pool."""
        self._client.close()

    def __enter__(self) -> "SupabaseRpcClient":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()


class SupabaseNotificationBackend:
    """NotificationBackend backed by the reminder stored procedures."""

    def __init__(self, client: SupabaseRpcClient) -> None:
        self.client = client

    def _fetch_rows(self, function: str, params: dict[str, Any] | None = None) -> list[dict]:
        try:
            data = self.client.call(function, params)
        except RpcError as e:
            raise FetchError(function, e.message) from e

        if data is None:
            return []
        if not isinstance(data, list):
            raise FetchError(function, f"Expected a list of rows, got {type(data).__name__}")
        return data

    def _parse_rows(self, function: str, rows: list, model: type[ItemT]) -> list[ItemT]:
        """Validate each row; a row that cannot be addressed is logged and skipped."""
        items = []
        for index, row in enumerate(rows):
            try:
                items.append(model.model_validate(row))
            except ValidationError as e:
                log.warning(
                    "due_row_skipped",
                    function=function,
                    row_index=index,
                    error_count=e.error_count(),
                    error=str(e),
                )
        return items

    def fetch_due_followups(self, days_advance: int) -> list[FollowUpPatient]:
        """Patients whose follow-up appointment is due in days_advance days."""
        rows = self._fetch_rows(RPC_GET_FOLLOW_UP_PATIENTS, {"days_advance": days_advance})
        patients = self._parse_rows(RPC_GET_FOLLOW_UP_PATIENTS, rows, FollowUpPatient)

        log.info("follow_up_patients_fetched", days_advance=days_advance, count=len(patients))
        return patients

    def fetch_active_reminders(self) -> list[MouthwashReminder]:
        """All active mouthwash reminders, every time-of-day slot."""
        rows = self._fetch_rows(RPC_GET_ACTIVE_MOUTHWASH_REMINDERS)
        reminders = self._parse_rows(RPC_GET_ACTIVE_MOUTHWASH_REMINDERS, rows, MouthwashReminder)

        log.info("mouthwash_reminders_fetched", count=len(reminders))
        return reminders

    def _send(self, function: str, patient_id: str, params: dict[str, Any]) -> NotificationReceipt:
        try:
            data = self.client.call(function, params)
        except RpcError as e:
            raise DispatchError(patient_id, e.message, function=function) from e

        # Set-returning variants come back as a single-row list
        if isinstance(data, list):
            data = data[0] if data else None
        return NotificationReceipt.model_validate(data or {})

    def dispatch_followup_notification(
        self,
        patient_id: str,
        follow_up_date: str | None,
    ) -> NotificationReceipt:
        """Record a follow-up notification and look up the device token."""
        return self._send(
            RPC_SEND_FOLLOW_UP_NOTIFICATION,
            patient_id,
            {"p_patient_id": patient_id, "p_follow_up_date": follow_up_date},
        )

    def dispatch_mouthwash_notification(
        self,
        patient_id: str,
        reminder_text: str,
        time_of_day: str,
    ) -> NotificationReceipt:
        """Record a mouthwash notification and look up the device token."""
        return self._send(
            RPC_SEND_MOUTHWASH_NOTIFICATION,
            patient_id,
            {
                "p_patient_id": patient_id,
                "p_reminder_text": reminder_text,
                "p_time_of_day": time_of_day,
            },
        )

    def close(self) -> None:
        self.client.close()

    def __enter__(self) -> "SupabaseNotificationBackend":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()
