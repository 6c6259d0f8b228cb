"""
Fake Notification Backend for Testing

In-memory stand-in for the reminder stored procedures. Returns configured
rows, records every notification call, and can simulate fetch failures,
per-patient procedure errors and unexpected exceptions.

Usage:
    from tests.mocks.fake_backend import FakeNotificationBackend

    backend = FakeNotificationBackend(follow_ups=[{...}])
    backend.fail_dispatch("pat-002", "permission denied")
    job = FollowUpReminderJob(backend=backend, dispatcher=...)
"""

from typing import Any

from reminders.exceptions import DispatchError, FetchError
from reminders.models.reminders import (
    FollowUpPatient,
    MouthwashReminder,
    NotificationReceipt,
)
from reminders.tools.push import DeliveryResult


class FakeNotificationBackend:
    """
    NotificationBackend backed by lists of rows.

    Every patient has a device token unless listed in without_token.
    """

    def __init__(
        self,
        follow_ups: list[dict[str, Any]] | None = None,
        reminders: list[dict[str, Any]] | None = None,
    ) -> None:
        self.follow_ups = list(follow_ups or [])
        self.reminders = list(reminders or [])
        self.fetch_error: str | None = None
        self.dispatch_errors: dict[str, str] = {}
        self.unexpected_errors: dict[str, Exception] = {}
        self.without_token: set[str] = set()
        self.calls: list[tuple[str, dict[str, Any]]] = []
        self.closed = False

    # --- Failure injection ---

    def fail_fetch(self, message: str) -> None:
        self.fetch_error = message

    def fail_dispatch(self, patient_id: str, message: str) -> None:
        self.dispatch_errors[patient_id] = message

    def raise_on_dispatch(self, patient_id: str, exc: Exception) -> None:
        self.unexpected_errors[patient_id] = exc

    # --- NotificationBackend ---

    def fetch_due_followups(self, days_advance: int) -> list[FollowUpPatient]:
        self.calls.append(("fetch_due_followups", {"days_advance": days_advance}))
        if self.fetch_error:
            raise FetchError("get_follow_up_patients_due_in_days", self.fetch_error)
        return [FollowUpPatient.model_validate(row) for row in self.follow_ups]

    def fetch_active_reminders(self) -> list[MouthwashReminder]:
        self.calls.append(("fetch_active_reminders", {}))
        if self.fetch_error:
            raise FetchError("get_active_mouthwash_reminders", self.fetch_error)
        return [MouthwashReminder.model_validate(row) for row in self.reminders]

    def _receipt(self, patient_id: str, function: str) -> NotificationReceipt:
        if patient_id in self.unexpected_errors:
            raise self.unexpected_errors[patient_id]
        if patient_id in self.dispatch_errors:
            raise DispatchError(patient_id, self.dispatch_errors[patient_id], function=function)
        if patient_id in self.without_token:
            return NotificationReceipt(has_token=False)
        return NotificationReceipt(has_token=True, fcm_token=f"fcm-token-{patient_id}")

    def dispatch_followup_notification(
        self,
        patient_id: str,
        follow_up_date: str | None,
    ) -> NotificationReceipt:
        self.calls.append(
            (
                "dispatch_followup_notification",
                {"patient_id": patient_id, "follow_up_date": follow_up_date},
            )
        )
        return self._receipt(patient_id, "send_follow_up_notification")

    def dispatch_mouthwash_notification(
        self,
        patient_id: str,
        reminder_text: str,
        time_of_day: str,
    ) -> NotificationReceipt:
        self.calls.append(
            (
                "dispatch_mouthwash_notification",
                {
                    "patient_id": patient_id,
                    "reminder_text": reminder_text,
                    "time_of_day": time_of_day,
                },
            )
        )
        return self._receipt(patient_id, "send_mouthwash_notification")

    def dispatched_patient_ids(self) -> list[str]:
        return [args["patient_id"] for name, args in self.calls if name.startswith("dispatch_")]

    def close(self) -> None:
        self.closed = True

    def __enter__(self) -> "FakeNotificationBackend":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


class RecordingDeliveryChannel:
    """DeliveryChannel that records attempts; can be told to raise."""

    name = "recording"

    def __init__(self, error: Exception | None = None) -> None:
        self.attempts: list[dict[str, Any]] = []
        self.error = error

    def attempt_delivery(
        self,
        token: str,
        *,
        title: str | None = None,
        body: str | None = None,
    ) -> DeliveryResult:
        self.attempts.append({"token": token, "title": title, "body": body})
        if self.error is not None:
            raise self.error
        return DeliveryResult(delivered=True, channel=self.name, message_id=f"msg-{len(self.attempts)}")
