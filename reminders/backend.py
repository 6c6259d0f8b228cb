"""
Notification Backend Capability

The stored procedures that decide who is due and record notifications are
reached only through this protocol, so handlers can run against the real
database or an in-memory fake.
"""

from types import TracebackType
from typing import Protocol

from reminders.models.reminders import (
    FollowUpPatient,
    MouthwashReminder,
    NotificationReceipt,
)


class NotificationBackend(Protocol):
    """
    Queries and actions the reminder handlers need from the database.

    Fetch methods raise FetchError; dispatch methods raise DispatchError.
    """

    def fetch_due_followups(self, days_advance: int) -> list[FollowUpPatient]: ...

    def fetch_active_reminders(self) -> list[MouthwashReminder]: ...

    def dispatch_followup_notification(
        self,
        patient_id: str,
        follow_up_date: str | None,
    ) -> NotificationReceipt: ...

    def dispatch_mouthwash_notification(
        self,
        patient_id: str,
        reminder_text: str,
        time_of_day: str,
    ) -> NotificationReceipt: ...

    def __enter__(self) -> "NotificationBackend": ...

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None: ...
