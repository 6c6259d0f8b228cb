"""Pydantic models for reminder rows, receipts and handler responses."""

from reminders.models.reminders import (
    DispatchOutcome,
    DueItem,
    FollowUpPatient,
    MouthwashReminder,
    NotificationReceipt,
    ResponseEnvelope,
)

__all__ = [
    "DispatchOutcome",
    "DueItem",
    "FollowUpPatient",
    "MouthwashReminder",
    "NotificationReceipt",
    "ResponseEnvelope",
]
