"""
Reminder Models

Pydantic models for the rows returned by the reminder stored procedures,
the receipts returned by the notification procedures, and the per-patient
outcomes and response envelope returned by the handlers.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class DueItem(BaseModel):
    """
    A patient due for a reminder in the current run.

    Rows come straight from the database; unknown columns are ignored.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    patient_id: str = Field(..., min_length=1, description="Patient identifier")
    patient_first_name: str | None = Field(default=None, description="Patient first name")
    patient_last_name: str | None = Field(default=None, description="Patient last name")

    @field_validator("patient_id", mode="before")
    @classmethod
    def _coerce_patient_id(cls, value: Any) -> Any:
        # Integer primary keys come back as JSON numbers
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    @property
    def patient_name(self) -> str:
        """Display name, first then last."""
        parts = [self.patient_first_name, self.patient_last_name]
        return " ".join(p for p in parts if p)

    @property
    def idempotency_key(self) -> str:
        """Key identifying this reminder across overlapping runs."""
        return self.patient_id


class FollowUpPatient(DueItem):
    """Patient whose follow-up appointment is coming up."""

    follow_up_date: str | None = Field(
        default=None, description="Follow-up date, passed back verbatim"
    )

    @field_validator("follow_up_date", mode="before")
    @classmethod
    def _coerce_date(cls, value: Any) -> Any:
        if hasattr(value, "isoformat"):
            return value.isoformat()
        return value

    @property
    def idempotency_key(self) -> str:
        return f"{self.patient_id}:{self.follow_up_date or ''}"


class MouthwashReminder(DueItem):
    """Active mouthwash regimen reminder for one time-of-day slot."""

    reminder_id: str | None = Field(default=None, description="Reminder row identifier")
    reminder_text: str = Field(default="", description="Free-text reminder body")
    time_of_day: str | None = Field(
        default=None, description="Slot tag, e.g. morning or evening"
    )

    @field_validator("reminder_id", mode="before")
    @classmethod
    def _coerce_reminder_id(cls, value: Any) -> Any:
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("reminder_text", mode="before")
    @classmethod
    def _null_text(cls, value: Any) -> Any:
        return "" if value is None else value

    @property
    def idempotency_key(self) -> str:
        return f"{self.patient_id}:{self.time_of_day or ''}"


class NotificationReceipt(BaseModel):
    """Result of a notification stored procedure."""

    model_config = ConfigDict(frozen=True, extra="allow")

    has_token: bool = Field(default=False, description="Patient has a registered device")
    fcm_token: str | None = Field(default=None, description="FCM device token")
    title: str | None = Field(default=None, description="Push title chosen by the database")
    body: str | None = Field(default=None, description="Push body chosen by the database")

    @field_validator("has_token", mode="before")
    @classmethod
    def _null_is_false(cls, value: Any) -> Any:
        return False if value is None else value

    @property
    def deliverable(self) -> bool:
        """Whether a push delivery should be attempted."""
        return bool(self.has_token and self.fcm_token)


class DispatchOutcome(BaseModel):
    """Outcome of notifying one patient. Never mutated after creation."""

    model_config = ConfigDict(frozen=True)

    patient_id: str
    patient_name: str | None = None
    success: bool
    error: str | None = None
    has_token: bool | None = None
    time_of_day: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready dict without unset fields."""
        return self.model_dump(exclude_none=True)


class ResponseEnvelope(BaseModel):
    """Top-level result of one handler invocation."""

    success: bool
    message: str | None = None
    time_of_day: str | None = None
    results: list[DispatchOutcome] | None = None
    error: str | None = None

    @classmethod
    def failure(cls, error: str) -> "ResponseEnvelope":
        return cls(success=False, error=error)

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready dict; failure envelopes carry no results key."""
        return self.model_dump(exclude_none=True)
