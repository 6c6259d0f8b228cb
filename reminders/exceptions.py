"""
Custom Exceptions for the Patient Reminder Handlers

All exceptions carry a plain, caller-facing message plus keyword context
used for structured logging.
"""

from dataclasses import dataclass
from typing import Any


class ReminderError(Exception):
    """Base exception for the reminder handlers."""

    def __init__(self, message: str, **context: Any) -> None:
        self.message = message
        self.context = context
        super().__init__(message)

    def __str__(self) -> str:
        if self.context:
            context_str = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
            return f"{self.message} ({context_str})"
        return self.message


class ConfigurationError(ReminderError):
    """Required configuration is missing or invalid."""


@dataclass
class RpcError(ReminderError):
    """A stored procedure call failed at the transport or PostgREST layer."""

    function: str
    code: str | None = None
    status_code: int | None = None

    def __init__(
        self,
        function: str,
        message: str,
        code: str | None = None,
        status_code: int | None = None,
    ) -> None:
        self.function = function
        self.code = code
        self.status_code = status_code
        super().__init__(
            message,
            function=function,
            code=code,
            status_code=status_code,
        )


@dataclass
class FetchError(ReminderError):
    """The due-set query failed; fatal for the invocation."""

    function: str

    def __init__(self, function: str, message: str) -> None:
        self.function = function
        super().__init__(message, function=function)


@dataclass
class DispatchError(ReminderError):
    """A single patient's notification call failed; recovered per item."""

    patient_id: str
    function: str | None = None

    def __init__(
        self,
        patient_id: str,
        message: str,
        function: str | None = None,
    ) -> None:
        self.patient_id = patient_id
        self.function = function
        super().__init__(message, patient_id=patient_id, function=function)
