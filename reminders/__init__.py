# Shared Infrastructure for the Patient Reminder Handlers
"""
Shared infrastructure for the scheduled reminder Lambdas.

This package provides:
- Configuration management (pydantic-settings)
- Pydantic models for due rows, receipts, outcomes and responses
- The NotificationBackend capability and its Supabase RPC implementation
- Push delivery channels
- The batch dispatcher and HTTP trigger helpers
- Custom exceptions
"""

from reminders.config import Settings, get_settings
from reminders.dispatch import BatchDispatcher, PushMessage
from reminders.exceptions import (
    ConfigurationError,
    DispatchError,
    FetchError,
    ReminderError,
    RpcError,
)

__all__ = [
    # Config
    "Settings",
    "get_settings",
    # Dispatch
    "BatchDispatcher",
    "PushMessage",
    # Exceptions
    "ReminderError",
    "ConfigurationError",
    "RpcError",
    "FetchError",
    "DispatchError",
]
