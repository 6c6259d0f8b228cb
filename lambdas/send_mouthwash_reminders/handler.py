"""
SendMouthwashReminders Lambda Handler

Main entry point for the twice-daily mouthwash regimen reminder Lambda.
Fetches active reminders, keeps those for the requested time of day, and
records a notification for each through the database.

Trigger: EventBridge Scheduled Rules
    cron(0 8 * * ? *)  with detail {"timeOfDay": "morning"}
    cron(0 20 * * ? *) with detail {"timeOfDay": "evening"}
    or API Gateway POST with body {"timeOfDay": "..."}
Output: JSON summary with one result per reminder sent

Flow:
1. Answer CORS preflight requests immediately
2. Resolve time of day (request, then TIME_OF_DAY, then "morning")
3. Fetch all active mouthwash reminders
4. Keep reminders tagged with the resolved time of day
5. Call send_mouthwash_notification for each, isolating failures
6. Return the response envelope (200, or 500 if nothing could be processed)
"""

import os
import time
from dataclasses import dataclass
from typing import Any

import structlog

from lambdas.send_mouthwash_reminders.time_of_day import (
    filter_by_time_of_day,
    resolve_time_of_day,
)
from reminders.backend import NotificationBackend
from reminders.config import Settings, get_settings
from reminders.dispatch import BatchDispatcher, PushMessage, summarize
from reminders.http import (
    failure_response,
    is_preflight_request,
    parse_request_payload,
    preflight_response,
    success_response,
)
from reminders.logging_config import configure_logging
from reminders.models.reminders import MouthwashReminder, NotificationReceipt, ResponseEnvelope
from reminders.tools.push import DeliveryChannel, get_delivery_channel
from reminders.tools.supabase_rpc import SupabaseNotificationBackend, SupabaseRpcClient

configure_logging(os.environ.get("REMINDERS_LOG_LEVEL", "INFO"))

log = structlog.get_logger()


def _get_backend(settings: Settings) -> NotificationBackend:
    """Open the Supabase RPC backend."""
    url, key = settings.require_backend_credentials()
    client = SupabaseRpcClient(url, key, timeout=settings.rpc_timeout_seconds)
    return SupabaseNotificationBackend(client)


def _get_delivery_channel(settings: Settings) -> DeliveryChannel:
    return get_delivery_channel(settings)


def mouthwash_message(reminder: MouthwashReminder) -> PushMessage:
    """Default push text when the database supplies none."""
    return PushMessage(
        title="Mouthwash reminder",
        body=reminder.reminder_text or f"Time for your {reminder.time_of_day} mouthwash rinse.",
    )


@dataclass
class MouthwashReminderJob:
    """One run of the mouthwash reminder batch for a single time of day."""

    backend: NotificationBackend
    dispatcher: BatchDispatcher
    time_of_day: str

    def _send(self, reminder: MouthwashReminder) -> NotificationReceipt:
        return self.backend.dispatch_mouthwash_notification(
            reminder.patient_id,
            reminder.reminder_text,
            reminder.time_of_day,
        )

    def run(self) -> ResponseEnvelope:
        """
        Fetch active reminders for this slot and notify each patient.

        Raises:
            FetchError: If the active-reminder query fails
        """
        reminders = filter_by_time_of_day(
            self.backend.fetch_active_reminders(),
            self.time_of_day,
        )

        log.info(
            "mouthwash_reminders_due",
            count=len(reminders),
            time_of_day=self.time_of_day,
        )

        outcomes = self.dispatcher.dispatch(
            reminders,
            self._send,
            message_for=mouthwash_message,
            time_of_day=self.time_of_day,
        )

        return ResponseEnvelope(
            success=True,
            message=f"Processed {len(outcomes)} {self.time_of_day} mouthwash reminders",
            time_of_day=self.time_of_day,
            results=outcomes,
        )


def lambda_handler(event: dict[str, Any], context: Any) -> dict[str, Any]:
    """
    Main Lambda handler for mouthwash reminders.

    Args:
        event: EventBridge scheduled event or API Gateway proxy event
        context: Lambda context

    Returns:
        API Gateway proxy response
    """
    if is_preflight_request(event):
        return preflight_response()

    start_time = time.time()

    try:
        settings = get_settings()
        time_of_day = resolve_time_of_day(
            parse_request_payload(event),
            settings.default_time_of_day,
        )
        log.info("mouthwash_reminders_started", time_of_day=time_of_day)

        with _get_backend(settings) as backend:
            job = MouthwashReminderJob(
                backend=backend,
                dispatcher=BatchDispatcher(
                    channel=_get_delivery_channel(settings),
                    max_workers=settings.dispatch_max_workers,
                ),
                time_of_day=time_of_day,
            )
            envelope = job.run()
    except Exception as e:
        log.exception("mouthwash_reminders_failed", error=str(e))
        return failure_response(e)

    log.info(
        "mouthwash_reminders_completed",
        time_of_day=envelope.time_of_day,
        duration_ms=round((time.time() - start_time) * 1000, 2),
        **summarize(envelope.results or []),
    )

    return success_response(envelope)
