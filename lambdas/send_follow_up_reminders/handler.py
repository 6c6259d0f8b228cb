"""
SendFollowUpReminders Lambda Handler

Main entry point for the daily follow-up appointment reminder Lambda.
Finds patients whose follow-up is due soon and records a notification for
each through the database.

Trigger: EventBridge Scheduled Rule (cron(0 8 * * ? *)) or API Gateway POST
Output: JSON summary with one result per patient

Flow:
1. Answer CORS preflight requests immediately
2. Load settings and open the Supabase RPC backend
3. Fetch patients with a follow-up due in N days (default 2)
4. Call send_follow_up_notification for each patient, isolating failures
5. Attempt push delivery for patients with a device token
6. Return the response envelope (200, or 500 if nothing could be processed)
"""

import os
import time
from dataclasses import dataclass
from typing import Any

import structlog

from reminders.backend import NotificationBackend
from reminders.config import Settings, get_settings
from reminders.dispatch import BatchDispatcher, PushMessage, summarize
from reminders.http import (
    failure_response,
    is_preflight_request,
    preflight_response,
    success_response,
)
from reminders.logging_config import configure_logging
from reminders.models.reminders import FollowUpPatient, NotificationReceipt, ResponseEnvelope
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


def follow_up_message(patient: FollowUpPatient) -> PushMessage:
    """Default push text when the database supplies none."""
    if patient.follow_up_date:
        body = f"Your follow-up appointment is scheduled for {patient.follow_up_date}."
    else:
        body = "Your follow-up appointment is coming up."
    return PushMessage(title="Follow-up appointment reminder", body=body)


@dataclass
class FollowUpReminderJob:
    """One run of the follow-up reminder batch."""

    backend: NotificationBackend
    dispatcher: BatchDispatcher
    days_advance: int = 2

    def _send(self, patient: FollowUpPatient) -> NotificationReceipt:
        return self.backend.dispatch_followup_notification(
            patient.patient_id,
            patient.follow_up_date,
        )

    def run(self) -> ResponseEnvelope:
        """
        Fetch due patients and notify each of them.

        Raises:
            FetchError: If the due-patient query fails
        """
        patients = self.backend.fetch_due_followups(self.days_advance)

        log.info(
            "follow_up_patients_due",
            count=len(patients),
            days_advance=self.days_advance,
        )

        outcomes = self.dispatcher.dispatch(
            patients,
            self._send,
            message_for=follow_up_message,
        )

        return ResponseEnvelope(
            success=True,
            message=f"Processed {len(outcomes)} follow-up reminders",
            results=outcomes,
        )


def lambda_handler(event: dict[str, Any], context: Any) -> dict[str, Any]:
    """
    Main Lambda handler for follow-up reminders.

    Args:
        event: EventBridge scheduled event or API Gateway proxy event
        context: Lambda context

    Returns:
        API Gateway proxy response
    """
    if is_preflight_request(event):
        return preflight_response()

    start_time = time.time()
    log.info("follow_up_reminders_started")

    try:
        settings = get_settings()
        with _get_backend(settings) as backend:
            job = FollowUpReminderJob(
                backend=backend,
                dispatcher=BatchDispatcher(
                    channel=_get_delivery_channel(settings),
                    max_workers=settings.dispatch_max_workers,
                ),
                days_advance=settings.follow_up_days_advance,
            )
            envelope = job.run()
    except Exception as e:
        log.exception("follow_up_reminders_failed", error=str(e))
        return failure_response(e)

    log.info(
        "follow_up_reminders_completed",
        duration_ms=round((time.time() - start_time) * 1000, 2),
        **summarize(envelope.results or []),
    )

    return success_response(envelope)
