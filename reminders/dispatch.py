"""
Batch Notification Dispatch

Runs the per-patient notification call over a due set and turns every
patient into exactly one DispatchOutcome, in fetch order. A failure for one
patient is recorded on that patient's outcome and never stops the batch.
"""

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Callable, Sequence, TypeVar

import structlog

from reminders.exceptions import DispatchError
from reminders.models.reminders import DispatchOutcome, DueItem, NotificationReceipt
from reminders.tools.push import DeliveryChannel

log = structlog.get_logger()

T = TypeVar("T", bound=DueItem)


@dataclass(frozen=True)
class PushMessage:
    """Title and body shown on the device."""

    title: str
    body: str


@dataclass
class BatchDispatcher:
    """
    Sends one notification per due item.

    Attributes:
        channel: Push delivery step, attempted when a receipt carries a token
        max_workers: 1 dispatches sequentially; more fans out on a thread pool
    """

    channel: DeliveryChannel
    max_workers: int = 1

    def dispatch(
        self,
        items: Sequence[T],
        send: Callable[[T], NotificationReceipt],
        *,
        message_for: Callable[[T], PushMessage] | None = None,
        time_of_day: str | None = None,
    ) -> list[DispatchOutcome]:
        """
        Notify every item and collect outcomes.

        Args:
            items: Due items in fetch order
            send: Remote notification call for one item
            message_for: Push text for one item (receipt title/body win)
            time_of_day: Slot tag copied onto successful outcomes

        Returns:
            One outcome per item, same order as items
        """

        def run(item: T) -> DispatchOutcome:
            return self._dispatch_one(item, send, message_for, time_of_day)

        if self.max_workers <= 1 or len(items) <= 1:
            return [run(item) for item in items]

        workers = min(self.max_workers, len(items))
        log.debug("dispatch_fan_out", workers=workers, items=len(items))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="reminder-dispatch") as executor:
            # map yields in submission order
            return list(executor.map(run, items))

    def _dispatch_one(
        self,
        item: T,
        send: Callable[[T], NotificationReceipt],
        message_for: Callable[[T], PushMessage] | None,
        time_of_day: str | None,
    ) -> DispatchOutcome:
        item_log = log.bind(patient_id=item.patient_id, idempotency_key=item.idempotency_key)

        try:
            try:
                receipt = send(item)
            except DispatchError as e:
                item_log.error("notification_dispatch_failed", error=e.message)
                return DispatchOutcome(
                    patient_id=item.patient_id,
                    patient_name=item.patient_name,
                    success=False,
                    error=e.message,
                )

            if receipt.deliverable:
                self._deliver(item, receipt, message_for, item_log)

            item_log.debug("notification_dispatched", has_token=receipt.has_token)
            return DispatchOutcome(
                patient_id=item.patient_id,
                patient_name=item.patient_name,
                success=True,
                has_token=receipt.has_token,
                time_of_day=time_of_day,
            )

        except Exception as e:
            item_log.exception("notification_processing_failed", error=str(e))
            return DispatchOutcome(
                patient_id=item.patient_id,
                success=False,
                error=str(e) or type(e).__name__,
            )

    def _deliver(
        self,
        item: T,
        receipt: NotificationReceipt,
        message_for: Callable[[T], PushMessage] | None,
        item_log,
    ) -> None:
        """Attempt push delivery; never affects the item's outcome."""
        try:
            default = message_for(item) if message_for else None
            title = receipt.title or (default.title if default else None)
            body = receipt.body or (default.body if default else None)
            result = self.channel.attempt_delivery(receipt.fcm_token, title=title, body=body)
        except Exception as e:
            item_log.warning("push_delivery_error", error=str(e))
            return

        item_log.debug(
            "push_delivery_attempted",
            channel=result.channel,
            delivered=result.delivered,
            error=result.error,
        )


def summarize(outcomes: Sequence[DispatchOutcome]) -> dict[str, int]:
    """Counts for the completion log line."""
    succeeded = sum(1 for o in outcomes if o.success)
    return {
        "processed": len(outcomes),
        "succeeded": succeeded,
        "failed": len(outcomes) - succeeded,
        "with_token": sum(1 for o in outcomes if o.has_token),
    }
