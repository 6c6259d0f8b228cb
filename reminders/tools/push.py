"""
Push Delivery Tools

Best-effort delivery of a reminder to a patient's device. A delivery
attempt never decides whether the reminder counts as sent: the database
record written by the notification procedure does.

Channels:
- LoggingDeliveryChannel: records intent only (no delivery)
- SnsPushDeliveryChannel: Amazon SNS mobile push to the FCM token
"""

import json
from dataclasses import dataclass
from typing import Protocol

import boto3
import structlog
from botocore.exceptions import ClientError

from reminders.config import Settings
from reminders.logging_config import mask_token

log = structlog.get_logger()


@dataclass(frozen=True)
class DeliveryResult:
    """Outcome of one delivery attempt."""

    delivered: bool
    channel: str
    message_id: str | None = None
    error: str | None = None


class DeliveryChannel(Protocol):
    """Pluggable push delivery step."""

    def attempt_delivery(
        self,
        token: str,
        *,
        title: str | None = None,
        body: str | None = None,
    ) -> DeliveryResult: ...


class LoggingDeliveryChannel:
    """Logs the push that would be sent. Used when no push provider is configured."""

    name = "log"

    def attempt_delivery(
        self,
        token: str,
        *,
        title: str | None = None,
        body: str | None = None,
    ) -> DeliveryResult:
        log.info(
            "push_delivery_skipped",
            token=mask_token(token),
            title=title,
            reason="no_push_provider_configured",
        )
        return DeliveryResult(delivered=False, channel=self.name)


class SnsPushDeliveryChannel:
    """
    Sends pushes through an SNS platform application backed by FCM.

    create_platform_endpoint is idempotent for an existing token with the
    same attributes, so the endpoint is resolved on every attempt.
    """

    name = "sns"

    def __init__(self, platform_application_arn: str, client) -> None:
        self.platform_application_arn = platform_application_arn
        self.client = client

    @staticmethod
    def build_message(title: str | None, body: str | None) -> str:
        """Build the SNS JSON message carrying an FCM notification."""
        notification = {"title": title or "Reminder", "body": body or ""}
        return json.dumps(
            {
                "default": notification["body"] or notification["title"],
                "GCM": json.dumps({"notification": notification}),
            }
        )

    def attempt_delivery(
        self,
        token: str,
        *,
        title: str | None = None,
        body: str | None = None,
    ) -> DeliveryResult:
        try:
            endpoint = self.client.create_platform_endpoint(
                PlatformApplicationArn=self.platform_application_arn,
                Token=token,
            )
            response = self.client.publish(
                TargetArn=endpoint["EndpointArn"],
                MessageStructure="json",
                Message=self.build_message(title, body),
            )
        except ClientError as e:
            log.warning(
                "push_delivery_failed",
                token=mask_token(token),
                error_code=e.response.get("Error", {}).get("Code"),
                error=str(e),
            )
            return DeliveryResult(delivered=False, channel=self.name, error=str(e))

        message_id = response.get("MessageId")
        log.info("push_delivered", token=mask_token(token), message_id=message_id)
        return DeliveryResult(delivered=True, channel=self.name, message_id=message_id)


def get_delivery_channel(settings: Settings) -> DeliveryChannel:
    """Pick the delivery channel for the configured environment."""
    if settings.push_enabled:
        client = boto3.client("sns", **settings.sns_config)
        return SnsPushDeliveryChannel(settings.push_platform_application_arn, client=client)
    return LoggingDeliveryChannel()
