"""
Outbound integrations for the reminder handlers.

- supabase_rpc: stored procedure calls over PostgREST (httpx)
- push: best-effort device delivery (SNS mobile push via boto3)
"""

from reminders.tools.push import (
    DeliveryChannel,
    DeliveryResult,
    LoggingDeliveryChannel,
    SnsPushDeliveryChannel,
    get_delivery_channel,
)
from reminders.tools.supabase_rpc import SupabaseNotificationBackend, SupabaseRpcClient

__all__ = [
    "DeliveryChannel",
    "DeliveryResult",
    "LoggingDeliveryChannel",
    "SnsPushDeliveryChannel",
    "get_delivery_channel",
    "SupabaseNotificationBackend",
    "SupabaseRpcClient",
]
