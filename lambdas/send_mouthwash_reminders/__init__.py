"""
SendMouthwashReminders Lambda

Lambda triggered twice daily by EventBridge Scheduled Rules (or an HTTP
call) that reminds patients of their mouthwash regimen.

Components:
- handler: Lambda entry point and the MouthwashReminderJob batch
- time_of_day: slot resolution and reminder filtering

Flow:
1. Triggered at 08:00 (morning) and 20:00 (evening)
2. Fetch active mouthwash reminders and keep the current slot
3. Record a notification per reminder through the database
4. Return a per-patient summary
"""

from lambdas.send_mouthwash_reminders.handler import MouthwashReminderJob, lambda_handler
from lambdas.send_mouthwash_reminders.time_of_day import (
    filter_by_time_of_day,
    resolve_time_of_day,
)

__all__ = [
    "lambda_handler",
    "MouthwashReminderJob",
    "filter_by_time_of_day",
    "resolve_time_of_day",
]
