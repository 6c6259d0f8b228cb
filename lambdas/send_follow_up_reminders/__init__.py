"""
SendFollowUpReminders Lambda

Daily Lambda triggered by an EventBridge Scheduled Rule (or an HTTP call)
that reminds patients of an upcoming follow-up appointment.

Components:
- handler: Lambda entry point and the FollowUpReminderJob batch

Flow:
1. Triggered daily at 08:00
2. Fetch patients whose follow-up is due in 2 days
3. Record a notification per patient through the database
4. Return a per-patient summary
"""

from lambdas.send_follow_up_reminders.handler import FollowUpReminderJob, lambda_handler

__all__ = [
    "lambda_handler",
    "FollowUpReminderJob",
]
