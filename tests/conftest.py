"""
Pytest Configuration and Shared Fixtures

Provides test environment, cached-settings reset, fake backends, moto SNS
mocking and sample due rows and trigger events.
"""

import os
from typing import Any

import boto3
import pytest
from moto import mock_aws

# Set test environment before importing application modules
os.environ["SUPABASE_URL"] = "https://test-project.supabase.co"
os.environ["SUPABASE_SERVICE_ROLE_KEY"] = "test-service-role-key"
os.environ["REMINDERS_AWS_REGION"] = "us-west-2"
os.environ["REMINDERS_LOG_LEVEL"] = "DEBUG"
os.environ["AWS_DEFAULT_REGION"] = "us-west-2"
os.environ["AWS_ACCESS_KEY_ID"] = "testing"
os.environ["AWS_SECRET_ACCESS_KEY"] = "testing"
os.environ.pop("TIME_OF_DAY", None)
os.environ.pop("REMINDERS_PUSH_PLATFORM_APPLICATION_ARN", None)

from reminders.config import get_settings  # noqa: E402
from tests.mocks.fake_backend import FakeNotificationBackend, RecordingDeliveryChannel  # noqa: E402
from tests.utils.event_generator import ReminderDataGenerator  # noqa: E402


@pytest.fixture(autouse=True)
def reset_settings_cache():
    """Reload settings for every test so monkeypatched env vars apply."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


# --- AWS Mocking Fixtures ---


@pytest.fixture
def aws_credentials():
    """Mock AWS credentials for moto."""
    return {
        "aws_access_key_id": "testing",
        "aws_secret_access_key": "testing",
        "region_name": "us-west-2",
    }


@pytest.fixture
def mock_sns(aws_credentials):
    """Mocked SNS client with an FCM (GCM) platform application."""
    with mock_aws():
        sns = boto3.client("sns", **aws_credentials)
        response = sns.create_platform_application(
            Name="patient-reminders-fcm",
            Platform="GCM",
            Attributes={"PlatformCredential": "test-fcm-server-key"},
        )
        yield {
            "client": sns,
            "platform_application_arn": response["PlatformApplicationArn"],
        }


# --- Data Fixtures ---


@pytest.fixture
def generator() -> ReminderDataGenerator:
    """Deterministic data generator."""
    return ReminderDataGenerator(seed=42)


@pytest.fixture
def follow_up_rows(generator: ReminderDataGenerator) -> list[dict[str, Any]]:
    """Three patients with a follow-up in two days."""
    return generator.follow_up_rows(3)


@pytest.fixture
def mouthwash_rows() -> list[dict[str, Any]]:
    """Active mouthwash reminders across both slots."""
    return [
        {
            "reminder_id": "rem-001",
            "patient_id": "pat-001",
            "patient_first_name": "Ana",
            "patient_last_name": "Silva",
            "reminder_text": "Rinse with chlorhexidine for 30 seconds",
            "time_of_day": "morning",
        },
        {
            "reminder_id": "rem-002",
            "patient_id": "pat-002",
            "patient_first_name": "Bruno",
            "patient_last_name": "Costa",
            "reminder_text": "Evening rinse after brushing",
            "time_of_day": "evening",
        },
        {
            "reminder_id": "rem-003",
            "patient_id": "pat-003",
            "patient_first_name": "Carla",
            "patient_last_name": "Souza",
            "reminder_text": "Rinse with chlorhexidine for 30 seconds",
            "time_of_day": "morning",
        },
        {
            "reminder_id": "rem-004",
            "patient_id": "pat-004",
            "patient_first_name": "Diego",
            "patient_last_name": "Lima",
            "reminder_text": "Evening rinse after brushing",
            "time_of_day": "evening",
        },
    ]


@pytest.fixture
def fake_backend(follow_up_rows, mouthwash_rows) -> FakeNotificationBackend:
    """In-memory backend seeded with sample rows."""
    return FakeNotificationBackend(
        follow_ups=follow_up_rows,
        reminders=mouthwash_rows,
    )


@pytest.fixture
def delivery_channel() -> RecordingDeliveryChannel:
    """Delivery channel that records every attempt."""
    return RecordingDeliveryChannel()
