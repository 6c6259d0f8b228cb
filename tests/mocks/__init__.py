"""Test doubles for the notification backend and delivery channel."""
