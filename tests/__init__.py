"""Test suite for the reminder handlers."""
