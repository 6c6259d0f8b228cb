"""Unit tests for the reminder handlers and shared package."""
