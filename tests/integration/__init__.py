"""
Integration tests for the reminder handlers.

These tests run the Lambda handlers end to end against a stubbed PostgREST
endpoint (httpx.MockTransport) and mocked SNS (moto).
"""
