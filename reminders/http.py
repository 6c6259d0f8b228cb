"""
HTTP Trigger Adapter

Helpers for Lambda events arriving through API Gateway (REST v1 or HTTP
v2), an EventBridge scheduled rule, or a direct invocation, and for the
proxy-integration responses sent back.
"""

import base64
import binascii
import json
from typing import Any

import structlog

from reminders.exceptions import ReminderError
from reminders.models.reminders import ResponseEnvelope

log = structlog.get_logger()


CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
}


def get_request_method(event: dict[str, Any]) -> str | None:
    """HTTP method of an API Gateway event, None for other triggers."""
    if not isinstance(event, dict):
        return None
    method = event.get("httpMethod")
    if not method:
        http = (event.get("requestContext") or {}).get("http") or {}
        method = http.get("method") if isinstance(http, dict) else None
    return method.upper() if isinstance(method, str) else None


def is_preflight_request(event: dict[str, Any]) -> bool:
    """Whether the event is a CORS preflight probe."""
    return get_request_method(event) == "OPTIONS"


def _load_json_object(raw: Any) -> dict[str, Any]:
    if isinstance(raw, dict):
        return raw
    if isinstance(raw, (str, bytes)) and raw:
        try:
            value = json.loads(raw)
        except (json.JSONDecodeError, UnicodeDecodeError):
            return {}
        return value if isinstance(value, dict) else {}
    return {}


def parse_request_payload(event: dict[str, Any]) -> dict[str, Any]:
    """
    Extract optional request parameters from any supported trigger.

    - API Gateway: JSON body (optionally base64 encoded)
    - EventBridge scheduled rule: detail (dict or JSON string)
    - Direct invocation: the event itself

    Unparseable input yields an empty dict; callers fall back to defaults.
    """
    if not isinstance(event, dict):
        return {}

    if get_request_method(event) is not None or "body" in event:
        body = event.get("body")
        if event.get("isBase64Encoded") and isinstance(body, str):
            try:
                body = base64.b64decode(body)
            except (binascii.Error, ValueError):
                log.debug("request_body_not_base64")
                return {}
        return _load_json_object(body)

    if "detail" in event:
        return _load_json_object(event.get("detail"))

    return event


def json_response(status_code: int, body: dict[str, Any]) -> dict[str, Any]:
    """API Gateway proxy response with a JSON body and CORS headers."""
    return {
        "statusCode": status_code,
        "headers": {**CORS_HEADERS, "Content-Type": "application/json"},
        "body": json.dumps(body),
    }


def preflight_response() -> dict[str, Any]:
    """Empty acknowledgment for a CORS preflight probe."""
    return {
        "statusCode": 200,
        "headers": dict(CORS_HEADERS),
        "body": "",
    }


def success_response(envelope: ResponseEnvelope) -> dict[str, Any]:
    return json_response(200, envelope.to_dict())


def error_message(exc: BaseException) -> str:
    """Caller-facing message for an exception."""
    if isinstance(exc, ReminderError):
        return exc.message
    return str(exc) or type(exc).__name__


def failure_response(exc: BaseException) -> dict[str, Any]:
    """500 response for a failure that aborted the whole invocation."""
    return json_response(500, ResponseEnvelope.failure(error_message(exc)).to_dict())
