"""
Integration test fixtures and configuration.

Integration tests exercise the real Supabase RPC backend over a stubbed
PostgREST endpoint and the real SNS push channel over moto.
"""

import json
from typing import Any, Callable

import httpx
import pytest

from reminders.tools.supabase_rpc import SupabaseNotificationBackend, SupabaseRpcClient


class PostgrestStub:
    """
    Stand-in for the PostgREST /rpc endpoint.

    Each function name maps to a callable receiving the JSON arguments and
    returning an httpx.Response. Every request is recorded.
    """

    def __init__(self) -> None:
        self.routes: dict[str, Callable[[dict[str, Any]], httpx.Response]] = {}
        self.requests: list[tuple[str, dict[str, Any]]] = []

    def on(self, function: str, responder: Callable[[dict[str, Any]], httpx.Response]) -> None:
        self.routes[function] = responder

    def returns(self, function: str, payload: Any, status_code: int = 200) -> None:
        self.on(function, lambda args: httpx.Response(status_code, json=payload))

    def calls_to(self, function: str) -> list[dict[str, Any]]:
        return [args for name, args in self.requests if name == function]

    def __call__(self, request: httpx.Request) -> httpx.Response:
        function = request.url.path.rsplit("/", 1)[-1]
        args = json.loads(request.content) if request.content else {}
        self.requests.append((function, args))

        responder = self.routes.get(function)
        if responder is None:
            return httpx.Response(
                404,
                json={"code": "PGRST202", "message": f"Could not find the function public.{function}"},
            )
        return responder(args)

    def backend_factory(self):
        """Replacement for a handler's _get_backend using this stub."""

        def _factory(settings) -> SupabaseNotificationBackend:
            url, key = settings.require_backend_credentials()
            client = SupabaseRpcClient(url, key, transport=httpx.MockTransport(self))
            return SupabaseNotificationBackend(client)

        return _factory


@pytest.fixture
def postgrest() -> PostgrestStub:
    """Fresh PostgREST stub per test."""
    return PostgrestStub()


@pytest.fixture
def push_enabled(monkeypatch, mock_sns):
    """Enable SNS push delivery against moto."""
    monkeypatch.setenv(
        "REMINDERS_PUSH_PLATFORM_APPLICATION_ARN",
        mock_sns["platform_application_arn"],
    )
    return mock_sns
