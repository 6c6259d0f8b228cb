#!/usr/bin/env python3
"""
Local Invoke Script for the Reminder Lambdas

Builds a trigger event and runs a handler in-process against the database
configured in the environment (SUPABASE_URL / SUPABASE_SERVICE_ROLE_KEY).

Usage:
    # Follow-up reminders, as the daily schedule would run them
    python scripts/invoke_local.py follow-up

    # Evening mouthwash reminders through an API Gateway style POST
    python scripts/invoke_local.py mouthwash --time-of-day evening --http

    # CORS preflight probe
    python scripts/invoke_local.py mouthwash --preflight
"""

import argparse
import importlib
import json
import sys
from pathlib import Path
from typing import Any

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

import structlog  # noqa: E402

log = structlog.get_logger()


HANDLERS = {
    "follow-up": "lambdas.send_follow_up_reminders.handler",
    "mouthwash": "lambdas.send_mouthwash_reminders.handler",
}


def build_event(args: argparse.Namespace) -> dict[str, Any]:
    """Build the trigger event for the requested mode."""
    payload = {"timeOfDay": args.time_of_day} if args.time_of_day else {}

    if args.preflight:
        return {"httpMethod": "OPTIONS", "path": "/reminders", "body": None}

    if args.http:
        return {
            "httpMethod": "POST",
            "path": "/reminders",
            "headers": {"Content-Type": "application/json"},
            "body": json.dumps(payload) if payload else None,
            "isBase64Encoded": False,
        }

    return {
        "version": "0",
        "detail-type": "Scheduled Event",
        "source": "aws.events",
        "detail": payload,
    }


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Invoke a reminder Lambda locally")
    parser.add_argument("handler", choices=sorted(HANDLERS), help="Handler to run")
    parser.add_argument("--time-of-day", help="Mouthwash slot (e.g. morning, evening)")
    parser.add_argument("--http", action="store_true", help="Send an API Gateway POST event")
    parser.add_argument("--preflight", action="store_true", help="Send a CORS preflight event")
    args = parser.parse_args(argv)

    module = importlib.import_module(HANDLERS[args.handler])
    event = build_event(args)

    log.info("local_invoke", handler=args.handler, event_source=event.get("source", "http"))
    response = module.lambda_handler(event, None)

    body = response.get("body")
    if body:
        response = {**response, "body": json.loads(body)}
    print(json.dumps(response, indent=2))

    return 0 if response["statusCode"] < 500 else 1


if __name__ == "__main__":
    sys.exit(main())
