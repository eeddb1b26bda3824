"""Command-line interface for rest-harness.

Sends one request (or walks a paginated collection) through one of the
bundled bindings and prints the JSON result.

Usage:
    rest-harness GET https://gitlab.example.com/api/v4 /projects --paginate
    rest-harness --binding vault --login GET https://vault:8200 /v1/secret/app
    rest-harness --binding sensu POST https://sensu:4567 /silenced --data '{"subscription": "all"}'
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Any

from rest_harness.bindings import BINDINGS
from rest_harness.client import BaseApiClient
from rest_harness.config import ClientConfig
from rest_harness.credentials import ApiKey, NoAuth
from rest_harness.exceptions import (
    AuthError,
    ClientError,
    DecodeError,
    HTTPStatusError,
    TransportError,
)
from rest_harness.interactive import prompt_credentials
from rest_harness.utils.logger import configure_logging
from rest_harness.utils.retry import RetryConfig, retry_from_config

# ============================================================================
# Display Utilities
# ============================================================================


def format_json(data: Any, compact: bool = False) -> str:
    """Format data as JSON."""
    if compact:
        return json.dumps(data, separators=(",", ":"), default=str)
    return json.dumps(data, indent=2, default=str)


def parse_data(raw: str | None) -> dict[str, Any] | None:
    """Parse the --data argument, which must be a JSON object."""
    if raw is None:
        return None
    try:
        data = json.loads(raw)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"--data is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise argparse.ArgumentTypeError("--data must be a JSON object")
    return data


def non_negative_int(raw: str) -> int:
    """Parse an integer that may be zero but not negative."""
    try:
        value = int(raw)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"invalid integer: {raw!r}") from e
    if value < 0:
        raise argparse.ArgumentTypeError(f"must not be negative, got {value}")
    return value


def positive_int(raw: str) -> int:
    """Parse an integer of at least one."""
    value = non_negative_int(raw)
    if value == 0:
        raise argparse.ArgumentTypeError("must be at least 1")
    return value


def token_value(raw: str) -> str:
    """Reject an empty or blank token."""
    if not raw.strip():
        raise argparse.ArgumentTypeError("token cannot be empty")
    return raw


# ============================================================================
# Command Handling
# ============================================================================


def build_client(args: argparse.Namespace) -> BaseApiClient:
    """Create the binding selected on the command line."""
    overrides: dict[str, object] = {}
    if args.timeout is not None:
        overrides["timeout"] = args.timeout
    if args.insecure:
        overrides["verify_tls"] = False
    config = ClientConfig(**overrides)  # type: ignore[arg-type]

    client_cls = BINDINGS[args.binding]
    return client_cls(args.base_url, config=config)


def authenticate(client: BaseApiClient, args: argparse.Namespace) -> None:
    """Log the client in according to the command line flags."""
    if args.login:
        credentials = prompt_credentials(need_2fa=args.two_factor, stream=sys.stderr)
    elif args.token:
        credentials = ApiKey(args.token)
    else:
        credentials = NoAuth()
    client.login(credentials)


def run_request(client: BaseApiClient, args: argparse.Namespace) -> Any:
    """Execute the request described by the command line."""
    body = parse_data(args.data)

    def send() -> Any:
        if args.paginate:
            return client.autopaginate(args.method, args.target, body, max_pages=args.max_pages)
        return client.request_json(args.method, args.target, body)

    if args.retries:
        send = retry_from_config(RetryConfig(max_attempts=args.retries + 1))(send)
    return send()


# ============================================================================
# Argument Parser
# ============================================================================


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="rest-harness",
        description="Send a request through a rest-harness API binding",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  rest-harness GET https://gitlab.com/api/v4 /projects --paginate --max-pages 3
  rest-harness --token glpat-xxx GET https://gitlab.com/api/v4 /user
  rest-harness --binding vault --login --2fa GET https://vault:8200 /v1/sys/health
        """,
    )

    parser.add_argument(
        "--binding",
        "-b",
        choices=sorted(BINDINGS),
        default="gitlab",
        help="API binding to use (default: gitlab)",
    )
    parser.add_argument(
        "--token", "-t", type=token_value, help="API key / personal access token"
    )
    parser.add_argument("--login", action="store_true", help="Prompt for username and password")
    parser.add_argument(
        "--2fa", dest="two_factor", action="store_true", help="Also prompt for a one-time code"
    )
    parser.add_argument("--timeout", type=float, help="Request timeout in seconds")
    parser.add_argument("--insecure", action="store_true", help="Skip TLS verification")
    parser.add_argument(
        "--retries", type=non_negative_int, default=0, help="Retries on transient failures"
    )
    parser.add_argument("--json", "-j", action="store_true", help="Compact JSON output")
    parser.add_argument("--verbose", "-v", action="count", default=0, help="More logging")

    parser.add_argument("method", type=str.upper, help="HTTP method")
    parser.add_argument("base_url", help="API base URL")
    parser.add_argument("target", help="Path relative to the base URL, or an absolute URL")
    parser.add_argument("--data", "-d", help="JSON object to send as the request body")
    parser.add_argument("--paginate", "-p", action="store_true", help="Follow Link pagination")
    parser.add_argument("--max-pages", type=positive_int, help="Stop after this many pages")

    return parser


# ============================================================================
# Main Entry Point
# ============================================================================


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        configure_logging(level=logging.DEBUG if args.verbose > 1 else logging.INFO)

    try:
        client = build_client(args)
    except ClientError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return 1

    try:
        authenticate(client, args)
        result = run_request(client, args)
        print(format_json(result, compact=args.json))
        return 0
    except argparse.ArgumentTypeError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except AuthError as e:
        print(f"Error: Login failed: {e.message}", file=sys.stderr)
        return 1
    except TransportError as e:
        print(f"Error: Server unreachable: {e.message}", file=sys.stderr)
        return 1
    except HTTPStatusError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except DecodeError as e:
        print(f"Error: Response is not JSON:\n{e.raw}", file=sys.stderr)
        return 1
    except ClientError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\nInterrupted", file=sys.stderr)
        return 130
    finally:
        client.close()


if __name__ == "__main__":
    sys.exit(main())
