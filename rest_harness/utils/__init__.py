"""Utility modules for rest-harness.

- logger: Library logger and quick logging setup
- pagination: Link header parsing
- retry: Opt-in retry with exponential backoff

"""

from rest_harness.utils.logger import configure_logging
from rest_harness.utils.pagination import Link, link_from_headers, parse_link_header
from rest_harness.utils.retry import RetryConfig, retry, retry_from_config

__all__ = [
    "Link",
    "RetryConfig",
    "configure_logging",
    "link_from_headers",
    "parse_link_header",
    "retry",
    "retry_from_config",
]
