"""Sensu API binding.

The Sensu 1.x API is unauthenticated, so login accepts any credentials
and never touches the network.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from rest_harness.client import BaseApiClient
from rest_harness.transport import PreparedRequest

if TYPE_CHECKING:
    from rest_harness.credentials import Credentials

logger = logging.getLogger(__name__)


class SensuClient(BaseApiClient):
    """Sensu API client."""

    def login(self, credentials: Credentials) -> None:
        logger.debug("Sensu API needs no login; ignoring %s", type(credentials).__name__)

    def prepare_request(self, request: PreparedRequest) -> None:
        if request.body is not None:
            request.headers["Content-Type"] = "application/json"
            request.headers["Content-Length"] = str(len(request.body))
