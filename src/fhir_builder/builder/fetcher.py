"""
Capability Statement Fetcher

Retrieve a CapabilityStatement document from a FHIR server.
"""

import logging
from typing import Any

import requests

from fhir_builder.builder.config import FetchConfig
from fhir_builder.errors import FetchFailure, UpstreamFetchError

log = logging.getLogger(__name__)


class CapabilityFetcher:
    """HTTP client for FHIR capability statements."""

    def __init__(self, config: FetchConfig | None = None):
        self.config = config or FetchConfig()

    @property
    def _headers(self) -> dict[str, str]:
        return {
            "Accept": self.config.accept,
            "User-Agent": self.config.user_agent,
        }

    def fetch(self, url: str) -> dict[str, Any]:
        """Fetch and decode the capability statement at url."""
        log.info("Fetching capability statement from %s", url)

        try:
            response = requests.get(
                url,
                headers=self._headers,
                timeout=self.config.timeout_seconds,
            )
        except requests.exceptions.Timeout as e:
            # Timeout subclasses ConnectionError (ConnectTimeout), check it first
            raise self._failure(FetchFailure.OTHER, url, "request timed out") from e
        except requests.exceptions.ConnectionError as e:
            raise self._failure(FetchFailure.UNREACHABLE, url, str(e)) from e
        except requests.exceptions.RequestException as e:
            raise self._failure(FetchFailure.OTHER, url, str(e)) from e

        if response.status_code == 404:
            raise self._failure(FetchFailure.NOT_FOUND, url, "HTTP 404")

        if response.status_code != 200:
            raise self._failure(
                FetchFailure.OTHER, url, f"FHIR server error: {response.status_code}"
            )

        try:
            return response.json()
        except ValueError as e:
            raise self._failure(
                FetchFailure.OTHER, url, "response is not valid JSON"
            ) from e

    @staticmethod
    def _failure(kind: FetchFailure, url: str, detail: str) -> UpstreamFetchError:
        log.error("Capability statement fetch failed (%s) for %s: %s", kind.value, url, detail)
        return UpstreamFetchError(kind, url, detail)
