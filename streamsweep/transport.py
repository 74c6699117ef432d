"""
Remote API access for listing, inspecting and deleting streams.
"""

import logging
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Dict, List, Optional

import requests

from .errors import TransportError
from .filters import CandidateFilter, Stream
from .window import RunWindow

logger = logging.getLogger(__name__)

API_VERSION = "v0.2"
DEFAULT_TIMEOUT = 30
DAY_MS = 24 * 60 * 60 * 1000


class Transport(ABC):
    """Capability used by the sweeper to talk to the remote API."""

    @abstractmethod
    def list_streams(self) -> List[Stream]:
        """Return every stream in the project."""
        pass

    @abstractmethod
    def query_activity(self, stream_id: str, window: RunWindow) -> bool:
        """
        Check a stream for activity inside the window.

        Returns:
            True if the stream reported any operations

        Raises:
            TransportError: If the query failed
        """
        pass

    @abstractmethod
    def delete_stream(self, stream_id: str) -> None:
        """
        Delete a stream.

        Raises:
            TransportError: If the deletion was not confirmed
        """
        pass

    def list_candidates(self, candidate_filter: Optional[CandidateFilter] = None) -> List[str]:
        """List stream IDs that pass the candidate filter."""
        streams = self.list_streams()
        if candidate_filter is not None:
            kept = candidate_filter.apply(streams)
            logger.info(f"{len(kept)} of {len(streams)} streams are candidates")
        else:
            kept = streams
        return [s.id for s in kept]


def api_base_url(env: Optional[str] = None) -> str:
    """
    Base URL of the public API, e.g. https://api-staging.lightstep.com/public/v0.2
    """
    host = f"api-{env}.lightstep.com" if env else "api.lightstep.com"
    return f"https://{host}/public/{API_VERSION}"


def _parse_time(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        logger.debug(f"Unparseable timestamp: {value}")
        return None


class LightstepTransport(Transport):
    """Transport backed by the Lightstep public REST API."""

    def __init__(self, org: str, project: str, api_key: str, env: Optional[str] = None,
                 timeout: int = DEFAULT_TIMEOUT):
        self.org = org
        self.project = project
        self.api_key = api_key
        self.timeout = timeout
        self.base_url = api_base_url(env)

    @property
    def streams_url(self) -> str:
        return f"{self.base_url}/{self.org}/projects/{self.project}/streams"

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"bearer {self.api_key}",
            "Accept": "application/json",
        }

    def _check(self, response: requests.Response, action: str) -> None:
        if 200 <= response.status_code < 300:
            return
        detail = response.text[:200] if response.text else ""
        raise TransportError(f"{action} failed with HTTP {response.status_code}: {detail}",
                             status_code=response.status_code)

    def _get(self, url: str, action: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        try:
            response = requests.get(url, headers=self._headers(), params=params, timeout=self.timeout)
        except requests.RequestException as e:
            raise TransportError(f"{action} failed: {e}") from e

        self._check(response, action)
        try:
            return response.json()
        except ValueError as e:
            raise TransportError(f"{action} returned invalid JSON") from e

    def list_streams(self) -> List[Stream]:
        payload = self._get(self.streams_url, "List streams")

        streams = []
        for item in payload.get("data", []):
            attributes = item.get("attributes", {})
            streams.append(Stream(
                id=str(item["id"]),
                name=attributes.get("name", ""),
                query=attributes.get("query", ""),
                created_time=_parse_time(attributes.get("created-time")),
            ))

        logger.info(f"Listed {len(streams)} streams in {self.org}/{self.project}")
        return streams

    def query_activity(self, stream_id: str, window: RunWindow) -> bool:
        payload = self._get(
            f"{self.streams_url}/{stream_id}/timeseries",
            f"Timeseries for stream {stream_id}",
            params={
                "oldest-time": window.oldest_iso,
                "youngest-time": window.youngest_iso,
                "resolution-ms": DAY_MS,
                "include-ops-counts": 1,
            },
        )

        attributes = payload.get("data", {}).get("attributes", {})
        ops_counts = attributes.get("ops-counts") or []
        return any((count or 0) > 0 for count in ops_counts)

    def delete_stream(self, stream_id: str) -> None:
        action = f"Delete stream {stream_id}"
        try:
            response = requests.delete(f"{self.streams_url}/{stream_id}",
                                       headers=self._headers(), timeout=self.timeout)
        except requests.RequestException as e:
            raise TransportError(f"{action} failed: {e}") from e

        self._check(response, action)
        logger.info(f"Deleted stream {stream_id}")
