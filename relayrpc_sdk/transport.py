"""
Transport layer for relay requests.

This module provides an abstraction over how signed request bodies reach
the relay, with an HTTP implementation built on requests and a stub
implementation for tests and offline development.
"""
import logging
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from ._rate_limited_log import rate_limited_log
from .exceptions import TransportError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 20


@dataclass
class TransportResponse:
    """
    Raw relay reply as received by a transport.

    Attributes:
        status_code: HTTP status code
        content: Raw response body
        content_type: Value of the Content-Type header
    """
    status_code: int
    content: bytes
    content_type: str = "application/json"


class RelayTransport(ABC):
    """
    Abstract base class for relay transports.

    Implementations post a prepared body with prepared headers and return
    the raw reply. They never build or sign requests themselves.
    """

    @abstractmethod
    def post(
        self,
        url: str,
        body: bytes,
        headers: Dict[str, str],
        timeout: float = DEFAULT_TIMEOUT,
        idempotent: bool = False
    ) -> TransportResponse:
        """
        Send a signed request to the relay.

        Args:
            url: Relay endpoint URL
            body: Serialized JSON-RPC body
            headers: Headers including the signature header
            timeout: Request timeout in seconds
            idempotent: Whether the call is read-only and safe to retry

        Returns:
            Raw relay reply

        Raises:
            TransportError: On connection failures and timeouts
        """
        pass

    @abstractmethod
    def close(self) -> None:
        """Close any open connections or resources."""
        pass


class HttpTransport(RelayTransport):
    """
    HTTP transport using requests sessions.

    Idempotent calls go through a session with a retry policy. All other
    calls use a session with retries disabled, so submissions are sent
    at most once.
    """

    def __init__(self, retry_count: int = 3, backoff_factor: float = 0.5):
        """
        Initialize the HTTP transport

        Args:
            retry_count: Number of retries for idempotent requests
            backoff_factor: Backoff factor between retries
        """
        self.retry_count = retry_count

        retries = Retry(
            total=retry_count,
            backoff_factor=backoff_factor,
            status_forcelist=[500, 502, 503, 504],
            allowed_methods=["POST"],
            raise_on_status=False,
            connect=retry_count,
            read=retry_count,
            other=retry_count
        )
        self.read_session = requests.Session()
        self.read_session.mount("http://", HTTPAdapter(max_retries=retries))
        self.read_session.mount("https://", HTTPAdapter(max_retries=retries))

        self.write_session = requests.Session()
        self.write_session.mount("http://", HTTPAdapter(max_retries=0))
        self.write_session.mount("https://", HTTPAdapter(max_retries=0))

    def post(
        self,
        url: str,
        body: bytes,
        headers: Dict[str, str],
        timeout: float = DEFAULT_TIMEOUT,
        idempotent: bool = False
    ) -> TransportResponse:
        session = self.read_session if idempotent else self.write_session
        try:
            response = session.post(url, data=body, headers=headers, timeout=timeout)
        except requests.Timeout as e:
            logger.error(f"Relay request timed out after {timeout}s: {e}")
            raise TransportError(f"Relay request timed out after {timeout}s") from e
        except requests.RequestException as e:
            logger.error(f"Relay request failed: {e}")
            raise TransportError(f"Relay request failed: {e}") from e

        content_type = response.headers.get("Content-Type", "")
        if "application/json" not in content_type:
            rate_limited_log(
                f"Unexpected Content-Type from relay: {content_type} (expected application/json)",
                logger_instance=logger
            )

        return TransportResponse(
            status_code=response.status_code,
            content=response.content,
            content_type=content_type
        )

    def close(self) -> None:
        self.read_session.close()
        self.write_session.close()


@dataclass
class RecordedRequest:
    """A request captured by StubTransport"""
    url: str
    body: bytes
    headers: Dict[str, str]
    timeout: float
    idempotent: bool


class StubTransport(RelayTransport):
    """
    In-memory transport that replays queued replies.

    Every posted request is recorded in ``requests`` so tests can inspect
    exactly what would have been sent. With no queued reply the stub
    answers with an empty JSON-RPC result.
    """

    def __init__(self, replies: Optional[List[Tuple[int, bytes]]] = None):
        self.requests: List[RecordedRequest] = []
        self._replies: List[TransportResponse] = [
            TransportResponse(status_code=status_code, content=content)
            for status_code, content in (replies or [])
        ]
        self.closed = False
        self._lock = threading.Lock()

    @property
    def call_count(self) -> int:
        return len(self.requests)

    def queue_reply(self, status_code: int, content: bytes, content_type: str = "application/json") -> None:
        """Queue a reply for the next request"""
        with self._lock:
            self._replies.append(TransportResponse(status_code, content, content_type))

    def post(
        self,
        url: str,
        body: bytes,
        headers: Dict[str, str],
        timeout: float = DEFAULT_TIMEOUT,
        idempotent: bool = False
    ) -> TransportResponse:
        if self.closed:
            raise TransportError("Stub transport is closed")

        with self._lock:
            self.requests.append(RecordedRequest(
                url=url, body=body, headers=dict(headers), timeout=timeout, idempotent=idempotent
            ))
            if self._replies:
                reply = self._replies.pop(0)
            else:
                reply = TransportResponse(status_code=200, content=b'{"jsonrpc":"2.0","id":1,"result":null}')
        logger.debug(f"StubTransport.post called for {url}")

        return reply

    def close(self) -> None:
        self.closed = True
