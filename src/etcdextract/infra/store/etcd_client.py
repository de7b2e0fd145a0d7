from __future__ import annotations

"""
etcd v2 Keys API Client.

Issues recursive reads against an etcd endpoint over a long-lived HTTP
session and decodes the answers into RemoteNode trees. The session is
created once at startup and reused sequentially by every cycle.
"""

import json
import logging
import time
from typing import Any, Dict, List, Optional
from urllib.parse import quote, urlparse

import requests
import urllib3

from etcdextract.domain.constants import (
    DEFAULT_ETCD_ENDPOINT,
    DEFAULT_REQUEST_TIMEOUT,
    ETCD_KEYS_PREFIX,
)
from etcdextract.domain.snapshot_models import RemoteNode
from etcdextract.infra.network.common import USER_AGENT

logger = logging.getLogger(__name__)

READ_CHUNK_SIZE = 8192


class StoreError(Exception):
    """A root could not be read from the store."""

    def __init__(self, root: str, message: str, error_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.root = root
        self.message = message
        self.error_code = error_code

    def __str__(self) -> str:
        if self.error_code is not None:
            return f"{self.error_code}: {self.message}"
        return self.message


class EtcdClient:
    """
    Minimal read-only etcd v2 client.

    Args:
        endpoint: Base URL of the etcd member, e.g. http://127.0.0.1:2379.
        timeout: Default per-request deadline in seconds.
        session: Optional pre-built requests.Session (used by tests).

    Raises:
        ValueError: If the endpoint is not an absolute http(s) URL.
    """

    def __init__(
            self,
            endpoint: str = DEFAULT_ETCD_ENDPOINT,
            timeout: float = DEFAULT_REQUEST_TIMEOUT,
            session: Optional[requests.Session] = None,
    ) -> None:
        parsed = urlparse(endpoint)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValueError(f"Invalid etcd endpoint: {endpoint}")

        self.endpoint = endpoint.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.setdefault("User-Agent", USER_AGENT)

    def keys_url(self, key: str) -> str:
        """Build the keys API URL for a (possibly relative) key."""
        if not key.startswith("/"):
            key = "/" + key
        return f"{self.endpoint}{ETCD_KEYS_PREFIX}{quote(key)}"

    def get(self, key: str, recursive: bool = True, timeout: Optional[float] = None) -> RemoteNode:
        """
        Read a key, and its whole subtree when recursive.

        The deadline covers the whole request: connecting, waiting for the
        headers and reading the body. The body is read as data arrives and
        the remaining budget is checked between reads, so a store that keeps
        trickling bytes cannot hold the caller past the deadline.

        Args:
            key: Absolute key path.
            recursive: Ask the store for all descendants.
            timeout: Deadline override in seconds.

        Returns:
            RemoteNode: The decoded node.

        Raises:
            StoreError: On timeout, transport failure, store-side error or
                        an undecodable answer.
        """
        params = {"recursive": "true"} if recursive else {}
        deadline = self.timeout if timeout is None else timeout
        expires_at = time.monotonic() + deadline

        try:
            response = self.session.get(
                self.keys_url(key), params=params, timeout=deadline, stream=True
            )
            try:
                body = _read_body(key, response, expires_at, deadline)
            finally:
                response.close()
        except (requests.exceptions.Timeout, urllib3.exceptions.TimeoutError):
            raise StoreError(key, f"Request timed out after {deadline}s")
        except (requests.exceptions.RequestException, urllib3.exceptions.HTTPError) as e:
            raise StoreError(key, f"Store unreachable: {e}")

        payload = _decode_body(key, response.status_code, body)

        if response.status_code != 200 or "errorCode" in payload:
            raise StoreError(
                key,
                str(payload.get("message") or f"HTTP {response.status_code}"),
                payload.get("errorCode"),
            )

        node = payload.get("node")
        if not isinstance(node, dict):
            raise StoreError(key, "Malformed store response: missing 'node'")

        return RemoteNode.from_etcd(node)

    def close(self) -> None:
        self.session.close()


def _read_body(key: str, response: requests.Response, expires_at: float, deadline: float) -> bytes:
    """Collect the response body, giving up once the deadline has passed."""
    chunks: List[bytes] = []
    while True:
        if time.monotonic() >= expires_at:
            raise StoreError(key, f"Request timed out after {deadline}s")

        # read1 returns as soon as any data is available
        chunk = response.raw.read1(READ_CHUNK_SIZE, decode_content=True)
        if not chunk:
            return b"".join(chunks)
        chunks.append(chunk)


def _decode_body(key: str, status_code: int, body: bytes) -> Dict[str, Any]:
    try:
        payload = json.loads(body)
    except ValueError:
        raise StoreError(key, f"Malformed store response (HTTP {status_code})")

    if not isinstance(payload, dict):
        raise StoreError(key, "Malformed store response: root is not an object")
    return payload
