from __future__ import annotations

"""
Snapshot Publisher.

Encodes an envelope and delivers it to its destination:

- the console sink ('stdout://') receives indented, human-readable JSON;
- any other destination is an HTTP(S) URL that receives compact JSON
  through a POST request.

Delivery failures are logged and reported through the return value; they
never propagate. An envelope that cannot be encoded is a broken invariant
and raises SnapshotEncodingError.
"""

import json
import logging
import sys
from typing import Optional, TextIO

import requests

from etcdextract.domain.constants import STDOUT_SINK
from etcdextract.domain.snapshot_models import Envelope
from etcdextract.infra.network import DEFAULT_TIMEOUT, post_json

logger = logging.getLogger(__name__)


class SnapshotEncodingError(Exception):
    """The envelope could not be serialized to JSON."""


# -----------------------------------------------------------------------------
# ENCODING
# -----------------------------------------------------------------------------

def encode_envelope(envelope: Envelope, pretty: bool = False) -> str:
    """
    Serialize an envelope with sorted keys.

    Args:
        envelope: The envelope to encode.
        pretty: Indented output for humans, compact output otherwise.

    Returns:
        str: The JSON text.

    Raises:
        SnapshotEncodingError: If the document holds unencodable values.
    """
    try:
        if pretty:
            return json.dumps(envelope.to_dict(), indent=2, sort_keys=True, ensure_ascii=False)
        return json.dumps(
            envelope.to_dict(), separators=(",", ":"), sort_keys=True, ensure_ascii=False
        )
    except (TypeError, ValueError) as e:
        raise SnapshotEncodingError(f"Cannot encode snapshot: {e}") from e


# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def publish(
        envelope: Envelope,
        destination: str,
        *,
        stream: Optional[TextIO] = None,
        timeout: float = DEFAULT_TIMEOUT,
        log: Optional[logging.Logger] = None,
) -> bool:
    """
    Deliver one envelope.

    Args:
        envelope: The snapshot to publish.
        destination: 'stdout://' or an HTTP(S) URL.
        stream: Console stream override (defaults to sys.stdout).
        timeout: HTTP request deadline in seconds.
        log: Injected logger; defaults to the module logger.

    Returns:
        bool: True if the snapshot was delivered.
    """
    log = log or logger

    if destination == STDOUT_SINK:
        return _publish_console(envelope, stream or sys.stdout)
    return _publish_http(envelope, destination, timeout, log)


# -----------------------------------------------------------------------------
# PRIVATE HELPERS
# -----------------------------------------------------------------------------

def _publish_console(envelope: Envelope, stream: TextIO) -> bool:
    stream.write(encode_envelope(envelope, pretty=True) + "\n")
    stream.flush()
    return True


def _publish_http(envelope: Envelope, url: str, timeout: float, log: logging.Logger) -> bool:
    body = encode_envelope(envelope, pretty=False)

    try:
        response = post_json(url, body, timeout=timeout)
    except requests.exceptions.RequestException as e:
        log.error(f"Cannot send HTTP request: {e}")
        return False

    try:
        if response.status_code == 200:
            log.debug(f"Snapshot {envelope.timestamp} delivered to {url}")
            return True

        log.error(f"Error received from the HTTP endpoint: {response.status_code} {response.reason}")
        try:
            log.error(f"Error response: {response.text}")
        except requests.exceptions.RequestException as e:
            log.error(f"Cannot read error response: {e}")
        return False
    finally:
        response.close()
