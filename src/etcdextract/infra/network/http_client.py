from __future__ import annotations

import logging
from typing import Union

import requests

from etcdextract.domain.constants import JSON_CONTENT_TYPE
from etcdextract.infra.network.common import DEFAULT_TIMEOUT, USER_AGENT

logger = logging.getLogger(__name__)


def post_json(url: str, body: Union[bytes, str], timeout: float = DEFAULT_TIMEOUT) -> requests.Response:
    """
    POST an already-encoded JSON body.

    The response is opened in streaming mode so the caller decides whether
    the body is worth reading; the caller owns closing it. Transport
    failures propagate as requests.exceptions.RequestException.
    """
    if isinstance(body, str):
        body = body.encode("utf-8")

    headers = {
        "Content-Type": JSON_CONTENT_TYPE,
        "User-Agent": USER_AGENT,
    }
    logger.debug(f"POST {url} ({len(body)} bytes)")
    return requests.post(url, data=body, headers=headers, timeout=timeout, stream=True)
