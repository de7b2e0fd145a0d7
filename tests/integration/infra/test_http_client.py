from __future__ import annotations

"""
Integration tests for the HTTP Transport.

Verifies request construction without making real network calls.
"""

from unittest.mock import MagicMock, patch

import pytest
import requests

from etcdextract.infra.network import USER_AGENT, post_json


def test_post_json_sends_encoded_body() -> None:
    """TC-01: Text bodies are UTF-8 encoded and streamed back."""
    mock_response = MagicMock()

    with patch("requests.post", return_value=mock_response) as mock_post:
        response = post_json("http://sink.local/", '{"k":"ñ"}', timeout=3)

    assert response is mock_response
    args, kwargs = mock_post.call_args
    assert args == ("http://sink.local/",)
    assert kwargs["data"] == '{"k":"ñ"}'.encode("utf-8")
    assert kwargs["headers"] == {"Content-Type": "application/json", "User-Agent": USER_AGENT}
    assert kwargs["timeout"] == 3
    assert kwargs["stream"] is True


def test_post_json_propagates_transport_errors() -> None:
    """TC-02: Failures are left to the publisher."""
    with patch("requests.post", side_effect=requests.exceptions.ConnectionError("down")):
        with pytest.raises(requests.exceptions.RequestException):
            post_json("http://sink.local/", b"{}")
