"""
Tests for relay transports.
"""
from unittest.mock import MagicMock, patch

import pytest
import requests

from relayrpc_sdk.exceptions import TransportError
from relayrpc_sdk.transport import HttpTransport, StubTransport, TransportResponse

from conftest import TEST_RELAY_URL

BODY = b'{"jsonrpc":"2.0","id":1,"method":"eth_sendBundle","params":[]}'
HEADERS = {"Content-Type": "application/json"}


def _http_response(status_code=200, content=b'{"result":true}', content_type="application/json"):
    response = MagicMock()
    response.status_code = status_code
    response.content = content
    response.headers = {"Content-Type": content_type}
    return response


class TestHttpTransport:
    """Test the requests based transport."""

    def test_non_idempotent_uses_write_session(self):
        transport = HttpTransport()
        with patch.object(transport.write_session, "post", return_value=_http_response()) as write_post, \
             patch.object(transport.read_session, "post") as read_post:
            reply = transport.post(TEST_RELAY_URL, BODY, HEADERS, timeout=3)

        write_post.assert_called_once_with(TEST_RELAY_URL, data=BODY, headers=HEADERS, timeout=3)
        read_post.assert_not_called()
        assert reply == TransportResponse(status_code=200, content=b'{"result":true}')

    def test_idempotent_uses_read_session(self):
        transport = HttpTransport()
        with patch.object(transport.read_session, "post", return_value=_http_response()) as read_post, \
             patch.object(transport.write_session, "post") as write_post:
            transport.post(TEST_RELAY_URL, BODY, HEADERS, idempotent=True)

        read_post.assert_called_once()
        write_post.assert_not_called()
        assert read_post.call_args.kwargs["timeout"] == 20

    def test_retry_count(self):
        transport = HttpTransport(retry_count=5)
        adapter = transport.read_session.get_adapter("https://relay.example.com")
        assert adapter.max_retries.total == 5
        assert 502 in adapter.max_retries.status_forcelist

    def test_timeout(self):
        transport = HttpTransport()
        with patch.object(transport.write_session, "post", side_effect=requests.Timeout("slow")):
            with pytest.raises(TransportError, match="timed out after 20s"):
                transport.post(TEST_RELAY_URL, BODY, HEADERS)

    def test_connection_error(self):
        transport = HttpTransport()
        with patch.object(transport.write_session, "post", side_effect=requests.ConnectionError("refused")):
            with pytest.raises(TransportError, match="refused") as exc_info:
                transport.post(TEST_RELAY_URL, BODY, HEADERS)
        assert exc_info.value.status_code is None

    def test_error_status_is_returned(self):
        """Test HTTP error statuses are left to the decoder"""
        transport = HttpTransport()
        with patch.object(transport.write_session, "post", return_value=_http_response(503, b"down", "text/plain")):
            reply = transport.post(TEST_RELAY_URL, BODY, HEADERS)
        assert reply.status_code == 503
        assert reply.content_type == "text/plain"

    def test_close(self):
        transport = HttpTransport()
        with patch.object(transport.read_session, "close") as read_close, \
             patch.object(transport.write_session, "close") as write_close:
            transport.close()
        read_close.assert_called_once()
        write_close.assert_called_once()


class TestStubTransport:
    """Test the in-memory transport."""

    def test_records_requests(self):
        transport = StubTransport()
        transport.post(TEST_RELAY_URL, BODY, HEADERS, timeout=7, idempotent=True)

        assert transport.call_count == 1
        recorded = transport.requests[0]
        assert recorded.url == TEST_RELAY_URL
        assert recorded.body == BODY
        assert recorded.headers == HEADERS
        assert recorded.timeout == 7
        assert recorded.idempotent is True

    def test_replies_in_order(self):
        transport = StubTransport(replies=[(200, b"first")])
        transport.queue_reply(500, b"second")

        assert transport.post(TEST_RELAY_URL, BODY, HEADERS).content == b"first"
        second = transport.post(TEST_RELAY_URL, BODY, HEADERS)
        assert (second.status_code, second.content) == (500, b"second")

    def test_queued_content_type(self):
        transport = StubTransport()
        transport.queue_reply(502, b"<html>Bad Gateway</html>", content_type="text/html")

        reply = transport.post(TEST_RELAY_URL, BODY, HEADERS)
        assert reply.content_type == "text/html"

    def test_default_reply(self):
        reply = StubTransport().post(TEST_RELAY_URL, BODY, HEADERS)
        assert reply.status_code == 200
        assert b'"result":null' in reply.content

    def test_closed(self):
        transport = StubTransport()
        transport.close()
        with pytest.raises(TransportError):
            transport.post(TEST_RELAY_URL, BODY, HEADERS)
        assert transport.call_count == 0
