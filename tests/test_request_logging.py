from unittest.mock import MagicMock

from app.core.request_logging import client_ip, generate_request_id


def test_generate_request_id():
    request_id = generate_request_id()
    assert len(request_id) == 10
    int(request_id, 16)
    assert generate_request_id() != request_id


def test_client_ip_prefers_forwarded_header():
    request = MagicMock()
    request.headers = {"X-Forwarded-For": "10.0.0.1, 172.16.0.1"}
    assert client_ip(request) == "10.0.0.1"


def test_client_ip_falls_back_to_peer():
    request = MagicMock()
    request.headers = {}
    request.client.host = "127.0.0.1"
    assert client_ip(request) == "127.0.0.1"

    request.client = None
    assert client_ip(request) is None
