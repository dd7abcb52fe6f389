"""Tests del cliente HTTP con reintentos."""

from unittest.mock import MagicMock, patch

import pytest
import requests

from taxonomies import FetchError
from taxonomies.http_client import HttpClient


def make_response(status_code=200, content=b""):
    response = MagicMock()
    response.status_code = status_code
    response.content = content
    return response


@pytest.fixture
def client():
    client = HttpClient(timeout=5, max_retries=3)
    client.session = MagicMock()
    return client


@pytest.fixture(autouse=True)
def no_sleep():
    with patch("taxonomies.http_client.time.sleep") as sleep:
        yield sleep


def test_decodes_body_as_utf8_ignoring_declared_charset(client):
    response = make_response(content="Běžecké boty".encode("utf-8"))
    response.encoding = "ISO-8859-1"
    client.session.get.return_value = response

    assert client.get_text("http://example.com/a.xml") == "Běžecké boty"


def test_client_error_is_not_retried(client):
    client.session.get.return_value = make_response(404)

    with pytest.raises(FetchError) as exc_info:
        client.get_bytes("http://example.com/missing")

    assert exc_info.value.status == 404
    assert client.session.get.call_count == 1


def test_server_error_retried_then_succeeds(client, no_sleep):
    client.session.get.side_effect = [make_response(503), make_response(200, b"ok")]

    assert client.get_bytes("http://example.com") == b"ok"
    assert client.session.get.call_count == 2
    no_sleep.assert_called_once_with(1)


def test_rate_limit_waits_longer(client, no_sleep):
    client.session.get.side_effect = [make_response(429), make_response(200, b"ok")]

    client.get_bytes("http://example.com")

    no_sleep.assert_called_once_with(2)


def test_exhausted_retries_raise_with_last_status(client, no_sleep):
    client.session.get.return_value = make_response(500)

    with pytest.raises(FetchError) as exc_info:
        client.get_bytes("http://example.com")

    assert exc_info.value.status == 500
    assert client.session.get.call_count == 3
    # No se espera tras el último intento
    assert no_sleep.call_count == 2


def test_timeout_is_retried(client):
    client.session.get.side_effect = [requests.Timeout(), make_response(200, b"ok")]

    assert client.get_bytes("http://example.com") == b"ok"


def test_connection_errors_exhaust_retries(client):
    client.session.get.side_effect = requests.ConnectionError("refused")

    with pytest.raises(FetchError) as exc_info:
        client.get_bytes("http://example.com")

    assert exc_info.value.status is None
    assert "refused" in str(exc_info.value)


def test_undecodable_body(client):
    client.session.get.return_value = make_response(content=b"\xff\xfe\xfa")

    with pytest.raises(FetchError):
        client.get_text("http://example.com")


def test_leading_bom_is_removed(client):
    client.session.get.return_value = make_response(content=b'\xef\xbb\xbf[{"id": 1}]')

    assert client.get_text("http://example.com/categories.json") == '[{"id": 1}]'
