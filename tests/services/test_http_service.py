from unittest.mock import Mock

import pytest
import requests

from intelcrawl.domain.error_kind import ErrorKind
from intelcrawl.exceptions import FetchError
from intelcrawl.services.http_service import HttpService


def _client(status=200, text="hello", headers=None, url="https://example.com/"):
    client = Mock()
    client.return_value.status_code = status
    client.return_value.text = text
    client.return_value.headers = headers if headers is not None else {}
    client.return_value.url = url
    return client


def test_fetch_success_returns_response_fields():
    client = _client(text="<html>hi</html>", headers={"Content-Type": "text/html"}, url="https://example.com/final")
    http = HttpService(user_agent="TestAgent", http_client=client)
    response = http.fetch("https://example.com/")
    assert response.status_code == 200
    assert response.text == "<html>hi</html>"
    assert response.content_type == "text/html"
    assert response.final_url == "https://example.com/final"


def test_fetch_uses_header_factory_and_timeout_override():
    client = _client()
    http = HttpService(user_agent="TestAgent", http_client=client, timeout=15, header_factory=lambda url: {"User-Agent": "Rotated"})
    http.fetch("https://example.com/", timeout=30)
    _, kwargs = client.call_args
    assert kwargs["headers"] == {"User-Agent": "Rotated"}
    assert kwargs["timeout"] == 30


def test_fetch_defaults_to_plain_user_agent():
    client = _client()
    HttpService(user_agent="TestAgent", http_client=client).fetch("https://example.com/")
    assert client.call_args[1]["headers"] == {"User-Agent": "TestAgent"}


def test_timeout_becomes_fetch_error():
    client = Mock(side_effect=requests.exceptions.Timeout("timed out"))
    http = HttpService(user_agent="TestAgent", http_client=client)
    with pytest.raises(FetchError) as exc:
        http.fetch("https://example.com/")
    assert exc.value.kind is ErrorKind.TIMEOUT
    assert "https://example.com/" in str(exc.value)


@pytest.mark.parametrize("status,kind", [(404, ErrorKind.HTTP_4XX), (503, ErrorKind.HTTP_5XX)])
def test_error_status_becomes_fetch_error(status, kind):
    http = HttpService(user_agent="TestAgent", http_client=_client(status=status))
    with pytest.raises(FetchError) as exc:
        http.fetch("https://example.com/")
    assert exc.value.kind is kind
    assert exc.value.status_code == status


def test_fetch_robots_does_not_raise_on_404():
    http = HttpService(user_agent="TestAgent", http_client=_client(status=404, text=""))
    assert http.fetch_robots("https://example.com/robots.txt").status_code == 404


def test_unexpected_exceptions_bubble_up():
    client = _client()
    client.return_value.headers = Mock()
    client.return_value.headers.get.side_effect = RuntimeError("Real bug in headers.get()")
    http = HttpService(user_agent="TestAgent", http_client=client)
    with pytest.raises(RuntimeError):
        http.fetch("https://example.com/")
