"""Tests for the retrying HTTP helpers and the Slack notifier."""

import json

import pytest
import requests

from skillchart.errors import NotificationError
from skillchart.host.slack import SlackNotifier, build_payload
from skillchart.net import network
from skillchart.net.network import RetryConfig, fetch_bytes, post_json, request_with_retry


def make_response(status, content=b""):
    response = requests.Response()
    response.status_code = status
    response._content = content
    response.url = "https://example.test"
    return response


class FakeSession:
    """Replays queued responses or exceptions and records each request."""

    def __init__(self, *outcomes):
        self.outcomes = list(outcomes)
        self.requests = []

    def request(self, method, url, **kwargs):
        self.requests.append((method, url, kwargs))
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


@pytest.fixture(autouse=True)
def no_sleep(monkeypatch):
    delays = []
    monkeypatch.setattr(network.time, "sleep", delays.append)
    return delays


NO_JITTER = RetryConfig(max_retries=3, base_delay=0.5, jitter=False)


class TestRetryConfig:
    def test_exponential_delay(self):
        assert [NO_JITTER.get_delay(n) for n in range(3)] == [0.5, 1.0, 2.0]

    def test_delay_is_capped(self):
        config = RetryConfig(base_delay=10, max_delay=15, jitter=False)

        assert config.get_delay(5) == 15

    def test_jitter_adds_at_most_half(self):
        delay = RetryConfig(base_delay=1.0).get_delay(0)

        assert 1.0 <= delay <= 1.5

    @pytest.mark.parametrize(
        "status,expected", [(429, True), (500, True), (503, True), (404, False), (400, False)]
    )
    def test_should_retry(self, status, expected):
        assert RetryConfig().should_retry(status) is expected

    def test_from_settings(self):
        class Settings:
            max_retry_attempts = 5
            retry_base_delay = 0.2
            http_timeout = 30

        config = RetryConfig.from_settings(Settings())

        assert (config.max_retries, config.base_delay, config.timeout) == (5, 0.2, 30)


class TestRequestWithRetry:
    def test_success_first_try(self, no_sleep):
        session = FakeSession(make_response(200, b"ok"))

        response = request_with_retry(session, "GET", "https://x.test", config=NO_JITTER)

        assert response.content == b"ok"
        assert no_sleep == []
        method, url, kwargs = session.requests[0]
        assert kwargs["headers"]["User-Agent"] == network.USER_AGENT
        assert kwargs["timeout"] == 60

    def test_retries_server_errors(self, no_sleep):
        session = FakeSession(make_response(503), make_response(429), make_response(200))

        request_with_retry(session, "GET", "https://x.test", config=NO_JITTER)

        assert len(session.requests) == 3
        assert no_sleep == [0.5, 1.0]

    def test_retries_connection_errors(self, no_sleep):
        session = FakeSession(requests.ConnectionError("reset"), make_response(200))

        request_with_retry(session, "GET", "https://x.test", config=NO_JITTER)

        assert len(session.requests) == 2

    def test_client_error_fails_immediately(self):
        session = FakeSession(make_response(404), make_response(200))

        with pytest.raises(requests.HTTPError):
            request_with_retry(session, "GET", "https://x.test", config=NO_JITTER)

        assert len(session.requests) == 1

    def test_last_failure_is_raised(self):
        session = FakeSession(make_response(500), make_response(500), make_response(500))

        with pytest.raises(requests.HTTPError):
            request_with_retry(session, "GET", "https://x.test", config=NO_JITTER)

        assert len(session.requests) == 3

    def test_last_timeout_is_raised(self):
        session = FakeSession(*(requests.Timeout("slow") for _ in range(3)))

        with pytest.raises(requests.Timeout):
            request_with_retry(session, "GET", "https://x.test", config=NO_JITTER)

    def test_fetch_bytes_merges_headers(self):
        session = FakeSession(make_response(200, b"%PDF"))

        data = fetch_bytes(
            session, "https://x.test", headers={"Authorization": "Bearer t"}
        )

        assert data == b"%PDF"
        headers = session.requests[0][2]["headers"]
        assert headers["Authorization"] == "Bearer t"
        assert "User-Agent" in headers

    def test_post_json(self):
        session = FakeSession(make_response(200))

        post_json(session, "https://hooks.test", {"a": 1})

        method, url, kwargs = session.requests[0]
        assert method == "POST"
        assert kwargs["json"] == {"a": 1}


class TestSlackNotifier:
    TEMPLATE = '"{person}" of "{organization}" submitted.\n\n<{link}|Download PDF>'

    def test_payload_shape(self):
        assert build_payload("hi") == {
            "blocks": [{"type": "section", "text": {"type": "mrkdwn", "text": "hi"}}]
        }

    def test_format_message(self):
        notifier = SlackNotifier("https://hooks.test", self.TEMPLATE, session=FakeSession())

        assert notifier.format_message("ACME", "Taro", "https://d.test/1") == (
            '"Taro" of "ACME" submitted.\n\n<https://d.test/1|Download PDF>'
        )

    def test_notify_posts_to_webhook(self):
        session = FakeSession(make_response(200))
        notifier = SlackNotifier("https://hooks.test", "{organization} {person} {link}", session=session)

        notifier.notify("ACME", "Taro", "https://d.test/1")

        method, url, kwargs = session.requests[0]
        assert (method, url) == ("POST", "https://hooks.test")
        assert json.dumps(kwargs["json"]) == json.dumps(
            build_payload("ACME Taro https://d.test/1")
        )

    def test_notify_failure(self):
        session = FakeSession(make_response(403))
        notifier = SlackNotifier("https://hooks.test", "{link}", session=session)

        with pytest.raises(NotificationError, match="Webhook notification failed"):
            notifier.notify("ACME", "Taro", "https://d.test/1")
