"""Unit tests for RetryingTransport."""

from unittest.mock import MagicMock, call, patch

import httpx
import pytest

from .transport import RetryingTransport

OK_BODY = {"data": {"search": {"repositoryCount": 0}}}


def describe_RetryingTransport():

    @pytest.fixture
    def sleep():
        with patch("time.sleep") as mock:
            yield mock

    def it_returns_body_on_first_success(sleep):
        send = MagicMock(return_value=httpx.Response(200, json=OK_BODY))
        transport = RetryingTransport(send)

        assert transport.call({"query": "q"}) == OK_BODY
        send.assert_called_once_with({"query": "q"})

    def it_sleeps_success_delay_after_success(sleep):
        send = MagicMock(return_value=httpx.Response(200, json=OK_BODY))
        RetryingTransport(send, success_delay=1.0).call({})
        sleep.assert_called_once_with(1.0)

    def it_retries_on_server_error(sleep):
        send = MagicMock(side_effect=[httpx.Response(502), httpx.Response(200, json=OK_BODY)])
        transport = RetryingTransport(send, retry_delay=3.0, success_delay=1.0)

        assert transport.call({}) == OK_BODY
        assert send.call_count == 2
        assert sleep.call_args_list == [call(3.0), call(1.0)]

    def it_retries_on_client_error_status(sleep):
        send = MagicMock(side_effect=[httpx.Response(403), httpx.Response(200, json=OK_BODY)])
        assert RetryingTransport(send).call({}) == OK_BODY

    def it_retries_on_network_errors(sleep):
        send = MagicMock(side_effect=[
            httpx.ConnectError("refused"),
            httpx.ReadTimeout("slow"),
            httpx.Response(200, json=OK_BODY),
        ])
        assert RetryingTransport(send).call({}) == OK_BODY
        assert send.call_count == 3

    def it_retries_on_non_json_body(sleep):
        send = MagicMock(side_effect=[httpx.Response(200, text="<html>"), httpx.Response(200, json=OK_BODY)])
        assert RetryingTransport(send).call({}) == OK_BODY

    def it_does_not_retry_graphql_errors(sleep):
        body = {"errors": [{"message": "bad query"}]}
        send = MagicMock(return_value=httpx.Response(200, json=body))

        assert RetryingTransport(send).call({}) == body
        send.assert_called_once()

    def it_returns_none_after_max_attempts(sleep):
        send = MagicMock(return_value=httpx.Response(500))
        transport = RetryingTransport(send, max_attempts=3, retry_delay=3.0)

        assert transport.call({}) is None
        assert send.call_count == 3
        # No delay after the final attempt
        assert sleep.call_args_list == [call(3.0), call(3.0)]

    def it_never_exceeds_the_attempt_bound(sleep):
        for attempts in (1, 2, 5):
            send = MagicMock(side_effect=httpx.ConnectError("down"))
            assert RetryingTransport(send, max_attempts=attempts).call({}) is None
            assert send.call_count == attempts

    def it_accepts_per_call_max_attempts(sleep):
        send = MagicMock(return_value=httpx.Response(500))
        transport = RetryingTransport(send, max_attempts=3)

        assert transport.call({}, max_attempts=5) is None
        assert send.call_count == 5

    def it_succeeds_on_last_attempt(sleep):
        send = MagicMock(side_effect=[httpx.Response(500), httpx.Response(500), httpx.Response(200, json=OK_BODY)])
        assert RetryingTransport(send, max_attempts=3).call({}) == OK_BODY

    def it_tracks_counters(sleep):
        send = MagicMock(side_effect=[httpx.Response(500), httpx.Response(200, json=OK_BODY)])
        transport = RetryingTransport(send)
        transport.call({})

        assert transport.calls == 1
        assert transport.attempts == 2
        assert transport.failures == 1

    def it_logs_exhaustion(sleep, caplog):
        send = MagicMock(return_value=httpx.Response(503))
        with caplog.at_level("WARNING"):
            RetryingTransport(send, max_attempts=2).call({})

        assert "HTTP 503" in caplog.text
        assert "failed after 2 attempts" in caplog.text

    def it_retries_on_other_request_errors(sleep):
        send = MagicMock(side_effect=[
            httpx.DecodingError("bad gzip"),
            httpx.TooManyRedirects("loop"),
            httpx.Response(200, json=OK_BODY),
        ])
        assert RetryingTransport(send).call({}) == OK_BODY
        assert send.call_count == 3

    def it_returns_none_when_decoding_keeps_failing(sleep):
        send = MagicMock(side_effect=httpx.DecodingError("bad gzip"))
        transport = RetryingTransport(send, max_attempts=2, retry_delay=3.0)

        assert transport.call({}) is None
        assert send.call_count == 2
        assert sleep.call_args_list == [call(3.0)]

    def it_rejects_zero_per_call_attempts(sleep):
        send = MagicMock()
        with pytest.raises(ValueError):
            RetryingTransport(send, max_attempts=3).call({}, max_attempts=0)
        send.assert_not_called()

    def it_rejects_zero_attempts():
        with pytest.raises(ValueError):
            RetryingTransport(MagicMock(), max_attempts=0)
