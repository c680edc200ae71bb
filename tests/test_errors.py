from mytrip.errors import (
    ConfigurationError,
    NetworkError,
    ParseError,
    UpstreamError,
    describe_error,
)


def test_retriable_classification():
    assert NetworkError("down").retriable is True
    assert UpstreamError("boom", status_code=502).retriable is True
    assert UpstreamError("bad", status_code=400).retriable is False
    assert UpstreamError("code", status_code=200, result_code="0002").retriable is False
    assert ParseError("shape").retriable is False


def test_describe_network_and_timeout():
    assert describe_error(NetworkError("down")).category == "network"
    info = describe_error(NetworkError("slow", timeout=True))
    assert info.category == "timeout"
    assert info.retryable is True


def test_describe_server_and_rate_limit():
    assert describe_error(UpstreamError("x", status_code=500)).category == "server"
    info = describe_error(UpstreamError("busy", status_code=429))
    assert info.category == "server"
    assert "요청이 너무 많습니다" in info.message
    assert info.retryable is True


def test_describe_client_errors_keep_upstream_message():
    info = describe_error(UpstreamError("INVALID REQUEST PARAMETER", status_code=400))
    assert info.category == "client"
    assert info.message == "INVALID REQUEST PARAMETER"
    assert info.retryable is False
    assert describe_error(ConfigurationError("no key")).category == "client"


def test_describe_unknown_error():
    info = describe_error(RuntimeError("kaboom"))
    assert info.category == "unknown"
    assert info.retryable is False
    assert info.original_message == "kaboom"
