"""Error taxonomy for the tourism gateway and user-facing error summaries."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


class TourApiError(Exception):
    """Base class for failures talking to the tourism content API."""

    def __init__(self,
                 message: str,
                 status_code: Optional[int] = None,
                 result_code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.result_code = result_code

    @property
    def retriable(self) -> bool:
        return False


class NetworkError(TourApiError):
    """Connectivity failure or timeout before a response was received."""

    def __init__(self, message: str, timeout: bool = False):
        super().__init__(message)
        self.timeout = timeout

    @property
    def retriable(self) -> bool:
        return True


class UpstreamError(TourApiError):
    """The upstream answered, but reported a failure."""

    @property
    def retriable(self) -> bool:
        return self.status_code is not None and self.status_code >= 500


class ParseError(TourApiError):
    """The response body did not have the expected shape."""


class ConfigurationError(TourApiError):
    """The client cannot build a request (e.g. no service key)."""


@dataclass(frozen=True)
class ErrorInfo:
    """User-facing summary of an error."""

    category: str
    message: str
    retryable: bool
    original_message: Optional[str] = None


def describe_error(exc: BaseException) -> ErrorInfo:
    """Classify ``exc`` and pick the message shown to the user."""
    original = str(exc) or type(exc).__name__

    if isinstance(exc, NetworkError):
        if exc.timeout:
            return ErrorInfo(
                category="timeout",
                message="요청 시간이 초과되었습니다. 잠시 후 다시 시도해주세요.",
                retryable=True,
                original_message=original,
            )
        return ErrorInfo(
            category="network",
            message="네트워크 연결에 문제가 있습니다. 인터넷 연결을 확인해주세요.",
            retryable=True,
            original_message=original,
        )

    status_code = getattr(exc, "status_code", None)
    if status_code == 429 or "호출 제한" in original:
        return ErrorInfo(
            category="server",
            message="요청이 너무 많습니다. 잠시 후 다시 시도해주세요.",
            retryable=True,
            original_message=original,
        )
    if status_code is not None and status_code >= 500:
        return ErrorInfo(
            category="server",
            message="서버에 문제가 발생했습니다. 잠시 후 다시 시도해주세요.",
            retryable=True,
            original_message=original,
        )
    if isinstance(exc, ConfigurationError):
        return ErrorInfo(
            category="client",
            message="API 키가 설정되지 않았습니다.",
            retryable=False,
            original_message=original,
        )
    if isinstance(exc, UpstreamError):
        return ErrorInfo(
            category="client",
            message=exc.message or "요청을 처리할 수 없습니다.",
            retryable=False,
            original_message=original,
        )

    return ErrorInfo(
        category="unknown",
        message="예상치 못한 오류가 발생했습니다. 잠시 후 다시 시도해주세요.",
        retryable=False,
        original_message=original,
    )
