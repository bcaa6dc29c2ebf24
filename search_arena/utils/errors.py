"""Error handling utilities.

Provider errors are raised inside the provider adapters and turned into
failure outcomes before they reach the fan-out coordinator. Judge errors
come from the language-model backend. The rest map request, storage and
configuration problems onto HTTP status codes for the JSON routes.
"""

import http
from typing import Any, TypeVar

T = TypeVar("T", bound="SearchError")


class SearchError(Exception):
    """Base class for all Search Arena exceptions.

    Attributes:
        message: Human-readable message, shown to API clients as ``error``
        provider: Provider id, for provider errors
        status_code: HTTP status used when the error reaches a route
        original_error: The wrapped exception, if any
        details: Structured context for logs and error bodies
    """

    def __init__(
        self,
        message: str,
        provider: str | None = None,
        status_code: int = http.HTTPStatus.INTERNAL_SERVER_ERROR,
        original_error: Exception | None = None,
        details: dict[str, Any] | None = None,
    ):
        self.message = message
        self.provider = provider
        self.status_code = status_code
        self.original_error = original_error
        self.details = details or {}
        super().__init__(message)

    @classmethod
    def from_exception(
        cls: type[T], exc: Exception, message: str | None = None, **kwargs
    ) -> T:
        """Wrap another exception, keeping it as ``original_error``."""
        return cls(message=message or str(exc), original_error=exc, **kwargs)

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {
            "error_type": type(self).__name__,
            "message": self.message,
        }
        if self.provider:
            body["provider"] = self.provider
        if self.details:
            body["details"] = self.details
        return body


def _with_detail(kwargs: dict[str, Any], key: str, value: Any) -> dict[str, Any]:
    details = kwargs.pop("details", None) or {}
    if value is not None:
        details[key] = value
    return details


# Provider errors


class ProviderError(SearchError):
    """Base class for failures inside a search provider adapter."""

    def __init__(
        self,
        message: str,
        provider: str | None = None,
        status_code: int = http.HTTPStatus.BAD_GATEWAY,
        **kwargs,
    ):
        super().__init__(message, provider, status_code, **kwargs)


class ProviderConfigurationError(ProviderError):
    """The provider's credential is not set; no request is made."""

    def __init__(self, provider: str, config_key: str, **kwargs):
        details = _with_detail(kwargs, "config_key", config_key)
        super().__init__(
            f"{config_key} not configured",
            provider,
            http.HTTPStatus.INTERNAL_SERVER_ERROR,
            details=details,
            **kwargs,
        )


class ProviderUpstreamError(ProviderError):
    """The provider answered with a non-2xx status or an unusable body."""

    def __init__(
        self,
        provider: str,
        message: str,
        upstream_status: int | None = None,
        **kwargs,
    ):
        details = _with_detail(kwargs, "upstream_status", upstream_status)
        super().__init__(message, provider, details=details, **kwargs)


class ProviderTimeoutError(ProviderError):
    """The provider call ran past its deadline."""

    def __init__(
        self,
        provider: str,
        timeout: float | None = None,
        message: str | None = None,
        **kwargs,
    ):
        details = _with_detail(kwargs, "timeout_seconds", timeout)
        if message is None:
            message = f"Search timeout for provider '{provider}'"
        super().__init__(
            message,
            provider,
            http.HTTPStatus.GATEWAY_TIMEOUT,
            details=details,
            **kwargs,
        )


class JudgeError(SearchError):
    """The language-model backend could not be reached or refused the request."""

    def __init__(self, message: str, upstream_status: int | None = None, **kwargs):
        details = _with_detail(kwargs, "upstream_status", upstream_status)
        super().__init__(
            message, status_code=http.HTTPStatus.BAD_GATEWAY, details=details, **kwargs
        )


class QueryValidationError(SearchError):
    """A request body failed validation."""

    def __init__(self, message: str, field: str | None = None, **kwargs):
        details = _with_detail(kwargs, "field", field)
        super().__init__(
            message, status_code=http.HTTPStatus.BAD_REQUEST, details=details, **kwargs
        )


class ResultNotFoundError(SearchError):
    """No snapshot exists for the id, or the id is malformed."""

    def __init__(self, result_id: str, **kwargs):
        super().__init__(
            "Results not found",
            status_code=http.HTTPStatus.NOT_FOUND,
            details={"result_id": result_id},
            **kwargs,
        )


class MissingConfigurationError(SearchError):
    """A required setting, such as the judge credential, is not set."""

    def __init__(self, config_key: str, **kwargs):
        details = _with_detail(kwargs, "config_key", config_key)
        super().__init__(f"{config_key} not configured", details=details, **kwargs)


def http_error_response(error: Exception | str, **extra) -> dict[str, Any]:
    """Build the JSON body for an error response.

    SearchError instances carry their own status; anything else is reported
    as a 500. The message is duplicated under ``error`` for API clients.
    """
    if isinstance(error, SearchError):
        body = error.to_dict()
        status_code = error.status_code
    else:
        name = type(error).__name__ if isinstance(error, Exception) else "Error"
        body = {"error_type": name, "message": str(error)}
        status_code = http.HTTPStatus.INTERNAL_SERVER_ERROR

    body["error"] = body["message"]
    body["status_code"] = int(status_code)
    for key, value in extra.items():
        body.setdefault(key, value)
    return body
