from typing import Any, Dict, Optional


class CloudApiError(Exception):
    """Base class for every failure raised by the Cloud API client."""


class UnknownSite(CloudApiError):
    def __init__(self, site: Optional[str]):
        super().__init__(
            f"Site name [{site}] is not a recognized site or site alias."
        )
        self.site = site


class CredentialsError(CloudApiError):
    pass


class TransportError(CloudApiError):
    """Connection, TLS, DNS or timeout failure before a status was received."""

    def __init__(
        self,
        message: str,
        cause: Optional[BaseException] = None,
        call_args: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.cause = cause
        self.call_args = call_args or {}


class ResourceNotFound(CloudApiError):
    def __init__(
        self,
        message: str = "Resource not found.",
        status_code: Optional[int] = 404,
        call_args: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.call_args = call_args or {}


class ApiError(CloudApiError):
    """The API answered with a status other than 200, 307 or 404."""

    def __init__(
        self,
        status_code: int,
        body: Any = None,
        call_args: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            f"Error returned from Cloud API: {status_code} (result: {body!r})"
        )
        self.status_code = status_code
        self.body = body
        self.call_args = call_args or {}


class NotImplementedCall(CloudApiError):
    def __init__(self, operation: str):
        super().__init__(
            f'Cloud call "{operation}" is not implemented for your own safety.'
        )
        self.operation = operation


class ResultStreamError(CloudApiError):
    """The result_stream target could not be opened; no request was sent."""

    def __init__(
        self,
        message: str,
        cause: Optional[BaseException] = None,
        call_args: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.cause = cause
        self.call_args = call_args or {}
