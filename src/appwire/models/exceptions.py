from typing import TYPE_CHECKING, Optional

from .errors import AppWireError

if TYPE_CHECKING:
    from .._services._transport import RawResponse


class NetworkError(AppWireError):
    """The request never produced an HTTP response (DNS, connect, timeout...)."""


class ApiError(AppWireError):
    """Well-formed HTTP exchange whose payload reports a failure.

    Carries the remote message, the optional ``error_type`` discriminant and
    the raw response that produced it.
    """

    def __init__(
        self,
        message: str,
        *,
        error_type: Optional[str] = None,
        status_code: Optional[int] = None,
        response: Optional["RawResponse"] = None,
    ):
        self.error_type = error_type
        self.status_code = status_code
        self.response = response
        super().__init__(message)

    def __str__(self) -> str:
        details = [f"status_code={self.status_code}"] if self.status_code else []
        if self.error_type:
            details.append(f"error_type={self.error_type}")
        if details:
            return f"{self.message} ({', '.join(details)})"
        return self.message


class EmptyResponseError(ApiError):
    pass


class LoginRequiredError(ApiError):
    def __init__(
        self,
        message: str = "User not logged in. Please call login() and then try again.",
        **kwargs,
    ):
        super().__init__(message, **kwargs)


class CheckpointRequiredError(ApiError):
    pass


class FeedbackRequiredError(ApiError):
    pass


class ConsentRequiredError(ApiError):
    pass


class ThrottledError(ApiError):
    pass


class NotFoundError(ApiError):
    pass


class MediaNeedsReuploadError(ApiError):
    pass


class TransientApiError(ApiError):
    """Failure the server is known to recover from on its own."""


class TranscodeNotReadyError(TransientApiError):
    pass


class ServerError(TransientApiError):
    pass


class UploadFailedError(AppWireError):
    pass


class ConfigureRetriesExhaustedError(UploadFailedError):
    def __init__(self, attempts: int, last_error: Optional[BaseException] = None):
        self.attempts = attempts
        self.last_error = last_error
        super().__init__(
            f"All {attempts} configuration attempts have failed: {last_error}"
        )
