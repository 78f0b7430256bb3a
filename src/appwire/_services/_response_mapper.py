import json
from typing import Any, Dict, Optional, Type, TypeVar

from ..models.exceptions import (
    ApiError,
    CheckpointRequiredError,
    ConsentRequiredError,
    EmptyResponseError,
    FeedbackRequiredError,
    LoginRequiredError,
    NotFoundError,
    ServerError,
    ThrottledError,
    TranscodeNotReadyError,
)
from ..models.responses import ApiResponse
from ._transport import RawResponse

T = TypeVar("T", bound=ApiResponse)

# Checked in order; the first discriminant found in error_type or message wins.
SERVER_MESSAGES: Dict[str, Type[ApiError]] = {
    "login_required": LoginRequiredError,
    "checkpoint_required": CheckpointRequiredError,
    "challenge_required": CheckpointRequiredError,
    "checkpoint_challenge_required": CheckpointRequiredError,
    "feedback_required": FeedbackRequiredError,
    "consent_required": ConsentRequiredError,
    "Please wait a few minutes": ThrottledError,
    "throttled": ThrottledError,
    "Transcode not finished yet": TranscodeNotReadyError,
    "Transcode timeout": TranscodeNotReadyError,
}

HTTP_STATUSES: Dict[int, Type[ApiError]] = {
    202: TranscodeNotReadyError,
    404: NotFoundError,
    429: ThrottledError,
}


def decode_body(raw: RawResponse) -> Dict[str, Any]:
    """Decode a response body into a JSON object.

    Raises:
        EmptyResponseError: If the body is empty or not a JSON object.
    """
    try:
        payload = json.loads(raw.content) if raw.content else None
    except ValueError:
        payload = None

    if not isinstance(payload, dict):
        raise EmptyResponseError(
            "No response from server. Either a connection or configuration error.",
            status_code=raw.status_code,
            response=raw,
        )
    return payload


def _error_class(
    error_type: Optional[str], message: Optional[str], status_code: int
) -> Type[ApiError]:
    for needle, exception_class in SERVER_MESSAGES.items():
        if error_type == needle or (message and needle in message):
            return exception_class

    if status_code in HTTP_STATUSES:
        return HTTP_STATUSES[status_code]
    if 500 <= status_code < 600:
        return ServerError
    return ApiError


def raise_for_payload(payload: Dict[str, Any], raw: RawResponse) -> None:
    """Raise the structured error described by a failed payload, if any."""
    status_ok = payload.get("status") == "ok"
    if status_ok and 200 <= raw.status_code < 300 and raw.status_code != 202:
        return

    message = payload.get("message")
    if not isinstance(message, str):
        message = json.dumps(message) if message is not None else None
    error_type = payload.get("error_type")

    exception_class = _error_class(error_type, message, raw.status_code)
    raise exception_class(
        message or f"Request failed with HTTP status {raw.status_code}",
        error_type=error_type,
        status_code=raw.status_code,
        response=raw,
    )


def map_response(raw: RawResponse, model: Type[T]) -> T:
    """Map a raw response onto ``model``.

    Args:
        raw: The response returned by the transport.
        model: The ``ApiResponse`` subclass to populate.

    Returns:
        T: The populated model, holding a reference to ``raw``.

    Raises:
        EmptyResponseError: If the body is not a JSON object.
        ApiError: If the payload or HTTP status reports a failure. The
            concrete subclass depends on the remote error.
    """
    payload = decode_body(raw)
    raise_for_payload(payload, raw)

    result = model.model_validate(payload)
    result._http_response = raw
    return result
