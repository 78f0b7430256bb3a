import json
from typing import Any, Optional

import pytest

from appwire._services._response_mapper import decode_body, map_response
from appwire._services._transport import RawResponse
from appwire.models.exceptions import (
    ApiError,
    CheckpointRequiredError,
    EmptyResponseError,
    FeedbackRequiredError,
    LoginRequiredError,
    NotFoundError,
    ServerError,
    ThrottledError,
    TranscodeNotReadyError,
    TransientApiError,
)
from appwire.models.responses import ConfigureResponse, GenericResponse


def raw(payload: Optional[Any], status_code: int = 200) -> RawResponse:
    content = json.dumps(payload).encode() if payload is not None else b""
    return RawResponse(status_code=status_code, headers={}, content=content)


class TestMapResponse:
    def test_maps_success(self):
        response = raw(
            {
                "status": "ok",
                "upload_id": "42",
                "media": {"pk": 1234567890123, "code": "Bx", "caption": {"text": "hi"}},
            }
        )

        result = map_response(response, ConfigureResponse)

        assert result.is_ok()
        assert result.upload_id == "42"
        assert result.media is not None
        assert result.media.pk == "1234567890123"
        assert result.media.caption is not None
        assert result.media.caption.text == "hi"
        assert result.http_response is response

    def test_unknown_fields_are_tolerated(self):
        result = map_response(
            raw({"status": "ok", "brand_new_field": {"nested": True}}), GenericResponse
        )

        assert result.model_extra == {"brand_new_field": {"nested": True}}

    @pytest.mark.parametrize("content", [b"", b"not json", b"[1, 2]"])
    def test_empty_or_invalid_body(self, content: bytes):
        with pytest.raises(EmptyResponseError, match="No response from server"):
            map_response(RawResponse(200, {}, content), GenericResponse)

    @pytest.mark.parametrize(
        "payload, status_code, expected",
        [
            ({"status": "fail", "message": "login_required"}, 403, LoginRequiredError),
            (
                {"status": "fail", "message": "x", "error_type": "checkpoint_challenge_required"},
                400,
                CheckpointRequiredError,
            ),
            ({"status": "fail", "message": "challenge_required"}, 400, CheckpointRequiredError),
            ({"status": "fail", "message": "feedback_required"}, 400, FeedbackRequiredError),
            (
                {"status": "fail", "message": "Please wait a few minutes before you try again."},
                400,
                ThrottledError,
            ),
            ({"status": "fail", "message": "rate limited"}, 429, ThrottledError),
            ({"status": "fail", "message": "missing"}, 404, NotFoundError),
            ({"status": "fail", "message": "Transcode not finished yet."}, 200, TranscodeNotReadyError),
            ({"status": "ok"}, 202, TranscodeNotReadyError),
            ({"status": "fail", "message": "oops"}, 503, ServerError),
        ],
    )
    def test_structured_errors(self, payload, status_code, expected):
        with pytest.raises(expected) as exc_info:
            map_response(raw(payload, status_code), GenericResponse)

        assert exc_info.value.status_code == status_code
        assert exc_info.value.response is not None

    def test_generic_failure_keeps_remote_details(self):
        with pytest.raises(ApiError) as exc_info:
            map_response(
                raw(
                    {"status": "fail", "message": "Invalid caption", "error_type": "bad"},
                    400,
                ),
                GenericResponse,
            )

        error = exc_info.value
        assert type(error) is ApiError
        assert error.message == "Invalid caption"
        assert error.error_type == "bad"
        assert "status_code=400" in str(error)

    def test_non_string_message(self):
        with pytest.raises(ApiError) as exc_info:
            map_response(raw({"status": "fail", "message": {"errors": ["a"]}}), GenericResponse)

        assert exc_info.value.message == '{"errors": ["a"]}'

    def test_transient_hierarchy(self):
        assert issubclass(TranscodeNotReadyError, TransientApiError)
        assert issubclass(ServerError, TransientApiError)
        assert not issubclass(ThrottledError, TransientApiError)


class TestDecodeBody:
    def test_decodes_object(self):
        assert decode_body(raw({"status": "ok", "pk": 1})) == {"status": "ok", "pk": 1}
