from collections import deque
from typing import Deque, List, Optional, Union

from appwire._services._transport import RawResponse, WireRequest


class RecordingTransport:
    """Transport double that records requests and replays queued outcomes.

    The body of every request is consumed while "sending", like a real
    transport would, and stored in ``bodies``.
    """

    def __init__(self) -> None:
        self.requests: List[WireRequest] = []
        self.bodies: List[Optional[bytes]] = []
        self._outcomes: Deque[Union[RawResponse, BaseException]] = deque()

    def add_response(
        self,
        status_code: int = 200,
        content: bytes = b'{"status": "ok"}',
        headers: Optional[dict] = None,
    ) -> None:
        self._outcomes.append(RawResponse(status_code, headers or {}, content))

    def add_exception(self, exception: BaseException) -> None:
        self._outcomes.append(exception)

    def execute(self, request: WireRequest) -> RawResponse:
        self.requests.append(request)
        if request.body is None:
            self.bodies.append(None)
        elif isinstance(request.body, bytes):
            self.bodies.append(request.body)
        else:
            self.bodies.append(b"".join(request.body))

        outcome = (
            self._outcomes.popleft()
            if self._outcomes
            else RawResponse(200, {}, b'{"status": "ok"}')
        )
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome
