from dataclasses import dataclass, field
from logging import getLogger
from typing import Iterable, Mapping, Optional, Protocol, Union, runtime_checkable

from httpx import Client, Headers

from .._config import Config
from .._utils._errors import handle_errors
from .._utils.constants import HEADER_USER_AGENT

Body = Union[bytes, Iterable[bytes]]


@dataclass(frozen=True)
class WireRequest:
    """Fully assembled request, ready to be sent."""

    method: str
    url: str
    headers: Mapping[str, str] = field(default_factory=dict)
    body: Optional[Body] = None


@dataclass(frozen=True)
class RawResponse:
    status_code: int
    headers: Mapping[str, str]
    content: bytes

    @property
    def text(self) -> str:
        return self.content.decode("utf-8", errors="replace")


@runtime_checkable
class Transport(Protocol):
    def execute(self, request: WireRequest) -> RawResponse: ...


class HttpxTransport:
    """Sends wire requests with a shared ``httpx.Client``.

    No retries happen here; a failed exchange is reported once.
    """

    def __init__(self, config: Config, client: Optional[Client] = None) -> None:
        self._logger = getLogger("appwire")
        self._config = config
        self._client = client or Client(
            timeout=self._config.timeout,
            headers=Headers({HEADER_USER_AGENT: self._config.user_agent}),
        )

    def execute(self, request: WireRequest) -> RawResponse:
        self._logger.debug(f"Request: {request.method} {request.url}")
        self._logger.debug(f"HEADERS: {dict(request.headers)}")

        with handle_errors():
            response = self._client.request(
                request.method,
                request.url,
                headers=dict(request.headers),
                content=request.body,
            )

        self._logger.debug(f"Response: {response.status_code} {request.url}")
        return RawResponse(
            status_code=response.status_code,
            headers=dict(response.headers),
            content=response.content,
        )

    def close(self) -> None:
        self._client.close()
