import json
import os
import random
from enum import Enum
from logging import getLogger
from pathlib import Path
from typing import Any, Dict, Iterable, Optional, Type, TypeVar, Union
from urllib.parse import urlencode

from ._config import Config
from ._services._response_mapper import decode_body, map_response
from ._services._transport import RawResponse, Transport, WireRequest
from ._session import Session
from ._utils._multipart import HandleRegistry, encode_body
from ._utils._ordering import reorder_by_hash_code
from ._utils._request_spec import DEFAULT_FILE_HEADERS, FileAttachment, RequestSpec
from ._utils._signing import Signer
from ._utils.constants import (
    CONNECTION_SPEED_MAX,
    CONNECTION_SPEED_MIN,
    HEADER_CAPABILITIES,
    HEADER_CONNECTION_SPEED,
    HEADER_CONNECTION_TYPE,
    HEADER_CONTENT_LENGTH,
    HEADER_CONTENT_TYPE,
)
from .models.errors import RequestAlreadyExecutedError, SignerMissingError
from .models.exceptions import LoginRequiredError
from .models.responses import ApiResponse

T = TypeVar("T", bound=ApiResponse)


class RequestState(str, Enum):
    UNBUILT = "unbuilt"
    EXECUTED = "executed"


def normalize_value(value: Any) -> str:
    """Render a param value the way the API expects it in form contexts.

    Booleans become ``"true"``/``"false"``, dicts and lists become compact
    JSON and everything else goes through ``str()``.

    Raises:
        ValueError: If ``value`` is ``None``.
    """
    if value is None:
        raise ValueError("Form values can not be None.")
    if value is True:
        return "true"
    if value is False:
        return "false"
    if isinstance(value, (dict, list)):
        return json.dumps(value, separators=(",", ":"))
    return str(value)


class Request:
    """Single-use builder for one API call.

    Accumulates query params, POST fields, files and headers, then builds and
    sends the wire request on the first ``execute()``. The response is cached
    and every later call returns it without touching the network.

    Examples:
        >>> response = (
        ...     client.request("media/123/like/")
        ...     .add_post("media_id", "123")
        ...     .add_post("_uuid", session.device_uuid())
        ...     .get_response(GenericResponse)
        ... )
    """

    def __init__(
        self,
        endpoint: str,
        *,
        config: Config,
        transport: Transport,
        session: Optional[Session] = None,
        signer: Optional[Signer] = None,
    ) -> None:
        self._logger = getLogger("appwire")
        self._config = config
        self._transport = transport
        self._session = session
        self._signer = signer

        self._spec = RequestSpec(endpoint=endpoint)
        self._state = RequestState.UNBUILT
        self._response: Optional[RawResponse] = None
        self._handles = HandleRegistry()

    @property
    def state(self) -> RequestState:
        return self._state

    @property
    def spec(self) -> RequestSpec:
        return self._spec

    def _ensure_mutable(self) -> None:
        if self._state is RequestState.EXECUTED:
            raise RequestAlreadyExecutedError()

    def set_version(self, api_version: int) -> "Request":
        self._ensure_mutable()
        if api_version not in self._config.api_urls:
            raise ValueError(f'"{api_version}" is not a supported API version.')
        self._spec.api_version = api_version
        return self

    def add_param(self, key: str, value: Any) -> "Request":
        """Add a query param, overwriting any previous value."""
        self._ensure_mutable()
        self._spec.params[key] = normalize_value(value)
        return self

    def add_post(self, key: str, value: Any) -> "Request":
        """Add a POST field, overwriting any previous value."""
        self._ensure_mutable()
        self._spec.posts[key] = normalize_value(value)
        return self

    def add_file(
        self,
        key: str,
        filepath: Union[str, Path],
        filename: Optional[str] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> "Request":
        """Attach an on-disk file, turning the body into a multipart form.

        Args:
            key: Form field name.
            filepath: Path to the file. It is opened only while the request
                is being sent.
            filename: Name for the Content-Disposition header. Defaults to the
                basename of ``filepath``.
            headers: Extra part headers; they take precedence over the
                default content type and transfer encoding.

        Raises:
            ValueError: If the file does not exist or is not readable.
        """
        self._ensure_mutable()
        path = Path(filepath)
        if not path.is_file():
            raise ValueError(f'File "{path}" does not exist.')
        if not os.access(path, os.R_OK):
            raise ValueError(f'File "{path}" is not readable.')

        self._spec.files[key] = FileAttachment(
            filename=Path(filename or path).name,
            path=path,
            headers={**DEFAULT_FILE_HEADERS, **(headers or {})},
        )
        return self

    def add_file_data(
        self,
        key: str,
        data: bytes,
        filename: str,
        headers: Optional[Dict[str, str]] = None,
    ) -> "Request":
        """Attach in-memory file data, turning the body into a multipart form."""
        self._ensure_mutable()
        self._spec.files[key] = FileAttachment(
            filename=Path(filename).name,
            data=bytes(data),
            headers={**DEFAULT_FILE_HEADERS, **(headers or {})},
        )
        return self

    def add_header(self, key: str, value: str) -> "Request":
        """Set a header, overwriting any previous value.

        Explicit headers always win over the default headers.
        """
        self._ensure_mutable()
        self._spec.headers[key] = value
        return self

    def set_needs_auth(self, needs_auth: bool) -> "Request":
        self._ensure_mutable()
        self._spec.needs_auth = needs_auth
        return self

    def set_signed_post(self, signed_post: bool = True) -> "Request":
        self._ensure_mutable()
        self._spec.signed_post = signed_post
        return self

    def set_body(self, body: Union[bytes, str, Iterable[bytes]]) -> "Request":
        """Send ``body`` verbatim; POST fields and files are then ignored."""
        self._ensure_mutable()
        self._spec.body = body.encode("utf-8") if isinstance(body, str) else body
        return self

    def set_add_default_headers(self, flag: bool) -> "Request":
        self._ensure_mutable()
        self._spec.default_headers = flag
        return self

    def _default_headers(self) -> Dict[str, str]:
        speed = random.randint(CONNECTION_SPEED_MIN, CONNECTION_SPEED_MAX)
        return {
            HEADER_CAPABILITIES: self._config.capabilities,
            HEADER_CONNECTION_TYPE: self._config.connection_type,
            HEADER_CONNECTION_SPEED: f"{speed}kbps",
        }

    def _build_url(self) -> str:
        endpoint = self._spec.endpoint
        if not endpoint.startswith(("http:", "https:")):
            endpoint = self._config.api_urls[self._spec.api_version] + endpoint

        if self._spec.params:
            separator = "&" if "?" in endpoint else "?"
            endpoint += separator + urlencode(reorder_by_hash_code(self._spec.params))
        return endpoint

    def _build_body(self, url: str, headers: Dict[str, str]):
        if self._spec.body is not None:
            return self._spec.body
        if not self._spec.posts and not self._spec.files:
            return None

        fields = reorder_by_hash_code(self._spec.posts)
        if self._spec.signed_post and fields:
            if self._signer is None:
                raise SignerMissingError()
            fields = list(self._signer.sign(fields))

        encoded = encode_body(fields, self._spec.files, self._handles, url=url)
        computed = {HEADER_CONTENT_TYPE.lower(), HEADER_CONTENT_LENGTH.lower()}
        for name in [name for name in headers if name.lower() in computed]:
            del headers[name]
        headers[HEADER_CONTENT_TYPE] = encoded.content_type
        headers[HEADER_CONTENT_LENGTH] = str(encoded.content_length)
        return encoded.content

    def _build_wire_request(self) -> WireRequest:
        """Assemble the wire request from the current build state.

        Path-backed files are opened into this request's handle registry;
        ``execute()`` takes care of closing them.
        """
        url = self._build_url()
        headers = dict(self._spec.headers)
        body = self._build_body(url, headers)

        if self._spec.default_headers:
            present = {name.lower() for name in headers}
            for name, value in self._default_headers().items():
                if name.lower() not in present:
                    headers[name] = value

        method = "POST" if body is not None else "GET"
        return WireRequest(method=method, url=url, headers=headers, body=body)

    def execute(self, session: Optional[Session] = None) -> RawResponse:
        """Send the request once and cache its raw response.

        Args:
            session: Session to check the auth gate against. Defaults to the
                session the request was created with.

        Returns:
            RawResponse: The response of the first successful execution.

        Raises:
            LoginRequiredError: If the request needs auth and the session is
                not logged in. Raised before any network I/O.
            SignerMissingError: If the body must be signed but no signer is set.
            NetworkError: If the transport fails.
        """
        if self._state is RequestState.EXECUTED and self._response is not None:
            return self._response

        if self._spec.needs_auth:
            active_session = session or self._session
            # Best-effort local check; the server may still reject the session.
            if active_session is None or not active_session.is_authenticated():
                raise LoginRequiredError()

        self._handles.reset()
        try:
            response = self._transport.execute(self._build_wire_request())
        finally:
            self._handles.close_all()

        self._response = response
        self._state = RequestState.EXECUTED
        return response

    def get_raw_response(self) -> Dict[str, Any]:
        """Execute (at most once) and return the decoded JSON payload."""
        return decode_body(self.execute())

    def get_response(self, model: Type[T]) -> T:
        """Execute (at most once) and map the payload onto ``model``."""
        return map_response(self.execute(), model)
