import random
from dataclasses import dataclass
from logging import getLogger
from pathlib import Path
from typing import (
    BinaryIO,
    Dict,
    Iterable,
    List,
    Mapping,
    Optional,
    Sequence,
    Tuple,
    Union,
)
from urllib.parse import urlencode

import httpx

from ._ordering import reorder_by_hash_code
from ._request_spec import FileAttachment
from .constants import (
    BOUNDARY_CHARS,
    BOUNDARY_LENGTH,
    CONTENT_TYPE_MULTIPART,
    CONTENT_TYPE_URLENCODED,
    HEADER_CONTENT_LENGTH,
    HEADER_CONTENT_TYPE,
)

logger = getLogger("appwire")

Fields = Union[Mapping[str, str], Sequence[Tuple[str, str]]]


def generate_boundary() -> str:
    return "".join(random.choice(BOUNDARY_CHARS) for _ in range(BOUNDARY_LENGTH))


class HandleRegistry:
    """Tracks the file handles opened while encoding one request attempt."""

    def __init__(self) -> None:
        self._handles: List[BinaryIO] = []

    def __len__(self) -> int:
        return len(self._handles)

    def __enter__(self) -> "HandleRegistry":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close_all()

    def open(self, path: Union[str, Path]) -> BinaryIO:
        try:
            handle = open(path, "rb")
        except OSError as e:
            raise ValueError(f'Can not open file "{path}" for reading.') from e
        self._handles.append(handle)
        return handle

    def close_all(self) -> None:
        """Close every registered handle.

        Close failures are logged and never raised, so they cannot mask the
        error of the operation that triggered the cleanup.
        """
        handles, self._handles = self._handles, []
        for handle in handles:
            try:
                handle.close()
            except Exception:
                logger.exception(f"Failed to close file handle {handle!r}")

    def reset(self) -> None:
        self.close_all()


@dataclass(frozen=True)
class EncodedBody:
    content: Union[bytes, Iterable[bytes]]
    content_type: str
    content_length: int


def encode_urlencoded(fields: Fields) -> bytes:
    return urlencode(reorder_by_hash_code(fields)).encode("ascii")


def encode_body(
    fields: Fields,
    files: Mapping[str, FileAttachment],
    handles: HandleRegistry,
    *,
    url: str,
    boundary: Optional[str] = None,
) -> EncodedBody:
    """Encode POST fields and attachments into a request body.

    Without attachments the fields are urlencoded. With at least one
    attachment, fields and files share a single ordering pass and the body
    becomes a multipart stream rendered by httpx. Path-backed files are opened
    through ``handles`` and read lazily while the body is sent.

    Args:
        fields: POST fields, already signed when signing applies.
        files: Attachments keyed by form field name.
        handles: Registry that takes ownership of every opened handle.
        url: Target of the request the body belongs to.
        boundary: Multipart boundary; random when omitted.

    Returns:
        EncodedBody: The body together with its content type and length.
    """
    if not files:
        body = encode_urlencoded(fields)
        return EncodedBody(body, CONTENT_TYPE_URLENCODED, len(body))

    merged: Dict[str, Union[str, FileAttachment]] = dict(
        fields.items() if isinstance(fields, Mapping) else fields
    )
    merged.update(files)

    # plain fields go through ``files=`` too, so they keep their hash position
    parts = []
    for key, value in reorder_by_hash_code(merged):
        if isinstance(value, FileAttachment):
            contents = (
                handles.open(value.path)  # type: ignore[arg-type]
                if value.is_path_backed
                else value.data
            )
            parts.append((key, (value.filename, contents, None, dict(value.headers))))
        else:
            parts.append((key, (None, value.encode("utf-8"))))

    content_type = f"{CONTENT_TYPE_MULTIPART}; boundary={boundary or generate_boundary()}"
    request = httpx.Request(
        "POST", url, files=parts, headers={HEADER_CONTENT_TYPE: content_type}
    )
    return EncodedBody(
        request.stream,  # type: ignore[arg-type]
        content_type,
        int(request.headers[HEADER_CONTENT_LENGTH]),
    )
