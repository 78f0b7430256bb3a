from contextlib import contextmanager
from typing import Generator

import httpx

from ..models.exceptions import NetworkError


@contextmanager
def handle_errors() -> Generator[None, None, None]:
    """Convert httpx transport failures into appwire errors.

    Only failures that never produced a response are converted; HTTP status
    handling belongs to the response mapper.

    Raises:
        NetworkError: For connection errors, timeouts and protocol errors.
    """
    try:
        yield
    except httpx.TransportError as e:
        raise NetworkError(f"{type(e).__name__}: {e}") from e
