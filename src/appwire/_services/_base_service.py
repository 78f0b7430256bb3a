from logging import getLogger
from typing import Optional

from .._config import Config
from .._request import Request
from .._session import Session
from .._utils._signing import Signer
from ._transport import Transport


class BaseService:
    def __init__(
        self,
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

    def request(self, endpoint: str) -> Request:
        """Start a fresh, single-use request against ``endpoint``."""
        return Request(
            endpoint,
            config=self._config,
            transport=self._transport,
            session=self._session,
            signer=self._signer,
        )

    @property
    def csrf_token(self) -> str:
        return self._session.csrf_token() if self._session else ""

    @property
    def device_uuid(self) -> str:
        return self._session.device_uuid() if self._session else ""
