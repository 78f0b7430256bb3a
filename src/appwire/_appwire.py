from logging import getLogger
from os import environ as env
from typing import Optional

from dotenv import load_dotenv

from ._config import Config
from ._request import Request
from ._services._base_service import BaseService
from ._services._transport import HttpxTransport, Transport
from ._services.timeline_service import ThumbnailExtractor, TimelineService
from ._session import Session
from ._utils._logs import setup_logging
from ._utils._signing import HmacSigner, Signer
from ._utils.constants import (
    DEFAULT_SIG_KEY_VERSION,
    ENV_DEBUG,
    ENV_SIG_KEY,
    ENV_SIG_KEY_VERSION,
)

load_dotenv()


class AppWire:
    """Entry point that wires config, session, signer and transport together.

    Examples:
        >>> client = AppWire(session=my_session)
        >>> payload = client.request("feed/timeline/").get_raw_response()
    """

    def __init__(
        self,
        *,
        session: Optional[Session] = None,
        signer: Optional[Signer] = None,
        transport: Optional[Transport] = None,
        config: Optional[Config] = None,
        sig_key: Optional[str] = None,
        thumbnail_extractor: Optional[ThumbnailExtractor] = None,
        debug: bool = False,
    ) -> None:
        self._config = config or Config(
            sig_key=sig_key or env.get(ENV_SIG_KEY),
            sig_key_version=env.get(ENV_SIG_KEY_VERSION, DEFAULT_SIG_KEY_VERSION),
            debug=debug or env.get(ENV_DEBUG, "").lower() in ("1", "true"),
        )

        setup_logging(self._config.debug)
        log = getLogger("appwire")

        log.debug("CONFIG:")
        log.debug(f"{self._config.model_dump(exclude={'sig_key'})}\n")

        if signer is None and self._config.sig_key:
            signer = HmacSigner(self._config.sig_key, self._config.sig_key_version)

        self._session = session
        self._signer = signer
        self._transport = transport or HttpxTransport(self._config)
        self._thumbnail_extractor = thumbnail_extractor
        self._base_service = BaseService(
            self._config, self._transport, session=session, signer=signer
        )

    @property
    def config(self) -> Config:
        return self._config

    def request(self, endpoint: str) -> Request:
        return self._base_service.request(endpoint)

    @property
    def timeline(self) -> TimelineService:
        return TimelineService(
            self._config,
            self._transport,
            session=self._session,
            signer=self._signer,
            thumbnail_extractor=self._thumbnail_extractor,
        )
