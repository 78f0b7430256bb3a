import pytest
from pydantic import ValidationError

from appwire import AppWire, Config, HmacSigner, TimelineService
from appwire._services._base_service import BaseService
from appwire._services._transport import HttpxTransport
from appwire._session import StaticSession
from appwire._utils.constants import ENV_DEBUG, ENV_SIG_KEY, ENV_SIG_KEY_VERSION
from appwire.models.errors import SignerMissingError
from tests.utils.recording_transport import RecordingTransport


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch):
    for name in (ENV_SIG_KEY, ENV_SIG_KEY_VERSION, ENV_DEBUG):
        monkeypatch.delenv(name, raising=False)


class TestAppWire:
    def test_defaults(self):
        client = AppWire()

        assert client.config.sig_key is None
        assert client.config.api_urls[1] == "https://i.instagram.com/api/v1/"
        assert isinstance(client._transport, HttpxTransport)
        assert client._signer is None

    def test_signer_from_sig_key(self):
        client = AppWire(sig_key="secret-key")

        assert isinstance(client._signer, HmacSigner)
        assert client._signer.key_version == "4"

    def test_config_from_env(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv(ENV_SIG_KEY, "env-key")
        monkeypatch.setenv(ENV_SIG_KEY_VERSION, "5")
        monkeypatch.setenv(ENV_DEBUG, "true")

        client = AppWire()

        assert client.config.sig_key == "env-key"
        assert client.config.sig_key_version == "5"
        assert client.config.debug is True
        assert isinstance(client._signer, HmacSigner)

    def test_explicit_config_wins(self, config: Config):
        client = AppWire(config=config)

        assert client.config is config

    def test_request_factory(self, config: Config, session: StaticSession):
        transport = RecordingTransport()
        client = AppWire(
            config=config, session=session, transport=transport, sig_key="k"
        )

        client.request("feed/timeline/").add_param("max_id", "9").execute()

        assert transport.requests[0].url == (
            "https://api.test/api/v1/feed/timeline/?max_id=9"
        )
        assert transport.requests[0].method == "GET"

    def test_request_goes_through_base_service(
        self, config: Config, session: StaticSession, monkeypatch: pytest.MonkeyPatch
    ):
        endpoints = []
        build = BaseService.request

        def recording_request(service: BaseService, endpoint: str):
            endpoints.append(endpoint)
            return build(service, endpoint)

        monkeypatch.setattr(BaseService, "request", recording_request)
        client = AppWire(config=config, session=session, transport=RecordingTransport())

        request = client.request("feed/timeline/")

        assert endpoints == ["feed/timeline/"]
        assert request.spec.endpoint == "feed/timeline/"

    def test_signed_post_without_key(self, config: Config, session: StaticSession):
        client = AppWire(config=config, session=session, transport=RecordingTransport())

        with pytest.raises(SignerMissingError):
            client.request("media/configure/").add_post("caption", "hi").execute()

    def test_timeline(self, config: Config, session: StaticSession):
        client = AppWire(config=config, session=session, transport=RecordingTransport())

        assert isinstance(client.timeline, TimelineService)
        assert client.timeline.csrf_token == "csrf-token"


class TestConfig:
    @pytest.mark.parametrize(
        "url",
        [
            "not a url",
            "ftp://api.test/api/v1/",
            "https://api.test/api/v1",
        ],
    )
    def test_invalid_api_url(self, url: str):
        with pytest.raises(ValidationError):
            Config(api_urls={1: url})

    def test_requires_an_api_version(self):
        with pytest.raises(ValidationError):
            Config(api_urls={})
