from pathlib import Path

import pytest

from appwire._config import Config
from appwire._session import StaticSession
from appwire._utils._signing import HmacSigner
from tests.utils.recording_transport import RecordingTransport


@pytest.fixture
def config() -> Config:
    return Config(
        api_urls={1: "https://api.test/api/v1/", 2: "https://api.test/api/v2/"}
    )


@pytest.fixture
def session() -> StaticSession:
    return StaticSession(authenticated=True, token="csrf-token", uuid="device-uuid")


@pytest.fixture
def signer() -> HmacSigner:
    return HmacSigner("secret-key", "4")


@pytest.fixture
def transport() -> RecordingTransport:
    return RecordingTransport()


@pytest.fixture
def photo_file(tmp_path: Path) -> Path:
    file_path = tmp_path / "photo.jpg"
    file_path.write_bytes(b"\xff\xd8\xff\xe0photo-bytes")
    return file_path


@pytest.fixture
def video_file(tmp_path: Path) -> Path:
    file_path = tmp_path / "video.mp4"
    file_path.write_bytes(b"\x00\x00\x00\x18ftypmp42video-bytes")
    return file_path


@pytest.fixture
def thumbnail_file(tmp_path: Path) -> Path:
    file_path = tmp_path / "thumb.jpg"
    file_path.write_bytes(b"\xff\xd8\xff\xe0thumb-bytes")
    return file_path
