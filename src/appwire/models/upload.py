import json
import threading
import time
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .responses import UploadPhotoResponse, UploadVideoResponse

_upload_id_lock = threading.Lock()
_last_upload_id = 0


def generate_upload_id() -> str:
    """Return a millisecond timestamp usable as an upload session id.

    Ids are strictly increasing within the process, so items prepared in the
    same millisecond still get distinct sessions.
    """
    global _last_upload_id
    with _upload_id_lock:
        upload_id = max(time.time_ns() // 1_000_000, _last_upload_id + 1)
        _last_upload_id = upload_id
    return str(upload_id)


class MediaType(str, Enum):
    PHOTO = "photo"
    VIDEO = "video"


class Usertag(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True, extra="forbid")

    user_id: str
    position: Tuple[float, float]

    @field_validator("user_id")
    @classmethod
    def validate_user_id(cls, value: str) -> str:
        if not value.isdigit():
            raise ValueError(f'Invalid user ID "{value}" in usertag.')
        return value

    @field_validator("position")
    @classmethod
    def validate_position(cls, value: Tuple[float, float]) -> Tuple[float, float]:
        for coordinate in value:
            if not 0.0 <= coordinate <= 1.0:
                raise ValueError(
                    f"Usertag position {coordinate} must be between 0.0 and 1.0."
                )
        return value


class Usertags(BaseModel):
    """People tagged in a photo: ``{"in": [...], "removed": [...]}``."""

    model_config = ConfigDict(
        validate_by_name=True,
        validate_by_alias=True,
        coerce_numbers_to_str=True,
        extra="forbid",
    )

    tagged: List[Usertag] = Field(default_factory=list, alias="in")
    removed: List[str] = Field(default_factory=list)

    def to_payload(self) -> str:
        return json.dumps(self.model_dump(by_alias=True, mode="json"))


class UploadItem(BaseModel):
    """One entry of an album upload.

    Usertags are only accepted on photos. Videos need a ``thumbnail`` image
    unless the uploader is given a thumbnail extractor.
    """

    model_config = ConfigDict(extra="forbid")

    type: MediaType
    file: Path
    usertags: Optional[Usertags] = None
    thumbnail: Optional[Path] = None
    duration: Optional[float] = None


@dataclass
class InternalMetadata:
    """Upload state accumulated for one media item during a workflow."""

    upload_id: str = field(default_factory=generate_upload_id)
    photo_upload_response: Optional[UploadPhotoResponse] = None
    video_upload_response: Optional[UploadVideoResponse] = None


@dataclass
class AlbumEntry:
    item: UploadItem
    metadata: InternalMetadata = field(default_factory=InternalMetadata)
