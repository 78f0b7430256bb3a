from typing import TYPE_CHECKING, Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr

if TYPE_CHECKING:
    from .._services._transport import RawResponse


class ApiResponse(BaseModel):
    """Base of every mapped API payload.

    Unknown fields are kept as extras so new server fields never break
    mapping.
    """

    model_config = ConfigDict(
        validate_by_name=True,
        validate_by_alias=True,
        coerce_numbers_to_str=True,
        extra="allow",
    )

    status: Optional[str] = None
    message: Optional[Any] = None
    error_type: Optional[str] = None
    error_title: Optional[str] = None

    _http_response: Optional[Any] = PrivateAttr(default=None)

    def is_ok(self) -> bool:
        return self.status == "ok"

    @property
    def http_response(self) -> Optional["RawResponse"]:
        return self._http_response


class GenericResponse(ApiResponse):
    pass


class UploadPhotoResponse(ApiResponse):
    upload_id: Optional[str] = None
    media_id: Optional[str] = None


class UploadVideoResponse(ApiResponse):
    upload_id: Optional[str] = None
    video_upload_urls: Optional[List[Dict[str, Any]]] = None


class Caption(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True, extra="allow")

    text: Optional[str] = None
    pk: Optional[str] = None


class MediaItem(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True, extra="allow")

    pk: Optional[str] = None
    id: Optional[str] = None
    code: Optional[str] = None
    media_type: Optional[int] = None
    caption: Optional[Caption] = None
    carousel_media: Optional[List["MediaItem"]] = None


class ConfigureResponse(ApiResponse):
    upload_id: Optional[str] = None
    client_sidecar_id: Optional[str] = None
    media: Optional[MediaItem] = Field(default=None)
