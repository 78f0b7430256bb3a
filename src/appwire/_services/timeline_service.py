import json
import time
from functools import partial
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Union

from .._config import Config
from .._request import Request
from .._session import Session
from .._utils._signing import Signer
from .._utils.constants import (
    ALBUM_MAX_ITEMS,
    ALBUM_MIN_ITEMS,
    CONFIGURE_RETRY_DELAY,
    MAX_CONFIGURE_RETRIES,
)
from .._workflow import RetryableWorkflow
from ..models.exceptions import MediaNeedsReuploadError
from ..models.responses import (
    ConfigureResponse,
    UploadPhotoResponse,
    UploadVideoResponse,
)
from ..models.upload import (
    AlbumEntry,
    InternalMetadata,
    MediaType,
    UploadItem,
    Usertags,
)
from ._base_service import BaseService
from ._transport import Transport

IMAGE_COMPRESSION = '{"lib_name":"jt","lib_version":"1.3.0","quality":"87"}'
PHOTO_EDITS = {"filter_strength": 1, "filter_name": "IGNormalFilter"}

ThumbnailExtractor = Callable[[Path], bytes]


class TimelineService(BaseService):
    """Uploads media to the timeline.

    Every upload runs as a ``RetryableWorkflow``: the media is validated
    first, then uploaded in order, then configured with retries.
    """

    def __init__(
        self,
        config: Config,
        transport: Transport,
        session: Optional[Session] = None,
        signer: Optional[Signer] = None,
        *,
        thumbnail_extractor: Optional[ThumbnailExtractor] = None,
        max_configure_retries: int = MAX_CONFIGURE_RETRIES,
        configure_retry_delay: float = CONFIGURE_RETRY_DELAY,
    ) -> None:
        super().__init__(config, transport, session=session, signer=signer)
        self._thumbnail_extractor = thumbnail_extractor
        self.max_configure_retries = max_configure_retries
        self.configure_retry_delay = configure_retry_delay

    def upload_photo(
        self,
        photo: Union[str, Path],
        *,
        caption: Optional[str] = None,
        usertags: Optional[Union[Usertags, Mapping[str, Any]]] = None,
        extra: Optional[Mapping[str, Any]] = None,
    ) -> ConfigureResponse:
        """Upload a single photo to the timeline.

        Args:
            photo: Path of the image file.
            caption: Post caption.
            usertags: People tagged in the photo, ``{"in": [...]}``.
            extra: Additional post-level fields (location, etc.). Dicts and
                lists are sent as JSON, ``None`` values are skipped.

        Returns:
            ConfigureResponse: The configured post.

        Raises:
            ValueError: If the photo is invalid. Nothing has been uploaded.
            ConfigureRetriesExhaustedError: If configuring kept failing
                transiently.
        """
        return self._run_single(
            {"type": MediaType.PHOTO, "file": photo, "usertags": usertags},
            lambda entries: self.configure_single_photo(
                entries[0], caption=caption, extra=extra
            ),
            name="photo",
        )

    def upload_video(
        self,
        video: Union[str, Path],
        *,
        thumbnail: Optional[Union[str, Path]] = None,
        duration: Optional[float] = None,
        caption: Optional[str] = None,
        extra: Optional[Mapping[str, Any]] = None,
    ) -> ConfigureResponse:
        """Upload a single video to the timeline.

        The video needs a ``thumbnail`` image unless the service was given a
        thumbnail extractor.

        Raises:
            ValueError: If the video or its thumbnail is invalid. Nothing has
                been uploaded.
            ConfigureRetriesExhaustedError: If configuring kept failing
                transiently, e.g. while the server is still transcoding.
        """
        return self._run_single(
            {
                "type": MediaType.VIDEO,
                "file": video,
                "thumbnail": thumbnail,
                "duration": duration,
            },
            lambda entries: self.configure_single_video(
                entries[0], caption=caption, extra=extra
            ),
            name="video",
        )

    def upload_album(
        self,
        media: Sequence[Union[UploadItem, Mapping[str, Any]]],
        *,
        caption: Optional[str] = None,
        extra: Optional[Mapping[str, Any]] = None,
    ) -> ConfigureResponse:
        """Upload an album (carousel) of 2-10 photos and videos.

        Args:
            media: Items in album order. Mappings are validated into
                ``UploadItem`` (``type``, ``file``, optional ``usertags``,
                ``thumbnail`` and ``duration``).
            caption: Album caption.
            extra: Additional album-level fields (location, etc.). Dicts and
                lists are sent as JSON, ``None`` values are skipped.

        Returns:
            ConfigureResponse: The configured album.

        Raises:
            ValueError: If the album or any item is invalid. Nothing has been
                uploaded in that case.
            ConfigureRetriesExhaustedError: If configuring kept failing
                transiently.

        Examples:
            >>> client.timeline.upload_album(
            ...     [
            ...         {"type": "photo", "file": "a.jpg"},
            ...         {"type": "video", "file": "b.mp4", "thumbnail": "b.jpg"},
            ...     ],
            ...     caption="Weekend",
            ... )
        """
        album_metadata = InternalMetadata()
        workflow: RetryableWorkflow[AlbumEntry, ConfigureResponse] = RetryableWorkflow(
            media,
            validate_item=self._validate_item,
            upload_item=partial(self._upload_item, is_sidecar=True),
            finalize=lambda entries: self.configure_timeline_album(
                entries, album_metadata, caption=caption, extra=extra
            ),
            min_items=ALBUM_MIN_ITEMS,
            max_items=ALBUM_MAX_ITEMS,
            max_retries=self.max_configure_retries,
            retry_delay=self.configure_retry_delay,
            name="album",
        )
        return workflow.run()

    def _run_single(
        self,
        item: Mapping[str, Any],
        finalize: Callable[[List[AlbumEntry]], ConfigureResponse],
        *,
        name: str,
    ) -> ConfigureResponse:
        workflow: RetryableWorkflow[AlbumEntry, ConfigureResponse] = RetryableWorkflow(
            [item],
            validate_item=self._validate_item,
            upload_item=partial(self._upload_item, is_sidecar=False),
            finalize=finalize,
            min_items=1,
            max_items=1,
            max_retries=self.max_configure_retries,
            retry_delay=self.configure_retry_delay,
            name=name,
        )
        return workflow.run()

    def _validate_item(self, item: Union[UploadItem, Mapping[str, Any]]) -> AlbumEntry:
        upload_item = (
            item if isinstance(item, UploadItem) else UploadItem.model_validate(item)
        )

        if not upload_item.file.is_file():
            raise ValueError(f'File "{upload_item.file}" does not exist.')

        if upload_item.type is MediaType.VIDEO:
            if upload_item.usertags is not None:
                raise ValueError(
                    f'Usertags are only supported on photos, not on video "{upload_item.file}".'
                )
            if upload_item.thumbnail is None and self._thumbnail_extractor is None:
                raise ValueError(
                    f'Video "{upload_item.file}" needs a thumbnail file or a thumbnail extractor.'
                )
            if upload_item.thumbnail is not None and not upload_item.thumbnail.is_file():
                raise ValueError(f'File "{upload_item.thumbnail}" does not exist.')

        return AlbumEntry(item=upload_item)

    def _thumbnail_for(self, item: UploadItem) -> Union[Path, bytes]:
        if item.thumbnail is not None:
            return item.thumbnail
        if self._thumbnail_extractor is None:
            raise ValueError(
                f'Video "{item.file}" needs a thumbnail file or a thumbnail extractor.'
            )
        return self._thumbnail_extractor(item.file)

    def _upload_item(self, entry: AlbumEntry, *, is_sidecar: bool) -> None:
        item, metadata = entry.item, entry.metadata
        if item.type is MediaType.PHOTO:
            metadata.photo_upload_response = self.upload_photo_data(
                metadata, item.file, is_sidecar=is_sidecar
            )
            return

        metadata.video_upload_response = self.upload_video_data(
            metadata, item.file, is_sidecar=is_sidecar
        )
        # the thumbnail is attached to the session id assigned to the video
        metadata.photo_upload_response = self.upload_photo_data(
            metadata,
            self._thumbnail_for(item),
            is_sidecar=is_sidecar,
            is_video_thumbnail=True,
        )

    def upload_photo_data(
        self,
        metadata: InternalMetadata,
        photo: Union[Path, bytes],
        *,
        is_sidecar: bool = False,
        is_video_thumbnail: bool = False,
    ) -> UploadPhotoResponse:
        request = (
            self.request("upload/photo/")
            .set_signed_post(False)
            .add_post("upload_id", metadata.upload_id)
            .add_post("_uuid", self.device_uuid)
            .add_post("_csrftoken", self.csrf_token)
            .add_post("image_compression", IMAGE_COMPRESSION)
        )
        if is_sidecar:
            request.add_post("is_sidecar", "1")
        if is_video_thumbnail:
            request.add_post("media_type", "2")

        filename = f"pending_media_{metadata.upload_id}.jpg"
        if isinstance(photo, bytes):
            request.add_file_data("photo", photo, filename)
        else:
            request.add_file("photo", photo, filename)

        return request.get_response(UploadPhotoResponse)

    def upload_video_data(
        self,
        metadata: InternalMetadata,
        video: Path,
        *,
        is_sidecar: bool = False,
    ) -> UploadVideoResponse:
        request = (
            self.request("upload/video/")
            .set_signed_post(False)
            .add_post("upload_id", metadata.upload_id)
            .add_post("_uuid", self.device_uuid)
            .add_post("_csrftoken", self.csrf_token)
            .add_post("media_type", "2")
            .add_file("video", video, f"pending_media_{metadata.upload_id}.mp4")
        )
        if is_sidecar:
            request.add_post("is_sidecar", "1")

        response = request.get_response(UploadVideoResponse)
        if response.upload_id:
            metadata.upload_id = response.upload_id
        return response

    def _children_metadata(self, entries: List[AlbumEntry]) -> List[Dict[str, Any]]:
        date_time = time.strftime("%Y:%m:%d %H:%M:%S")
        children = []
        for entry in entries:
            item, metadata = entry.item, entry.metadata
            child: Dict[str, Any] = {
                "upload_id": metadata.upload_id,
                "date_time_original": date_time,
                "scene_type": 1,
                "disable_comments": False,
                "geotag_enabled": False,
            }
            if item.type is MediaType.PHOTO:
                child.update(
                    source_type=0,
                    scene_capture_type="standard",
                    camera_position="back",
                    edits=PHOTO_EDITS,
                )
                if item.usertags is not None:
                    child["usertags"] = item.usertags.to_payload()
            else:
                child.update(
                    source_type="library",
                    poster_frame_index=0,
                    trim_type=0,
                )
                if item.duration is not None:
                    child["length"] = round(item.duration, 1)
            children.append(child)
        return children

    def _configure(
        self, request: Request, extra: Optional[Mapping[str, Any]]
    ) -> ConfigureResponse:
        for key, value in (extra or {}).items():
            if value is not None:
                request.add_post(key, value)

        response = request.get_response(ConfigureResponse)
        # reported with status "ok", so the mapper lets it through
        if isinstance(response.message, str) and response.message.lower() == "media_needs_reupload":
            raise MediaNeedsReuploadError(
                f"You need to reupload the media ({response.error_title or 'unknown error'}).",
                error_type=response.error_type,
                status_code=response.http_response.status_code
                if response.http_response
                else None,
                response=response.http_response,
            )
        return response

    def configure_single_photo(
        self,
        entry: AlbumEntry,
        *,
        caption: Optional[str] = None,
        extra: Optional[Mapping[str, Any]] = None,
    ) -> ConfigureResponse:
        """Publish a previously uploaded photo.

        Raises:
            MediaNeedsReuploadError: If the server lost the uploaded photo.
        """
        request = (
            self.request("media/configure/")
            .add_post("_csrftoken", self.csrf_token)
            .add_post("_uuid", self.device_uuid)
            .add_post("upload_id", entry.metadata.upload_id)
            .add_post("caption", caption or "")
            .add_post("source_type", "4")
            .add_post("camera_position", "back")
            .add_post("edits", PHOTO_EDITS)
        )
        if entry.item.usertags is not None:
            request.add_post("usertags", entry.item.usertags.to_payload())
        return self._configure(request, extra)

    def configure_single_video(
        self,
        entry: AlbumEntry,
        *,
        caption: Optional[str] = None,
        extra: Optional[Mapping[str, Any]] = None,
    ) -> ConfigureResponse:
        """Publish a previously uploaded video.

        Raises:
            TranscodeNotReadyError: While the server is still processing the
                video; the upload workflow retries it.
            MediaNeedsReuploadError: If the server lost the uploaded video.
        """
        request = (
            self.request("media/configure/")
            .add_param("video", "1")
            .add_post("_csrftoken", self.csrf_token)
            .add_post("_uuid", self.device_uuid)
            .add_post("upload_id", entry.metadata.upload_id)
            .add_post("caption", caption or "")
            .add_post("source_type", "4")
            .add_post("poster_frame_index", 0)
            .add_post("audio_muted", False)
            .add_post("filter_type", "0")
            .add_post("video_result", "deprecated")
        )
        if entry.item.duration is not None:
            length = round(entry.item.duration, 1)
            request.add_post("length", length)
            request.add_post("clips", [{"length": length, "source_type": "4"}])
        return self._configure(request, extra)

    def configure_timeline_album(
        self,
        entries: List[AlbumEntry],
        album_metadata: InternalMetadata,
        *,
        caption: Optional[str] = None,
        extra: Optional[Mapping[str, Any]] = None,
    ) -> ConfigureResponse:
        """Attach previously uploaded items to a new album post.

        Raises:
            MediaNeedsReuploadError: If the server lost the uploaded media.
        """
        request = (
            self.request("media/configure_sidecar/")
            .add_post("_csrftoken", self.csrf_token)
            .add_post("_uuid", self.device_uuid)
            .add_post("client_sidecar_id", album_metadata.upload_id)
            .add_post("caption", caption or "")
            .add_post("children_metadata", self._children_metadata(entries))
        )
        return self._configure(request, extra)
