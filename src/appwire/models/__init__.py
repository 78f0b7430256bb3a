from .errors import (
    AppWireError,
    RequestAlreadyExecutedError,
    SignerMissingError,
    WorkflowAlreadyRunError,
)
from .exceptions import (
    ApiError,
    CheckpointRequiredError,
    ConfigureRetriesExhaustedError,
    ConsentRequiredError,
    EmptyResponseError,
    FeedbackRequiredError,
    LoginRequiredError,
    MediaNeedsReuploadError,
    NetworkError,
    NotFoundError,
    ServerError,
    ThrottledError,
    TranscodeNotReadyError,
    TransientApiError,
    UploadFailedError,
)
from .responses import (
    ApiResponse,
    ConfigureResponse,
    GenericResponse,
    UploadPhotoResponse,
    UploadVideoResponse,
)
from .upload import InternalMetadata, MediaType, Usertag, Usertags, UploadItem

__all__ = [
    "AppWireError",
    "RequestAlreadyExecutedError",
    "SignerMissingError",
    "WorkflowAlreadyRunError",
    "ApiError",
    "CheckpointRequiredError",
    "ConfigureRetriesExhaustedError",
    "ConsentRequiredError",
    "EmptyResponseError",
    "FeedbackRequiredError",
    "LoginRequiredError",
    "MediaNeedsReuploadError",
    "NetworkError",
    "NotFoundError",
    "ServerError",
    "ThrottledError",
    "TranscodeNotReadyError",
    "TransientApiError",
    "UploadFailedError",
    "ApiResponse",
    "ConfigureResponse",
    "GenericResponse",
    "UploadPhotoResponse",
    "UploadVideoResponse",
    "InternalMetadata",
    "MediaType",
    "Usertag",
    "Usertags",
    "UploadItem",
]
