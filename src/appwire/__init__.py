from ._appwire import AppWire
from ._config import Config
from ._request import Request, RequestState
from ._services import HttpxTransport, RawResponse, Transport, WireRequest
from ._services.timeline_service import TimelineService
from ._session import Session, StaticSession
from ._utils._signing import HmacSigner, Signer
from ._workflow import RetryableWorkflow, WorkflowState

__all__ = [
    "AppWire",
    "Config",
    "Request",
    "RequestState",
    "HttpxTransport",
    "RawResponse",
    "Transport",
    "WireRequest",
    "TimelineService",
    "Session",
    "StaticSession",
    "HmacSigner",
    "Signer",
    "RetryableWorkflow",
    "WorkflowState",
]
