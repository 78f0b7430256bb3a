from ._transport import HttpxTransport, RawResponse, Transport, WireRequest

__all__ = [
    "HttpxTransport",
    "RawResponse",
    "Transport",
    "WireRequest",
]
