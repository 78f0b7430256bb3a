from ._logs import setup_logging
from ._multipart import EncodedBody, HandleRegistry, encode_body
from ._ordering import hash_code, reorder_by_hash_code
from ._request_spec import FileAttachment, RequestSpec
from ._signing import HmacSigner, Signer

__all__ = [
    "setup_logging",
    "HandleRegistry",
    "EncodedBody",
    "encode_body",
    "hash_code",
    "reorder_by_hash_code",
    "FileAttachment",
    "RequestSpec",
    "HmacSigner",
    "Signer",
]
