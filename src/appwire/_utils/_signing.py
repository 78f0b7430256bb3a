import hashlib
import hmac
import json
from typing import List, Protocol, Sequence, Tuple, runtime_checkable

from ._ordering import reorder_by_hash_code

Fields = Sequence[Tuple[str, str]]


@runtime_checkable
class Signer(Protocol):
    """Strategy that turns ordered POST fields into the fields actually sent."""

    def sign(self, fields: Fields) -> Fields: ...


class HmacSigner:
    """Signs the JSON form of the fields with HMAC-SHA256.

    The output replaces the input fields with ``ig_sig_key_version`` and
    ``signed_body`` (``<hex digest>.<json>``).
    """

    def __init__(self, key: str, key_version: str) -> None:
        self._key = key.encode("utf-8")
        self.key_version = key_version

    def generate_signature(self, data: str) -> str:
        return hmac.new(self._key, data.encode("utf-8"), hashlib.sha256).hexdigest()

    def sign(self, fields: Fields) -> List[Tuple[str, str]]:
        payload = json.dumps(
            dict(reorder_by_hash_code(fields)),
            separators=(",", ":"),
            ensure_ascii=False,
        )
        signed = {
            "ig_sig_key_version": self.key_version,
            "signed_body": f"{self.generate_signature(payload)}.{payload}",
        }
        return reorder_by_hash_code(signed)
