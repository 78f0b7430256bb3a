import hashlib
import hmac
import json

from appwire._utils._ordering import hash_code
from appwire._utils._signing import HmacSigner, Signer


class TestHmacSigner:
    def test_is_a_signer(self, signer: HmacSigner):
        assert isinstance(signer, Signer)

    def test_sign_replaces_fields(self, signer: HmacSigner):
        signed = dict(signer.sign([("b", "2"), ("a", "1")]))

        assert set(signed) == {"ig_sig_key_version", "signed_body"}
        assert signed["ig_sig_key_version"] == "4"

    def test_signed_body_format(self, signer: HmacSigner):
        signed = dict(signer.sign([("b", "2"), ("a", "1")]))

        digest, payload = signed["signed_body"].split(".", 1)
        assert payload == '{"a":"1","b":"2"}'
        expected = hmac.new(b"secret-key", payload.encode(), hashlib.sha256).hexdigest()
        assert digest == expected

    def test_payload_follows_hash_order(self, signer: HmacSigner):
        signed = dict(signer.sign([("ab", "3"), ("b", "2"), ("a", "1")]))

        payload = signed["signed_body"].split(".", 1)[1]
        assert list(json.loads(payload)) == ["a", "b", "ab"]

    def test_output_is_hash_ordered(self, signer: HmacSigner):
        keys = [key for key, _ in signer.sign([("a", "1")])]

        assert keys == sorted(keys, key=lambda k: (hash_code(k), k))
