"""Deterministic field ordering.

The remote API validates form bodies and query strings against the order in
which the official client serializes them. That client sorts every key set by
a Java-style 32-bit string hash, so the same ordering is applied to query
params, urlencoded fields, multipart parts and signer output.
"""

from typing import Iterable, List, Mapping, Tuple, TypeVar, Union

V = TypeVar("V")

_UINT32 = 0xFFFFFFFF
_INT32_SIGN = 0x80000000


def hash_code(key: str) -> int:
    """Return the signed 32-bit hash of ``key``.

    Computed over the UTF-8 bytes as ``h = 31 * h + b`` with wrap-around.

    Examples:
        >>> hash_code("")
        0
        >>> hash_code("a")
        97
        >>> hash_code("ab")
        3105
    """
    result = 0
    for byte in key.encode("utf-8"):
        result = (31 * result + byte) & _UINT32
    if result & _INT32_SIGN:
        result -= 1 << 32
    return result


def reorder_by_hash_code(
    data: Union[Mapping[str, V], Iterable[Tuple[str, V]]],
) -> List[Tuple[str, V]]:
    """Sort ``data`` by key hash, breaking ties on the key itself.

    Args:
        data: A mapping or an iterable of ``(key, value)`` pairs.

    Returns:
        A new list of ``(key, value)`` pairs; the input is not modified.
    """
    items = list(data.items()) if isinstance(data, Mapping) else list(data)
    return sorted(items, key=lambda item: (hash_code(item[0]), item[0]))
