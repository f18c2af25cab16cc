"""
Utility functions for request signing

This module provides the percent-encoding primitives used by the signer,
nonce and timestamp generation, and the outgoing query string builder.
"""

import time
import hashlib
from typing import Any, Iterable, List, Tuple, Union
from urllib.parse import quote, quote_plus, unquote_to_bytes

from .types import Scalar, ParamValue


def raw_url_encode(value: Union[str, bytes]) -> str:
    """
    Percent-encode everything except RFC 3986 unreserved characters.

    Equivalent to PHP's rawurlencode(): spaces become %20 and ``~`` is kept.
    """
    return quote(value, safe='')


def raw_url_decode(value: str) -> bytes:
    """
    Decode %XX sequences byte-wise; ``+`` is left alone.

    Returns bytes so that sequences which are not valid UTF-8 survive a
    decode/encode round trip unchanged.
    """
    return unquote_to_bytes(value)


def generate_nonce() -> str:
    """
    Generate a nonce for replay protection.

    Returns:
        str: SHA-1 hex digest of a high resolution clock reading
    """
    return hashlib.sha1(f"{time.time_ns()} {time.perf_counter_ns()}".encode('ascii')).hexdigest()


def generate_timestamp() -> int:
    """
    Generate current Unix timestamp.

    Returns:
        int: Current Unix timestamp (seconds since epoch)
    """
    return int(time.time())


def _query_pairs(key: str, value: ParamValue) -> List[Tuple[str, str]]:
    if isinstance(value, Scalar):
        return [(key, quote_plus(value.value, safe=''))]

    pairs = []
    for member_key, member_value in value.members:
        sub_key = f"{key}%5B{quote_plus(member_key, safe='')}%5D"
        pairs.extend(_query_pairs(sub_key, member_value))
    return pairs


def build_query(params: Iterable[Tuple[str, ParamValue]]) -> str:
    """
    Build the outgoing query string the way PHP's http_build_query() does.

    Nested members are addressed as ``key%5Bsub%5D=value`` and spaces are
    encoded as ``+``.

    Args:
        params: (key, value) pairs, typically from ``to_param_items``

    Returns:
        str: Query string without the leading ``?``
    """
    pairs: List[Tuple[str, str]] = []
    for key, value in params:
        pairs.extend(_query_pairs(quote_plus(key, safe=''), value))
    return '&'.join(f"{k}={v}" for k, v in pairs)


def redact(value: Any, keep: int = 4) -> str:
    """Mask a credential for log output, keeping a short prefix"""
    text = str(value or '')
    if len(text) <= keep:
        return '*' * len(text)
    return text[:keep] + '*' * (len(text) - keep)

