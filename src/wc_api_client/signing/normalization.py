"""
Parameter normalization and flattening for OAuth signatures

Every key and value that ends up in the signature base string is first
percent-decoded (it may already be encoded), then re-encoded per RFC 3986,
and finally has each ``%`` doubled to ``%25``. Nested values are flattened
into bracket notation whose brackets are themselves double-encoded.

Note both the key and value are normalized, so a filter param like::

    'filter[period]' => 'week'

is encoded to::

    'filter%255Bperiod%255D' => 'week'
"""

from typing import Any, Iterator, List, Mapping, Sequence, Tuple

from .types import Scalar, Nested, ParamValue, SigningError, SigningErrorCodes
from .utils import raw_url_encode, raw_url_decode

# Bracket characters as they must appear in the base string
ENCODED_OPEN_BRACKET = '%255B'
ENCODED_CLOSE_BRACKET = '%255D'


def coerce_scalar(value: Any) -> str:
    """
    Convert a scalar parameter into the string the server will receive.

    Booleans follow PHP's http_build_query (``1``/``0``), integral floats
    drop their fractional part.
    """
    if value is None:
        return ''
    if isinstance(value, bool):
        return '1' if value else '0'
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, bytes):
        try:
            return value.decode('utf-8')
        except UnicodeDecodeError as e:
            raise SigningError(
                f"Parameter bytes are not valid UTF-8: {e}",
                SigningErrorCodes.INVALID_PARAMETERS,
                {"value": repr(value)}
            )
    return str(value)


def to_param_value(raw: Any) -> ParamValue:
    """
    Convert a Python value into the Scalar | Nested variant.

    Mappings keep their iteration (insertion) order, sequences are keyed by
    position. ``None`` members are dropped, as http_build_query drops them.

    Args:
        raw: str, number, bool, None, mapping or sequence (arbitrarily nested)

    Returns:
        ParamValue: The tagged value
    """
    if isinstance(raw, (Scalar, Nested)):
        return raw
    if isinstance(raw, Mapping):
        return Nested(tuple(
            (coerce_scalar(key), to_param_value(value))
            for key, value in raw.items()
            if value is not None
        ))
    if isinstance(raw, Sequence) and not isinstance(raw, (str, bytes, bytearray)):
        return Nested(tuple(
            (str(index), to_param_value(value))
            for index, value in enumerate(raw)
            if value is not None
        ))
    return Scalar(coerce_scalar(raw))


def to_param_items(params: Mapping[str, Any]) -> List[Tuple[str, ParamValue]]:
    """
    Convert a raw parameter mapping into (key, ParamValue) pairs.

    Top-level ``None`` values are skipped so the signed set always matches
    the query string actually sent.
    """
    if params is None:
        return []
    if not isinstance(params, Mapping):
        raise SigningError(
            f"Parameters must be a mapping, got {type(params).__name__}",
            SigningErrorCodes.INVALID_PARAMETERS,
            {"params_type": type(params).__name__}
        )
    return [
        (coerce_scalar(key), to_param_value(value))
        for key, value in params.items()
        if value is not None
    ]


def urlencode_rfc3986(value: str) -> str:
    """
    Decode then re-encode a scalar per RFC 3986, doubling every ``%``.

    Decoding first makes the result the same whether or not the caller had
    already encoded the value.
    """
    return raw_url_encode(raw_url_decode(value)).replace('%', '%25')


def normalize_value(value: ParamValue) -> ParamValue:
    """Normalize every key and leaf of a value, keeping sibling order"""
    if isinstance(value, Scalar):
        return Scalar(urlencode_rfc3986(value.value))
    return Nested(tuple(
        (urlencode_rfc3986(key), normalize_value(member))
        for key, member in value.members
    ))


def normalize_parameters(params: Sequence[Tuple[str, ParamValue]]) -> List[Tuple[str, ParamValue]]:
    """
    Normalize each parameter key and value.

    The order of ``params`` is kept exactly; this function never sorts.

    Args:
        params: (key, value) pairs, already in signing order

    Returns:
        list: Normalized (key, value) pairs in the same order
    """
    return [(urlencode_rfc3986(key), normalize_value(value)) for key, value in params]


def flatten_value(value: ParamValue) -> Iterator[Tuple[str, str]]:
    """
    Flatten a value into (bracket suffix, leaf) pairs.

    A scalar yields a single pair with an empty suffix. Nested members are
    visited in their stored order at every depth.
    """
    if isinstance(value, Scalar):
        yield '', value.value
        return

    for key, member in value.members:
        segment = f"{ENCODED_OPEN_BRACKET}{key}{ENCODED_CLOSE_BRACKET}"
        for suffix, leaf in flatten_value(member):
            yield segment + suffix, leaf
