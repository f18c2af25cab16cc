"""
Parse raw HTTP header blocks into a header map

The blob may contain several concatenated blocks (see ``splitter``). Status
lines of every block are dropped; header names that appear more than once,
in one block or across blocks, collect every value in encounter order.
"""

import logging
import re
from typing import Dict, List, Optional, Union

logger = logging.getLogger(__name__)

HeaderValue = Union[str, List[str]]
HeaderMap = Dict[str, HeaderValue]

_FOLD_PATTERN = re.compile(r'\n[ \t]')
_STATUS_LINE_PATTERN = re.compile(r'^HTTP/\S+\s+(\d{3})')


def _to_text(raw_header: Union[str, bytes]) -> str:
    if isinstance(raw_header, bytes):
        return raw_header.decode('iso-8859-1')
    return raw_header


def _header_lines(raw_header: Union[str, bytes, None]) -> List[str]:
    if not raw_header:
        return []
    text = _FOLD_PATTERN.sub('', _to_text(raw_header).replace('\r\n', '\n'))
    return [line for line in text.split('\n') if line]


def parse_headers(raw_header: Union[str, bytes, None]) -> HeaderMap:
    """
    Parse one or more raw header blocks.

    Args:
        raw_header: Header blob from ``split_response`` (may be None)

    Returns:
        dict: Header name (case as received) to a value, or to a list of
            values when the name was seen more than once
    """
    headers: HeaderMap = {}

    for line in _header_lines(raw_header):
        # skip response codes (HTTP/1.1 200 OK, HTTP/1.1 100 Continue)
        if line.startswith('HTTP/'):
            continue

        if ':' not in line:
            logger.debug(f"Skipping malformed header line: {line!r}")
            continue

        name, value = line.split(':', 1)
        value = value.strip()

        if name not in headers:
            headers[name] = value
        elif isinstance(headers[name], list):
            headers[name].append(value)
        else:
            headers[name] = [headers[name], value]

    return headers


def parse_status_code(raw_header: Union[str, bytes, None]) -> Optional[int]:
    """
    Status code of the last status line in the blob.

    The last block carries the final response; earlier ones are provisional.
    """
    status = None
    for line in _header_lines(raw_header):
        match = _STATUS_LINE_PATTERN.match(line)
        if match:
            status = int(match.group(1))
    return status


def get_header(headers: HeaderMap, name: str) -> Optional[HeaderValue]:
    """Find a header by exact name, falling back to a case-insensitive match"""
    if name in headers:
        return headers[name]
    target = name.lower()
    for key, value in headers.items():
        if key.lower() == target:
            return value
    return None


def last_value(value: Optional[HeaderValue]) -> Optional[str]:
    """Final value of a possibly multi-valued header"""
    if isinstance(value, list):
        return value[-1] if value else None
    return value
