"""
HTTP transport for the WooCommerce API client

The client works on the raw response (status line, header blocks, body) so
that stacked header sections can be recovered in one place. This module
sends a prepared call with ``requests`` and rebuilds that raw buffer from the
response it gets back. Any object with a compatible ``send`` method can be
used instead, e.g. a stub in tests.
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

import requests

from .exceptions import TransportError
from .signing.types import HttpMethod

logger = logging.getLogger(__name__)

# Methods whose body object is JSON-encoded into the request
BODY_METHODS = (HttpMethod.POST, HttpMethod.PUT, HttpMethod.PATCH)

_HTTP_VERSIONS = {9: '0.9', 10: '1.0', 11: '1.1', 20: '2'}


@dataclass
class PreparedCall:
    """
    A fully built request, ready for the transport

    Attributes:
        method: HTTP method
        url: Absolute URL including the query string
        body: Object to JSON-encode as the request body
        auth: Basic auth (key, secret) pair, or None when OAuth-signed
        headers: Extra request headers
        timeout: (connect, read) timeout in seconds
        verify_ssl: Verify the server certificate
    """
    method: HttpMethod
    url: str
    body: Any = None
    auth: Optional[Tuple[str, str]] = field(default=None, repr=False)
    headers: Dict[str, str] = field(default_factory=dict)
    timeout: Tuple[float, Optional[float]] = (30.0, None)
    verify_ssl: bool = False


@dataclass
class RawResponse:
    """Transport output: status code and the raw response bytes"""
    status_code: Optional[int]
    raw: bytes


def render_raw_response(status_code: int, reason: str, headers: List[Tuple[str, str]],
                        body: bytes, http_version: str = '1.1') -> bytes:
    """
    Assemble a raw HTTP/1.x response buffer.

    Args:
        status_code: Final status code
        reason: Reason phrase
        headers: (name, value) pairs, repeated names allowed
        body: Response body
        http_version: Protocol version for the status line

    Returns:
        bytes: Status line, header lines, blank line, body
    """
    lines = [f"HTTP/{http_version} {status_code} {reason or ''}".rstrip()]
    lines.extend(f"{name}: {value}" for name, value in headers)
    head = '\r\n'.join(lines) + '\r\n\r\n'
    return head.encode('iso-8859-1', errors='replace') + (body or b'')


def _header_items(response) -> List[Tuple[str, str]]:
    """Every header line of a requests response, one per value"""
    raw_headers = getattr(response.raw, 'headers', None)
    getlist = getattr(raw_headers, 'getlist', None)
    if getlist is None:
        return list(response.headers.items())

    items = []
    for name in raw_headers.keys():
        for value in getlist(name):
            items.append((name, value))
    return items


class RequestsTransport:
    """
    Transport built on a ``requests`` session.

    One call is one network exchange; nothing is retried.
    """

    def __init__(self, session: Optional[requests.Session] = None, user_agent: Optional[str] = None):
        self.session = session or requests.Session()
        if user_agent:
            self.session.headers.update({'User-Agent': user_agent})

    def send(self, call: PreparedCall) -> RawResponse:
        """
        Send a prepared call.

        Returns:
            RawResponse: Status code and the rebuilt raw response

        Raises:
            TransportError: On timeouts, connection failures and other
                request errors
        """
        kwargs: Dict[str, Any] = {
            'headers': dict(call.headers),
            'timeout': call.timeout,
            'verify': call.verify_ssl,
            'allow_redirects': True,
        }
        if call.auth is not None:
            kwargs['auth'] = call.auth
        if call.body is not None and call.method in BODY_METHODS:
            kwargs['data'] = json.dumps(call.body)
            kwargs['headers']['Content-Type'] = 'application/json'

        try:
            logger.debug(f"Making {call.method.value} request to {call.url.split('?', 1)[0]}")
            response = self.session.request(call.method.value, call.url, **kwargs)
        except requests.exceptions.Timeout as e:
            raise TransportError(
                f"Request timeout after {call.timeout[0]} seconds",
                "TIMEOUT",
                details={'original_error': str(e)}
            )
        except requests.exceptions.ConnectionError as e:
            raise TransportError(
                f"Connection error: {e}",
                "CONNECTION_ERROR",
                details={'original_error': str(e)}
            )
        except requests.exceptions.RequestException as e:
            raise TransportError(
                f"Request failed: {e}",
                "REQUEST_FAILED",
                details={'original_error': str(e)}
            )

        http_version = _HTTP_VERSIONS.get(getattr(response.raw, 'version', 11), '1.1')
        raw = render_raw_response(
            response.status_code,
            response.reason,
            _header_items(response),
            response.content,
            http_version,
        )
        return RawResponse(status_code=response.status_code, raw=raw)

    def close(self) -> None:
        """Close the HTTP session."""
        self.session.close()
        logger.debug("HTTP session closed")
