"""
Client configuration for the WooCommerce API Python client

Configuration is fixed at construction time. It can be built directly, from
environment variables or from a JSON file.
"""

import json
import os
import logging
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple, Union
from urllib.parse import urlparse

from ..exceptions import PreconditionError
from ..signing.types import HashAlgorithm, SigningError
from ..signing.signing_config import (
    DEFAULT_API_ENDPOINT,
    DEFAULT_HASH_ALGORITHM,
    SigningConfig,
    build_api_url,
)
from ..version import __version__

logger = logging.getLogger(__name__)

DEFAULT_CONNECT_TIMEOUT = 30.0
DEFAULT_USER_AGENT = f"WC-API-Python-Client/{__version__}"

_TRUE_VALUES = ('1', 'true', 'yes', 'y', 'on')
_FALSE_VALUES = ('0', 'false', 'no', 'n', 'off')


@dataclass(frozen=True)
class ClientConfig:
    """
    Configuration for a WooCommerce store connection.

    Attributes:
        store_url: Store root URL
        consumer_key: WooCommerce consumer key
        consumer_secret: WooCommerce consumer secret
        is_ssl: Use basic auth over TLS; None detects it from the URL scheme
        api_endpoint: API endpoint family prefix
        hash_algorithm: HMAC digest for OAuth signatures
        connect_timeout: Seconds to wait for the connection
        read_timeout: Seconds to wait for the response; None waits indefinitely
        verify_ssl: Verify the server certificate
        return_as_object: Decode JSON bodies; False returns the raw text
        user_agent: User-Agent header value
    """
    store_url: str
    consumer_key: str
    consumer_secret: str = field(repr=False)
    is_ssl: Optional[bool] = None
    api_endpoint: str = DEFAULT_API_ENDPOINT
    hash_algorithm: HashAlgorithm = DEFAULT_HASH_ALGORITHM
    connect_timeout: float = DEFAULT_CONNECT_TIMEOUT
    read_timeout: Optional[float] = None
    verify_ssl: bool = False
    return_as_object: bool = True
    user_agent: str = DEFAULT_USER_AGENT

    def __post_init__(self):
        """Validate client configuration."""
        if not self.consumer_key or not self.consumer_secret:
            raise PreconditionError("Consumer Key / Consumer Secret missing", "MISSING_CREDENTIALS")

        if not self.store_url:
            raise PreconditionError("Store URL missing", "MISSING_STORE_URL")

        parsed = urlparse(self.store_url)
        if parsed.scheme not in ('http', 'https') or not parsed.netloc:
            raise PreconditionError(f"Invalid store URL format: {self.store_url}", "INVALID_URL")

        if self.connect_timeout <= 0:
            raise PreconditionError("Connect timeout must be positive", "INVALID_CONFIG")

        if self.read_timeout is not None and self.read_timeout <= 0:
            raise PreconditionError("Read timeout must be positive", "INVALID_CONFIG")

        if self.api_endpoint and not self.api_endpoint.endswith('/'):
            object.__setattr__(self, 'api_endpoint', self.api_endpoint + '/')

        try:
            object.__setattr__(self, 'hash_algorithm', HashAlgorithm.parse(self.hash_algorithm))
        except SigningError as e:
            raise PreconditionError(e.message, "INVALID_CONFIG", e.details)

        if self.is_ssl is None:
            object.__setattr__(self, 'is_ssl', parsed.scheme.lower() == 'https')

    @property
    def api_url(self) -> str:
        return build_api_url(self.store_url, self.api_endpoint)

    @property
    def timeout(self) -> Tuple[float, Optional[float]]:
        """(connect, read) timeout pair for the transport"""
        return (self.connect_timeout, self.read_timeout)

    def signing_config(self, **overrides: Any) -> SigningConfig:
        """Signer configuration sharing this config's credentials"""
        return SigningConfig(
            consumer_key=self.consumer_key,
            consumer_secret=self.consumer_secret,
            api_url=self.api_url,
            api_endpoint=self.api_endpoint,
            hash_algorithm=self.hash_algorithm,
            **overrides
        )


def _parse_bool(name: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE_VALUES:
        return True
    if text in _FALSE_VALUES:
        return False
    raise PreconditionError(f"Invalid boolean for {name}: {value!r}", "INVALID_CONFIG")


def _parse_float(name: str, value: Any) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        raise PreconditionError(f"Invalid number for {name}: {value!r}", "INVALID_CONFIG")


_CONVERTERS = {
    'is_ssl': _parse_bool,
    'verify_ssl': _parse_bool,
    'return_as_object': _parse_bool,
    'connect_timeout': _parse_float,
    'read_timeout': _parse_float,
}


def create_client_config(values: Mapping[str, Any]) -> ClientConfig:
    """
    Build a ClientConfig from a loosely typed mapping.

    Unknown keys are ignored; empty values fall back to defaults.

    Raises:
        PreconditionError: On missing or invalid values
    """
    known = {f.name for f in fields(ClientConfig)}
    kwargs: Dict[str, Any] = {}
    for name, value in values.items():
        if name not in known or value is None or value == '':
            continue
        converter = _CONVERTERS.get(name)
        kwargs[name] = converter(name, value) if converter else value

    for required in ('store_url', 'consumer_key', 'consumer_secret'):
        kwargs.setdefault(required, '')

    return ClientConfig(**kwargs)


def load_config_from_env(prefix: str = 'WC_', environ: Optional[Mapping[str, str]] = None) -> ClientConfig:
    """
    Load configuration from environment variables.

    Reads ``<prefix>STORE_URL``, ``<prefix>CONSUMER_KEY``,
    ``<prefix>CONSUMER_SECRET`` and optionally ``<prefix>API_ENDPOINT``,
    ``<prefix>HASH_ALGORITHM``, ``<prefix>IS_SSL``, ``<prefix>CONNECT_TIMEOUT``,
    ``<prefix>READ_TIMEOUT``, ``<prefix>VERIFY_SSL``.
    """
    environ = os.environ if environ is None else environ
    values = {
        f.name: environ.get(prefix + f.name.upper())
        for f in fields(ClientConfig)
    }
    logger.debug(f"Loading client configuration from {prefix}* environment variables")
    return create_client_config(values)


def load_config_from_file(path: Union[str, Path]) -> ClientConfig:
    """
    Load configuration from a JSON file with ClientConfig field names as keys.

    Raises:
        PreconditionError: If the file cannot be read or parsed
    """
    config_path = Path(path)
    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except FileNotFoundError:
        raise PreconditionError(f"Configuration file not found: {config_path}", "CONFIG_NOT_FOUND")
    except json.JSONDecodeError as e:
        raise PreconditionError(f"Invalid JSON in configuration file: {e}", "INVALID_CONFIG")

    if not isinstance(data, dict):
        raise PreconditionError("Configuration file must contain a JSON object", "INVALID_CONFIG")

    logger.debug(f"Loaded client configuration from {config_path}")
    return create_client_config(data)
