"""
Configuration management for request signing

This module holds the signer configuration, the known API endpoint families
and the rules that depend on which family is in use (secret separator,
pagination header prefix).
"""

import re
from typing import Optional, Union
from dataclasses import dataclass, field
from urllib.parse import urlparse

from .types import (
    HashAlgorithm,
    SigningError,
    SigningErrorCodes,
    NonceGenerator,
    TimestampGenerator,
)

# Current REST API, served through the WordPress JSON API
DEFAULT_API_ENDPOINT = 'wp-json/wc/v1/'
WP_JSON_V1_ENDPOINT = 'wp-json/wc/v1'

# Legacy API endpoints
LEGACY_API_ENDPOINTS = ('wc-api/v1/', 'wc-api/v2/', 'wc-api/v3/')

DEFAULT_HASH_ALGORITHM = HashAlgorithm.SHA256

_VERSION_PATTERN = re.compile(r'/v(\d+)/?$')
_FAMILY_MARKERS = ('wp-json/', 'wc-api/')


def api_version(api_endpoint: str) -> Optional[int]:
    """Return the trailing ``/vN/`` version number of an endpoint, if any"""
    match = _VERSION_PATTERN.search('/' + api_endpoint.lstrip('/'))
    return int(match.group(1)) if match else None


def is_wp_json_endpoint(api_endpoint: str) -> bool:
    return 'wp-json' in api_endpoint


def secret_requires_separator(api_endpoint: str) -> bool:
    """
    Whether the consumer secret must be suffixed with ``&`` before hashing.

    The server appends the (empty) token secret separator for API version 3
    and above, and for the first wp-json release (``wp-json/wc/v1/``) only.
    """
    version = api_version(api_endpoint)
    if version is not None and version >= 3:
        return True
    return api_endpoint.strip('/') == WP_JSON_V1_ENDPOINT


def pagination_prefix(api_endpoint: str) -> str:
    """Header name prefix carrying X-...-Total / X-...-TotalPages"""
    return 'X-WP' if is_wp_json_endpoint(api_endpoint) else 'X-WC'


def build_api_url(store_url: str, api_endpoint: str = DEFAULT_API_ENDPOINT) -> str:
    """Join the store URL and endpoint prefix with exactly one slash"""
    return store_url.rstrip('/') + '/' + api_endpoint.lstrip('/')


def derive_api_endpoint(api_url: str) -> str:
    """
    Recover the endpoint family prefix from a full API URL.

    ``https://shop.test/wp-json/wc/v1/`` gives ``wp-json/wc/v1/``. URLs
    without a recognisable family fall back to the default endpoint.
    """
    path = urlparse(api_url).path
    for marker in _FAMILY_MARKERS:
        index = path.find(marker)
        if index >= 0:
            endpoint = path[index:]
            return endpoint if endpoint.endswith('/') else endpoint + '/'
    return DEFAULT_API_ENDPOINT


@dataclass(frozen=True)
class SigningConfig:
    """
    Configuration for the one-legged OAuth signer

    Attributes:
        consumer_key: WooCommerce consumer key
        consumer_secret: WooCommerce consumer secret
        api_url: Absolute API base URL, ending with ``/``
        api_endpoint: Endpoint family prefix; derived from api_url when omitted
        hash_algorithm: HMAC digest (SHA1 or SHA256)
        nonce_generator: Optional custom nonce generator function
        timestamp_generator: Optional custom timestamp generator function
    """
    consumer_key: str
    consumer_secret: str = field(repr=False)
    api_url: str
    api_endpoint: Optional[str] = None
    hash_algorithm: HashAlgorithm = DEFAULT_HASH_ALGORITHM
    nonce_generator: Optional[NonceGenerator] = None
    timestamp_generator: Optional[TimestampGenerator] = None

    def __post_init__(self):
        """Validate and normalize signing configuration"""
        validate_signing_config(self)

        api_url = self.api_url if self.api_url.endswith('/') else self.api_url + '/'
        object.__setattr__(self, 'api_url', api_url)
        object.__setattr__(self, 'hash_algorithm', HashAlgorithm.parse(self.hash_algorithm))
        if self.api_endpoint is None:
            object.__setattr__(self, 'api_endpoint', derive_api_endpoint(api_url))

    @property
    def signing_secret(self) -> str:
        """Consumer secret as used for the HMAC key"""
        if secret_requires_separator(self.api_endpoint):
            return self.consumer_secret + '&'
        return self.consumer_secret

    @property
    def pagination_prefix(self) -> str:
        return pagination_prefix(self.api_endpoint)


def validate_signing_config(config: SigningConfig) -> None:
    """
    Validate signing configuration.

    Raises:
        SigningError: If credentials are missing or the URL is not absolute
    """
    if not config.consumer_key or not config.consumer_secret:
        raise SigningError(
            "Consumer Key / Consumer Secret missing",
            SigningErrorCodes.MISSING_CREDENTIALS
        )

    if not config.api_url:
        raise SigningError("API URL missing", SigningErrorCodes.INVALID_URL)

    parsed = urlparse(config.api_url)
    if parsed.scheme not in ('http', 'https') or not parsed.netloc:
        raise SigningError(
            f"Invalid API URL format: {config.api_url}",
            SigningErrorCodes.INVALID_URL,
            {"api_url": config.api_url}
        )


def create_signing_config(
    consumer_key: str,
    consumer_secret: str,
    store_url: str,
    api_endpoint: str = DEFAULT_API_ENDPOINT,
    hash_algorithm: Union[str, HashAlgorithm] = DEFAULT_HASH_ALGORITHM,
    nonce_generator: Optional[NonceGenerator] = None,
    timestamp_generator: Optional[TimestampGenerator] = None,
) -> SigningConfig:
    """
    Create a signing configuration from a store URL.

    Args:
        consumer_key: WooCommerce consumer key
        consumer_secret: WooCommerce consumer secret
        store_url: Store root URL, e.g. ``http://shop.test``
        api_endpoint: Endpoint family prefix
        hash_algorithm: ``SHA256`` (default) or ``SHA1``

    Returns:
        SigningConfig: Validated configuration
    """
    if not store_url:
        raise SigningError("Store URL missing", SigningErrorCodes.INVALID_URL)

    return SigningConfig(
        consumer_key=consumer_key,
        consumer_secret=consumer_secret,
        api_url=build_api_url(store_url, api_endpoint),
        api_endpoint=api_endpoint,
        hash_algorithm=HashAlgorithm.parse(hash_algorithm),
        nonce_generator=nonce_generator,
        timestamp_generator=timestamp_generator,
    )
