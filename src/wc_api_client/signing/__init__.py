"""
WooCommerce API client - Request Signing Module

One-legged OAuth 1.0a signing used when the store is not reached over HTTPS.
The base string reproduces the server's own construction, including its
sort-before-normalize parameter ordering.
"""

from .types import (
    HttpMethod,
    HashAlgorithm,
    Scalar,
    Nested,
    ParamValue,
    OAuthSignatureResult,
    SigningError,
    SigningErrorCodes,
)

from .oauth1_signer import (
    OAuth1Signer,
    create_signer,
    sign_request,
    sort_parameters_bytewise,
    build_query_terms,
    build_base_string,
    compute_hmac,
)

from .signing_config import (
    SigningConfig,
    DEFAULT_API_ENDPOINT,
    LEGACY_API_ENDPOINTS,
    api_version,
    build_api_url,
    create_signing_config,
    pagination_prefix,
    secret_requires_separator,
)

from .normalization import (
    coerce_scalar,
    flatten_value,
    normalize_parameters,
    normalize_value,
    to_param_items,
    to_param_value,
    urlencode_rfc3986,
)

from .utils import (
    build_query,
    generate_nonce,
    generate_timestamp,
    raw_url_decode,
    raw_url_encode,
)

# Public API exports
__all__ = [
    # Core signing functionality
    'OAuth1Signer',
    'create_signer',
    'sign_request',
    'sort_parameters_bytewise',
    'build_query_terms',
    'build_base_string',
    'compute_hmac',
    # Types
    'HttpMethod',
    'HashAlgorithm',
    'Scalar',
    'Nested',
    'ParamValue',
    'OAuthSignatureResult',
    'SigningError',
    'SigningErrorCodes',
    # Configuration
    'SigningConfig',
    'DEFAULT_API_ENDPOINT',
    'LEGACY_API_ENDPOINTS',
    'api_version',
    'build_api_url',
    'create_signing_config',
    'pagination_prefix',
    'secret_requires_separator',
    # Normalization
    'coerce_scalar',
    'flatten_value',
    'normalize_parameters',
    'normalize_value',
    'to_param_items',
    'to_param_value',
    'urlencode_rfc3986',
    # Utilities
    'build_query',
    'generate_nonce',
    'generate_timestamp',
    'raw_url_decode',
    'raw_url_encode',
]
