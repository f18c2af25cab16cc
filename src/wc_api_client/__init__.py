"""
WooCommerce API Python client
One-legged OAuth 1.0a request signing and stacked-header response parsing
"""

from .version import __version__
from .exceptions import (
    WCClientError,
    PreconditionError,
    ValidationError,
    TransportError,
    DecodeError,
)
from .config import (
    ClientConfig,
    create_client_config,
    load_config_from_env,
    load_config_from_file,
)
from .http_client import (
    WCApiClient,
    ApiResponse,
    create_client,
    synthesize_error_body,
)
from .transport import (
    PreparedCall,
    RawResponse,
    RequestsTransport,
)
from .response import (
    SplitResult,
    PaginationTotals,
    split_response,
    parse_headers,
    parse_status_code,
    extract_pagination,
)
from .signing import (
    # Core signing functionality
    OAuth1Signer,
    create_signer,
    sign_request,
    # Types
    HttpMethod,
    HashAlgorithm,
    Scalar,
    Nested,
    OAuthSignatureResult,
    SigningError,
    # Configuration
    SigningConfig,
    DEFAULT_API_ENDPOINT,
    create_signing_config,
    # Normalization
    urlencode_rfc3986,
    normalize_parameters,
    flatten_value,
    to_param_value,
)

# Public API exports
__all__ = [
    '__version__',
    # Exceptions
    'WCClientError',
    'PreconditionError',
    'ValidationError',
    'TransportError',
    'DecodeError',
    # Configuration
    'ClientConfig',
    'create_client_config',
    'load_config_from_env',
    'load_config_from_file',
    # HTTP Client
    'WCApiClient',
    'ApiResponse',
    'create_client',
    'synthesize_error_body',
    'PreparedCall',
    'RawResponse',
    'RequestsTransport',
    # Response parsing
    'SplitResult',
    'PaginationTotals',
    'split_response',
    'parse_headers',
    'parse_status_code',
    'extract_pagination',
    # Request Signing
    'OAuth1Signer',
    'create_signer',
    'sign_request',
    'HttpMethod',
    'HashAlgorithm',
    'Scalar',
    'Nested',
    'OAuthSignatureResult',
    'SigningError',
    'SigningConfig',
    'DEFAULT_API_ENDPOINT',
    'create_signing_config',
    'urlencode_rfc3986',
    'normalize_parameters',
    'flatten_value',
    'to_param_value',
]
