"""
One-legged OAuth 1.0a request signer

This module computes the ``oauth_signature`` parameter the WooCommerce API
expects on plain HTTP connections. The base string must match the server's
own construction byte for byte, including its ordering quirk: parameters are
sorted by their raw keys before normalization and flattening, and the
resulting query terms are never re-sorted.
"""

import base64
import logging
from typing import Any, List, Mapping, Optional, Sequence, Tuple, Union

from cryptography.hazmat.primitives import hashes, hmac

from .types import (
    HttpMethod,
    HashAlgorithm,
    OAuthSignatureResult,
    ParamValue,
    Scalar,
    SigningError,
    SigningErrorCodes,
)
from .utils import generate_nonce, generate_timestamp, raw_url_encode
from .normalization import flatten_value, normalize_parameters, to_param_items
from .signing_config import SigningConfig

logger = logging.getLogger(__name__)

# Literal separators of the base string; the terms are already encoded
QUERY_EQUALS = '%3D'
QUERY_SEPARATOR = '%26'

_HASHES = {
    HashAlgorithm.SHA1: hashes.SHA1,
    HashAlgorithm.SHA256: hashes.SHA256,
}


def sort_parameters_bytewise(params: Sequence[Tuple[str, ParamValue]]) -> List[Tuple[str, ParamValue]]:
    """
    Sort parameters by raw key, comparing UTF-8 bytes (PHP strcmp order).

    This runs *before* normalization and flattening, and nothing sorts the
    query terms afterwards. OAuth 1.0a says the encoded terms should be
    sorted; the server sorts raw keys instead and verifies against that, so
    this order must stay as it is.

    Raises:
        SigningError: If the keys cannot be ordered
    """
    try:
        return sorted(params, key=lambda item: item[0].encode('utf-8'))
    except (AttributeError, TypeError, UnicodeEncodeError) as e:
        raise SigningError(
            f"Failed to sort params: {e}",
            SigningErrorCodes.PARAMETER_SORT_FAILED,
            {"keys": [repr(key) for key, _ in params]}
        )


def build_query_terms(normalized: Sequence[Tuple[str, ParamValue]]) -> List[str]:
    """Join each normalized key with its (flattened) value using ``%3D``"""
    terms = []
    for key, value in normalized:
        if isinstance(value, Scalar):
            terms.append(key + QUERY_EQUALS + value.value)
        else:
            for suffix, leaf in flatten_value(value):
                terms.append(key + suffix + QUERY_EQUALS + leaf)
    return terms


def build_base_string(method: Union[str, HttpMethod], request_url: str, query_terms: Sequence[str]) -> str:
    """
    Build the string to sign.

    Args:
        method: HTTP method (upper-cased here)
        request_url: API URL plus endpoint, not yet encoded
        query_terms: Output of ``build_query_terms``

    Returns:
        str: ``METHOD&encoded-url&term%26term...``
    """
    http_method = HttpMethod.parse(method).value
    query_string = QUERY_SEPARATOR.join(query_terms)
    return f"{http_method}&{raw_url_encode(request_url)}&{query_string}"


def compute_hmac(base_string: str, secret: str, hash_algorithm: HashAlgorithm) -> str:
    """Base64-encoded raw HMAC digest of ``base_string`` keyed by ``secret``"""
    try:
        mac = hmac.HMAC(secret.encode('utf-8'), _HASHES[hash_algorithm]())
        mac.update(base_string.encode('utf-8'))
        return base64.b64encode(mac.finalize()).decode('ascii')
    except Exception as e:
        raise SigningError(
            f"Message signing failed: {e}",
            SigningErrorCodes.SIGNING_FAILED,
            {"hash_algorithm": hash_algorithm.value, "original_error": str(e)}
        )


class OAuth1Signer:
    """
    One-legged OAuth 1.0a signer for the WooCommerce REST API.

    The configuration (and with it the credential pair) is immutable, so one
    signer can be shared by any number of calls.
    """

    def __init__(self, config: SigningConfig):
        """
        Initialize the signer with configuration.

        Args:
            config: Signing configuration
        """
        if not isinstance(config, SigningConfig):
            raise SigningError(
                "config must be a SigningConfig instance",
                SigningErrorCodes.INVALID_CONFIG
            )
        self.config = config

    def sign(self, params: Mapping[str, Any], method: Union[str, HttpMethod], endpoint: str) -> str:
        """
        Compute the oauth_signature for a request.

        Args:
            params: Every query parameter of the request, including the
                oauth_* ones (but not oauth_signature itself)
            method: HTTP method
            endpoint: Endpoint path relative to the API URL, e.g. ``orders``

        Returns:
            str: Base64-encoded signature
        """
        return self.sign_with_details(params, method, endpoint).signature

    def sign_with_details(
        self,
        params: Mapping[str, Any],
        method: Union[str, HttpMethod],
        endpoint: str
    ) -> OAuthSignatureResult:
        """
        Compute the signature and return it with the base string it covers.

        Raises:
            SigningError: If the parameters or method are invalid
        """
        ordered = sort_parameters_bytewise(to_param_items(params))
        normalized = normalize_parameters(ordered)
        query_terms = build_query_terms(normalized)

        base_string = build_base_string(method, self.config.api_url + endpoint, query_terms)
        signature = compute_hmac(base_string, self.config.signing_secret, self.config.hash_algorithm)

        logger.debug(f"Signed {base_string[:base_string.index('&')]} {endpoint} with {self.config.hash_algorithm.signature_method}")

        return OAuthSignatureResult(
            signature=signature,
            base_string=base_string,
            query_terms=query_terms,
            hash_algorithm=self.config.hash_algorithm,
        )

    def build_oauth_parameters(
        self,
        params: Optional[Mapping[str, Any]],
        method: Union[str, HttpMethod],
        endpoint: str,
        nonce: Optional[str] = None,
        timestamp: Optional[int] = None
    ) -> dict:
        """
        Add the oauth_* parameters to a copy of ``params`` and sign it.

        Args:
            params: Request parameters (not mutated)
            method: HTTP method
            endpoint: Endpoint path relative to the API URL
            nonce: Custom nonce for this request
            timestamp: Custom timestamp for this request

        Returns:
            dict: Parameters including oauth_signature, ready for the query string
        """
        signed = dict(params or {})

        if timestamp is None:
            timestamp_gen = self.config.timestamp_generator or generate_timestamp
            timestamp = timestamp_gen()
        if nonce is None:
            nonce_gen = self.config.nonce_generator or generate_nonce
            nonce = nonce_gen()

        signed['oauth_consumer_key'] = self.config.consumer_key
        signed['oauth_timestamp'] = timestamp
        signed['oauth_nonce'] = nonce
        signed['oauth_signature_method'] = self.config.hash_algorithm.signature_method
        signed['oauth_signature'] = self.sign(signed, method, endpoint)
        return signed


def create_signer(config: SigningConfig) -> OAuth1Signer:
    """
    Create a new OAuth signer.

    Args:
        config: Signing configuration

    Returns:
        OAuth1Signer: Configured signer instance
    """
    return OAuth1Signer(config)


def sign_request(
    params: Mapping[str, Any],
    method: Union[str, HttpMethod],
    endpoint: str,
    config: SigningConfig
) -> str:
    """
    Sign a request with the given configuration.

    Returns:
        str: Base64-encoded oauth_signature
    """
    return create_signer(config).sign(params, method, endpoint)
