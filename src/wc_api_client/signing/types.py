"""
Type definitions for OAuth 1.0a request signing

This module provides the data classes used by the one-legged OAuth signer:
HTTP methods, digest selection, the tagged parameter value variant and the
signing result.
"""

from typing import Dict, List, Optional, Tuple, Union, Callable, Any
from dataclasses import dataclass
from enum import Enum

from ..exceptions import PreconditionError


class HttpMethod(str, Enum):
    """HTTP methods supported by the API"""
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    OPTIONS = "OPTIONS"
    PATCH = "PATCH"

    @classmethod
    def parse(cls, method: Union[str, 'HttpMethod']) -> 'HttpMethod':
        """Coerce a method name (any case) into an HttpMethod"""
        if isinstance(method, cls):
            return method
        try:
            return cls(str(method).upper())
        except ValueError:
            raise SigningError(
                f"Unsupported HTTP method: {method}",
                SigningErrorCodes.INVALID_METHOD,
                {"method": method}
            )


class HashAlgorithm(str, Enum):
    """Keyed hash used for the oauth_signature"""
    SHA1 = "SHA1"
    SHA256 = "SHA256"

    @property
    def signature_method(self) -> str:
        """Value sent as oauth_signature_method"""
        return f"HMAC-{self.value}"

    @classmethod
    def parse(cls, value: Union[str, 'HashAlgorithm']) -> 'HashAlgorithm':
        if isinstance(value, cls):
            return value
        normalized = str(value).upper().replace("HMAC-", "").replace("-", "")
        try:
            return cls(normalized)
        except ValueError:
            raise SigningError(
                f"Unsupported hash algorithm: {value}",
                SigningErrorCodes.INVALID_HASH_ALGORITHM,
                {"hash_algorithm": value}
            )


@dataclass(frozen=True)
class Scalar:
    """A single parameter leaf, already coerced to its string form"""
    value: str


@dataclass(frozen=True)
class Nested:
    """
    A nested parameter container.

    Attributes:
        members: (key, value) pairs in insertion order. The order is part of
            the signature and is never sorted.
    """
    members: Tuple[Tuple[str, 'ParamValue'], ...]

    def keys(self) -> List[str]:
        return [key for key, _ in self.members]


ParamValue = Union[Scalar, Nested]


@dataclass
class OAuthSignatureResult:
    """
    Generated signature together with the material it was computed from

    Attributes:
        signature: Base64-encoded HMAC digest
        base_string: The string that was signed
        query_terms: Encoded query terms, in signing order
        hash_algorithm: Digest used for the HMAC
    """
    signature: str
    base_string: str
    query_terms: List[str]
    hash_algorithm: HashAlgorithm

    def __post_init__(self):
        if not self.signature:
            raise ValueError("Signature cannot be empty")


class SigningError(PreconditionError):
    """
    Error class for signing operations

    Attributes:
        message: Error message
        code: Error code for programmatic handling
        details: Optional additional error details
    """

    def __init__(
        self,
        message: str,
        code: str,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, code, details)
        self.code = code

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} (code: {self.code}, details: {self.details})"
        return f"{self.message} (code: {self.code})"

    def __repr__(self) -> str:
        return f"SigningError(message='{self.message}', code='{self.code}', details={self.details})"


class SigningErrorCodes:
    """Standard error codes for signing operations"""

    # Configuration errors
    INVALID_CONFIG = "INVALID_CONFIG"
    MISSING_CREDENTIALS = "MISSING_CREDENTIALS"
    INVALID_URL = "INVALID_URL"
    INVALID_HASH_ALGORITHM = "INVALID_HASH_ALGORITHM"

    # Request errors
    INVALID_METHOD = "INVALID_METHOD"
    INVALID_PARAMETERS = "INVALID_PARAMETERS"
    PARAMETER_SORT_FAILED = "PARAMETER_SORT_FAILED"

    # Signing errors
    SIGNING_FAILED = "SIGNING_FAILED"


# Type aliases for convenience
NonceGenerator = Callable[[], str]
TimestampGenerator = Callable[[], int]
RawParams = Dict[str, Any]
