"""
Test suite for one-legged OAuth 1.0a request signing

This module tests the signer configuration, base string construction and
the resulting signatures, comparing against an HMAC computed independently
with the standard library.
"""

import base64
import hashlib
import hmac

import pytest

from wc_api_client.signing import (
    OAuth1Signer,
    create_signer,
    sign_request,
    SigningConfig,
    SigningError,
    SigningErrorCodes,
    HashAlgorithm,
    HttpMethod,
    Scalar,
    api_version,
    build_base_string,
    build_query_terms,
    create_signing_config,
    normalize_parameters,
    pagination_prefix,
    secret_requires_separator,
    sort_parameters_bytewise,
    to_param_items,
)

STORE_API_URL = "https://store.test/wp-json/wc/v1/"
ENCODED_ORDERS_URL = "https%3A%2F%2Fstore.test%2Fwp-json%2Fwc%2Fv1%2Forders"


def reference_signature(base_string: str, secret: str, digest=hashlib.sha256) -> str:
    """Independent HMAC computation used to check the signer"""
    raw = hmac.new(secret.encode('utf-8'), base_string.encode('utf-8'), digest).digest()
    return base64.b64encode(raw).decode('ascii')


@pytest.fixture
def config():
    return SigningConfig(
        consumer_key="ck_123",
        consumer_secret="cs_abc",
        api_url=STORE_API_URL,
    )


@pytest.fixture
def signer(config):
    return OAuth1Signer(config)


class TestSigningConfig:
    """Test signer configuration"""

    def test_derives_endpoint_from_url(self, config):
        assert config.api_endpoint == "wp-json/wc/v1/"
        assert config.hash_algorithm == HashAlgorithm.SHA256

    def test_trailing_slash_added(self):
        config = SigningConfig("ck", "cs", "http://shop.test/wc-api/v3")
        assert config.api_url == "http://shop.test/wc-api/v3/"
        assert config.api_endpoint == "wc-api/v3/"

    def test_missing_credentials(self):
        with pytest.raises(SigningError) as exc_info:
            SigningConfig("", "cs", STORE_API_URL)
        assert exc_info.value.code == SigningErrorCodes.MISSING_CREDENTIALS

        with pytest.raises(SigningError):
            SigningConfig("ck", "", STORE_API_URL)

    def test_invalid_url(self):
        with pytest.raises(SigningError) as exc_info:
            SigningConfig("ck", "cs", "not-a-url")
        assert exc_info.value.code == SigningErrorCodes.INVALID_URL

    def test_secret_not_in_repr(self, config):
        assert "cs_abc" not in repr(config)

    def test_immutable(self, config):
        with pytest.raises(Exception):
            config.consumer_secret = "changed"

    def test_create_signing_config(self):
        config = create_signing_config("ck", "cs", "http://shop.test/", "wc-api/v2/", "sha1")
        assert config.api_url == "http://shop.test/wc-api/v2/"
        assert config.hash_algorithm == HashAlgorithm.SHA1

    def test_create_signing_config_requires_store_url(self):
        with pytest.raises(SigningError):
            create_signing_config("ck", "cs", "")

    def test_hash_algorithm_parsing(self):
        assert HashAlgorithm.parse("HMAC-SHA256") == HashAlgorithm.SHA256
        assert HashAlgorithm.parse("sha-1") == HashAlgorithm.SHA1
        assert HashAlgorithm.SHA1.signature_method == "HMAC-SHA1"
        with pytest.raises(SigningError):
            HashAlgorithm.parse("md5")


class TestEndpointRules:
    """Test endpoint family rules"""

    def test_api_version(self):
        assert api_version("wc-api/v3/") == 3
        assert api_version("wp-json/wc/v1") == 1
        assert api_version("custom/") is None

    def test_secret_separator(self):
        assert secret_requires_separator("wc-api/v3/")
        assert not secret_requires_separator("wc-api/v2/")
        assert not secret_requires_separator("wc-api/v1/")
        assert secret_requires_separator("wp-json/wc/v1/")
        assert secret_requires_separator("wp-json/wc/v1")
        assert not secret_requires_separator("wp-json/wc/v2/")

    def test_later_wp_json_release_signs_with_bare_secret(self):
        config = SigningConfig("ck", "cs_abc", "https://store.test/wp-json/wc/v2/")
        assert config.signing_secret == "cs_abc"

        result = OAuth1Signer(config).sign_with_details({"oauth_consumer_key": "ck"}, "GET", "orders")
        assert result.signature == reference_signature(result.base_string, "cs_abc")

    def test_signing_secret(self, config):
        assert config.signing_secret == "cs_abc&"
        legacy = SigningConfig("ck", "cs_abc", "http://shop.test/wc-api/v2/")
        assert legacy.signing_secret == "cs_abc"

    def test_pagination_prefix(self):
        assert pagination_prefix("wp-json/wc/v1/") == "X-WP"
        assert pagination_prefix("wc-api/v3/") == "X-WC"


class TestParameterOrdering:
    """Test the raw-key sort that precedes normalization"""

    def test_bytewise_not_case_insensitive(self):
        ordered = sort_parameters_bytewise(to_param_items({"b": 1, "B": 1, "a": 2}))
        assert [key for key, _ in ordered] == ["B", "a", "b"]

    def test_sort_happens_before_normalization(self):
        """Encoded terms are left in raw-key order, not re-sorted"""
        ordered = sort_parameters_bytewise(to_param_items({"a[": "1", "a-": "2"}))
        terms = build_query_terms(normalize_parameters(ordered))
        assert terms == ["a-%3D2", "a%255B%3D1"]
        assert terms != sorted(terms)

    def test_unsortable_keys(self):
        with pytest.raises(SigningError) as exc_info:
            sort_parameters_bytewise([(1, Scalar("x")), ("a", Scalar("y"))])
        assert exc_info.value.code == SigningErrorCodes.PARAMETER_SORT_FAILED


class TestBaseString:
    """Test base string construction"""

    def test_nested_parameter_terms(self):
        params = {"filter": {"period": "week", "date": "2024"}, "page": 2}
        terms = build_query_terms(normalize_parameters(sort_parameters_bytewise(to_param_items(params))))
        assert terms == [
            "filter%255Bperiod%255D%3Dweek",
            "filter%255Bdate%255D%3D2024",
            "page%3D2",
        ]

    def test_method_upper_cased(self):
        base = build_base_string("get", "http://shop.test/orders", ["a%3D1", "b%3D2"])
        assert base == "GET&http%3A%2F%2Fshop.test%2Forders&a%3D1%26b%3D2"

    def test_invalid_method(self):
        with pytest.raises(SigningError) as exc_info:
            build_base_string("TRACE", "http://shop.test/", [])
        assert exc_info.value.code == SigningErrorCodes.INVALID_METHOD


class TestOAuth1Signer:
    """Test signatures"""

    def test_end_to_end_example(self, signer):
        result = signer.sign_with_details({"oauth_consumer_key": "ck_123"}, "GET", "orders")

        expected_base = f"GET&{ENCODED_ORDERS_URL}&oauth_consumer_key%3Dck_123"
        assert result.base_string == expected_base
        assert result.signature == reference_signature(expected_base, "cs_abc&")

    def test_deterministic(self, signer):
        params = {
            "oauth_consumer_key": "ck_123",
            "oauth_timestamp": 1700000000,
            "oauth_nonce": "abc",
            "filter": {"period": "week"},
        }
        assert signer.sign(params, "GET", "orders") == signer.sign(dict(params), HttpMethod.GET, "orders")

    def test_empty_parameters(self, signer):
        result = signer.sign_with_details({}, "DELETE", "orders/5")
        assert result.base_string.endswith("%2Forders%2F5&")
        assert result.query_terms == []
        assert result.signature == reference_signature(result.base_string, "cs_abc&")

    def test_empty_value_kept(self, signer):
        result = signer.sign_with_details({"search": ""}, "GET", "products")
        assert result.query_terms == ["search%3D"]

    def test_sha1_legacy_endpoint(self):
        config = SigningConfig("ck", "secret", "http://shop.test/wc-api/v2/", hash_algorithm=HashAlgorithm.SHA1)
        result = OAuth1Signer(config).sign_with_details({"a": "b c"}, "POST", "orders")

        expected_base = "POST&http%3A%2F%2Fshop.test%2Fwc-api%2Fv2%2Forders&a%3Db%2520c"
        assert result.base_string == expected_base
        assert result.signature == reference_signature(expected_base, "secret", hashlib.sha1)

    def test_params_not_mutated(self, signer):
        params = {"b": "2", "a": "1"}
        signer.sign(params, "GET", "orders")
        assert list(params) == ["b", "a"]

    def test_build_oauth_parameters(self, config):
        signer = OAuth1Signer(config)
        signed = signer.build_oauth_parameters({"status": "processing"}, "GET", "orders",
                                               nonce="n0nce", timestamp=1700000000)

        assert signed["oauth_consumer_key"] == "ck_123"
        assert signed["oauth_timestamp"] == 1700000000
        assert signed["oauth_nonce"] == "n0nce"
        assert signed["oauth_signature_method"] == "HMAC-SHA256"

        unsigned = {k: v for k, v in signed.items() if k != "oauth_signature"}
        assert signed["oauth_signature"] == signer.sign(unsigned, "GET", "orders")

    def test_injected_generators(self):
        config = SigningConfig(
            "ck", "cs", STORE_API_URL,
            nonce_generator=lambda: "fixed",
            timestamp_generator=lambda: 1234567890,
        )
        first = OAuth1Signer(config).build_oauth_parameters({}, "GET", "orders")
        second = OAuth1Signer(config).build_oauth_parameters({}, "GET", "orders")
        assert first == second
        assert first["oauth_nonce"] == "fixed"

    def test_generated_nonces_differ(self, signer):
        first = signer.build_oauth_parameters({}, "GET", "orders")
        second = signer.build_oauth_parameters({}, "GET", "orders")
        assert first["oauth_nonce"] != second["oauth_nonce"]
        assert len(first["oauth_nonce"]) == 40

    def test_rejects_non_config(self):
        with pytest.raises(SigningError):
            OAuth1Signer({"consumer_key": "ck"})

    def test_helpers(self, config):
        params = {"oauth_consumer_key": "ck_123"}
        assert isinstance(create_signer(config), OAuth1Signer)
        assert sign_request(params, "GET", "orders", config) == OAuth1Signer(config).sign(params, "GET", "orders")
