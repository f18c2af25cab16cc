#!/usr/bin/env python3
"""
WooCommerce API Python client - Request Signing Example

This example shows how plain-HTTP requests are signed with one-legged
OAuth 1.0a, and how a raw response with stacked header blocks is parsed.
No network access is needed.
"""

from wc_api_client import (
    ClientConfig,
    OAuth1Signer,
    RawResponse,
    WCApiClient,
    create_signing_config,
)


def signing_example():
    """Sign an orders query and show the intermediate values"""
    print("=== Request Signing Example ===")

    config = create_signing_config(
        consumer_key="ck_example",
        consumer_secret="cs_example",
        store_url="http://shop.example",
        nonce_generator=lambda: "example-nonce",
        timestamp_generator=lambda: 1700000000,
    )
    signer = OAuth1Signer(config)

    params = signer.build_oauth_parameters({"filter": {"period": "week"}}, "GET", "orders")
    unsigned = {k: v for k, v in params.items() if k != "oauth_signature"}
    details = signer.sign_with_details(unsigned, "GET", "orders")

    print(f"   API URL: {config.api_url}")
    print(f"   Signing secret ends with '&': {config.signing_secret.endswith('&')}")
    print(f"   Base string: {details.base_string}")
    print(f"   Signature: {details.signature}")


class CannedTransport:
    """Returns a fixed raw response instead of touching the network"""

    def send(self, call):
        print(f"   Would send {call.method.value} {call.url}")
        return RawResponse(
            status_code=None,
            raw=(
                b"HTTP/1.1 100 Continue\r\n\r\n"
                b"HTTP/1.1 200 OK\r\n"
                b"Content-Type: application/json\r\n"
                b"X-WP-Total: 2\r\n"
                b"X-WP-TotalPages: 1\r\n"
                b"\r\n"
                b'[{"id": 1}, {"id": 2}]'
            ),
        )

    def close(self):
        pass


def response_parsing_example():
    """Make a call through a canned transport"""
    print("\n=== Response Parsing Example ===")

    config = ClientConfig("http://shop.example", "ck_example", "cs_example")
    with WCApiClient(config, transport=CannedTransport()) as client:
        response = client.get_orders({"status": "processing"})

    print(f"   Status: {response.status_code}")
    print(f"   Total: {response.total}, pages: {response.total_pages}")
    print(f"   Orders: {[order['id'] for order in response.data]}")


if __name__ == "__main__":
    signing_example()
    response_parsing_example()
