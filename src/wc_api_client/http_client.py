"""
HTTP client for the WooCommerce REST API

Requests over HTTPS authenticate with basic auth; plain HTTP requests are
signed with one-legged OAuth 1.0a. Every call is a single exchange whose raw
response is split into header blocks and body, so the status, headers and
pagination totals of the final response are recovered even when a
provisional ``100 Continue`` section precedes them.
"""

import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

from .config import ClientConfig
from .exceptions import DecodeError, TransportError
from .response import (
    HeaderMap,
    PaginationTotals,
    extract_pagination,
    parse_headers,
    parse_status_code,
    split_response,
)
from .signing import OAuth1Signer, HttpMethod, build_query, raw_url_encode, raw_url_decode, to_param_items
from .signing.utils import redact
from .transport import PreparedCall, RawResponse, RequestsTransport

logger = logging.getLogger(__name__)


@dataclass
class ApiResponse:
    """
    Outcome of one API call

    Attributes:
        status_code: HTTP status of the final response (0 if none was received)
        headers: Parsed headers of every received header block
        body: Raw response body text
        data: Decoded JSON, the raw body when not decoding, or a synthesized
            error document when the exchange failed
        total: Total number of items, when reported
        total_pages: Total number of pages, when reported
        error: Transport failure, if any
        decode_error: JSON decoding failure, if any
    """
    status_code: int
    headers: HeaderMap
    body: Optional[str]
    data: Any = None
    total: Optional[int] = None
    total_pages: Optional[int] = None
    error: Optional[TransportError] = None
    decode_error: Optional[DecodeError] = None

    @property
    def ok(self) -> bool:
        return self.error is None and 200 <= self.status_code < 300


def synthesize_error_body(status_code: int, details: str) -> Dict[str, Any]:
    """Error document returned in place of a body when the exchange failed"""
    return {
        'errors': [{
            'code': str(status_code),
            'message': f"HTTP error {status_code}",
            'details': details,
        }]
    }


class WCApiClient:
    """
    Client for a WooCommerce store's REST API.

    The configuration and credentials are fixed at construction; each call
    builds its own parameters, signature and parsed response.
    """

    def __init__(self, config: ClientConfig, transport: Optional[Any] = None):
        """
        Initialize the HTTP client.

        Args:
            config: Client configuration
            transport: Object with ``send(PreparedCall) -> RawResponse``;
                defaults to a requests based transport
        """
        self.config = config
        self.transport = transport or RequestsTransport(user_agent=config.user_agent)
        self.signer = None if config.is_ssl else OAuth1Signer(config.signing_config())

        logger.info(
            f"Initialized WooCommerce API client for {config.api_url} as {redact(config.consumer_key)} "
            f"({'basic auth' if config.is_ssl else 'OAuth 1.0a ' + config.hash_algorithm.signature_method})"
        )

    def prepare_call(
        self,
        endpoint: str,
        params: Optional[Dict[str, Any]] = None,
        method: Union[str, HttpMethod] = HttpMethod.GET,
        body: Any = None
    ) -> PreparedCall:
        """
        Build the outgoing request: authentication, query string and body.

        Args:
            endpoint: Endpoint path relative to the API URL
            params: Query parameters (not mutated)
            method: HTTP method
            body: Object to send as JSON

        Returns:
            PreparedCall: Request ready for the transport
        """
        http_method = HttpMethod.parse(method)
        query_params = dict(params or {})
        auth = None

        if self.config.is_ssl:
            auth = (self.config.consumer_key, self.config.consumer_secret)
        else:
            query_params = self.signer.build_oauth_parameters(query_params, http_method, endpoint)

        query_string = build_query(to_param_items(query_params))
        url = self.config.api_url + endpoint + ('?' + query_string if query_string else '')

        return PreparedCall(
            method=http_method,
            url=url,
            body=body,
            auth=auth,
            timeout=self.config.timeout,
            verify_ssl=self.config.verify_ssl,
        )

    def make_api_call(
        self,
        endpoint: str,
        params: Optional[Dict[str, Any]] = None,
        method: Union[str, HttpMethod] = HttpMethod.GET,
        body: Any = None
    ) -> ApiResponse:
        """
        Make one call to the API.

        Transport and decoding failures do not raise; they are reported on
        the returned ApiResponse.

        Args:
            endpoint: Endpoint path relative to the API URL, e.g. ``orders``
            params: Query parameters
            method: HTTP method
            body: POST/PUT/PATCH content, JSON-encoded

        Returns:
            ApiResponse: Status, headers, totals and body

        Raises:
            PreconditionError: If the method or parameters are invalid
        """
        call = self.prepare_call(endpoint, params, method, body)

        try:
            raw_response = self.transport.send(call)
        except TransportError as e:
            logger.error(f"{call.method.value} {endpoint} failed: {e.message}")
            return ApiResponse(
                status_code=e.http_status,
                headers={},
                body=None,
                data=synthesize_error_body(e.http_status, e.message),
                error=e,
            )

        return self.process_response(raw_response)

    def process_response(self, raw_response: RawResponse) -> ApiResponse:
        """
        Split, parse and decode a raw response.

        Args:
            raw_response: Transport output

        Returns:
            ApiResponse: Parsed response
        """
        split = split_response(raw_response.raw)
        headers = parse_headers(split.header_blob)
        totals: PaginationTotals = extract_pagination(headers, self.config.api_endpoint)

        status_code = raw_response.status_code
        if status_code is None:
            status_code = parse_status_code(split.header_blob) or 0

        body = split.body.decode('utf-8', errors='replace') if isinstance(split.body, bytes) else split.body

        response = ApiResponse(
            status_code=status_code,
            headers=headers,
            body=body,
            data=body,
            total=totals.total,
            total_pages=totals.total_pages,
        )

        if self.config.return_as_object:
            self._decode_body(response)

        logger.debug(f"Response {status_code}: {len(body)} bytes, total={totals.total}, total_pages={totals.total_pages}")
        return response

    def _decode_body(self, response: ApiResponse) -> None:
        """Decode the JSON body in place; keep the raw body on failure"""
        if not response.body:
            response.data = None
            return
        try:
            response.data = json.loads(response.body)
        except json.JSONDecodeError as e:
            response.decode_error = DecodeError(
                f"Invalid JSON response: {e.msg}",
                http_status=response.status_code,
                details={'position': e.pos}
            )
            logger.warning(f"make_api_call: code={response.status_code} json_error={e.msg}")

    # Index

    def get_index(self) -> ApiResponse:
        return self.make_api_call('')

    # Orders

    def get_orders(self, params: Optional[Dict[str, Any]] = None) -> ApiResponse:
        return self.make_api_call('orders', params)

    def get_order(self, order_id: Union[int, str]) -> ApiResponse:
        return self.make_api_call(f'orders/{order_id}')

    def get_orders_count(self) -> ApiResponse:
        return self.make_api_call('orders/count')

    def get_order_notes(self, order_id: Union[int, str]) -> ApiResponse:
        return self.make_api_call(f'orders/{order_id}/notes')

    def create_order_note(self, order_id: Union[int, str], data: Any) -> ApiResponse:
        return self.make_api_call(f'orders/{order_id}/notes', method=HttpMethod.POST, body=data)

    def update_order(self, order_id: Union[int, str], data: Any = None) -> ApiResponse:
        return self.make_api_call(f'orders/{order_id}', method=HttpMethod.POST, body=data or {})

    def delete_order(self, order_id: Union[int, str]) -> ApiResponse:
        return self.make_api_call(f'orders/{order_id}', method=HttpMethod.DELETE)

    # Coupons

    def get_coupons(self, params: Optional[Dict[str, Any]] = None) -> ApiResponse:
        return self.make_api_call('coupons', params)

    def get_coupon(self, coupon_id: Union[int, str]) -> ApiResponse:
        return self.make_api_call(f'coupons/{coupon_id}')

    def get_coupons_count(self) -> ApiResponse:
        return self.make_api_call('coupons/count')

    def get_coupon_by_code(self, coupon_code: str) -> ApiResponse:
        return self.make_api_call('coupons/code/' + raw_url_encode(raw_url_decode(coupon_code)))

    # Customers

    def get_customers(self, params: Optional[Dict[str, Any]] = None) -> ApiResponse:
        return self.make_api_call('customers', params)

    def get_customer(self, customer_id: Union[int, str]) -> ApiResponse:
        return self.make_api_call(f'customers/{customer_id}')

    def get_customer_by_email(self, email: str) -> ApiResponse:
        return self.make_api_call(f'customers/email/{email}')

    def get_customers_count(self) -> ApiResponse:
        return self.make_api_call('customers/count')

    def get_customer_orders(self, customer_id: Union[int, str]) -> ApiResponse:
        return self.make_api_call(f'customers/{customer_id}/orders')

    # Products

    def get_products(self, params: Optional[Dict[str, Any]] = None) -> ApiResponse:
        return self.make_api_call('products', params)

    def get_product(self, product_id: Union[int, str]) -> ApiResponse:
        return self.make_api_call(f'products/{product_id}')

    def get_products_count(self) -> ApiResponse:
        return self.make_api_call('products/count')

    def get_product_reviews(self, product_id: Union[int, str]) -> ApiResponse:
        return self.make_api_call(f'products/{product_id}/reviews')

    # Reports

    def get_reports(self, params: Optional[Dict[str, Any]] = None) -> ApiResponse:
        return self.make_api_call('reports', params)

    def get_sales_report(self, params: Optional[Dict[str, Any]] = None) -> ApiResponse:
        return self.make_api_call('reports/sales', params)

    def get_top_sellers_report(self, params: Optional[Dict[str, Any]] = None) -> ApiResponse:
        return self.make_api_call('reports/sales/top_sellers', params)

    def make_custom_endpoint_call(
        self,
        endpoint: str,
        params: Optional[Dict[str, Any]] = None,
        method: Union[str, HttpMethod] = HttpMethod.GET,
        body: Any = None
    ) -> ApiResponse:
        """Call an endpoint the wrappers above do not cover, e.g. one added by a plugin"""
        return self.make_api_call(endpoint, params, method, body)

    def close(self):
        """Close the transport session."""
        close = getattr(self.transport, 'close', None)
        if close is not None:
            close()

    def __enter__(self) -> 'WCApiClient':
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"WCApiClient(api_url={self.config.api_url!r})"


def create_client(
    store_url: str,
    consumer_key: str,
    consumer_secret: str,
    is_ssl: Optional[bool] = None,
    **options: Any
) -> WCApiClient:
    """
    Create a WooCommerce API client with default configuration.

    Args:
        store_url: Store root URL
        consumer_key: WooCommerce consumer key
        consumer_secret: WooCommerce consumer secret
        is_ssl: Force basic auth (True) or OAuth (False); detected when None
        **options: Any other ClientConfig field

    Returns:
        WCApiClient: Configured client
    """
    config = ClientConfig(
        store_url=store_url,
        consumer_key=consumer_key,
        consumer_secret=consumer_secret,
        is_ssl=is_ssl,
        **options
    )
    return WCApiClient(config)
