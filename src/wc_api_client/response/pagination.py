"""
Pagination totals carried in response headers
"""

import logging
from dataclasses import dataclass
from typing import Optional

from ..signing.signing_config import pagination_prefix
from .headers import HeaderMap, get_header, last_value

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PaginationTotals:
    """Total item and page counts; None when the header was not sent"""
    total: Optional[int] = None
    total_pages: Optional[int] = None


def _as_int(name: str, value: Optional[str]) -> Optional[int]:
    if value is None:
        return None
    try:
        return int(value.strip())
    except ValueError:
        logger.warning(f"Ignoring non-integer {name} header: {value!r}")
        return None


def extract_pagination(headers: HeaderMap, api_endpoint: str) -> PaginationTotals:
    """
    Read ``<prefix>-Total`` and ``<prefix>-TotalPages`` from a header map.

    Args:
        headers: Output of ``parse_headers``
        api_endpoint: Endpoint family; ``wp-json`` uses X-WP, legacy uses X-WC

    Returns:
        PaginationTotals: Totals, each None when absent
    """
    prefix = pagination_prefix(api_endpoint)
    total_name = f"{prefix}-Total"
    pages_name = f"{prefix}-TotalPages"

    return PaginationTotals(
        total=_as_int(total_name, last_value(get_header(headers, total_name))),
        total_pages=_as_int(pages_name, last_value(get_header(headers, pages_name))),
    )
