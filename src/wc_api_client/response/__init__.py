"""
Raw response handling: header block splitting, header parsing and
pagination totals.
"""

from .splitter import (
    SplitResult,
    MAX_HEADER_BLOCKS,
    split_response,
)

from .headers import (
    HeaderMap,
    HeaderValue,
    get_header,
    last_value,
    parse_headers,
    parse_status_code,
)

from .pagination import (
    PaginationTotals,
    extract_pagination,
)

__all__ = [
    'SplitResult',
    'MAX_HEADER_BLOCKS',
    'split_response',
    'HeaderMap',
    'HeaderValue',
    'get_header',
    'last_value',
    'parse_headers',
    'parse_status_code',
    'PaginationTotals',
    'extract_pagination',
]
