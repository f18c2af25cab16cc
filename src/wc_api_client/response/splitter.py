"""
Split a raw HTTP response into its header blocks and body

Transport output can start with more than one header section: a provisional
``HTTP/1.1 100 Continue`` block, proxy-added sections, and finally the real
status line. All leading blocks are collected; whatever follows is the body.
"""

import logging
import re
from dataclasses import dataclass
from typing import AnyStr, Generic, Optional

logger = logging.getLogger(__name__)

# One header block: starts with HTTP, ends at the first blank line
_BLOCK_PATTERN_STR = re.compile(r'HTTP.*?\r\n\r\n', re.DOTALL)
_BLOCK_PATTERN_BYTES = re.compile(rb'HTTP.*?\r\n\r\n', re.DOTALL)

# Bound on the peeling loop; at most MAX_HEADER_BLOCKS - 1 blocks are taken
MAX_HEADER_BLOCKS = 5


@dataclass
class SplitResult(Generic[AnyStr]):
    """
    Outcome of splitting a raw response

    Attributes:
        header_blob: Every consumed header block concatenated, or None when
            the response did not start with a header block
        body: Remaining buffer after the last consumed block
        blocks: Number of header blocks consumed
        exhausted: True when the iteration bound stopped the loop while the
            remaining buffer still looked like a header block
    """
    header_blob: Optional[AnyStr]
    body: AnyStr
    blocks: int = 0
    exhausted: bool = False


def split_response(response: AnyStr, max_blocks: int = MAX_HEADER_BLOCKS) -> SplitResult:
    """
    Peel leading header blocks off a raw response.

    Args:
        response: Raw transport output, ``str`` or ``bytes``
        max_blocks: Iteration bound; ``max_blocks - 1`` blocks at most

    Returns:
        SplitResult: Accumulated header blob and the body
    """
    pattern = _BLOCK_PATTERN_BYTES if isinstance(response, bytes) else _BLOCK_PATTERN_STR

    header_blob = None
    body = response
    blocks = 0
    while True:
        match = pattern.match(body)
        if match is None:
            break
        blocks += 1
        if blocks >= max_blocks:
            logger.warning(f"Stopped after {blocks - 1} header blocks; remaining data treated as body")
            return SplitResult(header_blob, body, blocks - 1, exhausted=True)

        block = match.group(0)
        header_blob = block if header_blob is None else header_blob + block
        body = body[len(block):]

    if header_blob is None and body[:4] in ('HTTP', b'HTTP'):
        logger.debug("Response starts with a status line but no blank line terminator; treated as body")

    return SplitResult(header_blob, body, blocks)
