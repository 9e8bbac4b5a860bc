"""
Mailbox segmentation utilities.

An mbox file is a flat concatenation of messages, each preceded by a
boundary line starting with "From " at column 0. `iter_messages` streams
the raw text of one message at a time, so only the current message is
ever held in memory.
"""

import logging
from typing import BinaryIO, Iterable, Iterator

from domain.errors import ResourceError

logger = logging.getLogger(__name__)

BOUNDARY_PREFIX = 'From '
ENCODING = 'utf-8'


def repair_encoding(line: bytes) -> str:
    """
    Decode one line, replacing invalid byte sequences with U+FFFD.

    Example:
        >>> repair_encoding(b"Subject: caf\\xe9\\n")
        'Subject: caf\\ufffd\\n'
    """
    return line.decode(ENCODING, errors='replace')


def is_boundary(line: str) -> bool:
    """Check if a decoded line starts a new message."""
    return line.startswith(BOUNDARY_PREFIX)


def open_mailbox(path: str) -> BinaryIO:
    """
    Open a mailbox file for binary line reading.

    Raises:
        ResourceError: If the file cannot be opened
    """
    try:
        return open(path, 'rb')
    except OSError as e:
        logger.error(f"Failed to open mailbox {path}: {e}")
        raise ResourceError(path, f"cannot open mailbox: {e.strerror or e}") from e


def iter_messages(lines: Iterable[bytes]) -> Iterator[str]:
    """
    Split a stream of raw mailbox lines into message blocks.

    Everything before the first boundary line is discarded. Each yielded
    block is the repaired text between a boundary line and the next one
    (or end of input), without the boundary line itself. A trailing empty
    block is not yielded.

    Args:
        lines: Binary lines, e.g. a file opened with `open_mailbox`

    Yields:
        str: Raw message text (headers and body)
    """
    block = None
    for raw in lines:
        line = repair_encoding(raw)
        if is_boundary(line):
            if block is not None:
                yield ''.join(block)
            block = []
        elif block is not None:
            block.append(line)

    if block:
        yield ''.join(block)
