"""
Email parsing utilities for mailbox messages.

This module turns the raw text of one mailbox message into a
MessageRecord. Parsing never fails: missing or malformed headers simply
leave the corresponding field empty.
"""

import logging
from email import message_from_string
from email.errors import HeaderParseError
from email.header import decode_header, make_header
from email.message import Message
from email.utils import getaddresses, parsedate_to_datetime
from typing import List, Optional

from domain.models import MINUTE_FORMAT, MessageRecord
from services import calendar as calendar_service

logger = logging.getLogger(__name__)


def parse_message(raw_message: str) -> MessageRecord:
    """
    Parse one raw message (RFC 5322 headers and MIME body) into a record.

    Args:
        raw_message: Message text without its mbox boundary line

    Returns:
        MessageRecord, with meetings populated for calendar notifications

    Example:
        >>> record = parse_message("From: a@example.com\\nTo: b@example.org\\n\\nHi\\n")
        >>> record.from_addresses, record.destinations
        (['a@example.com'], ['b@example.org'])
    """
    msg: Message = message_from_string(raw_message)

    record = MessageRecord(
        message_id=_strip_angle_brackets(_header(msg, 'Message-ID')),
        date=_parse_date(_header(msg, 'Date')),
        to=_addresses(msg, 'To'),
        from_addresses=_addresses(msg, 'From'),
        content_type=_header(msg, 'Content-Type') or '',
        sender=_first(_addresses(msg, 'Sender')),
        subject=_decode(_header(msg, 'Subject')),
        in_reply_to=_strip_angle_brackets(_header(msg, 'In-Reply-To')),
        cc=_addresses(msg, 'Cc'),
        bcc=_addresses(msg, 'Bcc'),
        has_attachment=has_attachment(msg),
    )
    logger.info(f"Parsed message: {record.message_id}")

    record.meetings = calendar_service.extract_meetings(msg, record.sender)
    return record


def has_attachment(msg: Message) -> bool:
    """Check if any MIME part of the message is an attachment."""
    return any(part.get_content_disposition() == 'attachment' for part in msg.walk())


def format_minutes(value) -> str:
    """Format a date or datetime to minute precision (YYYY-MM-DDTHH:MM)."""
    return value.strftime(MINUTE_FORMAT)


def _header(msg: Message, name: str) -> Optional[str]:
    """Get an unfolded header value (header names are case-insensitive)."""
    value = msg.get(name)
    if value is None:
        return None
    value = ' '.join(str(value).split())
    return value or None


def _addresses(msg: Message, name: str) -> List[str]:
    """Get the bare addresses of every occurrence of an address-list header."""
    values = [str(v) for v in msg.get_all(name, [])]
    return [addr for _, addr in getaddresses(values) if addr]


def _first(values: List[str]) -> Optional[str]:
    return values[0] if values else None


def _parse_date(value: Optional[str]) -> Optional[str]:
    if not value:
        return None
    try:
        return format_minutes(parsedate_to_datetime(value))
    except (TypeError, ValueError, IndexError, OverflowError) as e:
        logger.debug(f"Unparsable Date header {value!r}: {e}")
        return None


def _decode(value: Optional[str]) -> str:
    """Decode RFC 2047 encoded words, keeping the raw value on failure."""
    if not value:
        return ''
    try:
        return str(make_header(decode_header(value)))
    except (HeaderParseError, LookupError, UnicodeDecodeError, ValueError) as e:
        logger.debug(f"Failed to decode header {value!r}: {e}")
        return value


def _strip_angle_brackets(value: Optional[str]) -> Optional[str]:
    if not value:
        return None
    return value.strip().strip('<>') or None
