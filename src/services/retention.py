"""
Retention filter for parsed messages.

A message is kept as a whole (with all of its meetings) when any of its
addresses belongs to an account domain on the allowlist.
"""

import logging
from typing import AbstractSet, Iterable, Optional

from domain.models import MessageRecord

logger = logging.getLogger(__name__)


def email_domain(address: Optional[str]) -> Optional[str]:
    """
    Get the domain of an email address.

    Example:
        >>> email_domain("jane@example.com")
        'example.com'

    Returns:
        Text after the last '@', or None if there is none
    """
    if not address or '@' not in address:
        return None
    return address.rsplit('@', 1)[1]


def _matches(addresses: Iterable[Optional[str]], allowlist: AbstractSet[str]) -> Optional[str]:
    """Return the first address whose domain is on the allowlist."""
    for address in addresses:
        domain = email_domain(address)
        if domain is not None and domain in allowlist:
            return address
    return None


def retain_message(message: MessageRecord, allowlist: AbstractSet[str]) -> bool:
    """
    Decide whether a message should be written to the output.

    The sender and destination addresses are checked first. If none match,
    the attendees and organizer of each meeting are checked.

    Args:
        message: Parsed message
        allowlist: Account domains

    Returns:
        True to keep the message and its meetings, False to drop both
    """
    matched = _matches(message.from_addresses + message.destinations, allowlist)
    if matched:
        logger.info(f"Retaining message {message.message_id}: matched {matched}")
        return True

    for meeting in message.meetings:
        # Organizer may be absent; it contributes no domain then
        matched = _matches(meeting.attendees + [meeting.organizer], allowlist)
        if matched:
            logger.info(
                f"Retaining message {message.message_id}: "
                f"meeting {meeting.uid} matched {matched}"
            )
            return True

    logger.info(f"Dropping message {message.message_id}: no account domain")
    return False
