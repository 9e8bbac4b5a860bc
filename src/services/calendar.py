"""
Calendar invitation extraction for calendar notification messages.

Calendar systems send invitations as multipart messages whose second part
is a base64-encoded iCalendar document. Extraction is best effort: a
payload that is missing, not base64, or not valid iCalendar yields no
meetings and the message is processed as usual.
"""

import base64
import binascii
import logging
from email.message import Message
from typing import List, Optional

from icalendar import Calendar

from domain.models import MINUTE_FORMAT, MeetingRecord

logger = logging.getLogger(__name__)

CALENDAR_SENDER_PREFIX = 'calendar-notification'
CALENDAR_PART_INDEX = 1


def extract_meetings(msg: Message, sender: Optional[str]) -> List[MeetingRecord]:
    """
    Extract meetings from the calendar part of a notification message.

    Args:
        msg: Parsed email message
        sender: Address from the message's Sender header

    Returns:
        One MeetingRecord per event of the first calendar, or an empty list
        if the sender is not a calendar system or the payload is unusable
    """
    if not sender or not sender.startswith(CALENDAR_SENDER_PREFIX):
        return []

    payload = _calendar_payload(msg)
    if not payload:
        return []

    try:
        calendars = Calendar.from_ical(payload, multiple=True)
        if not calendars:
            logger.warning(f"No calendar found in payload from {sender}")
            return []
        meetings = [_to_meeting(event) for event in calendars[0].walk('VEVENT')]
    except Exception as e:
        logger.warning(f"Failed to parse calendar payload from {sender}: {e}")
        return []

    logger.info(f"Extracted {len(meetings)} meeting(s)")
    return meetings


def _calendar_payload(msg: Message) -> Optional[bytes]:
    """Base64-decode the raw content of the second body part."""
    if not msg.is_multipart():
        return None

    parts = msg.get_payload()
    if len(parts) <= CALENDAR_PART_INDEX:
        return None

    raw = parts[CALENDAR_PART_INDEX].get_payload()
    if not isinstance(raw, str):
        return None

    try:
        return base64.b64decode(raw)
    except (binascii.Error, ValueError) as e:
        logger.warning(f"Calendar part is not valid base64: {e}")
        return None


def _to_meeting(event) -> MeetingRecord:
    return MeetingRecord(
        uid=str(event.get('UID', '')),
        start=_event_time(event, 'DTSTART'),
        end=_event_time(event, 'DTEND'),
        summary=str(event.get('SUMMARY', '')),
        location=str(event.get('LOCATION', '')),
        organizer=_address(event.get('ORGANIZER')),
        attendees=[_address(a) for a in _as_list(event.get('ATTENDEE'))],
    )


def _event_time(event, name: str) -> Optional[str]:
    prop = event.get(name)
    if prop is None:
        return None
    return prop.dt.strftime(MINUTE_FORMAT)


def _address(value) -> Optional[str]:
    """Strip the mailto: scheme from a calendar user address."""
    if value is None:
        return None
    address = str(value)
    if address.lower().startswith('mailto:'):
        address = address[len('mailto:'):]
    return address


def _as_list(value) -> list:
    # A single ATTENDEE property comes back as a scalar
    if value is None:
        return []
    if isinstance(value, list):
        return value
    return [value]
