"""
Pytest configuration and fixtures for all tests.
"""

import base64
import os
import sys
import pytest

# Add src to Python path before any imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '../src'))

# Set up test environment variables before importing any modules
os.environ.setdefault('AWS_DEFAULT_REGION', 'us-west-2')
os.environ.setdefault('ENVIRONMENT', 'test')
os.environ.setdefault('LOG_LEVEL', 'INFO')


SAMPLE_ICS = (
    "BEGIN:VCALENDAR\r\n"
    "VERSION:2.0\r\n"
    "PRODID:-//Google Inc//Google Calendar 70.9054//EN\r\n"
    "METHOD:REQUEST\r\n"
    "BEGIN:VEVENT\r\n"
    "DTSTART:20240115T170000Z\r\n"
    "DTEND:20240115T180000Z\r\n"
    "UID:event-1@google.com\r\n"
    "ORGANIZER;CN=Boss:mailto:boss@allowed.com\r\n"
    "ATTENDEE;CN=Nobody:mailto:nobody@notallowed.com\r\n"
    "SUMMARY:Quarterly planning\r\n"
    "LOCATION:Room 1\r\n"
    "END:VEVENT\r\n"
    "END:VCALENDAR\r\n"
)


def build_calendar_message(
    ics=SAMPLE_ICS,
    sender="calendar-notification-noreply@google.com",
    to="nobody@notallowed.com",
    message_id="cal-1@google.com"
):
    """Build a calendar notification with the iCalendar text as its second part."""
    encoded = base64.b64encode(ics.encode('utf-8')).decode('ascii')
    return f"""From: calendar-notification@google.com
Sender: {sender}
To: {to}
Subject: Invitation: Quarterly planning
Message-ID: <{message_id}>
Date: Mon, 15 Jan 2024 08:00:00 +0000
MIME-Version: 1.0
Content-Type: multipart/mixed; boundary="cal-boundary"

--cal-boundary
Content-Type: text/plain; charset="UTF-8"

You have been invited.

--cal-boundary
Content-Type: text/calendar; charset="UTF-8"; method=REQUEST
Content-Transfer-Encoding: base64

{encoded}
--cal-boundary--
"""


def build_plain_message(
    from_="user@allowed.com",
    to="other@notallowed.com",
    subject="Hello",
    message_id="plain-1@allowed.com"
):
    return f"""From: {from_}
To: {to}
Subject: {subject}
Message-ID: <{message_id}>
Date: Mon, 15 Jan 2024 09:30:45 -0800
Content-Type: text/plain; charset="UTF-8"

Plain body.
"""


def build_mbox(*messages):
    """Concatenate messages into mbox bytes, each with its own boundary line."""
    chunks = []
    for index, message in enumerate(messages):
        chunks.append(f"From sender{index}@example.com Mon Jan 15 09:00:00 2024\n")
        chunks.append(message)
    return ''.join(chunks).encode('utf-8')


@pytest.fixture
def calendar_message():
    return build_calendar_message()


@pytest.fixture
def plain_message():
    return build_plain_message()


@pytest.fixture
def accounts_file(tmp_path):
    """Allowlist containing allowed.com."""
    path = tmp_path / "accounts.txt"
    path.write_text("allowed.com\n")
    return str(path)
