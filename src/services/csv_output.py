"""
Delimited-text output for retained messages and their meetings.

Two streams are written side by side: one row per retained message in the
message file, and one row per meeting of a retained message in the
meeting file. Fields are separated by '^' and the elements of multi-valued
fields by ';'. Field text is scrubbed of line breaks and delimiters rather
than quoted, so every row stays on one line.
"""

import csv
import logging
from typing import List, Tuple

from domain.errors import ResourceError
from domain.models import MeetingRecord, MessageRecord, PipelineState

logger = logging.getLogger(__name__)

FIELD_DELIMITER = '^'
ELEMENT_DELIMITER = ';'

# (column name, record attribute), in output order
MESSAGE_COLUMNS: Tuple[Tuple[str, str], ...] = (
    ('messageId', 'message_id'),
    ('date', 'date'),
    ('to', 'to'),
    ('from', 'from_addresses'),
    ('contentType', 'content_type'),
    ('sender', 'sender'),
    ('subject', 'subject'),
    ('inReplyTo', 'in_reply_to'),
    ('cc', 'cc'),
    ('bcc', 'bcc'),
    ('hasAttachment', 'has_attachment'),
    ('destinations', 'destinations'),
)

MEETING_COLUMNS: Tuple[Tuple[str, str], ...] = (
    ('uid', 'uid'),
    ('start', 'start'),
    ('end', 'end'),
    ('summary', 'summary'),
    ('location', 'location'),
    ('organizer', 'organizer'),
    ('attendees', 'attendees'),
)


def scrub(text: str) -> str:
    """Replace line breaks and field delimiters with spaces."""
    for token in ('\r\n', '\n', '\r', FIELD_DELIMITER):
        text = text.replace(token, ' ')
    return text


def render_field(value) -> str:
    """
    Render one field value as text.

    None renders as an empty string, booleans as true/false, and lists as
    their scrubbed elements joined with ';'.
    """
    if value is None:
        return ''
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, (list, tuple)):
        return ELEMENT_DELIMITER.join(render_field(v) for v in value)
    return scrub(str(value))


def message_row(message: MessageRecord) -> List[str]:
    return [render_field(getattr(message, attr)) for _, attr in MESSAGE_COLUMNS]


def meeting_row(meeting: MeetingRecord) -> List[str]:
    return [render_field(getattr(meeting, attr)) for _, attr in MEETING_COLUMNS]


def header_row(columns: Tuple[Tuple[str, str], ...]) -> List[str]:
    return [name for name, _ in columns]


def _open_output(path: str):
    # Always truncate: every run starts from empty output
    try:
        return open(path, 'w', encoding='utf-8', newline='')
    except OSError as e:
        logger.error(f"Failed to create output file {path}: {e}")
        raise ResourceError(path, f"cannot create output: {e.strerror or e}") from e


def _row_writer(stream):
    return csv.writer(
        stream,
        delimiter=FIELD_DELIMITER,
        quoting=csv.QUOTE_NONE,
        quotechar=None,
        escapechar=None,
        lineterminator='\n'
    )


class MailboxCsvWriter:
    """
    Writes retained messages and meetings to their two output files.

    Use as a context manager; both files are created (truncated) on entry
    and closed on exit.
    """

    def __init__(self, mail_summary_file: str, meeting_file: str):
        self.mail_summary_file = mail_summary_file
        self.meeting_file = meeting_file
        self._mail_stream = None
        self._meeting_stream = None
        self._mail_rows = None
        self._meeting_rows = None

    def __enter__(self) -> 'MailboxCsvWriter':
        self._mail_stream = _open_output(self.mail_summary_file)
        try:
            self._meeting_stream = _open_output(self.meeting_file)
        except ResourceError:
            self._mail_stream.close()
            raise
        self._mail_rows = _row_writer(self._mail_stream)
        self._meeting_rows = _row_writer(self._meeting_stream)
        logger.info(f"Writing messages to {self.mail_summary_file}, meetings to {self.meeting_file}")
        return self

    def __exit__(self, exc_type, exc, tb):
        self._mail_stream.close()
        self._meeting_stream.close()
        return False

    def write(self, message: MessageRecord, state: PipelineState) -> int:
        """
        Write one retained message and its meetings.

        A pending header latch in `state` emits the header row before the
        first row of its stream and is then cleared.

        Returns:
            Number of meeting rows written
        """
        if state.message_header_pending:
            self._mail_rows.writerow(header_row(MESSAGE_COLUMNS))
            state.message_header_pending = False
        self._mail_rows.writerow(message_row(message))

        for meeting in message.meetings:
            if state.meeting_header_pending:
                self._meeting_rows.writerow(header_row(MEETING_COLUMNS))
                state.meeting_header_pending = False
            self._meeting_rows.writerow(meeting_row(meeting))

        return len(message.meetings)
