"""
Data models for the mailbox filtering domain.

These type-safe data structures define clear contracts between the
segmenter, parser, calendar extractor, retention filter and CSV writer.
"""

from dataclasses import dataclass, field
from typing import FrozenSet, List, Optional

DEFAULT_ACCOUNTS_FILE = 'accounts.txt'
DEFAULT_MAX_MESSAGES = 1000000

# Dates and event times are kept to minute precision
MINUTE_FORMAT = '%Y-%m-%dT%H:%M'


@dataclass
class MeetingRecord:
    """
    One calendar event extracted from a calendar notification message.

    Attributes:
        uid: Event UID
        start: Start time as YYYY-MM-DDTHH:MM (None if the event has none)
        end: End time as YYYY-MM-DDTHH:MM (None if the event has none)
        summary: Event summary
        location: Event location
        organizer: Organizer address (None if the event has no organizer)
        attendees: Attendee addresses, in event order
    """
    uid: str
    start: Optional[str] = None
    end: Optional[str] = None
    summary: str = ''
    location: str = ''
    organizer: Optional[str] = None
    attendees: List[str] = field(default_factory=list)


@dataclass
class MessageRecord:
    """
    One parsed email message.

    Field order matches the column order of the message CSV.

    Attributes:
        message_id: Message-ID without angle brackets
        date: Date as YYYY-MM-DDTHH:MM (None if absent or unparsable)
        to: To addresses
        from_addresses: From addresses
        content_type: Raw Content-Type header value
        sender: Sender address
        subject: Decoded subject line
        in_reply_to: In-Reply-To without angle brackets
        cc: Cc addresses
        bcc: Bcc addresses
        has_attachment: True if any MIME part is an attachment
        meetings: Meetings extracted from an embedded calendar payload
    """
    message_id: Optional[str] = None
    date: Optional[str] = None
    to: List[str] = field(default_factory=list)
    from_addresses: List[str] = field(default_factory=list)
    content_type: str = ''
    sender: Optional[str] = None
    subject: str = ''
    in_reply_to: Optional[str] = None
    cc: List[str] = field(default_factory=list)
    bcc: List[str] = field(default_factory=list)
    has_attachment: bool = False
    meetings: List[MeetingRecord] = field(default_factory=list)

    @property
    def destinations(self) -> List[str]:
        """All recipient addresses: to, then cc, then bcc."""
        return self.to + self.cc + self.bcc


@dataclass
class RunConfig:
    """
    Parameters of one filtering run.

    Attributes:
        mbox_file: Path to the mailbox file
        accounts_file: Path to the account domain allowlist
        max_messages: Maximum number of messages to read
        headers: Write a header row at the top of each output file
        mail_summary_file: Message CSV path (default: <mbox_file>.mail.csv)
        meeting_file: Meeting CSV path (default: <mbox_file>.meeting.csv)
    """
    mbox_file: str
    accounts_file: str = DEFAULT_ACCOUNTS_FILE
    max_messages: int = DEFAULT_MAX_MESSAGES
    headers: bool = False
    mail_summary_file: Optional[str] = None
    meeting_file: Optional[str] = None

    def __post_init__(self):
        if self.max_messages < 0:
            raise ValueError(f"max_messages must not be negative: {self.max_messages}")
        if not self.mail_summary_file:
            self.mail_summary_file = f"{self.mbox_file}.mail.csv"
        if not self.meeting_file:
            self.meeting_file = f"{self.mbox_file}.meeting.csv"


@dataclass
class PipelineState:
    """
    State shared across all messages of a run.

    The allowlist is read-only. Each header latch starts pending when header
    output is enabled and is cleared exactly once, by the first row written
    to its stream.
    """
    allowlist: FrozenSet[str]
    message_header_pending: bool = False
    meeting_header_pending: bool = False

    @classmethod
    def for_run(cls, allowlist, headers: bool) -> 'PipelineState':
        return cls(
            allowlist=frozenset(allowlist),
            message_header_pending=headers,
            meeting_header_pending=headers
        )


@dataclass
class RunSummary:
    """
    Result of a filtering run.

    Attributes:
        messages_read: Message blocks parsed
        messages_retained: Messages written to the message CSV
        meetings_written: Rows written to the meeting CSV
        mail_summary_file: Message CSV path
        meeting_file: Meeting CSV path
    """
    messages_read: int = 0
    messages_retained: int = 0
    meetings_written: int = 0
    mail_summary_file: Optional[str] = None
    meeting_file: Optional[str] = None

    @property
    def messages_dropped(self) -> int:
        return self.messages_read - self.messages_retained

    def to_dict(self):
        return {
            'messagesRead': self.messages_read,
            'messagesRetained': self.messages_retained,
            'messagesDropped': self.messages_dropped,
            'meetingsWritten': self.meetings_written,
            'mailSummaryFile': self.mail_summary_file,
            'meetingFile': self.meeting_file,
        }

    def __repr__(self) -> str:
        """Human-readable representation for logging."""
        return (
            f"RunSummary(read={self.messages_read}, retained={self.messages_retained}, "
            f"dropped={self.messages_dropped}, meetings={self.meetings_written})"
        )
