"""
Mailbox filtering pipeline - core business logic.

This module handles the end-to-end processing of one mailbox file:
1. Load the account domain allowlist
2. Split the mailbox into messages, one at a time
3. Parse each message and extract calendar meetings
4. Keep messages that involve an account domain
5. Write kept messages and their meetings to the two CSV files

Only resource failures (unreadable inputs, uncreatable outputs) raise
ResourceError. Everything wrong inside a message degrades to empty fields.
"""

import logging
from itertools import islice

from .models import MessageRecord, PipelineState, RunConfig, RunSummary
from services import allowlist as allowlist_service
from services import csv_output
from services import email as email_service
from services import mbox as mbox_service
from services import retention

logger = logging.getLogger(__name__)


class MboxProcessor:
    """
    Runs the filtering pipeline for one RunConfig.

    Messages are pulled from the mailbox one at a time and fully written
    before the next is read, so memory holds a single message.
    """

    def __init__(self, config: RunConfig):
        self.config = config

    def run(self) -> RunSummary:
        """
        Filter the configured mailbox into the two CSV files.

        Returns:
            RunSummary with message and meeting counts

        Raises:
            ResourceError: If the allowlist or mailbox cannot be read, or an
                output file cannot be created
        """
        config = self.config
        logger.info(f"Filtering mailbox: {config.mbox_file}")

        state = PipelineState.for_run(
            allowlist_service.load_allowlist(config.accounts_file),
            headers=config.headers
        )
        summary = RunSummary(
            mail_summary_file=config.mail_summary_file,
            meeting_file=config.meeting_file
        )

        with mbox_service.open_mailbox(config.mbox_file) as mailbox, \
                csv_output.MailboxCsvWriter(config.mail_summary_file, config.meeting_file) as writer:
            blocks = islice(mbox_service.iter_messages(mailbox), config.max_messages)
            for raw_message in blocks:
                message = email_service.parse_message(raw_message)
                summary.messages_read += 1
                self._process_message(message, state, writer, summary)

        if summary.messages_read >= config.max_messages:
            logger.info(f"Reached maximum of {config.max_messages} message(s)")

        self._log_summary(summary)
        return summary

    def _process_message(
        self,
        message: MessageRecord,
        state: PipelineState,
        writer: csv_output.MailboxCsvWriter,
        summary: RunSummary
    ) -> None:
        """Filter one parsed message and write it if retained."""
        if not retention.retain_message(message, state.allowlist):
            return

        summary.meetings_written += writer.write(message, state)
        summary.messages_retained += 1

    def _log_summary(self, summary: RunSummary) -> None:
        """Log run summary."""
        logger.info("=" * 70)
        logger.info(f"Mailbox processing complete: {summary.messages_read} message(s)")
        logger.info(f"  Retained: {summary.messages_retained}")
        logger.info(f"  Dropped: {summary.messages_dropped}")
        logger.info(f"  Meetings: {summary.meetings_written}")
        logger.info(f"  Messages CSV: {summary.mail_summary_file}")
        logger.info(f"  Meetings CSV: {summary.meeting_file}")
        logger.info("=" * 70)
