"""
Command-line entry point for filtering a mailbox backup.

Thin orchestration layer that builds a RunConfig and delegates to
MboxProcessor. Exits with status 1 only when an input or output file
cannot be opened.

Usage:
    mbox-filter --mbox-file backups/roger.mbox --headers
    mbox-filter --convert-homepages homepages.txt domains.txt
"""

import argparse
import logging
import os
import sys
from typing import List, Optional

from domain.errors import ResourceError
from domain.mbox_processor import MboxProcessor
from domain.models import DEFAULT_ACCOUNTS_FILE, DEFAULT_MAX_MESSAGES, RunConfig
from services import allowlist as allowlist_service

logger = logging.getLogger()


def configure_logging() -> None:
    """Configure the root logger once (level from LOG_LEVEL)."""
    logger.setLevel(os.environ.get('LOG_LEVEL', 'INFO').upper())

    if not logger.handlers:
        console_handler = logging.StreamHandler()
        formatter = logging.Formatter('%(levelname)s - %(message)s')
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)


def _non_negative_int(value: str) -> int:
    number = int(value)
    if number < 0:
        raise argparse.ArgumentTypeError(f"must not be negative: {value}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='mbox-filter',
        description='Filter a mailbox backup down to messages and meetings '
                    'involving account domains, written as ^-delimited CSV files.'
    )
    parser.add_argument(
        '--mbox-file',
        help='Decrypted mbox file to filter'
    )
    parser.add_argument(
        '--accounts-file',
        default=os.environ.get('MBOX_ACCOUNTS_FILE', DEFAULT_ACCOUNTS_FILE),
        help=f'Account domains, one per line (default: {DEFAULT_ACCOUNTS_FILE})'
    )
    parser.add_argument(
        '--max-messages',
        type=_non_negative_int,
        default=int(os.environ.get('MBOX_MAX_MESSAGES', DEFAULT_MAX_MESSAGES)),
        help=f'Maximum number of messages to process (default: {DEFAULT_MAX_MESSAGES})'
    )
    parser.add_argument(
        '--headers',
        action='store_true',
        help='Write a header row at the top of each output file'
    )
    parser.add_argument(
        '--mail-summary-file',
        help='Message CSV output (default: <mbox-file>.mail.csv)'
    )
    parser.add_argument(
        '--meeting-file',
        help='Meeting CSV output (default: <mbox-file>.meeting.csv)'
    )
    parser.add_argument(
        '--convert-homepages',
        nargs=2,
        metavar=('HOMEPAGES', 'DOMAINS'),
        help='Convert a file of homepage URLs into an account domains file and exit'
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """
    Run the mailbox filter.

    Args:
        argv: Command-line arguments (default: sys.argv[1:])

    Returns:
        Process exit status
    """
    configure_logging()
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        if args.convert_homepages:
            homepages_file, domains_file = args.convert_homepages
            allowlist_service.convert_homepages(homepages_file, domains_file)
            return 0

        if not args.mbox_file:
            parser.error('--mbox-file is required')

        config = RunConfig(
            mbox_file=args.mbox_file,
            accounts_file=args.accounts_file,
            max_messages=args.max_messages,
            headers=args.headers,
            mail_summary_file=args.mail_summary_file,
            meeting_file=args.meeting_file
        )
        MboxProcessor(config).run()

    except ResourceError as e:
        logger.error(f"Aborting: {e}")
        return 1

    return 0


if __name__ == '__main__':
    sys.exit(main())
