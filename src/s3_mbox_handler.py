"""
AWS Lambda handler for filtering a mailbox backup stored in S3.

Thin orchestration layer: downloads the mailbox (and optionally the
allowlist) to local storage, delegates to MboxProcessor, and uploads the
two CSV files.

Expected event format:
{
    "bucket": "mailbox-backups",
    "key": "mbox/roger.mbox",
    "accountsKey": "config/accounts.txt",   (optional)
    "headers": false,                        (optional)
    "maxMessages": 1000000                   (optional)
}
"""

import json
import logging
import os
from typing import Any, Dict

from botocore.exceptions import ClientError

from domain.errors import ResourceError
from domain.mbox_processor import MboxProcessor
from domain.models import DEFAULT_ACCOUNTS_FILE, DEFAULT_MAX_MESSAGES, RunConfig
from services import s3 as s3_service

# Configure logging
logger = logging.getLogger()
logger.setLevel(logging.INFO)

# Add console handler for local testing (AWS Lambda provides handlers automatically)
if not logger.handlers:
    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.INFO)
    formatter = logging.Formatter('%(levelname)s - %(message)s')
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

# Environment variables
OUTPUT_BUCKET = os.environ.get('OUTPUT_BUCKET', '')
OUTPUT_PREFIX = os.environ.get('OUTPUT_PREFIX', 'filtered/')
WORK_DIR = os.environ.get('WORK_DIR', '/tmp')


def lambda_handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """
    Filter one S3 mailbox object into two CSV objects.

    Args:
        event: Lambda event (see module docstring)
        context: Lambda context

    Returns:
        Dict with statusCode and a JSON body holding the run summary
    """
    logger.info("=" * 70)
    logger.info("Mailbox Filter - Started")
    logger.info("=" * 70)

    try:
        bucket = event.get('bucket')
        key = event.get('key')
        if not bucket or not key:
            raise ValueError("Event requires 'bucket' and 'key'")

        basename = os.path.basename(key)
        mbox_path = os.path.join(WORK_DIR, basename)
        s3_service.download_to_file(bucket, key, mbox_path)

        accounts_path = DEFAULT_ACCOUNTS_FILE
        accounts_key = event.get('accountsKey')
        if accounts_key:
            accounts_path = os.path.join(WORK_DIR, os.path.basename(accounts_key))
            s3_service.download_to_file(bucket, accounts_key, accounts_path)

        config = RunConfig(
            mbox_file=mbox_path,
            accounts_file=accounts_path,
            max_messages=int(event.get('maxMessages', DEFAULT_MAX_MESSAGES)),
            headers=bool(event.get('headers', False))
        )
        summary = MboxProcessor(config).run()

        output_bucket = OUTPUT_BUCKET or bucket
        outputs = {
            'mailSummaryKey': f"{OUTPUT_PREFIX}{basename}.mail.csv",
            'meetingKey': f"{OUTPUT_PREFIX}{basename}.meeting.csv",
        }
        s3_service.upload_file(config.mail_summary_file, output_bucket, outputs['mailSummaryKey'])
        s3_service.upload_file(config.meeting_file, output_bucket, outputs['meetingKey'])

        result = summary.to_dict()
        result.update(outputs)
        result['outputBucket'] = output_bucket

        logger.info(f"Successfully filtered s3://{bucket}/{key}: {summary!r}")

        return {
            'statusCode': 200,
            'body': json.dumps(result)
        }

    except ValueError as ve:
        logger.error(f"Validation error: {str(ve)}")
        return {
            'statusCode': 400,
            'body': json.dumps({
                'error': str(ve)
            })
        }

    except (ResourceError, ClientError) as e:
        logger.error(f"Error filtering mailbox: {str(e)}", exc_info=True)
        return {
            'statusCode': 500,
            'body': json.dumps({
                'error': 'Mailbox filtering failed',
                'message': str(e)
            })
        }
