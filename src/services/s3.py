"""
S3 operations for mailbox filtering runs.

This module moves mailbox and allowlist objects from S3 to local files,
and uploads the resulting CSV files back to S3.
"""

import logging

import boto3
from botocore.config import Config
from botocore.exceptions import ClientError

logger = logging.getLogger(__name__)

# Configure S3 client with timeouts to prevent infinite hangs
s3_config = Config(
    retries={
        'max_attempts': 1,  # 1 attempt total (no retries)
        'mode': 'standard'
    },
    connect_timeout=10,  # 10 seconds to establish connection
    read_timeout=60      # 60 seconds max for reading response
)

# Initialize S3 client at module level (thread-safe, reused across invocations)
s3_client = boto3.client('s3', config=s3_config)
logger.info("S3 client initialized with timeouts: connect=10s, read=60s, max_attempts=1")


def download_to_file(bucket: str, key: str, path: str) -> None:
    """
    Download an S3 object (mailbox or allowlist) to a local file.

    Args:
        bucket: S3 bucket name
        key: S3 object key
        path: Local destination path (overwritten)

    Raises:
        ValueError: If the bucket or key does not exist
        ClientError: For any other S3 failure

    Example:
        >>> download_to_file("my-backups", "mbox/roger.mbox", "/tmp/roger.mbox")
    """
    try:
        logger.info(f"Downloading s3://{bucket}/{key} to {path}")
        s3_client.download_file(bucket, key, path)
    except ClientError as e:
        error_code = e.response.get('Error', {}).get('Code', '')
        if error_code in ('NoSuchKey', '404'):
            logger.error(f"S3 object not found: s3://{bucket}/{key}")
            raise ValueError(f"Object not found in S3: {key}")
        elif error_code == 'NoSuchBucket':
            logger.error(f"S3 bucket not found: {bucket}")
            raise ValueError(f"S3 bucket not found: {bucket}")
        else:
            logger.error(f"Failed to download s3://{bucket}/{key}: {e}")
            raise


def upload_file(path: str, bucket: str, key: str) -> None:
    """
    Upload a local output file to S3.

    Args:
        path: Local file path
        bucket: S3 bucket name
        key: S3 object key

    Raises:
        ValueError: If bucket or key is empty
        ClientError: If the S3 operation fails
    """
    if not bucket:
        raise ValueError("S3 bucket name cannot be empty")
    if not key:
        raise ValueError("S3 object key cannot be empty")

    try:
        logger.info(f"Uploading {path} to s3://{bucket}/{key}")

        s3_client.upload_file(
            path,
            bucket,
            key,
            ExtraArgs={'ContentType': 'text/csv'}
        )

        logger.info(f"Successfully uploaded to s3://{bucket}/{key}")

    except ClientError as e:
        error_code = e.response.get('Error', {}).get('Code', 'Unknown')
        error_message = e.response.get('Error', {}).get('Message', str(e))

        logger.error(
            f"Failed to upload to S3: "
            f"bucket={bucket}, key={key}, "
            f"error_code={error_code}, error_message={error_message}"
        )

        raise
