"""
Service functions for the mailbox filtering pipeline.

This package contains the pipeline stages (segmenting, parsing, calendar
extraction, retention, CSV output) and S3 transfer helpers.
"""

__all__ = ['allowlist', 'calendar', 'csv_output', 'email', 'mbox', 'retention', 's3']
