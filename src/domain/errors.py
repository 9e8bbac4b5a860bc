"""
Exception types for the mailbox filtering pipeline.

Only resource failures are raised out of the pipeline. Malformed messages,
bad encodings and undecodable calendar payloads degrade to empty values
and are handled where they occur.
"""


class ResourceError(Exception):
    """Raised when an input or output file cannot be opened, read or created."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"{path}: {reason}")
