"""
Domain layer for mailbox filtering business logic.

This layer contains:
- Data models (message, meeting, run configuration and state)
- Error types (resource failures)
- Business logic (mbox filtering pipeline)
"""
