"""
Error taxonomy.

Services raise these; the API layer renders them as
{"message": ..., "kind": ...} with the class status code.
"""

from typing import Optional


class JobTrackerError(Exception):
    status_code = 500
    kind = "internal_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self, debug: bool = False) -> dict:
        return {"message": self.message, "kind": self.kind}


class NotFound(JobTrackerError):
    """Unknown id, or a record owned by someone else."""
    status_code = 404
    kind = "not_found"


class ValidationError(JobTrackerError):
    """Missing request fields, non-PDF or oversized upload."""
    status_code = 400
    kind = "validation_error"


class UnreadablePdf(JobTrackerError):
    status_code = 500
    kind = "unreadable_pdf"


class UpstreamError(JobTrackerError):
    """Every model in the fallback policy failed."""
    status_code = 500
    kind = "upstream_error"


class ParseError(JobTrackerError):
    """Model reply was not a JSON object. Keeps the raw reply."""
    status_code = 500
    kind = "parse_error"

    def __init__(self, message: str, raw: Optional[str] = None):
        super().__init__(message)
        self.raw = raw

    def to_dict(self, debug: bool = False) -> dict:
        body = super().to_dict(debug)
        # Raw reply only in debug mode
        if debug:
            body["raw"] = self.raw
        return body


class StorageError(JobTrackerError):
    status_code = 500
    kind = "storage_error"
