"""
Error taxonomy for the Wayfarer service.

Every error knows the HTTP status it is surfaced with and the message that
is safe to show a caller. Details meant for operators go to the log only.
"""

from typing import Any, Dict, Optional


class WayfarerError(Exception):
    """Base class for errors converted to structured responses"""

    status_code: int = 500
    public_message: str = "internal error"

    def __init__(self, message: Optional[str] = None, detail: Optional[str] = None):
        super().__init__(message or self.public_message)
        self.message = message or self.public_message
        self.detail = detail

    def to_dict(self, include_detail: bool = False) -> Dict[str, Any]:
        body: Dict[str, Any] = {"error": self.message}
        if include_detail and self.detail:
            body["detail"] = self.detail
        return body


# ============================================
# Caller errors
# ============================================

class CommentValidationError(WayfarerError):
    status_code = 400
    public_message = "invalid comment"

    def __init__(self, field: str, message: str):
        super().__init__(message)
        self.field = field

    def to_dict(self, include_detail: bool = False) -> Dict[str, Any]:
        return {"error": self.message, "field": self.field}


class CommentNotFoundError(WayfarerError):
    status_code = 404
    public_message = "not found"

    def __init__(self, comment_id: str):
        super().__init__()
        self.comment_id = comment_id


# ============================================
# Upstream (text-generation provider) errors
# ============================================

class UpstreamError(WayfarerError):
    status_code = 502
    public_message = "failed to query search provider"


class ProviderNotConfiguredError(UpstreamError):
    public_message = "search provider is not configured"


class ProviderTimeoutError(UpstreamError):
    public_message = "search provider timed out"


class ProviderResponseError(UpstreamError):
    public_message = "provider response not understood"


# ============================================
# Storage errors
# ============================================

class StorageConflictError(WayfarerError):
    status_code = 503
    public_message = "concurrent update conflict"


class StorageUnavailableError(WayfarerError):
    status_code = 500
    public_message = "storage unavailable"


class CorruptStoreError(StorageUnavailableError):
    public_message = "stored comments could not be read"
