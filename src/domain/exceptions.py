"""Domain-level exceptions for counter synchronization.

Request rejections are returned inside ``Err`` by the orchestrator; the
Busuanzi and storage errors are raised by infrastructure.
"""


class SyncError(Exception):
    """Base exception for all sync errors."""

    pass


# ============================================================================
# Request rejections
# ============================================================================


class SyncRequestError(SyncError):
    """A sync request that was rejected before or while running."""

    default_message = "Sync request rejected"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message


class UnauthorizedError(SyncRequestError):
    """Raised when the caller has no authenticated identity."""

    default_message = "Unauthorized"


class InvalidRequestError(SyncRequestError):
    """Raised when the request is malformed or the domain is not syncable."""

    default_message = "Invalid request"


class DomainNotFoundError(SyncRequestError):
    """Raised when the domain is absent or not owned by the caller."""

    default_message = "Domain not found or does not belong to you"


class InternalSyncError(SyncRequestError):
    """Raised when an unexpected fault interrupted the sync."""

    default_message = "Internal server error"


# ============================================================================
# Infrastructure errors
# ============================================================================


class BusuanziError(SyncError):
    """Raised when the Busuanzi service cannot provide counts."""

    pass


class BusuanziUnavailableError(BusuanziError):
    """Raised for transient Busuanzi failures (rate limiting, 5xx)."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class BusuanziResponseError(BusuanziError):
    """Raised when Busuanzi answers with something that is not a counter payload."""

    pass


class StorageError(SyncError):
    """Raised when the store cannot be read or written."""

    pass
