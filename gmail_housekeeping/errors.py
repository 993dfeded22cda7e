"""
Error types for Gmail Housekeeping
"""


class HousekeepingError(Exception):
    """Base class for all errors raised by this package"""


class ConfigurationError(HousekeepingError):
    """Invalid run configuration (no search criteria, bad limits)"""


class AuthError(HousekeepingError):
    """Credentials missing or the OAuth exchange failed"""


class SearchError(HousekeepingError):
    """Search could not be constructed or the listing call failed"""


class PartialFetchError(HousekeepingError):
    """Metadata for a single message could not be fetched"""

    def __init__(self, message_id: str, cause: Exception):
        self.message_id = message_id
        self.cause = cause
        super().__init__(f"Error fetching message {message_id}: {cause}")


class PartialDeleteError(HousekeepingError):
    """One batchDelete chunk failed"""

    def __init__(self, chunk_number: int, size: int, cause: Exception):
        self.chunk_number = chunk_number
        self.size = size
        self.cause = cause
        super().__init__(f"Error deleting batch {chunk_number} ({size} emails): {cause}")
