"""Custom exceptions for ride management."""


class LocalPersistenceError(Exception):
    """Raised when the browser's booked-rides cache cannot be read or written."""
    pass


class RemoteDeleteError(Exception):
    """Raised when a booked ride could not be removed from the shared listings."""
    pass


class RideStoreError(Exception):
    """Raised when the shared ride store fails for a reason other than a missing ride."""
    pass


class ClaimNotFoundError(Exception):
    """Raised when a ride is not in the caller's booked rides."""
    pass
