"""
Ride management service - Core ride lifecycle operations.

This module handles:
    - Sharing (posting) rides
    - Querying the shared listings
    - Booking a ride into the browser's "Your Rides" list
    - Removing rides from "Your Rides"
"""

from .ride_lifecycle import (
    ABORTED,
    CLAIMED,
    CLAIMED_LOCALLY_ONLY,
    ClaimResult,
    UnclaimResult,
    share_ride,
    list_rides,
    claim,
    retry_remote_delete,
    list_claims,
    unclaim,
)

from .stores import (
    ClaimCache,
    RideRecordStore,
    SessionClaimCache,
)

from .exceptions import (
    LocalPersistenceError,
    RemoteDeleteError,
    RideStoreError,
    ClaimNotFoundError,
)

__all__ = [
    # Lifecycle operations
    "share_ride",
    "list_rides",
    "claim",
    "retry_remote_delete",
    "list_claims",
    "unclaim",
    # Results
    "ClaimResult",
    "UnclaimResult",
    "CLAIMED",
    "CLAIMED_LOCALLY_ONLY",
    "ABORTED",
    # Collaborators
    "ClaimCache",
    "RideRecordStore",
    "SessionClaimCache",
    # Exceptions
    "LocalPersistenceError",
    "RemoteDeleteError",
    "RideStoreError",
    "ClaimNotFoundError",
]
