"""
Core ride lifecycle operations.

A shared ride moves from the public listings to one browser's "Your Rides"
list when it is booked. Booking is a move, not a copy: the booked snapshot
is written to the claim cache first and only then deleted from the shared
store, so a ride can never disappear from the listings without the booker
keeping a record of it.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone as dt_timezone
from typing import Any, Dict, List, Optional

from django.utils import timezone
from django.utils.dateparse import parse_datetime

from rides.models import RidePosting
from .exceptions import (
    ClaimNotFoundError,
    LocalPersistenceError,
    RemoteDeleteError,
    RideStoreError,
)
from .stores import NOT_FOUND, ClaimCache, RideRecordStore

logger = logging.getLogger(__name__)

CLAIMED = "claimed"
CLAIMED_LOCALLY_ONLY = "claimed_locally_only"
ABORTED = "aborted"


@dataclass
class ClaimResult:
    """Result object for booking a ride."""
    status: str
    ride: Dict[str, Any]
    message: str = ""
    error: Optional[Exception] = None
    error_code: Optional[str] = None
    already_claimed: bool = False
    listing: Optional[List[Dict[str, Any]]] = None
    dial_number: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.status == CLAIMED

    @property
    def recorded_locally(self) -> bool:
        return self.status != ABORTED


@dataclass
class UnclaimResult:
    """Result object for removing a ride from "Your Rides"."""
    success: bool
    ride_id: str
    removed: bool = False
    message: str = ""
    error: Optional[Exception] = None
    error_code: Optional[str] = None


# ===================== Listing =====================

def _contains(value: Optional[str], needle: Optional[str]) -> bool:
    needle = (needle or "").strip()
    if not needle:
        return True
    return needle.casefold() in (value or "").casefold()


def list_rides(
    store: Optional[RideRecordStore] = None,
    vehicle: Optional[str] = None,
    origin: Optional[str] = None,
    destination: Optional[str] = None,
) -> List[RidePosting]:
    """
    Currently listed rides matching every supplied filter.

    Args:
        store: Ride store to read from
        vehicle: Exact vehicle kind (bike/car/auto)
        origin: Case-insensitive substring of the origin
        destination: Case-insensitive substring of the destination

    Returns:
        Postings in store order (newest first)
    """
    store = store or RideRecordStore()
    return [
        ride for ride in store.query(vehicle=vehicle)
        if _contains(ride.origin, origin) and _contains(ride.destination, destination)
    ]


def share_ride(data: Dict[str, Any], store: Optional[RideRecordStore] = None) -> RidePosting:
    """
    Validate and store a new ride posting.

    Raises:
        rest_framework.exceptions.ValidationError: on invalid fields or a
            seating capacity above the vehicle's ceiling
        RideStoreError: if the posting could not be stored
    """
    from rides.serializers import RidePostingCreateSerializer

    store = store or RideRecordStore()
    serializer = RidePostingCreateSerializer(data=data)
    serializer.is_valid(raise_exception=True)

    ride_id = store.insert(serializer.validated_data)
    logger.info("Ride %s shared (%s)", ride_id, serializer.validated_data["vehicle"])
    return store.get(ride_id)


# ===================== Booking =====================

def _aborted(ride: Dict[str, Any], exc: LocalPersistenceError) -> ClaimResult:
    logger.warning("Booking of ride %s aborted: %s", ride.get("id"), exc)
    return ClaimResult(
        status=ABORTED,
        ride=ride,
        message="Could not save this ride to 'Your Rides'.",
        error=exc,
        error_code="local_persistence_failed",
    )


def _delete_from_store(ride_id: str, store: RideRecordStore) -> Optional[RemoteDeleteError]:
    """Remove a booked ride from the shared listings; a missing ride counts as removed."""
    try:
        outcome = store.delete_by_id(ride_id)
    except RideStoreError as exc:
        error = RemoteDeleteError(f"Could not remove ride {ride_id} from available listings")
        error.__cause__ = exc
        logger.warning("Ride %s booked locally but not removed from listings: %s", ride_id, exc)
        return error

    if outcome == NOT_FOUND:
        logger.info("Ride %s was already gone from the listings", ride_id)
    return None


def _claimed_locally_only(ride: Dict[str, Any], error: RemoteDeleteError, already_claimed: bool) -> ClaimResult:
    return ClaimResult(
        status=CLAIMED_LOCALLY_ONLY,
        ride=ride,
        message=(
            "Ride saved to 'Your Rides', but it could not be removed from the "
            "available listings. It may already be taken by someone else."
        ),
        error=error,
        error_code="remote_delete_failed",
        already_claimed=already_claimed,
    )


def claim(
    ride: Dict[str, Any],
    claim_cache: ClaimCache,
    store: Optional[RideRecordStore] = None,
    listing: Optional[List[Dict[str, Any]]] = None,
) -> ClaimResult:
    """
    Book a listed ride for the current browser.

    Steps run strictly in order:
        1. read the claim cache; a ride already present is not re-added
        2. append the ride and persist the cache (failure aborts, store untouched)
        3. delete the ride from the shared store (failure keeps the local entry)
        4. drop the ride from the caller's listing without re-querying
        5. hand back the contact number to dial

    Args:
        ride: Snapshot of the posting as it was listed (must carry "id")
        claim_cache: The browser's booked rides
        store: Shared ride store
        listing: Rides currently shown to the caller, if any

    Returns:
        ClaimResult with status claimed, claimed_locally_only or aborted
    """
    store = store or RideRecordStore()
    ride = dict(ride)
    ride_id = str(ride["id"])
    ride["id"] = ride_id

    try:
        booked = claim_cache.read_all()
    except LocalPersistenceError as exc:
        return _aborted(ride, exc)

    already_claimed = any(str(entry.get("id")) == ride_id for entry in booked)
    if not already_claimed:
        try:
            claim_cache.write_all(booked + [ride])
        except LocalPersistenceError as exc:
            return _aborted(ride, exc)

    error = _delete_from_store(ride_id, store)
    if error is not None:
        return _claimed_locally_only(ride, error, already_claimed)

    remaining = None
    if listing is not None:
        remaining = [item for item in listing if str(item.get("id")) != ride_id]

    return ClaimResult(
        status=CLAIMED,
        ride=ride,
        message="Your ride booked. Check the 'Your Rides' section.",
        already_claimed=already_claimed,
        listing=remaining,
        dial_number=ride.get("contact_number") or None,
    )


def retry_remote_delete(
    ride_id: str,
    claim_cache: ClaimCache,
    store: Optional[RideRecordStore] = None,
) -> ClaimResult:
    """
    Repeat the shared-store delete for a ride already in "Your Rides".

    Raises:
        ClaimNotFoundError: if the ride is not booked by this browser
        LocalPersistenceError: if the claim cache cannot be read
    """
    store = store or RideRecordStore()
    ride_id = str(ride_id)
    ride = next((entry for entry in claim_cache.read_all() if str(entry.get("id")) == ride_id), None)
    if ride is None:
        raise ClaimNotFoundError(f"Ride {ride_id} is not in your booked rides")

    error = _delete_from_store(ride_id, store)
    if error is not None:
        return _claimed_locally_only(ride, error, already_claimed=True)

    return ClaimResult(
        status=CLAIMED,
        ride=ride,
        message="Ride removed from available listings.",
        already_claimed=True,
        dial_number=ride.get("contact_number") or None,
    )


# ===================== Your Rides =====================

def _posted_at(ride: Dict[str, Any]) -> Optional[datetime]:
    try:
        posted = parse_datetime(str(ride.get("created_at") or ""))
    except ValueError:
        return None
    if posted is not None and timezone.is_naive(posted):
        posted = timezone.make_aware(posted, dt_timezone.utc)
    return posted


def list_claims(claim_cache: ClaimCache) -> List[Dict[str, Any]]:
    """Booked rides, most recently posted first; rides without a usable timestamp go last."""
    booked = [(ride, _posted_at(ride)) for ride in claim_cache.read_all()]
    dated = [(ride, posted) for ride, posted in booked if posted is not None]
    undated = [ride for ride, posted in booked if posted is None]
    dated.sort(key=lambda item: item[1], reverse=True)
    return [ride for ride, _ in dated] + undated


def unclaim(ride_id: str, claim_cache: ClaimCache) -> UnclaimResult:
    """
    Remove a ride from the browser's booked rides.

    Never touches the shared store. Removing an id that is not booked is a
    no-op. When the write fails the cache keeps its previous content.
    """
    ride_id = str(ride_id)
    try:
        booked = claim_cache.read_all()
        remaining = [ride for ride in booked if str(ride.get("id")) != ride_id]
        if len(remaining) == len(booked):
            return UnclaimResult(
                success=True,
                ride_id=ride_id,
                removed=False,
                message="Ride was not in Your Rides.",
            )
        claim_cache.write_all(remaining)
    except LocalPersistenceError as exc:
        logger.warning("Could not remove ride %s from booked rides: %s", ride_id, exc)
        return UnclaimResult(
            success=False,
            ride_id=ride_id,
            message="Could not remove the ride.",
            error=exc,
            error_code="local_persistence_failed",
        )

    return UnclaimResult(
        success=True,
        ride_id=ride_id,
        removed=True,
        message="The ride has been removed from Your Rides.",
    )
