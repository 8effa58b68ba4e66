"""
Storage collaborators used by the ride lifecycle.

RideRecordStore wraps the shared ride_postings table that every user reads
from. Claim caches hold the rides one browser has booked; SessionClaimCache
keeps them in the Django session so they survive page reloads but stay on
the device that booked them.
"""

import logging
from typing import Any, Dict, List, Optional

from django.conf import settings
from django.db import DatabaseError

from rides.models import RidePosting
from .exceptions import LocalPersistenceError, RideStoreError

logger = logging.getLogger(__name__)

DELETED = "deleted"
NOT_FOUND = "not_found"


class RideRecordStore:
    """Shared collection of ride postings, newest first."""

    def insert(self, data: Dict[str, Any]) -> str:
        try:
            posting = RidePosting.objects.create(**data)
        except DatabaseError as exc:
            raise RideStoreError("Could not store the ride posting") from exc
        return posting.id

    def get(self, ride_id: str) -> Optional[RidePosting]:
        return RidePosting.objects.filter(id=ride_id).first()

    def query(self, vehicle: Optional[str] = None) -> List[RidePosting]:
        qs = RidePosting.objects.all()
        if vehicle:
            qs = qs.filter(vehicle=vehicle)
        return list(qs.order_by('-created_at'))

    def delete_by_id(self, ride_id: str) -> str:
        """
        Delete a posting if it still exists.

        Returns DELETED or NOT_FOUND. Whichever claimant deletes first wins;
        later deletes of the same id see NOT_FOUND.

        Raises:
            RideStoreError: if the database refused the delete
        """
        try:
            deleted, _ = RidePosting.objects.filter(id=ride_id).delete()
        except DatabaseError as exc:
            raise RideStoreError(f"Could not delete ride {ride_id}") from exc
        return DELETED if deleted else NOT_FOUND


class ClaimCache:
    """Per-browser list of booked rides."""

    def read_all(self) -> List[Dict[str, Any]]:
        raise NotImplementedError

    def write_all(self, rides: List[Dict[str, Any]]) -> None:
        raise NotImplementedError


class SessionClaimCache(ClaimCache):
    """Booked rides stored in the Django session of the current browser."""

    def __init__(self, session, key: Optional[str] = None, max_entries: Optional[int] = None):
        config = settings.RIDESHARE
        self.session = session
        self.key = key or config["CLAIM_CACHE_SESSION_KEY"]
        self.max_entries = max_entries if max_entries is not None else config["CLAIM_CACHE_MAX_ENTRIES"]

    def read_all(self) -> List[Dict[str, Any]]:
        try:
            rides = self.session.get(self.key, [])
        except Exception as exc:
            raise LocalPersistenceError("Could not load your booked rides") from exc
        return [dict(ride) for ride in rides]

    def write_all(self, rides: List[Dict[str, Any]]) -> None:
        rides = [dict(ride) for ride in rides]
        had_key = self.key in self.session
        previous = self.session.get(self.key)

        # The quota only blocks growth; a cache already over it can still shrink
        if self.max_entries and len(rides) > self.max_entries and len(rides) > len(previous or []):
            raise LocalPersistenceError(
                f"Booked rides quota exceeded ({self.max_entries} rides max)"
            )

        self.session[self.key] = rides
        try:
            # Save now, not at the end of the request: the write has to be
            # durable before the shared posting is deleted.
            self.session.save()
        except Exception as exc:
            if had_key:
                self.session[self.key] = previous
            else:
                self.session.pop(self.key, None)
            logger.exception("Failed to persist booked rides to session")
            raise LocalPersistenceError("Could not save your booked rides") from exc
