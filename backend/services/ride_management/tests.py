from datetime import timedelta
from unittest.mock import patch

from django.contrib.sessions.backends.db import SessionStore
from django.db import DatabaseError
from django.test import TestCase, override_settings
from django.utils import timezone
from rest_framework.exceptions import ValidationError

from rides.models import RidePosting
from rides.serializers import RidePostingSerializer
from services.ride_management import (
    ABORTED,
    CLAIMED,
    CLAIMED_LOCALLY_ONLY,
    ClaimCache,
    ClaimNotFoundError,
    LocalPersistenceError,
    RemoteDeleteError,
    RideRecordStore,
    RideStoreError,
    SessionClaimCache,
    claim,
    list_claims,
    list_rides,
    retry_remote_delete,
    share_ride,
    unclaim,
)


class FakeClaimCache(ClaimCache):
    """In-memory claim cache that can be told to fail."""

    def __init__(self, rides=None, fail_reads=False, fail_writes=False):
        self.rides = [dict(ride) for ride in rides or []]
        self.fail_reads = fail_reads
        self.fail_writes = fail_writes
        self.writes = 0

    def read_all(self):
        if self.fail_reads:
            raise LocalPersistenceError("storage unavailable")
        return [dict(ride) for ride in self.rides]

    def write_all(self, rides):
        if self.fail_writes:
            raise LocalPersistenceError("quota exceeded")
        self.writes += 1
        self.rides = [dict(ride) for ride in rides]

    def ids(self):
        return [ride["id"] for ride in self.rides]


class FailingDeleteStore(RideRecordStore):
    def delete_by_id(self, ride_id):
        raise RideStoreError("permission denied")


class CacheWatchingStore(RideRecordStore):
    """Records what the claim cache held at the moment of each delete."""

    def __init__(self, cache):
        self.cache = cache
        self.cache_at_delete = []

    def delete_by_id(self, ride_id):
        self.cache_at_delete.append([ride["id"] for ride in self.cache.read_all()])
        return super().delete_by_id(ride_id)


def make_posting(**overrides):
    data = {
        "name": "Alice Wonderland",
        "contact_number": "9876543210",
        "origin": "Central Park",
        "destination": "Times Square",
        "time_to_go": "09:00",
        "vehicle": "car",
        "seating_capacity": 4,
        "gender": "female",
    }
    data.update(overrides)
    return RidePosting.objects.create(**data)


def snapshot(posting):
    return dict(RidePostingSerializer(posting).data)


class ClaimTests(TestCase):
    def setUp(self):
        self.store = RideRecordStore()
        self.posting = make_posting()
        self.other = make_posting(name="Diana Prince", origin="Times Square", destination="Central Park")
        self.ride = snapshot(self.posting)

    def test_claim_moves_ride_into_cache_and_out_of_store(self):
        cache = FakeClaimCache()
        listing = [self.ride, snapshot(self.other)]

        result = claim(self.ride, cache, self.store, listing=listing)

        self.assertEqual(result.status, CLAIMED)
        self.assertTrue(result.success)
        self.assertIsNone(result.error)
        self.assertEqual(cache.ids(), [self.posting.id])
        self.assertFalse(RidePosting.objects.filter(id=self.posting.id).exists())
        self.assertEqual([item["id"] for item in result.listing], [self.other.id])
        self.assertEqual(result.dial_number, "9876543210")

    def test_claim_twice_keeps_single_entry(self):
        cache = FakeClaimCache()

        first = claim(self.ride, cache, self.store)
        second = claim(self.ride, cache, self.store)

        self.assertEqual(first.status, CLAIMED)
        self.assertEqual(second.status, CLAIMED)
        self.assertFalse(first.already_claimed)
        self.assertTrue(second.already_claimed)
        self.assertEqual(cache.ids(), [self.posting.id])
        self.assertEqual(cache.writes, 1)

    def test_failed_local_write_aborts_without_touching_store(self):
        cache = FakeClaimCache(fail_writes=True)

        with patch.object(self.store, "delete_by_id") as mock_delete:
            result = claim(self.ride, cache, self.store)

        self.assertEqual(result.status, ABORTED)
        self.assertFalse(result.recorded_locally)
        self.assertIsInstance(result.error, LocalPersistenceError)
        self.assertEqual(result.error_code, "local_persistence_failed")
        mock_delete.assert_not_called()
        self.assertEqual(cache.ids(), [])
        self.assertIn(self.posting.id, [ride.id for ride in list_rides(self.store, vehicle="car")])

    def test_unreadable_cache_aborts(self):
        cache = FakeClaimCache(fail_reads=True)

        result = claim(self.ride, cache, self.store)

        self.assertEqual(result.status, ABORTED)
        self.assertTrue(RidePosting.objects.filter(id=self.posting.id).exists())

    def test_failed_remote_delete_keeps_local_claim(self):
        cache = FakeClaimCache()
        listing = [self.ride]

        result = claim(self.ride, cache, FailingDeleteStore(), listing=listing)

        self.assertEqual(result.status, CLAIMED_LOCALLY_ONLY)
        self.assertTrue(result.recorded_locally)
        self.assertIsInstance(result.error, RemoteDeleteError)
        self.assertIsInstance(result.error.__cause__, RideStoreError)
        self.assertEqual(result.error_code, "remote_delete_failed")
        self.assertEqual(cache.ids(), [self.posting.id])
        self.assertTrue(RidePosting.objects.filter(id=self.posting.id).exists())
        # Listing and dial steps only follow a successful delete
        self.assertIsNone(result.listing)
        self.assertIsNone(result.dial_number)

    def test_already_deleted_ride_counts_as_claimed(self):
        first_cache = FakeClaimCache()
        second_cache = FakeClaimCache()

        first = claim(self.ride, first_cache, self.store)
        second = claim(self.ride, second_cache, self.store)

        self.assertEqual(first.status, CLAIMED)
        self.assertEqual(second.status, CLAIMED)
        self.assertEqual(first_cache.ids(), [self.posting.id])
        self.assertEqual(second_cache.ids(), [self.posting.id])

    def test_cache_holds_ride_before_store_delete(self):
        cache = FakeClaimCache()
        store = CacheWatchingStore(cache)

        claim(self.ride, cache, store)

        self.assertEqual(store.cache_at_delete, [[self.posting.id]])

    def test_ride_without_contact_number_has_nothing_to_dial(self):
        posting = make_posting(contact_number="")
        result = claim(snapshot(posting), FakeClaimCache(), self.store)

        self.assertEqual(result.status, CLAIMED)
        self.assertIsNone(result.dial_number)

    def test_retry_remote_delete_after_locally_only_claim(self):
        cache = FakeClaimCache()
        claim(self.ride, cache, FailingDeleteStore())

        result = retry_remote_delete(self.posting.id, cache, self.store)

        self.assertEqual(result.status, CLAIMED)
        self.assertFalse(RidePosting.objects.filter(id=self.posting.id).exists())

    def test_retry_remote_delete_requires_booked_ride(self):
        with self.assertRaises(ClaimNotFoundError):
            retry_remote_delete(self.posting.id, FakeClaimCache(), self.store)


class UnclaimTests(TestCase):
    def setUp(self):
        self.posting = make_posting()
        self.ride = snapshot(self.posting)

    def test_unclaim_after_claim_removes_ride(self):
        cache = FakeClaimCache()
        claim(self.ride, cache, RideRecordStore())

        result = unclaim(self.posting.id, cache)

        self.assertTrue(result.success)
        self.assertTrue(result.removed)
        self.assertEqual(cache.ids(), [])

    def test_unclaim_absent_id_is_noop(self):
        cache = FakeClaimCache(rides=[self.ride])

        unclaim(self.posting.id, cache)
        result = unclaim(self.posting.id, cache)

        self.assertTrue(result.success)
        self.assertFalse(result.removed)
        self.assertIsNone(result.error)
        self.assertEqual(cache.writes, 1)

    def test_unclaim_write_failure_leaves_cache_unchanged(self):
        cache = FakeClaimCache(rides=[self.ride], fail_writes=True)

        result = unclaim(self.posting.id, cache)

        self.assertFalse(result.success)
        self.assertIsInstance(result.error, LocalPersistenceError)
        self.assertEqual(cache.ids(), [self.posting.id])

    def test_unclaim_never_touches_store(self):
        cache = FakeClaimCache(rides=[self.ride])

        with patch.object(RideRecordStore, "delete_by_id") as mock_delete:
            unclaim(self.posting.id, cache)

        mock_delete.assert_not_called()
        self.assertTrue(RidePosting.objects.filter(id=self.posting.id).exists())

    def test_list_claims_newest_first(self):
        cache = FakeClaimCache(rides=[
            {"id": "a", "created_at": "2024-05-01T08:00:00Z"},
            {"id": "b"},
            {"id": "c", "created_at": "2024-05-03T08:00:00Z"},
        ])

        self.assertEqual([ride["id"] for ride in list_claims(cache)], ["c", "a", "b"])

    def test_list_claims_compares_times_not_text(self):
        cache = FakeClaimCache(rides=[
            {"id": "on_the_second", "created_at": "2024-05-01T08:00:00Z"},
            {"id": "half_second_later", "created_at": "2024-05-01T08:00:00.500000Z"},
            {"id": "garbled", "created_at": "yesterday"},
        ])

        self.assertEqual(
            [ride["id"] for ride in list_claims(cache)],
            ["half_second_later", "on_the_second", "garbled"],
        )


class ListingQueryTests(TestCase):
    def setUp(self):
        self.store = RideRecordStore()
        self.central = make_posting(origin="Central Park")
        self.city = make_posting(origin="city PARK trail", destination="Mall")
        self.bridge = make_posting(origin="Brooklyn Bridge", destination="Grand Central")
        self.bike = make_posting(origin="Parkside", vehicle="bike", seating_capacity=2)

    def test_origin_substring_is_case_insensitive(self):
        ids = {ride.id for ride in list_rides(self.store, origin="Park")}
        self.assertEqual(ids, {self.central.id, self.city.id, self.bike.id})

    def test_filters_combine(self):
        rides = list_rides(self.store, vehicle="car", origin="park", destination="mall")
        self.assertEqual([ride.id for ride in rides], [self.city.id])

    def test_blank_filters_match_everything(self):
        self.assertEqual(len(list_rides(self.store, vehicle="car", origin="  ")), 3)

    def test_newest_first(self):
        now = timezone.now()
        RidePosting.objects.filter(id=self.central.id).update(created_at=now - timedelta(hours=2))
        RidePosting.objects.filter(id=self.city.id).update(created_at=now - timedelta(hours=1))
        RidePosting.objects.filter(id=self.bridge.id).update(created_at=now)

        rides = list_rides(self.store, vehicle="car")
        self.assertEqual([ride.id for ride in rides], [self.bridge.id, self.city.id, self.central.id])


class ShareRideTests(TestCase):
    def payload(self, **overrides):
        data = {
            "name": "Bob The Builder",
            "contact_number": "9876543210",
            "origin": "Brooklyn Bridge",
            "destination": "Grand Central",
            "time_to_go": "10:30",
            "vehicle": "car",
            "seating_capacity": 4,
            "gender": "male",
        }
        data.update(overrides)
        return data

    def test_share_ride_stores_posting(self):
        posting = share_ride(self.payload())

        self.assertEqual(len(posting.id), 32)
        self.assertEqual(RidePosting.objects.get(id=posting.id).origin, "Brooklyn Bridge")

    def test_car_over_seven_seats_rejected(self):
        with self.assertRaises(ValidationError) as ctx:
            share_ride(self.payload(seating_capacity=8))

        self.assertIn("seating_capacity", ctx.exception.detail)
        self.assertEqual(RidePosting.objects.count(), 0)

    def test_seat_limits_per_vehicle(self):
        for vehicle, limit in RidePosting.SEAT_LIMITS.items():
            share_ride(self.payload(vehicle=vehicle, seating_capacity=limit))
            with self.assertRaises(ValidationError):
                share_ride(self.payload(vehicle=vehicle, seating_capacity=limit + 1))

        self.assertEqual(RidePosting.objects.count(), 3)


class SessionClaimCacheTests(TestCase):
    def setUp(self):
        self.session = SessionStore()

    def test_write_is_saved_immediately(self):
        cache = SessionClaimCache(self.session)
        cache.write_all([{"id": "abc"}])

        reloaded = SessionStore(session_key=self.session.session_key)
        self.assertEqual(SessionClaimCache(reloaded).read_all(), [{"id": "abc"}])

    @override_settings(RIDESHARE={
        "CLAIM_CACHE_SESSION_KEY": "booked_rides",
        "CLAIM_CACHE_MAX_ENTRIES": 1,
        "STALE_POSTING_DAYS": 7,
    })
    def test_quota_exceeded_raises(self):
        cache = SessionClaimCache(self.session)
        cache.write_all([{"id": "one"}])

        with self.assertRaises(LocalPersistenceError):
            cache.write_all([{"id": "one"}, {"id": "two"}])

        self.assertEqual(cache.read_all(), [{"id": "one"}])

    def test_failed_save_restores_previous_value(self):
        cache = SessionClaimCache(self.session)
        cache.write_all([{"id": "one"}])

        with patch.object(self.session, "save", side_effect=DatabaseError("disk full")):
            with self.assertRaises(LocalPersistenceError):
                cache.write_all([{"id": "one"}, {"id": "two"}])

        self.assertEqual(cache.read_all(), [{"id": "one"}])

    def test_over_quota_cache_can_still_shrink(self):
        self.session["booked_rides"] = [{"id": str(n)} for n in range(5)]
        self.session.save()
        cache = SessionClaimCache(self.session, max_entries=2)

        result = unclaim("0", cache)

        self.assertTrue(result.success)
        self.assertTrue(result.removed)
        self.assertEqual([ride["id"] for ride in cache.read_all()], ["1", "2", "3", "4"])

    def test_over_quota_cache_cannot_grow(self):
        self.session["booked_rides"] = [{"id": str(n)} for n in range(3)]
        cache = SessionClaimCache(self.session, max_entries=2)

        result = claim({"id": "new", "vehicle": "car"}, cache, RideRecordStore())

        self.assertEqual(result.status, ABORTED)
        self.assertEqual(len(cache.read_all()), 3)
