from datetime import timedelta
from io import StringIO

from django.core.management import call_command
from django.test import TestCase, override_settings
from django.urls import reverse
from django.utils import timezone
from rest_framework.test import APIClient
from unittest.mock import patch

from services.ride_management import RideStoreError
from transit.models import BusRoute
from .models import RidePosting
from .tasks import purge_stale_postings_task


def share_payload(**overrides):
	data = {
		'name': 'Alice Wonderland',
		'contact_number': '9876543210',
		'origin': 'Central Park',
		'destination': 'Times Square',
		'time_to_go': '09:00',
		'vehicle': 'car',
		'seating_capacity': 4,
		'gender': 'female',
	}
	data.update(overrides)
	return data


class ShareRideTests(TestCase):
	def setUp(self):
		self.client = APIClient()
		self.url = reverse('rides:share-ride')

	@patch('rides.views.notify_ride_posted')
	def test_share_ride_creates_posting(self, mock_notify):
		response = self.client.post(self.url, share_payload(), format='json')

		self.assertEqual(response.status_code, 201)
		self.assertEqual(response.data['message'], 'Ride Shared Successfully!')
		self.assertEqual(response.data['passenger_seats'], '3')
		self.assertEqual(response.data['time_display'], '09:00 AM')
		self.assertTrue(RidePosting.objects.filter(id=response.data['id']).exists())
		mock_notify.assert_called_once()

	def test_car_with_eight_seats_is_rejected(self):
		response = self.client.post(self.url, share_payload(seating_capacity=8), format='json')

		self.assertEqual(response.status_code, 400)
		self.assertEqual(
			response.data['seating_capacity'],
			['Car seating capacity cannot be more than 7.']
		)
		self.assertEqual(RidePosting.objects.count(), 0)

	def test_bike_ceiling(self):
		response = self.client.post(
			self.url, share_payload(vehicle='bike', seating_capacity=3), format='json'
		)
		self.assertEqual(response.status_code, 400)
		self.assertIn('seating_capacity', response.data)

	@patch('rides.views.notify_ride_posted')
	def test_auto_at_ceiling_is_accepted(self, mock_notify):
		response = self.client.post(
			self.url, share_payload(vehicle='auto', seating_capacity=6), format='json'
		)
		self.assertEqual(response.status_code, 201)

	def test_form_field_rules(self):
		response = self.client.post(self.url, share_payload(
			name='A',
			contact_number='12345',
			origin='X',
			time_to_go='25:00',
			seating_capacity=0,
		), format='json')

		self.assertEqual(response.status_code, 400)
		for field in ('name', 'contact_number', 'origin', 'time_to_go', 'seating_capacity'):
			self.assertIn(field, response.data)

	def test_contact_number_must_be_digits(self):
		response = self.client.post(
			self.url, share_payload(contact_number='98765-43210'), format='json'
		)
		self.assertEqual(response.status_code, 400)
		self.assertEqual(response.data['contact_number'], ['Contact number must only contain digits.'])

	@patch('services.ride_management.stores.RideRecordStore.insert', side_effect=RideStoreError('down'))
	def test_store_failure_returns_503(self, mock_insert):
		response = self.client.post(self.url, share_payload(), format='json')

		self.assertEqual(response.status_code, 503)
		self.assertEqual(response.data['error'], 'store_unavailable')


class RideListTests(TestCase):
	def setUp(self):
		self.client = APIClient()
		now = timezone.now()
		self.park = RidePosting.objects.create(**share_payload())
		self.city = RidePosting.objects.create(**share_payload(origin='City Park', destination='Mall'))
		self.bike = RidePosting.objects.create(**share_payload(vehicle='bike', seating_capacity=1))
		RidePosting.objects.filter(id=self.park.id).update(created_at=now - timedelta(minutes=5))
		RidePosting.objects.filter(id=self.city.id).update(created_at=now)

	def test_vehicle_listing_newest_first(self):
		response = self.client.get(reverse('rides:vehicle-ride-list', kwargs={'vehicle': 'car'}))

		self.assertEqual(response.status_code, 200)
		self.assertEqual(response.data['count'], 2)
		self.assertEqual([r['id'] for r in response.data['rides']], [self.city.id, self.park.id])

	def test_driver_only_bike(self):
		response = self.client.get(reverse('rides:vehicle-ride-list', kwargs={'vehicle': 'bike'}))
		self.assertEqual(response.data['rides'][0]['passenger_seats'], '0 (Driver only)')

	def test_search_by_origin_and_destination(self):
		response = self.client.get(reverse('rides:ride-list'), {'origin': 'park', 'destination': 'MALL'})

		self.assertEqual(response.status_code, 200)
		self.assertEqual([r['id'] for r in response.data['rides']], [self.city.id])

	def test_unknown_vehicle_filter_rejected(self):
		response = self.client.get(reverse('rides:ride-list'), {'vehicle': 'boat'})
		self.assertEqual(response.status_code, 400)


@patch('rides.views.notify_ride_claimed')
class BookRideTests(TestCase):
	def setUp(self):
		self.client = APIClient()
		self.posting = RidePosting.objects.create(**share_payload())
		self.other = RidePosting.objects.create(**share_payload(name='Diana Prince'))

	def listing(self):
		response = self.client.get(reverse('rides:vehicle-ride-list', kwargs={'vehicle': 'car'}))
		return response.data['rides']

	def ride_data(self, rides, posting):
		return next(r for r in rides if r['id'] == posting.id)

	def book(self, client, ride, listing=None):
		body = {'ride': ride}
		if listing is not None:
			body['listing'] = listing
		return client.post(reverse('rides:book-ride'), body, format='json')

	def my_ride_ids(self, client):
		response = client.get(reverse('rides:my-rides'))
		return [r['id'] for r in response.data['rides']]

	def test_booking_moves_ride_to_your_rides(self, mock_notify):
		rides = self.listing()
		response = self.book(self.client, self.ride_data(rides, self.posting), listing=rides)

		self.assertEqual(response.status_code, 201)
		self.assertTrue(response.data['success'])
		self.assertEqual(response.data['status'], 'claimed')
		self.assertEqual(response.data['dial'], 'tel:9876543210')
		self.assertEqual([r['id'] for r in response.data['listing']], [self.other.id])
		self.assertEqual(self.my_ride_ids(self.client), [self.posting.id])
		self.assertNotIn(self.posting.id, [r['id'] for r in self.listing()])
		mock_notify.assert_called_once_with(self.posting.id, 'car')

	def test_booking_twice_is_idempotent(self, mock_notify):
		ride = self.ride_data(self.listing(), self.posting)

		self.book(self.client, ride)
		response = self.book(self.client, ride)

		self.assertEqual(response.status_code, 201)
		self.assertTrue(response.data['already_booked'])
		self.assertEqual(self.my_ride_ids(self.client), [self.posting.id])

	def test_your_rides_shows_display_helpers(self, mock_notify):
		self.book(self.client, self.ride_data(self.listing(), self.posting))

		response = self.client.get(reverse('rides:my-rides'))

		self.assertEqual(response.status_code, 200)
		ride = response.data['rides'][0]
		self.assertEqual(ride['passenger_seats'], '3')
		self.assertEqual(ride['time_display'], '09:00 AM')
		self.assertEqual(ride['origin'], 'Central Park')

	def test_two_browsers_book_same_ride(self, mock_notify):
		second_client = APIClient()
		ride = self.ride_data(self.listing(), self.posting)

		first = self.book(self.client, ride)
		second = self.book(second_client, ride)

		self.assertEqual(first.status_code, 201)
		self.assertEqual(second.status_code, 201)
		self.assertFalse(RidePosting.objects.filter(id=self.posting.id).exists())
		self.assertEqual(self.my_ride_ids(self.client), [self.posting.id])
		self.assertEqual(self.my_ride_ids(second_client), [self.posting.id])

	@override_settings(RIDESHARE={
		'CLAIM_CACHE_SESSION_KEY': 'booked_rides',
		'CLAIM_CACHE_MAX_ENTRIES': 1,
		'STALE_POSTING_DAYS': 7,
	})
	def test_full_your_rides_aborts_booking(self, mock_notify):
		rides = self.listing()
		self.book(self.client, self.ride_data(rides, self.other))

		response = self.book(self.client, self.ride_data(rides, self.posting))

		self.assertEqual(response.status_code, 503)
		self.assertFalse(response.data['success'])
		self.assertEqual(response.data['status'], 'aborted')
		self.assertEqual(response.data['error'], 'local_persistence_failed')
		self.assertTrue(RidePosting.objects.filter(id=self.posting.id).exists())
		self.assertIn(self.posting.id, [r['id'] for r in self.listing()])
		self.assertEqual(self.my_ride_ids(self.client), [self.other.id])

	def test_listing_delete_failure_keeps_booking(self, mock_notify):
		ride = self.ride_data(self.listing(), self.posting)

		with patch(
			'services.ride_management.stores.RideRecordStore.delete_by_id',
			side_effect=RideStoreError('permission denied')
		):
			response = self.book(self.client, ride)

		self.assertEqual(response.status_code, 202)
		self.assertEqual(response.data['status'], 'claimed_locally_only')
		self.assertEqual(response.data['error'], 'remote_delete_failed')
		self.assertNotIn('dial', response.data)
		self.assertEqual(self.my_ride_ids(self.client), [self.posting.id])
		self.assertTrue(RidePosting.objects.filter(id=self.posting.id).exists())
		mock_notify.assert_not_called()

		retry = self.client.post(
			reverse('rides:retry-listing-removal', kwargs={'ride_id': self.posting.id})
		)
		self.assertEqual(retry.status_code, 200)
		self.assertEqual(retry.data['status'], 'claimed')
		self.assertFalse(RidePosting.objects.filter(id=self.posting.id).exists())

	def test_retry_for_unbooked_ride_is_404(self, mock_notify):
		response = self.client.post(
			reverse('rides:retry-listing-removal', kwargs={'ride_id': self.posting.id})
		)
		self.assertEqual(response.status_code, 404)

	def test_booking_requires_ride_id(self, mock_notify):
		response = self.book(self.client, {'vehicle': 'car'})
		self.assertEqual(response.status_code, 400)

	def test_remove_from_your_rides(self, mock_notify):
		ride = self.ride_data(self.listing(), self.posting)
		self.book(self.client, ride)
		url = reverse('rides:remove-my-ride', kwargs={'ride_id': self.posting.id})

		response = self.client.delete(url)
		self.assertEqual(response.status_code, 200)
		self.assertTrue(response.data['removed'])
		self.assertEqual(self.my_ride_ids(self.client), [])

		# Second removal is a no-op
		response = self.client.delete(url)
		self.assertEqual(response.status_code, 200)
		self.assertFalse(response.data['removed'])

		# Unbooking never puts the ride back on the listings
		self.assertFalse(RidePosting.objects.filter(id=self.posting.id).exists())


class StalePostingCleanupTests(TestCase):
	def setUp(self):
		self.fresh = RidePosting.objects.create(**share_payload())
		self.stale = RidePosting.objects.create(**share_payload(name='Old Timer'))
		RidePosting.objects.filter(id=self.stale.id).update(
			created_at=timezone.now() - timedelta(days=10)
		)

	def test_cleanup_command_dry_run(self):
		out = StringIO()
		call_command('cleanup_stale_postings', '--days', '7', '--dry-run', stdout=out)

		self.assertIn('Would delete 1', out.getvalue())
		self.assertEqual(RidePosting.objects.count(), 2)

	def test_cleanup_command(self):
		out = StringIO()
		call_command('cleanup_stale_postings', '--days', '7', stdout=out)

		self.assertIn('Deleted 1', out.getvalue())
		self.assertEqual(list(RidePosting.objects.values_list('id', flat=True)), [self.fresh.id])

	def test_purge_task(self):
		result = purge_stale_postings_task.delay(days=7)

		self.assertEqual(result.get(), 1)
		self.assertFalse(RidePosting.objects.filter(id=self.stale.id).exists())


class SeedDemoDataTests(TestCase):
	def test_seed_and_flush(self):
		call_command('seed_demo_data', stdout=StringIO())
		call_command('seed_demo_data', '--flush', stdout=StringIO())

		self.assertEqual(RidePosting.objects.count(), 8)
		self.assertEqual(BusRoute.objects.count(), 2)
		self.assertEqual(BusRoute.objects.first().stops.count(), 3)
