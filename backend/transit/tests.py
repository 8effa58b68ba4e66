from django.test import TestCase
from django.urls import reverse
from rest_framework.test import APIClient

from .models import BusRoute, BusStop


def route_payload(**overrides):
    data = {
        "state": "California",
        "district": "Los Angeles County",
        "city": "Los Angeles",
        "route_name_or_number": "Route 66 Express",
        "bus_number": "CA-66",
        "stops": [
            {"stop_name": "Downtown LA", "scheduled_time": "08:00"},
            {"stop_name": "Hollywood", "scheduled_time": "08:30"},
            {"stop_name": "Santa Monica Pier", "scheduled_time": "21:15"},
        ],
    }
    data.update(overrides)
    return data


def make_route(state, district, city, name="Local", stops=(("Main St", "07:00"),)):
    route = BusRoute.objects.create(
        state=state, district=district, city=city, route_name_or_number=name
    )
    for index, (stop_name, time) in enumerate(stops):
        BusStop.objects.create(route=route, stop_name=stop_name, scheduled_time=time, position=index)
    return route


class ShareBusRouteTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.url = reverse("transit:bus-routes")

    def test_share_route_with_stops(self):
        response = self.client.post(self.url, route_payload(), format="json")

        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.data["message"], "Bus Route Shared Successfully!")
        self.assertEqual(
            [stop["stop_name"] for stop in response.data["stops"]],
            ["Downtown LA", "Hollywood", "Santa Monica Pier"],
        )
        self.assertEqual(response.data["stops"][2]["time_display"], "09:15 PM")
        route = BusRoute.objects.get()
        self.assertEqual(list(route.stops.values_list("position", flat=True)), [0, 1, 2])

    def test_route_needs_a_stop(self):
        response = self.client.post(self.url, route_payload(stops=[]), format="json")

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data["stops"], ["At least one stop is required."])
        self.assertEqual(BusRoute.objects.count(), 0)

    def test_invalid_stop_time(self):
        response = self.client.post(
            self.url,
            route_payload(stops=[{"stop_name": "Hollywood", "scheduled_time": "8:30"}]),
            format="json",
        )

        self.assertEqual(response.status_code, 400)
        self.assertIn("stops", response.data)
        self.assertEqual(BusStop.objects.count(), 0)

    def test_short_state_name(self):
        response = self.client.post(self.url, route_payload(state="C"), format="json")
        self.assertEqual(response.status_code, 400)
        self.assertIn("state", response.data)


class BusRouteSearchTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.url = reverse("transit:bus-routes")
        self.la = make_route("California", "Los Angeles County", "Los Angeles")
        self.pasadena = make_route("California", "Los Angeles County", "Pasadena")
        self.sf = make_route("California", "San Francisco County", "San Francisco")
        self.nyc = make_route("New York", "New York County", "New York City")

    def test_no_filters_means_nothing_searched(self):
        response = self.client.get(self.url)

        self.assertEqual(response.status_code, 200)
        self.assertFalse(response.data["filters_applied"])
        self.assertEqual(response.data["routes"], [])

    def test_state_and_district_match_exactly(self):
        response = self.client.get(self.url, {"state": "California", "district": "Los Angeles County"})

        self.assertTrue(response.data["filters_applied"])
        self.assertEqual({r["id"] for r in response.data["routes"]}, {self.la.id, self.pasadena.id})

        response = self.client.get(self.url, {"state": "california"})
        self.assertEqual(response.data["count"], 0)
        self.assertEqual(response.data["message"], "No bus schedules found matching your criteria.")

    def test_city_matches_substring(self):
        response = self.client.get(self.url, {"city": "san"})
        self.assertEqual([r["id"] for r in response.data["routes"]], [self.sf.id])

        response = self.client.get(self.url, {"state": "New York", "city": "YORK"})
        self.assertEqual([r["id"] for r in response.data["routes"]], [self.nyc.id])

    def test_states_and_districts_dropdowns(self):
        response = self.client.get(reverse("transit:states"))
        self.assertEqual(response.data["states"], ["California", "New York"])

        response = self.client.get(reverse("transit:districts"), {"state": "California"})
        self.assertEqual(
            response.data["districts"],
            ["Los Angeles County", "San Francisco County"],
        )

        response = self.client.get(reverse("transit:districts"))
        self.assertEqual(response.data["districts"], [])
