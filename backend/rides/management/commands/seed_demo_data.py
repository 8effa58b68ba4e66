from django.core.management.base import BaseCommand
from django.db import transaction

from rides.models import RidePosting
from transit.models import BusRoute, BusStop

DEMO_RIDES = [
    {"name": "Alice Wonderland", "origin": "Central Park", "destination": "Times Square", "time_to_go": "09:00", "vehicle": "car", "gender": "female", "seating_capacity": 4, "contact_number": "5550101000"},
    {"name": "Bob The Builder", "origin": "Brooklyn Bridge", "destination": "Grand Central", "time_to_go": "10:30", "vehicle": "bike", "gender": "male", "seating_capacity": 2, "contact_number": "5550102000"},
    {"name": "Charlie Chaplin", "origin": "Downtown Core", "destination": "Wall Street", "time_to_go": "08:15", "vehicle": "auto", "gender": "male", "seating_capacity": 3, "contact_number": "5550103000"},
    {"name": "Diana Prince", "origin": "Times Square", "destination": "Central Park", "time_to_go": "17:00", "vehicle": "car", "gender": "female", "seating_capacity": 3, "contact_number": "5550104000"},
    {"name": "Edward Scissorhands", "origin": "Grand Central", "destination": "Brooklyn Bridge", "time_to_go": "18:30", "vehicle": "car", "gender": "male", "seating_capacity": 5, "contact_number": "5550105000"},
    {"name": "Fiona Gallagher", "origin": "Wall Street", "destination": "University Campus", "time_to_go": "09:45", "vehicle": "auto", "gender": "female", "seating_capacity": 2, "contact_number": "5550106000"},
    {"name": "Gary Goodspeed", "origin": "City Park", "destination": "Mall", "time_to_go": "11:00", "vehicle": "bike", "gender": "male", "seating_capacity": 1, "contact_number": "5550107000"},
    {"name": "Helen Parr", "origin": "Suburbia", "destination": "Downtown Core", "time_to_go": "14:30", "vehicle": "car", "gender": "female", "seating_capacity": 6, "contact_number": "5550108000"},
]

DEMO_BUS_ROUTES = [
    {
        "state": "California",
        "district": "Los Angeles County",
        "city": "Los Angeles",
        "route_name_or_number": "Route 66 Express",
        "stops": [
            ("Downtown LA", "08:00"),
            ("Hollywood", "08:30"),
            ("Santa Monica Pier", "09:15"),
        ],
    },
    {
        "state": "New York",
        "district": "New York County",
        "city": "New York City",
        "route_name_or_number": "Crosstown M57",
        "stops": [
            ("72nd St & Broadway", "10:00"),
            ("5th Ave & 57th St", "10:20"),
            ("1st Ave & 57th St", "10:45"),
        ],
    },
]


class Command(BaseCommand):
    help = "Load demo ride postings and bus routes."

    def add_arguments(self, parser):
        parser.add_argument(
            "--flush",
            action="store_true",
            help="Delete existing postings and bus routes first.",
        )

    @transaction.atomic
    def handle(self, *args, **options):
        if options["flush"]:
            RidePosting.objects.all().delete()
            BusRoute.objects.all().delete()

        for ride in DEMO_RIDES:
            RidePosting.objects.create(**ride)

        for route_data in DEMO_BUS_ROUTES:
            route_data = dict(route_data)
            stops = route_data.pop("stops")
            route = BusRoute.objects.create(**route_data)
            BusStop.objects.bulk_create([
                BusStop(route=route, stop_name=name, scheduled_time=time, position=index)
                for index, (name, time) in enumerate(stops)
            ])

        self.stdout.write(
            self.style.SUCCESS(
                f"Loaded {len(DEMO_RIDES)} ride postings and {len(DEMO_BUS_ROUTES)} bus routes."
            )
        )
