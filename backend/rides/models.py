import uuid

from django.db import models


def generate_ride_id():
    """Opaque string id, assigned when a posting is stored."""
    return uuid.uuid4().hex


class RidePosting(models.Model):
    """A shared ride offer, visible to everyone until somebody books it."""

    VEHICLE_CHOICES = [
        ('bike', 'Bike'),
        ('car', 'Car'),
        ('auto', 'Auto'),
    ]

    GENDER_CHOICES = [
        ('male', 'Male'),
        ('female', 'Female'),
        ('other', 'Other'),
    ]

    # Seating capacity ceilings (driver included), checked when a ride is shared
    SEAT_LIMITS = {
        'bike': 2,
        'car': 7,
        'auto': 6,
    }

    id = models.CharField(
        primary_key=True,
        max_length=32,
        default=generate_ride_id,
        editable=False
    )

    # Poster details
    name = models.CharField(max_length=100)
    contact_number = models.CharField(max_length=15, blank=True, default='')
    gender = models.CharField(max_length=10, choices=GENDER_CHOICES)

    # Route & timing
    origin = models.CharField(max_length=255)
    destination = models.CharField(max_length=255)
    time_to_go = models.CharField(max_length=5)  # HH:MM, 24-hour

    # Vehicle
    vehicle = models.CharField(max_length=10, choices=VEHICLE_CHOICES, db_index=True)
    vehicle_number = models.CharField(max_length=20, blank=True, default='')
    seating_capacity = models.PositiveSmallIntegerField()

    created_at = models.DateTimeField(auto_now_add=True, db_index=True)

    class Meta:
        db_table = 'ride_postings'
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.get_vehicle_display()} ride by {self.name}: {self.origin} -> {self.destination} at {self.time_to_go}"
