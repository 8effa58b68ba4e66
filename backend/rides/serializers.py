from rest_framework import serializers

from common.utils import TIME_24H_PATTERN, format_time_12h, passenger_seats
from .models import RidePosting


class RidePostingSerializer(serializers.ModelSerializer):
    """Serializer for listed ride postings"""
    passenger_seats = serializers.SerializerMethodField()
    time_display = serializers.SerializerMethodField()

    class Meta:
        model = RidePosting
        fields = ['id', 'name', 'contact_number', 'origin', 'destination',
                  'time_to_go', 'time_display', 'vehicle', 'vehicle_number',
                  'seating_capacity', 'passenger_seats', 'gender', 'created_at']
        read_only_fields = fields

    def get_passenger_seats(self, obj):
        return passenger_seats(obj.seating_capacity)

    def get_time_display(self, obj):
        return format_time_12h(obj.time_to_go)


class RidePostingCreateSerializer(serializers.ModelSerializer):
    """
    Validates the "Share Your Ride" form.

    Seating capacity includes the driver and is capped per vehicle
    (see RidePosting.SEAT_LIMITS).
    """
    name = serializers.CharField(
        max_length=100,
        min_length=2,
        error_messages={'min_length': 'Full name must be at least 2 characters.'}
    )
    contact_number = serializers.RegexField(
        r'^\d+$',
        min_length=10,
        max_length=15,
        error_messages={
            'invalid': 'Contact number must only contain digits.',
            'min_length': 'Contact number must be at least 10 digits.',
            'max_length': 'Contact number can be at most 15 digits.',
        }
    )
    origin = serializers.CharField(
        max_length=255,
        min_length=3,
        error_messages={'min_length': 'Origin must be at least 3 characters.'}
    )
    destination = serializers.CharField(
        max_length=255,
        min_length=3,
        error_messages={'min_length': 'Destination must be at least 3 characters.'}
    )
    time_to_go = serializers.RegexField(
        TIME_24H_PATTERN,
        error_messages={'invalid': 'Invalid time format (HH:MM).'}
    )
    vehicle = serializers.ChoiceField(
        choices=RidePosting.VEHICLE_CHOICES,
        error_messages={'required': 'Please select a vehicle type.'}
    )
    seating_capacity = serializers.IntegerField(
        min_value=1,
        error_messages={'min_value': 'Seating capacity must be a positive number.'}
    )
    gender = serializers.ChoiceField(
        choices=RidePosting.GENDER_CHOICES,
        error_messages={'required': 'Please select a gender.'}
    )
    vehicle_number = serializers.CharField(max_length=20, required=False, allow_blank=True, default='')

    class Meta:
        model = RidePosting
        fields = ['name', 'contact_number', 'origin', 'destination', 'time_to_go',
                  'vehicle', 'vehicle_number', 'seating_capacity', 'gender']

    def validate(self, data):
        vehicle = data['vehicle']
        limit = RidePosting.SEAT_LIMITS[vehicle]
        if data['seating_capacity'] > limit:
            raise serializers.ValidationError({
                'seating_capacity': f'{vehicle.capitalize()} seating capacity cannot be more than {limit}.'
            })
        return data


class RideSnapshotSerializer(serializers.Serializer):
    """
    A ride as the client saw it in a listing.

    Only the shape is checked here. Seat limits were enforced when the ride
    was shared and are not re-validated on booking.
    """
    id = serializers.CharField(max_length=32)
    name = serializers.CharField(required=False, allow_blank=True, default='')
    contact_number = serializers.CharField(required=False, allow_blank=True, default='')
    origin = serializers.CharField(required=False, allow_blank=True, default='')
    destination = serializers.CharField(required=False, allow_blank=True, default='')
    time_to_go = serializers.CharField(required=False, allow_blank=True, default='')
    vehicle = serializers.ChoiceField(choices=RidePosting.VEHICLE_CHOICES)
    vehicle_number = serializers.CharField(required=False, allow_blank=True, default='')
    seating_capacity = serializers.IntegerField(required=False, min_value=0, default=0)
    gender = serializers.CharField(required=False, allow_blank=True, default='')
    created_at = serializers.CharField(required=False, allow_blank=True, default='')


class ClaimedRideSerializer(RideSnapshotSerializer):
    """A ride in "Your Rides", with the same display helpers as the listings."""
    passenger_seats = serializers.SerializerMethodField()
    time_display = serializers.SerializerMethodField()

    def get_passenger_seats(self, obj):
        return passenger_seats(obj.get('seating_capacity') or 0)

    def get_time_display(self, obj):
        return format_time_12h(obj.get('time_to_go') or '')


class BookRideSerializer(serializers.Serializer):
    """Body of a booking request: the ride plus, optionally, the listing on screen."""
    ride = RideSnapshotSerializer()
    listing = serializers.ListField(
        child=serializers.DictField(),
        required=False
    )


class RideListQuerySerializer(serializers.Serializer):
    """Query parameters of the listing endpoints"""
    vehicle = serializers.ChoiceField(choices=RidePosting.VEHICLE_CHOICES, required=False)
    origin = serializers.CharField(required=False, allow_blank=True)
    destination = serializers.CharField(required=False, allow_blank=True)
