from django.db import transaction
from rest_framework import serializers

from common.utils import TIME_24H_PATTERN, format_time_12h
from .models import BusRoute, BusStop


class BusStopSerializer(serializers.ModelSerializer):
    """A stop and its scheduled arrival time"""
    stop_name = serializers.CharField(
        max_length=255,
        error_messages={'blank': 'Stop name is required.'}
    )
    scheduled_time = serializers.RegexField(
        TIME_24H_PATTERN,
        error_messages={'invalid': 'Invalid time format (HH:MM).'}
    )
    time_display = serializers.SerializerMethodField()

    class Meta:
        model = BusStop
        fields = ['stop_name', 'scheduled_time', 'time_display']

    def get_time_display(self, obj):
        return format_time_12h(obj.scheduled_time)


class BusRouteSerializer(serializers.ModelSerializer):
    """
    Bus route with its ordered stops.

    Used both to share a route (nested stops are created in order) and to
    render filtered search results.
    """
    state = serializers.CharField(
        max_length=100,
        min_length=2,
        error_messages={'min_length': 'State name must be at least 2 characters.'}
    )
    district = serializers.CharField(
        max_length=100,
        min_length=2,
        error_messages={'min_length': 'District name must be at least 2 characters.'}
    )
    city = serializers.CharField(
        max_length=100,
        min_length=2,
        error_messages={'min_length': 'City name must be at least 2 characters.'}
    )
    route_name_or_number = serializers.CharField(
        max_length=100,
        error_messages={'blank': 'Route name or number is required.'}
    )
    bus_number = serializers.CharField(max_length=20, required=False, allow_blank=True, default='')
    stops = BusStopSerializer(many=True)

    class Meta:
        model = BusRoute
        fields = ['id', 'state', 'district', 'city', 'route_name_or_number',
                  'bus_number', 'stops', 'created_at']
        read_only_fields = ['id', 'created_at']

    def validate_stops(self, value):
        if not value:
            raise serializers.ValidationError('At least one stop is required.')
        return value

    @transaction.atomic
    def create(self, validated_data):
        stops = validated_data.pop('stops')
        route = BusRoute.objects.create(**validated_data)
        BusStop.objects.bulk_create([
            BusStop(route=route, position=index, **stop)
            for index, stop in enumerate(stops)
        ])
        return route


class BusRouteFilterSerializer(serializers.Serializer):
    """Query parameters for the bus schedule search"""
    state = serializers.CharField(required=False, allow_blank=True)
    district = serializers.CharField(required=False, allow_blank=True)
    city = serializers.CharField(required=False, allow_blank=True)
