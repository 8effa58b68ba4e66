"""Tells what to show in the Django admin interface for rides app"""

from django.contrib import admin
from .models import RidePosting

@admin.register(RidePosting)
class RidePostingAdmin(admin.ModelAdmin):
    """Ride posting admin"""
    list_display = ['id', 'name', 'vehicle', 'origin', 'destination', 'time_to_go', 'seating_capacity', 'created_at']
    list_filter = ['vehicle', 'gender', 'created_at']
    search_fields = ['name', 'contact_number', 'origin', 'destination', 'vehicle_number']
    readonly_fields = ['id', 'created_at']
    date_hierarchy = 'created_at'
