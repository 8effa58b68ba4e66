from django.contrib import admin
from .models import BusRoute, BusStop


class BusStopInline(admin.TabularInline):
    model = BusStop
    extra = 0
    ordering = ("position",)


@admin.register(BusRoute)
class BusRouteAdmin(admin.ModelAdmin):
    list_display = ("route_name_or_number", "city", "district", "state", "bus_number", "created_at")
    list_filter = ("state", "district")
    search_fields = ("route_name_or_number", "city", "bus_number", "stops__stop_name")
    inlines = [BusStopInline]
