from django.db import models


class BusRoute(models.Model):
    """A bus route shared by a conductor or driver"""

    state = models.CharField(max_length=100, db_index=True)
    district = models.CharField(max_length=100, db_index=True)
    city = models.CharField(max_length=100)
    route_name_or_number = models.CharField(max_length=100)
    bus_number = models.CharField(max_length=20, blank=True, default='')

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'bus_routes'
        ordering = ['state', 'district', 'city', 'route_name_or_number']

    def __str__(self):
        return f"{self.route_name_or_number} ({self.city}, {self.district}, {self.state})"


class BusStop(models.Model):
    """One stop on a bus route with its scheduled time."""

    route = models.ForeignKey(
        BusRoute,
        on_delete=models.CASCADE,
        related_name='stops'
    )
    stop_name = models.CharField(max_length=255)
    scheduled_time = models.CharField(max_length=5)  # HH:MM, 24-hour
    position = models.PositiveIntegerField()  # 0 = first stop

    class Meta:
        db_table = 'bus_stops'
        ordering = ['position']
        constraints = [
            models.UniqueConstraint(
                fields=['route', 'position'],
                name='unique_route_stop_position'
            )
        ]

    def __str__(self):
        return f"{self.stop_name} @ {self.scheduled_time}"
