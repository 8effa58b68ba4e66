# transit/urls.py

from django.urls import path

from .views import (
    BusRouteListCreateView,
    StateListView,
    DistrictListView,
)

app_name = "transit"

urlpatterns = [
    path("routes/", BusRouteListCreateView.as_view(), name="bus-routes"),
    path("states/", StateListView.as_view(), name="states"),
    path("districts/", DistrictListView.as_view(), name="districts"),
]
