from rest_framework import status
from rest_framework.views import APIView
from rest_framework.response import Response

from .serializers import BusRouteSerializer, BusRouteFilterSerializer
from . import services


class BusRouteListCreateView(APIView):
    """
    GET  -> Search bus routes by state, district and city
    POST -> Share a new bus route with its stops
    """

    def get(self, request):
        filters = BusRouteFilterSerializer(data=request.query_params.dict())
        filters.is_valid(raise_exception=True)

        routes = services.filter_routes(**filters.validated_data)
        if routes is None:
            return Response({
                "filters_applied": False,
                "count": 0,
                "routes": [],
                "message": "Please use the filters to find bus routes.",
            })

        serializer = BusRouteSerializer(routes, many=True)
        resp = {
            "filters_applied": True,
            "count": len(serializer.data),
            "routes": serializer.data,
        }
        if not routes:
            resp["message"] = "No bus schedules found matching your criteria."
        return Response(resp)

    def post(self, request):
        serializer = BusRouteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        serializer.save()

        return Response({
            **serializer.data,
            "message": "Bus Route Shared Successfully!",
        }, status=status.HTTP_201_CREATED)


class StateListView(APIView):
    """GET: States that have shared bus routes (filter dropdown)."""

    def get(self, request):
        states = services.list_states()
        return Response({"count": len(states), "states": states})


class DistrictListView(APIView):
    """GET: Districts of ?state= that have shared bus routes."""

    def get(self, request):
        state = request.query_params.get("state", "")
        districts = services.list_districts(state)
        return Response({"state": state, "count": len(districts), "districts": districts})
