# transit/services.py

from typing import List, Optional

from .models import BusRoute


def filter_routes(state: Optional[str] = None, district: Optional[str] = None, city: Optional[str] = None):
    """
    Bus routes matching the schedule search.

    State and district are picked from dropdowns and match exactly; the city
    is free text and matches case-insensitively anywhere in the name.
    Returns None when no filter is given (nothing searched yet).
    """
    state = (state or "").strip()
    district = (district or "").strip()
    city = (city or "").strip()

    if not (state or district or city):
        return None

    qs = BusRoute.objects.prefetch_related("stops")
    if state:
        qs = qs.filter(state=state)
    if district:
        qs = qs.filter(district=district)

    routes = list(qs)
    if city:
        needle = city.casefold()
        routes = [route for route in routes if needle in route.city.casefold()]
    return routes


def list_states() -> List[str]:
    """Distinct states with at least one shared route, sorted."""
    return sorted(set(BusRoute.objects.values_list("state", flat=True)))


def list_districts(state: str) -> List[str]:
    """Distinct districts of a state, sorted. Empty when no state is selected."""
    if not state:
        return []
    return sorted(set(
        BusRoute.objects.filter(state=state).values_list("district", flat=True)
    ))
