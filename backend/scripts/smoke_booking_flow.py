"""End-to-end smoke test for sharing and booking a ride.

Prerequisites:
1. `python manage.py runserver` (or daphne) must be running.
2. Install dependencies once: `pip install -e ".[scripts]"`.

The script will:
- Open the car listings WebSocket feed.
- Share a car ride via REST and wait for the ride_posted event.
- Book it from a second browser session and wait for the ride_claimed event.
- Check the ride is in that session's "Your Rides" and gone from the listings.
- Remove it from "Your Rides" again.
"""

from __future__ import annotations

import json
import os
import queue
import threading
from typing import Dict

import requests
import websocket  # type: ignore

BASE_URL = os.environ.get("RIDESHARE_BASE_URL", "http://127.0.0.1:8000")
RIDES_API = f"{BASE_URL}/api/rides"

RIDE = {
    "name": "Smoke Test Driver",
    "contact_number": "9000000000",
    "origin": "Central Park",
    "destination": "Times Square",
    "time_to_go": "09:00",
    "vehicle": "car",
    "vehicle_number": "SMK-1001",
    "seating_capacity": 4,
    "gender": "other",
}


def _open_listing_socket(ready_evt: threading.Event, queue_out: queue.Queue) -> websocket.WebSocketApp:
    ws_url = BASE_URL.replace("http", "ws") + f"/ws/rides/{RIDE['vehicle']}/"

    def on_open(ws):  # type: ignore[no-untyped-def]
        print("[WS] Connected to car listings")

    def on_message(ws, message):  # type: ignore[no-untyped-def]
        payload = json.loads(message)
        print(f"[WS] Received payload: {payload}")
        if payload.get("type") == "connection_established":
            ready_evt.set()
        elif payload.get("type") in ("ride_posted", "ride_claimed"):
            queue_out.put(payload)

    def on_error(ws, error):  # type: ignore[no-untyped-def]
        print(f"[WS] Error: {error}")
        ready_evt.set()

    def on_close(_ws, *_):  # type: ignore[no-untyped-def]
        print("[WS] Connection closed")

    ws_app = websocket.WebSocketApp(
        ws_url,
        on_open=on_open,
        on_message=on_message,
        on_error=on_error,
        on_close=on_close,
    )
    threading.Thread(target=ws_app.run_forever, daemon=True).start()
    return ws_app


def _wait_for(events: queue.Queue, event_type: str, ride_id: str) -> Dict:
    while True:
        try:
            payload = events.get(timeout=10)
        except queue.Empty:
            raise TimeoutError(f"No {event_type} event for ride {ride_id} within 10 seconds")
        ride = payload.get("ride") or {}
        if payload["type"] == event_type and ride_id in (payload.get("ride_id"), ride.get("id")):
            return payload


def _share_ride(session: requests.Session) -> Dict:
    resp = session.post(f"{RIDES_API}/share/", json=RIDE, timeout=10)
    resp.raise_for_status()
    data = resp.json()
    print(f"[HTTP] {data['message']} id={data['id']}")
    return data


def _book_ride(session: requests.Session, ride: Dict) -> Dict:
    listing = session.get(f"{RIDES_API}/{RIDE['vehicle']}/", timeout=10).json()["rides"]
    resp = session.post(f"{RIDES_API}/book/", json={"ride": ride, "listing": listing}, timeout=10)
    data = resp.json()
    print(f"[HTTP] Booking response {resp.status_code}: {data['status']} | {data['message']}")
    if resp.status_code != 201:
        raise RuntimeError(f"Booking did not complete: {data}")
    return data


def main() -> None:
    poster = requests.Session()
    booker = requests.Session()

    ready_evt = threading.Event()
    events: queue.Queue = queue.Queue()
    ws_app = _open_listing_socket(ready_evt, events)
    if not ready_evt.wait(timeout=5):
        raise TimeoutError("Listing WebSocket failed to connect within 5 seconds")

    ride = _share_ride(poster)
    _wait_for(events, "ride_posted", ride["id"])

    booking = _book_ride(booker, ride)
    _wait_for(events, "ride_claimed", ride["id"])
    print(f"[RESULT] Dial {booking.get('dial')}")

    mine = booker.get(f"{RIDES_API}/mine/", timeout=10).json()
    if ride["id"] not in [r["id"] for r in mine["rides"]]:
        raise RuntimeError("Booked ride missing from Your Rides")

    listing = poster.get(f"{RIDES_API}/{RIDE['vehicle']}/", timeout=10).json()
    if ride["id"] in [r["id"] for r in listing["rides"]]:
        raise RuntimeError("Booked ride is still listed")

    resp = booker.delete(f"{RIDES_API}/mine/{ride['id']}/", timeout=10)
    resp.raise_for_status()
    print(f"[HTTP] {resp.json()['message']}")

    ws_app.close()
    print("[DONE] Booking flow check completed.")


if __name__ == "__main__":
    main()
