# scripts/test/simulate_tracking.py
"""
Exercise a running backend: track a booking (twice, to see the cooldown),
search a vehicle, and print a booking journey.
Usage: python scripts/test/simulate_tracking.py --booking <uuid>
       python scripts/test/simulate_tracking.py --vehicle MH12AB1234 --mode all_history
"""

import argparse
import requests

BACKEND_URL = "http://localhost:8080/api/v1"


def _headers(api_key):
    return {"X-API-Key": api_key} if api_key else {}


def simulate_track(booking_id, api_key, repeat):
    for attempt in range(1, repeat + 1):
        resp = requests.post(f"{BACKEND_URL}/bookings/{booking_id}/track", headers=_headers(api_key), timeout=60)
        if resp.status_code != 200:
            print(f"❌ track #{attempt} → HTTP {resp.status_code}: {resp.json()}")
            return
        body = resp.json()
        flag = "MOCK" if body.get("is_mock_data") else "REAL"
        if body["cached"]:
            print(f"⏱  track #{attempt} cached — {len(body['data'])} crossings, retry in {body['wait_seconds']}s")
        else:
            print(f"✅ track #{attempt} fresh [{flag}] — {body['new_records']} new, {len(body['data'])} total")


def simulate_search(vehicle, mode, api_key):
    resp = requests.get(f"{BACKEND_URL}/vehicles/{vehicle}/search", params={"mode": mode},
                        headers=_headers(api_key), timeout=60)
    body = resp.json()
    if body.get("status") == "no_data":
        print(f"📭 search {vehicle} ({mode}): {body['message']}")
        return
    print(f"🔍 search {vehicle} ({mode}) from {body.get('source')} → {len(body.get('data', []))} crossings")
    for c in body.get("data", []):
        print(f"   {c['crossing_time']}  {c['toll_plaza_name']}")


def simulate_journey(booking_id, api_key):
    resp = requests.get(f"{BACKEND_URL}/bookings/{booking_id}/journey", headers=_headers(api_key), timeout=30)
    for event in resp.json():
        print(f"   {event['event_time']}  {event['event_type']:<24} {event['description']}")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Simulate tracking calls against the backend")
    parser.add_argument("--booking")
    parser.add_argument("--vehicle")
    parser.add_argument("--mode", default="current", choices=["current", "all_history"])
    parser.add_argument("--repeat", type=int, default=2)
    parser.add_argument("--api-key", default=None)
    args = parser.parse_args()

    if args.booking:
        simulate_track(args.booking, args.api_key, args.repeat)
        print("🧭 Journey:")
        simulate_journey(args.booking, args.api_key)
    if args.vehicle:
        simulate_search(args.vehicle, args.mode, args.api_key)
    if not (args.booking or args.vehicle):
        parser.error("pass --booking and/or --vehicle")
