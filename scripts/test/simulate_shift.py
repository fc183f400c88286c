# scripts/test/simulate_shift.py
"""
Drive a running backend through one motorcycle's shift:
intake → propose/confirm on a worker lane → ready → delivered,
then print the day's figures with an admin session.
"""

import argparse
import requests

TIMEOUT = 10


def call(method, url, **kwargs):
    resp = requests.request(method, url, timeout=TIMEOUT, **kwargs)
    print(f"{'✅' if resp.ok else '❌'} {method} {url.split('/api/v1')[-1]} → HTTP {resp.status_code}")
    resp.raise_for_status()
    return resp.json()


def run(base_url, plate, phone, password, workshop):
    api = f"{base_url.rstrip('/')}/api/v1"

    services = call("GET", f"{api}/services")
    workers = call("GET", f"{api}/workers", params={"active_only": True})
    if not services or not workers:
        print("Catalog is empty, run scripts/setup/init_db.py first")
        return
    service_id, worker_id = services[0]["id"], workers[0]["id"]

    workshop_id = None
    if workshop:
        workshops = call("GET", f"{api}/workshops", params={"active_only": True})
        workshop_id = workshops[0]["id"] if workshops else None

    quote = call("GET", f"{api}/vehicles/quote", params={"service_id": service_id, "workshop_id": workshop_id})
    print(f"   price: {quote['price']}")

    vehicle = call("POST", f"{api}/vehicles", json={
        "plate": plate, "phone": phone, "serviceId": service_id, "workshopId": workshop_id,
    })
    vehicle_id = vehicle["id"]

    call("POST", f"{api}/assignments/propose", json={"vehicleId": vehicle_id, "workerId": worker_id})
    call("POST", f"{api}/assignments/confirm", json={"vehicleId": vehicle_id, "workerId": worker_id})
    ready = call("POST", f"{api}/vehicles/{vehicle_id}/transition", json={"status": "ready"})
    print(f"   completed at {ready['completionTime']}")

    link = call("GET", f"{api}/vehicles/{vehicle_id}/customer-link")
    if link["url"]:
        print(f"   WhatsApp: {link['url']}")

    call("POST", f"{api}/vehicles/{vehicle_id}/transition", json={"status": "delivered"})

    token = call("POST", f"{api}/auth/login", json={"password": password})["token"]
    summary = call("GET", f"{api}/finance/summary", headers={"X-Admin-Token": token})
    daily = summary["daily"]
    print(f"   today: {daily['completedCount']} done, revenue={daily['revenue']} "
          f"commissions={daily['commissions']} net={daily['net']}")
    call("POST", f"{api}/auth/logout", headers={"X-Admin-Token": token})


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Simulate a wash shift against a running backend")
    parser.add_argument("--url", default="http://127.0.0.1:8080")
    parser.add_argument("--plate", default="ABC12D")
    parser.add_argument("--phone", default="3001234567")
    parser.add_argument("--password", default="CHANGE_ME")
    parser.add_argument("--workshop", action="store_true", help="Bring the vehicle in through a workshop")
    args = parser.parse_args()

    run(args.url, args.plate, args.phone, args.password, args.workshop)
