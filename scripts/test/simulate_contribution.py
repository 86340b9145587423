"""Send test contributions to the backend."""

import argparse
import requests

BACKEND_URL = "http://localhost:8080/api/v1/contributions"

QUEUES = ["Q_0_10", "Q_10_30", "Q_30_60", "Q_60_PLUS"]
STATUSES = ["AVAILABLE", "LIMITED", "OUT"]


def simulate(station_id, source, queue, fuel_status, fuel_types, count, api_key=None):
    payload = {"station_id": station_id, "source_type": source}
    if queue:
        payload["queue_category"] = queue
    if fuel_status:
        payload["fuel_status"] = fuel_status
    if fuel_types:
        payload["fuel_types"] = fuel_types

    # Without the key, TRUSTED/OFFICIAL reports are recorded as PUBLIC
    headers = {"X-API-Key": api_key} if api_key else {}
    for _ in range(count):
        resp = requests.post(BACKEND_URL, json=payload, headers=headers, timeout=10)
        print(f"✅ {source} queue={queue} fuel={fuel_status} → HTTP {resp.status_code}: {resp.json()}")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Simulate station reports for testing")
    parser.add_argument("--station", type=int, required=True)
    parser.add_argument("--source", default="PUBLIC", choices=["PUBLIC", "TRUSTED", "OFFICIAL"])
    parser.add_argument("--queue", choices=QUEUES)
    parser.add_argument("--fuel-status", choices=STATUSES)
    parser.add_argument("--fuel-type", action="append", choices=["ESSENCE", "GASOIL"])
    parser.add_argument("--count", type=int, default=1)
    parser.add_argument("--api-key", help="Operator key, required for TRUSTED/OFFICIAL sources")
    args = parser.parse_args()

    simulate(args.station, args.source, args.queue, args.fuel_status, args.fuel_type, args.count, args.api_key)
