"""
Trigger one alert sweep on the backend. Meant for cron / a scheduled job:
  */5 * * * *  python scripts/jobs/run_alert_sweep.py --url http://localhost:8080
Exits non-zero when the sweep request fails so the scheduler can flag it.
"""

import argparse
import os
import sys
import requests


def main():
    parser = argparse.ArgumentParser(description="Run one alert sweep")
    parser.add_argument("--url", default=os.environ.get("BACKEND_URL", "http://localhost:8080"))
    parser.add_argument("--api-key", default=os.environ.get("API_KEY"))
    parser.add_argument("--timeout", type=int, default=60)
    args = parser.parse_args()

    headers = {"X-API-Key": args.api_key} if args.api_key else {}
    try:
        resp = requests.post(f"{args.url}/api/v1/alerts/generate", headers=headers, timeout=args.timeout)
        resp.raise_for_status()
    except requests.exceptions.RequestException as e:
        print(f"❌ Alert sweep failed: {e}")
        sys.exit(1)

    summary = resp.json()
    print(f"✅ Sweep: {summary['stations_checked']} stations, "
          f"{summary['alerts_opened']} alerts opened, {summary['stations_failed']} failed")
    if summary["stations_failed"]:
        sys.exit(2)


if __name__ == "__main__":
    main()
