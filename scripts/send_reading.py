"""
Post one reading to a running weather reports service, the way a homebrew device does.

Usage:
  python -m scripts.send_reading --url http://localhost:8080 --device-type indoor --temperature 21.5 --humidity 40
  python -m scripts.send_reading --oid AbC123 --device-type outdoor --pm25 8.1   # add a metric to an existing reading

The shared secret is read from --api-key or HOMEBREW_API_KEY.
"""

from __future__ import annotations

import argparse
import json
import os
import sys

import requests

METRICS = ("temperature", "humidity", "percipitation", "pm10", "pm25", "co2", "tvoc")


def build_payload(args: argparse.Namespace) -> dict:
    payload = {"device_type": args.device_type}
    if args.oid:
        payload["oid"] = args.oid
    for name in METRICS:
        value = getattr(args, name)
        if value is not None:
            payload[name] = value
    return payload


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Send a homebrew weather reading.")
    parser.add_argument("--url", default="http://localhost:8080", help="Service base URL")
    parser.add_argument("--api-key", default=os.getenv("HOMEBREW_API_KEY", ""), help="Shared secret")
    parser.add_argument("--device-type", default="other", choices=["indoor", "outdoor", "other"])
    parser.add_argument("--oid", default=None, help="Existing reading to update instead of creating one")
    parser.add_argument("--form", action="store_true", help="Send form fields instead of JSON")
    for name in METRICS:
        parser.add_argument(f"--{name}", type=float, default=None)
    args = parser.parse_args(argv)

    payload = build_payload(args)
    url = f"{args.url.rstrip('/')}/api/weather_reports"
    headers = {"Authorization": args.api_key}
    if args.form:
        resp = requests.post(url, data=payload, headers=headers, timeout=10)
    else:
        resp = requests.post(url, json=payload, headers=headers, timeout=10)

    if resp.status_code != 200:
        print(f"Request failed: {resp.status_code} {resp.text[:500]}", file=sys.stderr)
        return 1
    print(json.dumps(resp.json(), indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
