#!/usr/bin/env python3
"""Manual check that the Google Maps credential and endpoints work."""

import sys
from pathlib import Path

project_root = Path(__file__).parent
sys.path.insert(0, str(project_root / "src"))

from route_planner.config import settings
from route_planner.services.routing.google_client import GeodataError, GoogleMapsClient, check_health

SAMPLE_ADDRESSES = [
    "1200 Biscayne Blvd, Miami, FL 33132",
    "801 Brickell Ave, Miami, FL 33131",
]


def main():
    print("=" * 60)
    print("Geodata Provider Connection Test")
    print("=" * 60)
    print()

    print("1. Checking provider configuration...")
    if not settings.google_maps_api_key:
        print("   [ERROR] Google Maps API key is not configured")
        print("   Please set GROOM_GOOGLE_MAPS_API_KEY in your .env file")
        return 1
    print(f"   [OK] Geocode URL: {settings.google_geocode_url}")
    print(f"   [OK] Distance Matrix URL: {settings.google_distance_matrix_url}")
    print()

    print("2. Testing geocoding...")
    if not check_health():
        print("   [ERROR] Geocoding check failed")
        return 1
    print("   [OK] Geocoding endpoint is reachable")
    print()

    print("3. Testing distance matrix request...")
    try:
        matrix = GoogleMapsClient().distance_matrix(SAMPLE_ADDRESSES)
    except GeodataError as e:
        print(f"   [ERROR] Distance matrix request failed: {e}")
        return 1
    edge = matrix.edge(0, 1)
    print(f"   [OK] Received {matrix.size}x{matrix.size} matrix")
    print(f"   [OK] Sample leg: {edge.miles:.2f} miles, {edge.minutes:.1f} minutes")
    print()

    print("=" * 60)
    print("[SUCCESS] Geodata provider is connected and working!")
    print("=" * 60)
    return 0


if __name__ == "__main__":
    sys.exit(main())
