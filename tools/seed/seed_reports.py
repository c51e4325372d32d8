#!/usr/bin/env python3
"""Cidade Alerta report seeder.

Writes synthetic problem reports for local development and load testing.

Usage:
    # 200 reports scattered around central São Paulo
    python tools/seed/seed_reports.py --out data --reports 200

    # Tight cluster around a point, then ask a running server what is nearby
    python tools/seed/seed_reports.py --out data --center -22.9068,-43.1729 \\
        --radius-km 0.5 --check http://localhost:8000
"""

from __future__ import annotations

import argparse
import json
import math
import random
import sys
import uuid
from datetime import datetime, timedelta, timezone
from pathlib import Path

import httpx

CATEGORIES = ["TRAFFIC", "INFRASTRUCTURE", "SECURITY", "ENVIRONMENT", "PUBLIC_LIGHTING", "OTHERS"]
SEVERITIES = ["LOW", "MEDIUM", "HIGH"]
STATUSES = ["REPORTED", "IN_REVIEW", "IN_PROGRESS", "RESOLVED", "CLOSED"]

TITLES = {
    "TRAFFIC": "Semáforo quebrado",
    "INFRASTRUCTURE": "Buraco na via",
    "SECURITY": "Área sem policiamento",
    "ENVIRONMENT": "Descarte irregular de lixo",
    "PUBLIC_LIGHTING": "Poste apagado",
    "OTHERS": "Outro problema",
}


def scatter(center_lat: float, center_lon: float, radius_km: float) -> tuple[float, float]:
    """Random point within radius_km of the center."""
    angle = random.uniform(0, 2 * math.pi)
    dist_km = radius_km * math.sqrt(random.random())
    lat = center_lat + (dist_km / 111.0) * math.cos(angle)
    lon = center_lon + (dist_km / (111.0 * math.cos(math.radians(center_lat)))) * math.sin(angle)
    return lat, lon


def make_report(center: tuple[float, float], radius_km: float, reporter_id: str, now: datetime) -> dict:
    """Create a single problem document."""
    category = random.choice(CATEGORIES)
    severity = random.choices(SEVERITIES, weights=[50, 35, 15])[0]
    status = random.choices(STATUSES, weights=[40, 20, 15, 15, 10])[0]
    lat, lon = scatter(center[0], center[1], radius_km)
    created = now - timedelta(minutes=random.randint(0, 60 * 24 * 30))
    created_iso = created.isoformat().replace("+00:00", "Z")

    return {
        "id": uuid.uuid4().hex[:20],
        "title": TITLES[category],
        "description": f"{TITLES[category]} (gerado automaticamente)",
        "location": {"latitude": round(lat, 6), "longitude": round(lon, 6)},
        "severity": severity,
        "category": category,
        "status": status,
        "reportedBy": reporter_id,
        "reporterName": "Seed",
        "upvotes": random.randint(0, 25),
        "comments": [],
        "photos": [],
        "createdAt": created_iso,
        "updatedAt": created_iso,
    }


def write_jsonl(path: Path, documents: list[dict], append: bool) -> None:
    with open(path, "a" if append else "w", encoding="utf-8") as f:
        for doc in documents:
            f.write(json.dumps(doc, ensure_ascii=False, separators=(",", ":")) + "\n")


def check_server(server: str, center: tuple[float, float]) -> None:
    """Print what a running server reports around the center."""
    try:
        resp = httpx.get(
            f"{server}/api/v1/reports/nearby",
            params={"lat": center[0], "lon": center[1]},
            timeout=10.0,
        )
    except httpx.RequestError as exc:
        print(f"Could not reach {server}: {exc}", file=sys.stderr)
        return
    if resp.status_code != 200:
        print(f"Server answered {resp.status_code}: {resp.text}", file=sys.stderr)
        return
    data = resp.json()
    print(f"\nServer sees {data['count']} reports within {data['radius_m']}m of the center")
    for item in data["reports"][:5]:
        print(f"  {item['distanceLabel']:>8}  {item['severity']:<6}  {item['title']}")


def main():
    parser = argparse.ArgumentParser(description="Cidade Alerta report seeder")
    parser.add_argument("--out", default="data", help="Storage base_dir to write into")
    parser.add_argument("--reports", type=int, default=100, help="Number of reports")
    parser.add_argument("--center", type=str, default="-23.5505,-46.6333",
                        help="Center lat,lon (default: São Paulo)")
    parser.add_argument("--radius-km", type=float, default=3.0, help="Scatter radius in km")
    parser.add_argument("--append", action="store_true", help="Append instead of overwriting")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument("--check", metavar="SERVER", default=None,
                        help="Server URL to query for nearby reports afterwards")

    args = parser.parse_args()

    lat, lon = args.center.split(",")
    center = (float(lat), float(lon))
    if args.seed is not None:
        random.seed(args.seed)

    out = Path(args.out)
    out.mkdir(parents=True, exist_ok=True)

    citizen_id = "seed-citizen"
    authority_id = "seed-authority"
    now = datetime.now(timezone.utc)
    reports = [make_report(center, args.radius_km, citizen_id, now) for _ in range(args.reports)]

    write_jsonl(out / "problems.jsonl", reports, append=args.append)
    write_jsonl(out / "users.jsonl", [
        {"id": citizen_id, "name": "Cidadão", "isAuthority": False},
        {"id": authority_id, "name": "Prefeitura", "isAuthority": True},
    ], append=False)

    print(f"Wrote {len(reports)} reports to {out / 'problems.jsonl'}")
    print(f"  Center: {center[0]:.4f}, {center[1]:.4f}")
    print(f"  Radius: {args.radius_km} km")

    if args.check:
        check_server(args.check, center)


if __name__ == "__main__":
    main()
