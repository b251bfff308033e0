"""
Evacuation Centers Module – Discover, filter and rank shelters.

A center is SAFE when it sits above SAFE_CENTER_ELEVATION_M.  Centers closer
than MIN_CENTER_DISTANCE_KM that are not safe are dropped (they share the
origin's flood exposure).  Ranking is safe-first, then nearest-first.

Capacity and occupancy are synthetic (no occupancy telemetry exists) and are
drawn from an injectable numpy Generator; they never influence ordering.
"""

import math
from concurrent.futures import ThreadPoolExecutor, TimeoutError, as_completed

import numpy as np

import config
from floodguard.geo import distance_km, haversine_km
from floodguard.models import EvacuationCenter, status_for

# Hand-curated shelters with surveyed coordinates, used when discovery fails.
FALLBACK_INSTITUTIONS = [
    {
        "id": "ec1",
        "name": "Vellore Institute of Technology",
        "address": "VIT Campus, Katpadi, Vellore, Tamil Nadu 632014",
        "latitude": 12.970068697520778,
        "longitude": 79.15598789173693,
        "elevation": 220,
    },
    {
        "id": "ec2",
        "name": "Vellore Municipality Office",
        "address": "Municipality Office, Vellore, Tamil Nadu 632001",
        "latitude": 12.91677812125299,
        "longitude": 79.13245568067919,
        "elevation": 180,
    },
    {
        "id": "ec3",
        "name": "Christian Medical College",
        "address": "Ida Scudder Rd, Vellore, Tamil Nadu 632004",
        "latitude": 12.924684798908551,
        "longitude": 79.13524470951494,
        "elevation": 190,
    },
]


def is_safe_elevation(elevation: float) -> bool:
    return elevation > config.SAFE_CENTER_ELEVATION_M


def should_discard(distance: float, elevation: float) -> bool:
    """Too close to the origin and not high enough to matter."""
    return distance < config.MIN_CENTER_DISTANCE_KM and not is_safe_elevation(elevation)


def rank_key(center: EvacuationCenter):
    return (not center.is_safe, center.distance)


# ── Concurrent elevation lookups ────────────────────────────────────────────

def lookup_elevations(
    candidates: list,
    elevation_lookup,
    max_workers: int = config.MAX_LOOKUP_WORKERS,
    timeout: float = config.LOOKUP_TIMEOUT_S,
) -> list[float]:
    """
    Elevation for every candidate, fetched in parallel on a bounded pool.

    Failed, unavailable or timed-out lookups resolve to 0 m.  Results are
    returned in candidate order.
    """
    elevations = [0.0] * len(candidates)
    if not candidates:
        return elevations

    pool = ThreadPoolExecutor(max_workers=max(1, min(max_workers, len(candidates))))
    futures = {pool.submit(elevation_lookup, c): i for i, c in enumerate(candidates)}
    try:
        for f in as_completed(futures, timeout=timeout):
            i = futures[f]
            try:
                value = f.result()
            except Exception as e:
                print(f"[EVAC] Elevation lookup failed for '{candidates[i].name}': {e}")
                continue
            if value is not None:
                elevations[i] = float(value)
    except TimeoutError:
        pending = sum(1 for f in futures if not f.done())
        print(f"[EVAC] {pending} elevation lookup(s) timed out after {timeout}s; using 0 m")
    finally:
        pool.shutdown(wait=False, cancel_futures=True)

    return elevations


# ── Ranking ─────────────────────────────────────────────────────────────────

def _synthetic_occupancy(rng: np.random.Generator, capacity: int, max_fraction: float) -> int:
    return int(math.floor(rng.random() * capacity * max_fraction))


def build_centers(location, candidates: list, elevations: list[float], rng: np.random.Generator):
    """Turn discovered institutions into filtered EvacuationCenters."""
    centers = []
    for inst, elevation in zip(candidates, elevations):
        distance = distance_km(location, inst)
        if should_discard(distance, elevation):
            print(f"[EVAC] Skipping '{inst.name}' – {distance:.2f} km away at {elevation:.0f} m")
            continue

        lo, hi = config.CAPACITY_RANGE
        capacity = int(rng.integers(lo, hi))
        occupancy = _synthetic_occupancy(rng, capacity, config.MAX_OCCUPANCY_FRACTION)
        centers.append(EvacuationCenter(
            id=inst.id or inst.name,
            name=inst.name,
            address=inst.address,
            latitude=inst.latitude,
            longitude=inst.longitude,
            elevation=elevation,
            distance=distance,
            estimated_time=round(distance * config.MINUTES_PER_KM),
            capacity=capacity,
            current_occupancy=occupancy,
            status=status_for(capacity, occupancy),
        ))
    return centers


def rank_evacuation_centers(
    location,
    discover=None,
    elevation_lookup=None,
    rng: np.random.Generator = None,
    limit: int = config.MAX_CENTERS,
) -> list[EvacuationCenter]:
    """
    Up to ``limit`` evacuation centers near ``location``, safe ones first,
    each class ordered by distance.

    Discovery failure, or discovery finding nothing, returns
    fallback_centers().  Candidates that were found but all filtered out give
    an empty list.
    """
    if discover is None:
        from floodguard.places import discover_nearby_institutions
        discover = discover_nearby_institutions
    if elevation_lookup is None:
        from floodguard.elevation import fetch_elevation
        elevation_lookup = fetch_elevation
    rng = rng or np.random.default_rng()

    try:
        candidates = list(discover(location, config.DISCOVERY_LIMIT) or [])
    except Exception as e:
        print(f"[EVAC] Shelter discovery failed ({e}); using fallback centers")
        return fallback_centers(location, rng)[:limit]

    if not candidates:
        print("[EVAC] No shelters discovered; using fallback centers")
        return fallback_centers(location, rng)[:limit]

    elevations = lookup_elevations(candidates, elevation_lookup)
    centers = build_centers(location, candidates, elevations, rng)
    centers.sort(key=rank_key)

    n_safe = sum(1 for c in centers if c.is_safe)
    print(f"[EVAC] {len(centers)}/{len(candidates)} candidates kept ({n_safe} safe); "
          f"returning top {min(limit, len(centers))}")
    return centers[:limit]


def fallback_centers(location, rng: np.random.Generator = None) -> list[EvacuationCenter]:
    """Known-safe Vellore institutions, annotated against ``location``."""
    rng = rng or np.random.default_rng()
    centers = []
    for inst in FALLBACK_INSTITUTIONS:
        distance = haversine_km(location.latitude, location.longitude,
                                inst["latitude"], inst["longitude"])
        if "Institute" in inst["name"]:
            capacity = 2000
        elif "Municipality" in inst["name"]:
            capacity = 800
        else:
            capacity = 1500
        occupancy = _synthetic_occupancy(rng, capacity, config.FALLBACK_MAX_OCCUPANCY_FRACTION)
        centers.append(EvacuationCenter(
            id=inst["id"],
            name=inst["name"],
            address=inst["address"],
            latitude=inst["latitude"],
            longitude=inst["longitude"],
            elevation=inst["elevation"],
            distance=round(distance, 2),
            estimated_time=round(distance / config.FALLBACK_SPEED_KMH * 60),
            capacity=capacity,
            current_occupancy=occupancy,
            status=status_for(capacity, occupancy),
        ))
    centers.sort(key=rank_key)
    return centers
