"""
Road Network Module – Offline driving routes over the OSM drive graph.

The graph is downloaded once per area and cached.  Routes are found with A*
(edge length as cost, haversine heuristic), and turn-by-turn instructions
are synthesised from bearing changes between consecutive named streets.
"""

import heapq
import time

import networkx as nx
import osmnx as ox

import config
from floodguard.geo import bearing_deg, compass_direction, haversine_km
from floodguard.models import DrivingRoute

# ── Module-level cache ──────────────────────────────────────────────────────
_cached_graph = None
_cached_key = None       # (lat, lon, radius_m)


def load_road_network(
    lat: float, lon: float, radius_m: float, force: bool = False
) -> nx.MultiDiGraph:
    """
    Download drivable road graph from OSM.  Cached by (lat, lon, radius_m)
    so repeated calls with the same area return instantly.

    Retries up to 3 times on transient Overpass API failures.
    """
    global _cached_graph, _cached_key
    key = (round(lat, 4), round(lon, 4), int(radius_m))

    if not force and _cached_key == key and _cached_graph is not None:
        print(f"[ROAD] Using cached graph ({_cached_graph.number_of_nodes()} nodes)")
        return _cached_graph

    max_retries = 3
    for attempt in range(1, max_retries + 1):
        try:
            G = ox.graph_from_point(
                (lat, lon),
                dist=radius_m,
                network_type="drive",
                simplify=True,
            )
            print(f"[ROAD] Loaded {G.number_of_nodes()} nodes, {G.number_of_edges()} edges")
            _cached_graph = G
            _cached_key = key
            return G
        except Exception as e:
            if attempt < max_retries:
                wait = 2 ** attempt
                print(f"[ROAD] Attempt {attempt}/{max_retries} failed: {e}")
                print(f"[ROAD] Retrying in {wait}s...")
                time.sleep(wait)
            else:
                print(f"[ROAD] All {max_retries} attempts failed")
                raise


# ── A* ──────────────────────────────────────────────────────────────────────

def astar_path(G: nx.MultiDiGraph, source, target) -> list | None:
    """
    A* from source to target using edge ``length`` (m) as cost and the
    haversine distance to the target as heuristic.  None when unreachable.
    """
    goal = G.nodes[target]

    def heuristic(node):
        nd = G.nodes[node]
        return haversine_km(nd["y"], nd["x"], goal["y"], goal["x"]) * 1000

    open_set = [(heuristic(source), 0, source)]  # (f, g, node)
    g_scores = {source: 0}
    came_from = {}
    visited = set()

    while open_set:
        f, g, current = heapq.heappop(open_set)

        if current in visited:
            continue
        visited.add(current)

        if current == target:
            path = [current]
            while current in came_from:
                current = came_from[current]
                path.append(current)
            path.reverse()
            return path

        for _, neighbour, edge_data in G.edges(current, data=True):
            if neighbour in visited:
                continue
            tentative_g = g + edge_data.get("length", 1)
            if tentative_g < g_scores.get(neighbour, float("inf")):
                g_scores[neighbour] = tentative_g
                came_from[neighbour] = current
                heapq.heappush(open_set, (tentative_g + heuristic(neighbour), tentative_g, neighbour))

    return None


# ── Instructions ────────────────────────────────────────────────────────────

def _street_name(edge_data) -> str:
    name = edge_data.get("name")
    if isinstance(name, list):
        name = name[0] if name else None
    return name or "unnamed road"


def _best_edge(G, u, v) -> dict:
    """Shortest of the parallel edges u→v."""
    return min(G.get_edge_data(u, v).values(), key=lambda d: d.get("length", 0))


def turn_phrase(prev_bearing: float, new_bearing: float) -> str:
    delta = (new_bearing - prev_bearing + 360) % 360
    if delta < 30 or delta > 330:
        return "Continue onto"
    if delta <= 150:
        return "Turn right onto"
    if delta < 210:
        return "Make a U-turn onto"
    return "Turn left onto"


def path_to_route(G: nx.MultiDiGraph, path: list) -> DrivingRoute:
    """Distance, duration, geometry and grouped street instructions for a node path."""
    segments = []   # [name, start_bearing, end_bearing, length_m]
    total_m = 0.0
    total_s = 0.0

    for u, v in zip(path[:-1], path[1:]):
        data = _best_edge(G, u, v)
        length = float(data.get("length", 0))
        speed = data.get("speed_kph") or config.DEFAULT_DRIVING_SPEED_KMH
        total_m += length
        total_s += length / (float(speed) * 1000 / 3600)

        nu, nv = G.nodes[u], G.nodes[v]
        bearing = bearing_deg(nu["y"], nu["x"], nv["y"], nv["x"])
        name = _street_name(data)
        if segments and segments[-1][0] == name:
            segments[-1][2] = bearing
            segments[-1][3] += length
        else:
            segments.append([name, bearing, bearing, length])

    steps = []
    for i, (name, start_bearing, _, length) in enumerate(segments):
        if i == 0:
            phrase = f"Head {compass_direction(start_bearing)} on {name}"
        else:
            phrase = f"{turn_phrase(segments[i - 1][2], start_bearing)} {name}"
        steps.append(f"{phrase} for {length / 1000:.1f} km")
    steps.append("Arrive at your destination")

    geometry = tuple((G.nodes[n]["y"], G.nodes[n]["x"]) for n in path)
    return DrivingRoute(distance_m=total_m, duration_s=total_s, steps=tuple(steps), geometry=geometry)


def route_on_graph(points: list[tuple[float, float]], G: nx.MultiDiGraph = None) -> DrivingRoute | None:
    """
    Driving route through ``points`` [(lat, lon), ...] in order.

    The graph is loaded around the points' centroid unless one is given.
    """
    if G is None:
        lat_c = sum(p[0] for p in points) / len(points)
        lon_c = sum(p[1] for p in points) / len(points)
        reach_km = max(haversine_km(lat_c, lon_c, p[0], p[1]) for p in points)
        G = load_road_network(lat_c, lon_c, reach_km * 1000 + config.ROAD_GRAPH_MARGIN_M)

    nodes = ox.nearest_nodes(G, [p[1] for p in points], [p[0] for p in points])

    full_path = [nodes[0]]
    for source, target in zip(nodes[:-1], nodes[1:]):
        if source == target:
            continue
        leg = astar_path(G, source, target)
        if leg is None:
            print("[ROAD] No drivable path between route points")
            return None
        full_path.extend(leg[1:])

    if len(full_path) < 2:
        print("[ROAD] Origin and destination snap to the same road node")
        return None

    route = path_to_route(G, full_path)
    print(f"[ROAD] Route found – {len(full_path)} nodes, {route.distance_m / 1000:.2f} km")
    return route
