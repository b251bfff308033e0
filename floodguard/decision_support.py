"""
Decision Support Module – Situation-report generation.
"""

import os
import json

import config


def center_statistics(centers: list) -> dict:
    """Counts of ranked centers by safety class and status."""
    return {
        "total": len(centers),
        "safe": sum(1 for c in centers if c.is_safe),
        "open": sum(1 for c in centers if c.status.value == "Open"),
        "full": sum(1 for c in centers if c.status.value == "Full"),
        "free_capacity": sum(max(0, c.capacity - c.current_occupancy) for c in centers),
    }


def generate_report(
    location,
    weather,
    flood_risk,
    centers: list = None,
    route=None,
) -> dict:
    """
    Generate a structured situation report (JSON-ready) with a plain-text summary.

    ``centers=None`` means ranking was not run; an empty list means it ran and
    found nothing.
    """
    ranked = centers is not None
    centers = centers or []
    report = {
        "title": "Flood Risk & Evacuation Situation Report",
        "location": location.to_dict(),
        "weather": {
            "historical": weather.historical.summary.to_dict(),
            "forecast": weather.forecast.summary.to_dict(),
            "alerts": [a.to_dict() for a in weather.forecast.alerts],
            "is_fallback": weather.is_fallback,
        },
        "flood_risk": flood_risk.to_dict(),
        "center_statistics": center_statistics(centers),
        "centers": [c.to_dict() for c in centers],
        "route": route.to_dict() if route else None,
    }

    ttf = flood_risk.time_to_flood
    lines = [
        "═══ SITUATION REPORT ═══",
        "",
        f"Location: {location.name or ''} ({location.latitude:.4f}, {location.longitude:.4f})",
        f"Rainfall: last 24h {weather.historical.summary.last_24_hours:.1f} mm, "
        f"next 24h {weather.forecast.summary.next_24_hours:.1f} mm"
        + ("  [fallback data]" if weather.is_fallback else ""),
        "",
        f"Risk score:        {flood_risk.risk_score:.0f}/100",
        f"Flood probability: {flood_risk.flood_probability:.0f}%",
        f"Soil saturation:   {flood_risk.soil_saturation:.0f}%",
        f"Expected rise:     {flood_risk.expected_water_rise:.1f} cm",
        f"Time to flood:     {f'{ttf:.1f} h' if ttf is not None else 'no imminent flooding'}",
        "",
        "Flood-prone areas:",
    ]
    lines += [f"• {a.name} ({a.risk_level.value}) – {a.reason}" for a in flood_risk.flood_prone_areas]

    for alert in weather.forecast.alerts:
        lines.append(f"⚠  {alert.title} ({alert.time}): {alert.description}")

    if centers:
        lines += ["", "Evacuation centers:"]
        lines += [
            f"  {i}. {c.name} – {c.distance:.1f} km, ~{c.estimated_time} min, "
            f"{c.elevation:.0f} m, {c.status.value} ({c.current_occupancy}/{c.capacity})"
            for i, c in enumerate(centers, 1)
        ]
    elif ranked:
        lines.append("\n⚠  No evacuation centers found near this location. Try a different location.")

    if route:
        lines += [
            "",
            f"Recommended route: {route.center.name} – {route.distance:.1f} km, "
            f"~{route.estimated_time} min, safety {route.safety_score}/10",
        ]
        lines += [f"  → {d}" for d in route.directions]

    report["summary_text"] = "\n".join(lines)
    print(f"[DSS] Report generated – risk {flood_risk.risk_score:.0f}, {len(centers)} center(s)")
    return report


def save_report(report: dict, out_path: str = None) -> str:
    """Write the report as JSON; returns the file path."""
    if out_path is None:
        out_path = os.path.join(config.OUTPUT_DIR, config.REPORT_JSON)
    os.makedirs(os.path.dirname(out_path) or ".", exist_ok=True)
    with open(out_path, "w") as f:
        json.dump(report, f, indent=2, default=str)
    print(f"[DSS] Report saved → {out_path}")
    return out_path
