"""
Solution writers
Registry of output formats: pragmatic, GeoJSON, CSV, summary and HTML map
"""
from typing import Callable, Dict, IO, List, Optional, Union
import json

import folium
import numpy as np
import pandas as pd

from ..errors import UnknownFormatError
from ..models.pragmatic import Solution, solution_to_dict
from ..models.problem import Problem
from ..utils.config import CONFIG, setup_logging, format_distance, format_duration
from .geojson import solution_to_geojson, write_geojson

logger = setup_logging()

Output = Union[str, IO[str]]


def _write_json(data: Dict, output: Output) -> None:
    if isinstance(output, str):
        with open(output, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=2, ensure_ascii=False)
            f.write("\n")
    else:
        json.dump(data, output, indent=2, ensure_ascii=False)
        output.write("\n")


def write_pragmatic(solution: Solution, output: Output,
                    problem: Optional[Problem] = None, geometry=None) -> None:
    """Write the solution back in pragmatic format"""
    _write_json(solution_to_dict(solution), output)


def write_geojson_solution(solution: Solution, output: Output,
                           problem: Optional[Problem] = None, geometry=None) -> None:
    """Write the solution as GeoJSON FeatureCollection"""
    write_geojson(solution_to_geojson(solution, problem=problem, geometry=geometry), output)


def stops_dataframe(solution: Solution) -> pd.DataFrame:
    """One row per stop with schedule, load and distance to the next stop

    Args:
        solution: Parsed solution

    Returns:
        DataFrame with the stop rows in tour order
    """
    rows = []
    for tour in solution.tours:
        leg_distances = {}
        for window, index in tour.legs():
            if len(window) == 2:
                leg_distances[index] = window[1].distance - window[0].distance

        for stop_idx, stop in enumerate(tour.stops):
            rows.append({
                'vehicle_id': tour.vehicle_id,
                'shift_idx': tour.shift_index,
                'stop_idx': stop_idx,
                'lat': stop.location.lat,
                'lng': stop.location.lng,
                'arrival': stop.time.arrival,
                'departure': stop.time.departure,
                'distance': stop.distance,
                'load': ";".join(str(v) for v in stop.load),
                'job_ids': ";".join(stop.job_ids),
                'activities': ";".join(a.type for a in stop.activities),
                'leg_distance': leg_distances.get(stop_idx, 0)
            })

    columns = [
        'vehicle_id', 'shift_idx', 'stop_idx', 'lat', 'lng', 'arrival', 'departure',
        'distance', 'load', 'job_ids', 'activities', 'leg_distance'
    ]
    return pd.DataFrame(rows, columns=columns)


def write_csv(solution: Solution, output: Output,
              problem: Optional[Problem] = None, geometry=None) -> None:
    """Write the stops table as CSV"""
    df = stops_dataframe(solution)
    df.to_csv(output, index=False)
    logger.info(f"CSV written: {len(df)} rows")


def build_summary(solution: Solution) -> Dict:
    """Summary report of a solution

    Args:
        solution: Parsed solution

    Returns:
        Dictionary with totals, job counts and per tour statistics
    """
    distances = np.array([tour.statistic.distance for tour in solution.tours], dtype=float)
    durations = np.array([tour.statistic.duration for tour in solution.tours], dtype=float)

    if len(distances):
        distance_stats = {
            "mean": round(float(np.mean(distances)), 2),
            "max": float(np.max(distances)),
            "min": float(np.min(distances)),
            "std": round(float(np.std(distances)), 2)
        }
    else:
        distance_stats = {"mean": 0.0, "max": 0.0, "min": 0.0, "std": 0.0}

    served = solution.served_job_ids()
    unassigned = len(solution.unassigned)
    total_jobs = len(served) + unassigned

    return {
        "overview": {
            "cost": solution.statistic.cost,
            "distance": solution.statistic.distance,
            "duration": solution.statistic.duration,
            "distance_text": format_distance(solution.statistic.distance),
            "duration_text": format_duration(solution.statistic.duration),
            "times": dict(solution.statistic.times),
            "tours": len(solution.tours),
            "vehicles_used": len({tour.vehicle_id for tour in solution.tours}),
            "served_jobs": len(served),
            "unassigned_jobs": unassigned,
            "service_percentage": round(len(served) / total_jobs * 100, 1) if total_jobs else 0.0
        },
        "tour_distance": distance_stats,
        "tour_duration_total": float(durations.sum()) if len(durations) else 0.0,
        "tours": [
            {
                "vehicle_id": tour.vehicle_id,
                "shift_idx": tour.shift_index,
                "stops": len(tour.stops),
                "activities": tour.activity_count(),
                "distance": tour.statistic.distance,
                "duration": tour.statistic.duration,
                "closed": tour.is_closed,
                "job_ids": tour.job_ids()
            }
            for tour in solution.tours
        ],
        "unassigned": [
            {"job_id": job.job_id, "reasons": [r.code for r in job.reasons]}
            for job in solution.unassigned
        ]
    }


def write_summary(solution: Solution, output: Output,
                  problem: Optional[Problem] = None, geometry=None) -> None:
    """Write the summary report as JSON"""
    _write_json(build_summary(solution), output)


def build_map(solution: Solution, problem: Optional[Problem] = None,
              geometry=None) -> folium.Map:
    """Build a folium map with one layer per tour

    Args:
        solution: Parsed solution
        problem: Problem used to locate unassigned jobs (optional)
        geometry: Street geometry provider (optional)

    Returns:
        folium.Map with tours, unassigned jobs and layer control
    """
    # === MAP CENTER ===
    all_stops = [stop for tour in solution.tours for stop in tour.stops]
    if all_stops:
        center = [
            sum(s.location.lat for s in all_stops) / len(all_stops),
            sum(s.location.lng for s in all_stops) / len(all_stops)
        ]
    else:
        center = [0.0, 0.0]

    m = folium.Map(location=center, zoom_start=CONFIG.MAP_ZOOM, tiles=CONFIG.MAP_TILES)

    # === TOURS ===
    for tour_idx, tour in enumerate(solution.tours):
        color = CONFIG.route_color(tour_idx)
        group = folium.FeatureGroup(name=f"{tour.vehicle_id} ({len(tour.stops)} stops)")

        if len(tour.stops) >= 2:
            coordinates = tour.coordinates()
            if geometry is not None:
                coordinates = geometry.route(coordinates).coordinates
            folium.PolyLine(
                locations=[[lat, lng] for lng, lat in coordinates],
                color=color,
                weight=CONFIG.STROKE_WIDTH,
                opacity=0.8,
                popup=f"{tour.vehicle_id}: {format_distance(tour.statistic.distance)}, "
                      f"{format_duration(tour.statistic.duration)}"
            ).add_to(group)

        for stop_idx, stop in enumerate(tour.stops):
            popup_text = (
                f"<b>{tour.vehicle_id}</b> stop {stop_idx}<br>"
                f"Jobs: {', '.join(stop.job_ids) or '-'}<br>"
                f"Activities: {', '.join(a.type for a in stop.activities)}<br>"
                f"Arrival: {stop.time.arrival}<br>"
                f"Departure: {stop.time.departure}"
            )
            folium.CircleMarker(
                location=[stop.location.lat, stop.location.lng],
                radius=6,
                color=color,
                fill=True,
                fill_opacity=0.9,
                tooltip=f"{tour.vehicle_id} #{stop_idx}",
                popup=folium.Popup(popup_text, max_width=300)
            ).add_to(group)

        group.add_to(m)

    # === UNASSIGNED ===
    if problem is not None and solution.unassigned:
        group = folium.FeatureGroup(name=f"Unassigned ({len(solution.unassigned)})")
        for unassigned in solution.unassigned:
            job = problem.job(unassigned.job_id)
            if job is None:
                continue
            for location in job.locations():
                folium.CircleMarker(
                    location=[location.lat, location.lng],
                    radius=6,
                    color=CONFIG.UNASSIGNED_COLOR,
                    fill=True,
                    tooltip=f"{unassigned.job_id}: {', '.join(r.code for r in unassigned.reasons)}"
                ).add_to(group)
        group.add_to(m)

    folium.LayerControl(collapsed=False).add_to(m)
    return m


def write_html(solution: Solution, output: Output,
               problem: Optional[Problem] = None, geometry=None) -> None:
    """Write an interactive HTML map"""
    m = build_map(solution, problem=problem, geometry=geometry)
    if isinstance(output, str):
        m.save(output)
    else:
        output.write(m.get_root().render())
    logger.info(f"HTML map written: {len(solution.tours)} tours")


WRITERS: Dict[str, Callable] = {
    'pragmatic': write_pragmatic,
    'geojson': write_geojson_solution,
    'csv': write_csv,
    'summary': write_summary,
    'html': write_html
}


def available_formats() -> List[str]:
    return list(WRITERS)


def get_writer(name: str) -> Callable:
    """Get the writer registered for a format

    Raises:
        UnknownFormatError: If no writer has that name
    """
    try:
        return WRITERS[name]
    except KeyError:
        raise UnknownFormatError(name) from None
