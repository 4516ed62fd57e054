"""
GeoJSON conversion of pragmatic solutions
Points for stops and unassigned jobs, LineStrings for tours
"""
import json
from typing import Dict, IO, List, Optional, Union

from ..models.pragmatic import Solution, Stop, Tour
from ..models.problem import Problem
from ..utils.config import CONFIG, GeoConfig, setup_logging, bounding_box

logger = setup_logging()


def _stop_feature(stop: Stop, stop_idx: int, tour: Tour, tour_idx: int, config: GeoConfig) -> Dict:
    return {
        "type": "Feature",
        "geometry": {
            "type": "Point",
            "coordinates": stop.location.as_lon_lat()
        },
        "properties": {
            "feature_type": "stop",
            "tour_idx": tour_idx,
            "stop_idx": stop_idx,
            "vehicle_id": tour.vehicle_id,
            "shift_idx": tour.shift_index,
            "job_ids": ",".join(stop.job_ids),
            "activities": ",".join(a.type for a in stop.activities),
            "arrival": stop.time.arrival,
            "departure": stop.time.departure,
            "distance": stop.distance,
            "load": list(stop.load),
            "marker-color": config.route_color(tour_idx),
            "marker-size": config.MARKER_SIZE,
            "marker-symbol": str(stop_idx)
        }
    }


def _route_feature(tour: Tour, tour_idx: int, geometry, config: GeoConfig) -> Dict:
    coordinates = tour.coordinates()
    geometry_valid = False

    if geometry is not None:
        route = geometry.route(coordinates)
        coordinates = route.coordinates
        geometry_valid = route.geometry_valid

    return {
        "type": "Feature",
        "geometry": {
            "type": "LineString",
            "coordinates": coordinates
        },
        "properties": {
            "feature_type": "route",
            "tour_idx": tour_idx,
            "vehicle_id": tour.vehicle_id,
            "shift_idx": tour.shift_index,
            "stops_count": len(tour.stops),
            "distance": tour.statistic.distance,
            "duration": tour.statistic.duration,
            "cost": tour.statistic.cost,
            "stroke": config.route_color(tour_idx),
            "stroke-width": config.STROKE_WIDTH,
            "geometry_valid": geometry_valid
        }
    }


def _unassigned_features(solution: Solution, problem: Problem, config: GeoConfig) -> List[Dict]:
    features = []
    for unassigned in solution.unassigned:
        job = problem.job(unassigned.job_id)
        if job is None:
            logger.warning(f"Unassigned job '{unassigned.job_id}' not found in problem, skipped")
            continue

        for location in job.locations():
            features.append({
                "type": "Feature",
                "geometry": {
                    "type": "Point",
                    "coordinates": location.as_lon_lat()
                },
                "properties": {
                    "feature_type": "unassigned",
                    "job_id": unassigned.job_id,
                    "reasons": ",".join(r.code for r in unassigned.reasons),
                    "marker-color": config.UNASSIGNED_COLOR,
                    "marker-size": config.MARKER_SIZE
                }
            })
    return features


def solution_to_geojson(solution: Solution, problem: Optional[Problem] = None,
                        geometry=None, config: GeoConfig = CONFIG) -> Dict:
    """Convert a pragmatic solution to a GeoJSON FeatureCollection

    Args:
        solution: Parsed pragmatic solution
        problem: Problem used to locate unassigned jobs (optional)
        geometry: Provider with a route(coordinates) method for street
            geometry; None draws straight lines between stops
        config: Styling configuration

    Returns:
        FeatureCollection dictionary
    """
    features = []

    # === STOPS ===
    for tour_idx, tour in enumerate(solution.tours):
        for stop_idx, stop in enumerate(tour.stops):
            features.append(_stop_feature(stop, stop_idx, tour, tour_idx, config))

    # === ROUTES ===
    for tour_idx, tour in enumerate(solution.tours):
        if len(tour.stops) < 2:
            continue
        features.append(_route_feature(tour, tour_idx, geometry, config))

    # === UNASSIGNED ===
    if problem is not None:
        features.extend(_unassigned_features(solution, problem, config))
    elif solution.unassigned:
        logger.info(f"{len(solution.unassigned)} unassigned jobs not drawn: no problem given")

    collection = {
        "type": "FeatureCollection",
        "features": features
    }

    positions = []
    for feature in features:
        coordinates = feature["geometry"]["coordinates"]
        if feature["geometry"]["type"] == "Point":
            positions.append(coordinates)
        else:
            positions.extend(coordinates)

    bbox = bounding_box(positions)
    if bbox is not None:
        collection["bbox"] = bbox

    logger.debug(f"GeoJSON built: {len(features)} features")
    return collection


def write_geojson(collection: Dict, output: Union[str, IO[str]]) -> None:
    """Write a FeatureCollection as UTF-8 JSON

    Args:
        collection: GeoJSON dictionary
        output: File path or text stream
    """
    if isinstance(output, str):
        with open(output, 'w', encoding='utf-8') as f:
            json.dump(collection, f, indent=2, ensure_ascii=False)
            f.write("\n")
    else:
        json.dump(collection, output, indent=2, ensure_ascii=False)
        output.write("\n")
