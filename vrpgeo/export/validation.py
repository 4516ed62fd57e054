"""
GeoJSON validation
Structural checks of RFC 7946 documents
"""
import json
from typing import Any, Dict, List

from ..errors import GeoJSONError

GEOMETRY_TYPES = frozenset([
    'Point', 'MultiPoint', 'LineString', 'MultiLineString',
    'Polygon', 'MultiPolygon', 'GeometryCollection'
])
GEOJSON_TYPES = GEOMETRY_TYPES | {'Feature', 'FeatureCollection'}


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _check_position(position: Any, path: str, problems: List[str]) -> None:
    if not isinstance(position, list) or len(position) not in (2, 3):
        problems.append(f"{path}: position must be [lng, lat] or [lng, lat, alt]")
        return
    if not all(_is_number(v) for v in position):
        problems.append(f"{path}: position values must be numbers")
        return
    lng, lat = position[0], position[1]
    if not -180 <= lng <= 180:
        problems.append(f"{path}: longitude {lng} out of range")
    if not -90 <= lat <= 90:
        problems.append(f"{path}: latitude {lat} out of range")


def _check_positions(positions: Any, path: str, problems: List[str], minimum: int = 0) -> bool:
    if not isinstance(positions, list):
        problems.append(f"{path}: expected a list of positions")
        return False
    if len(positions) < minimum:
        problems.append(f"{path}: expected at least {minimum} positions, got {len(positions)}")
    for i, position in enumerate(positions):
        _check_position(position, f"{path}[{i}]", problems)
    return True


def _check_ring(ring: Any, path: str, problems: List[str]) -> None:
    if _check_positions(ring, path, problems, minimum=4) and len(ring) >= 4 and ring[0] != ring[-1]:
        problems.append(f"{path}: linear ring is not closed")


def _check_geometry(geometry: Any, path: str, problems: List[str]) -> None:
    if not isinstance(geometry, dict):
        problems.append(f"{path}: geometry must be an object")
        return

    geometry_type = geometry.get('type')
    if geometry_type not in GEOMETRY_TYPES:
        problems.append(f"{path}: unknown geometry type {geometry_type!r}")
        return

    if geometry_type == 'GeometryCollection':
        geometries = geometry.get('geometries')
        if not isinstance(geometries, list):
            problems.append(f"{path}.geometries: expected a list")
            return
        for i, child in enumerate(geometries):
            _check_geometry(child, f"{path}.geometries[{i}]", problems)
        return

    if 'coordinates' not in geometry:
        problems.append(f"{path}: missing 'coordinates'")
        return

    coordinates = geometry['coordinates']
    coords_path = f"{path}.coordinates"

    if geometry_type == 'Point':
        _check_position(coordinates, coords_path, problems)
    elif geometry_type == 'MultiPoint':
        _check_positions(coordinates, coords_path, problems)
    elif geometry_type == 'LineString':
        _check_positions(coordinates, coords_path, problems, minimum=2)
    elif not isinstance(coordinates, list):
        problems.append(f"{coords_path}: expected a list")
    elif geometry_type == 'MultiLineString':
        for i, line in enumerate(coordinates):
            _check_positions(line, f"{coords_path}[{i}]", problems, minimum=2)
    elif geometry_type == 'Polygon':
        for i, ring in enumerate(coordinates):
            _check_ring(ring, f"{coords_path}[{i}]", problems)
    elif geometry_type == 'MultiPolygon':
        for i, polygon in enumerate(coordinates):
            if not isinstance(polygon, list):
                problems.append(f"{coords_path}[{i}]: expected a list of rings")
                continue
            for j, ring in enumerate(polygon):
                _check_ring(ring, f"{coords_path}[{i}][{j}]", problems)


def _check_feature(feature: Any, path: str, problems: List[str]) -> None:
    if not isinstance(feature, dict) or feature.get('type') != 'Feature':
        problems.append(f"{path}: expected a Feature object")
        return

    if 'geometry' not in feature:
        problems.append(f"{path}: missing 'geometry'")
    elif feature['geometry'] is not None:
        _check_geometry(feature['geometry'], f"{path}.geometry", problems)

    if 'properties' not in feature:
        problems.append(f"{path}: missing 'properties'")
    elif feature['properties'] is not None and not isinstance(feature['properties'], dict):
        problems.append(f"{path}.properties: must be an object or null")


def validate_geojson(document: Any) -> List[str]:
    """Validate a decoded GeoJSON document

    Args:
        document: Decoded JSON value

    Returns:
        List of problems, empty if the document is valid
    """
    problems = []

    if not isinstance(document, dict):
        return ["document must be a JSON object"]

    document_type = document.get('type')
    if document_type not in GEOJSON_TYPES:
        return [f"unknown GeoJSON type {document_type!r}"]

    if document_type == 'FeatureCollection':
        features = document.get('features')
        if not isinstance(features, list):
            problems.append("features: expected a list")
        else:
            for i, feature in enumerate(features):
                _check_feature(feature, f"features[{i}]", problems)
    elif document_type == 'Feature':
        _check_feature(document, "feature", problems)
    else:
        _check_geometry(document, "geometry", problems)

    bbox = document.get('bbox')
    if bbox is not None and (not isinstance(bbox, list) or len(bbox) not in (4, 6)
                             or not all(_is_number(v) for v in bbox)):
        problems.append("bbox: expected 4 or 6 numbers")

    return problems


def load_geojson(path: str) -> Dict:
    """Read a GeoJSON file and validate it

    Raises:
        GeoJSONError: If the file is not JSON or not valid GeoJSON
        OSError: If the file cannot be read
    """
    with open(path, 'r', encoding='utf-8') as f:
        try:
            document = json.load(f)
        except json.JSONDecodeError as e:
            raise GeoJSONError(f"{path}: invalid JSON: {e}") from e
        except UnicodeDecodeError as e:
            raise GeoJSONError(f"{path}: not a UTF-8 text file: {e}") from e

    problems = validate_geojson(document)
    if problems:
        raise GeoJSONError(f"{path}: invalid GeoJSON ({len(problems)} problems)", problems)

    return document
