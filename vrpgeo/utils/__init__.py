"""
vrp-geo Utils Package
Configuration, logging, caching and geographic helpers
"""

from .cache import GeometryCache, obj_hash, load_cache, save_cache, clear_old_cache
from .config import (
    GeoConfig, CONFIG, setup_logging, is_valid_url,
    validate_coordinates, calculate_haversine_distance,
    estimate_duration, format_duration, format_distance,
    bounding_box
)

__all__ = [
    'GeometryCache',
    'obj_hash',
    'load_cache',
    'save_cache',
    'clear_old_cache',
    'GeoConfig',
    'CONFIG',
    'setup_logging',
    'is_valid_url',
    'validate_coordinates',
    'calculate_haversine_distance',
    'estimate_duration',
    'format_duration',
    'format_distance',
    'bounding_box'
]
