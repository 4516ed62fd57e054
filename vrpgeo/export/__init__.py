"""
Export Module for vrp-geo
GeoJSON conversion, validation and multi-format writers
"""

from .geojson import solution_to_geojson, write_geojson
from .validation import validate_geojson, load_geojson
from .writers import (
    WRITERS, available_formats, get_writer,
    stops_dataframe, build_summary, build_map
)

__all__ = [
    'solution_to_geojson',
    'write_geojson',
    'validate_geojson',
    'load_geojson',
    'WRITERS',
    'available_formats',
    'get_writer',
    'stops_dataframe',
    'build_summary',
    'build_map'
]
