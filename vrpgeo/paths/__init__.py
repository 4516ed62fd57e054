"""
Paths Module for vrp-geo
Route geometry between tour stops
"""

from .osrm_route import RouteGeometry, StraightLineGeometry, OSRMGeometry

__all__ = [
    'RouteGeometry',
    'StraightLineGeometry',
    'OSRMGeometry'
]
