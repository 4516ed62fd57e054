"""
Configuration and utility functions for vrp-geo
"""
import os
import logging
from typing import List, Optional, Tuple
from dataclasses import dataclass

import validators

logger = logging.getLogger('vrpgeo.config')

LOG_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')


# vrp-geo Configuration
@dataclass
class GeoConfig:
    """vrp-geo configuration"""

    # OSRM Configuration (street geometry only, never used for solving)
    OSRM_SERVER: str = "http://localhost:5000"
    OSRM_PROFILE: str = "driving"
    OSRM_TIMEOUT: int = 30

    # Average speed used when straight lines replace street geometry
    SPEED_KMH: float = 30.0

    # GeoJSON styling (simplestyle property names)
    ROUTE_COLORS: List[str] = None
    UNASSIGNED_COLOR: str = "#000000"
    MARKER_SIZE: str = "medium"
    STROKE_WIDTH: int = 4

    # Map Configuration
    MAP_TILES: str = "OpenStreetMap"
    MAP_ZOOM: int = 12

    # Cache Configuration
    CACHE_ENABLED: bool = True
    CACHE_DIR: str = ".vrpgeo_cache"
    CACHE_EXPIRE_HOURS: int = 24 * 7

    # Output Configuration
    DEFAULT_FORMAT: str = "pragmatic"
    LOG_LEVEL: str = "INFO"

    def __post_init__(self):
        if self.ROUTE_COLORS is None:
            self.ROUTE_COLORS = [
                '#e6194b', '#3cb44b', '#4363d8', '#f58231', '#911eb4',
                '#46f0f0', '#f032e6', '#bcf60c', '#008080', '#9a6324'
            ]

    @classmethod
    def from_env(cls, environ=None) -> "GeoConfig":
        """Build configuration from VRPGEO_* environment variables

        Invalid values are logged and the default is kept.

        Args:
            environ: Mapping to read from (defaults to os.environ)

        Returns:
            GeoConfig with overrides applied
        """
        env = os.environ if environ is None else environ
        config = cls()

        server = env.get("VRPGEO_OSRM_SERVER")
        if server:
            if is_valid_url(server):
                config.OSRM_SERVER = server.rstrip("/")
            else:
                logger.warning(f"VRPGEO_OSRM_SERVER is not a valid URL: {server}, using {config.OSRM_SERVER}")

        config.OSRM_PROFILE = env.get("VRPGEO_OSRM_PROFILE", config.OSRM_PROFILE)
        if env.get("VRPGEO_OSRM_TIMEOUT"):
            try:
                timeout = int(env["VRPGEO_OSRM_TIMEOUT"])
            except ValueError:
                timeout = 0
            if timeout > 0:
                config.OSRM_TIMEOUT = timeout
            else:
                logger.warning(f"VRPGEO_OSRM_TIMEOUT must be a positive number of seconds: "
                               f"{env['VRPGEO_OSRM_TIMEOUT']}, using {config.OSRM_TIMEOUT}")

        config.CACHE_DIR = env.get("VRPGEO_CACHE_DIR", config.CACHE_DIR)
        if env.get("VRPGEO_CACHE_ENABLED"):
            config.CACHE_ENABLED = env["VRPGEO_CACHE_ENABLED"].lower() in ("1", "true", "yes", "on")

        level = env.get("VRPGEO_LOG_LEVEL")
        if level:
            if level.upper() in LOG_LEVELS:
                config.LOG_LEVEL = level.upper()
            else:
                logger.warning(f"VRPGEO_LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}: {level}, "
                               f"using {config.LOG_LEVEL}")
        return config

    def route_color(self, tour_idx: int) -> str:
        """Get color for a tour; stable for the same index"""
        return self.ROUTE_COLORS[tour_idx % len(self.ROUTE_COLORS)]


def setup_logging(level: str = None) -> logging.Logger:
    """Setup logging for vrp-geo

    Args:
        level: Logging level (defaults to CONFIG.LOG_LEVEL)

    Returns:
        Configured logger
    """
    name = (level or CONFIG.LOG_LEVEL).upper()
    if name not in LOG_LEVELS:
        name = 'INFO'

    logging.basicConfig(
        level=logging.getLevelName(name),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    logger = logging.getLogger('vrpgeo')
    if level:
        logger.setLevel(name)
    return logger


def is_valid_url(url: str) -> bool:
    """Check an http(s) URL; localhost is accepted as validators rejects it"""
    if url.startswith(("http://localhost", "https://localhost")):
        return True
    return bool(validators.url(url))


# Global configuration instance
CONFIG = GeoConfig.from_env()


def validate_coordinates(lat: float, lng: float) -> bool:
    """Validate a WGS84 coordinate pair

    Args:
        lat: Latitude
        lng: Longitude

    Returns:
        True if coordinates are inside the valid ranges
    """
    for value in (lat, lng):
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return False
    return -90 <= lat <= 90 and -180 <= lng <= 180


def calculate_haversine_distance(lat1: float, lon1: float,
                                 lat2: float, lon2: float) -> float:
    """Calculate haversine distance between two points

    Args:
        lat1, lon1: First point coordinates
        lat2, lon2: Second point coordinates

    Returns:
        Distance in meters
    """
    from math import radians, cos, sin, asin, sqrt

    # Convert to radians
    lat1, lon1, lat2, lon2 = map(radians, [lat1, lon1, lat2, lon2])

    # Haversine formula
    dlat = lat2 - lat1
    dlon = lon2 - lon1
    a = sin(dlat/2)**2 + cos(lat1) * cos(lat2) * sin(dlon/2)**2
    c = 2 * asin(sqrt(a))

    # Earth radius in meters
    r = 6371000

    return c * r


def estimate_duration(distance_m: float, speed_kmh: float = None) -> float:
    """Estimate travel time in seconds for a distance in meters"""
    if speed_kmh is None:
        speed_kmh = CONFIG.SPEED_KMH
    return (distance_m / 1000) / speed_kmh * 3600


def format_duration(seconds: int) -> str:
    """Format duration in human-readable format

    Args:
        seconds: Duration in seconds

    Returns:
        Formatted duration string
    """
    seconds = int(seconds)
    if seconds < 60:
        return f"{seconds}s"
    elif seconds < 3600:
        return f"{seconds//60}m {seconds%60}s"
    else:
        hours = seconds // 3600
        minutes = (seconds % 3600) // 60
        return f"{hours}h {minutes}m"


def format_distance(meters: float) -> str:
    """Format distance in human-readable format

    Args:
        meters: Distance in meters

    Returns:
        Formatted distance string
    """
    if meters < 1000:
        return f"{meters:.0f}m"
    else:
        return f"{meters/1000:.1f}km"


def bounding_box(positions: List[Tuple[float, float]]) -> Optional[List[float]]:
    """Bounding box [min_lng, min_lat, max_lng, max_lat] of [lng, lat] positions"""
    if not positions:
        return None
    lngs = [p[0] for p in positions]
    lats = [p[1] for p in positions]
    return [min(lngs), min(lats), max(lngs), max(lats)]
