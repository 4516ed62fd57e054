"""
Route geometry providers
Straight lines between stops, or street geometry from the OSRM /route API
"""
from dataclasses import dataclass, field
from typing import Dict, List, Optional
import time

import requests
import polyline as polyline_codec

from ..utils.cache import GeometryCache
from ..utils.config import (
    CONFIG, GeoConfig, setup_logging, calculate_haversine_distance, estimate_duration
)

logger = setup_logging()


@dataclass
class RouteGeometry:
    """Geometry of a whole tour"""
    coordinates: List[List[float]]  # [[lng, lat], ...]
    distance_m: float
    duration_s: float
    geometry_valid: bool  # True when it follows real streets
    legs: List[Dict[str, float]] = field(default_factory=list)


class StraightLineGeometry:
    """Straight segments between consecutive positions"""

    def __init__(self, speed_kmh: float = None):
        self.speed_kmh = speed_kmh or CONFIG.SPEED_KMH

    def route(self, coordinates: List[List[float]]) -> RouteGeometry:
        """Build straight-line geometry

        Args:
            coordinates: Ordered [lng, lat] positions

        Returns:
            RouteGeometry with haversine leg distances
        """
        legs = []
        for (lng1, lat1), (lng2, lat2) in zip(coordinates, coordinates[1:]):
            distance = calculate_haversine_distance(lat1, lng1, lat2, lng2)
            legs.append({
                "distance_m": distance,
                "duration_s": estimate_duration(distance, self.speed_kmh)
            })

        return RouteGeometry(
            coordinates=[list(c) for c in coordinates],
            distance_m=sum(leg["distance_m"] for leg in legs),
            duration_s=sum(leg["duration_s"] for leg in legs),
            geometry_valid=False,
            legs=legs
        )


class OSRMGeometry:
    """Street geometry from an OSRM server, cached, with straight-line fallback"""

    def __init__(self, server: str = None, profile: str = None, timeout: int = None,
                 cache: Optional[GeometryCache] = None, config: GeoConfig = CONFIG):
        """Initialize provider

        Args:
            server: OSRM base URL
            profile: OSRM profile (driving, walking, ...)
            timeout: Request timeout in seconds
            cache: Geometry cache, None to use the configured one
            config: Configuration with defaults
        """
        self.server = (server or config.OSRM_SERVER).rstrip("/")
        self.profile = profile or config.OSRM_PROFILE
        self.timeout = timeout or config.OSRM_TIMEOUT
        if cache is None and config.CACHE_ENABLED:
            cache = GeometryCache(config.CACHE_DIR)
        self.cache = cache
        self.fallback = StraightLineGeometry(config.SPEED_KMH)

    def route(self, coordinates: List[List[float]]) -> RouteGeometry:
        """Get street geometry for ordered [lng, lat] positions"""
        if len(coordinates) < 2:
            return self.fallback.route(coordinates)

        # === CACHE CHECK ===
        cache_key = None
        if self.cache is not None:
            cache_key = self.cache.key(coordinates, self.server, self.profile)
            cached = self.cache.load(cache_key)
            if cached is not None:
                logger.debug(f"Cache hit for route with {len(coordinates)} points")
                return cached

        try:
            data = self._call_route(coordinates)
            result = self._process_response(data)
        except (requests.RequestException, ValueError, KeyError, TypeError, IndexError) as e:
            logger.warning(f"OSRM route failed, using straight lines: {e}")
            # Fallback results are not cached so a later run can still get streets
            return self.fallback.route(coordinates)

        if cache_key is not None:
            self.cache.save(cache_key, result)

        logger.info(f"Route geometry: {result.distance_m/1000:.1f} km, {result.duration_s/60:.1f} min")
        return result

    def _call_route(self, coordinates: List[List[float]]) -> Dict:
        """Call OSRM /route API

        Raises:
            requests.RequestException: If the request fails
            ValueError: If the response is not a usable route
        """
        coords_str = ";".join(f"{lng},{lat}" for lng, lat in coordinates)
        url = f"{self.server}/route/v1/{self.profile}/{coords_str}"
        params = {"overview": "full", "geometries": "polyline"}

        start_time = time.time()
        response = requests.get(url, params=params, timeout=self.timeout)
        logger.debug(f"OSRM response: {time.time() - start_time:.2f}s, status {response.status_code}")

        if response.status_code != 200:
            raise requests.RequestException(f"OSRM error {response.status_code}: {response.text}")

        data = response.json()
        if not isinstance(data, dict):
            raise ValueError(f"OSRM route: unexpected response body {type(data).__name__}")
        if data.get("code") != "Ok":
            raise ValueError(f"OSRM route failed: {data.get('message', 'Unknown error')}")
        if not isinstance(data.get("routes"), list) or not data["routes"]:
            raise ValueError("OSRM route: No routes returned")

        return data

    def _process_response(self, data: Dict) -> RouteGeometry:
        route = data["routes"][0]
        if not isinstance(route, dict) or not isinstance(route.get("geometry"), str):
            raise ValueError("OSRM route: missing polyline geometry")
        # polyline decodes to (lat, lng) pairs
        coordinates = [[lng, lat] for lat, lng in polyline_codec.decode(route["geometry"])]
        if len(coordinates) < 2:
            raise ValueError("OSRM route: geometry has fewer than 2 points")

        return RouteGeometry(
            coordinates=coordinates,
            distance_m=route["distance"],
            duration_s=route["duration"],
            geometry_valid=True,
            legs=[
                {"distance_m": leg["distance"], "duration_s": leg["duration"]}
                for leg in route.get("legs", [])
            ]
        )
