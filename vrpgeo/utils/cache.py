"""
Cache system for vrp-geo
Stores street geometries fetched from OSRM under hash-based keys
"""
import hashlib
import json
import os
import pickle
import logging
from typing import Any, Optional
from datetime import datetime

logger = logging.getLogger('vrpgeo.cache')


def obj_hash(o: Any) -> str:
    """
    Generate a SHA1 hash of an object to use as cache key.

    Args:
        o: Object to hash (must be JSON serializable)

    Returns:
        Hexadecimal SHA1 string
    """
    try:
        json_str = json.dumps(o, sort_keys=True, ensure_ascii=False)
    except TypeError:
        # Non serializable objects fall back to their repr
        json_str = repr(o)

    return hashlib.sha1(json_str.encode('utf-8')).hexdigest()


def get_cache_path(cache_dir: str, cache_type: str, key: str) -> str:
    """
    Build the path of a cache file.

    Args:
        cache_dir: Base cache directory
        cache_type: Kind of cached object (route, ...)
        key: Object hash

    Returns:
        Full path of the cache file
    """
    return os.path.join(cache_dir, f"{cache_type}_{key}.pkl")


def load_cache(path: str) -> Any:
    """
    Load an object from a pickle cache file.

    Args:
        path: Cache file path

    Returns:
        Deserialized object or None if missing or unreadable
    """
    if not os.path.exists(path):
        return None

    try:
        with open(path, "rb") as f:
            return pickle.load(f)
    except (OSError, pickle.UnpicklingError, EOFError) as e:
        logger.warning(f"Error loading cache {path}: {e}")
        return None


def save_cache(path: str, obj: Any) -> bool:
    """
    Save an object to a pickle cache file.

    Args:
        path: Cache file path
        obj: Object to serialize

    Returns:
        True if saved, False otherwise
    """
    try:
        os.makedirs(os.path.dirname(path) or ".", exist_ok=True)

        with open(path, "wb") as f:
            pickle.dump(obj, f, protocol=pickle.HIGHEST_PROTOCOL)

        return True
    except OSError as e:
        logger.warning(f"Error saving cache {path}: {e}")
        return False


def clear_old_cache(cache_dir: str, max_age_hours: int = 24) -> int:
    """
    Remove cache files older than the given age.

    Args:
        cache_dir: Cache directory
        max_age_hours: Maximum age in hours

    Returns:
        Number of deleted files
    """
    if not os.path.exists(cache_dir):
        return 0

    deleted_count = 0
    cutoff_time = datetime.now().timestamp() - (max_age_hours * 3600)

    for filename in os.listdir(cache_dir):
        if not filename.endswith('.pkl'):
            continue

        file_path = os.path.join(cache_dir, filename)
        if os.path.getmtime(file_path) < cutoff_time:
            os.remove(file_path)
            deleted_count += 1

    if deleted_count:
        logger.info(f"Removed {deleted_count} old cache files from {cache_dir}")
    return deleted_count


class GeometryCache:
    """Hash-based cache for route geometries"""

    def __init__(self, cache_dir: str = ".vrpgeo_cache"):
        """Initialize cache

        Args:
            cache_dir: Directory for cache files
        """
        self.cache_dir = cache_dir

    def key(self, coordinates, server: str, profile: str) -> str:
        """Cache key for a coordinate sequence on a given OSRM server/profile"""
        return obj_hash({
            "coordinates": [[round(lng, 6), round(lat, 6)] for lng, lat in coordinates],
            "server": server,
            "profile": profile
        })

    def load(self, key: str) -> Optional[Any]:
        return load_cache(get_cache_path(self.cache_dir, "route", key))

    def save(self, key: str, value: Any) -> bool:
        return save_cache(get_cache_path(self.cache_dir, "route", key), value)

    def clear(self, max_age_hours: int = 0) -> int:
        return clear_old_cache(self.cache_dir, max_age_hours)
