"""
Pragmatic solution format
Typed view of the solution documents written by the VRP solver
"""
import json
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Tuple

from ..errors import SolutionFormatError
from ..utils.config import validate_coordinates

# Activities that mark vehicle events rather than serve a job
MARKER_ACTIVITIES = frozenset(['departure', 'arrival', 'break', 'reload', 'dispatch'])


@dataclass
class Location:
    """WGS84 location as written by the solver"""
    lat: float
    lng: float

    def as_lon_lat(self) -> List[float]:
        """Position in GeoJSON axis order"""
        return [self.lng, self.lat]

    def to_dict(self) -> Dict[str, float]:
        return {"lat": self.lat, "lng": self.lng}


@dataclass
class Schedule:
    """Arrival and departure times of a stop (ISO-8601)"""
    arrival: str
    departure: str


@dataclass
class Interval:
    """Start and end times of a single activity (ISO-8601)"""
    start: str
    end: str


@dataclass
class Activity:
    """Activity performed at a stop"""
    job_id: str
    type: str
    location: Optional[Location] = None
    time: Optional[Interval] = None
    job_tag: Optional[str] = None

    @property
    def is_job(self) -> bool:
        return self.type not in MARKER_ACTIVITIES


@dataclass
class Stop:
    """Stop of a tour with the activities done there"""
    location: Location
    time: Schedule
    distance: float
    load: List[int]
    activities: List[Activity]

    @property
    def job_ids(self) -> List[str]:
        ids = []
        for activity in self.activities:
            if activity.is_job and activity.job_id not in ids:
                ids.append(activity.job_id)
        return ids


@dataclass
class Statistic:
    """Cost, distance (m) and duration (s) totals"""
    cost: float = 0.0
    distance: float = 0.0
    duration: float = 0.0
    times: Dict[str, float] = field(default_factory=dict)

    def __post_init__(self):
        for name in ('driving', 'serving', 'waiting', 'break'):
            self.times.setdefault(name, 0)


@dataclass
class Tour:
    """Tour of one vehicle shift"""
    vehicle_id: str
    type_id: str
    shift_index: int
    stops: List[Stop]
    statistic: Statistic

    @property
    def is_closed(self) -> bool:
        """Tour returns to an end location"""
        return any(a.type == 'arrival' for a in self.stops[-1].activities)

    def legs(self) -> Iterator[Tuple[List[Stop], int]]:
        """Iterate over tour legs as (window, index)

        Windows are pairs of consecutive stops. A single stop tour has one
        window with that stop; an open tour with jobs gets a trailing window
        holding only its last stop.
        """
        last_index = len(self.stops) - 1
        window_size = 1 if last_index == 0 else 2

        for index in range(len(self.stops) - window_size + 1):
            yield self.stops[index:index + window_size], index

        if not self.is_closed and last_index > 0:
            yield self.stops[last_index:], last_index

    def job_ids(self) -> List[str]:
        """Served job ids in order of first appearance"""
        ids = []
        for stop in self.stops:
            for job_id in stop.job_ids:
                if job_id not in ids:
                    ids.append(job_id)
        return ids

    def activity_count(self) -> int:
        return sum(1 for stop in self.stops for a in stop.activities if a.is_job)

    def coordinates(self) -> List[List[float]]:
        return [stop.location.as_lon_lat() for stop in self.stops]


@dataclass
class UnassignedReason:
    code: str
    description: str = ""


@dataclass
class UnassignedJob:
    """Job the solver could not assign, with reasons"""
    job_id: str
    reasons: List[UnassignedReason]


@dataclass
class Solution:
    """Complete pragmatic solution"""
    statistic: Statistic
    tours: List[Tour]
    unassigned: List[UnassignedJob] = field(default_factory=list)

    def served_job_ids(self) -> List[str]:
        ids = []
        for tour in self.tours:
            for job_id in tour.job_ids():
                if job_id not in ids:
                    ids.append(job_id)
        return ids


# === PARSING ===

def _require(data: Dict, key: str, path: str) -> Any:
    if not isinstance(data, dict):
        raise SolutionFormatError("expected an object", path)
    if key not in data:
        raise SolutionFormatError(f"missing '{key}'", path)
    return data[key]


def _list(data: Dict, key: str, path: str, required: bool = True) -> List:
    if not isinstance(data, dict):
        raise SolutionFormatError("expected an object", path or None)
    value = _require(data, key, path) if required else data.get(key) or []
    if not isinstance(value, list):
        raise SolutionFormatError("expected a list", f"{path}.{key}" if path else key)
    return value


def _number(value: Any, path: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise SolutionFormatError(f"expected a number, got {value!r}", path)
    return value


def _parse_location(data: Any, path: str) -> Location:
    lat = _number(_require(data, 'lat', path), f"{path}.lat")
    lng = _number(_require(data, 'lng', path), f"{path}.lng")
    if not validate_coordinates(lat, lng):
        raise SolutionFormatError(f"coordinates out of range: lat={lat}, lng={lng}", path)
    return Location(lat=lat, lng=lng)


def _parse_statistic(data: Any, path: str) -> Statistic:
    if data is None:
        return Statistic()
    if not isinstance(data, dict):
        raise SolutionFormatError("expected an object", path)

    times = data.get('times') or {}
    if not isinstance(times, dict):
        raise SolutionFormatError("expected an object", f"{path}.times")

    return Statistic(
        cost=_number(data.get('cost', 0.0), f"{path}.cost"),
        distance=_number(data.get('distance', 0.0), f"{path}.distance"),
        duration=_number(data.get('duration', 0.0), f"{path}.duration"),
        times={name: _number(value, f"{path}.times.{name}") for name, value in times.items()}
    )


def _parse_activity(data: Any, path: str) -> Activity:
    if not isinstance(data, dict):
        raise SolutionFormatError("expected an object", path)

    location = None
    if data.get('location') is not None:
        location = _parse_location(data['location'], f"{path}.location")

    time = None
    if data.get('time') is not None:
        time = Interval(start=_require(data['time'], 'start', f"{path}.time"),
                        end=_require(data['time'], 'end', f"{path}.time"))

    return Activity(
        job_id=str(_require(data, 'jobId', path)),
        type=str(_require(data, 'type', path)),
        location=location,
        time=time,
        job_tag=data.get('jobTag')
    )


def _parse_stop(data: Any, path: str) -> Stop:
    location = _parse_location(_require(data, 'location', path), f"{path}.location")
    time = _require(data, 'time', path)
    schedule = Schedule(arrival=_require(time, 'arrival', f"{path}.time"),
                        departure=_require(time, 'departure', f"{path}.time"))

    activities = [
        _parse_activity(activity, f"{path}.activities[{i}]")
        for i, activity in enumerate(_list(data, 'activities', path))
    ]

    load = [
        _number(value, f"{path}.load[{i}]")
        for i, value in enumerate(_list(data, 'load', path, required=False))
    ]

    return Stop(
        location=location,
        time=schedule,
        distance=_number(data.get('distance', 0), f"{path}.distance"),
        load=load,
        activities=activities
    )


def _parse_tour(data: Any, path: str) -> Tour:
    stops = [
        _parse_stop(stop, f"{path}.stops[{i}]")
        for i, stop in enumerate(_list(data, 'stops', path))
    ]
    if not stops:
        raise SolutionFormatError("tour has no stops", f"{path}.stops")

    return Tour(
        vehicle_id=str(_require(data, 'vehicleId', path)),
        type_id=str(data.get('typeId', '')),
        shift_index=int(_number(data.get('shiftIndex', 0), f"{path}.shiftIndex")),
        stops=stops,
        statistic=_parse_statistic(data.get('statistic'), f"{path}.statistic")
    )


def _parse_unassigned(data: Any, path: str) -> UnassignedJob:
    reasons = []
    for i, reason in enumerate(_list(data, 'reasons', path, required=False)):
        reason_path = f"{path}.reasons[{i}]"
        reasons.append(UnassignedReason(
            code=str(_require(reason, 'code', reason_path)),
            description=str(reason.get('description', ''))
        ))
    return UnassignedJob(job_id=str(_require(data, 'jobId', path)), reasons=reasons)


def parse_solution(data: Dict) -> Solution:
    """Build a Solution from a decoded pragmatic document

    Args:
        data: Decoded JSON object

    Returns:
        Solution

    Raises:
        SolutionFormatError: If the document does not follow the format
    """
    if not isinstance(data, dict):
        raise SolutionFormatError("solution must be a JSON object")

    tours = [_parse_tour(tour, f"tours[{i}]") for i, tour in enumerate(_list(data, 'tours', ''))]
    unassigned = [
        _parse_unassigned(job, f"unassigned[{i}]")
        for i, job in enumerate(_list(data, 'unassigned', '', required=False))
    ]

    return Solution(
        statistic=_parse_statistic(data.get('statistic'), 'statistic'),
        tours=tours,
        unassigned=unassigned
    )


def load_solution(path: str) -> Solution:
    """Read and parse a pragmatic solution file

    Raises:
        SolutionFormatError: If the file is not JSON or not a valid solution
        OSError: If the file cannot be read
    """
    with open(path, 'r', encoding='utf-8') as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise SolutionFormatError(f"invalid JSON: {e}") from e
        except UnicodeDecodeError as e:
            raise SolutionFormatError(f"not a UTF-8 text file: {e}") from e

    return parse_solution(data)


# === SERIALIZATION ===

def _statistic_to_dict(statistic: Statistic) -> Dict:
    return {
        "cost": statistic.cost,
        "distance": statistic.distance,
        "duration": statistic.duration,
        "times": dict(statistic.times)
    }


def _activity_to_dict(activity: Activity) -> Dict:
    result = {"jobId": activity.job_id, "type": activity.type}
    if activity.location is not None:
        result["location"] = activity.location.to_dict()
    if activity.time is not None:
        result["time"] = {"start": activity.time.start, "end": activity.time.end}
    if activity.job_tag is not None:
        result["jobTag"] = activity.job_tag
    return result


def solution_to_dict(solution: Solution) -> Dict:
    """Serialize a Solution back to the pragmatic document layout"""
    return {
        "statistic": _statistic_to_dict(solution.statistic),
        "tours": [
            {
                "vehicleId": tour.vehicle_id,
                "typeId": tour.type_id,
                "shiftIndex": tour.shift_index,
                "stops": [
                    {
                        "location": stop.location.to_dict(),
                        "time": {"arrival": stop.time.arrival, "departure": stop.time.departure},
                        "distance": stop.distance,
                        "load": list(stop.load),
                        "activities": [_activity_to_dict(a) for a in stop.activities]
                    }
                    for stop in tour.stops
                ],
                "statistic": _statistic_to_dict(tour.statistic)
            }
            for tour in solution.tours
        ],
        "unassigned": [
            {
                "jobId": job.job_id,
                "reasons": [{"code": r.code, "description": r.description} for r in job.reasons]
            }
            for job in solution.unassigned
        ]
    }
