"""
Pragmatic problem format
Only the parts needed to locate jobs and vehicle depots on a map
"""
import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..errors import ProblemFormatError
from ..utils.config import validate_coordinates
from .pragmatic import Location

TASK_KINDS = ('pickups', 'deliveries', 'replacements', 'services')


@dataclass
class JobPlace:
    location: Location
    duration: float = 0.0
    tag: Optional[str] = None


@dataclass
class JobTask:
    """Pickup, delivery, replacement or service of a job"""
    kind: str
    places: List[JobPlace]
    demand: List[int] = field(default_factory=list)


@dataclass
class Job:
    id: str
    tasks: List[JobTask]

    def locations(self) -> List[Location]:
        """Distinct place locations in task order"""
        result = []
        for task in self.tasks:
            for place in task.places:
                if place.location not in result:
                    result.append(place.location)
        return result


@dataclass
class VehicleShift:
    start: Location
    end: Optional[Location] = None


@dataclass
class VehicleType:
    type_id: str
    vehicle_ids: List[str]
    shifts: List[VehicleShift]
    capacity: List[int] = field(default_factory=list)


@dataclass
class Problem:
    jobs: List[Job]
    vehicles: List[VehicleType]

    def job(self, job_id: str) -> Optional[Job]:
        for job in self.jobs:
            if job.id == job_id:
                return job
        return None


def _object(data: Any, path: str) -> Dict:
    if not isinstance(data, dict):
        raise ProblemFormatError("expected an object", path)
    return data


def _array(data: Dict, key: str, path: str) -> List:
    value = data.get(key) or []
    if not isinstance(value, list):
        raise ProblemFormatError("expected a list", f"{path}.{key}")
    return value


def _location(data: Any, path: str) -> Location:
    data = _object(data, path)
    lat, lng = data.get('lat'), data.get('lng')
    if not validate_coordinates(lat, lng):
        raise ProblemFormatError(f"invalid coordinates: lat={lat!r}, lng={lng!r}", path)
    return Location(lat=lat, lng=lng)


def _parse_job(data: Any, path: str) -> Job:
    data = _object(data, path)
    if 'id' not in data:
        raise ProblemFormatError("missing 'id'", path)

    tasks = []
    for kind in TASK_KINDS:
        for i, task in enumerate(_array(data, kind, path)):
            task_path = f"{path}.{kind}[{i}]"
            task = _object(task, task_path)
            places = [
                JobPlace(
                    location=_location(_object(place, f"{task_path}.places[{j}]").get('location'),
                                       f"{task_path}.places[{j}].location"),
                    duration=place.get('duration', 0.0),
                    tag=place.get('tag')
                )
                for j, place in enumerate(_array(task, 'places', task_path))
            ]
            if not places:
                raise ProblemFormatError("task has no places", task_path)
            tasks.append(JobTask(kind=kind[:-1], places=places, demand=list(_array(task, 'demand', task_path))))

    if not tasks:
        raise ProblemFormatError("job has no tasks", path)

    return Job(id=str(data['id']), tasks=tasks)


def _parse_vehicle(data: Any, path: str) -> VehicleType:
    data = _object(data, path)
    shifts = []
    for i, shift in enumerate(_array(data, 'shifts', path)):
        shift_path = f"{path}.shifts[{i}]"
        shift = _object(shift, shift_path)
        start = _object(shift.get('start'), f"{shift_path}.start")
        end = shift.get('end')
        shifts.append(VehicleShift(
            start=_location(start.get('location'), f"{shift_path}.start.location"),
            end=_location(_object(end, f"{shift_path}.end").get('location'), f"{shift_path}.end.location")
            if end is not None else None
        ))

    return VehicleType(
        type_id=str(data.get('typeId', '')),
        vehicle_ids=[str(v) for v in _array(data, 'vehicleIds', path)],
        shifts=shifts,
        capacity=list(_array(data, 'capacity', path))
    )


def parse_problem(data: Dict) -> Problem:
    """Build a Problem from a decoded pragmatic problem document

    Raises:
        ProblemFormatError: If the document does not follow the format
    """
    data = _object(data, "problem")
    plan = _object(data.get('plan'), 'plan')
    fleet = _object(data.get('fleet', {}), 'fleet')

    jobs = [_parse_job(job, f"plan.jobs[{i}]") for i, job in enumerate(_array(plan, 'jobs', 'plan'))]
    vehicles = [
        _parse_vehicle(vehicle, f"fleet.vehicles[{i}]")
        for i, vehicle in enumerate(_array(fleet, 'vehicles', 'fleet'))
    ]

    return Problem(jobs=jobs, vehicles=vehicles)


def load_problem(path: str) -> Problem:
    """Read and parse a pragmatic problem file

    Raises:
        ProblemFormatError: If the file is not JSON or not a valid problem
        OSError: If the file cannot be read
    """
    with open(path, 'r', encoding='utf-8') as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise ProblemFormatError(f"invalid JSON: {e}") from e
        except UnicodeDecodeError as e:
            raise ProblemFormatError(f"not a UTF-8 text file: {e}") from e

    return parse_problem(data)
