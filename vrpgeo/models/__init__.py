"""
Models Module for vrp-geo
Pragmatic solution and problem documents
"""

from .pragmatic import (
    Location, Schedule, Interval, Activity, Stop, Statistic, Tour,
    UnassignedReason, UnassignedJob, Solution,
    parse_solution, load_solution, solution_to_dict
)
from .problem import (
    JobPlace, JobTask, Job, VehicleShift, VehicleType, Problem,
    parse_problem, load_problem
)

__all__ = [
    'Location',
    'Schedule',
    'Interval',
    'Activity',
    'Stop',
    'Statistic',
    'Tour',
    'UnassignedReason',
    'UnassignedJob',
    'Solution',
    'parse_solution',
    'load_solution',
    'solution_to_dict',
    'JobPlace',
    'JobTask',
    'Job',
    'VehicleShift',
    'VehicleType',
    'Problem',
    'parse_problem',
    'load_problem'
]
