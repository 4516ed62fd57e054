"""
vrp-geo
Geographic views of pragmatic VRP solutions
"""

__version__ = "1.0.0"

from .models import Solution, Problem, load_solution, load_problem, parse_solution, parse_problem
from .export import (
    solution_to_geojson,
    write_geojson,
    validate_geojson,
    load_geojson,
    get_writer,
    available_formats
)
from .docs import check_page, expand_page

__all__ = [
    '__version__',
    'Solution',
    'Problem',
    'load_solution',
    'load_problem',
    'parse_solution',
    'parse_problem',
    'solution_to_geojson',
    'write_geojson',
    'validate_geojson',
    'load_geojson',
    'get_writer',
    'available_formats',
    'check_page',
    'expand_page'
]
