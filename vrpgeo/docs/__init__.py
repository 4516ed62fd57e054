"""
Docs Module for vrp-geo
"""

from .page import Include, PageIssue, find_includes, check_page, expand_page

__all__ = [
    'Include',
    'PageIssue',
    'find_includes',
    'check_page',
    'expand_page'
]
