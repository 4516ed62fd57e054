"""
Test fixtures for vrp-geo
"""

from .solutions import TestDataFixtures, REPO_ROOT, BERLIN_DIR, DOCS_PAGE

__all__ = ['TestDataFixtures', 'REPO_ROOT', 'BERLIN_DIR', 'DOCS_PAGE']
