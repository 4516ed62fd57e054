"""
Exceptions for the vrp-geo package
"""


class VRPGeoError(Exception):
    """Base class for all vrp-geo errors"""


class SolutionFormatError(VRPGeoError):
    """Pragmatic solution document is malformed"""

    def __init__(self, message: str, path: str = None):
        self.path = path
        super().__init__(f"{path}: {message}" if path else message)


class ProblemFormatError(VRPGeoError):
    """Pragmatic problem document is malformed"""

    def __init__(self, message: str, path: str = None):
        self.path = path
        super().__init__(f"{path}: {message}" if path else message)


class GeoJSONError(VRPGeoError):
    """GeoJSON document cannot be parsed or is not valid"""

    def __init__(self, message: str, problems=None):
        self.problems = list(problems or [])
        super().__init__(message)


class UnknownFormatError(VRPGeoError):
    """No writer is registered for the requested output format"""

    def __init__(self, format_name: str):
        self.format_name = format_name
        super().__init__(f"Don't know how to write solution in '{format_name}' format")


class PageError(VRPGeoError):
    """Documentation page failed its build checks"""

    def __init__(self, page: str, issues):
        self.page = page
        self.issues = list(issues)
        super().__init__(f"{page}: {len(self.issues)} issue(s) found")
