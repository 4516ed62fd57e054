"""
vrp-geo command line
Converts pragmatic solutions, checks documentation pages and serves maps
"""
import argparse
import os
import sys
from typing import List, Optional

from . import __version__
from .docs.page import check_page, expand_page
from .errors import VRPGeoError
from .export.writers import available_formats, get_writer
from .models.pragmatic import load_solution
from .models.problem import load_problem
from .paths.osrm_route import OSRMGeometry
from .utils.config import CONFIG, is_valid_url, setup_logging


def _fail(message: str) -> int:
    print(message, file=sys.stderr)
    return 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="vrp-geo",
        description="View solutions of vehicle routing problems on a map"
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--log-level", default=CONFIG.LOG_LEVEL,
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                        help="Logging level")

    subparsers = parser.add_subparsers(dest="command", required=True)

    convert = subparsers.add_parser("convert", help="Write a pragmatic solution in another format")
    convert.add_argument("solution", help="Pragmatic solution file")
    convert.add_argument("-p", "--problem", help="Pragmatic problem file, locates unassigned jobs")
    convert.add_argument("-f", "--format", default=CONFIG.DEFAULT_FORMAT,
                         help=f"Output format: {', '.join(available_formats())}")
    convert.add_argument("-g", "--geo-json", action="store_true",
                         help="Write the solution as GeoJSON (same as --format geojson)")
    convert.add_argument("-o", "--out", help="Output file (stdout when omitted)")
    convert.add_argument("--osrm-url", help="OSRM server used for street geometry")

    check = subparsers.add_parser("check-docs", help="Check pages that embed GeoJSON")
    check.add_argument("pages", nargs="+", help="Markdown pages")

    render = subparsers.add_parser("render-docs", help="Expand include directives of a page")
    render.add_argument("page", help="Markdown page")
    render.add_argument("-o", "--out", help="Output file (stdout when omitted)")

    serve = subparsers.add_parser("serve", help="Serve rendered maps over HTTP")
    serve.add_argument("--maps-dir", default="maps", help="Directory with maps")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=5000)

    return parser


def run_convert(args) -> int:
    output_format = "geojson" if args.geo_json else args.format

    try:
        writer = get_writer(output_format)
    except VRPGeoError as e:
        return _fail(str(e))

    try:
        solution = load_solution(args.solution)
    except (OSError, VRPGeoError) as e:
        return _fail(f"Cannot read solution from '{args.solution}': '{e}'")

    problem = None
    if args.problem:
        try:
            problem = load_problem(args.problem)
        except (OSError, VRPGeoError) as e:
            return _fail(f"Cannot read problem from '{args.problem}': '{e}'")

    geometry = None
    if args.osrm_url:
        if not is_valid_url(args.osrm_url):
            return _fail(f"Invalid OSRM url: '{args.osrm_url}'")
        geometry = OSRMGeometry(server=args.osrm_url)

    if not args.out:
        writer(solution, sys.stdout, problem=problem, geometry=geometry)
        return 0

    try:
        writer(solution, args.out, problem=problem, geometry=geometry)
    except OSError as e:
        return _fail(f"Cannot write output to '{args.out}': '{e}'")
    return 0


def run_check_docs(args) -> int:
    failed = False
    for page in args.pages:
        if not os.path.isfile(page):
            print(f"{page}: page not found", file=sys.stderr)
            failed = True
            continue

        try:
            issues = check_page(page)
        except OSError as e:
            issues = [f"{page}: cannot read page: {e}"]
        except VRPGeoError as e:
            issues = getattr(e, "issues", []) or [e]
        for issue in issues:
            print(issue, file=sys.stderr)
        failed = failed or bool(issues)

    return 1 if failed else 0


def run_render_docs(args) -> int:
    try:
        expanded = expand_page(args.page)
    except OSError as e:
        return _fail(f"Cannot read page '{args.page}': '{e}'")
    except VRPGeoError as e:
        for issue in getattr(e, "issues", []):
            print(issue, file=sys.stderr)
        return _fail(str(e))

    if not args.out:
        sys.stdout.write(expanded)
        return 0

    try:
        with open(args.out, 'w', encoding='utf-8') as f:
            f.write(expanded)
    except OSError as e:
        return _fail(f"Cannot write output to '{args.out}': '{e}'")
    return 0


def run_serve(args) -> int:
    from .server import create_app

    os.makedirs(args.maps_dir, exist_ok=True)
    logger = setup_logging()
    logger.info(f"Serving maps from {args.maps_dir} on http://{args.host}:{args.port}")
    create_app(args.maps_dir).run(host=args.host, port=args.port)
    return 0


COMMANDS = {
    "convert": run_convert,
    "check-docs": run_check_docs,
    "render-docs": run_render_docs,
    "serve": run_serve
}


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level)
    return COMMANDS[args.command](args)


if __name__ == "__main__":
    sys.exit(main())
