"""
Documentation page checks
Build-time sanity checks for book pages that embed GeoJSON solutions
"""
import html
import json
import os
import re
from dataclasses import dataclass
from typing import List, Optional, Tuple

from ..errors import GeoJSONError, PageError
from ..export.validation import load_geojson
from ..utils.config import setup_logging

logger = setup_logging()

INCLUDE_RE = re.compile(r"\{\{#include\s+([^}\s]+)\s*\}\}")
MAP_RE = re.compile(r"<div\b[^>]*\bid=[\"']map[\"'][^>]*>", re.IGNORECASE)
DATA_BLOCK_RE = re.compile(r"<(\w+)\b([^>]*\bid=[\"']geojson[\"'][^>]*)>", re.IGNORECASE)
# display:none in a style, or a standalone hidden attribute
HIDDEN_RE = re.compile(r"display\s*:\s*none|(?:^|\s)hidden(?=\s|=|/|$)", re.IGNORECASE)


@dataclass
class Include:
    """An include directive found in a page"""
    path: str
    line: int
    start: int
    end: int

    @property
    def file_path(self) -> str:
        # Book syntax allows "file:anchor" and "file:start:end" suffixes
        return self.path.split(":", 1)[0]


@dataclass
class PageIssue:
    page: str
    line: int
    message: str

    def __str__(self):
        return f"{self.page}:{self.line}: {self.message}"


def _line_of(text: str, offset: int) -> int:
    return text.count("\n", 0, offset) + 1


def find_includes(markdown: str) -> List[Include]:
    """All include directives in document order"""
    return [
        Include(path=m.group(1), line=_line_of(markdown, m.start()), start=m.start(), end=m.end())
        for m in INCLUDE_RE.finditer(markdown)
    ]


def _hidden_blocks(markdown: str) -> List[Tuple[int, int, bool]]:
    """(start, end, hidden) spans of the geojson data block elements"""
    blocks = []
    for m in DATA_BLOCK_RE.finditer(markdown):
        tag, attributes = m.group(1), m.group(2)
        close = re.compile(rf"</{tag}\s*>", re.IGNORECASE).search(markdown, m.end())
        end = close.end() if close else len(markdown)
        blocks.append((m.start(), end, bool(HIDDEN_RE.search(attributes))))
    return blocks


def _read_page(path: str) -> str:
    with open(path, 'r', encoding='utf-8') as f:
        try:
            return f.read()
        except UnicodeDecodeError as e:
            raise PageError(path, [PageIssue(path, 1, f"not a UTF-8 text file: {e}")]) from e


def check_page(path: str) -> List[PageIssue]:
    """Check a documentation page that embeds GeoJSON

    Every .geojson include must resolve relative to the page and hold valid
    GeoJSON; a page with such includes needs a map element and must wrap
    each include in a hidden data block.

    Args:
        path: Markdown page path

    Returns:
        List of issues, empty when the page passes

    Raises:
        PageError: If the page is not UTF-8 text
    """
    markdown = _read_page(path)
    base_dir = os.path.dirname(os.path.abspath(path))
    issues = []

    geojson_includes = [i for i in find_includes(markdown) if i.file_path.endswith(".geojson")]
    if not geojson_includes:
        return issues

    if not MAP_RE.search(markdown):
        issues.append(PageIssue(path, 1, "page has no map element (<div id=\"map\">)"))

    blocks = _hidden_blocks(markdown)

    for include in geojson_includes:
        target = os.path.normpath(os.path.join(base_dir, include.file_path))

        if not os.path.isfile(target):
            issues.append(PageIssue(path, include.line, f"include does not resolve: {include.file_path}"))
        else:
            try:
                load_geojson(target)
            except GeoJSONError as e:
                details = "; ".join(e.problems[:3])
                issues.append(PageIssue(path, include.line, f"{e}{': ' + details if details else ''}"))

        block = next((b for b in blocks if b[0] < include.start and include.end <= b[1]), None)
        if block is None:
            issues.append(PageIssue(path, include.line, "include is not inside a data block (id=\"geojson\")"))
        elif not block[2]:
            issues.append(PageIssue(path, include.line, "data block is not hidden"))

    for issue in issues:
        logger.warning(str(issue))
    return issues


def _included_text(base_dir: str, include: Include) -> str:
    target = os.path.normpath(os.path.join(base_dir, include.file_path))
    if include.file_path.endswith(".geojson"):
        document = load_geojson(target)
        return html.escape(json.dumps(document, separators=(",", ":"), ensure_ascii=False), quote=False)
    return _read_page(target)


def expand_page(path: str, output: Optional[str] = None) -> str:
    """Replace include directives with the included contents

    Args:
        path: Markdown page path
        output: Optional path to write the expanded page to

    Returns:
        Expanded markdown

    Raises:
        PageError: If check_page reports issues
    """
    issues = check_page(path)
    if issues:
        raise PageError(path, issues)

    markdown = _read_page(path)
    base_dir = os.path.dirname(os.path.abspath(path))

    parts = []
    position = 0
    for include in find_includes(markdown):
        parts.append(markdown[position:include.start])
        parts.append(_included_text(base_dir, include))
        position = include.end
    parts.append(markdown[position:])
    expanded = "".join(parts)

    if output:
        with open(output, 'w', encoding='utf-8') as f:
            f.write(expanded)
        logger.info(f"Expanded page written: {output}")

    return expanded
