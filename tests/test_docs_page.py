"""
Tests for documentation page checks
"""
import json
import os
import shutil
import tempfile
import unittest

from vrpgeo.docs import check_page, expand_page, find_includes
from vrpgeo.errors import PageError

from tests.fixtures import BERLIN_DIR, DOCS_PAGE

PAGE = """# Map

<div id="map"></div>

<div id="geojson" style="display: none;">
{{#include data/solution.geojson}}
</div>
"""


class TestRepositoryPage(unittest.TestCase):
    """The page shipped in docs/ passes its build checks"""

    def test_include_resolves_to_valid_geojson(self):
        self.assertEqual(check_page(DOCS_PAGE), [])

    def test_include_path(self):
        with open(DOCS_PAGE, encoding="utf-8") as f:
            includes = find_includes(f.read())
        self.assertEqual(len(includes), 1)
        self.assertEqual(
            includes[0].path,
            "../../../examples/json-pragmatic/data/objectives/berlin.default.solution.geojson"
        )

    def test_expanded_page_has_map_and_hidden_data(self):
        expanded = expand_page(DOCS_PAGE)
        self.assertNotIn("{{#include", expanded)
        self.assertIn('<div id="map"', expanded)
        self.assertIn('<div id="geojson" style="display: none;">', expanded)
        self.assertIn('"FeatureCollection"', expanded)


class TestPageChecks(unittest.TestCase):
    """Problems reported for broken pages"""

    def setUp(self):
        self.tmp = tempfile.mkdtemp()
        os.makedirs(os.path.join(self.tmp, "data"))
        shutil.copy(os.path.join(BERLIN_DIR, "berlin.default.solution.geojson"),
                    os.path.join(self.tmp, "data", "solution.geojson"))

    def tearDown(self):
        shutil.rmtree(self.tmp)

    def _page(self, text):
        path = os.path.join(self.tmp, "page.md")
        with open(path, "w", encoding="utf-8") as f:
            f.write(text)
        return path

    def test_valid_page(self):
        self.assertEqual(check_page(self._page(PAGE)), [])

    def test_include_line_numbers(self):
        includes = find_includes(PAGE)
        self.assertEqual(includes[0].line, 6)

    def test_include_suffix_is_ignored(self):
        includes = find_includes("{{#include data/solution.geojson:features}}")
        self.assertEqual(includes[0].file_path, "data/solution.geojson")

    def test_page_without_geojson_is_skipped(self):
        self.assertEqual(check_page(self._page("# Title\n\n{{#include code.rs}}\n")), [])

    def test_missing_file(self):
        issues = check_page(self._page(PAGE.replace("solution.geojson", "missing.geojson")))
        self.assertEqual(len(issues), 1)
        self.assertIn("does not resolve", issues[0].message)
        self.assertEqual(issues[0].line, 6)

    def test_invalid_geojson(self):
        with open(os.path.join(self.tmp, "data", "solution.geojson"), "w") as f:
            json.dump({"type": "FeatureCollection", "features": [{"type": "Feature"}]}, f)
        issues = check_page(self._page(PAGE))
        self.assertEqual(len(issues), 1)
        self.assertIn("invalid GeoJSON", issues[0].message)

    def test_no_map_element(self):
        issues = check_page(self._page(PAGE.replace('<div id="map"></div>', "")))
        self.assertEqual([i.message for i in issues], ['page has no map element (<div id="map">)'])

    def test_data_block_not_hidden(self):
        issues = check_page(self._page(PAGE.replace(' style="display: none;"', "")))
        self.assertEqual([i.message for i in issues], ["data block is not hidden"])

    def test_hidden_attribute(self):
        page = PAGE.replace(' style="display: none;"', " hidden")
        self.assertEqual(check_page(self._page(page)), [])

    def test_hidden_in_other_attribute_values_is_not_hidden(self):
        for attributes in (' class="not-hidden"', ' aria-hidden="false"'):
            page = PAGE.replace(' style="display: none;"', attributes)
            issues = check_page(self._page(page))
            self.assertEqual([i.message for i in issues], ["data block is not hidden"], attributes)

    def test_hidden_attribute_with_value(self):
        page = PAGE.replace(' style="display: none;"', ' hidden="hidden"')
        self.assertEqual(check_page(self._page(page)), [])

    def test_non_utf8_page(self):
        path = os.path.join(self.tmp, "binary.md")
        with open(path, "wb") as f:
            f.write(b"\xff\xfe\x00garbage")
        with self.assertRaises(PageError) as ctx:
            check_page(path)
        self.assertIn("UTF-8", ctx.exception.issues[0].message)

    def test_non_utf8_geojson_include(self):
        with open(os.path.join(self.tmp, "data", "solution.geojson"), "wb") as f:
            f.write(b"\xff\xfe\x00garbage")
        issues = check_page(self._page(PAGE))
        self.assertEqual(len(issues), 1)
        self.assertIn("UTF-8", issues[0].message)

    def test_include_outside_data_block(self):
        page = "<div id=\"map\"></div>\n\n{{#include data/solution.geojson}}\n"
        issues = check_page(self._page(page))
        self.assertIn('not inside a data block', issues[0].message)

    def test_expand_escapes_markup(self):
        with open(os.path.join(self.tmp, "data", "solution.geojson"), "w") as f:
            json.dump({"type": "FeatureCollection", "features": [{
                "type": "Feature",
                "geometry": {"type": "Point", "coordinates": [13.4, 52.5]},
                "properties": {"name": "<b>depot</b>"}
            }]}, f)
        expanded = expand_page(self._page(PAGE))
        self.assertIn("&lt;b&gt;depot&lt;/b&gt;", expanded)

    def test_expand_writes_output(self):
        output = os.path.join(self.tmp, "out.md")
        expanded = expand_page(self._page(PAGE), output=output)
        with open(output, encoding="utf-8") as f:
            self.assertEqual(f.read(), expanded)

    def test_expand_refuses_broken_page(self):
        with self.assertRaises(PageError) as ctx:
            expand_page(self._page(PAGE.replace("solution.geojson", "missing.geojson")))
        self.assertEqual(len(ctx.exception.issues), 1)


if __name__ == "__main__":
    unittest.main()
