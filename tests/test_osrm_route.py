"""
Tests for route geometry providers (OSRM mocked)
"""
import tempfile
import unittest
from unittest.mock import MagicMock, patch

import polyline
import requests

from vrpgeo.paths import OSRMGeometry, StraightLineGeometry
from vrpgeo.utils import GeoConfig, GeometryCache

COORDINATES = [[13.40, 52.52], [13.41, 52.53], [13.42, 52.54]]


def _osrm_response(points, status=200, code="Ok"):
    response = MagicMock()
    response.status_code = status
    response.text = "error"
    response.json.return_value = {
        "code": code,
        "routes": [{
            "geometry": polyline.encode([(lat, lng) for lng, lat in points]),
            "distance": 2500.0,
            "duration": 300.0,
            "legs": [{"distance": 1200.0, "duration": 140.0}, {"distance": 1300.0, "duration": 160.0}]
        }]
    }
    return response


class TestStraightLineGeometry(unittest.TestCase):

    def test_legs_and_totals(self):
        route = StraightLineGeometry(speed_kmh=36.0).route(COORDINATES)
        self.assertEqual(route.coordinates, COORDINATES)
        self.assertFalse(route.geometry_valid)
        self.assertEqual(len(route.legs), 2)
        self.assertAlmostEqual(route.distance_m, sum(l["distance_m"] for l in route.legs))
        # 36 km/h is 10 m/s
        self.assertAlmostEqual(route.duration_s, route.distance_m / 10.0)
        self.assertGreater(route.legs[0]["distance_m"], 1000)
        self.assertLess(route.legs[0]["distance_m"], 1500)

    def test_single_point(self):
        route = StraightLineGeometry().route([[13.40, 52.52]])
        self.assertEqual(route.distance_m, 0)
        self.assertEqual(route.legs, [])


class TestOSRMGeometry(unittest.TestCase):

    def setUp(self):
        self.config = GeoConfig(CACHE_ENABLED=False)

    @patch("vrpgeo.paths.osrm_route.requests.get")
    def test_street_geometry(self, mock_get):
        street = [[13.40, 52.52], [13.405, 52.521], [13.41, 52.53], [13.42, 52.54]]
        mock_get.return_value = _osrm_response(street)

        route = OSRMGeometry(server="http://osrm:5000/", config=self.config).route(COORDINATES)

        url = mock_get.call_args[0][0]
        self.assertEqual(url, "http://osrm:5000/route/v1/driving/13.4,52.52;13.41,52.53;13.42,52.54")
        self.assertEqual(mock_get.call_args[1]["params"]["overview"], "full")
        self.assertTrue(route.geometry_valid)
        self.assertEqual(len(route.coordinates), 4)
        self.assertAlmostEqual(route.coordinates[1][0], 13.405)
        self.assertAlmostEqual(route.coordinates[1][1], 52.521)
        self.assertEqual(route.distance_m, 2500.0)
        self.assertEqual(route.legs[1], {"distance_m": 1300.0, "duration_s": 160.0})

    @patch("vrpgeo.paths.osrm_route.requests.get", side_effect=requests.ConnectionError("down"))
    def test_fallback_on_connection_error(self, mock_get):
        with self.assertLogs("vrpgeo", level="WARNING"):
            route = OSRMGeometry(config=self.config).route(COORDINATES)
        self.assertFalse(route.geometry_valid)
        self.assertEqual(route.coordinates, COORDINATES)

    @patch("vrpgeo.paths.osrm_route.requests.get")
    def test_fallback_on_bad_code(self, mock_get):
        mock_get.return_value = _osrm_response(COORDINATES, code="NoRoute")
        route = OSRMGeometry(config=self.config).route(COORDINATES)
        self.assertFalse(route.geometry_valid)

    @patch("vrpgeo.paths.osrm_route.requests.get")
    def test_fallback_on_http_error(self, mock_get):
        mock_get.return_value = _osrm_response(COORDINATES, status=500)
        route = OSRMGeometry(config=self.config).route(COORDINATES)
        self.assertFalse(route.geometry_valid)

    @patch("vrpgeo.paths.osrm_route.requests.get")
    def test_fallback_on_non_object_body(self, mock_get):
        response = _osrm_response(COORDINATES)
        response.json.return_value = []
        mock_get.return_value = response

        with self.assertLogs("vrpgeo", level="WARNING"):
            route = OSRMGeometry(config=self.config).route(COORDINATES)
        self.assertFalse(route.geometry_valid)
        self.assertEqual(route.coordinates, COORDINATES)

    @patch("vrpgeo.paths.osrm_route.requests.get")
    def test_fallback_on_missing_geometry(self, mock_get):
        response = _osrm_response(COORDINATES)
        response.json.return_value["routes"][0]["geometry"] = None
        mock_get.return_value = response

        route = OSRMGeometry(config=self.config).route(COORDINATES)
        self.assertFalse(route.geometry_valid)
        self.assertEqual(route.coordinates, COORDINATES)

    @patch("vrpgeo.paths.osrm_route.requests.get")
    def test_fallback_on_route_list_of_strings(self, mock_get):
        response = _osrm_response(COORDINATES)
        response.json.return_value["routes"] = ["garbage"]
        mock_get.return_value = response

        route = OSRMGeometry(config=self.config).route(COORDINATES)
        self.assertFalse(route.geometry_valid)

    @patch("vrpgeo.paths.osrm_route.requests.get")
    def test_single_point_skips_request(self, mock_get):
        OSRMGeometry(config=self.config).route([[13.40, 52.52]])
        mock_get.assert_not_called()

    @patch("vrpgeo.paths.osrm_route.requests.get")
    def test_results_are_cached(self, mock_get):
        mock_get.return_value = _osrm_response(COORDINATES)

        with tempfile.TemporaryDirectory() as tmp:
            provider = OSRMGeometry(cache=GeometryCache(tmp), config=self.config)
            first = provider.route(COORDINATES)
            second = provider.route(COORDINATES)

        self.assertEqual(mock_get.call_count, 1)
        self.assertEqual(first, second)

    @patch("vrpgeo.paths.osrm_route.requests.get", side_effect=requests.Timeout("slow"))
    def test_fallback_is_not_cached(self, mock_get):
        with tempfile.TemporaryDirectory() as tmp:
            provider = OSRMGeometry(cache=GeometryCache(tmp), config=self.config)
            provider.route(COORDINATES)
            provider.route(COORDINATES)

        self.assertEqual(mock_get.call_count, 2)


if __name__ == "__main__":
    unittest.main()
