"""
Pragmatic documents used across the test suite
"""
import copy
import os

REPO_ROOT = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
BERLIN_DIR = os.path.join(REPO_ROOT, "examples", "json-pragmatic", "data", "objectives")
DOCS_PAGE = os.path.join(REPO_ROOT, "docs", "src", "concepts", "geojson.md")


def _stop(lat, lng, arrival, departure, distance, load, activities):
    return {
        "location": {"lat": lat, "lng": lng},
        "time": {"arrival": arrival, "departure": departure},
        "distance": distance,
        "load": load,
        "activities": activities
    }


class TestDataFixtures:
    """
    Pragmatic solution and problem documents.
    """
    __test__ = False

    @staticmethod
    def closed_tour():
        """Depot, two deliveries, back to depot"""
        return {
            "vehicleId": "v1",
            "typeId": "vehicle",
            "shiftIndex": 0,
            "stops": [
                _stop(52.52, 13.40, "2020-01-01T08:00:00Z", "2020-01-01T08:00:00Z", 0, [2],
                      [{"jobId": "departure", "type": "departure"}]),
                _stop(52.53, 13.41, "2020-01-01T08:10:00Z", "2020-01-01T08:15:00Z", 1500, [1],
                      [{"jobId": "job1", "type": "delivery"}]),
                _stop(52.54, 13.42, "2020-01-01T08:25:00Z", "2020-01-01T08:30:00Z", 3000, [0],
                      [{"jobId": "job2", "type": "delivery"}]),
                _stop(52.52, 13.40, "2020-01-01T08:45:00Z", "2020-01-01T08:45:00Z", 5200, [0],
                      [{"jobId": "arrival", "type": "arrival"}])
            ],
            "statistic": {"cost": 25.5, "distance": 5200, "duration": 2700,
                          "times": {"driving": 2100, "serving": 600}}
        }

    @staticmethod
    def open_tour():
        """Depot, then a stop with two activities, no return"""
        return {
            "vehicleId": "v2",
            "typeId": "vehicle",
            "shiftIndex": 1,
            "stops": [
                _stop(52.50, 13.30, "2020-01-01T09:00:00Z", "2020-01-01T09:00:00Z", 0, [0],
                      [{"jobId": "departure", "type": "departure"}]),
                _stop(52.51, 13.31, "2020-01-01T09:12:00Z", "2020-01-01T09:20:00Z", 1800, [2],
                      [
                          {"jobId": "job3", "type": "pickup",
                           "location": {"lat": 52.51, "lng": 13.31},
                           "time": {"start": "2020-01-01T09:12:00Z", "end": "2020-01-01T09:16:00Z"}},
                          {"jobId": "job4", "type": "pickup", "jobTag": "back-door",
                           "location": {"lat": 52.51, "lng": 13.31},
                           "time": {"start": "2020-01-01T09:16:00Z", "end": "2020-01-01T09:20:00Z"}}
                      ])
            ],
            "statistic": {"cost": 12.0, "distance": 1800, "duration": 1200,
                          "times": {"driving": 720, "serving": 480}}
        }

    @staticmethod
    def single_stop_tour():
        return {
            "vehicleId": "v3",
            "typeId": "vehicle",
            "shiftIndex": 0,
            "stops": [
                _stop(52.49, 13.35, "2020-01-01T10:00:00Z", "2020-01-01T10:05:00Z", 0, [0],
                      [{"jobId": "departure", "type": "departure"},
                       {"jobId": "job6", "type": "service"}])
            ],
            "statistic": {"cost": 1.0, "distance": 0, "duration": 300}
        }

    @staticmethod
    def sample_solution():
        """Two tours and one unassigned job"""
        return {
            "statistic": {"cost": 37.5, "distance": 7000, "duration": 3900,
                          "times": {"driving": 2820, "serving": 1080, "waiting": 0, "break": 0}},
            "tours": [TestDataFixtures.closed_tour(), TestDataFixtures.open_tour()],
            "unassigned": [
                {"jobId": "job5", "reasons": [
                    {"code": "CAPACITY_CONSTRAINT", "description": "does not fit into any vehicle"}
                ]}
            ]
        }

    @staticmethod
    def sample_problem():
        def delivery(job_id, lat, lng, kind="deliveries"):
            return {"id": job_id, kind: [{"places": [{"location": {"lat": lat, "lng": lng},
                                                      "duration": 300}], "demand": [1]}]}

        return {
            "plan": {
                "jobs": [
                    delivery("job1", 52.53, 13.41),
                    delivery("job2", 52.54, 13.42),
                    delivery("job3", 52.51, 13.31, "pickups"),
                    delivery("job4", 52.51, 13.31, "pickups"),
                    {"id": "job5", "pickups": [{"places": [{"location": {"lat": 52.45, "lng": 13.20}}]}],
                     "deliveries": [{"places": [{"location": {"lat": 52.46, "lng": 13.21}}]}]}
                ]
            },
            "fleet": {
                "vehicles": [{
                    "typeId": "vehicle",
                    "vehicleIds": ["v1", "v2"],
                    "shifts": [{"start": {"earliest": "2020-01-01T08:00:00Z",
                                          "location": {"lat": 52.52, "lng": 13.40}},
                                "end": {"latest": "2020-01-01T18:00:00Z",
                                        "location": {"lat": 52.52, "lng": 13.40}}},
                               {"start": {"earliest": "2020-01-01T09:00:00Z",
                                          "location": {"lat": 52.50, "lng": 13.30}}}],
                    "capacity": [2]
                }]
            }
        }

    @staticmethod
    def copy(document):
        return copy.deepcopy(document)
