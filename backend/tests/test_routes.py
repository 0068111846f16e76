import json
import threading
import unittest
from unittest import mock

import backend.config as config_module
from backend.app import create_app
from backend.services.jobs import ScrapeJobController
from scraper.datasource.base import DrawSource, SourceUnavailableError
from scraper.types import DrawRecord

DRAWS = [
    DrawRecord(draw_date="2024-03-16", first_prize="123456", last_two_digits="56"),
    DrawRecord(draw_date="2024-03-01", first_prize="654321", last_two_digits="21"),
    DrawRecord(draw_date="2024-02-16", first_prize="123456", last_two_digits=None),
]


class StaticSource(DrawSource):
    def __init__(self, draws, gate=None, error=None) -> None:
        self._draws = draws
        self._gate = gate
        self._error = error

    def iter_draws(self, lotto_type, progress):
        progress("Scraping page 1: https://example.test/archive/")
        if self._gate is not None:
            self._gate.wait(5)
        if self._error is not None:
            raise self._error
        yield from self._draws


class RouteTests(unittest.TestCase):
    def setUp(self) -> None:
        config_module.load_settings.cache_clear()

        self.gate = threading.Event()
        self.gate.set()
        self.source = StaticSource(DRAWS, gate=self.gate)
        self.controller = ScrapeJobController(lambda lotto_type: self.source)

        patchers = [
            mock.patch("backend.routes.scrape.get_job_controller", return_value=self.controller),
            mock.patch("backend.routes.analysis.get_job_controller", return_value=self.controller),
        ]
        for patcher in patchers:
            patcher.start()
            self.addCleanup(patcher.stop)

        self.app = create_app()
        self.client = self.app.test_client()

    def tearDown(self) -> None:
        self.gate.set()
        self.controller.join(5)
        config_module.load_settings.cache_clear()

    def _post(self, path, payload):
        return self.client.post(path, data=json.dumps(payload), content_type="application/json")

    def test_healthz(self) -> None:
        response = self.client.get("/healthz")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.get_json(), {"status": "ok"})

    def test_start_scrape_and_poll_status(self) -> None:
        response = self._post("/start-scrape", {"lotto_type": "thai"})
        self.assertEqual(response.status_code, 202)
        self.assertEqual(response.get_json()["lotto_type"], "thai")

        self.assertTrue(self.controller.join(5))
        status = self.client.get("/status").get_json()

        self.assertFalse(status["is_running"])
        self.assertEqual(status["lotto_type"], "thai")
        self.assertEqual(len(status["progress"]), 2)
        self.assertEqual(status["results"][0], {
            "draw_date": "2024-03-16",
            "first_prize": "123456",
            "last_two_digits": "56",
        })
        self.assertIsNone(status["results"][2]["last_two_digits"])

    def test_start_scrape_conflict(self) -> None:
        self.gate.clear()
        first = self._post("/start-scrape", {"lotto_type": "thai"})
        self.assertEqual(first.status_code, 202)

        second = self._post("/start-scrape", {"lotto_type": "thai"})
        self.assertEqual(second.status_code, 409)
        self.assertIn("error", second.get_json())
        self.assertTrue(self.client.get("/status").get_json()["is_running"])

    def test_start_scrape_rejects_bad_payloads(self) -> None:
        for payload in ({"lotto_type": "lao"}, {}, {"lotto_type": "thai", "extra": 1}, ["thai"]):
            response = self._post("/start-scrape", payload)
            self.assertEqual(response.status_code, 400, payload)
            self.assertIn("error", response.get_json())

    def test_failed_scrape_visible_in_status(self) -> None:
        self.source = StaticSource(DRAWS, error=SourceUnavailableError("HTTP 503"))
        self._post("/start-scrape", {"lotto_type": "thai"})
        self.assertTrue(self.controller.join(5))

        status = self.client.get("/status").get_json()
        self.assertFalse(status["is_running"])
        self.assertEqual(status["results"], [])
        self.assertEqual(status["progress"][-1], "Scrape failed: HTTP 503")

    def test_analyze(self) -> None:
        response = self._post("/analyze", {"numbers": ["123", "456", "123", "789", "123"]})
        self.assertEqual(response.status_code, 200)
        payload = response.get_json()

        self.assertEqual(
            set(payload),
            {"statistical_summary", "pattern_analysis", "prediction_output", "detailed_explanation"},
        )
        self.assertEqual(payload["statistical_summary"]["most_frequent_number"], "123")
        self.assertEqual(payload["prediction_output"]["prediction"], "123")
        self.assertEqual(payload["prediction_output"]["alternatives"], ["456", "789"])

    def test_analyze_is_byte_identical(self) -> None:
        body = {"numbers": ["12", "34", "12", "56", "78", "34", "12"]}
        first = self._post("/analyze", body)
        second = self._post("/analyze", body)
        self.assertEqual(first.data, second.data)

    def test_analyze_empty_input(self) -> None:
        for numbers in ([], ["", "  ", "abc"]):
            response = self._post("/analyze", {"numbers": numbers})
            self.assertEqual(response.status_code, 400)
            self.assertIn("No usable numbers", response.get_json()["error"])

    def test_analyze_malformed(self) -> None:
        for payload in ({}, {"numbers": "123"}, {"numbers": [1, 2]}, {"values": ["1"]}):
            response = self._post("/analyze", payload)
            self.assertEqual(response.status_code, 400, payload)

        response = self.client.post("/analyze", data="not json", content_type="application/json")
        self.assertEqual(response.status_code, 400)

    def test_analyze_scraped_results(self) -> None:
        empty = self._post("/analyze/scraped", {})
        self.assertEqual(empty.status_code, 400)

        self._post("/start-scrape", {"lotto_type": "thai"})
        self.assertTrue(self.controller.join(5))

        response = self._post("/analyze/scraped", {"field": "first_prize"})
        self.assertEqual(response.status_code, 200)
        summary = response.get_json()["statistical_summary"]
        self.assertEqual(summary["most_frequent_number"], "123456")
        self.assertEqual(summary["total_count"], 3)

        last_two = self._post("/analyze/scraped", {"field": "last_two_digits"}).get_json()
        self.assertEqual(last_two["statistical_summary"]["total_count"], 2)

    def test_analyze_scraped_while_running(self) -> None:
        self.gate.clear()
        self._post("/start-scrape", {"lotto_type": "thai"})
        response = self._post("/analyze/scraped", {})
        self.assertEqual(response.status_code, 409)


if __name__ == "__main__":
    unittest.main()
