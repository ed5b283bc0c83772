"""Tests for the health and root endpoints."""

import unittest

from fastapi.testclient import TestClient

from starauth.main import app


class TestHealth(unittest.TestCase):
    def setUp(self) -> None:
        self.client = TestClient(app)

    def test_health_reports_database(self) -> None:
        resp = self.client.get("/health")
        self.assertEqual(resp.status_code, 200)
        data = resp.json()
        self.assertEqual(data["status"], "ok")
        self.assertEqual(data["database"], "connected")

    def test_root(self) -> None:
        self.assertEqual(self.client.get("/").json(), {"message": "StarAuth API"})


if __name__ == "__main__":
    unittest.main()
