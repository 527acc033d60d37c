"""Tests for the REST API endpoints."""

import json
import shutil
import tempfile
import unittest
from datetime import date, datetime, timedelta, timezone
from pathlib import Path

from blitz.store import JsonFileStorage, RecordStore
from web import create_app

NOW = datetime(2026, 10, 18, 12, 0, tzinfo=timezone.utc)
TODAY = date(2026, 10, 18)


class TestAPIRecords(unittest.TestCase):

    def setUp(self):
        self.tmpdir = tempfile.mkdtemp(prefix="blitz_api_")
        storage_path = Path(self.tmpdir) / "storage.json"
        self.app = create_app({
            "TESTING": True,
            "BLITZ_STORAGE_PATH": str(storage_path),
            "BLITZ_CLOCK": lambda: NOW,
        })
        self.client = self.app.test_client()
        self.storage = JsonFileStorage(storage_path)
        self.store = RecordStore(self.storage)

    def tearDown(self):
        shutil.rmtree(self.tmpdir, ignore_errors=True)

    def _post(self, days_ahead, **extra):
        body = {
            "name": "Presunto",
            "code": "555",
            "lot": "P3",
            "expiration_date": (TODAY + timedelta(days=days_ahead)).isoformat(),
        }
        body.update(extra)
        return self.client.post(
            "/api/v1/records",
            data=json.dumps(body),
            content_type="application/json",
        )

    def test_list_records_returns_json(self):
        response = self.client.get("/api/v1/records")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.get_json(), [])

    def test_create_within_criterion(self):
        response = self._post(10)
        self.assertEqual(response.status_code, 201)
        data = response.get_json()
        self.assertEqual(data["record"]["daysRemaining"], 10)
        self.assertEqual(len(self.store.load()), 1)

    def test_create_outside_criterion_requires_confirmation(self):
        response = self._post(100)
        self.assertEqual(response.status_code, 409)
        data = response.get_json()
        self.assertTrue(data["confirmation_required"])
        self.assertEqual(data["days_remaining"], 100)
        self.assertEqual(self.store.load(), [])

    def test_create_outside_criterion_declined(self):
        response = self._post(100, confirmed=False)
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.get_json()["outcome"], "cancelled")
        self.assertEqual(self.store.load(), [])

    def test_create_outside_criterion_confirmed(self):
        response = self._post(100, confirmed=True)
        self.assertEqual(response.status_code, 201)
        self.assertEqual(len(self.store.load()), 1)

    def test_create_invalid(self):
        response = self._post(1, expiration_date="")
        self.assertEqual(response.status_code, 400)
        self.assertIn("error", response.get_json())

    def test_create_refuses_to_overwrite_unreadable_storage(self):
        blob = '{"schemaVersion": 2, "records": [{"name": "keep-me"}]}'
        self.storage.set_item(self.store.key, blob)
        response = self._post(10)
        self.assertEqual(response.status_code, 500)
        self.assertIn("error", response.get_json())
        self.assertEqual(self.storage.get_item(self.store.key), blob)

    def test_create_requires_json_object(self):
        response = self.client.post("/api/v1/records", data="[]", content_type="application/json")
        self.assertEqual(response.status_code, 400)

    def test_list_sorted_and_filtered(self):
        self._post(30)
        self._post(3)
        rows = self.client.get("/api/v1/records").get_json()
        self.assertEqual([r["daysRemaining"] for r in rows], [3, 30])
        critical = self.client.get("/api/v1/records?severity=critical").get_json()
        self.assertEqual(len(critical), 1)
        self.assertEqual(critical[0]["cssClass"], "vencendo-7d")

    def test_invalid_severity_filter(self):
        response = self.client.get("/api/v1/records?severity=invalid")
        self.assertEqual(response.status_code, 400)

    def test_summary(self):
        self._post(3)
        data = self.client.get("/api/v1/records/summary").get_json()
        self.assertEqual(data["total_records"], 1)
        self.assertEqual(data["by_severity"]["critical"], 1)

    def test_clear_requires_confirm(self):
        self._post(3)
        response = self.client.delete("/api/v1/records")
        self.assertEqual(response.status_code, 400)
        self.assertEqual(len(self.store.load()), 1)
        response = self.client.delete("/api/v1/records?confirm=yes")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(self.store.load(), [])


if __name__ == "__main__":
    unittest.main()
