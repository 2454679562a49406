"""Tests for the attempt and progress endpoint handlers."""

import asyncio
import json

import pytest

from journal_drill.api import ApiResponse, handle_attempt, handle_progress
from journal_drill.catalog import build_catalog
from journal_drill.models.progress import ProgressState
from journal_drill.services.storage import InMemoryProgressStorage, StorageError

from tests.factories import raw_scenario


EMAIL = "student@school.edu"


class BrokenStorage(InMemoryProgressStorage):
    """Every call fails."""

    async def load_progress(self, identity):
        raise StorageError("database unavailable")

    async def save_progress(self, identity, state):
        raise StorageError("database unavailable")

    async def record_attempt(self, identity, scenario_id, is_correct):
        raise StorageError("database unavailable")


def progress(storage, catalog, method, query=None, body=None) -> ApiResponse:
    return asyncio.run(handle_progress(storage, catalog, method, query, body))


class TestAttemptHandler:
    """Tests for POST /attempt."""

    def test_logs_attempt(self, storage):
        """Test a valid attempt."""
        body = json.dumps({"email": EMAIL, "scenario_id": 3, "is_correct": False})
        response = asyncio.run(handle_attempt(storage, "POST", body))
        assert response.status_code == 200
        assert response.body == {"message": "Attempt logged successfully"}

        attempts = asyncio.run(storage.list_attempts(EMAIL))
        assert [(a.scenario_id, a.is_correct) for a in attempts] == [(3, False)]

    @pytest.mark.parametrize("missing", ["email", "scenario_id", "is_correct"])
    def test_missing_field(self, storage, missing):
        """Test that each required field is enforced."""
        body = {"email": EMAIL, "scenario_id": 3, "is_correct": True}
        del body[missing]
        response = asyncio.run(handle_attempt(storage, "POST", body))
        assert response.status_code == 400
        assert response.body["message"] == "Missing required fields: email, scenario_id, is_correct"

    def test_false_is_not_missing(self, storage):
        """Test that is_correct=false counts as present."""
        body = {"email": EMAIL, "scenario_id": 1, "is_correct": False}
        assert asyncio.run(handle_attempt(storage, "POST", body)).status_code == 200

    def test_invalid_json(self, storage):
        """Test that a body that is not JSON is a client error."""
        response = asyncio.run(handle_attempt(storage, "POST", "{oops"))
        assert response.status_code == 400

    def test_wrong_method(self, storage):
        """Test that only POST is allowed."""
        response = asyncio.run(handle_attempt(storage, "GET", None))
        assert response.status_code == 405

    def test_storage_failure(self):
        """Test that a storage error is a 500 with the error text."""
        body = {"email": EMAIL, "scenario_id": 1, "is_correct": True}
        response = asyncio.run(handle_attempt(BrokenStorage(), "POST", body))
        assert response.status_code == 500
        assert response.body["message"] == "Error logging attempt"
        assert "database unavailable" in response.body["error"]


class TestProgressHandler:
    """Tests for GET and POST /progress."""

    def test_email_required(self, storage, catalog):
        """Test that the email query parameter is required."""
        response = progress(storage, catalog, "GET", {})
        assert response.status_code == 400
        assert response.body == {"message": "Email is required"}

    def test_default_progress(self, storage, catalog):
        """Test the starting state for an unknown student."""
        response = progress(storage, catalog, "GET", {"email": EMAIL})
        assert response.status_code == 200
        assert response.body["completedScenarios"] == {}
        assert response.body["currentId"] == 1

    def test_default_uses_first_catalog_id(self, storage):
        """Test that the default pointer is the smallest id, not 1 by assumption."""
        catalog = build_catalog([raw_scenario(5), raw_scenario(9)])
        response = progress(storage, catalog, "GET", {"email": EMAIL})
        assert response.body["currentId"] == 5

    def test_get_saved_progress(self, storage, catalog):
        """Test that saved progress is returned with string keys."""
        asyncio.run(storage.save_progress(
            EMAIL,
            ProgressState(current_scenario_id=3, completed_scenarios={1: True, 2: False}, version=2),
        ))
        response = progress(storage, catalog, "GET", {"email": EMAIL})
        assert response.body == {
            "completedScenarios": {"1": True, "2": False},
            "currentId": 3,
            "version": 2,
        }
        assert json.loads(response.to_json())["currentId"] == 3

    def test_done_is_null(self, storage, catalog):
        """Test that a finished student has currentId null."""
        asyncio.run(storage.save_progress(
            EMAIL, ProgressState(current_scenario_id=None, completed_scenarios={1: True}, version=1),
        ))
        response = progress(storage, catalog, "GET", {"email": EMAIL})
        assert response.body["currentId"] is None

    def test_post_then_get(self, storage, catalog):
        """Test an upsert followed by a read."""
        body = json.dumps({"completedScenarios": {"1": True}, "currentId": 2})
        response = progress(storage, catalog, "POST", {"email": EMAIL}, body)
        assert response.status_code == 200
        assert response.body["saved"] is True

        loaded = progress(storage, catalog, "GET", {"email": EMAIL})
        assert loaded.body["completedScenarios"] == {"1": True}
        assert loaded.body["currentId"] == 2
        assert loaded.body["version"] >= 1

    def test_unversioned_posts_overwrite(self, storage, catalog):
        """Test that clients without versions always replace the record."""
        query = {"email": EMAIL}
        progress(storage, catalog, "POST", query, {"completedScenarios": {}, "currentId": 4})
        first = progress(storage, catalog, "GET", query).body["version"]
        progress(storage, catalog, "POST", query, {"completedScenarios": {}, "currentId": 2})

        loaded = progress(storage, catalog, "GET", query)
        assert loaded.body["currentId"] == 2
        assert loaded.body["version"] > first

    def test_stale_versioned_post_ignored(self, storage, catalog):
        """Test that an older versioned write is acknowledged but ignored."""
        query = {"email": EMAIL}
        progress(storage, catalog, "POST", query, {"completedScenarios": {}, "currentId": 5, "version": 5})
        response = progress(
            storage, catalog, "POST", query,
            {"completedScenarios": {}, "currentId": 3, "version": 4},
        )
        assert response.status_code == 200
        assert response.body["saved"] is False
        assert progress(storage, catalog, "GET", query).body["currentId"] == 5

    def test_invalid_payload(self, storage, catalog):
        """Test that a malformed body is a client error."""
        response = progress(
            storage, catalog, "POST", {"email": EMAIL},
            {"completedScenarios": "all of them", "currentId": 1},
        )
        assert response.status_code == 400

    def test_storage_failure(self, catalog):
        """Test that storage errors are 500s on both methods."""
        broken = BrokenStorage()
        get = progress(broken, catalog, "GET", {"email": EMAIL})
        post = progress(broken, catalog, "POST", {"email": EMAIL}, {"currentId": 1, "version": 1})
        assert get.status_code == 500
        assert get.body["message"] == "Error loading progress"
        assert post.status_code == 500
        assert post.body["message"] == "Error saving progress"

    def test_wrong_method(self, storage, catalog):
        """Test that other methods are rejected."""
        response = progress(storage, catalog, "DELETE", {"email": EMAIL})
        assert response.status_code == 405
