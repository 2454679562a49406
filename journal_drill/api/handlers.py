"""
HTTP Endpoint Handlers

Two endpoints back the drill page when it runs as a static front end:

    /attempt   POST {email, scenario_id, is_correct}
    /progress  GET  ?email=...
               POST ?email=... {completedScenarios, currentId[, version]}

DESIGN DECISION: Handlers are framework-agnostic. They take the method,
query parameters and raw body, and return an ApiResponse, so any
serverless runtime or web framework can mount them with a thin adapter.

Wire format uses camelCase keys. `currentId: null` means the student
finished every scenario.
"""

import json
from typing import Any, Optional, Union

import structlog
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from journal_drill.catalog import ScenarioCatalog
from journal_drill.models.progress import ProgressState
from journal_drill.progression import next_version
from journal_drill.services.storage import ProgressStorageInterface


logger = structlog.get_logger(__name__)

RawBody = Union[str, bytes, dict, None]


class ApiResponse(BaseModel):
    """Status code plus JSON body."""

    status_code: int
    body: dict[str, Any] = Field(default_factory=dict)

    def to_json(self) -> str:
        return json.dumps(self.body)


class AttemptRequest(BaseModel):
    """Body of POST /attempt."""

    email: str
    scenario_id: int
    is_correct: bool


class ProgressPayload(BaseModel):
    """Body of POST /progress and GET /progress responses."""

    model_config = ConfigDict(populate_by_name=True)

    completed_scenarios: dict[int, bool] = Field(
        default_factory=dict,
        alias="completedScenarios",
    )
    current_id: Optional[int] = Field(default=None, alias="currentId")
    version: Optional[int] = Field(default=None, ge=0)

    @classmethod
    def from_state(cls, state: ProgressState) -> "ProgressPayload":
        return cls(
            completed_scenarios=dict(state.completed_scenarios),
            current_id=state.current_scenario_id,
            version=state.version,
        )

    def to_body(self) -> dict[str, Any]:
        body = self.model_dump(by_alias=True)
        body["completedScenarios"] = {
            str(scenario_id): solved
            for scenario_id, solved in sorted(self.completed_scenarios.items())
        }
        return body


def _method_not_allowed() -> ApiResponse:
    return ApiResponse(status_code=405, body={"message": "Method Not Allowed"})


def _parse_body(body: RawBody) -> dict:
    """Decode a request body into a dict. Raises ValueError if it is not a JSON object."""
    if body is None:
        return {}
    if isinstance(body, dict):
        return body
    if isinstance(body, bytes):
        body = body.decode("utf-8")
    if not body.strip():
        return {}
    parsed = json.loads(body)
    if not isinstance(parsed, dict):
        raise ValueError("Request body must be a JSON object")
    return parsed


async def handle_attempt(
    storage: ProgressStorageInterface,
    method: str,
    body: RawBody,
) -> ApiResponse:
    """Append one checked answer to the attempt log."""
    if method.upper() != "POST":
        return _method_not_allowed()

    try:
        data = _parse_body(body)
    except ValueError:
        return ApiResponse(status_code=400, body={"message": "Request body must be a JSON object"})

    if not data.get("email") or data.get("scenario_id") is None or data.get("is_correct") is None:
        return ApiResponse(
            status_code=400,
            body={"message": "Missing required fields: email, scenario_id, is_correct"},
        )

    try:
        request = AttemptRequest.model_validate(data)
    except ValidationError as e:
        return ApiResponse(
            status_code=400,
            body={"message": "Invalid attempt", "error": str(e)},
        )

    try:
        await storage.record_attempt(request.email, request.scenario_id, request.is_correct)
    except Exception as e:
        logger.error("attempt_not_logged", email=request.email, error=str(e))
        return ApiResponse(
            status_code=500,
            body={"message": "Error logging attempt", "error": str(e)},
        )

    return ApiResponse(status_code=200, body={"message": "Attempt logged successfully"})


async def handle_progress(
    storage: ProgressStorageInterface,
    catalog: ScenarioCatalog,
    method: str,
    query: Optional[dict[str, str]] = None,
    body: RawBody = None,
) -> ApiResponse:
    """Load (GET) or upsert (POST) a student's progress."""
    email = (query or {}).get("email")
    if not email:
        return ApiResponse(status_code=400, body={"message": "Email is required"})

    method = method.upper()
    if method == "POST":
        return await _save_progress(storage, email, body)
    if method == "GET":
        return await _load_progress(storage, catalog, email)
    return _method_not_allowed()


async def _load_progress(
    storage: ProgressStorageInterface,
    catalog: ScenarioCatalog,
    email: str,
) -> ApiResponse:
    try:
        state = await storage.load_progress(email)
    except Exception as e:
        logger.error("progress_not_loaded", email=email, error=str(e))
        return ApiResponse(
            status_code=500,
            body={"message": "Error loading progress", "error": str(e)},
        )

    if state is None:
        # No record yet - start at the beginning
        state = ProgressState.initial(catalog.first_id)

    return ApiResponse(status_code=200, body=ProgressPayload.from_state(state).to_body())


async def _save_progress(
    storage: ProgressStorageInterface,
    email: str,
    body: RawBody,
) -> ApiResponse:
    try:
        payload = ProgressPayload.model_validate(_parse_body(body))
    except (ValueError, ValidationError) as e:
        return ApiResponse(
            status_code=400,
            body={"message": "Invalid progress payload", "error": str(e)},
        )

    try:
        version = payload.version
        if version is None:
            # Unversioned clients always overwrite
            stored = await storage.load_progress(email)
            version = next_version(stored.version if stored is not None else 0)

        state = ProgressState(
            current_scenario_id=payload.current_id,
            completed_scenarios=payload.completed_scenarios,
            version=version,
        )
        saved = await storage.save_progress(email, state)
    except Exception as e:
        logger.error("progress_not_saved", email=email, error=str(e))
        return ApiResponse(
            status_code=500,
            body={"message": "Error saving progress", "error": str(e)},
        )

    if not saved:
        return ApiResponse(
            status_code=200,
            body={"message": "Newer progress already saved; update ignored", "saved": False},
        )
    return ApiResponse(
        status_code=200,
        body={"message": "Progress saved successfully", "saved": True},
    )
