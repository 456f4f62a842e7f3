"""Case, task and checklist endpoints over in-memory services (dependency overrides)."""

import pytest
from httpx import ASGITransport, AsyncClient

from hrm.api.v1.dependencies import (
    get_bulk_onboarding_use_case,
    get_checklist_service,
    get_checklist_service_for_write,
    get_lifecycle_service,
    get_lifecycle_service_for_write,
)
from hrm.application.use_cases.checklists import ChecklistService
from hrm.application.use_cases.lifecycle import BulkOnboardingUseCase
from hrm.infrastructure.persistence import database
from hrm.main import app

HEADERS = {"X-Tenant-ID": "t1", "X-Actor-ID": "actor-1"}
START = {
    "subject_id": "emp-2",
    "start_date": "2025-03-03",
    "expected_completion_date": "2025-04-02",
    "tasks": [{"label": "IT setup", "due_date": "2025-03-04"}, {"label": "Badge"}],
}


@pytest.fixture
async def api(service, store, checklists, gate) -> AsyncClient:
    """Client whose lifecycle/checklist dependencies resolve to the in-memory fakes."""
    checklist_service = ChecklistService(checklists, gate)
    app.dependency_overrides[get_lifecycle_service] = lambda: service
    app.dependency_overrides[get_lifecycle_service_for_write] = lambda: service
    app.dependency_overrides[get_bulk_onboarding_use_case] = lambda: BulkOnboardingUseCase(
        service, store.transaction
    )
    app.dependency_overrides[get_checklist_service] = lambda: checklist_service
    app.dependency_overrides[get_checklist_service_for_write] = lambda: checklist_service
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


async def _create(api: AsyncClient, body: dict | None = None) -> dict:
    response = await api.post("/api/v1/cases/onboarding", json=body or START, headers=HEADERS)
    assert response.status_code == 201, response.text
    return response.json()


# Request context


async def test_missing_tenant_header_returns_400(api: AsyncClient) -> None:
    response = await api.get("/api/v1/cases/onboarding", headers={"X-Actor-ID": "actor-1"})
    assert response.status_code == 400
    assert response.json()["message"] == "Missing required header: X-Tenant-ID"


async def test_invalid_actor_header_returns_400(api: AsyncClient) -> None:
    response = await api.get(
        "/api/v1/cases/onboarding", headers={"X-Tenant-ID": "t1", "X-Actor-ID": "bad id!"}
    )
    assert response.status_code == 400
    assert "actor ID" in response.json()["message"]


async def test_unknown_kind_returns_422(api: AsyncClient) -> None:
    response = await api.get("/api/v1/cases/transfer", headers=HEADERS)
    assert response.status_code == 422
    assert response.json()["error"] == "VALIDATION_ERROR"


# Cases


async def test_create_case_returns_201_with_pending_tasks(api: AsyncClient) -> None:
    data = await _create(api)
    assert data["kind"] == "onboarding"
    assert data["status"] == "pending"
    assert data["version"] == 1
    assert [t["label"] for t in data["tasks"]] == ["IT setup", "Badge"]
    assert {t["status"] for t in data["tasks"]} == {"pending"}
    assert data["tasks"][0]["due_date"] == "2025-03-04"


async def test_second_open_case_returns_409(api: AsyncClient) -> None:
    await _create(api)
    response = await api.post("/api/v1/cases/onboarding", json=START, headers=HEADERS)
    assert response.status_code == 409
    body = response.json()
    assert body["error"] == "DUPLICATE_OPEN_CASE"
    assert body["details"]["field"] == "subject_id"


async def test_unknown_subject_returns_400(api: AsyncClient) -> None:
    response = await api.post(
        "/api/v1/cases/onboarding", json={**START, "subject_id": "ghost"}, headers=HEADERS
    )
    assert response.status_code == 400
    assert response.json()["details"]["field"] == "subject_id"


async def test_permission_denied_returns_403(api: AsyncClient, gate) -> None:
    gate.denied.add(("create", "onboarding"))
    response = await api.post("/api/v1/cases/onboarding", json=START, headers=HEADERS)
    assert response.status_code == 403
    assert response.json()["error"] == "PERMISSION_DENIED"


async def test_get_and_list_cases(api: AsyncClient) -> None:
    created = await _create(api)
    got = await api.get(f"/api/v1/cases/onboarding/{created['id']}", headers=HEADERS)
    listed = await api.get(
        "/api/v1/cases/onboarding", params={"status": "pending"}, headers=HEADERS
    )
    assert got.status_code == 200
    assert got.json()["id"] == created["id"]
    assert [c["id"] for c in listed.json()] == [created["id"]]


async def test_get_case_under_other_kind_returns_404(api: AsyncClient) -> None:
    created = await _create(api)
    response = await api.get(f"/api/v1/cases/offboarding/{created['id']}", headers=HEADERS)
    assert response.status_code == 404
    assert response.json()["error"] == "RESOURCE_NOT_FOUND"


async def test_put_without_tasks_keeps_tasks(api: AsyncClient) -> None:
    created = await _create(api)
    response = await api.put(
        f"/api/v1/cases/onboarding/{created['id']}",
        json={"notes": "Remote start", "status": "in_progress"},
        headers=HEADERS,
    )
    data = response.json()
    assert response.status_code == 200
    assert data["notes"] == "Remote start"
    assert data["status"] == "in_progress"
    assert len(data["tasks"]) == 2


async def test_put_with_empty_tasks_deletes_all(api: AsyncClient) -> None:
    created = await _create(api)
    response = await api.put(
        f"/api/v1/cases/onboarding/{created['id']}", json={"tasks": []}, headers=HEADERS
    )
    assert response.status_code == 200
    assert response.json()["tasks"] == []


async def test_reconcile_endpoint_is_idempotent(api: AsyncClient) -> None:
    created = await _create(api)
    url = f"/api/v1/cases/onboarding/{created['id']}/tasks"
    first = await api.put(
        url,
        json={"tasks": [{"id": created["tasks"][1]["id"]}, {"label": "Lunch"}]},
        headers=HEADERS,
    )
    echo = [{"id": t["id"], "label": t["label"]} for t in first.json()["tasks"]]
    second = await api.put(url, json={"tasks": echo}, headers=HEADERS)
    assert [t["label"] for t in first.json()["tasks"]] == ["Badge", "Lunch"]
    assert second.json()["version"] == first.json()["version"]


async def test_reopen_completed_case_returns_409(api: AsyncClient) -> None:
    created = await _create(api)
    url = f"/api/v1/cases/onboarding/{created['id']}"
    completed = await api.post(f"{url}/complete", headers=HEADERS)
    response = await api.put(url, json={"status": "in_progress"}, headers=HEADERS)
    assert completed.json()["status"] == "completed"
    assert response.status_code == 409
    assert response.json()["details"]["current_status"] == "completed"


async def test_complete_with_explicit_date(api: AsyncClient) -> None:
    created = await _create(api)
    response = await api.post(
        f"/api/v1/cases/onboarding/{created['id']}/complete",
        json={"actual_completion_date": "2025-03-20"},
        headers=HEADERS,
    )
    assert response.json()["actual_completion_date"] == "2025-03-20"


async def test_cancel_then_delete(api: AsyncClient) -> None:
    created = await _create(api)
    url = f"/api/v1/cases/onboarding/{created['id']}"
    cancelled = await api.post(f"{url}/cancel", headers=HEADERS)
    deleted = await api.delete(url, headers=HEADERS)
    missing = await api.get(url, headers=HEADERS)
    assert cancelled.json()["status"] == "cancelled"
    assert deleted.status_code == 204
    assert missing.status_code == 404


async def test_defaults_endpoint_uses_template(api: AsyncClient) -> None:
    response = await api.post(
        "/api/v1/cases/onboarding/defaults",
        json={"subject_id": "emp-3", "template": [{"label": "IT setup", "due_in_days": 1}]},
        headers=HEADERS,
    )
    assert response.status_code == 201
    data = response.json()
    assert [t["label"] for t in data["tasks"]] == ["IT setup"]
    assert data["start_date"] == "2025-03-03"
    assert data["tasks"][0]["due_date"] == "2025-03-04"


async def test_offboarding_defaults_require_reason(api: AsyncClient) -> None:
    response = await api.post(
        "/api/v1/cases/offboarding/defaults",
        json={"subject_id": "emp-3", "start_date": "2025-03-03", "last_working_date": "2025-03-31"},
        headers=HEADERS,
    )
    assert response.status_code == 400
    assert response.json()["details"]["field"] == "reason"


async def test_wizard_complete_creates_in_progress_case(api: AsyncClient) -> None:
    response = await api.post(
        "/api/v1/cases/onboarding/wizard/emp-3/complete", headers=HEADERS
    )
    assert response.status_code == 201
    assert response.json()["status"] == "in_progress"
    assert len(response.json()["tasks"]) == 5


async def test_bulk_onboarding_reports_per_subject(api: AsyncClient) -> None:
    await _create(api)
    response = await api.post(
        "/api/v1/cases/onboarding/bulk",
        json={"subject_ids": ["emp-1", "emp-2", "emp-3"], "template": [{"label": "IT setup"}]},
        headers=HEADERS,
    )
    data = response.json()
    assert response.status_code == 200
    assert (data["total"], data["succeeded"], data["failed"]) == (3, 2, 1)
    assert data["failures"][0]["subject_id"] == "emp-2"
    assert data["failures"][0]["error_code"] == "DUPLICATE_OPEN_CASE"


async def test_persistence_error_returns_generic_500(api: AsyncClient, store) -> None:
    created = await _create(api)
    store.fail_on.add("save_case")
    response = await api.post(
        f"/api/v1/cases/onboarding/{created['id']}/complete", headers=HEADERS
    )
    assert response.status_code == 500
    body = response.json()
    assert body["error"] == "PERSISTENCE_ERROR"
    assert body["details"] == {"operation": "save_case"}


# Tasks


async def test_add_task_to_case(api: AsyncClient) -> None:
    created = await _create(api)
    response = await api.post(
        f"/api/v1/cases/onboarding/{created['id']}/tasks",
        json={"label": "Parking permit"},
        headers=HEADERS,
    )
    assert response.status_code == 201
    assert response.json()["position"] == 2


async def test_add_task_to_unknown_case_returns_400(api: AsyncClient) -> None:
    response = await api.post(
        "/api/v1/cases/onboarding/no-such-case/tasks",
        json={"label": "Parking permit"},
        headers=HEADERS,
    )
    assert response.status_code == 400
    body = response.json()
    assert body["error"] == "VALIDATION_ERROR"
    assert body["details"]["field"] == "case_id"


async def test_patch_task_absent_fields_unchanged_null_clears(api: AsyncClient) -> None:
    created = await _create(api)
    task = created["tasks"][0]
    response = await api.patch(
        f"/api/v1/tasks/{task['id']}", json={"due_date": None}, headers=HEADERS
    )
    data = response.json()
    assert response.status_code == 200
    assert data["due_date"] is None
    assert data["label"] == "IT setup"


async def test_complete_get_and_delete_task(api: AsyncClient) -> None:
    created = await _create(api)
    url = f"/api/v1/tasks/{created['tasks'][1]['id']}"
    completed = await api.post(f"{url}/complete", headers=HEADERS)
    fetched = await api.get(url, headers=HEADERS)
    deleted = await api.delete(url, headers=HEADERS)
    missing = await api.get(url, headers=HEADERS)
    assert completed.json()["status"] == "completed"
    assert fetched.json()["completed_date"] == "2025-03-03"
    assert deleted.status_code == 204
    assert missing.status_code == 404


# Checklists


async def test_checklist_crud(api: AsyncClient) -> None:
    created = await api.post(
        "/api/v1/checklists",
        json={"name": "Lean", "kind": "onboarding", "items": [{"label": "Sign contract"}]},
        headers=HEADERS,
    )
    checklist_id = created.json()["id"]
    updated = await api.put(
        f"/api/v1/checklists/{checklist_id}", json={"active": False}, headers=HEADERS
    )
    listed = await api.get("/api/v1/checklists", params={"kind": "onboarding"}, headers=HEADERS)
    deleted = await api.delete(f"/api/v1/checklists/{checklist_id}", headers=HEADERS)
    missing = await api.get(f"/api/v1/checklists/{checklist_id}", headers=HEADERS)

    assert created.status_code == 201
    assert created.json()["items"][0]["label"] == "Sign contract"
    assert updated.json()["active"] is False
    assert updated.json()["name"] == "Lean"
    assert [c["id"] for c in listed.json()] == [checklist_id]
    assert deleted.status_code == 204
    assert missing.status_code == 404


async def test_checklist_negative_offset_returns_422(api: AsyncClient) -> None:
    response = await api.post(
        "/api/v1/checklists",
        json={"name": "Bad", "kind": "onboarding", "items": [{"label": "x", "due_in_days": -1}]},
        headers=HEADERS,
    )
    assert response.status_code == 422


# Unconfigured database


async def test_without_database_returns_503(client: AsyncClient, monkeypatch) -> None:
    monkeypatch.setattr(database, "_ensure_engine", lambda: None)
    monkeypatch.setattr(database, "AsyncSessionLocal", None)
    response = await client.get("/api/v1/cases/onboarding", headers=HEADERS)
    assert response.status_code == 503
    assert response.json()["error"] == "SERVICE_UNAVAILABLE"
