"""Tests for API endpoints."""

import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_health_check(client: AsyncClient):
    """Test health check endpoint."""
    response = await client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["database"] == "ok"


@pytest.mark.asyncio
async def test_root_endpoint(client: AsyncClient):
    """Test root endpoint."""
    response = await client.get("/")
    assert response.status_code == 200
    assert response.json()["service"] == "Corpus Database Service"


@pytest.mark.asyncio
async def test_documents_without_user(client: AsyncClient):
    """The acting user must be named."""
    response = await client.get("/api/documents")
    assert response.status_code == 401
    assert response.json()["error"] == "Not authenticated"


@pytest.mark.asyncio
async def test_documents_with_unknown_user(client: AsyncClient):
    response = await client.get("/api/documents", headers={"X-User-Id": "99"})
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_documents_contract(client: AsyncClient, admin_headers: dict):
    """GET /api/documents returns document labels under 'data'."""
    response = await client.get("/api/documents", headers=admin_headers)
    assert response.status_code == 200
    data = response.json()
    assert data["data"] == ["19001N"]
    assert all(isinstance(label, str) for label in data["data"])


@pytest.mark.asyncio
async def test_documents_visible_through_speakers(
    client: AsyncClient, regular_headers: dict, supervisor_headers: dict
):
    """Doc 1 features speakers owned by the regular user, so both see it."""
    for headers in (regular_headers, supervisor_headers):
        response = await client.get("/api/documents", headers=headers)
        assert response.json()["data"] == ["19001N"]


@pytest.mark.asyncio
async def test_label_uses_assigner_badge(
    client: AsyncClient, supervisor_headers: dict, admin_headers: dict
):
    response = await client.post(
        "/api/docs/1/assign", headers=supervisor_headers, json={"assigned_to_id": 3}
    )
    assert response.status_code == 200

    response = await client.get("/api/documents", headers=admin_headers)
    assert response.json()["data"] == ["19S001N"]


@pytest.mark.asyncio
async def test_enumerations_listing(client: AsyncClient, regular_headers: dict):
    response = await client.get("/api/enums/genders", headers=regular_headers)
    assert response.status_code == 200
    assert [e["label"] for e in response.json()] == ["muž", "žena"]

    response = await client.get("/api/enums/places", headers=regular_headers)
    assert response.json()[0] == {"id": 1, "label": "Praha", "region_id": 2}


@pytest.mark.asyncio
async def test_unknown_enumeration(client: AsyncClient, regular_headers: dict):
    response = await client.get("/api/enums/colours", headers=regular_headers)
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_enumeration_writes_are_admin_only(
    client: AsyncClient, supervisor_headers: dict, admin_headers: dict
):
    payload = {"label": "jiné"}
    response = await client.post("/api/enums/genders", headers=supervisor_headers, json=payload)
    assert response.status_code == 403

    response = await client.post("/api/enums/genders", headers=admin_headers, json=payload)
    assert response.status_code == 201
    assert response.json()["id"] == 3


@pytest.mark.asyncio
async def test_delete_referenced_enumeration(client: AsyncClient, admin_headers: dict):
    response = await client.delete("/api/enums/regions/8", headers=admin_headers)
    assert response.status_code == 409
    assert response.json()["error"] == "Row is still referenced"


@pytest.mark.asyncio
async def test_renumber_enumeration(client: AsyncClient, admin_headers: dict):
    response = await client.put(
        "/api/enums/regions/8/id", headers=admin_headers, json={"new_id": 80}
    )
    assert response.status_code == 200
    assert response.json() == {"id": 80, "label": "slezská", "region_id": None}

    response = await client.get("/api/enums/places", headers=admin_headers)
    ostrava = next(p for p in response.json() if p["label"] == "Ostrava")
    assert ostrava["region_id"] == 80


@pytest.mark.asyncio
async def test_create_project_duplicate_badge(client: AsyncClient, admin_headers: dict):
    response = await client.post(
        "/api/projects", headers=admin_headers, json={"label": "dialektologický", "badge": "N"}
    )
    assert response.status_code == 409

    response = await client.post(
        "/api/projects", headers=admin_headers, json={"label": "dialektologický", "badge": "D"}
    )
    assert response.status_code == 201
    assert response.json()["badge"] == "D"


@pytest.mark.asyncio
async def test_project_and_corpus_updates(client: AsyncClient, admin_headers: dict):
    """Badge changes show up in document labels on the next read."""
    response = await client.patch(
        "/api/projects/1", headers=admin_headers, json={"badge": "X"}
    )
    assert response.status_code == 200
    assert response.json() == {"id": 1, "label": "neformální", "badge": "X"}

    response = await client.get("/api/documents", headers=admin_headers)
    assert response.json()["data"] == ["19001X"]

    response = await client.patch(
        "/api/corpora/1", headers=admin_headers, json={"label": "ortofon v2"}
    )
    assert response.json()["label"] == "ortofon v2"

    response = await client.get("/api/views/docs", headers=admin_headers)
    assert response.json()[0]["corpus"] == "ortofon v2"

    response = await client.get("/api/corpora/99", headers=admin_headers)
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_regular_user_speakers(client: AsyncClient, regular_headers: dict):
    response = await client.get("/api/speakers", headers=regular_headers)
    assert response.status_code == 200
    assert [s["nickname"] for s in response.json()] == ["John Doe", "Jane Doe"]


@pytest.mark.asyncio
async def test_speakers_hidden_outside_scope(client: AsyncClient, regular_headers: dict):
    """A regular user does not see speakers registered by their supervisor."""
    speaker = {
        "user_id": 2,
        "project_id": 2,
        "nickname": "Petr",
        "gender_id": 1,
        "education_id": 2,
        "place_id": 2,
        "year": 1970,
    }
    response = await client.post("/api/speakers", headers={"X-User-Id": "2"}, json=speaker)
    assert response.status_code == 201
    speaker_id = response.json()["id"]

    response = await client.get(f"/api/speakers/{speaker_id}", headers=regular_headers)
    assert response.status_code == 404

    response = await client.get("/api/speakers", headers={"X-User-Id": "1"})
    assert len(response.json()) == 3


@pytest.mark.asyncio
async def test_regular_user_cannot_create_speaker_for_others(
    client: AsyncClient, regular_headers: dict
):
    speaker = {
        "user_id": 2,
        "project_id": 1,
        "nickname": "Cizí",
        "gender_id": 1,
        "education_id": 1,
        "place_id": 1,
        "year": 1990,
    }
    response = await client.post("/api/speakers", headers=regular_headers, json=speaker)
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_speaker_with_unknown_place(client: AsyncClient, regular_headers: dict):
    speaker = {
        "project_id": 1,
        "nickname": "Nikdo",
        "gender_id": 1,
        "education_id": 1,
        "place_id": 77,
        "year": 1990,
    }
    response = await client.post("/api/speakers", headers=regular_headers, json=speaker)
    assert response.status_code == 422
    assert response.json()["error"] == "Referenced row does not exist"


@pytest.mark.asyncio
async def test_doc_workflow(
    client: AsyncClient, supervisor_headers: dict, regular_headers: dict
):
    """unassigned -> in progress -> done -> reopened."""
    response = await client.get("/api/docs/1", headers=regular_headers)
    assert response.json()["state"] == "unassigned"
    assert response.json()["done"] is None

    response = await client.post("/api/docs/1/complete", headers=regular_headers)
    assert response.status_code == 409

    response = await client.post(
        "/api/docs/1/assign", headers=regular_headers, json={"assigned_to_id": 3}
    )
    assert response.status_code == 403

    response = await client.post(
        "/api/docs/1/assign", headers=supervisor_headers, json={"assigned_to_id": 3}
    )
    data = response.json()
    assert (data["assigned_to_id"], data["assigned_by_id"]) == (3, 2)
    assert data["state"] == "in_progress"

    response = await client.get(
        "/api/docs", headers=regular_headers, params={"state": "in_progress"}
    )
    assert [d["id"] for d in response.json()] == [1]

    response = await client.post("/api/docs/1/complete", headers=regular_headers)
    assert response.json()["state"] == "done"
    assert response.json()["done"] is True

    response = await client.post("/api/docs/1/reopen", headers=regular_headers)
    assert response.status_code == 403

    response = await client.post("/api/docs/1/reopen", headers=supervisor_headers)
    assert response.json()["state"] == "in_progress"


@pytest.mark.asyncio
async def test_supervisor_cannot_assign_outside_scope(
    client: AsyncClient, supervisor_headers: dict
):
    response = await client.post(
        "/api/docs/1/assign", headers=supervisor_headers, json={"assigned_to_id": 1}
    )
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_invalid_state_filter(client: AsyncClient, admin_headers: dict):
    response = await client.get("/api/docs", headers=admin_headers, params={"state": "lost"})
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_new_doc_with_participants(
    client: AsyncClient, admin_headers: dict, regular_headers: dict
):
    response = await client.post(
        "/api/docs",
        headers=admin_headers,
        json={"project_id": 2, "corpus_id": 1, "date": "2021-11-05T10:00:00", "place_id": 1},
    )
    assert response.status_code == 201
    doc_id = response.json()["id"]

    # Not visible to the regular user until it is assigned to them
    response = await client.get(f"/api/docs/{doc_id}", headers=regular_headers)
    assert response.status_code == 404

    response = await client.post(
        f"/api/docs/{doc_id}/assign", headers=admin_headers, json={"assigned_to_id": 3}
    )
    assert response.status_code == 200

    response = await client.post(
        f"/api/docs/{doc_id}/speakers", headers=regular_headers, json={"speaker_id": 2}
    )
    assert response.status_code == 201
    link_id = response.json()["id"]
    assert response.json()["words"] is None

    response = await client.patch(
        f"/api/doc2speaker/{link_id}", headers=regular_headers, json={"words": 512}
    )
    assert response.json()["words"] == 512

    response = await client.get(f"/api/docs/{doc_id}/speakers", headers=regular_headers)
    assert [(p["speaker_id"], p["words"]) for p in response.json()] == [(2, 512)]

    response = await client.get("/api/documents", headers=regular_headers)
    assert response.json()["data"] == ["19001N", f"21A{doc_id:03d}F"]

    response = await client.get("/api/views/doc2speaker", headers=regular_headers)
    rows = response.json()
    assert len(rows) == 3
    assert rows[-1]["project"] == "formální"
    assert rows[-1]["age"] == "starší"  # 2021 - 1984 = 37


@pytest.mark.asyncio
async def test_participants_of_hidden_doc(
    client: AsyncClient, admin_headers: dict, regular_headers: dict
):
    """A regular user can neither join nor inspect a doc outside their scope."""
    speaker = {
        "user_id": 1,
        "project_id": 2,
        "nickname": "Správce",
        "gender_id": 2,
        "education_id": 4,
        "place_id": 3,
        "year": 1960,
    }
    response = await client.post("/api/speakers", headers=admin_headers, json=speaker)
    admin_speaker_id = response.json()["id"]

    response = await client.post(
        "/api/docs",
        headers=admin_headers,
        json={"project_id": 2, "corpus_id": 1, "date": "2020-06-01T09:00:00", "place_id": 3},
    )
    doc_id = response.json()["id"]
    response = await client.post(
        f"/api/docs/{doc_id}/speakers",
        headers=admin_headers,
        json={"speaker_id": admin_speaker_id, "words": 777},
    )
    assert response.status_code == 201

    response = await client.post(
        f"/api/docs/{doc_id}/speakers", headers=regular_headers, json={"speaker_id": 1}
    )
    assert response.status_code == 404

    for method, url, payload in (
        ("GET", f"/api/docs/{doc_id}", None),
        ("GET", f"/api/docs/{doc_id}/speakers", None),
        ("PATCH", f"/api/docs/{doc_id}", {"place_id": 1}),
    ):
        response = await client.request(method, url, headers=regular_headers, json=payload)
        assert response.status_code == 404

    response = await client.get("/api/documents", headers=regular_headers)
    assert response.json()["data"] == ["19001N"]

    # Once assigned, the doc is visible but the admin's participation is not
    response = await client.post(
        f"/api/docs/{doc_id}/assign", headers=admin_headers, json={"assigned_to_id": 3}
    )
    assert response.status_code == 200

    response = await client.get(f"/api/docs/{doc_id}/speakers", headers=regular_headers)
    assert response.status_code == 200
    assert response.json() == []

    response = await client.post(
        f"/api/docs/{doc_id}/speakers", headers=regular_headers, json={"speaker_id": 1}
    )
    assert response.status_code == 201

    response = await client.get(f"/api/docs/{doc_id}/speakers", headers=regular_headers)
    assert [(p["speaker_id"], p["words"]) for p in response.json()] == [(1, None)]

    response = await client.get(f"/api/docs/{doc_id}/speakers", headers=admin_headers)
    assert len(response.json()) == 2


@pytest.mark.asyncio
async def test_doc_creation_needs_supervisor(
    client: AsyncClient, regular_headers: dict, supervisor_headers: dict
):
    doc = {"project_id": 1, "corpus_id": 1, "date": "2022-02-02T12:00:00", "place_id": 2}
    response = await client.post("/api/docs", headers=regular_headers, json=doc)
    assert response.status_code == 403

    response = await client.post("/api/docs", headers=supervisor_headers, json=doc)
    assert response.status_code == 201
    doc_id = response.json()["id"]

    response = await client.post(
        f"/api/docs/{doc_id}/assign", headers=supervisor_headers, json={"assigned_to_id": 3}
    )
    assert response.status_code == 200

    response = await client.get(f"/api/docs/{doc_id}", headers=regular_headers)
    assert response.json()["state"] == "in_progress"


@pytest.mark.asyncio
async def test_doc_dates_with_offset_stored_as_utc(client: AsyncClient, admin_headers: dict):
    """Aware timestamps are converted to UTC; the label year follows."""
    response = await client.post(
        "/api/docs",
        headers=admin_headers,
        json={"project_id": 2, "date": "2021-12-31T23:30:00-02:00", "place_id": 1},
    )
    assert response.status_code == 201
    doc_id = response.json()["id"]
    assert response.json()["date"] == "2022-01-01T01:30:00"

    response = await client.get("/api/documents", headers=admin_headers)
    assert response.json()["data"] == ["19001N", f"22{doc_id:03d}F"]

    response = await client.patch(
        f"/api/docs/{doc_id}", headers=admin_headers, json={"date": "2019-05-01T12:00:00Z"}
    )
    assert response.status_code == 200
    assert response.json()["date"] == "2019-05-01T12:00:00"


@pytest.mark.asyncio
async def test_reopen_requires_done(
    client: AsyncClient, supervisor_headers: dict
):
    response = await client.post("/api/docs/1/reopen", headers=supervisor_headers)
    assert response.status_code == 409

    response = await client.post(
        "/api/docs/1/assign", headers=supervisor_headers, json={"assigned_to_id": 3}
    )
    assert response.json()["state"] == "in_progress"

    response = await client.post("/api/docs/1/reopen", headers=supervisor_headers)
    assert response.status_code == 409
    assert response.json()["error"] == "Invalid workflow transition"


@pytest.mark.asyncio
async def test_cannot_take_over_doc_assigned_outside_scope(
    client: AsyncClient, admin_headers: dict, supervisor_headers: dict
):
    response = await client.post(
        "/api/docs/1/assign", headers=admin_headers, json={"assigned_to_id": 1}
    )
    assert response.status_code == 200

    response = await client.post(
        "/api/docs/1/assign", headers=supervisor_headers, json={"assigned_to_id": 3}
    )
    assert response.status_code == 403

    response = await client.get("/api/docs/1", headers=admin_headers)
    assert response.json()["assigned_to_id"] == 1


@pytest.mark.asyncio
async def test_views_filtered_by_scope(client: AsyncClient, admin_headers: dict):
    response = await client.post(
        "/api/users",
        headers=admin_headers,
        json={"username": "outsider", "role_id": 1},
    )
    assert response.status_code == 201
    outsider = {"X-User-Id": str(response.json()["id"])}

    for view in ("speakers", "docs", "doc2speaker"):
        response = await client.get(f"/api/views/{view}", headers=outsider)
        assert response.status_code == 200
        assert response.json() == []

        response = await client.get(f"/api/views/{view}", headers=admin_headers)
        assert len(response.json()) >= 1

    response = await client.get("/api/views/geo", headers=outsider)
    assert len(response.json()) == 3


@pytest.mark.asyncio
async def test_user_cycle_rejected(client: AsyncClient, admin_headers: dict):
    response = await client.put(
        "/api/users/1/supervisor", headers=admin_headers, json={"supervisor_id": 3}
    )
    assert response.status_code == 422
    assert response.json()["error"] == "Invalid supervisor"

    response = await client.put(
        "/api/users/1/supervisor", headers=admin_headers, json={"supervisor_id": 2}
    )
    assert response.status_code == 422
    assert response.json()["error"] == "Supervision cycle"


@pytest.mark.asyncio
async def test_list_users_by_scope(
    client: AsyncClient, supervisor_headers: dict, regular_headers: dict
):
    response = await client.get("/api/users", headers=supervisor_headers)
    assert [u["username"] for u in response.json()] == ["supervisor", "regular"]

    response = await client.get("/api/users/me", headers=regular_headers)
    assert response.json()["username"] == "regular"

    response = await client.get("/api/users/1", headers=regular_headers)
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_tokenize_endpoint(client: AsyncClient):
    response = await client.post("/api/transcripts/tokenize", json={"text": "foo  [bar]"})
    assert response.status_code == 200
    data = response.json()
    assert data["source"] == "foo [bar]"
    assert [t["text"] for t in data["tokens"]] == ["foo", "[", "bar", "]"]
    assert data["tokens"][1] == {
        "kind": "open",
        "delim": "square",
        "start": 4,
        "end": 5,
        "text": "[",
    }
