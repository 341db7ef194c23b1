"""Tests for the admin dashboard endpoints and the shared-secret gate."""

from datetime import datetime, timedelta, timezone

import pytest
from sqlmodel import Session

from tests.conftest import test_engine
from tutorbot.models.transcript import ChatTranscript


def _seed(session_id, message_count, start_time=None):
    start_time = start_time or datetime.now(timezone.utc)
    messages = [
        {"role": "user" if i % 2 == 0 else "model", "parts": [{"text": f"m{i}"}]}
        for i in range(message_count)
    ]
    with Session(test_engine) as session:
        session.add(ChatTranscript(
            session_id=session_id,
            user_id="u1",
            bot_id="assistente-gemini-ifpr",
            start_time=start_time,
            end_time=start_time,
            messages=messages,
        ))
        session.commit()


@pytest.mark.parametrize("path", [
    "/api/admin/stats",
    "/api/admin/system-instruction",
    "/api/admin/system-instruction/history",
    "/api/admin/all-historicos",
])
def test_admin_routes_require_password(client, path):
    assert client.get(path).status_code == 403
    assert client.get(path, headers={"x-admin-password": "wrong"}).status_code == 403


def test_admin_post_requires_password(client):
    response = client.post("/api/admin/system-instruction", json={"instruction": "x"})
    assert response.status_code == 403


def test_admin_password_in_body(client, admin_headers):
    body = {"instruction": "From body", "adminPassword": admin_headers["x-admin-password"]}
    response = client.post("/api/admin/system-instruction", json=body)
    assert response.status_code == 200
    assert response.json()["instruction"] == "From body"


def test_stats_totals(client, admin_headers):
    _seed("a", 2)
    _seed("b", 4)
    _seed("c", 6)

    response = client.get("/api/admin/stats", headers=admin_headers)
    assert response.status_code == 200
    data = response.json()
    assert data["totalConversas"] == 3
    assert data["totalMensagens"] == 12
    assert len(data["ultimasConversas"]) == 3
    assert sum(day["count"] for day in data["conversasPorDia"]) == 3


def test_stats_activity_skips_old_transcripts(client, admin_headers):
    _seed("recent", 1)
    _seed("old", 1, start_time=datetime.now(timezone.utc) - timedelta(days=30))

    data = client.get("/api/admin/stats", headers=admin_headers).json()
    assert data["totalConversas"] == 2
    assert sum(day["count"] for day in data["conversasPorDia"]) == 1


def test_stats_empty(client, admin_headers):
    data = client.get("/api/admin/stats", headers=admin_headers).json()
    assert data == {"totalConversas": 0, "totalMensagens": 0, "ultimasConversas": [], "conversasPorDia": []}


def test_get_system_instruction_creates_default(client, admin_headers):
    from tutorbot.core.config import settings

    response = client.get("/api/admin/system-instruction", headers=admin_headers)
    assert response.status_code == 200
    data = response.json()
    assert data["instruction"] == settings.default_instruction
    assert data["isActive"] is True

    again = client.get("/api/admin/system-instruction", headers=admin_headers).json()
    assert again["id"] == data["id"]


def test_update_system_instruction(client, admin_headers):
    client.get("/api/admin/system-instruction", headers=admin_headers)
    response = client.post(
        "/api/admin/system-instruction",
        json={"instruction": "Answer in English.", "updatedBy": "coordinator"},
        headers=admin_headers,
    )
    assert response.status_code == 200
    assert response.json()["updatedBy"] == "coordinator"

    current = client.get("/api/admin/system-instruction", headers=admin_headers).json()
    assert current["instruction"] == "Answer in English."

    history = client.get("/api/admin/system-instruction/history", headers=admin_headers).json()
    assert len(history) == 2
    assert [row["isActive"] for row in history] == [True, False]


def test_update_system_instruction_blank(client, admin_headers):
    response = client.post("/api/admin/system-instruction", json={"instruction": "  "}, headers=admin_headers)
    assert response.status_code == 400


def test_all_histories_paginated(client, admin_headers):
    base = datetime(2024, 3, 1, tzinfo=timezone.utc)
    for i in range(5):
        _seed(f"s{i}", 1, start_time=base + timedelta(minutes=i))

    data = client.get("/api/admin/all-historicos", params={"page": 2, "limit": 2}, headers=admin_headers).json()
    assert [t["sessionId"] for t in data["historicos"]] == ["s2", "s1"]
    assert data["pagination"] == {"page": 2, "limit": 2, "total": 5, "pages": 3}


def test_all_histories_rejects_bad_page(client, admin_headers):
    response = client.get("/api/admin/all-historicos", params={"page": 0}, headers=admin_headers)
    assert response.status_code == 400


def test_stats_wire_keys(client, admin_headers):
    _seed("a", 2)
    data = client.get("/api/admin/stats", headers=admin_headers).json()
    day = data["conversasPorDia"][0]
    assert set(day) == {"_id", "count"}
    assert day["_id"] == datetime.now(timezone.utc).date().isoformat()
    assert data["ultimasConversas"][0]["_id"] == data["ultimasConversas"][0]["id"]


def test_all_histories_expose_underscore_id(client, admin_headers):
    _seed("a", 1)
    item = client.get("/api/admin/all-historicos", headers=admin_headers).json()["historicos"][0]
    assert item["_id"] == item["id"]


def test_malformed_admin_body_without_password_is_forbidden(client, admin_headers):
    broken = {"content": "{not json", "headers": {"content-type": "application/json"}}
    assert client.post("/api/admin/system-instruction", **broken).status_code == 403

    response = client.post(
        "/api/admin/system-instruction",
        content="{not json",
        headers={"content-type": "application/json", **admin_headers},
    )
    assert response.status_code == 400


def test_bad_query_without_password_is_forbidden(client):
    response = client.get("/api/admin/all-historicos", params={"page": 0})
    assert response.status_code == 403
