from unittest.mock import MagicMock

from sqlalchemy.exc import OperationalError

from main import app
from app.database import get_db
from app.services.chatbot import GREETING_TEXT
from app.utils.auth import get_current_user

VALID_ENTRY = {
    "category": "Elevator Maintenance",
    "title": "Elevator Door Sensor Check",
    "content": "Inspect the door edge sensors monthly and clean the light curtain lenses.",
    "tags": "elevator,doors,safety",
    "equipment_type": "Elevator",
    "difficulty_level": "easy",
}


def test_short_query_is_rejected(client, auth_headers):
    for url in ("/api/knowledge/search?q=a", "/api/knowledge/search?q=%20a%20", "/api/knowledge/search"):
        response = client.get(url, headers=auth_headers)
        assert response.status_code == 400
        assert response.json() == {"detail": "Search query must be at least 2 characters"}


def test_search_ranks_results(client, auth_headers, sample_knowledge):
    body = client.get("/api/knowledge/search?q=generator", headers=auth_headers).json()
    assert body["query"] == "generator"
    assert body["total"] == 1
    result = body["results"][0]
    assert result["title"] == "Generator Oil Change Procedure"
    assert result["relevance_score"] == 18


def test_search_filters(client, auth_headers, sample_knowledge):
    body = client.get("/api/knowledge/search?q=maintenance&category=Electrical%20Systems", headers=auth_headers).json()
    assert [r["title"] for r in body["results"]] == ["UPS Battery Maintenance"]

    response = client.get("/api/knowledge/search?q=maintenance&difficulty_level=extreme", headers=auth_headers)
    assert response.status_code == 422


def test_chat_greeting(client, auth_headers):
    body = client.post("/api/knowledge/chat", json={"message": "hello"}, headers=auth_headers).json()
    assert body == {"response": GREETING_TEXT, "suggestions": [], "keywords": ["hello"]}


def test_chat_requires_message(client, auth_headers):
    assert client.post("/api/knowledge/chat", json={"message": "   "}, headers=auth_headers).status_code == 422
    assert client.post("/api/knowledge/chat", json={}, headers=auth_headers).status_code == 422


def test_chat_how_to(client, auth_headers, sample_knowledge):
    body = client.post(
        "/api/knowledge/chat", json={"message": "How do I maintain a UPS battery"}, headers=auth_headers
    ).json()
    assert body["response"].startswith("Here's how to handle ups battery maintenance:")
    assert body["suggestions"][0]["title"] == "UPS Battery Maintenance"


def test_entry_crud(client, auth_headers):
    response = client.post("/api/knowledge/", json=VALID_ENTRY, headers=auth_headers)
    assert response.status_code == 201
    entry_id = response.json()["entryId"]

    entry = client.get(f"/api/knowledge/{entry_id}", headers=auth_headers).json()["entry"]
    assert entry["title"] == VALID_ENTRY["title"]
    assert entry["difficulty_level"] == "easy"

    response = client.put(f"/api/knowledge/{entry_id}", json={"difficulty_level": "hard"}, headers=auth_headers)
    assert response.json() == {"message": "Knowledge base entry updated successfully"}
    entry = client.get(f"/api/knowledge/{entry_id}", headers=auth_headers).json()["entry"]
    assert entry["difficulty_level"] == "hard"

    assert client.delete(f"/api/knowledge/{entry_id}", headers=auth_headers).status_code == 200
    response = client.get(f"/api/knowledge/{entry_id}", headers=auth_headers)
    assert response.status_code == 404
    assert response.json()["detail"] == "Knowledge base entry not found"


def test_entry_validation(client, auth_headers, sample_knowledge):
    response = client.post("/api/knowledge/", json={**VALID_ENTRY, "content": "too short"}, headers=auth_headers)
    assert response.status_code == 422

    entry_id = sample_knowledge[0].id
    assert client.put(f"/api/knowledge/{entry_id}", json={}, headers=auth_headers).status_code == 400
    assert client.put(f"/api/knowledge/{entry_id}", json={"id": 5}, headers=auth_headers).status_code == 422


def test_list_and_meta(client, auth_headers, sample_knowledge):
    entries = client.get("/api/knowledge/", headers=auth_headers).json()["entries"]
    assert [e["category"] for e in entries] == ["Electrical Systems", "Generator Maintenance", "HVAC Maintenance"]

    entries = client.get("/api/knowledge/?difficulty_level=easy", headers=auth_headers).json()["entries"]
    assert [e["title"] for e in entries] == ["Air Filter Selection Guide"]

    categories = client.get("/api/knowledge/meta/categories", headers=auth_headers).json()
    assert categories == {"categories": ["Electrical Systems", "Generator Maintenance", "HVAC Maintenance"]}

    types = client.get("/api/knowledge/meta/equipment-types", headers=auth_headers).json()
    assert types == {"equipmentTypes": ["Generator", "HVAC", "UPS"]}


def test_store_failure_is_a_generic_500(client, test_user):
    broken = MagicMock()
    broken.query.side_effect = OperationalError("SELECT", {}, Exception("database is down"))

    app.dependency_overrides[get_db] = lambda: broken
    app.dependency_overrides[get_current_user] = lambda: test_user

    for response in (
        client.get("/api/knowledge/search?q=pump"),
        client.post("/api/knowledge/chat", json={"message": "pump"}),
    ):
        assert response.status_code == 500
        assert response.json() == {"detail": "Server error"}


def test_update_rejects_null_for_required_fields(client, auth_headers, sample_knowledge):
    entry_id = sample_knowledge[0].id
    for field in ("category", "title", "content", "difficulty_level"):
        response = client.put(f"/api/knowledge/{entry_id}", json={field: None}, headers=auth_headers)
        assert response.status_code == 422, field

    response = client.put(f"/api/knowledge/{entry_id}", json={"equipment_type": None}, headers=auth_headers)
    assert response.status_code == 200
