"""Integration tests for the FastAPI application.

Drives a gang through a short campaign life over HTTP and checks that the
stored rating and wealth always match a full recalculation.
"""

import pytest
from fastapi.testclient import TestClient

from munda.api.app import create_app
from munda.api.runtime import ApiState
from munda.config import Settings


@pytest.fixture
def client():
    """Create a test client bound to a fresh seeded database."""
    app = create_app(
        state_factory=lambda: ApiState(settings=Settings(DATABASE_URL="sqlite://"))
    )
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def headers(client):
    response = client.post("/profiles", json={"username": "scummer"})
    return {"X-User-Id": str(response.json()["data"]["id"])}


def _data(response, status_code=200):
    assert response.status_code == status_code, response.text
    payload = response.json()
    assert payload["success"] is True
    return payload["data"]


def _catalog_id(client, path, key, name, **params):
    entries = _data(client.get(path, params=params))
    return next(entry["id"] for entry in entries if entry[key] == name)


def _assert_consistent(client, gang_id):
    detail = _data(client.get(f"/gangs/{gang_id}"))
    assert detail["rating"] == detail["computed_rating"]
    assert detail["wealth"] == detail["computed_wealth"]
    return detail


def test_health_endpoint(client):
    data = _data(client.get("/health"))
    assert data["status"] == "ok"
    assert data["database"] is True


def test_api_docs_available(client):
    assert client.get("/docs").status_code == 200
    schema = client.get("/openapi.json").json()
    assert schema["info"]["title"] == "Munda Manager API"
    assert "/gangs/{gang_id}" in schema["paths"]


def test_gang_lifecycle_keeps_totals_consistent(client, headers):
    goliath_id = _catalog_id(client, "/catalog/gang-types", "gang_type", "Goliath")
    gang = _data(
        client.post("/gangs", json={"name": "Iron Fists", "gang_type_id": goliath_id}, headers=headers),
        201,
    )
    gang_id = gang["id"]

    bully_id = _catalog_id(
        client, f"/catalog/gang-types/{goliath_id}/fighter-types", "fighter_type", "Bully"
    )
    hired = _data(
        client.post(
            "/fighters",
            json={"gang_id": gang_id, "fighter_name": "Grub", "fighter_type_id": bully_id},
            headers=headers,
        ),
        201,
    )
    fighter_id = hired["fighter"]["id"]

    autogun_id = _catalog_id(client, "/catalog/equipment", "equipment_name", "Autogun")
    _data(
        client.post(
            "/equipment",
            json={"gang_id": gang_id, "fighter_id": fighter_id, "equipment_id": autogun_id},
            headers=headers,
        ),
        201,
    )
    detail = _assert_consistent(client, gang_id)
    assert (detail["credits"], detail["rating"], detail["wealth"]) == (925, 75, 1000)

    # Advancements raise the rating without spending credits
    _data(client.post(f"/fighters/{fighter_id}/xp", json={"xp_to_add": 10}, headers=headers))
    weapon_skill_id = _catalog_id(
        client, "/catalog/characteristic-types", "effect_name", "Weapon Skill"
    )
    advanced = _data(
        client.post(
            f"/fighters/{fighter_id}/advancements/characteristics",
            json={"fighter_effect_type_id": weapon_skill_id, "xp_cost": 6, "credits_increase": 10},
            headers=headers,
        ),
        201,
    )
    assert advanced["remaining_xp"] == 4
    assert advanced["gang_rating"] == 85
    detail = _assert_consistent(client, gang_id)
    assert (detail["credits"], detail["rating"], detail["wealth"]) == (925, 85, 1010)

    # An uncrewed vehicle counts toward wealth only
    wolfquad_id = _catalog_id(client, "/catalog/vehicle-types", "vehicle_type", "Wolfquad")
    vehicle = _data(
        client.post(
            "/vehicles", json={"gang_id": gang_id, "vehicle_type_id": wolfquad_id}, headers=headers
        ),
        201,
    )["vehicle"]
    detail = _assert_consistent(client, gang_id)
    assert (detail["credits"], detail["rating"], detail["wealth"]) == (845, 85, 1010)

    _data(
        client.post(
            f"/vehicles/{vehicle['id']}/assign", json={"fighter_id": fighter_id}, headers=headers
        )
    )
    detail = _assert_consistent(client, gang_id)
    assert (detail["rating"], detail["wealth"]) == (165, 1010)

    _data(client.post(f"/fighters/{fighter_id}/status", json={"action": "kill"}, headers=headers))
    detail = _assert_consistent(client, gang_id)
    assert detail["rating"] == 0
    assert detail["fighters"][0]["killed"] is True

    recalculated = _data(client.post(f"/gangs/{gang_id}/recalculate", headers=headers))
    assert recalculated["old_rating"] == recalculated["new_rating"] == 0

    logs = _data(client.get(f"/gangs/{gang_id}/logs"))
    assert len(logs) >= 5


def test_stash_round_trip(client, headers):
    goliath_id = _catalog_id(client, "/catalog/gang-types", "gang_type", "Goliath")
    gang_id = _data(
        client.post("/gangs", json={"name": "Stash Rats", "gang_type_id": goliath_id}, headers=headers),
        201,
    )["id"]
    autogun_id = _catalog_id(client, "/catalog/equipment", "equipment_name", "Autogun")

    bought = _data(
        client.post(
            "/equipment",
            json={"gang_id": gang_id, "equipment_id": autogun_id, "buy_for_gang_stash": True},
            headers=headers,
        ),
        201,
    )
    item_id = bought["equipment"]["id"]
    assert [item["id"] for item in _data(client.get(f"/gangs/{gang_id}/stash"))] == [item_id]
    detail = _assert_consistent(client, gang_id)
    assert (detail["credits"], detail["rating"], detail["wealth"]) == (985, 0, 1000)

    sold = _data(
        client.post(f"/equipment/{item_id}/stash/sell", json={"manual_cost": 7.9}, headers=headers)
    )
    assert sold["sold_for"] == 7
    detail = _assert_consistent(client, gang_id)
    assert (detail["credits"], detail["wealth"]) == (992, 992)
    assert detail["stash"] == []


def test_gang_copy_and_delete(client, headers):
    goliath_id = _catalog_id(client, "/catalog/gang-types", "gang_type", "Goliath")
    gang_id = _data(
        client.post("/gangs", json={"name": "Originals", "gang_type_id": goliath_id}, headers=headers),
        201,
    )["id"]

    copy = _data(
        client.post(f"/gangs/{gang_id}/copy", json={"new_name": "Clones"}, headers=headers), 201
    )
    assert copy["name"] == "Clones"
    assert {gang["name"] for gang in _data(client.get("/gangs", headers=headers))} == {
        "Originals",
        "Clones",
    }

    _data(client.delete(f"/gangs/{gang_id}", headers=headers))
    response = client.get(f"/gangs/{gang_id}")
    assert response.status_code == 404
    assert response.json()["success"] is False
