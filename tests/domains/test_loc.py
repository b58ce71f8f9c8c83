# tests/domains/test_loc.py

"""
'loc' 도메인 (위치 관리) API 엔드포인트 통합 테스트입니다.
"""

import pytest
from httpx import AsyncClient

from fam.domains.loc import models as loc_models


async def _create(client: AsyncClient, **data) -> dict:
    response = await client.post("/api/v1/loc/locations", json=data)
    assert response.status_code == 201, response.text
    return response.json()


@pytest.mark.asyncio
async def test_create_location_builds_full_path(client: AsyncClient):
    print("\n--- Running test_create_location_builds_full_path ---")
    root = await _create(client, name="HQ", code="HQ")
    child = await _create(client, name="Floor1", code="HQ-F1", parent_id=root["id"], location_type="floor")
    print(f"Created: {root}, {child}")

    assert root["full_path"] == "HQ"
    assert child["full_path"] == "HQ/Floor1"
    assert child["parent"] is None  # include 없이는 관계를 채우지 않음


@pytest.mark.asyncio
async def test_create_location_duplicate_code(client: AsyncClient, test_location: loc_models.Location):
    response = await client.post("/api/v1/loc/locations", json={"name": "Other", "code": test_location.code})
    assert response.status_code == 400
    assert response.json()["detail"] == "Location with this code already exists"


@pytest.mark.asyncio
async def test_create_location_missing_parent(client: AsyncClient):
    response = await client.post("/api/v1/loc/locations", json={"name": "Orphan", "code": "X", "parent_id": 999})
    assert response.status_code == 404
    assert response.json()["detail"] == "Parent location not found"


@pytest.mark.asyncio
async def test_read_locations_in_hierarchy_order(client: AsyncClient):
    root = await _create(client, name="Plant", code="P")
    await _create(client, name="B", code="P-B", parent_id=root["id"])
    await _create(client, name="A", code="P-A", parent_id=root["id"])
    await _create(client, name="Annex", code="AX")

    response = await client.get("/api/v1/loc/locations")
    print(f"Response JSON: {response.json()}")

    assert response.status_code == 200
    page = response.json()
    assert [loc["full_path"] for loc in page["items"]] == ["Annex", "Plant", "Plant/A", "Plant/B"]
    assert page["total"] == 4


@pytest.mark.asyncio
async def test_read_locations_filtered_by_parent_with_include(client: AsyncClient):
    root = await _create(client, name="Plant", code="P")
    await _create(client, name="Room 1", code="P-R1", parent_id=root["id"], location_type="room")
    await _create(client, name="Room 2", code="P-R2", parent_id=root["id"], location_type="room")

    response = await client.get(
        "/api/v1/loc/locations",
        params={"filter": f"parentId == {root['id']} and locationType == 'room'", "sort": "-code", "include": "parent"},
    )
    print(f"Response JSON: {response.json()}")

    assert response.status_code == 200
    items = response.json()["items"]
    assert [loc["code"] for loc in items] == ["P-R2", "P-R1"]
    assert all(loc["parent"]["code"] == "P" for loc in items)


@pytest.mark.asyncio
async def test_read_locations_filter_on_path_prefix(client: AsyncClient):
    root = await _create(client, name="Plant", code="P")
    await _create(client, name="Lab", code="P-L", parent_id=root["id"])
    await _create(client, name="Plaza", code="PZ")

    response = await client.get("/api/v1/loc/locations", params={"filter": "fullPath @startswith('Plant/')"})
    assert response.status_code == 200
    assert [loc["code"] for loc in response.json()["items"]] == ["P-L"]


@pytest.mark.asyncio
async def test_read_locations_invalid_filter(client: AsyncClient):
    response = await client.get("/api/v1/loc/locations", params={"filter": "name == "})
    print(f"Response JSON: {response.json()}")

    assert response.status_code == 400
    assert "position" in response.json()["detail"]


@pytest.mark.asyncio
async def test_read_location_with_parent_include(client: AsyncClient):
    root = await _create(client, name="HQ", code="HQ")
    child = await _create(client, name="Floor1", code="HQ-F1", parent_id=root["id"])

    response = await client.get(f"/api/v1/loc/locations/{child['id']}", params={"include": "parent"})
    assert response.status_code == 200
    assert response.json()["parent"]["full_path"] == "HQ"

    response = await client.get(f"/api/v1/loc/locations/{child['id']}", params={"include": "children"})
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_rename_location_updates_descendant_paths(client: AsyncClient):
    print("\n--- Running test_rename_location_updates_descendant_paths ---")
    root = await _create(client, name="HQ", code="HQ")
    floor = await _create(client, name="Floor1", code="HQ-F1", parent_id=root["id"])
    room = await _create(client, name="Room 101", code="HQ-F1-101", parent_id=floor["id"])

    response = await client.put(f"/api/v1/loc/locations/{root['id']}", json={"name": "Head Office"})
    print(f"Response JSON: {response.json()}")
    assert response.status_code == 200
    assert response.json()["full_path"] == "Head Office"

    response = await client.get(f"/api/v1/loc/locations/{room['id']}")
    assert response.json()["full_path"] == "Head Office/Floor1/Room 101"

    response = await client.get("/api/v1/loc/locations", params={"filter": "fullPath @startswith('HQ')"})
    assert response.json()["total"] == 0


@pytest.mark.asyncio
async def test_rename_location_leaves_same_named_sibling_subtree(client: AsyncClient):
    print("\n--- Running test_rename_location_leaves_same_named_sibling_subtree ---")
    root = await _create(client, name="HQ", code="HQ")
    first = await _create(client, name="B", code="B1", parent_id=root["id"])
    second = await _create(client, name="B", code="B2", parent_id=root["id"])
    room = await _create(client, name="Room", code="B2-R", parent_id=second["id"])
    desk = await _create(client, name="Desk", code="B1-D", parent_id=first["id"])
    assert room["full_path"] == "HQ/B/Room"
    assert desk["full_path"] == "HQ/B/Desk"

    response = await client.put(f"/api/v1/loc/locations/{first['id']}", json={"name": "A"})
    assert response.status_code == 200
    assert response.json()["full_path"] == "HQ/A"

    response = await client.get(f"/api/v1/loc/locations/{room['id']}")
    assert response.json()["full_path"] == "HQ/B/Room"
    response = await client.get(f"/api/v1/loc/locations/{second['id']}")
    assert response.json()["full_path"] == "HQ/B"
    response = await client.get(f"/api/v1/loc/locations/{desk['id']}")
    assert response.json()["full_path"] == "HQ/A/Desk"


@pytest.mark.asyncio
async def test_delete_location_with_children_forbidden(client: AsyncClient):
    root = await _create(client, name="HQ", code="HQ")
    child = await _create(client, name="Floor1", code="HQ-F1", parent_id=root["id"])

    response = await client.delete(f"/api/v1/loc/locations/{root['id']}")
    assert response.status_code == 400
    assert response.json()["detail"] == "Cannot delete location that has child locations"

    response = await client.delete(f"/api/v1/loc/locations/{child['id']}")
    assert response.status_code == 204
    response = await client.delete(f"/api/v1/loc/locations/{root['id']}")
    assert response.status_code == 204

    response = await client.get(f"/api/v1/loc/locations/{root['id']}")
    assert response.status_code == 404
