"""Tests for the notes, tags and categories HTTP API."""
import pytest

pytestmark = pytest.mark.anyio


async def create_note(client, headers, **data):
    data.setdefault("title", "Untitled")
    response = await client.post("/api/notes", json=data, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


async def create_named(client, headers, kind, name):
    response = await client.post(f"/api/{kind}", json={"name": name}, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


class TestNotes:

    async def test_create_and_get(self, client, owner_headers):
        tag = await create_named(client, owner_headers, "tags", "work")
        category = await create_named(client, owner_headers, "categories", "Projects")

        note = await create_note(
            client, owner_headers,
            title=" Launch ", content="checklist", tags=[tag["id"]], category=category["id"],
        )
        assert note["title"] == "Launch"
        assert note["tags"][0]["name"] == "work"
        assert note["category"]["name"] == "Projects"

        response = await client.get(f"/api/notes/{note['id']}", headers=owner_headers)
        assert response.status_code == 200
        assert response.json() == note

    async def test_blank_title(self, client, owner_headers):
        response = await client.post("/api/notes", json={"title": "  "}, headers=owner_headers)

        assert response.status_code == 400
        error = response.json()["detail"]["error"]
        assert error["code"] == "VALIDATION_ERROR"
        assert error["message"] == "Title is required"

    async def test_missing_title_fails_request_validation(self, client, owner_headers):
        response = await client.post("/api/notes", json={"content": "x"}, headers=owner_headers)
        assert response.status_code == 422

    async def test_list_with_filters(self, client, owner_headers):
        tag = await create_named(client, owner_headers, "tags", "t1")
        tagged = await create_note(client, owner_headers, title="Tagged budget", tags=[tag["id"]])
        await create_note(client, owner_headers, title="Plain budget")

        response = await client.get(
            "/api/notes",
            params={"q": "budget", "tag": tag["id"], "category": "all"},
            headers=owner_headers,
        )
        assert [n["id"] for n in response.json()] == [tagged["id"]]

        response = await client.get("/api/notes", params={"tag": "none"}, headers=owner_headers)
        assert len(response.json()) == 2

    async def test_private_note_is_hidden_from_others(self, client, owner_headers, other_headers):
        note = await create_note(client, owner_headers, title="Diary")

        response = await client.get(f"/api/notes/{note['id']}", headers=other_headers)
        assert response.status_code == 404
        assert response.json()["detail"]["error"]["code"] == "NOT_FOUND"

        response = await client.get(f"/api/notes/{note['id']}/view", headers=other_headers)
        assert response.status_code == 404

    async def test_public_note_view(self, client, owner_headers, other_headers):
        note = await create_note(client, owner_headers, title="Recipe", isPublic=True)

        response = await client.get(f"/api/notes/{note['id']}/view", headers=other_headers)
        assert response.status_code == 200
        assert response.json()["isOwner"] is False

        response = await client.get(f"/api/notes/{note['id']}/view", headers=owner_headers)
        assert response.json()["isOwner"] is True

    async def test_update(self, client, owner_headers):
        category = await create_named(client, owner_headers, "categories", "c1")
        note = await create_note(client, owner_headers, title="Draft", category=category["id"])

        response = await client.patch(
            f"/api/notes/{note['id']}", json={"content": "final"}, headers=owner_headers
        )
        assert response.status_code == 200
        body = response.json()
        assert body["title"] == "Draft"
        assert body["content"] == "final"
        assert body["category"]["id"] == category["id"]

        response = await client.patch(
            f"/api/notes/{note['id']}", json={"category": None}, headers=owner_headers
        )
        assert response.json()["category"] is None

    async def test_update_by_other_owner(self, client, owner_headers, other_headers):
        note = await create_note(client, owner_headers, title="Mine")

        response = await client.patch(
            f"/api/notes/{note['id']}", json={"title": "Theirs"}, headers=other_headers
        )
        assert response.status_code == 404

        response = await client.get(f"/api/notes/{note['id']}", headers=owner_headers)
        assert response.json()["title"] == "Mine"

    async def test_visibility_endpoint(self, client, owner_headers):
        note = await create_note(client, owner_headers, title="Toggle", content="body")

        response = await client.patch(
            f"/api/notes/{note['id']}/visibility", json={"isPublic": True}, headers=owner_headers
        )
        assert response.status_code == 200
        assert response.json()["isPublic"] is True
        assert response.json()["content"] == "body"

    async def test_delete(self, client, owner_headers, other_headers):
        note = await create_note(client, owner_headers, title="Temp")

        response = await client.delete(f"/api/notes/{note['id']}", headers=other_headers)
        assert response.status_code == 404

        response = await client.delete(f"/api/notes/{note['id']}", headers=owner_headers)
        assert response.json() == {"success": True}

        response = await client.get(f"/api/notes/{note['id']}", headers=owner_headers)
        assert response.status_code == 404

    async def test_batch_delete(self, client, owner_headers, other_headers):
        mine = await create_note(client, owner_headers, title="A")
        theirs = await create_note(client, other_headers, title="B")

        response = await client.post(
            "/api/notes:batchDelete", json={"ids": [mine["id"], theirs["id"]]}, headers=owner_headers
        )
        assert response.json() == {"success": True, "deleted": 1}

        response = await client.get(f"/api/notes/{theirs['id']}", headers=other_headers)
        assert response.status_code == 200


class TestTagsAndCategories:

    @pytest.mark.parametrize("kind", ["tags", "categories"])
    async def test_crud(self, client, owner_headers, other_headers, kind):
        record = await create_named(client, owner_headers, kind, " First ")
        assert record["name"] == "First"

        response = await client.get(f"/api/{kind}", headers=owner_headers)
        assert [r["id"] for r in response.json()] == [record["id"]]

        response = await client.get(f"/api/{kind}", headers=other_headers)
        assert response.json() == []

        response = await client.patch(
            f"/api/{kind}/{record['id']}", json={"name": "Renamed"}, headers=owner_headers
        )
        assert response.json()["name"] == "Renamed"

        response = await client.get(f"/api/{kind}/{record['id']}", headers=other_headers)
        assert response.status_code == 404

        response = await client.delete(f"/api/{kind}/{record['id']}", headers=owner_headers)
        assert response.json() == {"success": True}

    async def test_blank_name(self, client, owner_headers):
        response = await client.post("/api/tags", json={"name": ""}, headers=owner_headers)
        assert response.status_code == 400

    async def test_deleting_tag_keeps_notes_readable(self, client, owner_headers):
        tag = await create_named(client, owner_headers, "tags", "gone")
        note = await create_note(client, owner_headers, title="Tagged", tags=[tag["id"]])

        await client.delete(f"/api/tags/{tag['id']}", headers=owner_headers)

        response = await client.get(f"/api/notes/{note['id']}", headers=owner_headers)
        assert response.status_code == 200
        assert response.json()["tags"] == []
