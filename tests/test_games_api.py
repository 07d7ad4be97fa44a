"""
Tests for the /api/games endpoints
"""
import asyncio

from sqlalchemy.ext.asyncio import AsyncSession


class TestCreateAndRead:

    async def test_create_minimal_game(self, client):
        response = await client.post("/api/games", json={"title": "Catan"})

        assert response.status_code == 201
        body = response.json()
        assert body["title"] == "Catan"
        assert body["isOwned"] is False
        assert body["tags"] == []
        assert body["wishlist"] is None
        assert isinstance(body["id"], int)

    async def test_create_with_tags_reuses_existing(self, client, create_game):
        """Test tags are resolved by title, so two games share one tag row"""
        first = await create_game(title="Catan", tags=[{"title": "Trading"}])
        second = await create_game(title="Bohnanza", tags=[{"title": "Trading"}, {"title": "Cards"}])

        first_tag = first["tags"][0]
        assert first_tag["title"] == "Trading"
        assert first_tag["id"] in [t["id"] for t in second["tags"]]

        tags = (await client.get("/api/tags")).json()
        assert sorted(t["title"] for t in tags) == ["Cards", "Trading"]

    async def test_camel_case_fields(self, create_game):
        game = await create_game(title="Azul", minPlayers=2, maxPlayers=4, playTime=45, coverImage="azul.png")

        assert game["minPlayers"] == 2
        assert game["maxPlayers"] == 4
        assert game["playTime"] == 45
        assert game["coverImage"] == "azul.png"

    async def test_server_managed_fields_are_ignored(self, create_game):
        game = await create_game(title="Root", id=999, createdAt="1999-01-01T00:00:00")

        assert game["id"] != 999
        assert not game["createdAt"].startswith("1999")

    async def test_get_by_id(self, client, create_game):
        game = await create_game(title="Brass")

        response = await client.get(f"/api/games/{game['id']}")

        assert response.status_code == 200
        assert response.json()["title"] == "Brass"

    async def test_get_missing_game(self, client):
        response = await client.get("/api/games/9999")

        assert response.status_code == 404
        assert response.json()["error"] == "NOT_FOUND"


class TestValidation:

    async def test_missing_title(self, client):
        response = await client.post("/api/games", json={"genre": "Euro"})

        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "VALIDATION_ERROR"
        assert body["details"]

    async def test_min_players_above_max(self, client):
        response = await client.post("/api/games", json={"title": "X", "minPlayers": 5, "maxPlayers": 2})
        assert response.status_code == 400

    async def test_update_against_stored_range(self, client, create_game):
        """Test the player range is checked against the stored value on partial update"""
        game = await create_game(minPlayers=3, maxPlayers=4)

        response = await client.put(f"/api/games/{game['id']}", json={"maxPlayers": 2})

        assert response.status_code == 400
        assert response.json()["error"] == "INVALID_INPUT"

    async def test_null_title_on_update(self, client, create_game):
        game = await create_game()
        response = await client.put(f"/api/games/{game['id']}", json={"title": None})
        assert response.status_code == 400

    async def test_blank_tag_title(self, client):
        response = await client.post("/api/games", json={"title": "Catan", "tags": [{"title": " "}]})

        assert response.status_code == 400
        assert (await client.get("/api/games")).json() == []

    async def test_non_integer_id(self, client):
        response = await client.get("/api/games/abc")
        assert response.status_code == 400


class TestListAndStats:

    async def test_filters(self, client, create_game):
        await create_game(title="Catan", isOwned=True, tags=[{"title": "Family"}])
        await create_game(title="Brass", tags=[{"title": "Economic"}])

        owned = (await client.get("/api/games", params={"owned": "true"})).json()
        family = (await client.get("/api/games", params={"tag": "Family"})).json()
        everything = (await client.get("/api/games")).json()

        assert [g["title"] for g in owned] == ["Catan"]
        assert [g["title"] for g in family] == ["Catan"]
        assert [g["title"] for g in everything] == ["Brass", "Catan"]

    async def test_stats(self, client, create_game):
        await create_game(title="Catan", isOwned=True)
        wanted = await create_game(title="Brass")
        await client.post(f"/api/wishlist/{wanted['id']}", json={"reason": "birthday"})

        response = await client.get("/api/games/stats")

        assert response.status_code == 200
        stats = response.json()
        assert stats["count"] == 2
        assert stats["owned"] == 1
        assert stats["wishlisted"] == 1
        assert stats["lastUpdate"] != "n/a"

    async def test_stats_on_empty_collection(self, client):
        stats = (await client.get("/api/games/stats")).json()
        assert stats == {"count": 0, "owned": 0, "wishlisted": 0, "lastUpdate": "n/a"}


class TestUpdate:

    async def test_partial_update_keeps_other_fields(self, client, create_game):
        game = await create_game(title="Catan", genre="Family", tags=[{"title": "Trading"}])

        response = await client.put(f"/api/games/{game['id']}", json={"myRating": 8})

        body = response.json()
        assert response.status_code == 200
        assert body["myRating"] == 8
        assert body["genre"] == "Family"
        assert [t["title"] for t in body["tags"]] == ["Trading"]

    async def test_tags_replace_the_whole_list(self, client, create_game):
        game = await create_game(tags=[{"title": "Trading"}, {"title": "Dice"}])

        response = await client.put(f"/api/games/{game['id']}", json={"tags": [{"title": "Family"}]})

        assert [t["title"] for t in response.json()["tags"]] == ["Family"]

    async def test_empty_tags_clear_links_but_keep_tags(self, client, create_game):
        game = await create_game(tags=[{"title": "Trading"}])

        response = await client.put(f"/api/games/{game['id']}", json={"tags": []})

        assert response.json()["tags"] == []
        tags = (await client.get("/api/tags")).json()
        assert [t["title"] for t in tags] == ["Trading"]

    async def test_marking_owned_clears_the_wishlist(self, client, create_game):
        """Test an owned game never keeps its wishlist entry"""
        game = await create_game(title="Brass")
        await client.post(f"/api/wishlist/{game['id']}", json={"reason": "someday"})

        response = await client.put(f"/api/games/{game['id']}", json={"isOwned": True})

        assert response.status_code == 200
        assert response.json()["isOwned"] is True
        assert response.json()["wishlist"] is None
        assert (await client.get("/api/wishlist")).json() == []

    async def test_update_missing_game(self, client):
        response = await client.put("/api/games/9999", json={"title": "Ghost"})
        assert response.status_code == 404


class TestDelete:

    async def test_delete_with_only_tags(self, client, create_game):
        """Test tag links go with the game and the tags survive"""
        game = await create_game(tags=[{"title": "Trading"}])

        response = await client.delete(f"/api/games/{game['id']}")

        assert response.status_code == 204
        assert (await client.get(f"/api/games/{game['id']}")).status_code == 404
        assert [t["title"] for t in (await client.get("/api/tags")).json()] == ["Trading"]

    async def test_delete_blocked_by_session(self, client, create_game):
        game = await create_game()
        await client.post("/api/sessions", json={"gameId": game["id"], "date": "2024-05-01T19:00:00"})

        response = await client.delete(f"/api/games/{game['id']}")

        assert response.status_code == 409
        assert (await client.get(f"/api/games/{game['id']}")).status_code == 200

    async def test_delete_blocked_by_file(self, client, create_game):
        game = await create_game()
        await client.post(f"/api/games/{game['id']}/files", json={"title": "Rules", "link": "https://example.org/rules.pdf"})

        response = await client.delete(f"/api/games/{game['id']}")

        assert response.status_code == 409
        assert response.json()["error"] == "CONFLICT"

    async def test_delete_blocked_by_wishlist(self, client, create_game):
        game = await create_game()
        await client.post(f"/api/wishlist/{game['id']}")

        response = await client.delete(f"/api/games/{game['id']}")

        assert response.status_code == 409

    async def test_delete_missing_game(self, client):
        response = await client.delete("/api/games/9999")
        assert response.status_code == 404


class TestRouting:

    async def test_unknown_route(self, client):
        response = await client.get("/api/does-not-exist")

        assert response.status_code == 404
        assert response.json() == {"message": "This route does not exist"}

    async def test_root(self, client):
        response = await client.get("/")
        assert response.json()["status"] == "ok"


class TestSlowDatabase:

    async def test_slow_read_answers_503(self, client, app, monkeypatch):
        async def slow_execute(*args, **kwargs):
            await asyncio.sleep(1)

        monkeypatch.setattr(app.state.settings, "DB_QUERY_TIMEOUT", 0.05)
        monkeypatch.setattr(AsyncSession, "execute", slow_execute)

        response = await client.get("/api/games")

        assert response.status_code == 503
        assert response.json()["error"] == "DATABASE_UNAVAILABLE"
