"""
Tests for the data-access boundary
"""
import asyncio

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import OperationalError

from boardshelf.errors import Unavailable
from boardshelf.models.game import game_tags
from boardshelf.models.tag import Tag
from boardshelf.services.data_access import DataAccess, EntityKind
from boardshelf.tasks import games, lookups, play_sessions


class TestGuard:

    async def test_timeout_becomes_unavailable(self, db_session):
        data = DataAccess(db_session, timeout=0.01)
        with pytest.raises(Unavailable):
            await data._guard("slow query", asyncio.sleep(1))

    async def test_connection_error_becomes_unavailable(self, data):
        async def refused():
            raise OperationalError("SELECT 1", {}, ConnectionRefusedError("refused"))

        with pytest.raises(Unavailable) as excinfo:
            await data._guard("find_game_by_id", refused())
        assert "find_game_by_id" in excinfo.value.message

    async def test_results_pass_through(self, data):
        async def answer():
            return 42

        assert await data._guard("noop", answer()) == 42


class TestAssociations:

    async def test_replace_with_empty_list_clears_links_only(self, data, make_game, resolver, db_session):
        """Test clearing a game's tags keeps the Tag rows"""
        game = await make_game("Terraforming Mars")
        tags = await resolver.resolve_many(EntityKind.TAG, ["Engine", "Space"])
        game = await data.find_game_by_id(game.id)
        await data.add_associations(game, "tags", tags)
        await data.commit()

        await data.replace_associations(game, "tags", [])
        await data.commit()

        links = await db_session.execute(select(func.count()).select_from(game_tags))
        tag_rows = await db_session.execute(select(func.count()).select_from(Tag))
        assert links.scalar() == 0
        assert tag_rows.scalar() == 2

    async def test_replace_swaps_the_set(self, data, make_game, resolver):
        game = await make_game()
        old = await resolver.resolve_many(EntityKind.TAG, ["Trading"])
        new = await resolver.resolve_many(EntityKind.TAG, ["Family", "Dice"])
        game = await data.find_game_by_id(game.id)
        await data.add_associations(game, "tags", old)
        await data.commit()

        await data.replace_associations(game, "tags", new)
        await data.commit()

        reloaded = await data.find_game_by_id(game.id)
        assert sorted(t.title for t in reloaded.tags) == ["Dice", "Family"]

    async def test_add_skips_existing_links(self, data, make_game, resolver):
        game = await make_game()
        tags = await resolver.resolve_many(EntityKind.TAG, ["Euro"])
        game = await data.find_game_by_id(game.id)
        await data.add_associations(game, "tags", tags)
        await data.add_associations(game, "tags", tags)
        await data.commit()

        reloaded = await data.find_game_by_id(game.id)
        assert [t.title for t in reloaded.tags] == ["Euro"]

    async def test_unloaded_collection_is_loaded_before_mutation(self, data, make_game, resolver, db_session):
        game = await make_game()
        tags = await resolver.resolve_many(EntityKind.TAG, ["Abstract"])
        # make_game's instance never loaded `tags`
        await data.replace_associations(game, "tags", tags)
        await data.commit()

        reloaded = await data.find_game_by_id(game.id)
        assert [t.title for t in reloaded.tags] == ["Abstract"]


class TestCrudReadsAreBounded:

    @pytest.fixture
    def slow_session(self, data, monkeypatch):
        """Every statement takes a second; the query timeout is 50ms"""
        async def slow_execute(*args, **kwargs):
            await asyncio.sleep(1)

        data.timeout = 0.05
        monkeypatch.setattr(data.session, "execute", slow_execute)
        return data

    async def test_list_games_times_out(self, slow_session):
        with pytest.raises(Unavailable):
            await games.list_games(slow_session)

    async def test_stats_time_out(self, slow_session):
        with pytest.raises(Unavailable):
            await games.get_game_stats(slow_session)

    async def test_lookup_listing_times_out(self, slow_session):
        with pytest.raises(Unavailable):
            await lookups.list_entities(slow_session, EntityKind.TAG)

    async def test_session_listing_times_out(self, slow_session):
        with pytest.raises(Unavailable):
            await play_sessions.list_sessions(slow_session)
