# boardshelf/services/wishlist.py
"""Ownership/wishlist transitions for a single game.

Rules
-----
* A game may carry a wishlist row only while ``is_owned`` is False.
* Acquiring a wishlisted game removes the row and sets ``is_owned`` in one
  transaction; no reader sees one change without the other.
* Rejecting drops the row and leaves ownership alone.
"""
import logging
from typing import List

from boardshelf.errors import Conflict, InvalidState, NotFound
from boardshelf.models.game import Game
from boardshelf.models.wishlist import Wishlist
from boardshelf.services.data_access import DataAccess

logger = logging.getLogger(__name__)


class WishlistManager:
    def __init__(self, data: DataAccess) -> None:
        self._data = data

    async def _get_game(self, game_id: int, for_update: bool = False) -> Game:
        game = await self._data.find_game_by_id(game_id, for_update=for_update)
        if game is None:
            raise NotFound(f"Game {game_id} not found")
        return game

    async def add_to_wishlist(self, game_id: int, reason: str = "") -> Wishlist:
        # held until create_wishlist commits or we roll back
        game = await self._get_game(game_id, for_update=True)
        if game.is_owned:
            await self._data.rollback()
            raise InvalidState(f"Game {game_id} is already owned and cannot be wishlisted")
        if game.wishlist is not None:
            await self._data.rollback()
            raise Conflict(f"Game {game_id} is already on the wishlist")

        entry = await self._data.create_wishlist(game, reason or "")
        logger.info("Game %s added to wishlist", game_id)
        return entry

    async def remove_from_wishlist(self, game_id: int) -> dict:
        """Game acquired: drop the wishlist row and mark the game owned."""
        game = await self._get_game(game_id, for_update=True)
        if game.wishlist is None:
            await self._data.rollback()
            raise InvalidState(f"Game {game_id} is not on the wishlist")

        await self._data.delete_wishlist_and_mark_owned(game_id)
        logger.info("Game %s removed from wishlist and marked as owned", game_id)
        return {"message": f"Game {game_id} removed from wishlist and marked as owned"}

    async def reject_from_wishlist(self, game_id: int) -> None:
        await self._get_game(game_id)
        if not await self._data.delete_wishlist(game_id):
            raise InvalidState(f"Game {game_id} is not on the wishlist")
        await self._data.commit()
        logger.info("Game %s rejected from wishlist", game_id)

    async def update_reason(self, game_id: int, reason: str) -> Wishlist:
        await self._get_game(game_id)
        entry = await self._data.find_wishlist(game_id)
        if entry is None:
            raise InvalidState(f"Game {game_id} is not on the wishlist")
        entry.reason = reason
        await self._data.commit()
        return entry

    async def list_wishlist(self) -> List[Game]:
        return await self._data.find_wishlisted_games()
