# boardshelf/routes/wishlist.py

from typing import List, Optional

from fastapi import APIRouter, Depends, Response, status

from boardshelf.dependencies import get_wishlist_manager
from boardshelf.schemas.common import Message
from boardshelf.schemas.game import GameRead
from boardshelf.schemas.wishlist import WishlistCreate, WishlistRead, WishlistUpdate
from boardshelf.services.wishlist import WishlistManager

router = APIRouter(prefix="/wishlist", tags=["Wishlist"])


@router.get("", response_model=List[GameRead])
async def list_wishlist(manager: WishlistManager = Depends(get_wishlist_manager)):
    """Games not owned yet that have a wishlist entry."""
    return await manager.list_wishlist()


@router.post("/{game_id}", response_model=WishlistRead, status_code=status.HTTP_201_CREATED)
async def add_to_wishlist(
    game_id: int,
    payload: Optional[WishlistCreate] = None,
    manager: WishlistManager = Depends(get_wishlist_manager),
):
    reason = payload.reason if payload is not None else ""
    return await manager.add_to_wishlist(game_id, reason)


@router.put("/{game_id}", response_model=WishlistRead)
async def update_wishlist_reason(
    game_id: int,
    payload: WishlistUpdate,
    manager: WishlistManager = Depends(get_wishlist_manager),
):
    return await manager.update_reason(game_id, payload.reason)


@router.delete("/{game_id}", response_model=Message)
async def remove_from_wishlist(game_id: int, manager: WishlistManager = Depends(get_wishlist_manager)):
    """The game was acquired: drop the wishlist entry and mark it owned."""
    return await manager.remove_from_wishlist(game_id)


@router.post("/{game_id}/reject", status_code=status.HTTP_204_NO_CONTENT)
async def reject_from_wishlist(game_id: int, manager: WishlistManager = Depends(get_wishlist_manager)):
    """Drop the wishlist entry without marking the game owned."""
    await manager.reject_from_wishlist(game_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
