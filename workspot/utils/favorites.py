import logging
from typing import List
from sqlalchemy.orm import Session
from workspot.db import commit
from workspot.models.spot import Spot
from workspot.utils import repository


logger = logging.getLogger(__name__)


def toggle_favorite(db: Session, user_id: int, spot_id: int) -> List[Spot]:
    """Remove the spot from the user's favorites if present, add it otherwise."""
    user = repository.require_user(db, user_id)
    spot = repository.require_spot(db, spot_id)

    if spot in user.favorites:
        user.favorites.remove(spot)
        logger.debug(f"User {user_id} unfavorited spot {spot_id}")
    else:
        user.favorites.append(spot)
        logger.debug(f"User {user_id} favorited spot {spot_id}")

    commit(db)
    return repository.list_favorites(db, user_id)
