# urban_harvest/services/favorite_service.py
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from urban_harvest.data.models.favorite import FavoriteModel
from urban_harvest.domain.schemas import FavoriteIn
from urban_harvest.repos.favorite_repo import FavoriteRepo
from urban_harvest.utils.logging import get_logger

logger = get_logger(__name__)

_GROUPS = {
    "product": "products",
    "event": "events",
    "workshop": "workshops",
    "subscription_box": "subscription_boxes",
}


class FavoriteService:
    def __init__(self, db: Session):
        self.repo = FavoriteRepo(db)

    def list_favorites(self, user_id: int) -> dict:
        favorites = [row._asdict() for row in self.repo.list_user_favorites(user_id)]
        grouped = {group: [] for group in _GROUPS.values()}
        for fav in favorites:
            grouped[_GROUPS[fav["item_type"]]].append(fav)
        return {"favorites": favorites, "grouped": grouped, "total": len(favorites)}

    def add_favorite(self, payload: FavoriteIn, user_id: int) -> dict:
        if not self.repo.item_exists(payload.item_type, payload.item_id):
            raise LookupError("Item not found")

        if self.repo.find(user_id, payload.item_type, payload.item_id):
            raise ValueError("Item already in favorites")

        try:
            favorite = self.repo.add_favorite(FavoriteModel(
                user_id=user_id, item_type=payload.item_type, item_id=payload.item_id
            ))
        except IntegrityError:
            # lost a race against an identical request
            self.repo.db.rollback()
            raise ValueError("Item already in favorites")

        logger.info(f"User {user_id} favorited {payload.item_type} {payload.item_id}")
        return {"message": "Added to favorites", "favorite_id": favorite.favorite_id}

    def remove_favorite(self, favorite_id: int, user_id: int) -> dict:
        favorite = self.repo.get_user_favorite(favorite_id, user_id)
        if not favorite:
            raise LookupError("Favorite not found")
        self.repo.delete_favorite(favorite)
        return {"message": "Removed from favorites"}

    def remove_item(self, item_type: str, item_id: int, user_id: int) -> dict:
        if not self.repo.delete_by_item(user_id, item_type, item_id):
            raise LookupError("Favorite not found")
        return {"message": "Removed from favorites"}

    def check(self, item_type: str, item_id: int, user_id: int) -> dict:
        favorite = self.repo.find(user_id, item_type, item_id)
        return {
            "isFavorited": favorite is not None,
            "favorite_id": favorite.favorite_id if favorite else None,
        }
