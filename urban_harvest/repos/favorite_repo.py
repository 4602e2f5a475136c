# urban_harvest/repos/favorite_repo.py
from sqlalchemy import select, delete, case, and_, or_
from sqlalchemy.orm import Session

from urban_harvest.data.models.favorite import FavoriteModel
from urban_harvest.data.models.product import ProductModel
from urban_harvest.data.models.event import EventModel
from urban_harvest.data.models.workshop import WorkshopModel
from urban_harvest.data.models.subscription import SubscriptionBoxModel

F = FavoriteModel
P = ProductModel
E = EventModel
W = WorkshopModel
B = SubscriptionBoxModel

_TARGETS = {
    "product": (P, P.product_id),
    "event": (E, E.event_id),
    "workshop": (W, W.workshop_id),
    "subscription_box": (B, B.box_id),
}


class FavoriteRepo:
    def __init__(self, db: Session):
        self.db = db

    def item_exists(self, item_type: str, item_id: int) -> bool:
        model, _ = _TARGETS[item_type]
        return self.db.get(model, item_id) is not None

    def find(self, user_id: int, item_type: str, item_id: int) -> FavoriteModel | None:
        return self.db.execute(
            select(F).where(F.user_id == user_id, F.item_type == item_type, F.item_id == item_id)
        ).scalar_one_or_none()

    def get_user_favorite(self, favorite_id: int, user_id: int) -> FavoriteModel | None:
        return self.db.execute(
            select(F).where(F.favorite_id == favorite_id, F.user_id == user_id)
        ).scalar_one_or_none()

    def add_favorite(self, favorite: FavoriteModel) -> FavoriteModel:
        self.db.add(favorite)
        self.db.commit()
        self.db.refresh(favorite)
        return favorite

    def delete_favorite(self, favorite: FavoriteModel):
        self.db.delete(favorite)
        self.db.commit()

    def delete_by_item(self, user_id: int, item_type: str, item_id: int) -> int:
        res = self.db.execute(
            delete(F).where(F.user_id == user_id, F.item_type == item_type, F.item_id == item_id)
        )
        self.db.commit()
        return res.rowcount

    def list_user_favorites(self, user_id: int):
        # rows pointing at deleted items are skipped
        def by_type(p, e, w, b=None):
            whens = [(F.item_type == "product", p), (F.item_type == "event", e), (F.item_type == "workshop", w)]
            if b is not None:
                whens.append((F.item_type == "subscription_box", b))
            return case(*whens)

        return self.db.execute(
            select(
                F.favorite_id,
                F.item_type,
                F.item_id,
                F.created_at,
                by_type(P.name, E.title, W.title, B.name).label("item_name"),
                by_type(P.image, E.image, W.image, B.image_url).label("item_image"),
                by_type(P.price, E.price, W.price, B.price).label("item_price"),
                by_type(P.stock_quantity, E.spots_left, W.spots_left).label("availability"),
            )
            .outerjoin(P, and_(F.item_type == "product", F.item_id == P.product_id))
            .outerjoin(E, and_(F.item_type == "event", F.item_id == E.event_id))
            .outerjoin(W, and_(F.item_type == "workshop", F.item_id == W.workshop_id))
            .outerjoin(B, and_(F.item_type == "subscription_box", F.item_id == B.box_id))
            .where(
                F.user_id == user_id,
                or_(
                    and_(F.item_type == "product", P.product_id.is_not(None)),
                    and_(F.item_type == "event", E.event_id.is_not(None)),
                    and_(F.item_type == "workshop", W.workshop_id.is_not(None)),
                    and_(F.item_type == "subscription_box", B.box_id.is_not(None)),
                ),
            )
            .order_by(F.created_at.desc(), F.favorite_id.desc())
        ).all()
