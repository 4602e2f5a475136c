# urban_harvest/repos/order_repo.py
from sqlalchemy import select, func, and_
from sqlalchemy.orm import Session

from urban_harvest.data.models.order import OrderModel, OrderItemModel
from urban_harvest.data.models.product import ProductModel
from urban_harvest.data.models.review import ProductReviewModel
from urban_harvest.data.models.subscription import SubscriptionModel, SubscriptionBoxModel


class OrderRepo:
    def __init__(self, db: Session):
        self.db = db

    def add_order(self, order: OrderModel) -> OrderModel:
        # flush only, the caller owns the transaction
        self.db.add(order)
        self.db.flush()
        return order

    def get_order(self, order_id: int) -> OrderModel | None:
        return self.db.get(OrderModel, order_id)

    def list_user_orders(self, user_id: int) -> list[OrderModel]:
        return self.db.execute(
            select(OrderModel)
            .where(OrderModel.user_id == user_id)
            .order_by(OrderModel.created_at.desc(), OrderModel.order_id.desc())
        ).scalars().all()

    def list_items(self, order_id: int, user_id: int):
        has_reviewed = (
            select(func.count(ProductReviewModel.review_id))
            .where(and_(ProductReviewModel.product_id == OrderItemModel.product_id,
                        ProductReviewModel.user_id == user_id,
                        ProductReviewModel.order_id == OrderItemModel.order_id))
            .correlate(OrderItemModel)
            .scalar_subquery()
        )
        return self.db.execute(
            select(
                OrderItemModel,
                ProductModel.name.label("product_name"),
                ProductModel.image.label("product_image"),
                ProductModel.unit,
                has_reviewed.label("has_reviewed"),
            )
            .outerjoin(ProductModel, OrderItemModel.product_id == ProductModel.product_id)
            .where(OrderItemModel.order_id == order_id)
            .order_by(OrderItemModel.order_item_id)
        ).all()

    def list_subscriptions(self, order_id: int):
        return self.db.execute(
            select(
                SubscriptionModel,
                SubscriptionBoxModel.name.label("box_name"),
                SubscriptionBoxModel.image_url.label("box_image"),
                SubscriptionBoxModel.price.label("box_price"),
            )
            .join(SubscriptionBoxModel, SubscriptionModel.box_id == SubscriptionBoxModel.box_id)
            .where(SubscriptionModel.order_id == order_id)
            .order_by(SubscriptionModel.subscription_id)
        ).all()

    def has_ordered_product(self, user_id: int, product_id: int, order_id: int | None = None) -> int | None:
        """Return the id of an order of this user containing the product, if any."""
        stmt = (
            select(OrderModel.order_id)
            .join(OrderItemModel, OrderItemModel.order_id == OrderModel.order_id)
            .where(OrderModel.user_id == user_id, OrderItemModel.product_id == product_id)
        )
        if order_id is not None:
            stmt = stmt.where(OrderModel.order_id == order_id)
        return self.db.execute(stmt.order_by(OrderModel.order_id).limit(1)).scalar_one_or_none()

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()
