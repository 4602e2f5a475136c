# urban_harvest/repos/product_repo.py
from sqlalchemy import select, update
from sqlalchemy.orm import Session

from urban_harvest.data.models.product import ProductModel
from urban_harvest.data.models.catalog import CategoryModel
from urban_harvest.data.models.order import OrderModel, OrderItemModel
from urban_harvest.data.models.user import UserModel
from urban_harvest.data.models.review import ProductReviewModel


class ProductRepo:
    def __init__(self, db: Session):
        self.db = db

    def _listing(self):
        return (
            select(ProductModel, CategoryModel.category_name)
            .outerjoin(CategoryModel, ProductModel.category_id == CategoryModel.category_id)
        )

    def list_products(self):
        return self.db.execute(self._listing().order_by(ProductModel.name)).all()

    def get_product_row(self, product_id: int):
        return self.db.execute(self._listing().where(ProductModel.product_id == product_id)).first()

    def get_product(self, product_id: int) -> ProductModel | None:
        return self.db.get(ProductModel, product_id)

    def get_products(self, product_ids: list[int]) -> list[ProductModel]:
        if not product_ids:
            return []
        return self.db.execute(
            select(ProductModel).where(ProductModel.product_id.in_(product_ids))
        ).scalars().all()

    def add_product(self, product: ProductModel) -> ProductModel:
        self.db.add(product)
        self.db.commit()
        self.db.refresh(product)
        return product

    def delete_product(self, product: ProductModel):
        self.db.delete(product)
        self.db.commit()

    def reserve_stock(self, product_id: int, quantity: int) -> int:
        # conditional decrement, 0 rows means stock ran out in the meantime
        result = self.db.execute(
            update(ProductModel)
            .where(ProductModel.product_id == product_id, ProductModel.stock_quantity >= quantity)
            .values(stock_quantity=ProductModel.stock_quantity - quantity)
        )
        return result.rowcount

    def list_reviews(self, product_id: int):
        return self.db.execute(
            select(ProductReviewModel, UserModel.name.label("user_name"), UserModel.profile_image)
            .join(UserModel, ProductReviewModel.user_id == UserModel.user_id)
            .where(ProductReviewModel.product_id == product_id)
            .order_by(ProductReviewModel.created_at.desc(), ProductReviewModel.review_id.desc())
        ).all()

    def list_sales(self, product_id: int):
        return self.db.execute(
            select(
                OrderItemModel.quantity,
                OrderItemModel.unit_price,
                OrderItemModel.subtotal,
                OrderModel.order_id,
                OrderModel.created_at.label("order_date"),
                UserModel.name.label("user_name"),
                UserModel.email.label("user_email"),
                UserModel.phone.label("user_phone"),
            )
            .join(OrderModel, OrderItemModel.order_id == OrderModel.order_id)
            .join(UserModel, OrderModel.user_id == UserModel.user_id)
            .where(OrderItemModel.product_id == product_id)
            .order_by(OrderModel.created_at.desc())
        ).all()

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()
