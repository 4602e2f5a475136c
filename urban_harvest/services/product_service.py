# urban_harvest/services/product_service.py
from decimal import Decimal

from sqlalchemy.orm import Session

from urban_harvest.data.models.product import ProductModel, ProductDetailModel
from urban_harvest.domain.schemas import ProductIn, CurrentUser
from urban_harvest.repos.product_repo import ProductRepo
from urban_harvest.services.notification_service import NotificationService
from urban_harvest.services.upload_service import remove_uploaded_image
from urban_harvest.services.review_service import average
from urban_harvest.utils.logging import get_logger

logger = get_logger(__name__)

_FIELDS = ("category_id", "name", "price", "unit", "image", "description", "stock_quantity", "origin")


def _product_dict(product: ProductModel, category_name: str | None) -> dict:
    data = product.to_dict()
    data["category_name"] = category_name
    data["details"] = {d.detail_key: d.detail_value for d in product.details}
    return data


class ProductService:
    def __init__(self, db: Session):
        self.repo = ProductRepo(db)
        self.notification_service = NotificationService()

    def list_products(self) -> dict:
        return {"products": [_product_dict(p, c) for p, c in self.repo.list_products()]}

    def get_product(self, product_id: int) -> dict:
        row = self.repo.get_product_row(product_id)
        if not row:
            raise LookupError("Product not found")

        data = _product_dict(*row)
        reviews = []
        for review, user_name, profile_image in self.repo.list_reviews(product_id):
            item = review.to_dict()
            item["user_name"] = user_name
            item["profile_image"] = profile_image
            reviews.append(item)
        data["reviews"] = reviews
        data["total_reviews"] = len(reviews)
        data["average_rating"] = average([r["rating"] for r in reviews])
        return {"product": data}

    def get_sales(self, product_id: int) -> dict:
        if not self.repo.get_product(product_id):
            raise LookupError("Product not found")

        sales = [row._asdict() for row in self.repo.list_sales(product_id)]
        revenue = sum((s["subtotal"] for s in sales), Decimal("0.00"))
        return {
            "sales": sales,
            "total_sold": sum(s["quantity"] for s in sales),
            "total_revenue": f"{revenue:.2f}",
            "total_customers": len({s["user_email"] for s in sales}),
        }

    def create_product(self, payload: ProductIn, user: CurrentUser) -> dict:
        product = ProductModel(
            **{f: getattr(payload, f) for f in _FIELDS},
            created_by_user=user.id,
        )
        product.details = [
            ProductDetailModel(detail_key=k, detail_value=v) for k, v in payload.details.items()
        ]
        product = self.repo.add_product(product)
        logger.info(f"Product {product.product_id} created by user {user.id}")

        self.notification_service.broadcast(
            "New Product Available!",
            f"Check out our new {product.name} - Fresh and organic!",
            f"/products/{product.product_id}",
        )
        return {"message": "Product created successfully", "product_id": product.product_id}

    def update_product(self, product_id: int, payload: ProductIn) -> dict:
        product = self.repo.get_product(product_id)
        if not product:
            raise LookupError("Product not found")

        for f in _FIELDS:
            setattr(product, f, getattr(payload, f))
        product.details = [
            ProductDetailModel(detail_key=k, detail_value=v) for k, v in payload.details.items()
        ]
        self.repo.commit()

        logger.info(f"Product {product_id} updated")
        return {"message": "Product updated successfully"}

    def delete_product(self, product_id: int) -> dict:
        product = self.repo.get_product(product_id)
        if not product:
            raise LookupError("Product not found")

        image = product.image
        self.repo.delete_product(product)
        remove_uploaded_image(image)

        logger.info(f"Product {product_id} deleted")
        return {"message": "Product deleted successfully"}
