# urban_harvest/services/cart_service.py
from sqlalchemy.orm import Session

from urban_harvest.repos.product_repo import ProductRepo
from urban_harvest.repos.subscription_repo import SubscriptionRepo
from urban_harvest.utils.logging import get_logger

logger = get_logger(__name__)


class CartService:
    """
    Re-validates a client side cart against the database.
    Prices and stock are refreshed; lines whose product or box is gone
    (or whose box is inactive) come back with isValid False.
    """

    def __init__(self, db: Session):
        self.products = ProductRepo(db)
        self.subscriptions = SubscriptionRepo(db)

    def validate(self, items: list[dict]) -> dict:
        product_ids = [i.get("product_id") for i in items if i.get("type", "product") in ("product", None)]
        box_ids = [i.get("box_id") for i in items if i.get("type") == "subscription_box"]

        products = {p.product_id: p for p in self.products.get_products([i for i in product_ids if i])}
        boxes = {b.box_id: b for b in self.subscriptions.get_boxes([i for i in box_ids if i], active_only=True)}

        validated = []
        for item in items:
            if item.get("type") == "subscription_box":
                box = boxes.get(item.get("box_id"))
                if box:
                    validated.append({
                        **item,
                        "name": box.name,
                        "price": box.price,
                        "image": box.image_url,
                        "frequency": box.frequency,
                        "isValid": True,
                    })
                    continue
            else:
                product = products.get(item.get("product_id"))
                if product:
                    validated.append({
                        **item,
                        "name": product.name,
                        "price": product.price,
                        "image": product.image,
                        "stock_quantity": product.stock_quantity,
                        "unit": product.unit,
                        "isValid": True,
                    })
                    continue
            validated.append({**item, "isValid": False})

        removed = sum(1 for i in validated if not i["isValid"])
        if removed:
            logger.info(f"Cart validation dropped {removed} of {len(items)} lines")
        return {"items": validated, "removedCount": removed}
