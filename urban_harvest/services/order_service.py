# urban_harvest/services/order_service.py
from datetime import date
from decimal import Decimal

from sqlalchemy.orm import Session

from urban_harvest.data.models.order import OrderModel, OrderItemModel
from urban_harvest.data.models.subscription import SubscriptionModel
from urban_harvest.domain.schemas import BulkOrderIn, CurrentUser
from urban_harvest.repos.order_repo import OrderRepo
from urban_harvest.repos.product_repo import ProductRepo
from urban_harvest.repos.subscription_repo import SubscriptionRepo
from urban_harvest.services.subscription_service import next_delivery_date
from urban_harvest.utils.settings import DELIVERY_FEE, FREE_DELIVERY_THRESHOLD
from urban_harvest.utils.logging import get_logger

logger = get_logger(__name__)

_REQUIRED_DELIVERY = ("customer_name", "customer_email", "customer_phone", "delivery_address")


def delivery_fee(subtotal: Decimal) -> Decimal:
    return Decimal("0") if subtotal > FREE_DELIVERY_THRESHOLD else Decimal(DELIVERY_FEE)


class OrderService:
    """
    Checkout of a cart of products and subscription boxes.

    Prices come from the database, never from the client. The order, its
    items, the stock decrements and the new subscriptions are written in a
    single transaction.
    """

    def __init__(self, db: Session):
        self.repo = OrderRepo(db)
        self.products = ProductRepo(db)
        self.subscriptions = SubscriptionRepo(db)

    def create_bulk_order(self, payload: BulkOrderIn, user: CurrentUser) -> dict:
        if user.is_admin:
            raise PermissionError("Administrators cannot place orders")

        if not payload.cart and not payload.subscriptions:
            raise ValueError("Cart is empty")

        info = payload.delivery_info
        if info is None or not all(getattr(info, f) for f in _REQUIRED_DELIVERY):
            raise ValueError("Required delivery information missing")

        products = {p.product_id: p for p in self.products.get_products([i.product_id for i in payload.cart])}
        for line in payload.cart:
            product = products.get(line.product_id)
            if not product:
                raise LookupError(f"Product not found: {line.name or line.product_id}")
            if product.stock_quantity < line.quantity:
                raise ValueError(f"Insufficient stock for {product.name}")

        boxes = {b.box_id: b for b in self.subscriptions.get_boxes([s.box_id for s in payload.subscriptions])}
        for line in payload.subscriptions:
            if line.box_id not in boxes:
                raise LookupError(f"Subscription box not found: {line.box_id}")

        subtotal = sum((products[l.product_id].price * l.quantity for l in payload.cart), Decimal("0.00"))
        subtotal += sum((boxes[s.box_id].price for s in payload.subscriptions), Decimal("0.00"))
        total = subtotal + delivery_fee(subtotal)

        try:
            order = OrderModel(
                user_id=user.id,
                total_amount=total,
                customer_name=info.customer_name,
                customer_email=info.customer_email,
                customer_phone=info.customer_phone,
                delivery_address=info.delivery_address,
                delivery_city=info.delivery_city,
                delivery_state=info.delivery_state,
                delivery_zip=info.delivery_zip,
                payment_method=info.payment_method or "card",
            )
            for line in payload.cart:
                price = products[line.product_id].price
                order.items.append(OrderItemModel(
                    product_id=line.product_id,
                    quantity=line.quantity,
                    unit_price=price,
                    subtotal=price * line.quantity,
                ))
            order = self.repo.add_order(order)

            for line in payload.cart:
                if not self.products.reserve_stock(line.product_id, line.quantity):
                    raise ValueError(f"Insufficient stock for {products[line.product_id].name}")

            today = date.today()
            for line in payload.subscriptions:
                frequency = line.frequency or boxes[line.box_id].frequency or "monthly"
                self.subscriptions.add_subscription(SubscriptionModel(
                    user_id=user.id,
                    box_id=line.box_id,
                    order_id=order.order_id,
                    status="active",
                    start_date=today,
                    next_delivery_date=next_delivery_date(frequency, today),
                ))

            self.repo.commit()
        except Exception:
            self.repo.rollback()
            raise

        items_count = len(payload.cart) + len(payload.subscriptions)
        logger.info(f"Order {order.order_id} placed by user {user.id}: {items_count} items, total {total}")
        return {
            "message": "Order placed successfully",
            "order_id": order.order_id,
            "total_amount": total,
            "items_count": items_count,
        }

    def _order_dict(self, order: OrderModel, user_id: int) -> dict:
        data = order.to_dict()
        items = []
        for row in self.repo.list_items(order.order_id, user_id):
            values = row._asdict()
            item = values.pop("OrderItemModel").to_dict()
            item.update(values)
            item["has_reviewed"] = bool(item["has_reviewed"])
            items.append(item)
        subscriptions = []
        for row in self.repo.list_subscriptions(order.order_id):
            values = row._asdict()
            sub = values.pop("SubscriptionModel").to_dict()
            sub.update(values)
            subscriptions.append(sub)
        data["items"] = items
        data["subscriptions"] = subscriptions
        data["items_count"] = len(items) + len(subscriptions)
        return data

    def list_user_orders(self, user_id: int) -> dict:
        return {"orders": [self._order_dict(o, user_id) for o in self.repo.list_user_orders(user_id)]}

    def get_user_order(self, order_id: int, user_id: int) -> dict:
        order = self.repo.get_order(order_id)
        if not order or order.user_id != user_id:
            raise LookupError("Order not found")
        return {"order": self._order_dict(order, user_id)}
