from decimal import Decimal

import pytest
from sqlalchemy import update

from urban_harvest.data.models.product import ProductModel
from urban_harvest.repos.product_repo import ProductRepo
from urban_harvest.services.order_service import delivery_fee

DELIVERY = {
    "customer_name": "Nimal",
    "customer_email": "nimal@example.com",
    "customer_phone": "0771234567",
    "delivery_address": "12 Temple Road",
    "delivery_city": "Kandy",
}


def _order(cart=(), subscriptions=(), delivery=DELIVERY):
    return {"cart": list(cart), "subscriptions": list(subscriptions), "deliveryInfo": delivery}


@pytest.mark.parametrize("subtotal, fee", [
    (Decimal("0"), Decimal("150")),
    (Decimal("1000"), Decimal("150")),
    (Decimal("1000.01"), Decimal("0")),
])
def test_delivery_fee(subtotal, fee):
    assert delivery_fee(subtotal) == fee


def test_order_charges_database_prices(client, customer, product, db):
    _, headers = customer
    cart = [{"product_id": product.product_id, "quantity": 2, "price": 1}]
    r = client.post("/api/orders/bulk", json=_order(cart), headers=headers)
    assert r.status_code == 201
    body = r.json()
    assert body["message"] == "Order placed successfully"
    assert body["total_amount"] == 950
    assert body["items_count"] == 1

    db.refresh(product)
    assert product.stock_quantity == 3


def test_free_delivery_over_threshold(client, customer, product):
    _, headers = customer
    cart = [{"product_id": product.product_id, "quantity": 3}]
    r = client.post("/api/orders/bulk", json=_order(cart), headers=headers)
    assert r.status_code == 201
    assert r.json()["total_amount"] == 1200


def test_insufficient_stock_leaves_stock_alone(client, customer, product, db):
    _, headers = customer
    cart = [{"product_id": product.product_id, "quantity": 6}]
    r = client.post("/api/orders/bulk", json=_order(cart), headers=headers)
    assert r.status_code == 400
    assert r.json()["error"] == "Insufficient stock for Organic Tomatoes"

    db.refresh(product)
    assert product.stock_quantity == 5
    assert client.get("/api/orders/", headers=headers).json()["orders"] == []


def test_empty_cart(client, customer):
    _, headers = customer
    r = client.post("/api/orders/bulk", json=_order(), headers=headers)
    assert r.status_code == 400
    assert r.json()["error"] == "Cart is empty"


def test_missing_delivery_information(client, customer, product):
    _, headers = customer
    cart = [{"product_id": product.product_id, "quantity": 1}]
    r = client.post("/api/orders/bulk", json=_order(cart, delivery={"customer_name": "Nimal"}), headers=headers)
    assert r.status_code == 400
    assert r.json()["error"] == "Required delivery information missing"


def test_unknown_product(client, customer):
    _, headers = customer
    cart = [{"product_id": 999, "quantity": 1, "name": "Ghost Pepper"}]
    r = client.post("/api/orders/bulk", json=_order(cart), headers=headers)
    assert r.status_code == 404
    assert r.json()["error"] == "Product not found: Ghost Pepper"


def test_admin_cannot_order(client, admin, product):
    _, headers = admin
    cart = [{"product_id": product.product_id, "quantity": 1}]
    r = client.post("/api/orders/bulk", json=_order(cart), headers=headers)
    assert r.status_code == 403


def test_order_with_subscription_box(client, customer, product, box):
    _, headers = customer
    cart = [{"product_id": product.product_id, "quantity": 1}]
    r = client.post(
        "/api/orders/bulk",
        json=_order(cart, subscriptions=[{"box_id": box.box_id, "frequency": "weekly"}]),
        headers=headers,
    )
    assert r.status_code == 201
    assert r.json()["total_amount"] == 2900
    assert r.json()["items_count"] == 2
    order_id = r.json()["order_id"]

    order = client.get(f"/api/orders/{order_id}", headers=headers).json()["order"]
    assert order["items"][0]["product_name"] == "Organic Tomatoes"
    assert order["items"][0]["has_reviewed"] is False
    assert order["subscriptions"][0]["box_name"] == "Veggie Box"

    subs = client.get("/api/subscriptions/my", headers=headers).json()["subscriptions"]
    assert len(subs) == 1
    assert subs[0]["status"] == "active"


def test_orders_are_private(client, customer, other_customer, product):
    _, headers = customer
    _, other_headers = other_customer
    cart = [{"product_id": product.product_id, "quantity": 1}]
    order_id = client.post("/api/orders/bulk", json=_order(cart), headers=headers).json()["order_id"]

    r = client.get(f"/api/orders/{order_id}", headers=other_headers)
    assert r.status_code == 404
    assert r.json()["error"] == "Order not found"


def test_stock_taken_after_check_rolls_back(client, customer, product, box, db, monkeypatch):
    _, headers = customer
    reserve = ProductRepo.reserve_stock

    def sold_out_meanwhile(self, product_id, quantity):
        self.db.execute(
            update(ProductModel).where(ProductModel.product_id == product_id).values(stock_quantity=0)
        )
        return reserve(self, product_id, quantity)

    monkeypatch.setattr(ProductRepo, "reserve_stock", sold_out_meanwhile)
    cart = [{"product_id": product.product_id, "quantity": 2}]
    r = client.post(
        "/api/orders/bulk",
        json=_order(cart, subscriptions=[{"box_id": box.box_id}]),
        headers=headers,
    )
    assert r.status_code == 400
    assert r.json()["error"] == "Insufficient stock for Organic Tomatoes"

    db.refresh(product)
    assert product.stock_quantity == 5
    assert client.get("/api/orders/", headers=headers).json()["orders"] == []
    assert client.get("/api/subscriptions/my", headers=headers).json()["subscriptions"] == []


def test_unknown_subscription_frequency(client, customer, box):
    _, headers = customer
    r = client.post(
        "/api/orders/bulk",
        json=_order(subscriptions=[{"box_id": box.box_id, "frequency": "daily"}]),
        headers=headers,
    )
    assert r.status_code == 400
    assert "frequency" in r.json()["error"]
    assert client.get("/api/orders/", headers=headers).json()["orders"] == []
