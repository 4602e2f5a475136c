from datetime import date, timedelta

from urban_harvest.data import models


def _event_body(**overrides):
    body = {
        "title": "Seed Swap",
        "description": "Bring your seeds",
        "event_date": (date.today() + timedelta(days=10)).isoformat(),
        "event_time": "10:00 AM",
        "location": "Colombo",
        "price": 0,
        "total_spots": 20,
        "agenda": [{"time": "10:00", "activity": "Welcome"}],
        "highlights": ["Free seeds"],
        "what_to_expect": ["Friendly gardeners"],
    }
    body.update(overrides)
    return body


def test_create_event_as_admin(client, admin):
    _, headers = admin
    r = client.post("/api/events/", json=_event_body(), headers=headers)
    assert r.status_code == 201
    event_id = r.json()["event_id"]

    event = client.get(f"/api/events/{event_id}").json()["event"]
    assert event["spots_left"] == 20
    assert event["agenda"] == [{"time": "10:00", "activity": "Welcome"}]
    assert event["highlights"] == ["Free seeds"]
    assert event["what_to_expect"] == ["Friendly gardeners"]
    assert event["reviews"] == []
    assert event["average_rating"] == 0


def test_create_event_rejects_today(client, admin):
    _, headers = admin
    r = client.post("/api/events/", json=_event_body(event_date=date.today().isoformat()), headers=headers)
    assert r.status_code == 400
    assert r.json()["error"].startswith("Event date must be in the future")


def test_create_event_requires_admin(client, customer):
    _, headers = customer
    r = client.post("/api/events/", json=_event_body(), headers=headers)
    assert r.status_code == 403
    assert r.json()["error"] == "Access denied. Admin privileges required."


def test_invalid_body_renders_error(client, admin):
    _, headers = admin
    body = _event_body()
    del body["title"]
    r = client.post("/api/events/", json=body, headers=headers)
    assert r.status_code == 400
    assert "title" in r.json()["error"]


def test_update_event_keeps_booked_spots(client, admin, event, db):
    _, headers = admin
    event.spots_left = 6
    db.commit()

    body = _event_body(title="Harvest Day", total_spots=12)
    r = client.put(f"/api/events/{event.event_id}", json=body, headers=headers)
    assert r.status_code == 200

    db.refresh(event)
    assert event.title == "Harvest Day"
    assert event.spots_left == 8


def test_delete_event(client, admin, event):
    _, headers = admin
    assert client.delete(f"/api/events/{event.event_id}", headers=headers).status_code == 200
    r = client.get(f"/api/events/{event.event_id}")
    assert r.status_code == 404
    assert r.json()["error"] == "Event not found"


def test_list_workshops(client, workshop):
    r = client.get("/api/workshops/")
    assert r.status_code == 200
    workshops = r.json()["workshops"]
    assert [w["title"] for w in workshops] == ["Composting Basics"]
    assert workshops[0]["total_reviews"] == 0


def test_create_workshop_rejects_past_date(client, admin):
    _, headers = admin
    body = {
        "title": "Beekeeping",
        "workshop_date": (date.today() - timedelta(days=1)).isoformat(),
        "total_spots": 5,
    }
    r = client.post("/api/workshops/", json=body, headers=headers)
    assert r.status_code == 400


def test_product_crud(client, admin):
    _, headers = admin
    body = {
        "name": "Kithul Treacle",
        "price": 1200,
        "unit": "bottle",
        "stock_quantity": 30,
        "details": {"Volume": "750ml"},
    }
    r = client.post("/api/products/", json=body, headers=headers)
    assert r.status_code == 201
    product_id = r.json()["product_id"]

    product = client.get(f"/api/products/{product_id}").json()["product"]
    assert product["details"] == {"Volume": "750ml"}
    assert product["stock_quantity"] == 30

    body["stock_quantity"] = 10
    body["details"] = {}
    assert client.put(f"/api/products/{product_id}", json=body, headers=headers).status_code == 200
    product = client.get(f"/api/products/{product_id}").json()["product"]
    assert product["stock_quantity"] == 10
    assert product["details"] == {}

    assert client.delete(f"/api/products/{product_id}", headers=headers).status_code == 200
    assert client.get(f"/api/products/{product_id}").status_code == 404


def test_product_sales_summary(client, admin, customer, product):
    _, admin_headers = admin
    _, headers = customer
    order = {
        "cart": [{"product_id": product.product_id, "quantity": 2}],
        "deliveryInfo": {
            "customer_name": "Nimal",
            "customer_email": "nimal@example.com",
            "customer_phone": "0771234567",
            "delivery_address": "12 Temple Road",
        },
    }
    assert client.post("/api/orders/bulk", json=order, headers=headers).status_code == 201

    r = client.get(f"/api/products/{product.product_id}/sales", headers=admin_headers)
    assert r.status_code == 200
    sales = r.json()
    assert sales["total_sold"] == 2
    assert sales["total_revenue"] == "800.00"
    assert sales["total_customers"] == 1


def test_categories_filter_by_type(client, db):
    db.add_all([
        models.CategoryModel(category_name="Vegetables", category_type="product"),
        models.CategoryModel(category_name="Gardening", category_type="workshop"),
    ])
    db.commit()

    names = [c["category_name"] for c in client.get("/api/categories", params={"type": "product"}).json()["categories"]]
    assert names == ["Vegetables"]
    assert len(client.get("/api/categories").json()["categories"]) == 2


def test_featured_testimonials(client, db):
    db.add_all([
        models.TestimonialModel(customer_name="Ayesha", testimonial_text="Fresh!", is_featured=True),
        models.TestimonialModel(customer_name="Ruwan", testimonial_text="Great workshops"),
    ])
    db.commit()

    assert len(client.get("/api/testimonials").json()) == 2
    featured = client.get("/api/testimonials/featured").json()
    assert [t["name"] for t in featured] == ["Ayesha"]
    assert featured[0]["text"] == "Fresh!"


def test_health(client):
    r = client.get("/api/health")
    assert r.status_code == 200
    assert r.json()["status"] == "OK"


def test_root_lists_endpoints(client):
    body = client.get("/").json()
    assert body["message"] == "Welcome to Urban Harvest Hub API"
    assert body["endpoints"]["health"] == "/api/health"


def test_unknown_route_renders_error(client):
    r = client.get("/api/nothing-here")
    assert r.status_code == 404
    assert r.json() == {"error": "Not Found"}
