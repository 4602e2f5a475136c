import pytest

from urban_harvest.data import models
from urban_harvest.services.review_service import average, round_rating

DELIVERY = {
    "customer_name": "Nimal",
    "customer_email": "nimal@example.com",
    "customer_phone": "0771234567",
    "delivery_address": "12 Temple Road",
}


def _buy(client, headers, product_id):
    body = {"cart": [{"product_id": product_id, "quantity": 1}], "deliveryInfo": DELIVERY}
    return client.post("/api/orders/bulk", json=body, headers=headers).json()["order_id"]


def test_average():
    assert average([]) == 0
    assert average([4, 5]) == 4.5
    assert average([5, 4, 4]) == 4.3


@pytest.mark.parametrize("ratings, expected", [
    ([2, 2, 2, 3], 2.3),
    ([1, 1, 1, 2], 1.3),
    ([4, 4, 4, 5], 4.3),
])
def test_average_rounds_halves_up(ratings, expected):
    assert average(ratings) == expected


def test_can_review_product_after_ordering(client, customer, product):
    _, headers = customer
    r = client.get(f"/api/product-reviews/can-review/{product.product_id}", headers=headers)
    assert r.json()["canReview"] is False
    assert r.json()["reason"] == "Must order product first"

    order_id = _buy(client, headers, product.product_id)
    r = client.get(f"/api/product-reviews/can-review/{product.product_id}", headers=headers)
    assert r.json()["canReview"] is True
    assert r.json()["order_id"] == order_id


def test_product_rating_follows_reviews(client, customer, other_customer, product, db):
    _, first = customer
    _, second = other_customer
    order_id = _buy(client, first, product.product_id)

    body = {"product_id": product.product_id, "order_id": order_id, "rating": 4, "comment": "Juicy"}
    r = client.post("/api/product-reviews/", json=body, headers=first)
    assert r.status_code == 201
    first_review = r.json()["review_id"]

    body = {"product_id": product.product_id, "rating": 5}
    assert client.post("/api/product-reviews/", json=body, headers=second).status_code == 201

    db.refresh(product)
    assert product.rating == 4.5
    assert product.reviews_count == 2

    listing = client.get(f"/api/product-reviews/{product.product_id}").json()
    assert listing["averageRating"] == 4.5
    assert listing["totalReviews"] == 2
    verified = {r["review_id"]: r["verified_purchase"] for r in listing["reviews"]}
    assert verified[first_review] is True

    assert client.delete(f"/api/product-reviews/{first_review}", headers=first).status_code == 200
    db.refresh(product)
    assert product.rating == 5
    assert product.reviews_count == 1


def test_duplicate_product_review(client, customer, product):
    _, headers = customer
    order_id = _buy(client, headers, product.product_id)
    body = {"product_id": product.product_id, "order_id": order_id, "rating": 3}

    assert client.post("/api/product-reviews/", json=body, headers=headers).status_code == 201
    r = client.post("/api/product-reviews/", json=body, headers=headers)
    assert r.status_code == 400
    assert r.json()["error"] == "You have already reviewed this product for this order"

    r = client.get(f"/api/product-reviews/can-review/{product.product_id}", headers=headers)
    assert r.json() == {"canReview": False, "reason": "Already reviewed"}


def test_rating_out_of_range(client, customer, product):
    _, headers = customer
    r = client.post("/api/product-reviews/", json={"product_id": product.product_id, "rating": 6}, headers=headers)
    assert r.status_code == 400


def test_cannot_delete_someone_elses_review(client, customer, other_customer, product):
    _, headers = customer
    _, other_headers = other_customer
    review_id = client.post(
        "/api/product-reviews/", json={"product_id": product.product_id, "rating": 2}, headers=headers
    ).json()["review_id"]

    r = client.delete(f"/api/product-reviews/{review_id}", headers=other_headers)
    assert r.status_code == 404
    assert r.json()["error"] == "Review not found or unauthorized"


def test_event_review_requires_attendance(client, customer, event, db):
    user, headers = customer
    r = client.get(f"/api/event-reviews/can-review/{event.event_id}", headers=headers)
    assert r.json()["canReview"] is False
    assert r.json()["reason"] == "Must attend event first"

    booking = models.BookingModel(
        user_id=user.user_id, event_id=event.event_id, booking_type="event", status="attended"
    )
    db.add(booking)
    db.commit()

    r = client.get(f"/api/event-reviews/can-review/{event.event_id}", headers=headers)
    assert r.json()["canReview"] is True
    assert r.json()["booking_id"] == booking.booking_id

    body = {"event_id": event.event_id, "booking_id": booking.booking_id, "rating": 5}
    assert client.post("/api/event-reviews/", json=body, headers=headers).status_code == 201

    listing = client.get(f"/api/event-reviews/{event.event_id}").json()
    assert listing["totalReviews"] == 1
    assert listing["reviews"][0]["verified_attendance"] is True

    db.refresh(event)
    assert event.rating == 5

    r = client.post("/api/event-reviews/", json=body, headers=headers)
    assert r.status_code == 400
    assert r.json()["error"] == "You have already reviewed this event"


def test_workshop_review_for_missing_workshop(client, customer):
    _, headers = customer
    r = client.post("/api/workshop-reviews/", json={"workshop_id": 404, "rating": 4}, headers=headers)
    assert r.status_code == 404
    assert r.json()["error"] == "Workshop not found"


def test_admin_cannot_review(client, admin, product):
    _, headers = admin
    r = client.post("/api/product-reviews/", json={"product_id": product.product_id, "rating": 5}, headers=headers)
    assert r.status_code == 403


def test_round_rating():
    assert round_rating(2.25) == 2.3
    assert round_rating(4.0) == 4.0


def test_event_listing_rounds_average_half_up(client, customer, event, db):
    user, _ = customer
    db.add_all([
        models.EventReviewModel(user_id=user.user_id, event_id=event.event_id, rating=r)
        for r in (4, 4, 4, 5)
    ])
    db.commit()

    events = client.get("/api/events/").json()["events"]
    assert events[0]["average_rating"] == 4.3
    assert events[0]["total_reviews"] == 4


@pytest.mark.parametrize("kind", ["event", "workshop"])
def test_attendance_review_delete_recomputes_rating(request, client, customer, other_customer, db, kind):
    entity = request.getfixturevalue(kind)
    key = f"{kind}_id"
    target_id = getattr(entity, key)
    _, first = customer
    _, second = other_customer

    high = client.post(f"/api/{kind}-reviews/", json={key: target_id, "rating": 5}, headers=first)
    assert high.status_code == 201
    low = client.post(f"/api/{kind}-reviews/", json={key: target_id, "rating": 2}, headers=second)
    assert low.status_code == 201

    db.refresh(entity)
    assert entity.rating == 3.5

    review_id = high.json()["review_id"]
    r = client.delete(f"/api/{kind}-reviews/{review_id}", headers=second)
    assert r.status_code == 404
    assert r.json()["error"] == "Review not found or unauthorized"

    assert client.delete(f"/api/{kind}-reviews/{review_id}", headers=first).status_code == 200
    db.refresh(entity)
    assert entity.rating == 2

    listing = client.get(f"/api/{kind}-reviews/{target_id}").json()
    assert listing["totalReviews"] == 1
    assert listing["averageRating"] == 2
