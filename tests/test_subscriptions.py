from datetime import date, timedelta

import pytest

from urban_harvest.data import models
from urban_harvest.services.subscription_service import SubscriptionService, next_delivery_date
from urban_harvest.tasks.deliveries import roll_deliveries_task


@pytest.mark.parametrize("frequency, start, expected", [
    ("weekly", date(2024, 3, 1), date(2024, 3, 8)),
    ("biweekly", date(2024, 3, 1), date(2024, 3, 15)),
    ("monthly", date(2024, 3, 15), date(2024, 4, 15)),
    ("monthly", date(2024, 1, 31), date(2024, 2, 29)),
    ("monthly", date(2023, 1, 31), date(2023, 2, 28)),
    ("monthly", date(2024, 12, 20), date(2025, 1, 20)),
])
def test_next_delivery_date(frequency, start, expected):
    assert next_delivery_date(frequency, start) == expected


def test_next_delivery_date_unknown_frequency():
    with pytest.raises(ValueError):
        next_delivery_date("daily", date(2024, 1, 1))


def _subscribe(client, headers, box_id, frequency=None):
    r = client.post("/api/subscriptions/", json={"box_id": box_id, "frequency": frequency}, headers=headers)
    assert r.status_code == 201
    return r.json()["subscription_id"]


def test_subscription_lifecycle(client, customer, box):
    _, headers = customer
    sub_id = _subscribe(client, headers, box.box_id)

    def put(action):
        return client.put(f"/api/subscriptions/{sub_id}/{action}", headers=headers)

    assert put("pause").status_code == 200
    r = put("pause")
    assert r.status_code == 400
    assert r.json()["error"] == "Subscription already paused"

    assert put("resume").status_code == 200
    assert put("resume").status_code == 400

    assert put("cancel").status_code == 200
    assert client.get("/api/subscriptions/my", headers=headers).json()["subscriptions"] == []
    history = client.get("/api/subscriptions/history", headers=headers).json()["history"]
    assert [h["subscription_id"] for h in history] == [sub_id]
    assert history[0]["review_id"] is None

    r = put("pause")
    assert r.status_code == 400
    assert r.json()["error"] == "Cannot pause a cancelled subscription"

    assert put("reactivate").status_code == 200
    subs = client.get("/api/subscriptions/my", headers=headers).json()["subscriptions"]
    assert subs[0]["status"] == "active"
    assert subs[0]["cancelled_at"] is None


def test_weekly_subscription_first_delivery(client, customer, box, db):
    _, headers = customer
    sub_id = _subscribe(client, headers, box.box_id, "weekly")
    sub = db.get(models.SubscriptionModel, sub_id)
    assert sub.next_delivery_date == date.today() + timedelta(days=7)


def test_subscription_of_other_user(client, customer, other_customer, box):
    _, headers = customer
    _, other_headers = other_customer
    sub_id = _subscribe(client, headers, box.box_id)

    r = client.put(f"/api/subscriptions/{sub_id}/cancel", headers=other_headers)
    assert r.status_code == 404


def test_subscription_review_updates_box(client, customer, box, db):
    _, headers = customer
    sub_id = _subscribe(client, headers, box.box_id)

    r = client.post("/api/subscription-reviews/", json={"subscription_id": sub_id, "rating": 4}, headers=headers)
    assert r.status_code == 201
    assert r.json()["message"] == "Review submitted successfully"
    review_id = r.json()["review_id"]

    r = client.post(f"/api/subscriptions/{sub_id}/review", json={"rating": 5}, headers=headers)
    assert r.status_code == 400
    assert r.json()["error"] == "You have already reviewed this subscription"

    db.refresh(box)
    assert box.rating == 4
    assert box.reviews_count == 1

    assert client.put(
        f"/api/subscription-reviews/{review_id}", json={"rating": 2, "comment": "Late"}, headers=headers
    ).status_code == 200
    db.refresh(box)
    assert box.rating == 2

    review = client.get(f"/api/subscriptions/{sub_id}/review", headers=headers).json()["review"]
    assert review["comment"] == "Late"

    assert client.delete(f"/api/subscription-reviews/{review_id}", headers=headers).status_code == 200
    db.refresh(box)
    assert box.rating == 0
    assert box.reviews_count == 0


def test_review_someone_elses_subscription(client, customer, other_customer, box):
    _, headers = customer
    _, other_headers = other_customer
    sub_id = _subscribe(client, headers, box.box_id)

    r = client.post("/api/subscription-reviews/", json={"subscription_id": sub_id, "rating": 4}, headers=other_headers)
    assert r.status_code == 404
    assert r.json()["error"] == "Subscription not found or does not belong to you"


def test_box_crud(client, admin):
    _, headers = admin
    body = {
        "name": "Fruit Box",
        "description": "Tropical fruit",
        "price": 3000,
        "frequency": "biweekly",
        "items": [{"item_name": "Mango", "quantity": "4"}, {"item_name": "Papaya", "quantity": "1"}],
    }
    r = client.post("/api/subscription-boxes/", json=body, headers=headers)
    assert r.status_code == 201
    box_id = r.json()["box_id"]

    box = client.get(f"/api/subscription-boxes/{box_id}").json()["box"]
    assert [i["item_name"] for i in box["items"]] == ["Mango", "Papaya"]

    body.pop("items")
    body["price"] = 3200
    assert client.put(f"/api/subscription-boxes/{box_id}", json=body, headers=headers).status_code == 200
    box = client.get(f"/api/subscription-boxes/{box_id}").json()["box"]
    assert len(box["items"]) == 2
    assert box["price"] == 3200

    assert client.delete(f"/api/subscription-boxes/{box_id}", headers=headers).status_code == 200


def test_box_with_active_subscribers_cannot_be_deleted(client, admin, customer, box):
    _, admin_headers = admin
    _, headers = customer
    _subscribe(client, headers, box.box_id)

    r = client.delete(f"/api/subscription-boxes/{box.box_id}", headers=admin_headers)
    assert r.status_code == 400
    assert r.json()["error"] == "Cannot delete box with active subscriptions. Please deactivate instead."

    subscribers = client.get(f"/api/subscription-boxes/{box.box_id}").json()["box"]["subscribers"]
    assert subscribers[0]["user_email"] == "nimal@example.com"


def test_inactive_boxes_are_hidden(client, box, db):
    box.is_active = False
    db.commit()
    assert client.get("/api/subscription-boxes/").json()["boxes"] == []


def test_roll_deliveries(customer, box, db):
    user, _ = customer
    today = date(2024, 5, 10)
    sub = models.SubscriptionModel(
        user_id=user.user_id,
        box_id=box.box_id,
        status="active",
        start_date=date(2024, 3, 1),
        next_delivery_date=date(2024, 4, 1),
    )
    paused = models.SubscriptionModel(
        user_id=user.user_id,
        box_id=box.box_id,
        status="paused",
        start_date=date(2024, 3, 1),
        next_delivery_date=date(2024, 4, 1),
    )
    db.add_all([sub, paused])
    db.commit()

    rolled = SubscriptionService(db).roll_deliveries(today)
    assert [s.subscription_id for s, _ in rolled] == [sub.subscription_id]

    db.refresh(sub)
    db.refresh(paused)
    assert sub.next_delivery_date == date(2024, 6, 1)
    assert paused.next_delivery_date == date(2024, 4, 1)


def test_roll_deliveries_task(customer, box, db):
    user, _ = customer
    db.add(models.SubscriptionModel(
        user_id=user.user_id,
        box_id=box.box_id,
        status="active",
        start_date=date.today() - timedelta(days=40),
        next_delivery_date=date.today() - timedelta(days=3),
    ))
    db.commit()

    assert roll_deliveries_task() == 1
