def _booking(event_id=None, workshop_id=None, quantity=1, booking_type="event"):
    return {
        "booking_type": booking_type,
        "event_id": event_id,
        "workshop_id": workshop_id,
        "quantity": quantity,
        "total_amount": 500 * quantity,
        "customer_name": "Nimal",
        "customer_email": "nimal@example.com",
    }


def test_booking_takes_spots(client, customer, event, db):
    _, headers = customer
    r = client.post("/api/bookings/", json=_booking(event.event_id, quantity=3), headers=headers)
    assert r.status_code == 201
    assert r.json()["message"] == "Booking created successfully"

    db.refresh(event)
    assert event.spots_left == 7

    bookings = client.get("/api/bookings/", headers=headers).json()["bookings"]
    assert len(bookings) == 1
    assert bookings[0]["quantity"] == 3
    assert bookings[0]["has_reviewed"] is False


def test_booking_more_than_available(client, customer, event, db):
    _, headers = customer
    r = client.post("/api/bookings/", json=_booking(event.event_id, quantity=11), headers=headers)
    assert r.status_code == 400
    assert r.json()["error"] == "Not enough spots available"

    db.refresh(event)
    assert event.spots_left == 10
    assert client.get("/api/bookings/", headers=headers).json()["bookings"] == []


def test_last_spots_go_once(client, customer, other_customer, workshop, db):
    _, first = customer
    _, second = other_customer
    body = _booking(workshop_id=workshop.workshop_id, quantity=3, booking_type="workshop")

    assert client.post("/api/bookings/", json=body, headers=first).status_code == 201
    assert client.post("/api/bookings/", json=body, headers=second).status_code == 400

    db.refresh(workshop)
    assert workshop.spots_left == 1


def test_booking_needs_exactly_one_target(client, customer, event, workshop):
    _, headers = customer
    body = _booking(event.event_id, workshop.workshop_id)
    r = client.post("/api/bookings/", json=body, headers=headers)
    assert r.status_code == 400
    assert r.json()["error"] == "Provide either event_id or workshop_id, not both"

    r = client.post("/api/bookings/", json=_booking(event.event_id, booking_type="concert"), headers=headers)
    assert r.status_code == 400
    assert r.json()["error"] == "Invalid booking type"


def test_admin_cannot_book(client, admin, event):
    _, headers = admin
    r = client.post("/api/bookings/", json=_booking(event.event_id), headers=headers)
    assert r.status_code == 403
    assert r.json()["error"] == "Administrators cannot create bookings"


def test_event_bookings_for_admin(client, admin, customer, event):
    _, admin_headers = admin
    _, headers = customer
    client.post("/api/bookings/", json=_booking(event.event_id, quantity=2), headers=headers)

    r = client.get(f"/api/events/{event.event_id}/bookings", headers=admin_headers)
    assert r.status_code == 200
    assert r.json()["total_bookings"] == 1
    assert r.json()["total_attendees"] == 2
