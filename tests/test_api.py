"""End-to-end checks through the HTTP surface"""

import pytest


def headers(user):
    return {"X-User-Id": str(user.id)}


def book(client, user, court, booking_date="2024-01-10", start_time=18, **extra):
    payload = {"courtId": court.id, "bookingDate": booking_date, "startTime": start_time, **extra}
    return client.post("/bookings", json=payload, headers=headers(user))


def test_health(client):
    assert client.get("/health").json() == {"status": "healthy"}


def test_missing_or_unknown_user_is_rejected(client, court):
    payload = {"courtId": court.id, "bookingDate": "2024-01-10", "startTime": 18}

    assert client.post("/bookings", json=payload).status_code == 401
    assert client.post("/bookings", json=payload, headers={"X-User-Id": "999"}).status_code == 401
    assert client.post("/bookings", json=payload, headers={"X-User-Id": "abc"}).status_code == 401


def test_book_then_conflict(client, user, other_user, court):
    response = book(client, user, court, duration=120, purpose="match")
    assert response.status_code == 201
    body = response.json()
    assert body["status"] == "confirmed"
    assert body["courtName"] == "Court 1"
    assert body["endTime"] == 20
    assert body["price"] == 1000

    conflict = book(client, other_user, court)
    assert conflict.status_code == 409
    assert conflict.json()["detail"]["code"] == "SLOT_CONFLICT"
    assert conflict.json()["detail"]["message"] == "This time slot is already booked."


def test_unknown_court_and_bad_hour(client, user, court):
    missing = client.post(
        "/bookings",
        json={"courtId": 999, "bookingDate": "2024-01-10", "startTime": 18},
        headers=headers(user),
    )
    assert missing.status_code == 404
    assert missing.json()["detail"]["code"] == "NOT_FOUND"

    bad_hour = book(client, user, court, start_time=25)
    assert bad_hour.status_code == 400
    assert bad_hour.json()["detail"]["details"] == {"field": "startTime"}


def test_malformed_date_is_a_request_error(client, user, court):
    assert book(client, user, court, booking_date="10-01-2024").status_code == 422


def test_admin_can_book_for_another_user(client, user, admin, court):
    ignored = book(client, user, court, userId=admin.id)
    assert ignored.json()["userId"] == user.id

    on_behalf = book(client, admin, court, start_time=19, userId=user.id)
    assert on_behalf.status_code == 201
    assert on_behalf.json()["userId"] == user.id


def test_cancel_promotes_waitlist_head(client, user, other_user, make_user, court):
    booking_id = book(client, user, court).json()["id"]
    waiting = client.post(
        "/waitlist",
        json={"courtId": court.id, "requestedDate": "2024-01-10", "requestedTime": 18},
        headers=headers(other_user),
    )
    assert waiting.status_code == 201
    assert waiting.json()["status"] == "waiting"

    stranger = make_user("Stranger")
    assert (
        client.post(f"/bookings/{booking_id}/cancel", headers=headers(stranger)).status_code == 403
    )

    cancelled = client.post(f"/bookings/{booking_id}/cancel", headers=headers(user))
    assert cancelled.status_code == 200
    body = cancelled.json()
    assert body["booking"]["status"] == "cancelled"
    assert body["alreadyCancelled"] is False
    assert body["notifiedWaitlistEntryId"] == waiting.json()["id"]

    again = client.post(f"/bookings/{booking_id}/cancel", headers=headers(user)).json()
    assert again["alreadyCancelled"] is True
    assert again["notifiedWaitlistEntryId"] is None

    mine = client.get("/waitlist", headers=headers(other_user)).json()
    assert [e["status"] for e in mine] == ["notified"]

    assert book(client, other_user, court).status_code == 201


def test_recurring_series_reports_partial_result(client, user, other_user, court):
    assert book(client, other_user, court, booking_date="2024-01-15").status_code == 201

    response = client.post(
        "/bookings/recurring",
        json={
            "courtId": court.id,
            "bookingDate": "2024-01-01",
            "startTime": 18,
            "recurringPattern": "weekly",
            "recurringEndDate": "2024-01-22",
        },
        headers=headers(user),
    )

    assert response.status_code == 201
    body = response.json()
    assert body["createdCount"] == 3
    assert body["attemptedCount"] == 4
    assert body["partial"] is True
    assert body["skippedDates"] == ["2024-01-15"]

    series = client.get(f"/bookings/series/{body['seriesId']}", headers=headers(user))
    assert [b["bookingDate"] for b in series.json()] == ["2024-01-01", "2024-01-08", "2024-01-22"]
    assert (
        client.get(f"/bookings/series/{body['seriesId']}", headers=headers(other_user)).status_code
        == 403
    )


def test_recurring_pattern_must_be_known(client, user, court):
    response = client.post(
        "/bookings/recurring",
        json={
            "courtId": court.id,
            "bookingDate": "2024-01-01",
            "startTime": 18,
            "recurringPattern": "daily",
            "recurringEndDate": "2024-01-22",
        },
        headers=headers(user),
    )
    assert response.status_code == 422


def test_booking_listings(client, user, other_user, admin, court):
    book(client, user, court, start_time=9)
    book(client, other_user, court, start_time=10)
    book(client, user, court, booking_date="2024-01-11", start_time=9)

    day = client.get("/bookings/date/2024-01-10", headers=headers(user)).json()
    assert [b["startTime"] for b in day] == [9, 10]

    mine = client.get("/bookings/mine", headers=headers(user)).json()
    assert len(mine) == 2
    assert all(b["userId"] == user.id for b in mine)

    assert client.get("/bookings", headers=headers(user)).status_code == 403
    assert len(client.get("/bookings", headers=headers(admin)).json()) == 3

    bad_date = client.get("/bookings/date/2024-13-01", headers=headers(user))
    assert bad_date.status_code == 400


def test_court_admin_flow(client, user, admin):
    payload = {"name": "Court 7", "openHours": {"start": 6, "end": 23}}
    assert client.post("/courts", json=payload, headers=headers(user)).status_code == 403

    created = client.post("/courts", json=payload, headers=headers(admin))
    assert created.status_code == 201
    court_id = created.json()["id"]

    status = client.patch(
        f"/courts/{court_id}/status", json={"status": "maintenance"}, headers=headers(admin)
    )
    assert status.json()["status"] == "maintenance"

    assert client.delete(f"/courts/{court_id}", headers=headers(admin)).status_code == 200
    assert client.get(f"/courts/{court_id}", headers=headers(user)).status_code == 404
    assert all(c["id"] != court_id for c in client.get("/courts").json())


def test_court_with_future_booking_cannot_be_deleted(client, user, admin, court):
    book(client, user, court)

    response = client.delete(f"/courts/{court.id}", headers=headers(admin))

    assert response.status_code == 409
    assert response.json()["detail"]["code"] == "COURT_HAS_FUTURE_BOOKINGS"


def test_pricing_rules_and_quote(client, user, admin, court):
    rule = {
        "name": "Monday peak",
        "startTime": "08:00",
        "endTime": "12:00",
        "daysOfWeek": [1],
        "pricePerHour": 450,
        "priority": 5,
    }
    assert client.post("/pricing/rules", json=rule, headers=headers(user)).status_code == 403
    created = client.post("/pricing/rules", json=rule, headers=headers(admin))
    assert created.status_code == 201

    quote = client.get(
        "/pricing/quote",
        params={"courtId": court.id, "date": "2024-01-01", "startTime": 9, "duration": 90},
    ).json()
    assert quote["pricePerHour"] == 450
    assert quote["totalPrice"] == 675
    assert quote["appliedRuleId"] == created.json()["id"]

    booked = book(client, user, court, booking_date="2024-01-01", start_time=9)
    assert booked.json()["price"] == 450


@pytest.mark.parametrize("window", [("10:00", "08:00"), ("09:00", "09:30")])
def test_pricing_rule_window_must_be_ordered(client, admin, window):
    rule = {
        "name": "Backwards",
        "startTime": window[0],
        "endTime": window[1],
        "daysOfWeek": [1],
        "pricePerHour": 100,
    }
    assert client.post("/pricing/rules", json=rule, headers=headers(admin)).status_code == 422


def test_pricing_rule_end_time_cannot_pass_midnight(client, admin):
    rule = {
        "name": "Late night",
        "startTime": "22:00",
        "endTime": "24:59",
        "daysOfWeek": [1],
        "pricePerHour": 100,
    }
    assert client.post("/pricing/rules", json=rule, headers=headers(admin)).status_code == 422


def test_pricing_rule_update_rejects_negative_price(client, user, admin, court):
    rule = {
        "name": "Monday morning",
        "startTime": "08:00",
        "endTime": "12:00",
        "daysOfWeek": [1],
        "pricePerHour": 400,
    }
    created = client.post("/pricing/rules", json=rule, headers=headers(admin)).json()

    updated = client.patch(
        f"/pricing/rules/{created['id']}", json={"pricePerHour": -250}, headers=headers(admin)
    )
    assert updated.status_code == 422

    booked = book(client, user, court, booking_date="2024-01-01", start_time=9)
    assert booked.json()["price"] == 400


def test_waitlist_admin_notify_and_leave(client, user, other_user, admin, court):
    entry = client.post(
        "/waitlist",
        json={"courtId": court.id, "requestedDate": "2024-01-10", "requestedTime": 18},
        headers=headers(user),
    ).json()

    duplicate = client.post(
        "/waitlist",
        json={"courtId": court.id, "requestedDate": "2024-01-10", "requestedTime": 18},
        headers=headers(user),
    )
    assert duplicate.status_code == 409

    slot = {"courtId": court.id, "requestedDate": "2024-01-10", "requestedTime": 18}
    assert client.post("/waitlist/notify-next", json=slot, headers=headers(user)).status_code == 403
    notified = client.post("/waitlist/notify-next", json=slot, headers=headers(admin))
    assert notified.json()["id"] == entry["id"]
    assert client.post("/waitlist/notify-next", json=slot, headers=headers(admin)).json() is None

    assert client.delete(f"/waitlist/{entry['id']}", headers=headers(other_user)).status_code == 403
    assert client.delete(f"/waitlist/{entry['id']}", headers=headers(user)).status_code == 200
    assert client.get("/waitlist", headers=headers(admin)).json() == []


@pytest.mark.parametrize(
    "slot",
    [
        {"requestedDate": "2024-13-45", "requestedTime": 18},
        {"requestedDate": "2024-01-10", "requestedTime": 24},
    ],
)
def test_waitlist_notify_next_rejects_malformed_slot(client, admin, court, slot):
    slot = {"courtId": court.id, **slot}
    assert client.post("/waitlist/notify-next", json=slot, headers=headers(admin)).status_code == 422
