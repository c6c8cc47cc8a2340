"""HTTP surface: status codes, {error} bodies and the end-to-end booking/cancel flow."""
import jwt

from booking.config import settings
from booking.core.constants import CANCELLATION_MAIL_JOB
from booking.models.notification import Notification
from booking.services import job_queue


def test_health(api):
    assert api.get("/health").json() == {"status": "ok"}


def test_missing_token_is_401(api):
    res = api.get("/appointments")
    assert res.status_code == 401
    assert res.json() == {"error": "Token not provided"}


def test_bad_token_is_401(api):
    res = api.get("/appointments", headers={"Authorization": "Bearer not-a-jwt"})
    assert res.status_code == 401
    assert res.json() == {"error": "Token invalid"}


def test_book_notifies_provider(api, auth, db, provider, client_user):
    res = api.post(
        "/appointments",
        json={"provider_id": provider.id, "date": "2026-10-19T15:30:00Z"},
        headers=auth(client_user.id),
    )
    assert res.status_code == 200
    body = res.json()
    assert body["date"] == "2026-10-19T15:00:00+00:00"
    assert body["provider_id"] == provider.id
    assert body["client_id"] == client_user.id
    assert body["canceled_at"] is None

    # Background task has run by the time TestClient returns
    rows = db.query(Notification).filter(Notification.recipient_id == provider.id).all()
    assert len(rows) == 1
    assert "Carla Cliente" in rows[0].content
    assert "dia 19 de outubro, às 12:00h" in rows[0].content


def test_book_validation_failure_is_400(api, auth, client_user):
    res = api.post("/appointments", json={"date": "2026-10-19T15:00:00Z"}, headers=auth(client_user.id))
    assert res.status_code == 400
    assert res.json() == {"error": "Validation fails"}


def test_book_past_date_is_400(api, auth, provider, client_user):
    res = api.post(
        "/appointments",
        json={"provider_id": provider.id, "date": "2026-10-19T08:00:00Z"},
        headers=auth(client_user.id),
    )
    assert res.status_code == 400
    assert res.json() == {"error": "Past dates are not permitted"}


def test_book_taken_slot_is_400(api, auth, provider, client_user, other_client):
    payload = {"provider_id": provider.id, "date": "2026-10-19T15:00:00Z"}
    assert api.post("/appointments", json=payload, headers=auth(client_user.id)).status_code == 200
    res = api.post("/appointments", json=payload, headers=auth(other_client.id))
    assert res.status_code == 400
    assert res.json() == {"error": "Appointment date is not available"}


def test_book_non_provider_is_400(api, auth, client_user, other_client):
    res = api.post(
        "/appointments",
        json={"provider_id": other_client.id, "date": "2026-10-19T15:00:00Z"},
        headers=auth(client_user.id),
    )
    assert res.status_code == 400
    assert res.json() == {"error": "You can only create appointments with providers"}


def test_list_appointments_pages(api, auth, provider, client_user):
    for hour in range(13, 16):
        api.post(
            "/appointments",
            json={"provider_id": provider.id, "date": f"2026-10-20T{hour}:00:00Z"},
            headers=auth(client_user.id),
        )
    res = api.get("/appointments", headers=auth(client_user.id))
    assert res.status_code == 200
    body = res.json()
    assert [a["date"] for a in body] == [
        "2026-10-20T13:00:00+00:00",
        "2026-10-20T14:00:00+00:00",
        "2026-10-20T15:00:00+00:00",
    ]
    assert body[0]["provider"]["name"] == "Paulo Barbeiro"
    assert api.get("/appointments?page=2", headers=auth(client_user.id)).json() == []
    assert api.get("/appointments?page=0", headers=auth(client_user.id)).status_code == 400


def test_cancel_flow(api, auth, db, provider, client_user, other_client, clock):
    created = api.post(
        "/appointments",
        json={"provider_id": provider.id, "date": "2026-10-19T18:00:00Z"},
        headers=auth(client_user.id),
    ).json()

    res = api.delete(f"/appointments/{created['id']}", headers=auth(other_client.id))
    assert res.status_code == 401
    assert res.json() == {"error": "You don't have permission to cancel this appointment"}

    res = api.delete(f"/appointments/{created['id']}", headers=auth(client_user.id))
    assert res.status_code == 200
    assert res.json()["canceled_at"] is not None
    assert len(job_queue.list_jobs(db, kind=CANCELLATION_MAIL_JOB)) == 1

    res = api.delete(f"/appointments/{created['id']}", headers=auth(client_user.id))
    assert res.status_code == 400
    assert res.json() == {"error": "Appointment is already canceled"}


def test_cancel_inside_window_is_400(api, auth, provider, client_user, clock):
    created = api.post(
        "/appointments",
        json={"provider_id": provider.id, "date": "2026-10-19T13:00:00Z"},
        headers=auth(client_user.id),
    ).json()
    res = api.delete(f"/appointments/{created['id']}", headers=auth(client_user.id))
    assert res.status_code == 400
    assert res.json() == {"error": "You can only cancel appointments 2 hours in advance"}


def test_cancel_unknown_is_404(api, auth, client_user):
    res = api.delete("/appointments/999", headers=auth(client_user.id))
    assert res.status_code == 404
    assert res.json() == {"error": "Appointment not found"}


def test_schedule_endpoint(api, auth, provider, client_user):
    api.post(
        "/appointments",
        json={"provider_id": provider.id, "date": "2026-10-20T15:00:00Z"},
        headers=auth(client_user.id),
    )
    res = api.get("/schedule", params={"date": "2026-10-20"}, headers=auth(provider.id))
    assert res.status_code == 200
    entries = res.json()["appointments"]
    assert len(entries) == 1
    assert entries[0]["client"]["name"] == "Carla Cliente"

    res = api.get("/schedule", headers=auth(client_user.id))
    assert res.status_code == 401
    assert res.json() == {"error": "User is not a provider"}


def test_notifications_endpoints(api, auth, provider, other_provider, client_user):
    api.post(
        "/appointments",
        json={"provider_id": provider.id, "date": "2026-10-20T15:00:00Z"},
        headers=auth(client_user.id),
    )
    res = api.get("/notifications", headers=auth(provider.id))
    assert res.status_code == 200
    items = res.json()
    assert len(items) == 1
    assert items[0]["read"] is False

    res = api.put(f"/notifications/{items[0]['id']}", headers=auth(other_provider.id))
    assert res.status_code == 401

    res = api.put(f"/notifications/{items[0]['id']}", headers=auth(provider.id))
    assert res.status_code == 200
    assert res.json()["read"] is True

    res = api.get("/notifications", headers=auth(client_user.id))
    assert res.status_code == 401
    assert res.json() == {"error": "Only providers can load notifications"}


def test_providers_endpoint(api, auth, provider, client_user):
    res = api.get("/providers", headers=auth(client_user.id))
    assert res.status_code == 200
    assert [p["id"] for p in res.json()] == [provider.id]


def test_token_id_must_be_an_integer(api, provider):
    for claim in (float(provider.id) + 0.7, True, str(provider.id), 10**20):
        token = jwt.encode({"id": claim}, settings.jwt_secret, algorithm=settings.jwt_algorithm)
        res = api.get("/notifications", headers={"Authorization": f"Bearer {token}"})
        assert res.status_code == 401
        assert res.json() == {"error": "Token invalid"}


def test_ids_too_large_for_the_database_are_400(api, auth, provider, client_user):
    huge = 10**20
    responses = [
        api.post("/appointments", json={"provider_id": huge, "date": "2026-10-19T15:00:00Z"}, headers=auth(client_user.id)),
        api.get("/appointments", params={"page": 10**19}, headers=auth(client_user.id)),
        api.delete(f"/appointments/{huge}", headers=auth(client_user.id)),
        api.put(f"/notifications/{huge}", headers=auth(provider.id)),
    ]
    for res in responses:
        assert res.status_code == 400
        assert res.json() == {"error": "Validation fails"}


def test_unread_count_endpoint(api, auth, provider, client_user):
    api.post(
        "/appointments",
        json={"provider_id": provider.id, "date": "2026-10-20T15:00:00Z"},
        headers=auth(client_user.id),
    )
    res = api.get("/notifications/unread-count", headers=auth(provider.id))
    assert res.status_code == 200
    assert res.json() == {"unread_count": 1}

    item = api.get("/notifications", headers=auth(provider.id)).json()[0]
    api.put(f"/notifications/{item['id']}", headers=auth(provider.id))
    assert api.get("/notifications/unread-count", headers=auth(provider.id)).json() == {"unread_count": 0}

    res = api.get("/notifications/unread-count", headers=auth(client_user.id))
    assert res.status_code == 401
