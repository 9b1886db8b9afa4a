"""
Tests de los endpoints HTTP con TestClient
"""
import pytest
from fastapi.testclient import TestClient

from conftest import at
from cocheras.database import get_db
from cocheras.main import app
from cocheras.services.auth import create_access_token
from cocheras.utils.clock import get_clock


@pytest.fixture
def client(override_get_db, clock):
    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_clock] = lambda: clock
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def auth_headers(user):
    token = create_access_token(data={"sub": user.email})
    return {"Authorization": f"Bearer {token}"}


def test_read_root(client):
    response = client.get("/")

    assert response.status_code == 200


def test_register_and_login(client):
    response = client.post(
        "/auth/register",
        json={
            "name": "Ana",
            "last_name": "García",
            "email": "ana@example.com",
            "password": "secreta123",
        },
    )
    assert response.status_code == 201
    assert response.json()["status"] == "activo"

    duplicate = client.post(
        "/auth/register",
        json={
            "name": "Ana",
            "last_name": "García",
            "email": "ana@example.com",
            "password": "secreta123",
        },
    )
    assert duplicate.status_code == 400

    login = client.post(
        "/auth/login", json={"email": "ana@example.com", "password": "secreta123"}
    )
    assert login.status_code == 200
    body = login.json()
    assert body["email"] == "ana@example.com"

    me = client.get(
        "/auth/me", headers={"Authorization": f"Bearer {body['access_token']}"}
    )
    assert me.status_code == 200
    assert me.json()["last_login"] is not None

    wrong = client.post(
        "/auth/login", json={"email": "ana@example.com", "password": "incorrecta"}
    )
    assert wrong.status_code == 401


def test_protected_endpoint_requires_token(client):
    response = client.get("/reservations/")

    assert response.status_code == 401


def test_reservation_flow_over_http(client, space, renter, other_user):
    created = client.post(
        "/reservations/",
        json={
            "space_id": space.id,
            "start_at": "2030-01-01T10:00:00",
            "end_at": "2030-01-01T12:00:00",
        },
        headers=auth_headers(renter),
    )
    assert created.status_code == 201
    reservation = created.json()
    assert reservation["status"] == "pendiente"

    conflict = client.post(
        "/reservations/",
        json={
            "space_id": space.id,
            "start_at": "2030-01-01T12:00:00",
            "end_at": "2030-01-01T14:00:00",
        },
        headers=auth_headers(other_user),
    )
    assert conflict.status_code == 409
    assert "detail" in conflict.json()

    forbidden = client.get(
        f"/reservations/{reservation['id']}", headers=auth_headers(other_user)
    )
    assert forbidden.status_code == 403

    cancelled = client.delete(
        f"/reservations/{reservation['id']}", headers=auth_headers(renter)
    )
    assert cancelled.status_code == 200
    assert cancelled.json()["status"] == "cancelada"


def test_reservation_errors_map_to_status_codes(client, space, renter):
    missing = client.post(
        "/reservations/",
        json={
            "space_id": 999,
            "start_at": "2030-01-01T10:00:00",
            "end_at": "2030-01-01T12:00:00",
        },
        headers=auth_headers(renter),
    )
    assert missing.status_code == 404

    inverted = client.post(
        "/reservations/",
        json={
            "space_id": space.id,
            "start_at": "2030-01-01T12:00:00",
            "end_at": "2030-01-01T10:00:00",
        },
        headers=auth_headers(renter),
    )
    assert inverted.status_code == 400

    bad_status = client.post(
        "/reservations/",
        json={
            "space_id": space.id,
            "start_at": "2030-01-01T10:00:00",
            "end_at": "2030-01-01T12:00:00",
        },
        headers=auth_headers(renter),
    )
    patched = client.patch(
        f"/reservations/{bad_status.json()['id']}",
        json={"status": "aprobada"},
        headers=auth_headers(renter),
    )
    assert patched.status_code == 400


def test_reservation_times_with_offset_are_stored_in_utc(client, space, renter, other_user):
    created = client.post(
        "/reservations/",
        json={
            "space_id": space.id,
            "start_at": "2030-01-01T10:00:00-03:00",
            "end_at": "2030-01-01T12:00:00-03:00",
        },
        headers=auth_headers(renter),
    )
    assert created.status_code == 201
    assert created.json()["start_at"] == "2030-01-01T13:00:00"
    assert created.json()["end_at"] == "2030-01-01T15:00:00"

    # El mismo período expresado en UTC choca con la reserva anterior
    conflict = client.post(
        "/reservations/",
        json={
            "space_id": space.id,
            "start_at": "2030-01-01T13:00:00Z",
            "end_at": "2030-01-01T15:00:00Z",
        },
        headers=auth_headers(other_user),
    )
    assert conflict.status_code == 409

    availability = client.get(
        f"/spaces/{space.id}/availability",
        params={"start": "2030-01-01T11:00:00-03:00", "end": "2030-01-01T13:00:00-03:00"},
    )
    assert availability.status_code == 200
    assert availability.json()["available"] is False


def test_reservation_accepts_mixed_naive_and_aware_times(client, space, renter):
    created = client.post(
        "/reservations/",
        json={
            "space_id": space.id,
            "start_at": "2030-01-01T16:00:00",
            "end_at": "2030-01-01T18:00:00Z",
        },
        headers=auth_headers(renter),
    )

    assert created.status_code == 201
    assert created.json()["start_at"] == "2030-01-01T16:00:00"
    assert created.json()["end_at"] == "2030-01-01T18:00:00"


def test_patch_rejected_window_keeps_status(client, space, renter, make_reservation):
    reservation = make_reservation(renter, space, at(10), at(12))

    patched = client.patch(
        f"/reservations/{reservation.id}",
        json={
            "status": "cancelada",
            "start_at": "2030-01-01T14:00:00",
            "end_at": "2030-01-01T15:00:00",
        },
        headers=auth_headers(renter),
    )
    assert patched.status_code == 400

    stored = client.get(f"/reservations/{reservation.id}", headers=auth_headers(renter))
    assert stored.json()["status"] == "pendiente"
    assert stored.json()["start_at"] == "2030-01-01T10:00:00"


def test_only_space_owner_confirms_by_patch(client, space, owner, renter, make_reservation):
    reservation = make_reservation(renter, space, at(10), at(12))

    by_renter = client.patch(
        f"/reservations/{reservation.id}",
        json={"status": "confirmada"},
        headers=auth_headers(renter),
    )
    assert by_renter.status_code == 403

    by_owner = client.patch(
        f"/reservations/{reservation.id}",
        json={"status": "confirmada"},
        headers=auth_headers(owner),
    )
    assert by_owner.status_code == 200
    assert by_owner.json()["status"] == "confirmada"


def test_payment_flow_over_http(client, space, owner, renter, make_reservation):
    reservation = make_reservation(renter, space, at(10), at(12))

    intent = client.post(
        "/payments/initiate",
        json={"reservation_id": reservation.id, "method": "tarjeta"},
        headers=auth_headers(renter),
    )
    assert intent.status_code == 200
    assert float(intent.json()["amount"]) == 20.0

    confirmed = client.post(
        "/payments/confirm",
        json={"reference": intent.json()["reference"]},
        headers=auth_headers(renter),
    )
    assert confirmed.status_code == 200
    assert confirmed.json()["status"] == "completado"

    owner_notifications = client.get("/notifications/", headers=auth_headers(owner))
    assert owner_notifications.json()["unread_count"] == 1

    renter_notifications = client.get("/notifications/", headers=auth_headers(renter))
    body = renter_notifications.json()
    assert body["success"] is True
    assert body["notifications"][0]["type"] == "pago"

    read_all = client.put("/notifications/read-all", headers=auth_headers(renter))
    assert read_all.status_code == 200
    assert client.get(
        "/notifications/", headers=auth_headers(renter)
    ).json()["unread_count"] == 0


def test_search_sets_pagination_headers(client, space):
    response = client.get("/spaces/search", params={"per_page": 1})

    assert response.status_code == 200
    assert response.headers["X-Total-Count"] == "1"
    assert response.headers["X-Total-Pages"] == "1"
    assert response.json()[0]["id"] == space.id


def test_search_rejects_out_of_range_page(client):
    response = client.get("/spaces/search", params={"per_page": 500})

    assert response.status_code == 422


def test_space_detail_and_availability(client, space):
    detail = client.get(f"/spaces/{space.id}")
    assert detail.status_code == 200
    assert detail.json()["review_count"] == 0

    availability = client.get(
        f"/spaces/{space.id}/availability",
        params={"start": "2030-01-01T10:00:00", "end": "2030-01-01T12:00:00"},
    )
    assert availability.json()["available"] is True

    assert client.get("/spaces/999").status_code == 404


def test_district_writes_require_admin(client, renter, admin):
    payload = {"name": "Núñez", "city": "Buenos Aires"}

    assert client.post("/districts/", json=payload, headers=auth_headers(renter)).status_code == 403

    created = client.post("/districts/", json=payload, headers=auth_headers(admin))
    assert created.status_code == 201
    assert created.json()["name"] == "Núñez"


def test_profile_update_and_deactivation(client, renter):
    updated = client.put(
        "/users/me", json={"phone": "1155554444"}, headers=auth_headers(renter)
    )
    assert updated.status_code == 200
    assert updated.json()["phone"] == "1155554444"

    public = client.get(f"/users/{renter.id}")
    assert public.json() == {"id": renter.id, "name": renter.name, "last_name": "Test"}

    deleted = client.delete("/users/me", headers=auth_headers(renter))
    assert deleted.status_code == 204

    assert client.get(f"/users/{renter.id}").status_code == 404
    assert client.get("/auth/me", headers=auth_headers(renter)).status_code == 401
