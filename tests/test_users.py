from datetime import date, timedelta
from fastapi import status

from workspot.models.booking import Booking
from workspot.models.spot import Spot
from workspot.utils import repository, scheduler
from workspot.utils.auth import create_access_token, token_claims

from tests.conf_tests import (
    auth_headers,
    auth_headers_for,
    caller,
    clear_db,
    client,
    guest,
    host,
    make_spot,
    make_user,
    settings,
    test_db,
    test_spot,
    test_user_data,
)


# Registration and login
def test_register_returns_user_and_token(test_user_data):
    response = client.post("/users/register", json=test_user_data)
    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()
    assert data["user"]["email"] == test_user_data["email"]
    assert data["user"]["roles"] == ["guest"]
    assert data["user"]["profile"]["company"] == "Acme"
    assert "password" not in data["user"]
    assert "hashed_password" not in data["user"]
    assert data["access_token"]


def test_register_duplicate_email(test_user_data):
    client.post("/users/register", json=test_user_data)
    response = client.post("/users/register", json=test_user_data)
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["detail"] == "User already exists."


def test_register_weak_password(test_user_data):
    test_user_data["password"] = "password"
    response = client.post("/users/register", json=test_user_data)
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert "at least 6 characters" in response.json()["detail"]


def test_register_requires_company(test_user_data):
    test_user_data["profile"]["company"] = None
    response = client.post("/users/register", json=test_user_data)
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert "company" in response.json()["detail"]


def test_guest_requires_position_and_linkedin(test_user_data):
    test_user_data["profile"].pop("linkedin_url")
    response = client.post("/users/register", json=test_user_data)
    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_host_without_position_can_register(test_user_data):
    test_user_data["roles"] = ["host"]
    test_user_data["profile"] = {"company": "Acme"}
    response = client.post("/users/register", json=test_user_data)
    assert response.status_code == status.HTTP_201_CREATED
    assert response.json()["user"]["roles"] == ["host"]


def test_admin_role_cannot_be_requested(test_user_data):
    test_user_data["roles"] = ["guest", "admin"]
    response = client.post("/users/register", json=test_user_data)
    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_login_and_verify(test_user_data):
    registered = client.post("/users/register", json=test_user_data).json()
    response = client.post(
        "/users/login",
        json={"email": test_user_data["email"], "password": test_user_data["password"]},
    )
    assert response.status_code == status.HTTP_200_OK
    token = response.json()["access_token"]

    response = client.get("/users/verify", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == status.HTTP_200_OK
    payload = response.json()
    assert payload["sub"] == str(registered["user"]["id"])
    assert payload["email"] == test_user_data["email"]
    assert payload["first_name"] == test_user_data["first_name"]


def test_login_wrong_password(test_user_data):
    client.post("/users/register", json=test_user_data)
    response = client.post(
        "/users/login",
        json={"email": test_user_data["email"], "password": "Wrong1234"},
    )
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_login_unknown_user():
    response = client.post(
        "/users/login", json={"email": "nobody@example.com", "password": "Secret123"}
    )
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


# Bearer header handling
def test_missing_authorization_header():
    response = client.get("/users/verify")
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_malformed_authorization_header():
    response = client.get("/users/verify", headers={"Authorization": "Token abc"})
    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_invalid_token():
    response = client.get("/users/verify", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_expired_token(guest):
    token = create_access_token(token_claims(guest), settings, expires_delta=timedelta(minutes=-5))
    response = client.get("/users/verify", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.json()["detail"] == "Token has expired."


def test_token_of_deleted_user_is_rejected(guest, test_db):
    headers = auth_headers_for(guest)
    test_db.delete(guest)
    test_db.commit()
    response = client.get("/users/me", headers=headers)
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


# Profile
def test_update_profile(auth_headers):
    response = client.put(
        "/users/profile",
        json={"first_name": "Renamed", "profile": {"position": "CTO"}},
        headers=auth_headers,
    )
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["first_name"] == "Renamed"
    assert data["profile"]["position"] == "CTO"
    assert data["profile"]["company"] == "Acme"


def test_update_profile_cannot_clear_guest_requirements(auth_headers):
    response = client.put(
        "/users/profile", json={"profile": {"linkedin_url": None}}, headers=auth_headers
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST


# Favorites
def test_toggle_favorite_twice_restores_favorites(auth_headers, host, make_spot):
    kept = make_spot(host, title="Kept")
    toggled = make_spot(host, title="Toggled")
    client.post("/users/favorites", json={"spot_id": kept.id}, headers=auth_headers)

    response = client.post("/users/favorites", json={"spot_id": toggled.id}, headers=auth_headers)
    assert response.status_code == status.HTTP_200_OK
    assert {spot["id"] for spot in response.json()} == {kept.id, toggled.id}

    response = client.post("/users/favorites", json={"spot_id": toggled.id}, headers=auth_headers)
    assert [spot["id"] for spot in response.json()] == [kept.id]

    response = client.get("/users/favorites", headers=auth_headers)
    assert [spot["id"] for spot in response.json()] == [kept.id]


def test_toggle_favorite_unknown_spot(auth_headers):
    response = client.post("/users/favorites", json={"spot_id": 9999}, headers=auth_headers)
    assert response.status_code == status.HTTP_404_NOT_FOUND


# Account deletion
def test_delete_guest_frees_their_booked_dates(test_db, guest, test_spot):
    scheduler.propose_booking(test_db, test_spot.id, caller(guest), date(2024, 6, 1), date(2024, 6, 3))
    spot_id = test_spot.id
    guest_id = guest.id

    response = client.delete("/users/delete", headers=auth_headers_for(guest))
    assert response.status_code == status.HTTP_204_NO_CONTENT

    test_db.expire_all()
    assert repository.get_user(test_db, guest_id) is None
    assert test_db.query(Booking).count() == 0
    assert repository.require_spot(test_db, spot_id).blocked_dates == []


def test_delete_host_removes_their_spots_and_bookings(test_db, host, guest, test_spot):
    scheduler.propose_booking(test_db, test_spot.id, caller(guest), date(2024, 6, 1), date(2024, 6, 3))
    guest_id = guest.id
    client.post("/users/favorites", json={"spot_id": test_spot.id}, headers=auth_headers_for(guest))

    response = client.delete("/users/delete", headers=auth_headers_for(host))
    assert response.status_code == status.HTTP_204_NO_CONTENT

    test_db.expire_all()
    assert test_db.query(Spot).count() == 0
    assert test_db.query(Booking).count() == 0
    assert repository.get_user(test_db, guest_id) is not None
