from fastapi import status

from storefront.models import User


def _register(client, email="new@example.com", password="password123", confirm=None):
    return client.post(
        "/api/auth/register",
        json={
            "displayName": "New Buyer",
            "email": email,
            "password": password,
            "confirmPassword": confirm or password,
        },
    )


def test_register_creates_buyer(client, db):
    response = _register(client)

    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["email"] == "new@example.com"
    assert data["displayName"] == "New Buyer"
    assert data["role"] == "user"
    user = db.query(User).filter(User.email == "new@example.com").one()
    assert user.hashed_password != "password123"


def test_register_duplicate_email(client, buyer):
    response = _register(client, email="buyer@example.com")
    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_register_short_password(client):
    response = _register(client, password="short")
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


def test_register_password_mismatch(client):
    response = _register(client, confirm="different123")
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


def test_login_returns_token(client, buyer):
    response = client.post(
        "/api/auth/login",
        json={"email": "buyer@example.com", "password": "testpassword123"},
    )

    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["tokenType"] == "bearer"
    assert data["role"] == "user"
    assert data["accessToken"]


def test_login_wrong_password(client, buyer):
    response = client.post(
        "/api/auth/login",
        json={"email": "buyer@example.com", "password": "wrong-password"},
    )
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_me(client, auth_headers):
    response = client.get("/api/auth/me", headers=auth_headers)
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["email"] == "buyer@example.com"
