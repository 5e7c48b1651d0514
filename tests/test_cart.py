from fastapi import status

from storefront.models import CartItem


def test_add_to_cart(client, buyer, product, auth_headers, db):
    response = client.post(
        "/api/cart",
        json={"productId": product.id, "quantity": 2},
        headers=auth_headers,
    )

    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["productId"] == product.id
    assert data["quantity"] == 2
    assert data["product"]["price"] == 10000


def test_add_to_cart_increments_existing_line(client, buyer, product, auth_headers, db, add_cart_line):
    add_cart_line(buyer, product, 1)

    response = client.post(
        "/api/cart",
        json={"productId": product.id, "quantity": 3},
        headers=auth_headers,
    )

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["quantity"] == 4
    assert db.query(CartItem).filter(CartItem.user_id == buyer.id).count() == 1


def test_add_to_cart_defaults_to_one(client, product, auth_headers):
    response = client.post("/api/cart", json={"productId": product.id}, headers=auth_headers)
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["quantity"] == 1


def test_add_to_cart_rejects_non_positive_quantity(client, product, auth_headers):
    response = client.post(
        "/api/cart",
        json={"productId": product.id, "quantity": 0},
        headers=auth_headers,
    )
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


def test_add_unknown_product(client, auth_headers):
    response = client.post("/api/cart", json={"productId": 99999}, headers=auth_headers)
    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json()["code"] == "product_not_found"


def test_get_cart_only_returns_own_lines(client, buyer, buyer2, product, product2, auth_headers, db, add_cart_line):
    add_cart_line(buyer, product, 2)
    add_cart_line(buyer2, product2, 1)

    response = client.get("/api/cart", headers=auth_headers)

    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert len(data) == 1
    assert data[0]["productId"] == product.id


def test_update_cart_quantity(client, buyer, product, auth_headers, db, add_cart_line):
    add_cart_line(buyer, product, 1)

    response = client.put(
        "/api/cart",
        json={"productId": product.id, "quantity": 4},
        headers=auth_headers,
    )

    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["removed"] is False
    assert data["item"]["quantity"] == 4


def test_update_cart_quantity_zero_removes_line(client, buyer, product, auth_headers, db, add_cart_line):
    add_cart_line(buyer, product, 1)

    response = client.put(
        "/api/cart",
        json={"productId": product.id, "quantity": 0},
        headers=auth_headers,
    )

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["removed"] is True
    assert db.query(CartItem).filter(CartItem.user_id == buyer.id).count() == 0


def test_update_missing_cart_line(client, product, auth_headers):
    response = client.put(
        "/api/cart",
        json={"productId": product.id, "quantity": 2},
        headers=auth_headers,
    )
    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json()["code"] == "cart_item_not_found"


def test_remove_cart_line(client, buyer, product, auth_headers, db, add_cart_line):
    add_cart_line(buyer, product, 1)

    response = client.request(
        "DELETE",
        "/api/cart",
        json={"productId": product.id},
        headers=auth_headers,
    )

    assert response.status_code == status.HTTP_200_OK
    assert db.query(CartItem).filter(CartItem.user_id == buyer.id).count() == 0


def test_remove_missing_cart_line(client, product, auth_headers):
    response = client.request(
        "DELETE",
        "/api/cart",
        json={"productId": product.id},
        headers=auth_headers,
    )
    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_cart_unauthorized(client):
    response = client.get("/api/cart")
    assert response.status_code == status.HTTP_401_UNAUTHORIZED
