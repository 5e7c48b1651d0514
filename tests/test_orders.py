from datetime import timedelta

from fastapi import status

from storefront.services.checkout import checkout
from storefront.services.payments import confirm_payment


def test_my_orders_lists_own_orders_newest_first(client, buyer, buyer2, product, product2, auth_headers, db, add_cart_line):
    add_cart_line(buyer, product, 1)
    first = checkout(db, buyer.id)
    add_cart_line(buyer, product2, 2)
    second = checkout(db, buyer.id)
    add_cart_line(buyer2, product, 1)
    other = checkout(db, buyer2.id)

    response = client.get("/api/orders/me", headers=auth_headers)

    assert response.status_code == status.HTTP_200_OK
    ids = [order["id"] for order in response.json()]
    assert ids == [second.id, first.id]
    assert other.id not in ids


def test_my_orders_include_lines(client, buyer, product, auth_headers, db, add_cart_line):
    add_cart_line(buyer, product, 2)
    checkout(db, buyer.id)

    data = client.get("/api/orders/me", headers=auth_headers).json()

    assert data[0]["total"] == 20000
    assert data[0]["items"][0]["quantity"] == 2
    assert data[0]["items"][0]["product"]["name"] == "Linen Shirt"


def test_get_my_order(client, buyer, product, auth_headers, db, make_payment):
    payment = make_payment(buyer, [(product, 1)], timedelta(minutes=30))
    order = confirm_payment(db, buyer.id, payment.id, processing_delay=0)

    response = client.get(f"/api/orders/{order.id}", headers=auth_headers)

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["paymentId"] == payment.id
    assert response.json()["status"] == "processing"


def test_get_other_users_order(client, buyer2, product, auth_headers, db, add_cart_line):
    add_cart_line(buyer2, product, 1)
    order = checkout(db, buyer2.id)

    response = client.get(f"/api/orders/{order.id}", headers=auth_headers)

    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_my_orders_unauthorized(client):
    response = client.get("/api/orders/me")
    assert response.status_code == status.HTTP_401_UNAUTHORIZED
