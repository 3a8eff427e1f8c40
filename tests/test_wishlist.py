"""Tests for the customer wishlist."""

from __future__ import annotations

import pytest


@pytest.fixture()
def customer(make_user, auth_header) -> dict:
    return auth_header(make_user("buyer@example.com"))


def test_add_list_and_remove(client, customer, make_fabric):
    fabric_id = make_fabric("Mulmul")

    added = client.post("/customers/wishlist", json={"fabricId": fabric_id}, headers=customer)
    again = client.post("/customers/wishlist", json={"fabricId": fabric_id}, headers=customer)

    assert added.status_code == 200
    wishlist = again.get_json()["wishlist"]
    assert len(wishlist) == 1
    assert wishlist[0]["fabricId"] == fabric_id
    assert wishlist[0]["fabric"]["name"] == "Mulmul"
    assert wishlist[0]["addedAt"]

    removed = client.delete(f"/customers/wishlist/{fabric_id}", headers=customer)
    assert removed.get_json()["wishlist"] == []
    assert client.get("/customers/wishlist", headers=customer).get_json()["wishlist"] == []


def test_unknown_fabric(client, customer):
    response = client.post("/customers/wishlist", json={"fabricId": 999}, headers=customer)
    assert response.status_code == 404


def test_missing_fabric_id(client, customer):
    response = client.post("/customers/wishlist", json={"note": "x"}, headers=customer)
    assert response.status_code == 422


def test_wishlist_is_customer_only(client, make_user, auth_header):
    creator = auth_header(make_user("creator@example.com", role="creator"))

    assert client.get("/customers/wishlist", headers=creator).status_code == 403
