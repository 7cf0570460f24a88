# tests/test_api.py
from fastapi.testclient import TestClient
from snapshop.main import app

client = TestClient(app)

CHECKOUT = {"name": "Asha Rao", "email": "asha@example.com", "phone": "9876543210",
            "address": "12 MG Road, Indiranagar", "city": "Bengaluru", "zip": "560038", "country": "India"}
SIGNUP = {"name": "Ravi", "email": "a@b.com", "phone": "9876543210",
          "password": "secret1", "confirm_password": "secret1", "terms": True}


def reset():
    client.post("/reset")


def test_products_listing_and_filters():
    reset()
    r = client.get("/products")
    assert r.status_code == 200
    assert len(r.json()) == 8
    # category + query compose
    r = client.get("/products", params={"category": "home", "q": "LED"})
    assert [p["id"] for p in r.json()] == [6]
    assert client.get("/products", params={"q": "zzz"}).json() == []


def test_get_product():
    reset()
    r = client.get("/products/1")
    assert r.json()["price_display"] == "₹12,499"
    assert client.get("/products/42").status_code == 404


def test_cart_add_merge_and_remove():
    reset()
    client.post("/cart/add", json={"product_id": 1})
    cart = client.post("/cart/add", json={"product_id": 1}).json()
    assert cart["total"] == 24998
    assert cart["item_count"] == 2
    assert len(cart["lines"]) == 1

    cart = client.post("/cart/quantity", json={"product_id": 1, "delta": -2}).json()
    assert cart["empty"] is True

    client.post("/cart/add", json={"product_id": 3})
    cart = client.post("/cart/remove", json={"product_id": 3}).json()
    assert cart["lines"] == []
    # unknown product is a silent no-op
    assert client.post("/cart/add", json={"product_id": 999}).status_code == 200


def test_checkout_validation_and_success():
    reset()
    # nothing in the cart yet
    r = client.post("/checkout", json=CHECKOUT)
    assert r.status_code == 409

    client.post("/cart/add", json={"product_id": 2})
    r = client.post("/checkout", json={**CHECKOUT, "address": "tiny", "zip": "1"})
    assert r.status_code == 422
    assert set(r.json()["errors"]) == {"address", "zip"}
    assert client.get("/cart").json()["item_count"] == 1

    summary = client.get("/checkout/summary").json()
    assert summary["total"] == 24999 + 50

    r = client.post("/checkout", json=CHECKOUT)
    assert r.status_code == 200
    body = r.json()
    assert body["status"] == "order placed"
    assert body["order"]["total"] == 24999 + 50
    assert client.get("/cart").json()["empty"] is True


def test_signup_login_flow():
    reset()
    r = client.post("/auth/signup", json=SIGNUP)
    assert r.status_code == 201
    assert r.json()["login_email"] == "a@b.com"

    r = client.post("/auth/signup", json=SIGNUP)
    assert r.status_code == 409

    r = client.post("/auth/login", json={"email": "a@b.com", "password": "wrong12"})
    assert r.status_code == 401
    assert r.json()["errors"] == {"password": "Incorrect password"}

    r = client.post("/auth/login", json={"email": "who@b.com", "password": "secret1"})
    assert r.status_code == 404

    r = client.post("/auth/login", json={"email": "a@b.com", "password": "secret1"})
    assert r.status_code == 200
    assert r.json()["session"]["isAuthenticated"] is True
    assert client.get("/auth/session").json()["authenticated"] is True


def test_password_strength_and_theme():
    reset()
    r = client.post("/auth/password-strength", json={"password": "abc"})
    assert r.json()["strength"] == "weak"
    before = client.get("/theme").json()["theme"]
    after = client.post("/theme/toggle").json()["theme"]
    assert before != after
    assert client.get("/state").json()["theme"] == after


def test_malformed_body_uses_field_error_shape():
    reset()
    client.post("/cart/add", json={"product_id": 2})
    r = client.post("/checkout", json={**CHECKOUT, "name": 5})
    assert r.status_code == 422
    body = r.json()
    assert body["detail"] == "validation failed"
    assert set(body["errors"]) == {"name"}

    r = client.post("/cart/add", json={"product_id": "two"})
    assert r.status_code == 422
    assert "product_id" in r.json()["errors"]
    assert client.get("/cart").json()["item_count"] == 1
