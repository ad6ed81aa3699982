"""
Tests for sales endpoints.
"""
from datetime import datetime, timezone


def seed(db):
    db.add("products", {
        "name": "Large Water Bottle", "sellPrice": 5.0, "staffPrice": 3.0, "stock": 4, "owner": "Gym",
    }, doc_id="large")
    db.add("products", {
        "name": "Protein Shake", "sellPrice": 10.0, "staffPrice": 8.0, "stock": 1, "owner": "Sharoofa",
    }, doc_id="shake")
    db.add("staff", {
        "name": "Omar", "nameLower": "omar", "largeBottles": 2, "smallBottles": 2,
    }, doc_id="s1")


def checkout_body(**overrides):
    body = {
        "items": [{
            "productId": "large", "name": "Large Water Bottle", "quantity": 1,
            "regularPrice": 5.0, "staffPrice": 3.0,
        }],
        "staffDiscount": True,
        "staffId": "s1",
        "staffName": "Omar",
        "paymentMethod": "InstaPay",
        "subtotal": 3.0,
        "total": 0.0,
    }
    body.update(overrides)
    return body


def test_create_sale_success(client, fake_db, settings):
    """Test a staff checkout returns 201 with the persisted sale."""
    seed(fake_db)

    response = client.post("/sales", json=checkout_body())

    assert response.status_code == 201
    response_json = response.json()
    assert response_json["status"] == "success"
    sale = response_json["data"]["item"]
    assert sale["total"] == 0.0
    assert sale["largeWaterBottle"] is True
    assert sale["paymentMethod"] == "InstaPay"
    assert sale["createdBy"] == "operator-1"
    assert fake_db.doc("staff", "s1")["largeBottles"] == 1
    assert fake_db.doc("products", "large")["stock"] == 3


def test_create_sale_with_idempotency_key(client, fake_db, settings):
    """Test retrying with the same Idempotency-Key does not sell twice."""
    seed(fake_db)
    headers = {"Idempotency-Key": "checkout-42"}

    first = client.post("/sales", json=checkout_body(), headers=headers)
    second = client.post("/sales", json=checkout_body(), headers=headers)

    assert first.status_code == second.status_code == 201
    assert first.json()["data"]["item"]["id"] == "checkout-42"
    assert second.json()["data"]["item"]["id"] == "checkout-42"
    assert fake_db.doc("products", "large")["stock"] == 3


def test_create_sale_insufficient_stock(client, fake_db, settings):
    """Test insufficient stock returns 400 with the stock figures."""
    seed(fake_db)
    body = checkout_body(staffDiscount=False, items=[{
        "productId": "shake", "name": "Protein Shake", "quantity": 2,
        "regularPrice": 10.0, "staffPrice": 8.0,
    }])

    response = client.post("/sales", json=body)

    assert response.status_code == 400
    response_json = response.json()
    assert response_json["status"] == "error"
    assert response_json["code"] == 400
    assert "Insufficient stock for product: Protein Shake" in response_json["message"]
    assert response_json["data"] == {"productName": "Protein Shake", "available": 1, "requested": 2}
    assert fake_db.doc("products", "shake")["stock"] == 1


def test_create_sale_unknown_staff(client, fake_db, settings):
    """Test an unknown staff member is rejected with 400."""
    seed(fake_db)

    response = client.post("/sales", json=checkout_body(staffId="ghost", staffName="Ghost"))

    assert response.status_code == 400
    assert response.json()["message"] == "Staff member not found"


def test_create_sale_allowance_exceeded(client, fake_db, settings):
    """Test an exhausted allowance rejects the sale."""
    seed(fake_db)
    fake_db.store["staff"]["s1"]["largeBottles"] = 0

    response = client.post("/sales", json=checkout_body())

    assert response.status_code == 400
    assert response.json()["data"]["bottleSize"] == "large"
    assert fake_db.doc("products", "large")["stock"] == 4


def test_create_sale_empty_cart(client, fake_db, settings):
    """Test an empty cart is a validation failure."""
    response = client.post("/sales", json=checkout_body(items=[]))

    assert response.status_code == 400
    response_json = response.json()
    assert response_json["status"] == "fail"
    assert response_json["data"]["errors"]


def test_create_sale_invalid_payment_method(client, fake_db, settings):
    """Test an unsupported payment method is a validation failure."""
    response = client.post("/sales", json=checkout_body(paymentMethod="Card"))

    assert response.status_code == 400
    assert response.json()["status"] == "fail"


def test_create_sale_bad_idempotency_key(client, fake_db, settings):
    """Test a malformed Idempotency-Key is rejected."""
    seed(fake_db)

    response = client.post("/sales", json=checkout_body(), headers={"Idempotency-Key": "x"})

    assert response.status_code == 400
    assert "Idempotency-Key" in response.json()["message"]


def test_create_sale_requires_authentication(unauthenticated_client):
    """Test the sales endpoint rejects requests without a token."""
    response = unauthenticated_client.post("/sales", json=checkout_body())

    assert response.status_code == 401


def test_list_sales(client, fake_db):
    """Test listing sales with a month filter."""
    fake_db.add("sales", {
        "items": [], "subtotal": 3.0, "total": 3.0, "paymentMethod": "Cash",
        "createdBy": "operator-1", "createdAt": datetime(2025, 7, 16, 10, 0, tzinfo=timezone.utc),
    }, doc_id="sale1")
    fake_db.add("sales", {
        "items": [], "subtotal": 4.0, "total": 4.0, "paymentMethod": "Cash",
        "createdBy": "operator-1", "createdAt": datetime(2025, 8, 2, 10, 0, tzinfo=timezone.utc),
    }, doc_id="sale2")

    response = client.get("/sales?start_date=2025-07&end_date=2025-07")

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["total"] == 1
    assert data["items"][0]["id"] == "sale1"


def test_list_sales_invalid_date(client, fake_db):
    """Test a malformed date filter returns 400."""
    response = client.get("/sales?start_date=July")

    assert response.status_code == 400
    assert "Invalid date format" in response.json()["message"]


def test_get_sale_not_found(client, fake_db):
    """Test getting a missing sale returns 404."""
    response = client.get("/sales/missing")

    assert response.status_code == 404
    assert response.json()["status"] == "error"


def test_staff_recent_purchases(client, fake_db, settings):
    """Test recent purchases for a staff member."""
    seed(fake_db)
    client.post("/sales", json=checkout_body())

    response = client.get("/sales/staff/s1/recent")

    assert response.status_code == 200
    purchases = response.json()["data"]
    assert len(purchases) == 1
    assert purchases[0]["staffId"] == "s1"
