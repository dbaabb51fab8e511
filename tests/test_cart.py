import uuid

from app.models.cart import CartItem


def _add(client, headers, product_id, variant_id, quantity=None):
    payload = {"productId": product_id, "variantId": variant_id}
    if quantity is not None:
        payload["quantity"] = quantity
    return client.post("/api/cart/add", json=payload, headers=headers)


def test_cart_requires_authentication(client):
    resp = client.get("/api/cart")

    assert resp.status_code == 401
    assert resp.json()["message"] == "Missing authorization header"


def test_cart_rejects_unknown_token(client):
    resp = client.get("/api/cart", headers={"Authorization": "Bearer nope"})

    assert resp.status_code == 401
    assert resp.json()["message"] == "Invalid token"


def test_add_defaults_to_quantity_one(client, customer, make_product):
    headers, user = customer
    product, variants = make_product(variants=[(5, [])])

    resp = _add(client, headers, product.id, variants[0].id)

    assert resp.status_code == 201
    row = resp.json()
    assert row["quantity"] == 1
    assert row["user_id"] == user["id"]
    assert row["variant_id"] == variants[0].id


def test_add_twice_merges_into_one_row(client, customer, db, make_product):
    headers, user = customer
    product, variants = make_product(variants=[(5, [])])

    first = _add(client, headers, product.id, variants[0].id, 2).json()
    second = _add(client, headers, product.id, variants[0].id, 3)

    assert second.status_code == 201
    assert second.json()["id"] == first["id"]
    assert second.json()["quantity"] == 5
    assert db.query(CartItem).filter(CartItem.user_id == user["id"]).count() == 1


def test_merged_quantity_above_stock_is_rejected(client, customer, db, make_product):
    headers, user = customer
    product, variants = make_product(variants=[(5, [])])
    _add(client, headers, product.id, variants[0].id, 4)

    resp = _add(client, headers, product.id, variants[0].id, 2)

    assert resp.status_code == 400
    assert resp.json()["message"] == "Not enough stock available"
    db.expire_all()
    assert db.query(CartItem).filter(CartItem.user_id == user["id"]).one().quantity == 4


def test_add_above_stock_creates_no_row(client, customer, db, make_product):
    headers, user = customer
    product, variants = make_product(variants=[(2, [])])

    resp = _add(client, headers, product.id, variants[0].id, 3)

    assert resp.status_code == 400
    assert resp.json()["message"] == "Not enough stock available"
    assert db.query(CartItem).filter(CartItem.user_id == user["id"]).count() == 0


def test_add_unknown_product_or_foreign_variant_is_404(client, customer, make_product):
    headers, _ = customer
    product, _ = make_product(name="A")
    _, other_variants = make_product(name="B")

    missing = _add(client, headers, str(uuid.uuid4()), other_variants[0].id)
    foreign = _add(client, headers, product.id, other_variants[0].id)

    assert missing.status_code == 404
    assert missing.json()["message"] == "Product not found"
    assert foreign.status_code == 404
    assert foreign.json()["message"] == "Product variant not found"


def test_add_rejects_zero_quantity(client, customer, make_product):
    headers, _ = customer
    product, variants = make_product()

    resp = _add(client, headers, product.id, variants[0].id, 0)

    assert resp.status_code == 400


def test_get_cart_returns_nested_product_and_variant(client, customer, make_attribute, make_product):
    headers, _ = customer
    red = make_attribute("color", "red")
    product, variants = make_product(variants=[(5, [red.id])])
    _add(client, headers, product.id, variants[0].id, 2)

    resp = client.get("/api/cart", headers=headers)

    assert resp.status_code == 200
    (item,) = resp.json()
    assert item["quantity"] == 2
    assert item["products"]["id"] == product.id
    assert item["variants"]["id"] == variants[0].id
    link = item["variants"]["variant_attributes"][0]
    assert link["attribute_value_id"] == red.id
    assert link["attribute_values"]["value"] == "red"


def test_cart_is_scoped_to_the_caller(client, customer, identity, make_product):
    headers, _ = customer
    other_token, _ = identity.add_user()
    other_headers = {"Authorization": f"Bearer {other_token}"}
    product, variants = make_product()
    _add(client, headers, product.id, variants[0].id)

    assert client.get("/api/cart", headers=other_headers).json() == []


def test_update_checks_stock_and_ownership(client, customer, identity, make_product):
    headers, _ = customer
    product, variants = make_product(variants=[(5, [])])
    item = _add(client, headers, product.id, variants[0].id).json()
    other_token, _ = identity.add_user()

    ok = client.put(f"/api/cart/{item['id']}", json={"quantity": 5}, headers=headers)
    too_many = client.put(f"/api/cart/{item['id']}", json={"quantity": 6}, headers=headers)
    foreign = client.put(
        f"/api/cart/{item['id']}", json={"quantity": 1}, headers={"Authorization": f"Bearer {other_token}"}
    )

    assert ok.status_code == 200
    assert ok.json()["quantity"] == 5
    assert too_many.status_code == 400
    assert too_many.json()["message"] == "Not enough stock available"
    assert foreign.status_code == 404
    assert foreign.json()["message"] == "Cart item not found"


def test_remove_item(client, customer, identity, make_product):
    headers, _ = customer
    product, variants = make_product()
    item = _add(client, headers, product.id, variants[0].id).json()
    other_token, _ = identity.add_user()

    foreign = client.delete(f"/api/cart/{item['id']}", headers={"Authorization": f"Bearer {other_token}"})
    removed = client.delete(f"/api/cart/{item['id']}", headers=headers)
    again = client.delete(f"/api/cart/{item['id']}", headers=headers)

    assert foreign.status_code == 404
    assert removed.status_code == 200
    assert removed.json() == {"message": "Item removed from cart", "id": item["id"]}
    assert again.status_code == 404


def test_clear_cart_only_touches_caller_rows(client, customer, identity, db, make_product):
    headers, user = customer
    other_token, other = identity.add_user()
    product, variants = make_product()
    _add(client, headers, product.id, variants[0].id)
    _add(client, {"Authorization": f"Bearer {other_token}"}, product.id, variants[0].id)

    resp = client.delete("/api/cart", headers=headers)
    repeat = client.delete("/api/cart", headers=headers)

    assert resp.status_code == 200
    assert resp.json() == {"message": "Cart cleared successfully"}
    assert repeat.status_code == 200
    assert db.query(CartItem).filter(CartItem.user_id == user["id"]).count() == 0
    assert db.query(CartItem).filter(CartItem.user_id == other["id"]).count() == 1
