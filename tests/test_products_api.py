"""
Product catalog endpoint tests.
"""
import pytest


def product_payload(**overrides):
    payload = {
        "name": "Desk Lamp",
        "company": "Ikea",
        "price": 19.99,
        "category": "furniture",
        "quantity": 4,
    }
    payload.update(overrides)
    return payload


class TestAddProduct:

    def test_seller_adds_product(self, client, seller_headers):
        r = client.post(
            "/product/add",
            json=product_payload(name="  Desk Lamp  ", color=["White", "BLACK"], freeShipping=True),
            headers=seller_headers,
        )

        assert r.status_code == 201
        data = r.json()
        assert data["name"] == "Desk Lamp"
        assert data["color"] == ["white", "black"]
        assert data["freeShipping"] is True
        assert data["inStock"] is True
        assert data["price"] == 19.99
        me = client.get("/user/me", headers=seller_headers).json()
        assert data["sellerId"] == me["id"]

    def test_buyer_cannot_add_product(self, client, buyer_headers):
        r = client.post("/product/add", json=product_payload(), headers=buyer_headers)
        assert r.status_code == 403

    @pytest.mark.parametrize("overrides", [
        {"name": "X"},
        {"company": "c" * 56},
        {"price": -1},
        {"category": "toys"},
        {"quantity": 0},
        {"quantity": 2.5},
        {"quantity": 2**31},
        {"price": 10**9},
    ])
    def test_invalid_product(self, client, seller_headers, overrides):
        r = client.post("/product/add", json=product_payload(**overrides), headers=seller_headers)
        assert r.status_code == 400
        assert "detail" in r.json()


class TestProductDetails:

    def test_details(self, client, buyer_headers, make_product):
        product = make_product(name="Kettle", category="kitchen")
        r = client.get(f"/product/details/{product['id']}", headers=buyer_headers)
        assert r.status_code == 200
        assert r.json()["name"] == "Kettle"

    def test_missing_product(self, client, buyer_headers):
        assert client.get("/product/details/404", headers=buyer_headers).status_code == 404

    def test_invalid_id(self, client, buyer_headers):
        assert client.get("/product/details/xyz", headers=buyer_headers).status_code == 400

    @pytest.mark.parametrize("product_id", [0, 2**31, 10**19])
    def test_id_out_of_range(self, client, buyer_headers, product_id):
        assert client.get(f"/product/details/{product_id}", headers=buyer_headers).status_code == 400


class TestEditAndDelete:

    def test_owner_edits_product(self, client, seller_headers, make_product):
        product = make_product()
        r = client.put(
            f"/product/edit/{product['id']}",
            json=product_payload(name="Floor Lamp", price=49.5),
            headers=seller_headers,
        )
        assert r.status_code == 200

        details = client.get(f"/product/details/{product['id']}", headers=seller_headers).json()
        assert (details["name"], details["price"]) == ("Floor Lamp", 49.5)

    def test_other_seller_cannot_edit_or_delete(self, client, other_seller_headers, make_product):
        product = make_product()

        r = client.put(f"/product/edit/{product['id']}", json=product_payload(), headers=other_seller_headers)
        assert r.status_code == 403
        assert r.json()["detail"] == "You are not owner of this product."
        assert client.delete(f"/product/delete/{product['id']}", headers=other_seller_headers).status_code == 403

    def test_edit_validates_body(self, client, seller_headers, make_product):
        product = make_product()
        r = client.put(f"/product/edit/{product['id']}", json={"name": "Only name"}, headers=seller_headers)
        assert r.status_code == 400

    def test_owner_deletes_product(self, client, seller_headers, make_product):
        product = make_product()

        assert client.delete(f"/product/delete/{product['id']}", headers=seller_headers).status_code == 200
        assert client.get(f"/product/details/{product['id']}", headers=seller_headers).status_code == 404
        assert client.delete(f"/product/delete/{product['id']}", headers=seller_headers).status_code == 404


class TestSellerList:

    def test_only_own_products_with_pagination(self, client, seller_headers, other_seller_headers, make_product):
        for i in range(5):
            make_product(name=f"Mine {i}")
        make_product(headers=other_seller_headers, name="Theirs")

        r = client.post("/product/seller/all", json={"page": 1, "limit": 2}, headers=seller_headers)

        assert r.status_code == 200
        data = r.json()
        assert data["totalPage"] == 3
        assert [p["name"] for p in data["products"]] == ["Mine 4", "Mine 3"]

        last = client.post("/product/seller/all", json={"page": 3, "limit": 2}, headers=seller_headers).json()
        assert [p["name"] for p in last["products"]] == ["Mine 0"]

    def test_search_is_case_insensitive(self, client, seller_headers, make_product):
        make_product(name="Green Tea")
        make_product(name="Black tea")
        make_product(name="Coffee")

        r = client.post(
            "/product/seller/all",
            json={"page": 1, "limit": 10, "searchText": "TEA"},
            headers=seller_headers,
        )

        data = r.json()
        assert sorted(p["name"] for p in data["products"]) == ["Black tea", "Green Tea"]
        assert data["totalPage"] == 1

    @pytest.mark.parametrize("body", [{"page": 0, "limit": 1}, {"page": 1}, {"page": 1, "limit": 0}])
    def test_invalid_pagination(self, client, seller_headers, body):
        assert client.post("/product/seller/all", json=body, headers=seller_headers).status_code == 400

    def test_large_limit_is_accepted(self, client, seller_headers, make_product):
        make_product()
        r = client.post("/product/seller/all", json={"page": 1, "limit": 500}, headers=seller_headers)
        assert r.status_code == 200
        assert r.json()["totalPage"] == 1

    def test_buyer_cannot_list_as_seller(self, client, buyer_headers):
        r = client.post("/product/seller/all", json={"page": 1, "limit": 1}, headers=buyer_headers)
        assert r.status_code == 403


class TestBuyerList:

    @pytest.fixture
    def catalog(self, make_product):
        make_product(name="Bread", price=2.0, category="bakery")
        make_product(name="Cake", price=15.0, category="bakery")
        make_product(name="Wine", price=30.0, category="liquor")
        make_product(name="Sofa", price=500.0, category="furniture")

    def names(self, client, headers, **filters):
        body = {"page": 1, "limit": 10, **filters}
        r = client.post("/product/buyer/all", json=body, headers=headers)
        assert r.status_code == 200, r.text
        return sorted(p["name"] for p in r.json()["products"])

    def test_all_products(self, client, buyer_headers, catalog):
        assert self.names(client, buyer_headers) == ["Bread", "Cake", "Sofa", "Wine"]

    def test_price_range(self, client, buyer_headers, catalog):
        assert self.names(client, buyer_headers, minPrice=10, maxPrice=100) == ["Cake", "Wine"]

    def test_categories(self, client, buyer_headers, catalog):
        assert self.names(client, buyer_headers, category=["bakery", "liquor"]) == ["Bread", "Cake", "Wine"]

    def test_search_and_category(self, client, buyer_headers, catalog):
        assert self.names(client, buyer_headers, searchText="ca", category=["bakery"]) == ["Cake"]

    def test_total_page_follows_filters(self, client, buyer_headers, catalog):
        r = client.post(
            "/product/buyer/all",
            json={"page": 1, "limit": 1, "category": ["bakery"]},
            headers=buyer_headers,
        )
        assert r.json()["totalPage"] == 2

    def test_unknown_category(self, client, buyer_headers):
        r = client.post("/product/buyer/all", json={"page": 1, "limit": 1, "category": ["toys"]}, headers=buyer_headers)
        assert r.status_code == 400

    def test_seller_cannot_use_buyer_list(self, client, seller_headers):
        r = client.post("/product/buyer/all", json={"page": 1, "limit": 1}, headers=seller_headers)
        assert r.status_code == 403


def test_latest_returns_six_newest(client, buyer_headers, make_product):
    for i in range(8):
        make_product(name=f"Product {i}")

    r = client.get("/product/latest", headers=buyer_headers)

    assert r.status_code == 200
    assert [p["name"] for p in r.json()] == [f"Product {i}" for i in range(7, 1, -1)]
