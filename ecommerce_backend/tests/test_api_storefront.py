from src.db.models import BlogPost, HomeSection, Page, Product


def test_root_and_health(client):
    assert client.get("/").json() == {"message": "Healthy"}
    assert client.get("/health/db").json() == {"database": "ok", "ok": True}


class TestCatalogEndpoints:
    def test_products_filtered_by_parent_category(self, client, catalog):
        body = client.get("/products", params={"category": "fruits", "sort": "price_asc"}).json()
        assert [p["name"] for p in body["items"]] == ["Orange", "Apple"]
        assert body["total"] == 2
        assert body["items"][0]["display_price"] == {"mrp": 20000, "sale": 18000}

    def test_pagination(self, client, catalog):
        body = client.get("/products", params={"page": 2, "page_size": 2, "sort": "name"}).json()
        assert [p["name"] for p in body["items"]] == ["Orange"]
        assert body["pages"] == 2

    def test_brand_and_sale_filters(self, client, catalog):
        assert {p["name"] for p in client.get("/products", params={"brand": "fresh-farm"}).json()["items"]} == {"Apple", "Milk"}
        assert [p["name"] for p in client.get("/products", params={"on_sale": True}).json()["items"]] == ["Orange"]

    def test_live_search(self, client, catalog):
        assert client.get("/products/live-search", params={"q": "m"}).json() == []
        assert [p["name"] for p in client.get("/products/live-search", params={"q": "mil"}).json()] == ["Milk"]

    def test_product_detail_by_slug_or_id(self, client, catalog):
        body = client.get("/products/milk").json()
        assert [v["name"] for v in body["variants"]] == ["500ml", "1L"]
        assert body["brand_name"] == "Fresh Farm"
        assert client.get(f"/products/{catalog['orange'].id}").json()["slug"] == "orange"
        assert client.get("/products/no-such-thing").status_code == 404

    def test_related_products_share_the_category(self, client, catalog, session):
        session.add(Product(name="Banana", slug="banana", price_cents=8000, category_id=catalog["fruits"].id))
        session.commit()
        assert [p["name"] for p in client.get("/products/apple").json()["related"]] == ["Banana"]
        assert client.get("/products/orange").json()["related"] == []

    def test_category_tree(self, client, catalog):
        body = client.get("/categories").json()
        assert [(c["name"], c["level"], c["item_count"]) for c in body] == [
            ("Fruits", 0, 1),
            ("Citrus", 1, 1),
            ("Dairy", 0, 1),
        ]

    def test_brands_and_locations(self, client, catalog):
        assert [b["slug"] for b in client.get("/brands").json()] == ["fresh-farm"]
        locations = client.get("/locations").json()
        assert "Dhaka" in locations["districts"]
        assert "Gulshan" in locations["areas"]["Dhaka"]


class TestReviews:
    def test_signed_in_customers_can_review(self, client, catalog, customer_headers):
        milk = catalog["milk"].id
        assert client.post(f"/products/{milk}/reviews", json={"rating": 4}).status_code == 401
        response = client.post(f"/products/{milk}/reviews", json={"rating": 4, "comment": "Creamy"}, headers=customer_headers)
        assert response.status_code == 201
        assert response.json()["author_name"] == "Rahim Uddin"

        detail = client.get("/products/milk").json()
        assert detail["review_count"] == 1
        assert detail["average_rating"] == 4.0
        assert client.post(f"/products/{milk}/reviews", json={"rating": 9}, headers=customer_headers).status_code == 422


class TestContentEndpoints:
    def test_home(self, client, catalog, session):
        session.add(HomeSection(type="slider", title="On sale", filter_type="sale"))
        session.commit()
        body = client.get("/home").json()
        assert [s["title"] for s in body["sections"]] == ["On sale"]
        assert [p["name"] for p in body["sections"][0]["products"]] == ["Orange"]

    def test_only_published_pages_are_served(self, client, session):
        session.add_all(
            [
                Page(title="About", slug="about-us", content="<p>Hi</p>", is_published=True),
                Page(title="Draft", slug="draft", content="", is_published=False),
            ]
        )
        session.commit()
        assert client.get("/pages/about-us").json()["title"] == "About"
        assert client.get("/pages/draft").status_code == 404

    def test_blog(self, client, session):
        session.add(BlogPost(title="Summer fruit", slug="summer-fruit", content="..."))
        session.commit()
        assert [p["slug"] for p in client.get("/blog").json()] == ["summer-fruit"]
        assert client.get("/blog/summer-fruit").json()["title"] == "Summer fruit"
        assert client.get("/blog/winter").status_code == 404

    def test_store_info_defaults(self, client):
        info = client.get("/store-info").json()
        assert info["name"]
        assert info["floating_widget"]["is_visible"] is False
        assert client.get("/shipping").json() == {"inside_dhaka_cents": 6000, "outside_dhaka_cents": 12000}


class TestCheckoutFlow:
    def test_quote_checkout_track_and_history(self, client, catalog, coupons, customer_headers):
        lines = [
            {"product_id": catalog["apple"].id, "quantity": 2},
            {"product_id": catalog["milk"].id, "variant_id": catalog["milk"].variants[1].id, "quantity": 1},
        ]
        quote = client.post("/cart/quote", json={"items": lines, "district": "Chattogram", "coupon_code": "save10"}).json()
        assert quote["subtotal_cents"] == 66000
        assert quote["shipping_cents"] == 12000
        assert quote["discount_cents"] == 6600
        assert quote["total_cents"] == 71400

        customer = {
            "name": "Rahim Uddin",
            "phone": "01711000000",
            "address": "12 Port Road",
            "district": "Chattogram",
            "area": "Agrabad",
        }
        response = client.post(
            "/checkout",
            json={"customer": customer, "items": lines, "coupon_code": "SAVE10"},
            headers=customer_headers,
        )
        assert response.status_code == 201, response.text
        order = response.json()
        assert order["status"] == "Pending"
        assert order["total_cents"] == 71400
        assert order["customer_email"] == "shopper@example.com"
        assert [i["variant_name"] for i in order["items"]] == [None, "1L"]

        tracked = client.get("/orders/track", params={"order_id": f"#{order['id']}", "phone": "01711000000"}).json()
        assert tracked["step"] == 0
        assert tracked["timeline"][0] == {"status": "Pending", "step": 0, "done": True}
        assert client.get("/orders/track", params={"order_id": order["id"], "phone": "019"}).status_code == 404
        assert client.get("/orders/track", params={"order_id": "9" * 20, "phone": "0171"}).status_code == 404

        history = client.get("/account/orders", headers=customer_headers).json()
        assert [o["id"] for o in history] == [order["id"]]

    def test_guest_checkout_errors(self, client, catalog):
        customer = {"name": "Guest", "phone": "017", "address": "Somewhere", "district": "Dhaka"}
        assert client.post("/checkout", json={"customer": customer, "items": []}).json() == {"detail": "Your cart is empty."}
        response = client.post("/checkout", json={"customer": customer, "items": [{"product_id": catalog["milk"].id}]})
        assert response.status_code == 422
        assert "Choose an option" in response.json()["detail"]


class TestAccount:
    def test_auth_round_trip(self, client, customer_headers):
        me = client.get("/auth/me", headers=customer_headers).json()
        assert me["email"] == "shopper@example.com"
        assert client.patch("/auth/me", json={"full_name": "Rahim U."}, headers=customer_headers).json()["full_name"] == "Rahim U."

        login = client.post("/auth/login", json={"email": "SHOPPER@example.com", "password": "secret123"})
        assert login.status_code == 200
        assert login.json()["is_admin"] is False
        assert client.post("/auth/login", json={"email": "shopper@example.com", "password": "nope"}).status_code == 401
        assert client.get("/auth/me", headers={"Authorization": "Bearer garbage"}).status_code == 401

    def test_duplicate_signup(self, client, customer_headers):
        response = client.post("/auth/signup", json={"email": "shopper@example.com", "password": "secret123"})
        assert response.status_code == 409

    def test_addresses_and_wishlist(self, client, catalog, customer_headers):
        created = client.post(
            "/account/addresses",
            json={"full_name": "Home", "phone": "017", "address_line": "House 1", "district": "Dhaka", "area": "Uttara"},
            headers=customer_headers,
        )
        assert created.status_code == 201
        assert [a["area"] for a in client.get("/account/addresses", headers=customer_headers).json()] == ["Uttara"]
        assert client.delete(f"/account/addresses/{created.json()['id']}", headers=customer_headers).status_code == 204

        apple = catalog["apple"].id
        assert client.post(f"/account/wishlist/{apple}", headers=customer_headers).json() == {"product_id": apple, "in_wishlist": True}
        assert [p["name"] for p in client.get("/account/wishlist", headers=customer_headers).json()] == ["Apple"]
        assert client.get("/account/wishlist").status_code == 401
