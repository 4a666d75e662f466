"""
tests/test_api_routes.py -- Integration tests for the Caprio REST routes.

These tests exercise the full stack: FastAPI routing -> access guard
dependencies -> UserStore/CatalogStore -> response model serialization.

Coverage:
  - Access guard: 401 without/with malformed/invalid tokens, 403 for a
    customer token on every admin route
  - Auth routes: register, duplicate register, login, bad login, /me
  - Catalog: admin CRUD, public listing with filters/sort, lookup by id/slug
  - Wishlist: add (idempotent), list, remove, unknown product
  - Error envelope and 400 for request validation failures

Fixtures used (from conftest.py):
  - api_client: ApiClient(client, admin_token, user_token, user_id)
"""

from __future__ import annotations

import pytest


def _auth(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


_ADMIN_ROUTES = [
    ("post", "/api/admin/products", {"name": "Nope"}),
    ("put", "/api/admin/products/1", {"name": "Nope"}),
    ("delete", "/api/admin/products/1", None),
    ("post", "/api/admin/seed-demo", None),
]


def _call(client, method: str, path: str, body, headers=None):
    kwargs = {"headers": headers or {}}
    if body is not None:
        kwargs["json"] = body
    return getattr(client, method)(path, **kwargs)


class TestAccessGuard:
    """Protected routes reject callers before any handler logic runs."""

    @pytest.mark.parametrize("path", ["/api/me", "/api/wishlist"])
    def test_missing_header_returns_401(self, api_client, path: str) -> None:
        resp = api_client.client.get(path)
        assert resp.status_code == 401, resp.text
        assert resp.json()["error"]["code"] == "unauthorized"

    @pytest.mark.parametrize("header", ["Token abc", "Bearer", "bearer abc", "Basic dXNlcjpwYXNz"])
    def test_malformed_header_returns_401(self, api_client, header: str) -> None:
        resp = api_client.client.get("/api/me", headers={"Authorization": header})
        assert resp.status_code == 401, resp.text

    def test_invalid_token_returns_401(self, api_client) -> None:
        resp = api_client.client.get("/api/me", headers=_auth("not.a.jwt"))
        assert resp.status_code == 401
        assert resp.json()["error"]["code"] == "invalid_token"

    @pytest.mark.parametrize("method, path, body", _ADMIN_ROUTES)
    def test_admin_routes_require_auth(self, api_client, method: str, path: str, body) -> None:
        resp = _call(api_client.client, method, path, body)
        assert resp.status_code == 401, resp.text

    @pytest.mark.parametrize("method, path, body", _ADMIN_ROUTES)
    def test_customer_token_forbidden_on_admin_routes(self, api_client, method: str, path: str, body) -> None:
        resp = _call(api_client.client, method, path, body, headers=_auth(api_client.user_token))
        assert resp.status_code == 403, resp.text
        assert resp.json()["error"]["code"] == "forbidden"

    def test_auth_checked_before_body_validation(self, api_client) -> None:
        resp = api_client.client.post("/api/admin/products", json={})
        assert resp.status_code == 401


class TestAuthRoutes:
    def test_register_returns_token(self, api_client) -> None:
        resp = api_client.client.post(
            "/api/register",
            json={"name": "Alice", "email": "alice@x.com", "password": "pw123456"},
        )
        assert resp.status_code == 200, resp.text
        assert resp.headers["cache-control"] == "no-store"
        token = resp.json()["token"]

        me = api_client.client.get("/api/me", headers=_auth(token))
        assert me.status_code == 200, me.text
        user = me.json()["user"]
        assert user["email"] == "alice@x.com"
        assert user["name"] == "Alice"
        assert user["is_admin"] is False
        assert set(user) == {"id", "name", "email", "is_admin", "created_at"}

    def test_register_duplicate_email_returns_400(self, api_client) -> None:
        body = {"email": "dup@x.com", "password": "pw123456"}
        assert api_client.client.post("/api/register", json=body).status_code == 200
        resp = api_client.client.post("/api/register", json={**body, "email": "DUP@x.com"})
        assert resp.status_code == 400
        assert resp.json()["error"]["code"] == "conflict"

    @pytest.mark.parametrize(
        "body",
        [
            {"password": "pw123456"},
            {"email": "bob@x.com"},
            {"email": "bob@x.com", "password": ""},
            {"email": "not-an-email", "password": "pw123456"},
            {"email": "long@x.com", "password": "é" * 40},
        ],
    )
    def test_register_validation_returns_400(self, api_client, body: dict) -> None:
        resp = api_client.client.post("/api/register", json=body)
        assert resp.status_code == 400, resp.text
        assert resp.json()["error"]["code"] == "validation_error"

    def test_register_and_login_tokens_identify_same_user(self, api_client) -> None:
        creds = {"email": "carol@x.com", "password": "pw123456"}
        token_a = api_client.client.post("/api/register", json=creds).json()["token"]
        token_b = api_client.client.post("/api/login", json=creds).json()["token"]
        me_a = api_client.client.get("/api/me", headers=_auth(token_a)).json()["user"]
        me_b = api_client.client.get("/api/me", headers=_auth(token_b)).json()["user"]
        assert me_a["id"] == me_b["id"]
        assert me_a["is_admin"] is False

    def test_login_bad_password_returns_400(self, api_client) -> None:
        resp = api_client.client.post("/api/login", json={"email": "customer@caprio.com", "password": "wrong"})
        assert resp.status_code == 400
        assert resp.json()["error"]["code"] == "bad_credentials"

    def test_login_unknown_email_same_error(self, api_client) -> None:
        resp = api_client.client.post("/api/login", json={"email": "ghost@x.com", "password": "whatever"})
        assert resp.status_code == 400
        assert resp.json()["error"]["code"] == "bad_credentials"

    def test_login_password_over_72_bytes_returns_400(self, api_client) -> None:
        resp = api_client.client.post("/api/login", json={"email": "customer@caprio.com", "password": "é" * 40})
        assert resp.status_code == 400
        assert resp.json()["error"]["code"] == "validation_error"

    def test_register_accepts_72_byte_password(self, api_client) -> None:
        creds = {"email": "accents@x.com", "password": "é" * 36}
        assert api_client.client.post("/api/register", json=creds).status_code == 200
        assert api_client.client.post("/api/login", json=creds).status_code == 200

    def test_admin_login_me_reports_admin(self, api_client) -> None:
        resp = api_client.client.post("/api/login", json={"email": "testadmin@caprio.com", "password": "testpass123"})
        assert resp.status_code == 200, resp.text
        me = api_client.client.get("/api/me", headers=_auth(resp.json()["token"]))
        assert me.json()["user"]["is_admin"] is True


class TestCatalogRoutes:
    def _create(self, api_client, **fields) -> int:
        resp = api_client.client.post("/api/admin/products", json=fields, headers=_auth(api_client.admin_token))
        assert resp.status_code == 200, resp.text
        return resp.json()["id"]

    def test_admin_create_then_public_read(self, api_client) -> None:
        product_id = self._create(
            api_client,
            name="Trail Hoodie",
            slug="trail-hoodie",
            description="Warm.",
            price=39.5,
            colors=[{"name": "Olive", "hex": "#556b2f"}],
            images=["https://img.example/trail.jpg"],
            category="Hoodies",
            age_group="Toddler",
        )
        by_id = api_client.client.get(f"/api/products/{product_id}")
        by_slug = api_client.client.get("/api/products/trail-hoodie")
        assert by_id.status_code == 200
        assert by_id.json() == by_slug.json()
        data = by_id.json()
        assert data["colors"] == [{"name": "Olive", "hex": "#556b2f"}]
        assert data["images"] == ["https://img.example/trail.jpg"]
        assert data["rating"] == 0
        assert data["reviews"] == 0

    def test_duplicate_slug_returns_400(self, api_client) -> None:
        self._create(api_client, name="Cap", slug="dup-cap")
        resp = api_client.client.post(
            "/api/admin/products",
            json={"name": "Cap 2", "slug": "dup-cap"},
            headers=_auth(api_client.admin_token),
        )
        assert resp.status_code == 400
        assert resp.json()["error"]["code"] == "conflict"

    def test_unknown_product_returns_404(self, api_client) -> None:
        resp = api_client.client.get("/api/products/does-not-exist")
        assert resp.status_code == 404
        assert resp.json()["error"]["code"] == "not_found"

    def test_update_and_delete(self, api_client) -> None:
        product_id = self._create(api_client, name="Scarf", slug="scarf", price=10, rating=4.5, reviews=12)
        headers = _auth(api_client.admin_token)

        resp = api_client.client.put(
            f"/api/admin/products/{product_id}",
            json={"name": "Wool Scarf", "slug": "scarf", "price": 15},
            headers=headers,
        )
        assert resp.status_code == 200, resp.text
        assert resp.json() == {"success": True}
        data = api_client.client.get("/api/products/scarf").json()
        assert data["name"] == "Wool Scarf"
        assert data["price"] == 15
        assert data["rating"] == 4.5, "rating must survive an update that omits it"
        assert data["reviews"] == 12

        resp = api_client.client.delete(f"/api/admin/products/{product_id}", headers=headers)
        assert resp.json() == {"success": True}
        assert api_client.client.get(f"/api/products/{product_id}").status_code == 404

    def test_update_or_delete_unknown_returns_404(self, api_client) -> None:
        headers = _auth(api_client.admin_token)
        assert api_client.client.put("/api/admin/products/99999", json={"name": "X"}, headers=headers).status_code == 404
        assert api_client.client.delete("/api/admin/products/99999", headers=headers).status_code == 404

    def test_seed_demo_is_idempotent(self, api_client) -> None:
        headers = _auth(api_client.admin_token)
        first = api_client.client.post("/api/admin/seed-demo", headers=headers)
        second = api_client.client.post("/api/admin/seed-demo", headers=headers)
        assert first.status_code == 200
        assert first.json() == {"seeded": True, "inserted": 2}
        assert second.json() == {"seeded": True, "inserted": 0}
        tee = api_client.client.get("/api/products/cosmic-explorer-tee").json()
        assert tee["age_group"] == "Little Kid"
        assert len(tee["colors"]) == 2

    def test_listing_filters_and_sort(self, api_client) -> None:
        self._create(api_client, name="Filter Tee A", slug="filter-a", price=30, category="FilterCat")
        self._create(api_client, name="Filter Tee B", slug="filter-b", price=10, category="FilterCat")
        self._create(api_client, name="Filter Tee C", slug="filter-c", price=20, category="FilterCat")

        resp = api_client.client.get("/api/products", params={"category": "FilterCat", "sort": "price_asc"})
        assert resp.status_code == 200
        assert [p["price"] for p in resp.json()] == [10, 20, 30]

        resp = api_client.client.get("/api/products", params={"category": "FilterCat", "sort": "price_desc"})
        assert [p["price"] for p in resp.json()] == [30, 20, 10]

        resp = api_client.client.get("/api/products", params={"category": "FilterCat"})
        ids = [p["id"] for p in resp.json()]
        assert ids == sorted(ids, reverse=True)

        resp = api_client.client.get("/api/products", params={"category": "FilterCat", "sort": "sideways"})
        assert resp.status_code == 200
        assert [p["id"] for p in resp.json()] == ids

    def test_listing_search(self, api_client) -> None:
        self._create(api_client, name="Zebra Parka", slug="zebra-parka", description="Striped.")
        self._create(api_client, name="Plain Vest", slug="plain-vest", description="Has ZEBRA lining.")
        resp = api_client.client.get("/api/products", params={"q": "zebra"})
        assert {p["slug"] for p in resp.json()} == {"zebra-parka", "plain-vest"}


class TestWishlistRoutes:
    def test_add_list_remove(self, api_client) -> None:
        admin = _auth(api_client.admin_token)
        user = _auth(api_client.user_token)
        product_id = api_client.client.post(
            "/api/admin/products",
            json={"name": "Wish Boots", "slug": "wish-boots", "price": 55, "images": ["https://img.example/b.jpg"]},
            headers=admin,
        ).json()["id"]

        for _ in range(2):
            resp = api_client.client.post("/api/wishlist", json={"product_id": product_id}, headers=user)
            assert resp.status_code == 200, resp.text
            assert resp.json() == {"success": True}

        items = api_client.client.get("/api/wishlist", headers=user).json()
        matching = [i for i in items if i["product_id"] == product_id]
        assert len(matching) == 1, "adding the same product twice must store one entry"
        assert matching[0]["name"] == "Wish Boots"
        assert matching[0]["images"] == ["https://img.example/b.jpg"]

        # Admin's wishlist is separate
        assert all(i["product_id"] != product_id for i in api_client.client.get("/api/wishlist", headers=admin).json())

        resp = api_client.client.delete(f"/api/wishlist/{product_id}", headers=user)
        assert resp.json() == {"success": True}
        items = api_client.client.get("/api/wishlist", headers=user).json()
        assert all(i["product_id"] != product_id for i in items)

    def test_add_unknown_product_returns_404(self, api_client) -> None:
        resp = api_client.client.post("/api/wishlist", json={"product_id": 99999}, headers=_auth(api_client.user_token))
        assert resp.status_code == 404

    def test_add_id_matching_only_a_numeric_slug_returns_404(self, api_client) -> None:
        resp = api_client.client.post(
            "/api/admin/products",
            json={"name": "Digit Slug Cap", "slug": "777777"},
            headers=_auth(api_client.admin_token),
        )
        assert resp.status_code == 200, resp.text
        assert resp.json()["id"] != 777777

        user = _auth(api_client.user_token)
        resp = api_client.client.post("/api/wishlist", json={"product_id": 777777}, headers=user)
        assert resp.status_code == 404
        assert all(i["product_id"] != 777777 for i in api_client.client.get("/api/wishlist", headers=user).json())

    def test_add_requires_product_id(self, api_client) -> None:
        resp = api_client.client.post("/api/wishlist", json={}, headers=_auth(api_client.user_token))
        assert resp.status_code == 400
        assert resp.json()["error"]["code"] == "validation_error"
