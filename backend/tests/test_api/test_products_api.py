"""
API tests for product endpoints

Author: Thriftly
Date: 2026-10-19
"""
import json

import pytest


def listing_form(**overrides) -> dict:
    form = {
        "title": "Vintage Denim Jacket",
        "description": "Classic 90s denim jacket",
        "price": "45",
        "category": "outerwear",
        "size": "M",
        "condition": "good",
        "brand": "Levi's",
        "tags": "vintage, denim",
    }
    form.update(overrides)
    return form


def jpeg(name: str = "front.jpg"):
    return ("images", (name, b"\xff\xd8\xff" + b"0" * 32, "image/jpeg"))


@pytest.fixture
def seller_headers(auth_headers, seller):
    return auth_headers(seller.id)


@pytest.fixture
def buyer_headers(auth_headers, buyer):
    return auth_headers(buyer.id)


class TestCreateProduct:
    """POST /api/v1/products/"""

    def test_create_with_images(self, client, seller_headers, seller, blob_store):
        response = client.post(
            "/api/v1/products/",
            data=listing_form(measurements=json.dumps({"length": 26})),
            files=[jpeg("front.jpg"), jpeg("back.jpg")],
            headers=seller_headers,
        )

        assert response.status_code == 201
        product = response.json()["product"]
        assert product["seller"]["id"] == seller.id
        assert product["seller"]["username"] == "seller"
        assert product["tags"] == ["vintage", "denim"]
        assert product["measurements"]["length"] == 26
        assert product["negotiable"] is True
        assert len(product["images"]) == 2
        assert len(blob_store.blobs) == 2

    def test_requires_authentication(self, client):
        response = client.post("/api/v1/products/", data=listing_form())

        assert response.status_code == 401

    def test_invalid_enum_removes_uploaded_images(self, client, seller_headers, blob_store):
        response = client.post(
            "/api/v1/products/",
            data=listing_form(category="hats"),
            files=[jpeg()],
            headers=seller_headers,
        )

        assert response.status_code == 422
        assert blob_store.blobs == {}

    def test_non_image_upload_rejected(self, client, seller_headers):
        response = client.post(
            "/api/v1/products/",
            data=listing_form(),
            files=[("images", ("notes.txt", b"hello", "text/plain"))],
            headers=seller_headers,
        )

        assert response.status_code == 422

    def test_malformed_measurements(self, client, seller_headers):
        response = client.post(
            "/api/v1/products/",
            data=listing_form(measurements="{not json"),
            headers=seller_headers,
        )

        assert response.status_code == 422


class TestBrowse:
    """GET /api/v1/products/"""

    def test_filters_and_pagination(self, client, product_service, seller, sample_product_data):
        for price in (10, 20, 30):
            product_service.create_product({**sample_product_data, "price": price}, seller.id)
        product_service.create_product({**sample_product_data, "category": "tops"}, seller.id)

        response = client.get(
            "/api/v1/products/",
            params={"category": "outerwear", "min_price": 15, "sort_by": "price_low", "limit": 1, "page": 2},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["total_products"] == 2
        assert body["total_pages"] == 2
        assert body["current_page"] == 2
        assert body["items"][0]["price"] == 30
        assert body["items"][0]["seller"]["username"] == "seller"

    def test_invalid_filter_value(self, client):
        response = client.get("/api/v1/products/", params={"condition": "mint"})

        assert response.status_code == 422

    def test_featured(self, client, product):
        response = client.get("/api/v1/products/featured")

        assert [p["id"] for p in response.json()["items"]] == [product.id]


class TestDetail:
    """GET /api/v1/products/{id}"""

    def test_detail_counts_a_view(self, client, product):
        client.get(f"/api/v1/products/{product.id}")
        response = client.get(f"/api/v1/products/{product.id}")

        body = response.json()
        assert body["product"]["views"] == 2
        assert body["product"]["seller"]["location"] == "Portland"
        assert body["related_products"] == []

    def test_missing_product(self, client):
        assert client.get("/api/v1/products/999").status_code == 404


class TestUpdateAndDelete:
    """PUT and DELETE /api/v1/products/{id}"""

    def test_seller_updates_price_and_appends_image(self, client, product, seller_headers):
        response = client.put(
            f"/api/v1/products/{product.id}",
            data={"price": "30", "status": "reserved"},
            files=[jpeg()],
            headers=seller_headers,
        )

        assert response.status_code == 200
        updated = response.json()["product"]
        assert updated["price"] == 30
        assert updated["status"] == "reserved"
        assert len(updated["images"]) == 1
        assert updated["title"] == product.title
        assert updated["seller"]["location"] == "Portland"

    def test_other_user_is_forbidden(self, client, stores, product, buyer_headers):
        response = client.put(f"/api/v1/products/{product.id}", data={"price": "1"}, headers=buyer_headers)

        assert response.status_code == 403
        assert stores.products.find_by_id(product.id).price == product.price

    def test_update_missing_product(self, client, seller_headers):
        response = client.put("/api/v1/products/999", data={"price": "1"}, headers=seller_headers)

        assert response.status_code == 404

    def test_delete_removes_product_and_images(self, client, stores, seller_headers, blob_store):
        created = client.post(
            "/api/v1/products/", data=listing_form(), files=[jpeg()], headers=seller_headers,
        ).json()["product"]

        response = client.delete(f"/api/v1/products/{created['id']}", headers=seller_headers)

        assert response.status_code == 200
        assert stores.products.find_by_id(created["id"]) is None
        assert blob_store.blobs == {}

    def test_delete_by_other_user_is_forbidden(self, client, stores, product, buyer_headers):
        response = client.delete(f"/api/v1/products/{product.id}", headers=buyer_headers)

        assert response.status_code == 403
        assert stores.products.find_by_id(product.id) is not None


class TestLike:
    """POST /api/v1/products/{id}/like"""

    def test_toggle(self, client, product, buyer_headers):
        first = client.post(f"/api/v1/products/{product.id}/like", headers=buyer_headers)
        second = client.post(f"/api/v1/products/{product.id}/like", headers=buyer_headers)

        assert first.json() == {"liked": True, "like_count": 1}
        assert second.json() == {"liked": False, "like_count": 0}

    def test_like_missing_product(self, client, buyer_headers):
        assert client.post("/api/v1/products/999/like", headers=buyer_headers).status_code == 404
