"""
Unit tests for the User and Product domain models

Author: Thriftly
Date: 2026-10-19
"""
import pytest
from pydantic import ValidationError

from thriftly.domain.product import (
    Condition, Product, ProductCreate, ProductStatus, ProductUpdate, normalize_tags,
)
from thriftly.domain.user import User, UserCreate


def product_data(**overrides) -> dict:
    data = {
        "id": 1,
        "title": "Silk Scarf",
        "description": "Hand rolled edges",
        "price": 20,
        "category": "accessories",
        "size": "one-size",
        "condition": "like-new",
        "seller": 1,
    }
    data.update(overrides)
    return data


class TestProduct:
    """Test Product validation and defaults"""

    def test_defaults(self):
        product = Product.model_validate(product_data())

        assert product.status == ProductStatus.AVAILABLE
        assert product.condition == Condition.LIKE_NEW
        assert product.negotiable is True
        assert product.featured is False
        assert product.views == 0
        assert product.likes == []
        assert product.shipping_options.shipping_cost == 0

    @pytest.mark.parametrize("field,value", [
        ("category", "hats"),
        ("size", "XXXXL"),
        ("condition", "mint"),
        ("status", "deleted"),
        ("price", -1),
        ("title", ""),
        ("title", "x" * 101),
        ("description", "x" * 2001),
    ])
    def test_rejects_invalid_fields(self, field, value):
        with pytest.raises(ValidationError):
            Product.model_validate(product_data(**{field: value}))

    def test_tags_are_normalized(self):
        product = Product.model_validate(product_data(tags=" Silk, silk ,SUMMER,, "))

        assert product.tags == ["silk", "summer"]

    def test_to_dict_includes_like_count(self):
        product = Product.model_validate(product_data(likes=[2, 3]))

        data = product.to_dict()

        assert data["like_count"] == 2
        assert data["category"] == "accessories"
        assert isinstance(data["created_at"], str)


class TestUser:
    """Test User validation and serialization"""

    def test_email_is_lowercased(self):
        user = User(id=1, username="alex", email="  Alex@Example.COM ", password_hash="h")

        assert user.email == "alex@example.com"

    def test_invalid_email_rejected(self):
        with pytest.raises(ValidationError):
            User(id=1, username="alex", email="not-an-email", password_hash="h")

    def test_username_length(self):
        with pytest.raises(ValidationError):
            User(id=1, username="ab", email="a@b.com", password_hash="h")

    def test_to_dict_hides_password_hash(self):
        user = User(id=1, username="alex", email="a@b.com", password_hash="h", first_name="Alex", last_name="Kim")

        data = user.to_dict()

        assert "password_hash" not in data
        assert data["full_name"] == "Alex Kim"
        assert data["rating"] == {"average": 0.0, "count": 0}

    def test_user_create_password_minimum(self):
        with pytest.raises(ValidationError):
            UserCreate(username="alex", email="a@b.com", password="12345")


class TestSchemas:

    def test_product_create_leaves_negotiable_unset(self):
        data = ProductCreate.model_validate(product_data())

        assert data.negotiable is None

    def test_product_update_tracks_only_sent_fields(self):
        patch = ProductUpdate(price=10)

        assert patch.model_dump(exclude_unset=True) == {"price": 10}


def test_normalize_tags_accepts_none():
    assert normalize_tags(None) == []
