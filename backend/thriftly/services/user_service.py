"""
User Service
Registration, authentication, profiles, favorites and the seller dashboard

Author: Thriftly
Date: 2026-10-19
"""
import logging
from typing import Dict, List, Optional, Union

from pydantic import ValidationError as SchemaError

from thriftly.core.exceptions import (
    DuplicateUserError, NotFoundError, ValidationError, describe_schema_error,
)
from thriftly.domain.base import utcnow
from thriftly.domain.product import Product, ProductStatus
from thriftly.domain.query import Query
from thriftly.domain.user import User, UserCreate, UserUpdate
from thriftly.repositories.base import EntityStore
from thriftly.services.pagination import sort_entities
from thriftly.services.relations import RelationResolver

logger = logging.getLogger(__name__)

# Items shown per dashboard section
DASHBOARD_PREVIEW_SIZE = 6


class UserService:
    """
    Service for marketplace members

    Handles:
    - Registration with duplicate email/username detection
    - Login by email or username
    - Public profile and profile updates
    - Favorites and the seller dashboard
    """

    def __init__(
        self,
        users: EntityStore[User],
        products: EntityStore[Product],
        hasher,
        resolver: Optional[RelationResolver] = None,
    ):
        self.users = users
        self.products = products
        self.hasher = hasher
        self.resolver = resolver or RelationResolver(users, products)

    # =========================================================================
    # Registration & authentication
    # =========================================================================

    def create_user(self, fields: Union[UserCreate, dict]) -> User:
        """
        Register a new user

        Raises:
            ValidationError if the fields are invalid
            DuplicateUserError if the email or username is taken
        """
        try:
            data = fields if isinstance(fields, UserCreate) else UserCreate.model_validate(fields)
        except SchemaError as e:
            raise ValidationError(describe_schema_error(e))

        password_hash = self.hasher.hash(data.password)

        # Uniqueness check and insert happen under one lock
        with self.users.lock:
            existing = self.users.find_one(Query().equals("email", data.email))
            if existing is None:
                existing = self.users.find_one(Query().equals("username", data.username))
            if existing is not None:
                raise DuplicateUserError("User already exists with this email or username")

            try:
                user = self.users.create({
                    "username": data.username,
                    "email": data.email,
                    "password_hash": password_hash,
                    "first_name": data.first_name,
                    "last_name": data.last_name,
                })
            except SchemaError as e:
                raise ValidationError(describe_schema_error(e))

        logger.info(f"Registered user {user.id} ({user.username})")
        return user

    def authenticate_user(self, identifier: str, password: str) -> Optional[User]:
        """
        Check credentials; identifier is an email or a username

        Returns:
            The user (last_active refreshed) or None on any mismatch
        """
        identifier = (identifier or "").strip()
        if not identifier or not password:
            return None

        if "@" in identifier:
            user = self.users.find_one(Query().equals("email", identifier.lower()))
        else:
            user = self.users.find_one(Query().equals("username", identifier))

        if user is None or not self.hasher.verify(password, user.password_hash):
            logger.info("Failed login attempt")
            return None

        # Re-read under the lock so favorites changed since the lookup survive
        with self.users.lock:
            current = self.users.find_by_id(user.id)
            if current is None:
                return None
            current.last_active = utcnow()
            return self.users.save(current)

    # =========================================================================
    # Profiles
    # =========================================================================

    def get_user(self, user_id: int) -> User:
        user = self.users.find_by_id(user_id)
        if user is None:
            raise NotFoundError(f"User {user_id} not found")
        return user

    def update_profile(self, user_id: int, patch: Union[UserUpdate, dict]) -> User:
        """
        Apply the provided profile fields; fields left out are untouched

        Raises:
            NotFoundError, ValidationError
        """
        try:
            patch = patch if isinstance(patch, UserUpdate) else UserUpdate.model_validate(patch)
        except SchemaError as e:
            raise ValidationError(describe_schema_error(e))

        with self.users.lock:
            user = self.get_user(user_id)
            try:
                updated = User.model_validate({**user.model_dump(), **patch.model_dump(exclude_unset=True)})
            except SchemaError as e:
                raise ValidationError(describe_schema_error(e))

            return self.users.save(updated)

    def get_profile(self, user_id: int) -> Dict:
        """Public profile with the user's listings, newest first"""
        user = self.get_user(user_id)
        products = sort_entities(self.products.find(Query().equals("seller", user_id)))
        return {
            "user": user.to_dict(),
            "favorites": self.resolver.resolve_favorites(user),
            "products": self.resolver.resolve_products(products),
            "product_count": len(products),
        }

    # =========================================================================
    # Favorites & dashboard
    # =========================================================================

    def get_favorites(self, user_id: int) -> List:
        """Favorites with each product's seller resolved"""
        user = self.get_user(user_id)
        return self.resolver.resolve_favorites(user, resolve_seller=True)

    def get_my_products(self, user_id: int) -> List[Product]:
        self.get_user(user_id)
        return sort_entities(self.products.find(Query().equals("seller", user_id)))

    def get_dashboard(self, user_id: int) -> Dict:
        """
        Seller dashboard

        Returns:
            {
                "user": {...},
                "stats": {total_products, active_products, sold_products, total_views, total_likes},
                "products": latest listings,
                "favorites": latest favorites
            }
        """
        user = self.get_user(user_id)
        products = self.get_my_products(user_id)

        stats = {
            "total_products": len(products),
            "active_products": sum(1 for p in products if p.status == ProductStatus.AVAILABLE),
            "sold_products": sum(1 for p in products if p.status == ProductStatus.SOLD),
            "total_views": sum(p.views for p in products),
            "total_likes": sum(p.like_count for p in products),
        }

        return {
            "user": user.to_dict(),
            "stats": stats,
            "products": [p.to_dict() for p in products[:DASHBOARD_PREVIEW_SIZE]],
            "favorites": self.resolver.resolve_favorites(user)[:DASHBOARD_PREVIEW_SIZE],
        }
