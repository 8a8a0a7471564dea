"""
Relation Resolver

Replaces id references between products and users with value snapshots
of the referenced entity's public fields. Resolution is read-only and a
reference whose target no longer exists is left as the raw id, so
orphaned references stay detectable.

Author: Thriftly
Date: 2026-10-19
"""
import logging
from typing import Dict, Iterable, List, Optional, Sequence, Union

from thriftly.domain.product import Product
from thriftly.domain.user import User
from thriftly.repositories.base import EntityStore

logger = logging.getLogger(__name__)

# Public user projections
SELLER_SUMMARY_FIELDS = ("id", "username", "first_name", "last_name", "avatar", "rating")
SELLER_DETAIL_FIELDS = SELLER_SUMMARY_FIELDS + ("location", "created_at")

# Product projection used when resolving a user's favorites
FAVORITE_FIELDS = ("id", "title", "price", "images", "category", "status")

RESOLVABLE_PRODUCT_FIELDS = ("seller", "likes")

Reference = Union[dict, int]


def project(entity: Union[User, Product], fields: Sequence[str]) -> dict:
    """JSON-ready copy of `fields` only"""
    return entity.model_dump(mode="json", include=set(fields))


class RelationResolver:
    """
    Builds denormalized product/user views

    Usage:
        resolver = RelationResolver(users, products)
        view = resolver.resolve_product(product, detail=True)
        view["seller"]  # dict snapshot, or the raw id when the seller is gone
    """

    def __init__(self, users: EntityStore[User], products: EntityStore[Product]):
        self.users = users
        self.products = products

    def _user_reference(
        self,
        user_id: int,
        fields: Sequence[str],
        cache: Optional[Dict[int, Optional[User]]] = None,
    ) -> Reference:
        if cache is not None and user_id in cache:
            user = cache[user_id]
        else:
            user = self.users.find_by_id(user_id)
            if cache is not None:
                cache[user_id] = user

        if user is None:
            logger.warning(f"Dangling user reference {user_id}")
            return user_id
        return project(user, fields)

    def resolve_product(
        self,
        product: Product,
        fields: Iterable[str] = ("seller",),
        detail: bool = False,
        _cache: Optional[Dict[int, Optional[User]]] = None,
    ) -> dict:
        """
        Product view with the requested references resolved

        Args:
            product: Product to resolve (not modified)
            fields: Any of "seller", "likes"
            detail: Use the detail projection (adds location, created_at)

        Returns:
            Product.to_dict() with resolved references
        """
        fields = set(fields)
        unknown = fields - set(RESOLVABLE_PRODUCT_FIELDS)
        if unknown:
            raise ValueError(f"Cannot resolve product fields: {sorted(unknown)}")

        projection = SELLER_DETAIL_FIELDS if detail else SELLER_SUMMARY_FIELDS
        view = product.to_dict()

        if "seller" in fields:
            view["seller"] = self._user_reference(product.seller, projection, _cache)
        if "likes" in fields:
            view["likes"] = [
                self._user_reference(user_id, SELLER_SUMMARY_FIELDS, _cache)
                for user_id in product.likes
            ]
        return view

    def resolve_products(
        self,
        products: Iterable[Product],
        fields: Iterable[str] = ("seller",),
    ) -> List[dict]:
        """Resolve many products, loading each referenced user once"""
        fields = tuple(fields)
        cache: Dict[int, Optional[User]] = {}
        return [self.resolve_product(product, fields, _cache=cache) for product in products]

    def resolve_favorites(self, user: User, resolve_seller: bool = False) -> List[Reference]:
        """
        The user's favorites as product summaries

        Favorites pointing at deleted products stay as raw ids.
        """
        cache: Dict[int, Optional[User]] = {}
        resolved: List[Reference] = []
        for product_id in user.favorites:
            product = self.products.find_by_id(product_id)
            if product is None:
                logger.warning(f"Dangling favorite {product_id} on user {user.id}")
                resolved.append(product_id)
                continue

            summary = project(product, FAVORITE_FIELDS)
            if resolve_seller:
                summary["seller"] = self._user_reference(product.seller, SELLER_SUMMARY_FIELDS, cache)
            resolved.append(summary)
        return resolved
