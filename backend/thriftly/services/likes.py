"""
Like Manager - owns the Product.likes <-> User.favorites relation

The two sides are only ever changed together, here. A toggle either
updates both records or, if the second write fails, restores the first.

Author: Thriftly
Date: 2026-10-19
"""
import logging
from dataclasses import dataclass, asdict

from thriftly.core.exceptions import NotFoundError
from thriftly.domain.product import Product
from thriftly.domain.user import User
from thriftly.repositories.base import EntityStore

logger = logging.getLogger(__name__)


@dataclass
class LikeResult:
    liked: bool
    like_count: int

    def to_dict(self) -> dict:
        return asdict(self)


class LikeManager:
    """
    Serialized like/unlike and view counting

    Each read-modify-write runs under the collections' own locks, always
    taken products first, then users. Any other writer that holds the same
    lock (ProductService, UserService) cannot interleave with a toggle.
    """

    def __init__(self, users: EntityStore[User], products: EntityStore[Product]):
        self.users = users
        self.products = products

    def _load_pair(self, product_id: int, user_id: int):
        product = self.products.find_by_id(product_id)
        if product is None:
            raise NotFoundError(f"Product {product_id} not found")
        user = self.users.find_by_id(user_id)
        if user is None:
            raise NotFoundError(f"User {user_id} not found")
        return product, user

    def toggle_like(self, product_id: int, user_id: int) -> LikeResult:
        """
        Like the product if the user hasn't, otherwise unlike it

        Returns:
            LikeResult with the new state and the product's like count

        Raises:
            NotFoundError if the product or user does not exist
        """
        with self.products.lock, self.users.lock:
            product, user = self._load_pair(product_id, user_id)
            original_product = product.model_copy(deep=True)

            liked = user_id in product.likes
            if liked:
                product.likes = [uid for uid in product.likes if uid != user_id]
                user.favorites = [pid for pid in user.favorites if pid != product_id]
            else:
                product.likes.append(user_id)
                if product_id not in user.favorites:
                    user.favorites.append(product_id)

            self.products.save(product)
            try:
                self.users.save(user)
            except Exception as e:
                logger.error(f"Like toggle failed for product {product_id} / user {user_id}, rolling back: {e}")
                self.products.save(original_product)
                raise

            return LikeResult(liked=not liked, like_count=len(product.likes))

    def is_liked(self, product_id: int, user_id: int) -> bool:
        product = self.products.find_by_id(product_id)
        return product is not None and user_id in product.likes

    def increment_view(self, product_id: int) -> Product:
        """
        Add exactly one view and persist (save refreshes updated_at)

        Raises:
            NotFoundError if the product does not exist
        """
        with self.products.lock:
            product = self.products.find_by_id(product_id)
            if product is None:
                raise NotFoundError(f"Product {product_id} not found")
            product.views += 1
            return self.products.save(product)
