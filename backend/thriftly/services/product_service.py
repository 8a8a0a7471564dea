"""
Product Service
Listing, browsing, ownership-checked updates and likes

Author: Thriftly
Date: 2026-10-19
"""
import logging
import re
from typing import Dict, Iterable, List, Optional, Union

from pydantic import ValidationError as SchemaError

from thriftly.core.config import settings
from thriftly.core.exceptions import (
    ForbiddenError, NotFoundError, ValidationError, describe_schema_error,
)
from thriftly.domain.product import (
    Product, ProductCreate, ProductUpdate, ProductFilters, ProductImage, ProductStatus,
)
from thriftly.domain.query import Query
from thriftly.domain.user import User
from thriftly.repositories.base import EntityStore
from thriftly.services.likes import LikeManager
from thriftly.services.pagination import paginate, resolve_sort, sort_entities
from thriftly.services.relations import RelationResolver

logger = logging.getLogger(__name__)

HOMEPAGE_LIMIT = 8
RELATED_LIMIT = 4


def build_listing_query(filters: ProductFilters) -> Query:
    """
    Translate browse filters into a store query

    Brand and color are case-insensitive substring patterns; user input is
    escaped so it is always matched literally.
    """
    query = Query()
    if filters.status is not None:
        query = query.equals("status", filters.status)
    if filters.category is not None:
        query = query.equals("category", filters.category)
    if filters.size is not None:
        query = query.equals("size", filters.size)
    if filters.condition is not None:
        query = query.equals("condition", filters.condition)
    if filters.seller is not None:
        query = query.equals("seller", filters.seller)
    if filters.featured is not None:
        query = query.equals("featured", filters.featured)
    if filters.brand:
        query = query.pattern("brand", re.escape(filters.brand))
    if filters.color:
        query = query.pattern("color", re.escape(filters.color))
    if filters.min_price is not None or filters.max_price is not None:
        query = query.between("price", gte=filters.min_price, lte=filters.max_price)
    if filters.search:
        query = query.search(filters.search.strip())
    return query


class ProductService:
    """
    Service for product listings

    Handles:
    - Creating listings for an existing seller
    - Browse/search with filters, sort and pagination
    - Detail view (view counting, related products)
    - Updates and deletes restricted to the seller
    - Like toggling through the LikeManager
    """

    def __init__(
        self,
        users: EntityStore[User],
        products: EntityStore[Product],
        resolver: Optional[RelationResolver] = None,
        likes: Optional[LikeManager] = None,
        default_page_size: Optional[int] = None,
    ):
        self.users = users
        self.products = products
        self.resolver = resolver or RelationResolver(users, products)
        self.likes = likes or LikeManager(users, products)
        self.default_page_size = default_page_size or settings.DEFAULT_PAGE_SIZE

    # =========================================================================
    # Create
    # =========================================================================

    def create_product(
        self,
        fields: Union[ProductCreate, dict],
        seller_id: int,
        image_refs: Iterable[Union[ProductImage, dict]] = (),
    ) -> Product:
        """
        Create a listing owned by `seller_id`

        Raises:
            NotFoundError if the seller does not exist
            ValidationError if the fields are invalid
        """
        if self.users.find_by_id(seller_id) is None:
            raise NotFoundError(f"User {seller_id} not found")

        try:
            data = fields if isinstance(fields, ProductCreate) else ProductCreate.model_validate(fields)
            payload = data.model_dump(exclude_none=True)
            payload["images"] = [
                image if isinstance(image, ProductImage) else ProductImage.model_validate(image)
                for image in image_refs
            ]
            payload["seller"] = seller_id
            product = self.products.create(payload)
        except SchemaError as e:
            raise ValidationError(describe_schema_error(e))

        logger.info(f"Product {product.id} created by user {seller_id}")
        return product

    # =========================================================================
    # Read
    # =========================================================================

    def list_products(
        self,
        filters: Optional[Union[ProductFilters, dict]] = None,
        sort_by: Optional[str] = None,
        page: int = 1,
        page_size: Optional[int] = None,
    ) -> Dict:
        """
        Browse listings

        Returns:
            {
                "items": [...],           # seller resolved
                "total_pages": int,
                "current_page": int,
                "total_products": int
            }
        """
        try:
            if filters is None:
                filters = ProductFilters()
            elif not isinstance(filters, ProductFilters):
                filters = ProductFilters.model_validate(filters)
        except SchemaError as e:
            raise ValidationError(describe_schema_error(e))

        query = build_listing_query(filters)
        key, direction = resolve_sort(sort_by)
        ordered = sort_entities(self.products.find(query), key, direction)
        result = paginate(ordered, page, page_size or self.default_page_size)

        return {
            "items": self.resolver.resolve_products(result.items),
            "total_pages": result.total_pages,
            "current_page": result.current_page,
            "total_products": result.total,
        }

    def get_product(self, product_id: int, resolve_relations: bool = False) -> Union[Product, dict, None]:
        """
        Look up one product

        Returns:
            None if absent; the Product itself, or its detail view (seller
            resolved with the detail projection) when resolve_relations is set
        """
        product = self.products.find_by_id(product_id)
        if product is None:
            return None
        if resolve_relations:
            return self.resolver.resolve_product(product, detail=True)
        return product

    def view_product(self, product_id: int) -> Dict:
        """
        Product detail page: counts the view, resolves the seller and
        attaches related listings

        Raises:
            NotFoundError
        """
        product = self.likes.increment_view(product_id)
        return {
            "product": self.resolver.resolve_product(product, detail=True),
            "related_products": self.resolver.resolve_products(self.related_products(product)),
        }

    def related_products(self, product: Product, limit: int = RELATED_LIMIT) -> List[Product]:
        """Newest available listings in the same category, excluding `product`"""
        query = (
            Query()
            .not_equals("id", product.id)
            .equals("category", product.category)
            .equals("status", ProductStatus.AVAILABLE)
        )
        return sort_entities(self.products.find(query))[:limit]

    def featured_products(self, limit: int = HOMEPAGE_LIMIT) -> List[dict]:
        """Homepage listings: featured ones, or the most recent when none are featured"""
        available = Query().equals("status", ProductStatus.AVAILABLE)
        products = self.products.find(available.equals("featured", True))
        if not products:
            products = self.products.find(available)
        return self.resolver.resolve_products(sort_entities(products)[:limit])

    # =========================================================================
    # Update / delete
    # =========================================================================

    def _owned_product(self, product_id: int, requester_id: int, action: str) -> Product:
        product = self.products.find_by_id(product_id)
        if product is None:
            raise NotFoundError(f"Product {product_id} not found")
        if product.seller != requester_id:
            logger.warning(f"User {requester_id} tried to {action} product {product_id} owned by {product.seller}")
            raise ForbiddenError(f"Not authorized to {action} this product")
        return product

    def update_product(
        self,
        product_id: int,
        requester_id: int,
        patch: Union[ProductUpdate, dict],
        new_images: Iterable[Union[ProductImage, dict]] = (),
    ) -> Product:
        """
        Apply a partial update; new images are appended to the existing ones

        Identity, seller, likes and views cannot be changed through a patch.
        Nothing is written when validation fails.

        Raises:
            NotFoundError, ForbiddenError, ValidationError
        """
        # Read and write under the collection lock so a concurrent like toggle
        # is never overwritten with a stale likes list
        with self.products.lock:
            product = self._owned_product(product_id, requester_id, "update")
            try:
                patch = patch if isinstance(patch, ProductUpdate) else ProductUpdate.model_validate(patch)
                merged = {**product.model_dump(), **patch.model_dump(exclude_unset=True)}
                merged["images"] = [image.model_dump() for image in product.images] + [
                    image.model_dump() if isinstance(image, ProductImage) else ProductImage.model_validate(image).model_dump()
                    for image in new_images
                ]
                updated = Product.model_validate(merged)
            except SchemaError as e:
                raise ValidationError(describe_schema_error(e))

            return self.products.save(updated)

    def delete_product(self, product_id: int, requester_id: int) -> bool:
        """
        Remove a listing. The caller deletes its images from blob storage.

        Users' favorites pointing at the product are left as they are.

        Raises:
            NotFoundError, ForbiddenError
        """
        with self.products.lock:
            self._owned_product(product_id, requester_id, "delete")
            removed = self.products.delete_by_id(product_id)
        if removed is not None:
            logger.info(f"Product {product_id} deleted by user {requester_id}")
        return removed is not None

    # =========================================================================
    # Likes
    # =========================================================================

    def toggle_like(self, product_id: int, user_id: int) -> Dict:
        """
        Returns:
            {"liked": bool, "like_count": int}
        """
        return self.likes.toggle_like(product_id, user_id).to_dict()
