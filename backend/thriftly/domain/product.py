"""
Product Domain Model

Represents a clothing listing in the Thriftly marketplace.
This is the single source of truth for product data structure.

Author: Thriftly
Date: 2026-10-19
"""
from enum import Enum
from pydantic import BaseModel, Field, field_validator
from typing import Optional, List, Union

from thriftly.domain.base import Entity


class Category(str, Enum):
    TOPS = "tops"
    BOTTOMS = "bottoms"
    DRESSES = "dresses"
    OUTERWEAR = "outerwear"
    SHOES = "shoes"
    ACCESSORIES = "accessories"
    BAGS = "bags"
    JEWELRY = "jewelry"
    ACTIVEWEAR = "activewear"
    OTHER = "other"


class Size(str, Enum):
    XXS = "XXS"
    XS = "XS"
    S = "S"
    M = "M"
    L = "L"
    XL = "XL"
    XXL = "XXL"
    XXXL = "XXXL"
    ONE_SIZE = "one-size"
    OTHER = "other"


class Condition(str, Enum):
    NEW_WITH_TAGS = "new-with-tags"
    LIKE_NEW = "like-new"
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"


class ProductStatus(str, Enum):
    AVAILABLE = "available"
    SOLD = "sold"
    RESERVED = "reserved"
    INACTIVE = "inactive"


class ProductImage(BaseModel):
    """Uploaded image reference"""
    url: str
    alt: Optional[str] = None


class Measurements(BaseModel):
    """Garment measurements (inches), all optional"""
    bust: Optional[float] = Field(None, ge=0)
    waist: Optional[float] = Field(None, ge=0)
    hips: Optional[float] = Field(None, ge=0)
    length: Optional[float] = Field(None, ge=0)
    sleeve: Optional[float] = Field(None, ge=0)
    inseam: Optional[float] = Field(None, ge=0)


class ShippingOptions(BaseModel):
    free_shipping: bool = False
    shipping_cost: float = Field(0, ge=0)
    expedited_available: bool = False


def normalize_tags(value: Union[str, List[str], None]) -> List[str]:
    """
    Lowercase, trim and de-duplicate tags

    Accepts either a list or the comma-separated string sent by forms.
    Order of first appearance is preserved.
    """
    if value is None:
        return []
    if isinstance(value, str):
        value = value.split(",")

    tags = []
    for tag in value:
        tag = str(tag).strip().lower()
        if tag and tag not in tags:
            tags.append(tag)
    return tags


class Product(Entity):
    """
    Product domain model - a single listing

    Fields:
        title / description: Listing text (searched by full-text queries)
        price: Asking price
        original_price: Retail price, for "was" display (optional)
        category / size / condition: Fixed enumerations
        subcategory / brand / color / material: Free text (optional)
        images: Ordered image references
        seller: User id of the owner (reference only)
        status: available, sold, reserved or inactive
        measurements: Optional garment measurements
        tags: Lowercased, de-duplicated keywords
        likes: User ids that liked the product, kept in sync with User.favorites
        views: Detail page view counter (never decreases)
        featured: Shown on the homepage
        negotiable: Seller accepts offers
        shipping_options: Shipping terms
    """

    title: str = Field(..., min_length=1, max_length=100)
    description: str = Field(..., min_length=1, max_length=2000)
    price: float = Field(..., ge=0)
    original_price: Optional[float] = Field(None, ge=0)

    category: Category
    subcategory: Optional[str] = None
    brand: Optional[str] = None
    size: Size
    condition: Condition
    color: Optional[str] = None
    material: Optional[str] = None

    images: List[ProductImage] = Field(default_factory=list)
    seller: int = Field(..., description="Seller user id")
    status: ProductStatus = ProductStatus.AVAILABLE
    measurements: Measurements = Field(default_factory=Measurements)
    tags: List[str] = Field(default_factory=list)

    likes: List[int] = Field(default_factory=list, description="User ids that liked this product")
    views: int = Field(0, ge=0)
    featured: bool = False
    negotiable: bool = True
    shipping_options: ShippingOptions = Field(default_factory=ShippingOptions)

    @field_validator("tags", mode="before")
    @classmethod
    def _normalize_tags(cls, value):
        return normalize_tags(value)

    @property
    def like_count(self) -> int:
        return len(self.likes)

    @property
    def image_urls(self) -> List[str]:
        return [image.url for image in self.images]

    def to_dict(self) -> dict:
        """JSON-ready dictionary with computed fields"""
        data = self.model_dump(mode="json")
        data["like_count"] = self.like_count
        return data


class ProductCreate(BaseModel):
    """Schema for creating a new product (seller and images supplied separately)"""
    title: str
    description: str
    price: float
    original_price: Optional[float] = None
    category: Category
    subcategory: Optional[str] = None
    brand: Optional[str] = None
    size: Size
    condition: Condition
    color: Optional[str] = None
    material: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    # None means "not sent" - the stored default is True
    negotiable: Optional[bool] = None
    measurements: Optional[Measurements] = None
    shipping_options: Optional[ShippingOptions] = None

    @field_validator("tags", mode="before")
    @classmethod
    def _normalize_tags(cls, value):
        return normalize_tags(value)


class ProductUpdate(BaseModel):
    """Schema for updating an existing product - only set fields are applied"""
    title: Optional[str] = None
    description: Optional[str] = None
    price: Optional[float] = None
    original_price: Optional[float] = None
    category: Optional[Category] = None
    subcategory: Optional[str] = None
    brand: Optional[str] = None
    size: Optional[Size] = None
    condition: Optional[Condition] = None
    color: Optional[str] = None
    material: Optional[str] = None
    tags: Optional[List[str]] = None
    status: Optional[ProductStatus] = None
    negotiable: Optional[bool] = None
    measurements: Optional[Measurements] = None
    shipping_options: Optional[ShippingOptions] = None

    @field_validator("tags", mode="before")
    @classmethod
    def _normalize_tags(cls, value):
        if value is None:
            return None
        return normalize_tags(value)


class ProductFilters(BaseModel):
    """Browse/search filters accepted by the listing endpoint"""
    status: Optional[ProductStatus] = ProductStatus.AVAILABLE
    category: Optional[Category] = None
    size: Optional[Size] = None
    condition: Optional[Condition] = None
    brand: Optional[str] = None
    color: Optional[str] = None
    min_price: Optional[float] = Field(None, ge=0)
    max_price: Optional[float] = Field(None, ge=0)
    search: Optional[str] = None
    seller: Optional[int] = None
    featured: Optional[bool] = None
