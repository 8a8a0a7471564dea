"""
Domain Layer - Business Entities

Pydantic models for users and products, plus the query language used to
look them up in an EntityStore.

Author: Thriftly
Date: 2026-10-19
"""
from thriftly.domain.base import Entity
from thriftly.domain.user import User, UserCreate, UserUpdate, Rating
from thriftly.domain.product import (
    Product, ProductCreate, ProductUpdate, ProductFilters, ProductImage,
    Category, Size, Condition, ProductStatus, Measurements, ShippingOptions,
)
from thriftly.domain.query import Query

__all__ = [
    'Entity', 'User', 'UserCreate', 'UserUpdate', 'Rating',
    'Product', 'ProductCreate', 'ProductUpdate', 'ProductFilters', 'ProductImage',
    'Category', 'Size', 'Condition', 'ProductStatus', 'Measurements', 'ShippingOptions',
    'Query',
]
