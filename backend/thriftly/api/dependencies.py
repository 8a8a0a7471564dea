"""
Shared FastAPI dependencies

- get_services(): process-wide service container (stores, hasher, services)
- get_current_user(): bearer token -> User
- raise_http(): domain error -> HTTPException

Author: Thriftly
Date: 2026-10-19
"""
import logging
from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials

from thriftly.connectors.blob_storage import BlobStore, InMemoryBlobStore, SupabaseBlobStore
from thriftly.core.auth import PasswordHasher, decode_access_token, security
from thriftly.core.config import Settings, settings as default_settings
from thriftly.core.exceptions import (
    DuplicateUserError, ForbiddenError, MarketplaceError, NotFoundError, ValidationError,
)
from thriftly.domain.user import User
from thriftly.repositories import Stores, build_stores
from thriftly.services.image_service import ImageService
from thriftly.services.likes import LikeManager
from thriftly.services.product_service import ProductService
from thriftly.services.relations import RelationResolver
from thriftly.services.user_service import UserService

logger = logging.getLogger(__name__)


@dataclass
class Services:
    stores: Stores
    users: UserService
    products: ProductService
    images: ImageService


def build_services(
    settings: Optional[Settings] = None,
    stores: Optional[Stores] = None,
    hasher: Optional[PasswordHasher] = None,
    blob_store: Optional[BlobStore] = None,
) -> Services:
    """Wire stores and services together; every piece can be overridden"""
    settings = settings or default_settings
    stores = stores or build_stores(settings)
    hasher = hasher or PasswordHasher(settings.get_password_schemes())

    if blob_store is None:
        if settings.supabase_configured:
            blob_store = SupabaseBlobStore(
                settings.SUPABASE_URL,
                settings.SUPABASE_SERVICE_ROLE_KEY,
                settings.STORAGE_BUCKET,
            )
        else:
            logger.warning("Supabase not configured, product images are kept in memory")
            blob_store = InMemoryBlobStore()

    resolver = RelationResolver(stores.users, stores.products)
    likes = LikeManager(stores.users, stores.products)
    return Services(
        stores=stores,
        users=UserService(stores.users, stores.products, hasher, resolver),
        products=ProductService(
            stores.users,
            stores.products,
            resolver,
            likes,
            default_page_size=settings.DEFAULT_PAGE_SIZE,
        ),
        images=ImageService(
            blob_store,
            max_bytes=settings.MAX_IMAGE_BYTES,
            max_images=settings.MAX_IMAGES_PER_PRODUCT,
        ),
    )


_services: Optional[Services] = None


def get_services() -> Services:
    """Lazily built singleton; tests replace it through dependency_overrides"""
    global _services
    if _services is None:
        _services = build_services()
    return _services


def raise_http(error: MarketplaceError):
    """Translate a domain error into the matching HTTP status"""
    if isinstance(error, NotFoundError):
        code = status.HTTP_404_NOT_FOUND
    elif isinstance(error, ForbiddenError):
        code = status.HTTP_403_FORBIDDEN
    elif isinstance(error, ValidationError):
        code = status.HTTP_422_UNPROCESSABLE_ENTITY
    elif isinstance(error, DuplicateUserError):
        code = status.HTTP_409_CONFLICT
    else:
        code = status.HTTP_400_BAD_REQUEST
    raise HTTPException(status_code=code, detail=error.message)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    services: Services = Depends(get_services),
) -> User:
    """
    Dependency that resolves the bearer token to a stored user

    Usage:
        @router.get("/me")
        async def me(user: User = Depends(get_current_user)):
            return user.to_dict()
    """
    if not credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
            headers={"WWW-Authenticate": "Bearer"}
        )

    payload = decode_access_token(credentials.credentials)
    try:
        user_id = int(payload.sub)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token payload",
            headers={"WWW-Authenticate": "Bearer"}
        )

    user = services.stores.users.find_by_id(user_id)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User no longer exists",
            headers={"WWW-Authenticate": "Bearer"}
        )
    return user
