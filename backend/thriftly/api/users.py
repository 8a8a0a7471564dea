"""
Users API Endpoints
Profiles, favorites and the seller dashboard

Author: Thriftly
Date: 2026-10-19
"""
from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from thriftly.api.dependencies import Services, get_current_user, get_services, raise_http
from thriftly.core.exceptions import MarketplaceError
from thriftly.domain.user import User

router = APIRouter()


class ProfileUpdate(BaseModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    bio: Optional[str] = None
    location: Optional[str] = None
    phone: Optional[str] = None


# /me routes are declared before /{user_id} so they are matched first

@router.get("/me/favorites")
async def get_my_favorites(
    user: User = Depends(get_current_user),
    services: Services = Depends(get_services),
):
    """Liked products with their sellers; deleted products appear as bare ids"""
    try:
        return {"favorites": services.users.get_favorites(user.id)}
    except MarketplaceError as e:
        raise_http(e)


@router.get("/me/products")
async def get_my_products(
    user: User = Depends(get_current_user),
    services: Services = Depends(get_services),
):
    try:
        products = services.users.get_my_products(user.id)
    except MarketplaceError as e:
        raise_http(e)
    return {"products": [product.to_dict() for product in products]}


@router.get("/me/dashboard")
async def get_dashboard(
    user: User = Depends(get_current_user),
    services: Services = Depends(get_services),
):
    """
    Seller dashboard

    Returns stats (total/active/sold products, total views and likes) and
    the latest listings and favorites.
    """
    try:
        return services.users.get_dashboard(user.id)
    except MarketplaceError as e:
        raise_http(e)


@router.put("/me")
async def update_me(
    body: ProfileUpdate,
    user: User = Depends(get_current_user),
    services: Services = Depends(get_services),
):
    try:
        updated = services.users.update_profile(user.id, body.model_dump(exclude_unset=True))
    except MarketplaceError as e:
        raise_http(e)
    return {"user": updated.to_dict()}


@router.get("/{user_id}")
async def get_user_profile(user_id: int, services: Services = Depends(get_services)):
    """Public profile with the user's listings"""
    try:
        return services.users.get_profile(user_id)
    except MarketplaceError as e:
        raise_http(e)
