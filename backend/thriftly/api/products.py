"""
Products API Endpoints
Browse, search, create, update, delete and like clothing listings

Author: Thriftly
Date: 2026-10-19
"""
import json
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile, status

from thriftly.api.dependencies import Services, get_current_user, get_services, raise_http
from thriftly.core.exceptions import MarketplaceError
from thriftly.domain.user import User
from thriftly.services.image_service import ImageUpload

logger = logging.getLogger(__name__)

router = APIRouter()


# =============================================================================
# Helpers
# =============================================================================

def _parse_json_field(name: str, raw: Optional[str]) -> Optional[dict]:
    """Nested objects (measurements, shipping options) arrive as JSON strings"""
    if raw is None or raw == "":
        return None
    try:
        value = json.loads(raw)
    except json.JSONDecodeError:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"{name} must be a JSON object"
        )
    if not isinstance(value, dict):
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"{name} must be a JSON object"
        )
    return value


async def _read_uploads(files: Optional[List[UploadFile]]) -> List[ImageUpload]:
    uploads = []
    for file in files or []:
        if not file.filename:
            continue
        uploads.append(ImageUpload(
            content=await file.read(),
            filename=file.filename,
            mime_type=file.content_type or "",
        ))
    return uploads


# =============================================================================
# Read endpoints
# =============================================================================

@router.get("/")
async def get_products(
    category: Optional[str] = Query(None, description="Filter by category"),
    size: Optional[str] = Query(None, description="Filter by size"),
    condition: Optional[str] = Query(None, description="Filter by condition"),
    brand: Optional[str] = Query(None, description="Brand contains (case-insensitive)"),
    color: Optional[str] = Query(None, description="Color contains (case-insensitive)"),
    min_price: Optional[float] = Query(None, ge=0),
    max_price: Optional[float] = Query(None, ge=0),
    search: Optional[str] = Query(None, description="Search title, description, brand and tags"),
    sort_by: Optional[str] = Query("newest", description="newest, oldest, price_low, price_high, popular"),
    page: int = Query(1, ge=1),
    limit: Optional[int] = Query(None, ge=1, le=100),
    services: Services = Depends(get_services),
):
    """
    Browse available listings

    Returns:
        {"items": [...], "total_pages", "current_page", "total_products"}
    """
    filters = {
        "category": category,
        "size": size,
        "condition": condition,
        "brand": brand,
        "color": color,
        "min_price": min_price,
        "max_price": max_price,
        "search": search,
    }
    try:
        return services.products.list_products(
            {key: value for key, value in filters.items() if value not in (None, "")},
            sort_by=sort_by,
            page=page,
            page_size=limit,
        )
    except MarketplaceError as e:
        raise_http(e)


@router.get("/featured")
async def get_featured_products(
    limit: int = Query(8, ge=1, le=50),
    services: Services = Depends(get_services),
):
    """Homepage listings"""
    return {"items": services.products.featured_products(limit)}


@router.get("/{product_id}")
async def get_product(product_id: int, services: Services = Depends(get_services)):
    """
    Product detail page

    Counts one view and returns the product with its seller resolved plus
    up to four related listings.
    """
    try:
        return services.products.view_product(product_id)
    except MarketplaceError as e:
        raise_http(e)


# =============================================================================
# Write endpoints
# =============================================================================

@router.post("/", status_code=status.HTTP_201_CREATED)
async def create_product(
    title: str = Form(...),
    description: str = Form(...),
    price: float = Form(...),
    category: str = Form(...),
    size: str = Form(...),
    condition: str = Form(...),
    original_price: Optional[float] = Form(None),
    subcategory: Optional[str] = Form(None),
    brand: Optional[str] = Form(None),
    color: Optional[str] = Form(None),
    material: Optional[str] = Form(None),
    tags: Optional[str] = Form(None, description="Comma-separated"),
    negotiable: Optional[bool] = Form(None),
    measurements: Optional[str] = Form(None, description="JSON object"),
    shipping_options: Optional[str] = Form(None, description="JSON object"),
    images: Optional[List[UploadFile]] = File(None),
    user: User = Depends(get_current_user),
    services: Services = Depends(get_services),
):
    """
    Create a listing owned by the authenticated user

    Images are validated and uploaded before the product is stored; if the
    product is rejected the uploaded images are removed again.
    """
    fields = {
        "title": title,
        "description": description,
        "price": price,
        "category": category,
        "size": size,
        "condition": condition,
        "original_price": original_price,
        "subcategory": subcategory,
        "brand": brand,
        "color": color,
        "material": material,
        "tags": tags,
        "negotiable": negotiable,
        "measurements": _parse_json_field("measurements", measurements),
        "shipping_options": _parse_json_field("shipping_options", shipping_options),
    }

    uploads = await _read_uploads(images)
    try:
        image_refs = services.images.upload_all(uploads, alt=title)
    except MarketplaceError as e:
        raise_http(e)

    try:
        product = services.products.create_product(
            {key: value for key, value in fields.items() if value is not None},
            user.id,
            image_refs,
        )
    except MarketplaceError as e:
        services.images.delete_all(image.url for image in image_refs)
        raise_http(e)

    return {"product": services.products.resolver.resolve_product(product)}


@router.put("/{product_id}")
async def update_product(
    product_id: int,
    title: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    price: Optional[float] = Form(None),
    original_price: Optional[float] = Form(None),
    category: Optional[str] = Form(None),
    subcategory: Optional[str] = Form(None),
    size: Optional[str] = Form(None),
    condition: Optional[str] = Form(None),
    brand: Optional[str] = Form(None),
    color: Optional[str] = Form(None),
    material: Optional[str] = Form(None),
    tags: Optional[str] = Form(None, description="Comma-separated"),
    status_value: Optional[str] = Form(None, alias="status"),
    negotiable: Optional[bool] = Form(None),
    measurements: Optional[str] = Form(None, description="JSON object"),
    shipping_options: Optional[str] = Form(None, description="JSON object"),
    images: Optional[List[UploadFile]] = File(None),
    user: User = Depends(get_current_user),
    services: Services = Depends(get_services),
):
    """
    Update a listing (seller only)

    Only the fields sent are changed; new images are appended.
    """
    patch = {
        "title": title,
        "description": description,
        "price": price,
        "original_price": original_price,
        "category": category,
        "subcategory": subcategory,
        "size": size,
        "condition": condition,
        "brand": brand,
        "color": color,
        "material": material,
        "tags": tags,
        "status": status_value,
        "negotiable": negotiable,
        "measurements": _parse_json_field("measurements", measurements),
        "shipping_options": _parse_json_field("shipping_options", shipping_options),
    }
    patch = {key: value for key, value in patch.items() if value is not None}

    existing = services.products.get_product(product_id)
    if existing is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Product not found")
    if existing.seller != user.id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not authorized to update this product")

    uploads = await _read_uploads(images)
    if len(existing.images) + len(uploads) > services.images.max_images:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"A product can have at most {services.images.max_images} images"
        )

    try:
        new_images = services.images.upload_all(uploads, alt=title or existing.title)
    except MarketplaceError as e:
        raise_http(e)

    try:
        product = services.products.update_product(product_id, user.id, patch, new_images)
    except MarketplaceError as e:
        services.images.delete_all(image.url for image in new_images)
        raise_http(e)

    return {"product": services.products.resolver.resolve_product(product)}


@router.delete("/{product_id}")
async def delete_product(
    product_id: int,
    user: User = Depends(get_current_user),
    services: Services = Depends(get_services),
):
    """
    Delete a listing (seller only) and its stored images

    Image deletion is best effort; failures are logged, not returned as errors.
    """
    product = services.products.get_product(product_id)
    if product is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Product not found")

    try:
        services.products.delete_product(product_id, user.id)
    except MarketplaceError as e:
        raise_http(e)

    services.images.delete_all(product.image_urls)
    return {"message": "Product deleted successfully"}


@router.post("/{product_id}/like")
async def toggle_like(
    product_id: int,
    user: User = Depends(get_current_user),
    services: Services = Depends(get_services),
):
    """
    Like or unlike a listing

    Returns:
        {"liked": bool, "like_count": int}
    """
    try:
        return services.products.toggle_like(product_id, user.id)
    except MarketplaceError as e:
        raise_http(e)
