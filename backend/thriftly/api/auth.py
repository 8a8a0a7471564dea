"""
Authentication API endpoints
- Registration
- Login (email or username)
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel

from thriftly.api.dependencies import Services, get_current_user, get_services, raise_http
from thriftly.core.auth import create_access_token
from thriftly.core.exceptions import MarketplaceError
from thriftly.domain.user import User

logger = logging.getLogger(__name__)

router = APIRouter()


# =============================================================================
# Pydantic Models
# =============================================================================

class LoginRequest(BaseModel):
    identifier: str
    password: str


class RegisterRequest(BaseModel):
    username: str
    email: str
    password: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None


# =============================================================================
# Endpoints
# =============================================================================

@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(body: RegisterRequest, services: Services = Depends(get_services)):
    """
    Create an account and return an access token

    Returns 409 when the email or username is taken, 422 for invalid fields.
    """
    try:
        user = services.users.create_user(body.model_dump())
    except MarketplaceError as e:
        raise_http(e)

    return {
        "token": create_access_token(user.id),
        "user": user.to_dict(),
    }


@router.post("/login")
async def login(body: LoginRequest, services: Services = Depends(get_services)):
    """Exchange credentials for an access token"""
    user = services.users.authenticate_user(body.identifier, body.password)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
            headers={"WWW-Authenticate": "Bearer"}
        )

    logger.info(f"User {user.id} logged in")
    return {
        "token": create_access_token(user.id),
        "user": user.to_dict(),
    }


@router.get("/me")
async def me(user: User = Depends(get_current_user)):
    return {"user": user.to_dict()}
