"""
Thriftly - Backend API
Secondhand clothing marketplace
"""
import logging
from pathlib import Path

from dotenv import load_dotenv
from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware

# Load environment variables
env_path = Path(__file__).parent.parent / '.env'
load_dotenv(env_path)

from thriftly.api import auth, products, users
from thriftly.api.dependencies import Services, get_services
from thriftly.core.config import settings

logging.basicConfig(
    level=logging.DEBUG if settings.API_DEBUG else logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title=settings.API_TITLE,
    version=settings.API_VERSION,
    description=settings.API_DESCRIPTION,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_allowed_origins(),
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)

# Include API routers
app.include_router(auth.router, prefix="/api/v1/auth", tags=["Authentication"])
app.include_router(products.router, prefix="/api/v1/products", tags=["Products"])
app.include_router(users.router, prefix="/api/v1/users", tags=["Users"])


@app.get("/")
async def root():
    """Root endpoint - API status"""
    return {
        "message": "Thriftly API - Sustainable fashion marketplace",
        "status": "online",
        "version": settings.API_VERSION,
    }


@app.get("/health")
async def health(services: Services = Depends(get_services)):
    """Health check - tests store connectivity"""
    try:
        services.stores.users.ping()
        store_status = "connected"
        store_error = None
    except Exception as e:
        logger.error(f"Store health check failed: {e}")
        store_status = "disconnected"
        store_error = str(e)

    return {
        "status": "healthy" if store_status == "connected" else "degraded",
        "service": "thriftly-api",
        "version": settings.API_VERSION,
        "store": {
            "backend": settings.STORE_BACKEND,
            "status": store_status,
            "error": store_error,
        },
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("thriftly.main:app", host=settings.API_HOST, port=settings.API_PORT, reload=settings.API_DEBUG)
