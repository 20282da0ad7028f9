"""Root API router.

Health endpoints are mounted at the root; everything else lives under
``/api/v1``: the auth routes plus every discovered feature module.
"""

from fastapi import APIRouter

from gatekeeper.api.health import router as health_router
from gatekeeper.core.auth.routes import router as auth_router
from gatekeeper.modules import discover_modules


API_V1_PREFIX = "/api/v1"


def build_api_router() -> APIRouter:
    """Assemble the health, auth and module routers."""
    v1_router = APIRouter(prefix=API_V1_PREFIX)
    v1_router.include_router(auth_router)
    for module_router in discover_modules():
        v1_router.include_router(module_router)

    api_router = APIRouter()
    api_router.include_router(health_router)
    api_router.include_router(v1_router)
    return api_router


api_router = build_api_router()
