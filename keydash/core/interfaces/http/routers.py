"""API router configuration."""

from fastapi import APIRouter

from keydash.modules.api_keys.interfaces.router import router as api_keys_router
from keydash.modules.summarizer.interfaces.router import router as summarizer_router
from keydash.modules.users.interfaces.router import router as users_router

api_router = APIRouter()

# Sessions and users
api_router.include_router(users_router)

# API key dashboard
api_router.include_router(api_keys_router)

# Key consumers
api_router.include_router(summarizer_router)
