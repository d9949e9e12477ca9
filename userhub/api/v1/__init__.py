"""API v1 routes."""

from fastapi import APIRouter

from userhub.api.v1 import auth, customers, health, users

router = APIRouter()
router.include_router(health.router, tags=["server"])
router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(users.router, prefix="/users", tags=["users"])
router.include_router(customers.router, prefix="/customers", tags=["customers"])
