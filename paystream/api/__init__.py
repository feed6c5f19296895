"""
API module containing FastAPI routes and endpoints.

This module provides the main API router that includes all sub-routers
for the payment consensus and x402 domains.
"""

from fastapi import APIRouter

from paystream.api.routes import metrics, payments, x402

router = APIRouter()

router.include_router(payments.router, prefix="/payments", tags=["Payments"])
router.include_router(x402.router, prefix="/x402", tags=["x402"])
router.include_router(metrics.router, prefix="", tags=["Monitoring"])

__all__ = ["router"]
