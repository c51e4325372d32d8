"""Health check and client configuration endpoints."""

from __future__ import annotations

from fastapi import APIRouter

router = APIRouter(prefix="/api/v1")


@router.get("/health")
async def health() -> dict:
    """Basic health check."""
    from cidade_alerta.main import VERSION, get_config, get_store

    config = get_config()
    return {
        "status": "ok",
        "version": VERSION,
        "storage_backend": config.storage.backend,
        "reports": len(get_store().query()),
    }


@router.get("/config")
async def get_client_config() -> dict:
    """Configuration endpoint for the mobile app.

    The app calls this on startup so the proximity radius and marker
    bucket size are server-controlled. Distances are in meters, bucket
    size in degrees.
    """
    from cidade_alerta.main import get_config

    geo = get_config().geo
    return {
        "nearby_radius_m": geo.nearby_radius_m,
        "query_radius_m": geo.query_radius_m,
        "bucket_size_deg": geo.bucket_size_deg,
    }
