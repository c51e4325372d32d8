"""Authority dashboard endpoint."""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Header

from cidade_alerta.core.dashboard import aggregate
from cidade_alerta.core.errors import ForbiddenError, NotFoundError

router = APIRouter(prefix="/api/v1")

log = structlog.get_logger()


@router.get("/dashboard")
async def dashboard(authorization: str | None = Header(default=None)) -> dict:
    """Summary counts over every report. Authority users only."""
    from cidade_alerta.main import get_config, get_identity, get_store

    identity = get_identity()
    user_id = identity.verify(authorization)
    try:
        allowed = identity.is_authority(user_id)
    except NotFoundError:
        # Unknown users are refused like citizens.
        allowed = False
    if not allowed:
        log.info("dashboard_forbidden", user=user_id)
        raise ForbiddenError("only authority users can access the dashboard")

    metrics = aggregate(get_store().query(), recent_limit=get_config().geo.recent_limit)
    return metrics.to_dict()
