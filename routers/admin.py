from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException
from pydantic import ValidationError

from catalog import reload_config
from db import SessionLocal
from deps.auth import require_admin
from routers.sessions import registry
from store import reset_progress

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(require_admin)])


@router.post("/reload")
def reload_levels():
    try:
        config = reload_config()
    except (OSError, ValueError, ValidationError) as e:
        # keep serving the previous config
        logger.error("config reload failed: %s", e)
        raise HTTPException(status_code=422, detail=f"config_error: {e}")
    return {"ok": True, "groups": len(config.level_groups), "levels": len(config.levels)}


@router.post("/reset-progress")
def reset():
    with SessionLocal() as db:
        n = reset_progress(db)
    registry.clear()
    logger.warning("progress reset: %d attempts deleted", n)
    return {"ok": True, "deleted_attempts": n}
