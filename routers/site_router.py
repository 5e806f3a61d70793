import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Response
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

import crud.content as crud
from core.site_settings import SettingsCache, SiteSettings, get_settings_cache
from db.database import get_db
from schemas.content import SiteContentResponse
from schemas.settings import MaintenanceStatus

logger = logging.getLogger(__name__)

router = APIRouter(tags=["site"])

NO_CACHE_HEADERS = {
    "Cache-Control": "no-store, no-cache, must-revalidate",
    "Pragma": "no-cache",
    "Expires": "0",
}


@router.get("/site-content", response_model=List[SiteContentResponse])
def read_site_content(
    key: Optional[str] = None,
    page: Optional[str] = None,
    section: Optional[str] = None,
    db: Session = Depends(get_db),
):
    try:
        return crud.get_site_content(db=db, key=key, page=page, section=section)
    except SQLAlchemyError:
        # pages render their built-in copy when content is unavailable
        logger.exception("Error fetching site content")
        return []


@router.get("/settings/public", response_model=SiteSettings)
def read_public_settings(cache: SettingsCache = Depends(get_settings_cache)):
    return cache.get()


@router.get("/maintenance", response_model=MaintenanceStatus)
def read_maintenance(response: Response, cache: SettingsCache = Depends(get_settings_cache)):
    response.headers.update(NO_CACHE_HEADERS)
    return {"maintenanceMode": cache.is_maintenance_mode()}


@router.get("/health")
def health(db: Session = Depends(get_db)):
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError:
        logger.exception("Health check failed")
        return JSONResponse(status_code=503, content={"status": "unhealthy", "database": "disconnected"})
    return {"status": "healthy", "database": "connected"}
