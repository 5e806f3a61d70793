import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

import crud.settings as crud
from core.auth import require_admin, require_permissions
from core.site_settings import SettingsCache, SiteSettings, get_settings_cache
from db.database import get_db
from schemas.settings import SiteSettingsUpdate

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/admin/settings",
    tags=["admin"],
    dependencies=[Depends(require_admin), Depends(require_permissions("admin:settings"))],
)


@router.get("", response_model=SiteSettings)
def read_settings(db: Session = Depends(get_db)):
    # the admin panel always sees what is stored, never the cached snapshot
    return crud.read_site_settings(db)


@router.patch("", response_model=SiteSettings)
@router.post("", response_model=SiteSettings)
def update_settings(
    update: SiteSettingsUpdate,
    db: Session = Depends(get_db),
    cache: SettingsCache = Depends(get_settings_cache),
):
    saved = crud.update_site_settings(db, update)
    cache.invalidate()
    logger.info("Site settings updated: %s", ", ".join(update.model_dump(exclude_none=True)))
    return saved
