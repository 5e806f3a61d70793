import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

import crud.content as crud
from core.errors import FeatureDisabled
from core.rate_limit import rate_limited
from core.site_settings import SettingsCache, get_settings_cache
from db.database import get_db
from schemas.content import PrayerRequestCreate, PrayerRequestReceipt

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/prayer-requests", tags=["prayer-requests"])


@router.post(
    "",
    response_model=PrayerRequestReceipt,
    status_code=201,
    dependencies=[Depends(rate_limited("strict"))],
)
def submit_prayer_request(
    prayer_request: PrayerRequestCreate,
    db: Session = Depends(get_db),
    cache: SettingsCache = Depends(get_settings_cache),
):
    if not cache.is_feature_enabled("prayerRequests"):
        raise FeatureDisabled("Prayer requests are currently disabled")
    db_request = crud.create_prayer_request(db=db, prayer_request=prayer_request)
    logger.info("Prayer request %s received", db_request.id)
    return db_request
