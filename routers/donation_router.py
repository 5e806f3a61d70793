from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

import crud.donations as crud
from core.errors import FeatureDisabled
from core.rate_limit import rate_limited
from core.site_settings import SettingsCache, get_settings_cache
from db.database import get_db
from schemas.goal import DonationCreate, DonationResponse

router = APIRouter(prefix="/donations", tags=["donations"])


@router.post(
    "",
    response_model=DonationResponse,
    status_code=201,
    dependencies=[Depends(rate_limited("donations"))],
)
def create_donation(
    donation: DonationCreate,
    db: Session = Depends(get_db),
    cache: SettingsCache = Depends(get_settings_cache),
):
    if not cache.is_feature_enabled("donations"):
        raise FeatureDisabled("Donations are currently disabled")
    return crud.create_donation(db=db, donation=donation)
