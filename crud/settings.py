from sqlalchemy.orm import Session

from core.site_settings import SETTING_TYPES, SiteSettings, coerce_setting, default_site_settings, serialize_setting
from models.settings import Setting
from schemas.settings import SiteSettingsUpdate


def get_setting(db: Session, key: str) -> Setting | None:
    return db.query(Setting).filter(Setting.key == key).first()


def read_site_settings(db: Session) -> SiteSettings:
    """Uncached read used by the admin panel."""
    defaults = default_site_settings()
    rows = {
        s.key: s.value
        for s in db.query(Setting).filter(Setting.key.in_(list(SETTING_TYPES))).all()
    }
    return SiteSettings(
        **{
            key: coerce_setting(rows.get(key), type_, getattr(defaults, key))
            for key, type_ in SETTING_TYPES.items()
        }
    )


def set_setting(db: Session, key: str, value) -> Setting:
    setting = get_setting(db, key)
    stored = serialize_setting(value)
    if setting is None:
        setting = Setting(key=key, value=stored)
        db.add(setting)
    else:
        setting.value = stored
    return setting


def update_site_settings(db: Session, update: SiteSettingsUpdate) -> SiteSettings:
    for key, value in update.model_dump(exclude_none=True).items():
        set_setting(db, key, value)
    db.commit()
    return read_site_settings(db)
