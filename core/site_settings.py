"""Process-wide TTL cache over the key/value ``settings`` table.

Readers trigger refreshes lazily; there is no background refresh. Read errors
never reach callers: they are logged and the defaults are served, so a fresh
deployment without a settings table still renders with every feature on.
"""
import json
import logging
import time
from typing import Callable, Literal

from pydantic import BaseModel
from sqlalchemy import select
from sqlalchemy.orm import Session

from core.config import settings as app_config
from db.database import SessionLocal
from models.settings import Setting

logger = logging.getLogger(__name__)

CACHE_TTL_SECONDS = 60.0

SettingType = Literal["string", "boolean", "number", "json"]
Feature = Literal["comments", "prayerRequests", "donations"]

SETTING_TYPES: dict[str, SettingType] = {
    "siteName": "string",
    "siteDescription": "string",
    "siteUrl": "string",
    "adminEmail": "string",
    "allowComments": "boolean",
    "allowPrayerRequests": "boolean",
    "allowDonations": "boolean",
    "maintenanceMode": "boolean",
}

FEATURE_FLAGS: dict[str, str] = {
    "comments": "allowComments",
    "prayerRequests": "allowPrayerRequests",
    "donations": "allowDonations",
}


class SiteSettings(BaseModel):
    siteName: str = "Kylee's Blog"
    siteDescription: str = (
        "Follow Kylee's Bible study journey, support her goals, and join her community."
    )
    siteUrl: str = ""
    adminEmail: str = ""
    allowComments: bool = True
    allowPrayerRequests: bool = True
    allowDonations: bool = True
    maintenanceMode: bool = False


def default_site_settings() -> SiteSettings:
    return SiteSettings(siteUrl=app_config.SITE_URL, adminEmail=app_config.ADMIN_EMAIL)


def coerce_setting(value: str | None, type_: SettingType, default):
    """Convert a stored string to its declared type; empty values give ``default``."""
    if not value:
        return default
    try:
        if type_ == "boolean":
            return value == "true"
        if type_ == "number":
            return float(value)
        if type_ == "json":
            return json.loads(value)
    except ValueError:
        logger.warning("Stored setting %r is not a valid %s; using default", value, type_)
        return default
    return value


def serialize_setting(value) -> str:
    """Inverse of ``coerce_setting``: everything is stored as a string."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (dict, list)):
        return json.dumps(value)
    if value is None:
        return ""
    return str(value)


class SettingsCache:
    def __init__(
        self,
        session_factory: Callable[[], Session],
        ttl: float = CACHE_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._session_factory = session_factory
        self._ttl = ttl
        self._clock = clock
        self._snapshot: SiteSettings | None = None
        self._timestamp = 0.0
        self.reads = 0  # number of database round trips issued

    @property
    def is_fresh(self) -> bool:
        return self._snapshot is not None and (self._clock() - self._timestamp) < self._ttl

    def get(self) -> SiteSettings:
        if self.is_fresh:
            return self._snapshot

        defaults = default_site_settings()
        try:
            rows = self._read(list(SETTING_TYPES))
        except Exception:
            logger.exception("Error fetching site settings; serving defaults")
            return defaults

        values = {
            key: coerce_setting(rows.get(key), type_, getattr(defaults, key))
            for key, type_ in SETTING_TYPES.items()
        }
        self._snapshot = SiteSettings(**values)
        self._timestamp = self._clock()
        return self._snapshot

    def invalidate(self) -> None:
        self._snapshot = None
        self._timestamp = 0.0

    def is_feature_enabled(self, feature: str) -> bool:
        key = FEATURE_FLAGS.get(feature)
        if key is None:
            return False
        return getattr(self.get(), key)

    def is_maintenance_mode(self) -> bool:
        # Always read through: toggling maintenance must not wait for the TTL.
        default = default_site_settings().maintenanceMode
        try:
            rows = self._read(["maintenanceMode"])
        except Exception:
            logger.exception("Error checking maintenance mode")
            return default
        return coerce_setting(rows.get("maintenanceMode"), "boolean", default)

    def _read(self, keys: list[str]) -> dict[str, str]:
        self.reads += 1
        db = self._session_factory()
        try:
            result = db.execute(select(Setting.key, Setting.value).where(Setting.key.in_(keys)))
            return {key: value for key, value in result}
        finally:
            db.close()


settings_cache = SettingsCache(SessionLocal)


def get_settings_cache() -> SettingsCache:
    return settings_cache
