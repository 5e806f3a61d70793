from typing import Optional

from pydantic import BaseModel, EmailStr, field_validator


class SiteSettingsUpdate(BaseModel):
    """Partial update of the persisted site settings; omitted keys are untouched."""

    siteName: Optional[str] = None
    siteDescription: Optional[str] = None
    siteUrl: Optional[str] = None
    adminEmail: Optional[EmailStr] = None
    allowComments: Optional[bool] = None
    allowPrayerRequests: Optional[bool] = None
    allowDonations: Optional[bool] = None
    maintenanceMode: Optional[bool] = None

    @field_validator("siteName")
    @classmethod
    def site_name_not_blank(cls, value):
        if value is not None and not value.strip():
            raise ValueError("Site name is required")
        return value.strip() if value else value


class MaintenanceStatus(BaseModel):
    maintenanceMode: bool
