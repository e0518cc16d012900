from pydantic import BaseModel, ConfigDict, field_validator
from typing import List, Optional
from datetime import datetime

# Structured data to be used for the endpoints

UNKNOWN_EMAIL = "Unknown"

# Fields that identify a device record, in fingerprint order
IDENTITY_FIELDS = ("email", "browser", "os", "deviceType", "ipAddress")


class DeviceInfoSubmission(BaseModel):
    # Presence only. Numbers and booleans become strings, missing fields stay None.
    model_config = ConfigDict(coerce_numbers_to_str=True)

    email: Optional[str] = None
    browser: Optional[str] = None
    os: Optional[str] = None
    deviceType: Optional[str] = None
    ipAddress: Optional[str] = None

    @field_validator("*", mode="before")
    @classmethod
    def booleans_to_str(cls, value):
        if isinstance(value, bool):
            return "true" if value else "false"
        return value


class DeviceInfo(BaseModel):
    id: Optional[str] = None
    email: Optional[str] = None
    browser: Optional[str] = None
    os: Optional[str] = None
    deviceType: Optional[str] = None
    ipAddress: Optional[str] = None
    timestamp: Optional[datetime] = None


class MessageResponse(BaseModel):
    message: str


class DeviceInfoListResponse(BaseModel):
    message: str
    data: List[DeviceInfo]
