from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Any, Optional


_TEXT_FIELDS = ("name", "title", "company_name", "avatar_url")


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str):
        value = value.strip()
        return value or None
    return value


class ProfileRecord(BaseModel):
    """Raw business card row as returned by the profile store."""
    model_config = ConfigDict(extra="ignore")

    name: Optional[str] = None
    title: Optional[str] = None
    company_name: Optional[str] = None
    avatar_url: Optional[str] = None
    custom_fields: Optional[Any] = Field(
        default=None, description="Free-form container; the avatar payload lives under 'profileImage'"
    )

    @field_validator(*_TEXT_FIELDS, mode="before")
    @classmethod
    def blank_to_none(cls, value: Any) -> Any:
        return _blank_to_none(value)

    def profile_image_payload(self) -> Any:
        if isinstance(self.custom_fields, dict):
            return self.custom_fields.get("profileImage")
        return None


class ProfileMetadata(BaseModel):
    """Normalized preview metadata. Every field is a non-empty string or None."""
    model_config = ConfigDict(frozen=True)

    name: Optional[str] = None
    title: Optional[str] = None
    company_name: Optional[str] = None
    avatar_url: Optional[str] = None

    @field_validator(*_TEXT_FIELDS, mode="before")
    @classmethod
    def blank_to_none(cls, value: Any) -> Any:
        return _blank_to_none(value)
