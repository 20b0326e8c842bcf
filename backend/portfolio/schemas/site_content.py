"""Schemas for site settings, tag ordering and the contact form."""

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, EmailStr, Field, field_validator


class SettingsSaveResponse(BaseModel):
    success: bool = True
    message: str = "Settings updated successfully"
    updated: List[str] = Field(default_factory=list)


class TagOrderItem(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    tag_type: str
    tag_name: str
    display_order: int


class TagOrderUpdateRequest(BaseModel):
    tag_type: str = Field(..., min_length=1, validation_alias=AliasChoices("tag_type", "tagType"))
    tags: List[str]


class TagOrderUpdateResponse(BaseModel):
    success: bool = True
    tag_type: str
    count: int


class ContactRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    message: str = Field(..., min_length=1)

    @field_validator("name", "message")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value.strip()


class ContactResponse(BaseModel):
    success: bool = True
    message: str = "Thank you for your message! I will get back to you soon."


class ContactMessageResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    email: str
    message: str
    created_at: Optional[datetime] = None
