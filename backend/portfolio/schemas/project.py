"""Pydantic schemas for projects, their main media and BTS images."""

import datetime as dt
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ProjectFields(BaseModel):
    """
    Writable project fields.

    Everything is optional at the schema level; the service reports every
    missing required field in one 400 instead of a field-by-field 422.
    """

    model_config = ConfigDict(extra="ignore")

    title: Optional[str] = None
    description: Optional[str] = None
    content: Optional[str] = None
    image: Optional[str] = None
    thumbnail_url: Optional[str] = None
    category: Optional[str] = None
    type: Optional[str] = None
    role: Optional[str] = None
    date: Optional[str] = None
    project_date: Optional[dt.date] = None
    client: Optional[str] = None
    url: Optional[str] = None
    video_url: Optional[str] = None
    special_notes: Optional[str] = None
    featured: Optional[bool] = None
    is_public: Optional[bool] = None
    publish_date: Optional[dt.datetime] = None


class ProjectCreate(ProjectFields):
    pass


class ProjectUpdate(ProjectFields):
    pass


class BtsImageResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    project_id: str
    image_url: str
    caption: Optional[str] = None
    size: Optional[str] = None
    aspect_ratio: Optional[str] = None
    category: Optional[str] = None
    sort_order: Optional[int] = None
    is_video: Optional[bool] = None
    video_url: Optional[str] = None
    video_platform: Optional[str] = None
    video_id: Optional[str] = None
    created_at: Optional[dt.datetime] = None


class MainMediaResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    project_id: str
    image_url: Optional[str] = None
    caption: Optional[str] = None
    is_video: bool = False
    video_url: Optional[str] = None
    video_platform: Optional[str] = None
    video_id: Optional[str] = None
    display_order: int = 0
    is_thumbnail_hidden: bool = False
    created_at: Optional[dt.datetime] = None


class ProjectResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    description: Optional[str] = None
    content: Optional[str] = None
    image: Optional[str] = None
    thumbnail_url: Optional[str] = None
    category: Optional[str] = None
    type: Optional[str] = None
    role: Optional[str] = None
    date: Optional[str] = None
    project_date: Optional[dt.date] = None
    client: Optional[str] = None
    url: Optional[str] = None
    video_url: Optional[str] = None
    video_platform: Optional[str] = None
    video_id: Optional[str] = None
    special_notes: Optional[str] = None
    featured: bool = False
    is_public: bool = True
    publish_date: Optional[dt.datetime] = None
    created_at: Optional[dt.datetime] = None
    updated_at: Optional[dt.datetime] = None
    tags: List[str] = Field(default_factory=list)


class ProjectDetailResponse(ProjectResponse):
    bts_images: List[BtsImageResponse] = Field(default_factory=list)
    main_media: List[MainMediaResponse] = Field(default_factory=list)


class ProjectListResponse(BaseModel):
    data: List[ProjectResponse]
    count: int


class ProjectSearchResponse(BaseModel):
    success: bool = True
    data: List[ProjectResponse]
    count: int
    query: Optional[str] = None
    category: Optional[str] = None
    role: Optional[str] = None


class ProjectDeleteResponse(BaseModel):
    success: bool = True
    id: str
    deleted_bts_images: int = 0


# Main media


class MainMediaCreateRequest(BaseModel):
    project_id: str
    media: List[str] = Field(default_factory=list)
    replace_existing: bool = False


class MainMediaSaveResponse(BaseModel):
    success: bool = True
    message: str
    data: List[MainMediaResponse] = Field(default_factory=list)


class SetThumbnailRequest(BaseModel):
    project_id: str
    video_media_id: int
    image_url: str


class ToggleVisibilityRequest(BaseModel):
    media_id: int
    # StrictBool: "true" or 1 are rejected, not coerced
    is_hidden: bool = Field(..., strict=True)


class MainMediaItemResponse(BaseModel):
    success: bool = True
    data: MainMediaResponse


# BTS images


class BtsImagesCreateRequest(BaseModel):
    project_id: str
    images: List[str] = Field(default_factory=list)
    caption: Optional[str] = None
    category: Optional[str] = None
    replace_existing: bool = False


class BtsImagesSaveResponse(BaseModel):
    success: bool = True
    message: str
    data: List[BtsImageResponse] = Field(default_factory=list)
    duplicates_skipped: int = 0
    deleted: int = 0


class BtsImageDeleteRequest(BaseModel):
    project_id: str
    image_url: str


class BtsImageDeleteResponse(BaseModel):
    success: bool = True
    deleted_count: int


class SetThumbnailData(BaseModel):
    video: MainMediaResponse
    hidden_thumbnail: MainMediaResponse


class SetThumbnailResponse(BaseModel):
    success: bool = True
    data: SetThumbnailData
