"""Pydantic schemas for the media library and storage usage."""

from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class MediaBase(BaseModel):
    filename: str
    original_filename: Optional[str] = None
    filepath: Optional[str] = None
    public_url: Optional[str] = None
    filesize: Optional[int] = Field(None, ge=0)
    filetype: Optional[str] = None
    thumbnail_url: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    metadata: Optional[Dict[str, Any]] = Field(
        default=None, validation_alias=AliasChoices("media_metadata", "metadata")
    )
    project_id: Optional[str] = None


class MediaCreate(MediaBase):
    pass


class MediaUpdate(BaseModel):
    filename: Optional[str] = None
    thumbnail_url: Optional[str] = None
    tags: Optional[List[str]] = None
    metadata: Optional[Dict[str, Any]] = None
    project_id: Optional[str] = None


class MediaResponse(MediaBase):
    model_config = ConfigDict(from_attributes=True)

    id: str
    uploaded_by: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class MediaListResponse(BaseModel):
    data: List[MediaResponse]
    count: int
    skip: int
    limit: int


class MediaCountResponse(BaseModel):
    total: int
    by_filetype: Dict[str, int]


class DuplicateCheckRequest(BaseModel):
    url: Optional[str] = None
    file_hash: Optional[str] = Field(None, validation_alias=AliasChoices("file_hash", "fileHash"))
    filename: Optional[str] = None
    filepath: Optional[str] = None


class DuplicateCheckResult(BaseModel):
    is_duplicate: bool
    existing_item: Optional[MediaResponse] = None
    reason: Optional[str] = None
    match_type: Optional[Literal["hash", "url", "filename", "videoId", "path"]] = None


class CleanupDuplicatesResult(BaseModel):
    message: str
    duplicates_removed: int
    duplicate_ids: List[str] = Field(default_factory=list)


class MediaInfoRequest(BaseModel):
    media_id: Optional[str] = Field(None, validation_alias=AliasChoices("media_id", "mediaId", "id"))
    url: Optional[str] = None
    include_usage: bool = Field(False, validation_alias=AliasChoices("include_usage", "includeUsage"))


class MediaInfoResult(BaseModel):
    media: MediaResponse
    usage: Optional[Dict[str, Any]] = None
    timestamp: datetime


class ProcessVideoRequest(BaseModel):
    url: str
    is_bts: bool = Field(False, validation_alias=AliasChoices("is_bts", "isBts"))


class ProcessVideoResponse(BaseModel):
    success: bool = True
    url: str
    platform: str
    id: str
    embed_url: str
    thumbnail_url: str
    title: str
    upload_date: Optional[str] = None
    data: MediaResponse


class FiletypeUsage(BaseModel):
    count: int
    bytes: int


class StorageUsageResponse(BaseModel):
    total_bytes: int
    total_gb: float
    file_count: int
    by_filetype: Dict[str, FiletypeUsage]
