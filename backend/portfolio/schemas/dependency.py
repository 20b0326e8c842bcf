"""Schemas for the dependency dashboard and its widget layouts."""

from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

UpdateModeLiteral = Literal["global", "manual", "conservative", "auto-minor", "auto"]
GlobalModeLiteral = Literal["manual", "conservative", "auto-minor", "auto"]


class DependencyResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    current_version: Optional[str] = None
    latest_version: Optional[str] = None
    description: Optional[str] = None
    is_dev: bool = False
    outdated: bool = False
    has_security_update: bool = False
    vulnerability_count: int = 0
    update_mode: str = "global"
    locked: bool = False
    locked_version: Optional[str] = None
    last_checked: Optional[datetime] = None
    last_updated: Optional[datetime] = None


class DependencySummary(BaseModel):
    total: int
    outdated: int
    vulnerable: int
    locked: int
    security_score: int
    global_mode: str
    last_scan: Optional[datetime] = None


class DependencyListResponse(BaseModel):
    dependencies: List[DependencyResponse]
    summary: DependencySummary


class ScanResponse(BaseModel):
    success: bool = True
    dependencies: List[DependencyResponse]
    vulnerabilities: int
    outdated_packages: int
    security_score: int
    last_scan: datetime


class UpdateDependencyRequest(BaseModel):
    name: str = Field(..., min_length=1)
    version: Optional[str] = None


class UpdateDependencyResponse(BaseModel):
    success: bool
    name: str
    new_version: Optional[str] = None


class ApplyUpdatesRequest(BaseModel):
    mode: Optional[GlobalModeLiteral] = None


class ApplyUpdatesResponse(BaseModel):
    success: bool
    updated: int
    failed: int
    results: List[Dict[str, Any]]


class DependencyConfigRequest(BaseModel):
    update_mode: Optional[UpdateModeLiteral] = None
    locked: Optional[bool] = None
    locked_version: Optional[str] = None


class UpdateModeRequest(BaseModel):
    mode: GlobalModeLiteral


class UpdateModeResponse(BaseModel):
    success: bool = True
    mode: str


class SecurityAuditResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    audit_type: str
    severity: str
    title: str
    description: Optional[str] = None
    affected_table: Optional[str] = None
    affected_column: Optional[str] = None
    remediation: Optional[str] = None
    status: str
    audited_by: Optional[str] = None
    resolved_by: Optional[str] = None
    resolved_at: Optional[datetime] = None
    created_at: Optional[datetime] = None


class AuditListResponse(BaseModel):
    data: List[SecurityAuditResponse]
    count: int


class WidgetLayoutModel(BaseModel):
    id: str
    x: int = Field(0, ge=0)
    y: int = Field(0, ge=0)
    width: int = Field(..., gt=0)
    height: int = Field(..., gt=0)


class LayoutsRequest(BaseModel):
    layouts: Optional[List[WidgetLayoutModel]] = None


class LayoutsResponse(BaseModel):
    success: bool = True
    layouts: List[WidgetLayoutModel]


class CompactLayoutsRequest(BaseModel):
    layouts: List[WidgetLayoutModel]
    width: Optional[float] = Field(None, gt=0)
    columns: Optional[int] = Field(None, gt=0)
