"""Schemas for health, setup, database validation and system status."""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    status: str
    service: str
    version: str
    environment: str
    timestamp: datetime


class HealthLiteResponse(BaseModel):
    status: str


class SetupResult(BaseModel):
    success: bool
    message: str
    tables: List[str] = Field(default_factory=list)


class UnifiedSetupResponse(BaseModel):
    success: bool
    setup_types: List[str]
    results: Dict[str, SetupResult]


class TableStatusResponse(BaseModel):
    name: str
    display_name: str
    required: bool
    exists: bool
    status: str
    missing_columns: List[str] = Field(default_factory=list)


class DatabaseValidationResponse(BaseModel):
    status: str
    version: int
    tables: List[TableStatusResponse]
    missing_tables: List[str]
    incomplete_tables: List[str]
    counts: Dict[str, int]
    checked_at: datetime


class DatabaseDiagnosticsResponse(BaseModel):
    dialect: str
    pool: Dict[str, int]
    tables: Dict[str, Optional[int]]
    checked_at: datetime


class SystemInfo(BaseModel):
    status: str
    healthy: bool
    timestamp: datetime
    checks_requested: List[str]
    format: str


class SystemStatusResponse(BaseModel):
    system: SystemInfo
    results: Dict[str, Dict[str, Any]]
    summary: Optional[Dict[str, str]] = None
