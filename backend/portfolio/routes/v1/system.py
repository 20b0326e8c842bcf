# backend/portfolio/routes/v1/system.py
"""
Setup, database validation and unified status routes - API v1

Endpoints:
    GET /system/status             → Unified status (database, tables, storage, api)
    POST /setup/unified            → Create tables for the selected setup types (admin)
    GET /database/validate         → Compare the database with the registered tables (admin)
    GET /database/diagnostics      → Dialect, pool status and row counts (admin)
"""

import asyncio
import logging

from fastapi import APIRouter, Depends, Query, Response

from ...api.dependencies.auth import require_admin
from ...api.dependencies.services import (
    get_database_validator,
    get_setup_service,
    get_system_status_service,
)
from ...core.constants import STATUS_CACHE_CONTROL
from ...schemas.system import (
    DatabaseDiagnosticsResponse,
    DatabaseValidationResponse,
    SystemStatusResponse,
    UnifiedSetupResponse,
)
from ...services.database_validator import DatabaseValidator
from ...services.setup_service import SetupService, parse_setup_types
from ...services.system_status_service import SystemStatusService, parse_checks

logger = logging.getLogger(__name__)

# V1 router - mounted at /api/v1
router = APIRouter(tags=["system-v1"])


@router.get("/system/status", response_model=SystemStatusResponse)
async def system_status(
    response: Response,
    checks: str = Query("all"),
    format: str = Query("detailed"),
    service: SystemStatusService = Depends(get_system_status_service),
) -> SystemStatusResponse:
    """
    Run the requested checks and fold them into one overall status.

    ``checks`` is ``all`` or a comma-separated subset of
    ``database,tables,storage,api``; ``format=simple`` adds a summary map.
    """
    payload = await service.get_status(parse_checks(checks), format)
    response.headers["Cache-Control"] = STATUS_CACHE_CONTROL
    return SystemStatusResponse(**payload)


@router.post("/setup/unified", response_model=UnifiedSetupResponse)
async def unified_setup(
    types: str = Query("all"),
    user_id: str = Depends(require_admin),
    service: SetupService = Depends(get_setup_service),
) -> UnifiedSetupResponse:
    setup_types = parse_setup_types(types)
    results = await asyncio.to_thread(service.run, setup_types)
    success = all(result["success"] for result in results.values())
    logger.info(
        "Unified setup run",
        extra={"evt": "setup_unified", "by": user_id, "types": setup_types, "success": success},
    )
    return UnifiedSetupResponse(success=success, setup_types=setup_types, results=results)


@router.get("/database/validate", response_model=DatabaseValidationResponse)
async def validate_database(
    _: str = Depends(require_admin),
    validator: DatabaseValidator = Depends(get_database_validator),
) -> DatabaseValidationResponse:
    report = await asyncio.to_thread(validator.validate)
    return DatabaseValidationResponse(**report.to_dict())


@router.get("/database/diagnostics", response_model=DatabaseDiagnosticsResponse)
async def database_diagnostics(
    _: str = Depends(require_admin),
    validator: DatabaseValidator = Depends(get_database_validator),
) -> DatabaseDiagnosticsResponse:
    return DatabaseDiagnosticsResponse(**await asyncio.to_thread(validator.diagnostics))
