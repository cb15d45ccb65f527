"""
Project Log Service.

This service turns recent git activity into project-log entries:
- Scans a static registry of local project checkouts
- Detects commits made since the start of the previous day
- Classifies each project's first commit into a log category
- Serves generated entries and per-project status over a JSON API
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from datetime import date, datetime, timezone
from typing import Dict, List, Mapping, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from config.settings import settings
from shared.models import ChangeSet, LogEntry, ProjectRegistration
from services.project_log.entries import build_log_entry
from services.project_log.scanner import ChangeScanner

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.monitoring.log_level),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

ENDPOINTS = (
    ("POST", "/api/auto-generate-log", "generate log entries"),
    ("GET", "/api/project-status", "per-project change status"),
    ("GET", "/api/health", "health check"),
)


# Request/Response models
class GenerateLogRequest(BaseModel):
    """Request model for generating log entries."""
    today: Optional[date] = Field(
        None, description="Last day of the scan window (defaults to the server's local date)"
    )

    model_config = {
        "json_schema_extra": {
            "example": {
                "today": "2026-10-19"
            }
        }
    }


class GenerateLogResponse(BaseModel):
    """Response model for generated log entries."""
    success: bool = True
    logs: List[LogEntry] = Field(default_factory=list)
    projects: List[str] = Field(default_factory=list, description="Names of projects with changes")
    count: int = 0


class ProjectStatus(BaseModel):
    """Change status of a single project."""
    name: str
    has_changes: bool = Field(..., alias="hasChanges")
    commits: int = Field(default=0, ge=0)
    files: int = Field(default=0, ge=0)

    model_config = {"populate_by_name": True}


class ProjectStatusResponse(BaseModel):
    """Response model for the project status poll."""
    today: date
    status: Dict[str, ProjectStatus] = Field(default_factory=dict)


class HealthResponse(BaseModel):
    """Response model for the health check."""
    status: str = "ok"
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    projects: int = 0


class ProjectLogService:
    """Scans the project registry and builds log entries."""

    def __init__(
        self,
        registry: Optional[Mapping[str, ProjectRegistration]] = None,
        scanner: Optional[ChangeScanner] = None,
    ):
        self.registry = registry if registry is not None else settings.project_registry()
        self.scanner = scanner or ChangeScanner(
            lookback_days=settings.git.lookback_days,
            command_timeout=settings.git.command_timeout,
        )

    async def scan_project(self, project: ProjectRegistration, today: date) -> Optional[ChangeSet]:
        """Scan one project without blocking the event loop."""
        return await asyncio.to_thread(self.scanner.scan, project.path, today)

    async def generate_logs(self, today: date) -> GenerateLogResponse:
        """Scan every registered project in order and build one entry per project with commits."""
        logs: List[LogEntry] = []
        projects_with_changes: List[str] = []

        for project_id, project in self.registry.items():
            changes = await self.scan_project(project, today)
            entry = build_log_entry(project_id, project, changes, today)
            if entry is None:
                continue
            logs.append(entry)
            projects_with_changes.append(project.name)

        logger.info(
            f"Generated {len(logs)} log entries for {today.isoformat()} "
            f"({len(self.registry)} projects scanned)"
        )
        return GenerateLogResponse(
            success=True,
            logs=logs,
            projects=projects_with_changes,
            count=len(logs),
        )

    async def project_status(self, today: date) -> ProjectStatusResponse:
        """Report commit and file counts per project, without building entries."""
        status: Dict[str, ProjectStatus] = {}

        for project_id, project in self.registry.items():
            changes = await self.scan_project(project, today)
            status[project_id] = ProjectStatus(
                name=project.name,
                has_changes=changes is not None and changes.has_changes,
                commits=len(changes.commits) if changes else 0,
                files=len(changes.files_changed) if changes else 0,
            )

        return ProjectStatusResponse(today=today, status=status)

    def health(self) -> HealthResponse:
        """Liveness only: never touches the filesystem."""
        return HealthResponse(status="ok", projects=len(self.registry))


# Service instance
project_log_service = ProjectLogService()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Log the startup banner."""
    logger.info("=" * 40)
    logger.info(f"{settings.app_name} service")
    logger.info(f"Listening on http://{settings.service.host}:{settings.service.port}")
    logger.info(f"Monitored projects: {len(project_log_service.registry)}")
    for method, path, description in ENDPOINTS:
        logger.info(f"  {method:<4} {path:<24} - {description}")
    logger.info("=" * 40)
    yield
    logger.info("Project log service stopped")


# Initialize FastAPI app
app = FastAPI(
    title="Project Log Service",
    description="Git change detection and project-log generation",
    version=settings.version,
    lifespan=lifespan,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.security.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Malformed bodies use the same failure envelope as any other error."""
    logger.error(f"Invalid request to {request.url.path}: {exc}")
    return JSONResponse(
        status_code=500,
        content={"success": False, "error": str(exc)},
    )


# API endpoints
@app.post("/api/auto-generate-log", response_model=GenerateLogResponse)
async def auto_generate_log(request: Optional[GenerateLogRequest] = None):
    """Generate log entries for every project with commits in the scan window."""
    try:
        today = request.today if request and request.today else date.today()
        return await project_log_service.generate_logs(today)

    except Exception as e:
        logger.error(f"Failed to generate logs: {e}")
        return JSONResponse(
            status_code=500,
            content={"success": False, "error": str(e)},
        )


@app.get("/api/project-status", response_model=ProjectStatusResponse)
async def project_status():
    """Get today's change status for every registered project."""
    return await project_log_service.project_status(date.today())


@app.get("/api/health", response_model=HealthResponse)
async def health_check():
    """Health check endpoint."""
    return project_log_service.health()
