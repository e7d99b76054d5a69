"""FastAPI application for uploading and importing XER schedules."""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, File, HTTPException, UploadFile
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from .config import default_config, validate_config
from .importer import InMemoryScheduleStore, ScheduleImportError, import_schedule
from .io import result_to_dict
from .mapper import parse_xer

logger = logging.getLogger(__name__)


class ImportResponse(BaseModel):
    """Body returned by a successful schedule import."""

    success: bool = True
    message: str = "Schedule imported successfully"
    file_name: Optional[str] = None
    activities_count: int = Field(..., ge=0)
    relationships_count: int = Field(..., ge=0)
    wbs_count: int = Field(..., ge=0)
    skipped_relationships: int = Field(0, ge=0)
    xer_project_id: Optional[str] = None
    xer_project_name: Optional[str] = None
    data_date: Optional[datetime] = None
    warnings: List[str] = Field(default_factory=list)


class ParseResponse(BaseModel):
    projects: List[Dict[str, Any]] = Field(default_factory=list)
    wbs: List[Dict[str, Any]] = Field(default_factory=list)
    tasks: List[Dict[str, Any]] = Field(default_factory=list)
    task_preds: List[Dict[str, Any]] = Field(default_factory=list)
    errors: List[str] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)


class ScheduleResponse(BaseModel):
    project_id: str
    wbs: List[Dict[str, Any]] = Field(default_factory=list)
    activities: List[Dict[str, Any]] = Field(default_factory=list)
    relationships: List[Dict[str, Any]] = Field(default_factory=list)


def create_app(config: Optional[Dict[str, Any]] = None) -> FastAPI:
    settings = validate_config({**default_config(), **(config or {})})
    app = FastAPI(title="XER Schedule Import")
    app.state.store = InMemoryScheduleStore()

    @app.post("/parse", response_model=ParseResponse)
    async def parse(file: UploadFile = File(...)) -> Dict[str, Any]:
        """Parse an uploaded XER file and return every record."""

        content = await _read_upload(file, settings)
        return result_to_dict(parse_xer(content, strict=settings["strict"]))

    @app.post("/projects/{project_id}/schedule/import", response_model=ImportResponse)
    async def import_xer(project_id: str, file: UploadFile = File(...)) -> Any:
        """Replace the project's schedule with the uploaded XER file."""

        content = await _read_upload(file, settings)
        try:
            summary = import_schedule(
                app.state.store,
                project_id,
                content,
                file_name=file.filename,
                strict=settings["strict"],
            )
        except ScheduleImportError as exc:
            return JSONResponse(
                status_code=400,
                content={"error": str(exc), "details": exc.details},
            )

        logger.info(
            "Imported %s into project %s: %d activities",
            file.filename,
            project_id,
            summary.activities_count,
        )
        return ImportResponse(
            file_name=summary.file_name,
            activities_count=summary.activities_count,
            relationships_count=summary.relationships_count,
            wbs_count=summary.wbs_count,
            skipped_relationships=summary.skipped_relationships,
            xer_project_id=summary.xer_project_id,
            xer_project_name=summary.xer_project_name,
            data_date=summary.data_date,
            warnings=summary.warnings,
        )

    @app.get("/projects/{project_id}/schedule", response_model=ScheduleResponse)
    def get_schedule(project_id: str) -> ScheduleResponse:
        store: InMemoryScheduleStore = app.state.store
        if not store.has_schedule(project_id):
            raise HTTPException(status_code=404, detail="No schedule imported for project")
        schedule = store.schedule(project_id)
        return ScheduleResponse(
            project_id=project_id,
            wbs=schedule["wbs"],
            activities=sorted(schedule["activities"], key=lambda row: row["sort_order"]),
            relationships=schedule["relationships"],
        )

    return app


async def _read_upload(file: UploadFile, settings: Dict[str, Any]) -> str:
    if not file.filename or not file.filename.lower().endswith(".xer"):
        raise HTTPException(
            status_code=400, detail="Invalid file type. Please upload an XER file."
        )
    payload = await file.read()
    if not payload:
        raise HTTPException(status_code=400, detail="No file provided")
    if len(payload) > settings["max_upload_bytes"]:
        raise HTTPException(status_code=413, detail="XER file is too large")
    return payload.decode(settings["encoding"], errors="replace")


app = create_app()


__all__ = ["app", "create_app"]
