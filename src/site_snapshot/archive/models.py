"""Pydantic models for archive metadata and operation results."""

from datetime import datetime

from pydantic import BaseModel, Field


class ExportMetadata(BaseModel):
    """Metadata record stored as ``export-metadata.json``."""

    export_date: str                # ISO-8601 export start time
    engine_version: str
    database_name: str
    tables_exported: list[str] = Field(default_factory=list)
    files_count: int = 0


class ImportStatistics(BaseModel):
    """Result of one successful import. Not persisted."""

    tables: int = 0
    rows: int = 0
    files: int = 0


class ValidationReport(BaseModel):
    """Result of validating a candidate archive before import."""

    valid: bool = False
    errors: list[str] = Field(default_factory=list)
    metadata: ExportMetadata | None = None


class ExportFile(BaseModel):
    """A staged export archive."""

    path: str
    size: int
    modified: datetime
