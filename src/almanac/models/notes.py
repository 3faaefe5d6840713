"""Pydantic models for vault entries and note-opening results."""

from enum import Enum

from pydantic import BaseModel, Field


class NoteFile(BaseModel):
    """Handle to a file in the host store."""

    path: str = Field(..., description="Normalized vault-relative path")

    model_config = {"frozen": True}

    @property
    def name(self) -> str:
        return self.path.rsplit("/", 1)[-1]


class NoteFolder(BaseModel):
    """Handle to a folder in the host store."""

    path: str = Field(..., description="Normalized vault-relative path")

    model_config = {"frozen": True}


class OpenOutcome(str, Enum):
    """How an open-or-create request ended."""

    OPENED = "opened"
    CREATED = "created"
    DECLINED = "declined"
    FAILED = "failed"
    DISABLED = "disabled"


class OpenResult(BaseModel):
    """Result of a single open-or-create request."""

    outcome: OpenOutcome = Field(..., description="Terminal state of the request")
    path: str | None = Field(None, description="Resolved note path (None when disabled)")
    file: NoteFile | None = Field(None, description="Opened file handle, if a pane was opened")
    error: str | None = Field(None, description="Host error message when creation failed")

    @property
    def opened(self) -> bool:
        return self.outcome in (OpenOutcome.OPENED, OpenOutcome.CREATED)
