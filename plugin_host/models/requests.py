"""Request models for API endpoints."""

from typing import Optional

from pydantic import BaseModel, Field, field_validator


class ArchiveInstallRequest(BaseModel):
    """Install a plugin from an uploaded archive or script module."""

    filename: str = Field(..., description="Uploaded file name, e.g. 'calculator.zip'")
    content_base64: Optional[str] = Field(None, description="Base64-encoded file contents")

    @field_validator('filename')
    @classmethod
    def filename_not_empty(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError('filename cannot be empty')
        return v.strip()

    class Config:
        json_schema_extra = {
            "examples": [
                {"filename": "calculator.zip"},
                {"filename": "weather.ts", "content_base64": "ZXhwb3J0IGRlZmF1bHQge30="},
            ]
        }


class RepositoryInstallRequest(BaseModel):
    """Install a plugin from a remote repository reference."""

    url: str = Field(..., description="Repository URL, e.g. https://github.com/owner/repo")

    @field_validator('url')
    @classmethod
    def url_not_empty(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError('url cannot be empty')
        return v.strip()


class CreateSessionRequest(BaseModel):
    """Open a live session."""

    session_id: Optional[str] = Field(None, description="Client-chosen session id (generated when omitted)")


class LiveConfigUpdateRequest(BaseModel):
    """Change live model settings. Omitted fields keep their current value."""

    model: Optional[str] = Field(None, description="Model name, e.g. 'models/gemini-2.0-flash-exp'")
    voice_name: Optional[str] = Field(None, description="Prebuilt voice for audio responses")
    response_modality: Optional[str] = Field(None, description="'audio' or 'text'")
    google_search: Optional[bool] = Field(None, description="Expose the search tool to the model")
