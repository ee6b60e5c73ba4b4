"""
Request bodies for newsletter-wizard backend functions.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class SourceType(str, Enum):
    """Kinds of knowledge-base sources."""

    URL = "url"
    DOCUMENT = "document"
    MANUAL = "manual"
    YOUTUBE = "youtube"
    RSS = "rss"
    GDRIVE = "gdrive"


class TeamRole(str, Enum):
    ADMIN = "admin"
    EDITOR = "editor"
    VIEWER = "viewer"


# =============================================================================
# Content
# =============================================================================


class ProcessSourceRequest(BaseModel):
    """Ingest a knowledge source into chunks."""

    source_id: str
    source_type: SourceType
    content: str | None = None
    url: str | None = None
    file_path: str | None = None


class RAGSearchRequest(BaseModel):
    tenant_id: str
    query: str
    limit: int | None = Field(default=None, ge=1)


class GenerateContentRequest(BaseModel):
    """Generate a newsletter draft grounded in retrieved context."""

    tenant_id: str
    topic: str
    context: list[dict[str, Any]] = Field(default_factory=list)
    voice_profile_id: str | None = None


class UploadDocumentRequest(BaseModel):
    """Upload a base64-encoded document."""

    fileData: str
    fileName: str
    mimeType: str
    tenant_id: str


class GenerateSocialPostsRequest(BaseModel):
    newsletter_content: str
    newsletter_title: str


# =============================================================================
# Voice
# =============================================================================


class TrainVoiceRequest(BaseModel):
    voice_profile_id: str
    training_samples: list[str] = Field(min_length=1)


class ToneMarkers(BaseModel):
    archetype: str
    formality: float
    humor: float
    technicality: float
    energy: float


class PreviewVoiceRequest(BaseModel):
    tenant_id: str
    sample_text: str
    tone_markers: ToneMarkers


# =============================================================================
# Newsletter delivery
# =============================================================================


class SendMailchimpRequest(BaseModel):
    api_key: str
    list_id: str
    subject: str
    content_html: str
    from_name: str | None = None
    from_email: str | None = None


class SendConvertKitRequest(BaseModel):
    api_secret: str
    subject: str
    content_html: str


# =============================================================================
# Account
# =============================================================================


class DeleteAccountRequest(BaseModel):
    """Account deletion; the server only accepts confirmation == "DELETE"."""

    confirmation: str
    reason: str | None = None
    comment: str | None = None


class InviteTeamMemberRequest(BaseModel):
    email: str
    role: TeamRole


# =============================================================================
# Search and analytics
# =============================================================================


class DateRange(BaseModel):
    """Inclusive ISO-8601 date bounds; either end may be open."""

    start: str | None = None
    end: str | None = None


class SearchFilters(BaseModel):
    types: list[str] | None = None
    status: str | None = None
    date_range: DateRange | None = None


class GlobalSearchRequest(BaseModel):
    """Search across newsletters, sources and templates."""

    query: str = Field(min_length=1)
    filters: SearchFilters | None = None
    limit: int | None = Field(default=None, ge=1)


class PerformanceRequest(BaseModel):
    date_range: DateRange | None = None
