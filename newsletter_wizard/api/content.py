"""
Knowledge-base and content generation functions.
"""

from __future__ import annotations

from typing import Any

from newsletter_wizard.runtime import CancelToken, InvocationOptions

from .base import FunctionGroup
from .schemas import (
    GenerateContentRequest,
    GenerateSocialPostsRequest,
    ProcessSourceRequest,
    RAGSearchRequest,
    UploadDocumentRequest,
)


class ContentApi(FunctionGroup):
    """Knowledge-base ingestion, retrieval and AI generation.

    Example:
        hits = await api.content.rag_search(RAGSearchRequest(tenant_id=t, query="ai agents"))
    """

    async def process_source(
        self, request: ProcessSourceRequest, cancel_token: CancelToken | None = None
    ) -> dict[str, Any]:
        """Chunk and embed a knowledge source.

        Returns:
            {"success": bool, "chunks": int}
        """
        return await self._anonymous("process-source", request, cancel_token=cancel_token)

    async def rag_search(
        self, request: RAGSearchRequest, cancel_token: CancelToken | None = None
    ) -> dict[str, Any]:
        """Semantic search over a tenant's knowledge base.

        Returns:
            {"results": [{"chunk_id", "text", "similarity", ...}]}
        """
        return await self._anonymous("rag-search", request, cancel_token=cancel_token)

    async def generate_content(
        self,
        request: GenerateContentRequest,
        options: InvocationOptions | None = None,
        cancel_token: CancelToken | None = None,
    ) -> dict[str, Any]:
        """Generate a newsletter draft.

        Returns:
            {"title", "subject_line", "content_html", "citations"}
        """
        return await self._anonymous(
            "generate-content",
            request,
            options=options,
            cancel_token=cancel_token,
        )

    async def generate_newsletter(
        self,
        request: GenerateContentRequest,
        options: InvocationOptions | None = None,
        cancel_token: CancelToken | None = None,
    ) -> dict[str, Any]:
        """Alias of generate_content kept for older callers."""
        return await self.generate_content(request, options=options, cancel_token=cancel_token)

    async def upload_document(
        self, request: UploadDocumentRequest, cancel_token: CancelToken | None = None
    ) -> dict[str, Any]:
        """Upload a document and register it as a source.

        Returns:
            {"success": bool, "source": {"id"}, "file_path": str}
        """
        return await self._anonymous("upload-document", request, cancel_token=cancel_token)

    async def generate_social_posts(
        self,
        request: GenerateSocialPostsRequest,
        options: InvocationOptions | None = None,
        cancel_token: CancelToken | None = None,
    ) -> dict[str, Any]:
        """Turn a newsletter into per-platform social posts."""
        return await self._anonymous(
            "generate-social-posts",
            request,
            options=options,
            cancel_token=cancel_token,
        )
