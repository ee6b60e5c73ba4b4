"""
Workspace-wide search.
"""

from __future__ import annotations

from typing import Any

from newsletter_wizard.runtime import CancelToken

from .base import FunctionGroup
from .schemas import GlobalSearchRequest


class SearchApi(FunctionGroup):
    async def global_search(
        self, request: GlobalSearchRequest, cancel_token: CancelToken | None = None
    ) -> dict[str, Any]:
        """Search the signed-in user's newsletters, sources and templates.

        Returns:
            {"results": [{"type", "id", "title", "snippet", "relevance", "date"}],
             "total": int, "suggestions": [str]}
        """
        return await self._authenticated("global-search", request, cancel_token=cancel_token)
