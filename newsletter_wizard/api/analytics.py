"""
Newsletter performance analytics and scheduling hints. All require a session.
"""

from __future__ import annotations

from typing import Any

from .base import FunctionGroup
from .schemas import PerformanceRequest


class AnalyticsApi(FunctionGroup):
    """Performance tips, reports and send-time suggestions for the workspace."""

    async def generate_performance_tips(
        self, request: PerformanceRequest | None = None
    ) -> dict[str, Any]:
        """Returns {"tips": [{"title", "description", "metric", "improvement"}], "based_on": int}."""
        return await self._authenticated(
            "generate-performance-tips", request or PerformanceRequest()
        )

    async def export_performance_report(
        self, request: PerformanceRequest | None = None
    ) -> dict[str, Any]:
        """Render the performance report.

        Returns:
            {"report_html": str, "row_count": int}
        """
        return await self._authenticated(
            "export-performance-report", request or PerformanceRequest()
        )

    async def suggest_send_time(self) -> dict[str, Any]:
        """Recommend send slots from past open rates.

        Returns:
            {"recommended_slots": [...], "based_on_data": bool, "sample_size": int}
        """
        return await self._authenticated("suggest-send-time", {})
