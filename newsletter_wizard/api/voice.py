"""
Voice profile functions.
"""

from __future__ import annotations

from typing import Any

from newsletter_wizard.runtime import CancelToken

from .base import FunctionGroup
from .schemas import PreviewVoiceRequest, TrainVoiceRequest


class VoiceApi(FunctionGroup):
    """Train and preview a tenant's writing voice."""

    async def train_voice(
        self, request: TrainVoiceRequest, cancel_token: CancelToken | None = None
    ) -> dict[str, Any]:
        """Derive tone markers and a voice prompt from sample texts.

        Returns:
            {"success", "tone_markers", "vocabulary", "voice_prompt"}
        """
        return await self._anonymous("train-voice", request, cancel_token=cancel_token)

    async def preview_voice(
        self, request: PreviewVoiceRequest, cancel_token: CancelToken | None = None
    ) -> dict[str, Any]:
        """Rewrite sample text with the given tone markers.

        Returns:
            {"rewritten_text": str}
        """
        return await self._anonymous("preview-voice", request, cancel_token=cancel_token)
