"""
Newsletter delivery functions (email service providers).
"""

from __future__ import annotations

from typing import Any

from newsletter_wizard.runtime import CancelToken

from .base import FunctionGroup
from .schemas import SendConvertKitRequest, SendMailchimpRequest


class NewsletterApi(FunctionGroup):
    """Push finished newsletters to Mailchimp or ConvertKit."""

    async def send_mailchimp(
        self, request: SendMailchimpRequest, cancel_token: CancelToken | None = None
    ) -> dict[str, Any]:
        """Create and send a Mailchimp campaign.

        Returns:
            {"success": bool, "campaign_id": str}
        """
        return await self._anonymous("send-mailchimp", request, cancel_token=cancel_token)

    async def send_convertkit(
        self, request: SendConvertKitRequest, cancel_token: CancelToken | None = None
    ) -> dict[str, Any]:
        """Create a ConvertKit broadcast.

        Returns:
            {"success": bool, "broadcast_id": str}
        """
        return await self._anonymous("send-convertkit", request, cancel_token=cancel_token)
