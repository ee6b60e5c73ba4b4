"""
Typed wrappers for the newsletter-wizard backend functions.

All groups share one FunctionInvoker, so they share its connection pool,
configuration and session provider. Every method raises ApiError on failure.
"""

from __future__ import annotations

from typing import Any

from newsletter_wizard.config import Settings
from newsletter_wizard.runtime import FunctionInvoker, SessionProvider

from .account import AccountApi
from .analytics import AnalyticsApi
from .base import FunctionGroup, to_payload
from .content import ContentApi
from .newsletter import NewsletterApi
from .referral import ReferralApi
from .search import SearchApi
from .team import TeamApi
from .voice import VoiceApi


class NewsletterWizardApi:
    """Facade over every backend function group.

    Example:
        async with NewsletterWizardApi.from_settings(settings, session_provider=auth) as api:
            draft = await api.content.generate_content(request)
            await api.account.export_user_data()
    """

    def __init__(self, invoker: FunctionInvoker):
        self.invoker = invoker
        self.content = ContentApi(invoker)
        self.voice = VoiceApi(invoker)
        self.newsletter = NewsletterApi(invoker)
        self.account = AccountApi(invoker)
        self.referral = ReferralApi(invoker)
        self.team = TeamApi(invoker)
        self.search = SearchApi(invoker)
        self.analytics = AnalyticsApi(invoker)

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        session_provider: SessionProvider | None = None,
    ) -> "NewsletterWizardApi":
        return cls(FunctionInvoker.from_settings(settings, session_provider=session_provider))

    async def close(self) -> None:
        await self.invoker.close()

    async def __aenter__(self) -> "NewsletterWizardApi":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()


__all__ = [
    "NewsletterWizardApi",
    "FunctionGroup",
    "to_payload",
    "ContentApi",
    "VoiceApi",
    "NewsletterApi",
    "AccountApi",
    "ReferralApi",
    "TeamApi",
    "SearchApi",
    "AnalyticsApi",
]
