"""
Referral programme functions, multiplexed over "manage-referrals".
"""

from __future__ import annotations

from typing import Any

from .base import FunctionGroup

MANAGE_REFERRALS = "manage-referrals"


class ReferralApi(FunctionGroup):
    async def get_referral_code(self) -> dict[str, Any]:
        """Returns {"code": str, "link": str}."""
        return await self._authenticated(MANAGE_REFERRALS, {"action": "get_code"})

    async def get_referral_stats(self) -> dict[str, Any]:
        """Returns {"sent": int, "converted": int, "earned": str}."""
        return await self._authenticated(MANAGE_REFERRALS, {"action": "get_stats"})

    async def send_referral_invite(self, email: str) -> dict[str, Any]:
        return await self._authenticated(
            MANAGE_REFERRALS, {"action": "send_invite", "email": email}
        )

    async def get_referral_leaderboard(self) -> dict[str, Any]:
        return await self._authenticated(MANAGE_REFERRALS, {"action": "get_leaderboard"})
