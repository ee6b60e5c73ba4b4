"""
Account lifecycle functions. All require a signed-in user.
"""

from __future__ import annotations

from typing import Any

from .base import FunctionGroup
from .schemas import DeleteAccountRequest


class AccountApi(FunctionGroup):
    """Data export, deletion and workspace setup for the current user."""

    async def export_user_data(self) -> dict[str, Any]:
        """Export everything stored for the current user (GDPR export)."""
        return await self._authenticated("export-user-data", {})

    async def delete_account(self, request: DeleteAccountRequest) -> dict[str, Any]:
        """Schedule the current account for deletion."""
        return await self._authenticated("delete-account", request)

    async def reactivate_account(self) -> dict[str, Any]:
        return await self._authenticated("reactivate-account", {})

    async def create_workspace(self) -> dict[str, Any]:
        """Create the user's tenant if it does not exist yet.

        Returns:
            {"success": bool, "already_exists": bool}
        """
        return await self._authenticated("create-workspace", {})
