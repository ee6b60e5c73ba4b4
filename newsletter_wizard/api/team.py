"""
Team management functions.

Most actions go through "manage-team" with the user's session. Validating
an invitation token is anonymous so it works before the invitee signs in;
accepting it requires the new member's session.
"""

from __future__ import annotations

from typing import Any

from .base import FunctionGroup, to_payload
from .schemas import InviteTeamMemberRequest, TeamRole

MANAGE_TEAM = "manage-team"
ACCEPT_INVITATION = "accept-invitation"


class TeamApi(FunctionGroup):
    """Invitations and member roles for the current workspace."""

    async def invite_team_member(self, request: InviteTeamMemberRequest) -> dict[str, Any]:
        """Invite someone by email.

        Returns:
            {"success": bool, "already_invited": bool, "invitation_id": str | None}
        """
        return await self._authenticated(MANAGE_TEAM, {"action": "invite", **to_payload(request)})

    async def get_team_invitations(self) -> dict[str, Any]:
        return await self._authenticated(MANAGE_TEAM, {"action": "list_invitations"})

    async def revoke_invitation(self, invitation_id: str) -> dict[str, Any]:
        return await self._authenticated(
            MANAGE_TEAM, {"action": "revoke", "invitation_id": invitation_id}
        )

    async def change_team_member_role(
        self, member_id: str, role: TeamRole | str
    ) -> dict[str, Any]:
        return await self._authenticated(
            MANAGE_TEAM,
            {"action": "change_role", "member_id": member_id, "role": TeamRole(role).value},
        )

    async def validate_invitation(self, token: str) -> dict[str, Any]:
        """Check an invitation token without signing in.

        Returns:
            {"valid": bool, "email", "role", "tenant_name", "reason"}
        """
        return await self._anonymous(ACCEPT_INVITATION, {"action": "validate", "token": token})

    async def accept_invitation(self, token: str) -> dict[str, Any]:
        return await self._authenticated(ACCEPT_INVITATION, {"action": "accept", "token": token})
