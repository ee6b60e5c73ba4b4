"""Unit tests for the typed backend function wrappers."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from pydantic import ValidationError

from newsletter_wizard.api import NewsletterWizardApi, to_payload
from newsletter_wizard.api.schemas import (
    DateRange,
    DeleteAccountRequest,
    GenerateContentRequest,
    GlobalSearchRequest,
    InviteTeamMemberRequest,
    PerformanceRequest,
    PreviewVoiceRequest,
    ProcessSourceRequest,
    RAGSearchRequest,
    SearchFilters,
    SendConvertKitRequest,
    SendMailchimpRequest,
    SourceType,
    TeamRole,
    ToneMarkers,
    TrainVoiceRequest,
    UploadDocumentRequest,
)
from newsletter_wizard.config import Settings
from newsletter_wizard.runtime import CancelToken, FunctionInvoker, InvocationOptions


@pytest.fixture
def invoker():
    """Create a mock FunctionInvoker."""
    mock = MagicMock(spec=FunctionInvoker)
    mock.invoke_anonymous = AsyncMock(return_value={"success": True})
    mock.invoke_authenticated = AsyncMock(return_value={"success": True})
    mock.close = AsyncMock()
    return mock


@pytest.fixture
def api(invoker):
    return NewsletterWizardApi(invoker)


def _sent(mock: AsyncMock):
    """Return (function_name, body) of the single call made on `mock`."""
    mock.assert_awaited_once()
    call = mock.await_args
    return call.args[0], call.args[1]


class TestToPayload:
    def test_drops_unset_optional_fields(self):
        request = RAGSearchRequest(tenant_id="t1", query="ai")
        assert to_payload(request) == {"tenant_id": "t1", "query": "ai"}

    def test_serialises_enums_as_values(self):
        request = ProcessSourceRequest(source_id="s1", source_type=SourceType.URL, url="https://x.io")
        assert to_payload(request) == {
            "source_id": "s1",
            "source_type": "url",
            "url": "https://x.io",
        }

    def test_passes_dicts_through(self):
        assert to_payload({"action": "get_code"}) == {"action": "get_code"}


class TestContentApi:
    @pytest.mark.asyncio
    async def test_process_source(self, api, invoker):
        await api.content.process_source(
            ProcessSourceRequest(source_id="s1", source_type="manual", content="Hello")
        )

        name, body = _sent(invoker.invoke_anonymous)
        assert name == "process-source"
        assert body == {"source_id": "s1", "source_type": "manual", "content": "Hello"}
        invoker.invoke_authenticated.assert_not_called()

    @pytest.mark.asyncio
    async def test_rag_search(self, api, invoker):
        invoker.invoke_anonymous.return_value = {"results": []}

        result = await api.content.rag_search(
            RAGSearchRequest(tenant_id="t1", query="ai agents", limit=5)
        )

        assert result == {"results": []}
        name, body = _sent(invoker.invoke_anonymous)
        assert name == "rag-search"
        assert body == {"tenant_id": "t1", "query": "ai agents", "limit": 5}

    @pytest.mark.asyncio
    async def test_generate_content_forwards_options_and_token(self, api, invoker):
        options = InvocationOptions(max_retries=2, timeout_ms=60_000)
        token = CancelToken()

        await api.content.generate_content(
            GenerateContentRequest(tenant_id="t1", topic="AI weekly"),
            options=options,
            cancel_token=token,
        )

        name, body = _sent(invoker.invoke_anonymous)
        assert name == "generate-content"
        assert body == {"tenant_id": "t1", "topic": "AI weekly", "context": []}
        assert invoker.invoke_anonymous.await_args.kwargs["options"] is options
        assert invoker.invoke_anonymous.await_args.kwargs["cancel_token"] is token

    @pytest.mark.asyncio
    async def test_generate_newsletter_is_alias(self, api, invoker):
        await api.content.generate_newsletter(GenerateContentRequest(tenant_id="t1", topic="x"))

        name, _ = _sent(invoker.invoke_anonymous)
        assert name == "generate-content"

    @pytest.mark.asyncio
    async def test_upload_document_keeps_field_names(self, api, invoker):
        await api.content.upload_document(
            UploadDocumentRequest(
                fileData="aGVsbG8=", fileName="notes.pdf", mimeType="application/pdf", tenant_id="t1"
            )
        )

        name, body = _sent(invoker.invoke_anonymous)
        assert name == "upload-document"
        assert set(body) == {"fileData", "fileName", "mimeType", "tenant_id"}


class TestVoiceApi:
    @pytest.mark.asyncio
    async def test_train_voice(self, api, invoker):
        await api.voice.train_voice(
            TrainVoiceRequest(voice_profile_id="v1", training_samples=["one", "two"])
        )

        name, body = _sent(invoker.invoke_anonymous)
        assert name == "train-voice"
        assert body["training_samples"] == ["one", "two"]

    def test_train_voice_requires_samples(self):
        with pytest.raises(ValidationError):
            TrainVoiceRequest(voice_profile_id="v1", training_samples=[])

    @pytest.mark.asyncio
    async def test_preview_voice_nests_tone_markers(self, api, invoker):
        markers = ToneMarkers(
            archetype="mentor", formality=0.4, humor=0.2, technicality=0.7, energy=0.5
        )

        await api.voice.preview_voice(
            PreviewVoiceRequest(tenant_id="t1", sample_text="Hi", tone_markers=markers)
        )

        name, body = _sent(invoker.invoke_anonymous)
        assert name == "preview-voice"
        assert body["tone_markers"]["archetype"] == "mentor"


class TestNewsletterApi:
    @pytest.mark.asyncio
    async def test_send_mailchimp(self, api, invoker):
        await api.newsletter.send_mailchimp(
            SendMailchimpRequest(api_key="k", list_id="l", subject="S", content_html="<p>x</p>")
        )

        name, body = _sent(invoker.invoke_anonymous)
        assert name == "send-mailchimp"
        assert "from_name" not in body

    @pytest.mark.asyncio
    async def test_send_convertkit(self, api, invoker):
        await api.newsletter.send_convertkit(
            SendConvertKitRequest(api_secret="s", subject="S", content_html="<p>x</p>")
        )

        name, _ = _sent(invoker.invoke_anonymous)
        assert name == "send-convertkit"


class TestAccountApi:
    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "method, function_name",
        [
            ("export_user_data", "export-user-data"),
            ("reactivate_account", "reactivate-account"),
            ("create_workspace", "create-workspace"),
        ],
    )
    async def test_bodyless_calls_are_authenticated(self, api, invoker, method, function_name):
        await getattr(api.account, method)()

        name, body = _sent(invoker.invoke_authenticated)
        assert name == function_name
        assert body == {}
        invoker.invoke_anonymous.assert_not_called()

    @pytest.mark.asyncio
    async def test_delete_account(self, api, invoker):
        await api.account.delete_account(
            DeleteAccountRequest(confirmation="DELETE", reason="too_expensive")
        )

        name, body = _sent(invoker.invoke_authenticated)
        assert name == "delete-account"
        assert body == {"confirmation": "DELETE", "reason": "too_expensive"}


class TestReferralApi:
    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "method, action",
        [
            ("get_referral_code", "get_code"),
            ("get_referral_stats", "get_stats"),
            ("get_referral_leaderboard", "get_leaderboard"),
        ],
    )
    async def test_actions(self, api, invoker, method, action):
        await getattr(api.referral, method)()

        name, body = _sent(invoker.invoke_authenticated)
        assert name == "manage-referrals"
        assert body == {"action": action}

    @pytest.mark.asyncio
    async def test_send_invite(self, api, invoker):
        await api.referral.send_referral_invite("friend@example.com")

        _, body = _sent(invoker.invoke_authenticated)
        assert body == {"action": "send_invite", "email": "friend@example.com"}


class TestTeamApi:
    @pytest.mark.asyncio
    async def test_invite_team_member(self, api, invoker):
        await api.team.invite_team_member(
            InviteTeamMemberRequest(email="a@example.com", role=TeamRole.EDITOR)
        )

        name, body = _sent(invoker.invoke_authenticated)
        assert name == "manage-team"
        assert body == {"action": "invite", "email": "a@example.com", "role": "editor"}

    @pytest.mark.asyncio
    async def test_get_team_invitations(self, api, invoker):
        await api.team.get_team_invitations()

        _, body = _sent(invoker.invoke_authenticated)
        assert body == {"action": "list_invitations"}

    @pytest.mark.asyncio
    async def test_revoke_invitation(self, api, invoker):
        await api.team.revoke_invitation("inv-1")

        _, body = _sent(invoker.invoke_authenticated)
        assert body == {"action": "revoke", "invitation_id": "inv-1"}

    @pytest.mark.asyncio
    async def test_change_role_accepts_string(self, api, invoker):
        await api.team.change_team_member_role("m-1", "viewer")

        _, body = _sent(invoker.invoke_authenticated)
        assert body == {"action": "change_role", "member_id": "m-1", "role": "viewer"}

    @pytest.mark.asyncio
    async def test_change_role_rejects_unknown_role(self, api, invoker):
        with pytest.raises(ValueError):
            await api.team.change_team_member_role("m-1", "owner")

        invoker.invoke_authenticated.assert_not_called()

    @pytest.mark.asyncio
    async def test_validate_invitation_is_anonymous(self, api, invoker):
        await api.team.validate_invitation("tok")

        name, body = _sent(invoker.invoke_anonymous)
        assert name == "accept-invitation"
        assert body == {"action": "validate", "token": "tok"}

    @pytest.mark.asyncio
    async def test_accept_invitation_is_authenticated(self, api, invoker):
        await api.team.accept_invitation("tok")

        name, body = _sent(invoker.invoke_authenticated)
        assert name == "accept-invitation"
        assert body == {"action": "accept", "token": "tok"}


class TestSearchApi:
    @pytest.mark.asyncio
    async def test_global_search_is_authenticated(self, api, invoker):
        invoker.invoke_authenticated.return_value = {"results": [], "total": 0, "suggestions": []}

        result = await api.search.global_search(
            GlobalSearchRequest(
                query="ai",
                filters=SearchFilters(types=["newsletter"], date_range=DateRange(start="2026-01-01")),
                limit=10,
            )
        )

        assert result["total"] == 0
        name, body = _sent(invoker.invoke_authenticated)
        assert name == "global-search"
        assert body == {
            "query": "ai",
            "filters": {"types": ["newsletter"], "date_range": {"start": "2026-01-01"}},
            "limit": 10,
        }
        invoker.invoke_anonymous.assert_not_called()

    def test_empty_query_is_rejected(self):
        with pytest.raises(ValidationError):
            GlobalSearchRequest(query="")


class TestAnalyticsApi:
    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "method, function_name",
        [
            ("generate_performance_tips", "generate-performance-tips"),
            ("export_performance_report", "export-performance-report"),
        ],
    )
    async def test_date_range_is_optional(self, api, invoker, method, function_name):
        await getattr(api.analytics, method)()

        name, body = _sent(invoker.invoke_authenticated)
        assert name == function_name
        assert body == {}

    @pytest.mark.asyncio
    async def test_performance_tips_with_date_range(self, api, invoker):
        await api.analytics.generate_performance_tips(
            PerformanceRequest(date_range=DateRange(start="2026-01-01", end="2026-03-31"))
        )

        _, body = _sent(invoker.invoke_authenticated)
        assert body == {"date_range": {"start": "2026-01-01", "end": "2026-03-31"}}

    @pytest.mark.asyncio
    async def test_suggest_send_time(self, api, invoker):
        await api.analytics.suggest_send_time()

        name, body = _sent(invoker.invoke_authenticated)
        assert name == "suggest-send-time"
        assert body == {}
        invoker.invoke_anonymous.assert_not_called()


class TestFacade:
    def test_groups_share_one_invoker(self, api, invoker):
        groups = [
            api.content,
            api.voice,
            api.newsletter,
            api.account,
            api.referral,
            api.team,
            api.search,
            api.analytics,
        ]
        assert all(group._invoker is invoker for group in groups)

    @pytest.mark.asyncio
    async def test_context_manager_closes_invoker(self, invoker):
        async with NewsletterWizardApi(invoker):
            pass

        invoker.close.assert_awaited_once()

    def test_from_settings(self):
        settings = Settings(SUPABASE_URL="https://xyz.supabase.co", SUPABASE_ANON_KEY="anon")

        api = NewsletterWizardApi.from_settings(settings)

        assert api.invoker.config.function_url("rag-search") == (
            "https://xyz.supabase.co/functions/v1/rag-search"
        )
