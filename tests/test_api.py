"""Tests for API endpoints (no external API keys required)."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import httpx
from anthropic import APIStatusError
from fastapi.testclient import TestClient

from agentda.api.main import app
from agentda.extraction.models import AgendaItem
from agentda.ratelimit import FixedWindowRateLimiter, InMemoryRateLimitStore, get_rate_limiter
from agentda.storage import MeetingNotFoundError

USER = {"X-User-Id": "user-1"}

AGENDA_TEXT = (
    "1. Title: Kickoff\n   Description: Goals for the quarter\n   Duration: 10\n"
    "2. Title: Roadmap\n   Description: Walk through priorities\n   Duration: 20\n"
)

MEETING_SUMMARY_TEXT = """## Executive Summary
Good progress overall.

## Key Decisions Made
- We decided to ship on Monday

## Action Items
- Draft release notes (Sam) by Friday

## Unresolved Items
- Hosting costs
"""


def _status_error(message: str) -> APIStatusError:
    request = httpx.Request("POST", "https://api.anthropic.com/v1/messages")
    return APIStatusError(message, response=httpx.Response(529, request=request), body=None)


def test_health(client: TestClient) -> None:
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


# ---------------------------------------------------------------------------
# AI endpoints: identity, admission control, configuration
# ---------------------------------------------------------------------------


class TestAIEndpointGuards:
    def test_missing_identity_returns_401(self, client: TestClient) -> None:
        response = client.post("/api/ai/agenda", json={"goals": "Plan Q3"})
        assert response.status_code == 401

    def test_missing_llm_key_returns_503(self, client: TestClient) -> None:
        with patch("agentda.api.deps.settings") as mock_settings:
            mock_settings.anthropic_api_key = ""
            response = client.post("/api/ai/agenda", json={"goals": "Plan Q3"}, headers=USER)
        assert response.status_code == 503
        assert response.json()["detail"] == "Service configuration error"

    def test_rate_limit_headers_and_429(self, client: TestClient) -> None:
        limiter = FixedWindowRateLimiter(InMemoryRateLimitStore(), limit=2, window_seconds=60)
        app.dependency_overrides[get_rate_limiter] = lambda: limiter

        with (
            patch("agentda.api.deps.settings") as mock_settings,
            patch("agentda.api.routes.ai.generate_agenda_text", return_value=AGENDA_TEXT),
        ):
            mock_settings.anthropic_api_key = "test-key"
            first = client.post("/api/ai/agenda", json={"goals": "Plan"}, headers=USER)
            second = client.post("/api/ai/agenda", json={"goals": "Plan"}, headers=USER)
            third = client.post("/api/ai/agenda", json={"goals": "Plan"}, headers=USER)
            other = client.post(
                "/api/ai/agenda", json={"goals": "Plan"}, headers={"X-User-Id": "user-2"}
            )

        assert first.status_code == 200
        assert first.headers["X-RateLimit-Limit"] == "2"
        assert first.headers["X-RateLimit-Remaining"] == "1"
        assert second.headers["X-RateLimit-Remaining"] == "0"
        assert third.status_code == 429
        assert third.json()["detail"] == "Rate limit exceeded"
        assert third.headers["X-RateLimit-Remaining"] == "0"
        assert other.status_code == 200

    def test_validation_error_returns_422(self, client: TestClient) -> None:
        with patch("agentda.api.deps.settings") as mock_settings:
            mock_settings.anthropic_api_key = "test-key"
            response = client.post("/api/ai/agenda", json={}, headers=USER)
        assert response.status_code == 422


# ---------------------------------------------------------------------------
# AI endpoints: responses
# ---------------------------------------------------------------------------


class TestAIEndpoints:
    def test_agenda_suggestions(self, client: TestClient) -> None:
        with (
            patch("agentda.api.deps.settings") as mock_settings,
            patch("agentda.api.routes.ai.generate_agenda_text", return_value=AGENDA_TEXT) as gen,
        ):
            mock_settings.anthropic_api_key = "test-key"
            response = client.post(
                "/api/ai/agenda",
                json={"goals": "Plan Q3", "existingItems": [{"title": "Intro", "duration": 5}]},
                headers=USER,
            )

        assert response.status_code == 200, response.text
        data = response.json()
        assert [i["title"] for i in data["items"]] == ["Kickoff", "Roadmap"]
        assert data["items"][1]["order"] == 1
        assert data["estimatedDuration"] == 30
        gen.assert_called_once_with("Plan Q3", [{"title": "Intro", "duration": 5}])

    def test_summarize_item(self, client: TestClient) -> None:
        text = "1. We agreed to cut scope.\n2. Action items:\n- Update plan (assigned to: Ana)\n"
        with (
            patch("agentda.api.deps.settings") as mock_settings,
            patch("agentda.api.routes.ai.generate_summary_text", return_value=text),
        ):
            mock_settings.anthropic_api_key = "test-key"
            response = client.post(
                "/api/ai/summarize",
                json={"item": {"title": "Scope"}, "notes": "Long discussion"},
                headers=USER,
            )

        assert response.status_code == 200, response.text
        assert response.json() == {
            "summary": "We agreed to cut scope.",
            "actionItems": ["Update plan (assigned to: Ana)"],
        }

    def test_meeting_summary(self, client: TestClient) -> None:
        with (
            patch("agentda.api.deps.settings") as mock_settings,
            patch(
                "agentda.api.routes.ai.generate_meeting_summary_text",
                return_value=MEETING_SUMMARY_TEXT,
            ),
        ):
            mock_settings.anthropic_api_key = "test-key"
            response = client.post(
                "/api/ai/meeting-summary",
                json={"title": "Weekly", "agenda": [{"title": "Release"}], "notes": "notes"},
                headers=USER,
            )

        assert response.status_code == 200, response.text
        data = response.json()
        assert data["summary"] == MEETING_SUMMARY_TEXT
        assert data["executive_summary"] == "Good progress overall."
        (action,) = data["action_items"]
        assert action["item_type"] == "action_item"
        assert (action["text"], action["owner"], action["deadline"]) == (
            "Draft release notes",
            "Sam",
            "Friday",
        )
        assert [d["text"] for d in data["decisions"]] == ["We decided to ship on Monday"]
        assert [u["text"] for u in data["unresolved"]] == ["Hosting costs"]
        assert data["takeaways"] == [{"text": "We decided to ship on Monday", "category": "decision"}]
        assert data["sentiment"] == 1.0

    def test_llm_failure_returns_503(self, client: TestClient) -> None:
        with (
            patch("agentda.api.deps.settings") as mock_settings,
            patch(
                "agentda.api.routes.ai.generate_agenda_text",
                side_effect=_status_error("Overloaded"),
            ),
        ):
            mock_settings.anthropic_api_key = "test-key"
            response = client.post("/api/ai/agenda", json={"goals": "Plan"}, headers=USER)

        assert response.status_code == 503
        assert response.json()["detail"] == "LLM unavailable: Overloaded"


# ---------------------------------------------------------------------------
# Scheduling
# ---------------------------------------------------------------------------


class TestSlotsEndpoint:
    def test_slots_for_given_now(self, client: TestClient) -> None:
        response = client.post(
            "/api/scheduling/slots",
            json={"now": "2024-01-01T16:10:00Z", "query": {"horizon_days": 0}},
        )
        assert response.status_code == 200, response.text
        assert response.json() == {"slots": [{"date": "2024-01-01", "time": "16:30"}], "count": 1}

    def test_meetings_block_slots(self, client: TestClient) -> None:
        response = client.post(
            "/api/scheduling/slots",
            json={
                "now": "2024-01-01T08:00:00",
                "meetings": [{"date": "2024-01-01T09:00:00Z", "duration": 60}],
                "busy": [{"start": "2024-01-01T10:00:00Z", "end": "2024-01-01T10:30:00Z"}],
                "query": {"horizon_days": 0},
            },
        )
        assert response.status_code == 200, response.text
        data = response.json()
        assert data["slots"][0] == {"date": "2024-01-01", "time": "10:30"}
        assert data["count"] == 13

    def test_invalid_working_hours_return_400(self, client: TestClient) -> None:
        response = client.post(
            "/api/scheduling/slots",
            json={"query": {"work_start": "17:00", "work_end": "09:00"}},
        )
        assert response.status_code == 400

    def test_unparseable_clock_returns_400(self, client: TestClient) -> None:
        response = client.post("/api/scheduling/slots", json={"query": {"work_start": "9am"}})
        assert response.status_code == 400

    def test_huge_horizon_returns_400(self, client: TestClient) -> None:
        response = client.post("/api/scheduling/slots", json={"query": {"horizon_days": 10**10}})
        assert response.status_code == 400
        assert "horizon_days" in response.json()["detail"]

    def test_huge_interval_returns_400(self, client: TestClient) -> None:
        response = client.post(
            "/api/scheduling/slots", json={"query": {"interval_minutes": 10**12}}
        )
        assert response.status_code == 400

    def test_oversized_meeting_duration_returns_422(self, client: TestClient) -> None:
        response = client.post(
            "/api/scheduling/slots",
            json={"meetings": [{"date": "2024-01-01T09:00:00Z", "duration": 10**12}]},
        )
        assert response.status_code == 422

    def test_zero_interval_returns_400(self, client: TestClient) -> None:
        response = client.post("/api/scheduling/slots", json={"query": {"interval_minutes": 0}})
        assert response.status_code == 400


# ---------------------------------------------------------------------------
# Agenda merge, consensus, refine
# ---------------------------------------------------------------------------


STORED_ITEM = {
    "id": "item-1",
    "title": "Budget",
    "createdBy": "alice",
    "createdAt": "2023-12-01T10:00:00+00:00",
    "votes": 2,
    "comments": [{"text": "great", "createdBy": "bob"}],
}


class TestAgendaEndpoints:
    def test_merge_keeps_engagement(self, client: TestClient) -> None:
        response = client.post(
            "/api/agenda/merge",
            json={
                "extracted": [{"title": "Budget", "duration": 15}, {"title": "Hiring"}],
                "prior": [STORED_ITEM],
            },
        )
        assert response.status_code == 200, response.text
        budget, hiring = response.json()["items"]
        assert budget["id"] == "item-1"
        assert budget["votes"] == 2
        assert budget["duration"] == 15
        assert budget["comments"][0]["text"] == "great"
        assert hiring["createdBy"] == "AI Assistant"
        assert hiring["votes"] == 0
        assert hiring["id"] != "item-1"

    def test_merge_rejects_negative_votes(self, client: TestClient) -> None:
        response = client.post(
            "/api/agenda/merge",
            json={"extracted": [], "prior": [{**STORED_ITEM, "votes": -1}]},
        )
        assert response.status_code == 422

    def test_consensus(self, client: TestClient) -> None:
        response = client.post("/api/agenda/consensus", json={"items": [STORED_ITEM]})
        assert response.status_code == 200, response.text
        assert response.json() == {
            "items": [
                {
                    "itemId": "item-1",
                    "title": "Budget",
                    "consensusScore": 80,
                    "hasDisagreement": False,
                }
            ]
        }

    def test_refine_unknown_meeting_returns_404(self, client: TestClient) -> None:
        with (
            patch("agentda.api.routes.agenda.get_supabase_client", return_value=MagicMock()),
            patch(
                "agentda.api.routes.agenda.load_agenda",
                side_effect=MeetingNotFoundError("missing"),
            ),
            patch("agentda.api.routes.agenda.save_agenda") as save,
        ):
            response = client.post(
                "/api/meetings/missing/agenda/refine", json={"items": [{"title": "Budget"}]}
            )

        assert response.status_code == 404
        save.assert_not_called()

    def test_refine_saves_merged_agenda(self, client: TestClient) -> None:
        prior = [AgendaItem(id="item-1", title="Budget", created_by="alice", votes=4)]
        with (
            patch("agentda.api.routes.agenda.get_supabase_client", return_value=MagicMock()),
            patch("agentda.api.routes.agenda.load_agenda", return_value=prior),
            patch("agentda.api.routes.agenda.save_agenda") as save,
        ):
            response = client.post(
                "/api/meetings/m-1/agenda/refine",
                json={"items": [{"title": "Budget", "category": "Decision"}]},
            )

        assert response.status_code == 200, response.text
        (item,) = response.json()["items"]
        assert item["id"] == "item-1"
        assert item["votes"] == 4
        assert item["category"] == "Decision"

        save.assert_called_once()
        _, meeting_id, saved = save.call_args.args
        assert meeting_id == "m-1"
        assert saved[0].id == "item-1"

    def test_refine_through_supabase_client(self, client: TestClient) -> None:
        """Storage helpers read the stored agenda and write back the merged one."""
        mock_supabase = MagicMock()
        table = mock_supabase.table.return_value
        table.select.return_value.eq.return_value.execute.return_value.data = [
            {"id": "m-1", "agenda": [STORED_ITEM]}
        ]

        with patch("agentda.api.routes.agenda.get_supabase_client", return_value=mock_supabase):
            response = client.post(
                "/api/meetings/m-1/agenda/refine", json={"items": [{"title": "Budget"}]}
            )

        assert response.status_code == 200, response.text
        mock_supabase.table.assert_called_with("meetings")
        (payload,) = table.update.call_args.args
        assert payload["agenda"][0]["id"] == "item-1"
        assert payload["agenda"][0]["votes"] == 2
