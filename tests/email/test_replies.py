"""Tests for inbound reply matching and logging."""

from __future__ import annotations

from typing import Any

import pytest

from influencerflow.domain.errors import NotFoundError
from influencerflow.email.models import DirectReply, InboundReply
from influencerflow.email.replies import message_id_candidates, normalize_subject

SUBJECT = "Collaboration Opportunity: Summer Glow Launch"


@pytest.fixture
def processor(services: dict[str, Any]):
    return services["reply_processor"]


@pytest.fixture
def outreach(services, campaign, creator) -> dict[str, Any]:
    return services["communications"].insert(
        channel="email",
        direction="outbound",
        message_type="initial_outreach",
        subject=SUBJECT,
        content="Hi Maya",
        campaign_id=campaign["id"],
        creator_id=creator["id"],
        external_id="re_msg_1",
        delivered=True,
    )


class TestNormalizeSubject:
    @pytest.mark.parametrize(
        ("subject", "expected"),
        [
            ("Re: Hello", "hello"),
            ("RE: re: Fwd: FW:  Hello   World", "hello world"),
            ("Regarding the deal", "regarding the deal"),
            (None, ""),
        ],
    )
    def test_strips_prefixes(self, subject, expected) -> None:
        assert normalize_subject(subject) == expected


class TestMessageIdCandidates:
    def test_bracketed_address(self) -> None:
        assert message_id_candidates("<re_msg_1@resend.dev>") == [
            "<re_msg_1@resend.dev>",
            "re_msg_1@resend.dev",
            "re_msg_1",
        ]

    def test_plain_id(self) -> None:
        assert message_id_candidates("re_msg_1") == ["re_msg_1"]

    def test_blank(self) -> None:
        assert message_id_candidates("  ") == []


class TestWebhookReply:
    def test_matches_by_in_reply_to(self, services, processor, outreach, brand) -> None:
        other = services["communications"].insert(
            channel="email",
            direction="outbound",
            message_type="initial_outreach",
            subject=SUBJECT,
            content="Another creator",
            campaign_id=outreach["campaign_id"],
            creator_id="someone-else",
            external_id="re_msg_2",
        )
        result = processor.process_webhook_reply(
            InboundReply.model_validate(
                {
                    "from": "maya@example.com",
                    "subject": f"Re: {SUBJECT}",
                    "text": "I'm very interested!",
                    "message-id": "<reply-1@mail.example.com>",
                    "in-reply-to": "<re_msg_1@resend.dev>",
                }
            )
        )

        assert result["message"] == "Email reply processed successfully"
        logged = services["communications"].get(result["communication_log_id"])
        assert logged["direction"] == "inbound"
        assert logged["message_type"] == "reply"
        assert logged["thread_id"] == "re_msg_1"
        assert logged["creator_id"] == outreach["creator_id"]

        assert services["communications"].get(outreach["id"])["responded"] is True
        assert services["communications"].get(other["id"])["responded"] is False

        notes = services["notifications"].list_for_user(brand["id"])
        assert notes[0]["title"] == "Creator Response Received"
        assert notes[0]["action_url"].endswith("?tab=communications")

    def test_matches_by_normalized_subject(self, services, processor, outreach) -> None:
        result = processor.process_webhook_reply(
            InboundReply(subject=f"RE: Fwd: {SUBJECT.upper()}", text="Sounds good")
        )
        assert "communication_log_id" in result
        assert services["communications"].get(outreach["id"])["responded"] is True

    @pytest.mark.parametrize(
        ("stored", "reply_subject"),
        [
            ("Summer  Glow Launch", "Re: Summer Glow Launch"),
            ("Été Éclat Launch", "Re: ÉTÉ ÉCLAT LAUNCH"),
        ],
    )
    def test_subject_match_normalizes_stored_subject(
        self, services, processor, campaign, creator, stored, reply_subject
    ) -> None:
        original = services["communications"].insert(
            channel="email",
            direction="outbound",
            message_type="initial_outreach",
            subject=stored,
            content="Hi Maya",
            campaign_id=campaign["id"],
            creator_id=creator["id"],
            external_id="re_msg_2",
        )

        result = processor.process_webhook_reply(InboundReply(subject=reply_subject, text="Yes!"))

        assert "communication_log_id" in result
        assert services["communications"].get(original["id"])["responded"] is True

    def test_partial_subject_does_not_match(self, services, processor, outreach) -> None:
        result = processor.process_webhook_reply(
            InboundReply(subject="Re: Summer Glow", text="Hello")
        )
        assert result["message"] == "Email received but could not match to original campaign"
        assert services["communications"].get(outreach["id"])["responded"] is False

    def test_unmatched_reply_is_logged_without_campaign(self, services, processor) -> None:
        processor.process_webhook_reply(InboundReply(subject="Hello?", html="<p>Who is this?</p>"))
        rows = services["communications"].query(direction="inbound")
        assert len(rows) == 1
        assert rows[0]["campaign_id"] is None
        assert rows[0]["content"] == "Who is this?"

    def test_marks_recommendation_responded(self, services, processor, outreach) -> None:
        recommendation_id = services["campaigns"].create_recommendation(
            campaign_id=outreach["campaign_id"],
            creator_id=outreach["creator_id"],
            status="contacted",
        )
        processor.process_webhook_reply(InboundReply(in_reply_to="re_msg_1", text="Yes"))
        assert services["campaigns"].get_recommendation(recommendation_id)["status"] == "responded"


class TestDirectReply:
    def test_logs_general_reply(self, services, processor, outreach, brand) -> None:
        result = processor.process_direct_reply(
            DirectReply(
                from_email="MAYA@example.com",
                subject="Re: Collaboration",
                text_content="Count me in",
                in_reply_to="re_msg_1",
            )
        )
        logged = services["communications"].get(result["reply_id"])
        assert logged["message_type"] == "general"
        assert logged["external_id"].startswith("reply_")
        assert services["communications"].get(outreach["id"])["responded"] is True
        notes = services["notifications"].list_for_user(brand["id"])
        assert notes[0]["message"] == "Maya Chen replied to your outreach: Re: Collaboration"

    def test_unknown_original(self, processor, creator) -> None:
        with pytest.raises(NotFoundError) as exc_info:
            processor.process_direct_reply(
                DirectReply(from_email=creator["email"], in_reply_to="nope")
            )
        assert exc_info.value.resource == "Original message"

    def test_unknown_sender(self, processor, outreach) -> None:
        with pytest.raises(NotFoundError) as exc_info:
            processor.process_direct_reply(
                DirectReply(from_email="stranger@example.com", in_reply_to="re_msg_1")
            )
        assert exc_info.value.resource == "Creator"
