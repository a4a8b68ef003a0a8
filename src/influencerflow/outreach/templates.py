"""Templated outreach messages."""

from __future__ import annotations

from typing import Any

AI_MARKER = "\N{ROBOT FACE}"
AI_MARKER_LINE = (
    f"{AI_MARKER} This message was crafted with AI assistance to ensure the best "
    "possible match for your collaboration preferences."
)


def is_ai_generated(message: str) -> bool:
    """True when *message* carries the AI-assistance marker."""
    return AI_MARKER in message or "AI analysis" in message


def _format_budget(budget: Any) -> str:
    if isinstance(budget, bool) or not isinstance(budget, int | float):
        return "competitive compensation"
    return f"${budget:,.0f}" if float(budget).is_integer() else f"${budget:,.2f}"


def render_outreach_message(
    *,
    creator_name: str,
    creator_niche: str,
    campaign_title: str,
    campaign_description: str,
    recommended_budget: Any = None,
    deliverables: list[str] | None = None,
    confidence_score: float | None = None,
    match_reasoning: str = "",
) -> str:
    """Build the outreach message for a recommended creator.

    The message ends with the AI-assistance marker line, which the send path
    uses to flag the logged message as AI generated.
    """
    offered = ", ".join(deliverables) if deliverables else "engaging content"
    wanted = (
        "\n".join(f"\N{BULLET} {item}" for item in deliverables)
        if deliverables
        else "\N{BULLET} Authentic, engaging content that resonates with your audience"
    )
    match_percent = round((confidence_score or 0.8) * 100)

    return f"""Hi {creator_name},

I hope you're doing well! I'm reaching out regarding an exciting collaboration opportunity for our "{campaign_title}" campaign.

{match_reasoning}

Based on your expertise in {creator_niche}, I believe you'd be a perfect fit for this partnership. We're offering {_format_budget(recommended_budget)} for creating {offered}.

Here's what we're looking for:
{wanted}

Campaign Details:
{campaign_description}

Our AI matching system identified you as a {match_percent}% match for this campaign, which means we believe your content style and audience align perfectly with our brand values.

Would you be interested in learning more about this opportunity? I'd love to discuss the details further and answer any questions you might have.

Looking forward to the possibility of working together!

Best regards,
The InfluencerFlow Team

{AI_MARKER_LINE}"""
