"""Prompt templates for content generation.

Templates use Python string placeholders ({variable_name}) filled from the
request's ``data`` object.
"""

CAMPAIGN_DESCRIPTION_PROMPT = """Create a compelling campaign description for {brand_name} \
promoting their {product_type} to {target_audience}.
Campaign goals: {campaign_goals}

Generate a professional campaign description that includes:
- Clear campaign objectives
- Target audience details
- Key messaging points
- Expected deliverables

Keep it engaging and under 300 words."""

OUTREACH_MESSAGE_PROMPT = """Write a professional outreach message to influencer \
{influencer_name} for a {campaign_type} campaign with {brand_name}.

Compensation: {compensation}

The message should be:
- Professional but friendly
- Clear about the opportunity
- Mention the compensation
- Include a call to action
- Under 150 words

Make it personalized and engaging."""

CONTENT_IDEAS_PROMPT = """Generate 5 creative content ideas for a {niche} influencer on \
{platform} for a campaign about {campaign_theme}.

Each idea should include:
- Content format (post, reel, story, etc.)
- Brief description
- Key elements to include
- Hashtag suggestions

Make them engaging and platform-appropriate."""
