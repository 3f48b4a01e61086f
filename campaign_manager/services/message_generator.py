# campaign_manager/services/message_generator.py
"""Template-based outreach messages for scraped LinkedIn profiles."""
import random
from typing import Any, Dict, Optional

from campaign_manager.core import errors

REQUIRED_FIELDS = ("name", "job_title", "company", "location", "summary")

TEMPLATES = (
    """Hi {name},

I noticed your impressive work as {job_title} at {company}. Your experience in {location} caught my attention, especially your background in "{summary_30}...".

Our campaign management and outreach automation tool has helped professionals like you improve lead generation by up to 40%. Would you be open to a quick chat about how we could help streamline your outreach efforts?

Looking forward to connecting,
[Your Name]""",
    """Hello {name},

I came across your profile and was impressed by your role as {job_title} at {company}. Your experience in {location} is exactly the kind of background we've seen success with.

I'm reaching out because our campaign management platform has been helping professionals in {company_first_word} improve their lead generation and outreach efforts. Based on your focus on "{summary_25}...", I think you might find our automation tools particularly valuable.

Would you be interested in a brief conversation about how we might help?

Best regards,
[Your Name]""",
    """{name},

Your work as {job_title} at {company} caught my attention. I'm particularly impressed by your experience in {location} and your focus on "{summary_35}...".

I lead growth at a company that provides campaign management and outreach automation tools specifically designed for professionals in your industry. Our clients typically see a 35% increase in response rates within the first month.

Would you be open to a 15-minute call to explore if our solution might be valuable for your team at {company}?

Warm regards,
[Your Name]""",
)

_rng = random.Random()


def missing_fields(profile: Dict[str, Any]) -> list:
    return [field for field in REQUIRED_FIELDS if not profile.get(field)]


def generate_personalized_message(profile: Dict[str, Any], rng: Optional[random.Random] = None) -> str:
    """Fill a randomly chosen template with the profile's details."""
    missing = missing_fields(profile)
    if missing:
        raise errors.ValidationError("Missing required fields", details=f"Missing fields: {', '.join(missing)}")

    fields = {field: str(profile[field]) for field in REQUIRED_FIELDS}
    summary = fields["summary"]
    template = (rng or _rng).choice(TEMPLATES)
    return template.format(
        summary_25=summary[:25],
        summary_30=summary[:30],
        summary_35=summary[:35],
        company_first_word=fields["company"].split(" ")[0],
        **fields,
    )
