import logging
import re
import anthropic
from listing_watch.models import Listing

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are a content filter that rates Craigslist listings. "
    "Respond only with a number between 0 (spam/scam) and 1 (legitimate)."
)

# Scores default here when the model is unreachable or answers nonsense, so a
# flaky classifier never drops legitimate listings.
FAIL_OPEN_SCORE = 1.0

_LEADING_NUMBER = re.compile(r"\s*([-+]?(?:\d+(?:\.\d*)?|\.\d+))")


def build_prompt(listing: Listing) -> str:
    return f"""Analyze this Craigslist listing for potential spam, scams, or inappropriate content:
Title: {listing.title}
Price: {listing.price or "Not specified"}
Description: {listing.description or "No description"}

Rate this listing from 0 (definitely spam/scam) to 1 (definitely legitimate) based on:
1. Presence of common scam patterns
2. Unrealistic pricing
3. Suspicious contact methods
4. Inappropriate content
5. Overall legitimacy

Return only a number between 0 and 1."""


def parse_score(raw: str | None) -> float:
    """Read the leading number of an untrusted reply, clamped to [0, 1]."""
    if not raw:
        return FAIL_OPEN_SCORE
    match = _LEADING_NUMBER.match(raw)
    if not match:
        return FAIL_OPEN_SCORE
    return min(1.0, max(0.0, float(match.group(1))))


class RelevanceClassifier:
    def __init__(self, api_key: str, model: str = "claude-haiku-4-5-20251001"):
        self.client = anthropic.Anthropic(api_key=api_key)
        self.model = model

    def score(self, listing: Listing) -> float:
        try:
            response = self.client.messages.create(
                model=self.model,
                max_tokens=8,
                temperature=0.1,
                system=SYSTEM_PROMPT,
                messages=[{"role": "user", "content": build_prompt(listing)}],
            )
            raw = response.content[0].text
        except anthropic.APIError as e:
            logger.error(f"Relevance check failed for {listing.id}: {e}")
            return FAIL_OPEN_SCORE
        except (IndexError, AttributeError) as e:
            logger.error(f"Unexpected classifier response for {listing.id}: {e}")
            return FAIL_OPEN_SCORE

        return parse_score(raw)
