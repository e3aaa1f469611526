from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Dict, Optional, Type

from tweetoracle.errors import (
    IneligibleTweet,
    MissingRequiredMention,
    MissingRequiredTag,
    TooRecent,
    Withheld,
)
from tweetoracle.models import EligibilityDecision, IneligibleReason, Tweet

MIN_TWEET_AGE_S = 4 * 3_600


@dataclass(frozen=True)
class EligibilityPolicy:
    required_tag: str = "$VTX"
    required_mention: str = "@Vortexcoin"
    min_age_s: int = MIN_TWEET_AGE_S


DEFAULT_POLICY = EligibilityPolicy()

_ERRORS: Dict[IneligibleReason, Type[IneligibleTweet]] = {
    IneligibleReason.TOO_RECENT: TooRecent,
    IneligibleReason.MISSING_REQUIRED_TAG: MissingRequiredTag,
    IneligibleReason.MISSING_REQUIRED_MENTION: MissingRequiredMention,
    IneligibleReason.WITHHELD: Withheld,
}


def _reject(reason: IneligibleReason, detail: str) -> EligibilityDecision:
    return EligibilityDecision(accepted=False, reason=reason, detail=detail)


def evaluate_eligibility(
    tweet: Tweet,
    now: Optional[datetime] = None,
    policy: EligibilityPolicy = DEFAULT_POLICY,
) -> EligibilityDecision:
    """
    Check if the tweet is eligible for rewards.

    Checks run in a fixed order and the first failure is reported:
    - Tweet must be older than min_age_s (an age of exactly min_age_s fails)
    - Text must contain the required tag
    - Text must contain the required mention
    - Tweet must not be withheld in any country

    Matching is exact and case-sensitive.
    """
    if now is None:
        now = datetime.now(timezone.utc)

    # Whole seconds, same resolution as the on-chain clock
    created_ts = int(tweet.created_at_utc.timestamp())
    now_ts = int(now.timestamp())
    if created_ts >= now_ts - policy.min_age_s:
        return _reject(
            IneligibleReason.TOO_RECENT,
            f"tweet must be older than {policy.min_age_s}s",
        )

    if policy.required_tag not in tweet.text:
        return _reject(
            IneligibleReason.MISSING_REQUIRED_TAG,
            f"tweet must contain {policy.required_tag}",
        )

    if policy.required_mention not in tweet.text:
        return _reject(
            IneligibleReason.MISSING_REQUIRED_MENTION,
            f"tweet must contain {policy.required_mention}",
        )

    if tweet.withheld is not None:
        return _reject(IneligibleReason.WITHHELD, "tweet is withheld")

    return EligibilityDecision(accepted=True)


def assert_eligible(
    tweet: Tweet,
    now: Optional[datetime] = None,
    policy: EligibilityPolicy = DEFAULT_POLICY,
) -> EligibilityDecision:
    """Like evaluate_eligibility, but raises the matching IneligibleTweet on rejection."""
    decision = evaluate_eligibility(tweet, now=now, policy=policy)
    if not decision.accepted:
        raise _ERRORS[decision.reason](decision.detail)
    return decision
