"""
Tests for the tweet eligibility policy.
Checks run in order: age, tag, mention, withheld.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from tweetoracle.eligibility import EligibilityPolicy, assert_eligible, evaluate_eligibility
from tweetoracle.errors import (
    IneligibleTweet,
    MissingRequiredMention,
    MissingRequiredTag,
    TooRecent,
    Withheld,
)
from tweetoracle.models import IneligibleReason, PublicMetrics, Tweet

NOW = datetime(2026, 1, 10, 12, 0, 0, tzinfo=timezone.utc)
GOOD_TEXT = "Loving $VTX, thanks @Vortexcoin"


def make_tweet(age_s: int = 5 * 3600, text: str = GOOD_TEXT, withheld=None) -> Tweet:
    return Tweet(
        tweet_id="1734080437859787085",
        author_id="44196397",
        created_at_utc=NOW - timedelta(seconds=age_s),
        text=text,
        public_metrics=PublicMetrics(like_count=1, reply_count=0, retweet_count=0, quote_count=0),
        withheld=withheld,
    )


def test_eligible_tweet_accepted():
    """Test 1: Old, tagged, mentioned, not withheld."""
    decision = assert_eligible(make_tweet(), now=NOW)
    assert decision.accepted
    assert decision.reason is None


@pytest.mark.parametrize("age_s", [0, 60, 3600, 4 * 3600 - 1, 4 * 3600])
def test_too_recent(age_s):
    """Test 2: Anything up to and including exactly 4h old is rejected."""
    decision = evaluate_eligibility(make_tweet(age_s=age_s), now=NOW)
    assert not decision.accepted
    assert decision.reason == IneligibleReason.TOO_RECENT
    with pytest.raises(TooRecent):
        assert_eligible(make_tweet(age_s=age_s), now=NOW)


def test_one_second_past_threshold_accepted():
    """Test 3: 4h + 1s passes the age check."""
    assert evaluate_eligibility(make_tweet(age_s=4 * 3600 + 1), now=NOW).accepted


def test_future_tweet_too_recent():
    """Test 4: A created_at in the future is too recent."""
    assert evaluate_eligibility(make_tweet(age_s=-600), now=NOW).reason == IneligibleReason.TOO_RECENT


def test_missing_tag():
    """Test 5: No $VTX."""
    with pytest.raises(MissingRequiredTag):
        assert_eligible(make_tweet(text="hello @Vortexcoin"), now=NOW)


def test_missing_mention():
    """Test 6: No @Vortexcoin."""
    with pytest.raises(MissingRequiredMention):
        assert_eligible(make_tweet(text="hello $VTX"), now=NOW)


def test_matching_is_case_sensitive():
    """Test 7: $vtx and @vortexcoin do not count."""
    decision = evaluate_eligibility(make_tweet(text="$vtx @Vortexcoin"), now=NOW)
    assert decision.reason == IneligibleReason.MISSING_REQUIRED_TAG
    decision = evaluate_eligibility(make_tweet(text="$VTX @vortexcoin"), now=NOW)
    assert decision.reason == IneligibleReason.MISSING_REQUIRED_MENTION


@pytest.mark.parametrize("withheld", [{"copyright": True, "country_codes": ["DE"]}, {}])
def test_withheld(withheld):
    """Test 8: Any withheld value rejects, even an empty one."""
    with pytest.raises(Withheld):
        assert_eligible(make_tweet(withheld=withheld), now=NOW)


def test_check_order():
    """Test 9: First failing check wins."""
    # withheld and untagged -> tag
    d = evaluate_eligibility(make_tweet(text="@Vortexcoin", withheld={}), now=NOW)
    assert d.reason == IneligibleReason.MISSING_REQUIRED_TAG

    # too recent and untagged -> too recent
    d = evaluate_eligibility(make_tweet(age_s=60, text="nothing"), now=NOW)
    assert d.reason == IneligibleReason.TOO_RECENT

    # untagged and unmentioned -> tag
    d = evaluate_eligibility(make_tweet(text="nothing"), now=NOW)
    assert d.reason == IneligibleReason.MISSING_REQUIRED_TAG


def test_errors_share_base_class():
    """Test 10: All rejections are IneligibleTweet."""
    with pytest.raises(IneligibleTweet):
        assert_eligible(make_tweet(text="nothing"), now=NOW)


def test_custom_policy():
    """Test 11: Tag, mention and age come from the policy."""
    policy = EligibilityPolicy(required_tag="$ABC", required_mention="@abc", min_age_s=60)
    tweet = make_tweet(age_s=120, text="$ABC @abc")
    assert evaluate_eligibility(tweet, now=NOW, policy=policy).accepted
    assert not evaluate_eligibility(tweet, now=NOW).accepted
