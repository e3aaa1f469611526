from __future__ import annotations

from dataclasses import dataclass
from typing import Dict

from tweetoracle.errors import ArithmeticOverflow, MissingMetric
from tweetoracle.models import U64_MAX, Tweet

@dataclass(frozen=True)
class ScoreWeights:
    """Points awarded per unit of each public metric."""

    like: int = 1
    reply: int = 1
    quote: int = 1
    retweet: int = 1

DEFAULT_WEIGHTS = ScoreWeights()

def engagement_counts(t: Tweet) -> Dict[str, int]:
    """
    Pull the four scored counters out of the tweet's public metrics.
    Raises MissingMetric if metrics, or the optional quote_count, are absent.
    """
    metrics = t.public_metrics
    if metrics is None:
        raise MissingMetric(f"tweet {t.tweet_id} has no public_metrics")
    if metrics.quote_count is None:
        raise MissingMetric(f"tweet {t.tweet_id} has no quote_count")

    counts = {
        "like": metrics.like_count,
        "reply": metrics.reply_count,
        "quote": metrics.quote_count,
        "retweet": metrics.retweet_count,
    }
    for name, value in counts.items():
        if not isinstance(value, int) or isinstance(value, bool) or value < 0:
            raise MissingMetric(f"tweet {t.tweet_id} has invalid {name}_count: {value!r}")
    return counts

def score_tweet(t: Tweet, weights: ScoreWeights = DEFAULT_WEIGHTS) -> int:
    """
    Score a tweet as a weighted sum of likes, replies, quotes and retweets.

    The result must fit in a u64; anything larger raises ArithmeticOverflow
    instead of wrapping.
    """
    counts = engagement_counts(t)

    points = 0
    for name, count in counts.items():
        points += count * getattr(weights, name)
        if points > U64_MAX:
            raise ArithmeticOverflow(f"tweet {t.tweet_id} score overflows u64")

    return points
