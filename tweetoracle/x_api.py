from __future__ import annotations

import sys
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import requests

from tweetoracle.errors import AttestationUnavailable
from tweetoracle.models import PublicMetrics, Tweet

TWEET_FIELDS = (
    "author_id",
    "context_annotations",
    "conversation_id",
    "created_at",
    "in_reply_to_user_id",
    "public_metrics",
    "source",
    "text",
    "withheld",
)


def _parse_created_at(value: str) -> datetime:
    # X API returns e.g. 2023-12-11T05:14:12.000Z
    dt = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def _optional_int(metrics: Dict[str, Any], key: str) -> Optional[int]:
    value = metrics.get(key)
    return None if value is None else int(value)


def _text(raw_tweet: Dict[str, Any]) -> str:
    # null text is treated as empty and fails the tag check downstream
    text = raw_tweet.get("text")
    if text is None:
        return ""
    if not isinstance(text, str):
        raise TypeError(f"text must be a string, got {type(text).__name__}")
    return text


@dataclass(frozen=True)
class XAPIClient:
    bearer_token: str
    timeout_s: int = 30
    base_url: str = "https://api.twitter.com/2"

    def _get(self, url: str, params: Dict[str, Any]) -> Dict[str, Any]:
        """
        Make GET request with Bearer token authentication.
        No retry: any failure is reported as AttestationUnavailable.
        """
        headers = {"Authorization": f"Bearer {self.bearer_token}"}
        try:
            resp = requests.get(url, headers=headers, params=params, timeout=self.timeout_s)
        except requests.exceptions.RequestException as e:
            raise AttestationUnavailable(f"X API request failed: {e}") from e

        if resp.status_code >= 400:
            print(f"X API error: HTTP {resp.status_code} for {resp.url}", file=sys.stderr)
            print(resp.text[:2000], file=sys.stderr)
            raise AttestationUnavailable(f"X API returned HTTP {resp.status_code}")

        try:
            return resp.json()
        except ValueError as e:
            raise AttestationUnavailable(
                f"X API returned invalid JSON (status {resp.status_code}): {resp.text[:200]}"
            ) from e

    def get_tweet(self, tweet_id: int) -> Tweet:
        """
        Fetch a single tweet by id using X API v2.

        Raises AttestationUnavailable if the request fails, the tweet is not
        found, or the response cannot be parsed.
        """
        if not self.bearer_token:
            raise AttestationUnavailable("X API bearer token is not configured")

        url = f"{self.base_url}/tweets/{tweet_id}"
        params = {"tweet.fields": ",".join(TWEET_FIELDS)}
        data = self._get(url, params)

        raw_tweet = data.get("data") if isinstance(data, dict) else None
        if not raw_tweet:
            errors = data.get("errors") if isinstance(data, dict) else None
            raise AttestationUnavailable(f"tweet {tweet_id} not found: {errors}")

        return self.parse_tweet(raw_tweet)

    def parse_tweet(self, raw_tweet: Dict[str, Any]) -> Tweet:
        """
        Parse an X API v2 tweet object into a Tweet.

        created_at is required. public_metrics may be missing, in which case
        the tweet is returned without metrics and fails at scoring.
        """
        try:
            tweet_id = str(raw_tweet["id"])
            created_at = raw_tweet.get("created_at")
            if not created_at:
                raise AttestationUnavailable(f"tweet {tweet_id} has no created_at")

            metrics = raw_tweet.get("public_metrics")
            public_metrics = None
            if metrics is not None:
                public_metrics = PublicMetrics(
                    like_count=int(metrics["like_count"]),
                    reply_count=int(metrics["reply_count"]),
                    retweet_count=int(metrics["retweet_count"]),
                    quote_count=_optional_int(metrics, "quote_count"),
                    impression_count=_optional_int(metrics, "impression_count"),
                )

            return Tweet(
                tweet_id=tweet_id,
                author_id=str(raw_tweet.get("author_id", "")),
                created_at_utc=_parse_created_at(created_at),
                text=_text(raw_tweet),
                public_metrics=public_metrics,
                withheld=raw_tweet.get("withheld"),
            )
        except (KeyError, ValueError, TypeError, AttributeError) as e:
            raise AttestationUnavailable(f"X API returned a malformed tweet: {e}") from e
