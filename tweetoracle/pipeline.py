from __future__ import annotations

import sys
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional, Protocol

from tweetoracle.config import SETTLE_METHOD
from tweetoracle.eligibility import DEFAULT_POLICY, EligibilityPolicy, assert_eligible
from tweetoracle.models import HostContext, Instruction, Tweet
from tweetoracle.params import decode_params
from tweetoracle.scoring import DEFAULT_WEIGHTS, ScoreWeights, score_tweet
from tweetoracle.settlement import build_settle_instruction


class TweetFetcher(Protocol):
    def get_tweet(self, tweet_id: int) -> Tweet: ...


def _log(msg: str) -> None:
    # stdout is reserved for the emitted result
    print(msg, file=sys.stderr)


@dataclass(frozen=True)
class TweetSettlementPipeline:
    fetcher: TweetFetcher
    host: HostContext
    policy: EligibilityPolicy = DEFAULT_POLICY
    weights: ScoreWeights = DEFAULT_WEIGHTS
    method: str = SETTLE_METHOD

    def run(self, raw_params: bytes, now: Optional[datetime] = None) -> Instruction:
        """
        decode -> fetch -> validate -> score -> encode.
        Any stage failure raises and nothing is returned.
        """
        if now is None:
            now = datetime.now(timezone.utc)

        params = decode_params(raw_params)
        _log(f"Decoded params for @{params.handle} tweet {params.attestation_id}")

        tweet = self.fetcher.get_tweet(params.attestation_id)
        _log(f"Fetched tweet {tweet.tweet_id} created {tweet.created_at_utc.isoformat()}")

        assert_eligible(tweet, now=now, policy=self.policy)
        _log("OK: tweet is eligible")

        points = score_tweet(tweet, self.weights)
        _log(f"Score: {points}")

        return build_settle_instruction(params, self.host, points, method=self.method)
