from __future__ import annotations

from dataclasses import dataclass
from dotenv import load_dotenv
import os
from typing import Optional

from tweetoracle.eligibility import EligibilityPolicy
from tweetoracle.errors import ConfigError
from tweetoracle.scoring import ScoreWeights


def _getenv(name: str, default: Optional[str] = None) -> str:
    val = os.getenv(name, default)
    if val is None:
        raise ConfigError(f"Missing required env var: {name}")
    return val


def _getenv_int(name: str, default: str) -> int:
    raw = _getenv(name, default)
    try:
        return int(raw)
    except ValueError as e:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from e


# X API v2
X_API_BASE_URL = "https://api.twitter.com/2"

# Anchor method on the rewards program that consumes the settlement
SETTLE_METHOD = "process_tweet_settle"

CLUSTERS = {"devnet", "mainnet-beta", "testnet", "localnet"}


def validate_cluster(cluster: str) -> None:
    """Hard fail on an unknown cluster name."""
    if cluster not in CLUSTERS:
        raise ConfigError(f"Unknown cluster: {cluster} (expected one of {sorted(CLUSTERS)})")


@dataclass(frozen=True)
class Settings:
    cluster: str

    x_api_bearer_token: str
    x_api_base_url: str
    x_api_timeout_s: int

    policy: EligibilityPolicy
    weights: ScoreWeights

    settle_method: str


def load_settings() -> Settings:
    load_dotenv()

    cluster = _getenv("TWEETORACLE_CLUSTER", "devnet").strip().lower()
    validate_cluster(cluster)

    x_api_bearer_token = _getenv("TWEETORACLE_X_API_BEARER_TOKEN", "").strip()
    x_api_base_url = _getenv("TWEETORACLE_X_API_BASE_URL", X_API_BASE_URL).rstrip("/")
    x_api_timeout_s = _getenv_int("TWEETORACLE_X_API_TIMEOUT_S", "30")

    # Tag and mention are matched verbatim, so they are not stripped
    policy = EligibilityPolicy(
        required_tag=_getenv("TWEETORACLE_REQUIRED_TAG", "$VTX"),
        required_mention=_getenv("TWEETORACLE_REQUIRED_MENTION", "@Vortexcoin"),
        min_age_s=_getenv_int("TWEETORACLE_MIN_TWEET_AGE_S", "14400"),
    )

    weights = ScoreWeights(
        like=_getenv_int("TWEETORACLE_LIKE_WEIGHT", "1"),
        reply=_getenv_int("TWEETORACLE_REPLY_WEIGHT", "1"),
        quote=_getenv_int("TWEETORACLE_QUOTE_WEIGHT", "1"),
        retweet=_getenv_int("TWEETORACLE_RETWEET_WEIGHT", "1"),
    )

    settle_method = _getenv("TWEETORACLE_SETTLE_METHOD", SETTLE_METHOD).strip()

    if x_api_timeout_s <= 0:
        raise ConfigError("TWEETORACLE_X_API_TIMEOUT_S must be positive")
    if not policy.required_tag or not policy.required_mention:
        raise ConfigError("TWEETORACLE_REQUIRED_TAG and TWEETORACLE_REQUIRED_MENTION must be non-empty")
    if policy.min_age_s < 0:
        raise ConfigError("TWEETORACLE_MIN_TWEET_AGE_S must be >= 0")
    if min(weights.like, weights.reply, weights.quote, weights.retweet) < 0:
        raise ConfigError("Score weights must be >= 0")
    if not settle_method:
        raise ConfigError("TWEETORACLE_SETTLE_METHOD must be non-empty")

    return Settings(
        cluster=cluster,
        x_api_bearer_token=x_api_bearer_token,
        x_api_base_url=x_api_base_url,
        x_api_timeout_s=x_api_timeout_s,
        policy=policy,
        weights=weights,
        settle_method=settle_method,
    )
