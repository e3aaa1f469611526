from __future__ import annotations

import argparse
import sys
from datetime import datetime, timezone
from typing import List, Optional

from tweetoracle.config import load_settings
from tweetoracle.eligibility import evaluate_eligibility
from tweetoracle.errors import ConfigError, OracleError
from tweetoracle.params import decode_params
from tweetoracle.pipeline import TweetSettlementPipeline
from tweetoracle.runner import emit, load_host_context, read_container_params
from tweetoracle.scoring import score_tweet
from tweetoracle.settlement import encode_payload, get_ixn_discriminator
from tweetoracle.x_api import XAPIClient


def _err(msg: str) -> None:
    print(msg, file=sys.stderr)


def _client(s) -> XAPIClient:
    return XAPIClient(
        bearer_token=s.x_api_bearer_token,
        timeout_s=s.x_api_timeout_s,
        base_url=s.x_api_base_url,
    )


def cmd_run(params: Optional[str] = None) -> None:
    """Run the full pipeline and emit the settlement instruction."""
    s = load_settings()
    host = load_host_context()
    _err(f"Running on {s.cluster} with signer {host.signer}")

    if not s.x_api_bearer_token:
        _err("WARNING: TWEETORACLE_X_API_BEARER_TOKEN not set, tweet fetch will fail")

    pipeline = TweetSettlementPipeline(
        fetcher=_client(s),
        host=host,
        policy=s.policy,
        weights=s.weights,
        method=s.settle_method,
    )
    ix = pipeline.run(read_container_params(params))
    emit([ix])


def cmd_decode_params(params: Optional[str] = None) -> None:
    p = decode_params(read_container_params(params))
    print(f"program_id:          {p.program_id}")
    print(f"realm_address:       {p.realm_address}")
    print(f"user_address:        {p.user_address}")
    print(f"user_record_address: {p.user_record_address}")
    print(f"handle:              @{p.handle}")
    print(f"attestation_id:      {p.attestation_id}")


def cmd_check_tweet(tweet_id: int) -> None:
    """Fetch a tweet and report eligibility and score without emitting anything."""
    s = load_settings()
    tweet = _client(s).get_tweet(tweet_id)
    now = datetime.now(timezone.utc)

    print(f"Tweet {tweet.tweet_id} by {tweet.author_id or '(unknown)'}")
    print(f"  Created: {tweet.created_at_utc.isoformat()}")
    print(f"  Text: {tweet.text[:80]}")

    decision = evaluate_eligibility(tweet, now=now, policy=s.policy)
    if decision.accepted:
        print("  Eligible: yes")
    else:
        print(f"  Eligible: no ({decision.reason.value}: {decision.detail})")

    print(f"  Score: {score_tweet(tweet, s.weights)}")


def cmd_discriminator(name: str) -> None:
    print(get_ixn_discriminator(name).hex())


def cmd_encode_payload(score: int, method: Optional[str] = None) -> None:
    if method is None:
        method = load_settings().settle_method
    print(encode_payload(get_ixn_discriminator(method), score).hex())


def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(prog="tweetoracle")
    sub = parser.add_subparsers(dest="cmd", required=True)

    p_run = sub.add_parser("run", help="Decode params, validate and score the tweet, emit the settle instruction")
    p_run.add_argument("--params", type=str, help="Container params (default: $CONTAINER_PARAMS)")

    p_decode = sub.add_parser("decode-params", help="Decode and print container params")
    p_decode.add_argument("--params", type=str, help="Container params (default: $CONTAINER_PARAMS)")

    p_check = sub.add_parser("check-tweet", help="Fetch a tweet and print its eligibility and score")
    p_check.add_argument("tweet_id", type=int)

    p_disc = sub.add_parser("discriminator", help="Print the 8-byte Anchor discriminator for a method")
    p_disc.add_argument("name", type=str)

    p_payload = sub.add_parser("encode-payload", help="Print the 16-byte settle payload for a score")
    p_payload.add_argument("score", type=int)
    p_payload.add_argument("--method", type=str, help="Anchor method name (default: configured settle method)")

    args = parser.parse_args(argv)

    try:
        if args.cmd == "run":
            cmd_run(params=args.params)
            return
        if args.cmd == "decode-params":
            cmd_decode_params(params=args.params)
            return
        if args.cmd == "check-tweet":
            cmd_check_tweet(args.tweet_id)
            return
        if args.cmd == "discriminator":
            cmd_discriminator(args.name)
            return
        if args.cmd == "encode-payload":
            cmd_encode_payload(args.score, method=args.method)
            return
    except OracleError as e:
        _err(f"ERROR [{e.code}]: {e}")
        raise SystemExit(1)
    except ConfigError as e:
        _err(f"ERROR [CONFIG]: {e}")
        raise SystemExit(2)

    raise SystemExit("Unknown command")
