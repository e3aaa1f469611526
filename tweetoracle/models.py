from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

U64_MAX = 2**64 - 1


@dataclass(frozen=True)
class RequestParameters:
    program_id: str
    realm_address: str
    user_address: str
    user_record_address: str
    handle: str
    attestation_id: int


@dataclass(frozen=True)
class PublicMetrics:
    like_count: int
    reply_count: int
    retweet_count: int
    # quote_count is optional in the X API response
    quote_count: Optional[int] = None
    impression_count: Optional[int] = None


@dataclass(frozen=True)
class Tweet:
    tweet_id: str
    author_id: str
    created_at_utc: datetime
    text: str
    public_metrics: Optional[PublicMetrics]
    withheld: Optional[Dict[str, Any]] = None


class IneligibleReason(str, Enum):
    TOO_RECENT = "TOO_RECENT"
    MISSING_REQUIRED_TAG = "MISSING_REQUIRED_TAG"
    MISSING_REQUIRED_MENTION = "MISSING_REQUIRED_MENTION"
    WITHHELD = "WITHHELD"


@dataclass(frozen=True)
class EligibilityDecision:
    accepted: bool
    reason: Optional[IneligibleReason] = None
    detail: str = ""


@dataclass(frozen=True)
class AccountMeta:
    pubkey: str
    is_signer: bool
    is_writable: bool


@dataclass(frozen=True)
class Instruction:
    program_id: str
    accounts: List[AccountMeta]
    data: bytes


@dataclass(frozen=True)
class HostContext:
    """Accounts supplied by the function runner for this invocation."""

    signer: str
    function: str
    function_request_key: str
