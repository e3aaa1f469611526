from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, Tuple

from tweetoracle.errors import MalformedInput, MissingField
from tweetoracle.models import U64_MAX, RequestParameters
from tweetoracle.validation import DEFAULT_PUBKEY, normalize_pubkey

ENTRY_SEPARATOR = ","
KEY_VALUE_SEPARATOR = "="

def _parse_tweet_id(value: str) -> int:
    value = value.strip()
    if not (value.isascii() and value.isdigit()):
        raise ValueError(f"not a decimal tweet id: {value!r}")
    tweet_id = int(value)
    if tweet_id > U64_MAX:
        raise ValueError(f"tweet id out of u64 range: {value}")
    return tweet_id

@dataclass(frozen=True)
class FieldSpec:
    key: str
    attr: str
    parse: Callable[[str], Any]
    default: Any

# Order matters: it is the order fields are checked for presence.
FIELDS: Tuple[FieldSpec, ...] = (
    FieldSpec("PID", "program_id", normalize_pubkey, DEFAULT_PUBKEY),
    FieldSpec("REALM_PDA", "realm_address", normalize_pubkey, DEFAULT_PUBKEY),
    FieldSpec("USER", "user_address", normalize_pubkey, DEFAULT_PUBKEY),
    FieldSpec("USER_ACCOUNT_PDA", "user_record_address", normalize_pubkey, DEFAULT_PUBKEY),
    FieldSpec("TWITTER_USERNAME", "handle", str, ""),
    FieldSpec("TWEET_ID", "attestation_id", _parse_tweet_id, 0),
)

_FIELDS_BY_KEY: Dict[str, FieldSpec] = {f.key: f for f in FIELDS}

def iter_entries(params: str):
    """
    Yield (key, value) pairs from a comma-separated KEY=VALUE string.
    Each entry is split on its first '=' only; entries without '=' are skipped.
    """
    for entry in params.split(ENTRY_SEPARATOR):
        key, sep, value = entry.partition(KEY_VALUE_SEPARATOR)
        if not sep:
            continue
        yield key, value

def decode_params(raw: bytes) -> RequestParameters:
    """
    Decode the untrusted container params blob.

    Unknown keys are ignored. A key seen more than once keeps its last value.
    Raises MalformedInput for non-UTF-8 input or an unparseable value, and
    MissingField for the first field (in FIELDS order) that is absent or default.
    """
    try:
        params = bytes(raw).decode("utf-8")
    except UnicodeDecodeError as e:
        raise MalformedInput(f"container params are not valid UTF-8: {e}") from e

    values: Dict[str, Any] = {}
    for key, value in iter_entries(params):
        field = _FIELDS_BY_KEY.get(key)
        if field is None:
            continue
        try:
            values[field.attr] = field.parse(value)
        except ValueError as e:
            raise MalformedInput(f"{key} has an invalid value: {e}") from e

    for field in FIELDS:
        if values.get(field.attr, field.default) == field.default:
            raise MissingField(field.key)

    return RequestParameters(**values)
