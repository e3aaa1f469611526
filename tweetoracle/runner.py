from __future__ import annotations

import os
import sys
from typing import Optional, Sequence, TextIO

from tweetoracle.errors import ConfigError
from tweetoracle.models import HostContext, Instruction
from tweetoracle.settlement import serialize_instructions
from tweetoracle.validation import normalize_pubkey

# The runner reads the last line of stdout carrying this prefix
FN_OUT_PREFIX = "FN_OUT: "


def _require_pubkey(name: str) -> str:
    val = os.getenv(name, "").strip()
    if not val:
        raise ConfigError(f"Missing required env var: {name}")
    try:
        return normalize_pubkey(val)
    except ValueError as e:
        raise ConfigError(f"{name} is not a valid pubkey: {val}") from e


def load_host_context() -> HostContext:
    """Read the enclave signer and Switchboard accounts provided by the runner."""
    return HostContext(
        signer=_require_pubkey("TWEETORACLE_SIGNER"),
        function=_require_pubkey("TWEETORACLE_FUNCTION_KEY"),
        function_request_key=_require_pubkey("TWEETORACLE_FUNCTION_REQUEST_KEY"),
    )


def read_container_params(override: Optional[str] = None) -> bytes:
    if override is not None:
        return os.fsencode(override)
    val = os.getenv("CONTAINER_PARAMS")
    if val is None:
        raise ConfigError("Missing required env var: CONTAINER_PARAMS")
    # argv and environ hold undecodable bytes as surrogates; fsencode restores them
    return os.fsencode(val)


def emit(ixs: Sequence[Instruction], stream: Optional[TextIO] = None) -> str:
    """
    Hand the instructions to the runner for signing and submission.
    Must be the last thing written to stdout.
    """
    stream = stream if stream is not None else sys.stdout
    line = FN_OUT_PREFIX + serialize_instructions(ixs).hex()
    print(line, file=stream, flush=True)
    return line
