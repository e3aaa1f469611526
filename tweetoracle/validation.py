from __future__ import annotations

import re

import base58

# Solana pubkey is Base58 encoded, 32-44 characters
# Base58 alphabet: 123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz
_SOLANA_PUBKEY_PATTERN = re.compile(r"^[1-9A-HJ-NP-Za-km-z]{32,44}$")

PUBKEY_LENGTH = 32

# Pubkey::default(), 32 zero bytes
DEFAULT_PUBKEY = "1" * 32


def is_valid_solana_pubkey(address: str) -> bool:
    """
    Validate Solana pubkey format.
    Checks the Base58 alphabet and that the decoded key is exactly 32 bytes.
    """
    if not address or not isinstance(address, str):
        return False
    address = address.strip()
    if not _SOLANA_PUBKEY_PATTERN.match(address):
        return False
    return len(base58.b58decode(address)) == PUBKEY_LENGTH


def pubkey_bytes(address: str) -> bytes:
    """Decode a pubkey to its 32 raw bytes. Raises ValueError if it is not one."""
    if not is_valid_solana_pubkey(address):
        raise ValueError(f"Invalid Solana pubkey: {address!r}")
    return base58.b58decode(address.strip())


def normalize_pubkey(address: str) -> str:
    return base58.b58encode(pubkey_bytes(address)).decode("ascii")
